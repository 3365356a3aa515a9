"""Unit tests for the VAST document assembly mutators."""

import pytest
from structlog.testing import capture_logs

from vast_document import (
    VAST,
    Ad,
    CompanionAds,
    Creative,
    CreativeWrapper,
    DisplayManager,
    Extension,
    Impression,
    InLine,
    Linear,
    LinearWrapper,
    MediaFile,
    NonLinearAds,
    Tracking,
    VideoClick,
    VideoClicks,
    Viewable,
    Wrapper,
)
from vast_document.events import VastEvents
from vast_document.exceptions import VastStructureError
from vast_document.primitives import CDATAString


@pytest.fixture
def inline_vast() -> VAST:
    """InLine ad with two Linear creatives, a NonLinearAds and a CompanionAds creative."""
    media = MediaFile(uri="https://m/v.mp4", type="video/mp4", width=640, height=360)
    creatives = [
        Creative(content=Linear(media_files=[media])),
        Creative(content=Linear(media_files=[media], video_clicks=VideoClicks())),
        Creative(content=NonLinearAds()),
        Creative(content=CompanionAds()),
    ]
    return VAST(ads=[Ad(content=InLine(creatives=creatives), id="inline")])


@pytest.fixture
def wrapper_vast() -> VAST:
    """Wrapper ad with one Linear wrapper creative."""
    wrapper = Wrapper(
        vast_ad_tag_uri=CDATAString("https://next.example.com/vast"),
        creatives=[CreativeWrapper(content=LinearWrapper())],
    )
    return VAST(ads=[Ad(content=wrapper, id="wrapper")])


class TestEmptyDocument:
    """Mutators on a document without ads."""

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda v: v.set_display_manager(DisplayManager(name="dm")),
            lambda v: v.add_tracking(Tracking(event="start", uri="u")),
            lambda v: v.add_click_tracking(VideoClick(uri="u")),
            lambda v: v.add_impression(Impression(uri="u")),
            lambda v: v.add_viewable(Viewable(uri="u")),
            lambda v: v.clear_extensions(),
            lambda v: v.add_extensions(Extension(type="t")),
            lambda v: v.set_click_through(VideoClick(uri="u")),
        ],
    )
    def test_mutators_require_an_ad(self, mutate):
        """Every ad-level mutator raises when there are no ads."""
        with pytest.raises(VastStructureError) as exc_info:
            mutate(VAST())
        assert exc_info.value.message == "empty ads"

    def test_add_error_without_ads(self):
        """Document errors can be added to an empty document."""
        vast = VAST()
        vast.add_error(CDATAString("https://e/1"), CDATAString("https://e/2"))
        assert [e.cdata for e in vast.errors] == ["https://e/1", "https://e/2"]

    def test_ad_without_content(self):
        """Mutators leave an Ad without content unchanged."""
        vast = VAST(ads=[Ad()])
        vast.add_impression(Impression(uri="u"))
        vast.add_tracking(Tracking(event="start", uri="u"))
        assert vast.ads[0].content is None


class TestDisplayManager:
    """Test set_display_manager."""

    def test_inline(self, inline_vast):
        """InLine ads get the ad system and the advertiser."""
        inline_vast.set_display_manager(DisplayManager(name="dm", title="Brand", version="2.1"))

        inline = inline_vast.ads[0].inline
        assert (inline.ad_system.name, inline.ad_system.version) == ("dm", "2.1")
        assert inline.advertiser == "Brand"

    def test_wrapper(self, wrapper_vast):
        """Wrapper ads only get the ad system."""
        wrapper_vast.set_display_manager(DisplayManager(name="dm", title="Brand", version="2.1"))
        assert wrapper_vast.ads[0].wrapper.ad_system.name == "dm"


class TestTracking:
    """Test add_tracking and add_click_tracking."""

    def test_add_tracking_inline(self, inline_vast):
        """Linear and NonLinearAds creatives get the trackers; companions do not."""
        inline_vast.add_tracking(
            Tracking(event="start", uri="https://t/start"),
            Tracking(event="complete", uri="https://t/complete"),
        )

        creatives = inline_vast.ads[0].inline.creatives
        for creative in creatives[:2]:
            assert [t.event for t in creative.linear.tracking_events] == ["start", "complete"]
        assert [t.event for t in creatives[2].non_linear_ads.tracking_events] == [
            "start",
            "complete",
        ]

    def test_add_tracking_copies_entries(self, inline_vast):
        """Each creative receives its own copy of the tracker."""
        inline_vast.add_tracking(Tracking(event="start", uri="https://t/start"))

        first, second = (c.linear for c in inline_vast.ads[0].inline.creatives[:2])
        assert first.tracking_events[0] == second.tracking_events[0]
        assert first.tracking_events[0] is not second.tracking_events[0]

    def test_add_tracking_wrapper(self, wrapper_vast):
        """Wrapper Linear creatives get the trackers too."""
        wrapper_vast.add_tracking(Tracking(event="start", uri="https://t/start"))

        linear = wrapper_vast.ads[0].wrapper.creatives[0].linear
        assert linear.tracking_events[0].uri == "https://t/start"

    def test_add_click_tracking_inline(self, inline_vast):
        """Linear creatives get click trackers, creating VideoClicks when missing."""
        inline_vast.add_click_tracking(VideoClick(uri="https://t/click"))

        creatives = inline_vast.ads[0].inline.creatives
        for creative in creatives[:2]:
            assert [c.uri for c in creative.linear.video_clicks.click_trackings] == [
                "https://t/click"
            ]

    def test_add_click_tracking_appends(self, inline_vast):
        """Existing click trackers are kept."""
        inline_vast.add_click_tracking(VideoClick(uri="https://t/1"))
        inline_vast.add_click_tracking(VideoClick(uri="https://t/2"))

        clicks = inline_vast.ads[0].inline.creatives[0].linear.video_clicks.click_trackings
        assert [c.uri for c in clicks] == ["https://t/1", "https://t/2"]

    def test_add_click_tracking_wrapper_noop(self, wrapper_vast):
        """Wrapper ads are left unchanged."""
        wrapper_vast.add_click_tracking(VideoClick(uri="https://t/click"))
        assert wrapper_vast.ads[0].wrapper.creatives[0].linear.video_clicks is None

    def test_set_click_through(self, inline_vast):
        """The click-through list is replaced by the single entry."""
        inline = inline_vast.ads[0].inline
        inline.creatives[1].linear.video_clicks.click_throughs = [VideoClick(uri="https://old")]

        inline_vast.set_click_through(VideoClick(uri="https://new"))

        for creative in inline.creatives[:2]:
            assert [c.uri for c in creative.linear.video_clicks.click_throughs] == ["https://new"]

    def test_set_click_through_wrapper_noop(self, wrapper_vast):
        """Wrapper ads are left unchanged."""
        wrapper_vast.set_click_through(VideoClick(uri="https://new"))
        assert wrapper_vast.ads[0].wrapper.creatives[0].linear.video_clicks is None


class TestImpressionsAndExtensions:
    """Test impression, viewable and extension mutators."""

    @pytest.mark.parametrize("fixture_name", ["inline_vast", "wrapper_vast"])
    def test_add_impression_and_viewable(self, request, fixture_name):
        """Both ad variants accept impressions and viewables."""
        vast = request.getfixturevalue(fixture_name)
        vast.add_impression(Impression(uri="https://i/1"), Impression(uri="https://i/2"))
        vast.add_viewable(Viewable(uri="https://v/1"))

        content = vast.ads[0].content
        assert [i.uri for i in content.impressions] == ["https://i/1", "https://i/2"]
        assert [v.uri for v in content.viewable_impressions] == ["https://v/1"]

    def test_add_extensions_skips_untyped(self, inline_vast):
        """Extensions without a type are skipped."""
        inline_vast.add_extensions(
            Extension(type="tracker", payload=[Tracking(event="start", uri="https://t")]),
            Extension(name="no-type", payload=b"<X/>"),
            Extension(type="data", payload=b"<X/>"),
        )

        assert [e.type for e in inline_vast.ads[0].inline.extensions] == ["tracker", "data"]

    def test_add_extensions_skips_empty_payload(self, inline_vast):
        """Extensions with neither custom tracking nor data are skipped."""
        with capture_logs() as logs:
            inline_vast.add_extensions(
                Extension(type="empty"),
                Extension(type="no-tracking", payload=[]),
                Extension(type="data", payload=b"<X/>"),
            )

        assert [e.type for e in inline_vast.ads[0].inline.extensions] == ["data"]
        skipped = [log["type"] for log in logs if log["event"] == VastEvents.EXTENSION_SKIPPED]
        assert skipped == ["empty", "no-tracking"]

    def test_clear_extensions(self, wrapper_vast):
        """clear_extensions empties the first ad's extensions."""
        wrapper_vast.add_extensions(Extension(type="data", payload=b"<X/>"))
        wrapper_vast.clear_extensions()
        assert wrapper_vast.ads[0].wrapper.extensions == []

    def test_assembled_document_serializes(self, inline_vast):
        """A document assembled through mutators serializes and parses back."""
        inline_vast.set_display_manager(DisplayManager(name="dm", title="Brand", version="1"))
        inline_vast.add_impression(Impression(uri="https://i/1"))
        inline_vast.add_tracking(Tracking(event="start", uri="https://t/start"))
        inline_vast.add_click_tracking(VideoClick(uri="https://t/click"))
        inline_vast.add_extensions(Extension(type="data", payload=b"<Slot>1</Slot>"))

        assert VAST.from_xml(inline_vast.to_xml()) == inline_vast
