"""Unit tests for format and size based media selection."""

import pytest

from vast_document import VAST, Ad, CompanionAds, Creative, InLine, Linear, MediaFile, Wrapper
from vast_document.exceptions import (
    EmptyMediaError,
    NotInlineError,
    NotLinearError,
    VastFilterError,
)
from vast_document.normalizer import area_deviation, select_by_format, select_by_size


def _media(uri: str, width: int, height: int, mime_type: str = "video/mp4") -> MediaFile:
    return MediaFile(uri=uri, type=mime_type, width=width, height=height, delivery="progressive")


@pytest.fixture
def renditions() -> list[MediaFile]:
    """1080p MP4, 720p WebM, portrait MP4, 1440p MPEG and a square MP4."""
    return [
        _media("1080p", 1920, 1080),
        _media("720p", 1280, 720, "video/webm"),
        _media("portrait", 720, 1280),
        _media("1440p", 2560, 1440, "video/mpeg"),
        _media("square", 720, 720),
    ]


def _vast_with(media_files: list[MediaFile]) -> VAST:
    linear = Linear(media_files=media_files)
    return VAST(ads=[Ad(content=InLine(creatives=[Creative(content=linear)]))])


class TestSelectByFormat:
    """Test select_by_format function."""

    def test_mime_type(self, renditions):
        """Only media of the requested MIME type are kept, in document order."""
        selected = select_by_format(renditions, ["video/mp4"])
        assert [m.uri for m in selected] == ["1080p", "portrait", "square"]

    @pytest.mark.parametrize(
        "alias,uris",
        [("mp4", ["1080p", "portrait", "square"]), ("webm", ["720p"]), ("mpg", ["1440p"])],
    )
    def test_alias(self, renditions, alias, uris):
        """Short aliases resolve to their MIME type."""
        assert [m.uri for m in select_by_format(renditions, [alias])] == uris

    def test_several_formats_keep_document_order(self, renditions):
        """Format list order does not reorder the media."""
        selected = select_by_format(renditions, ["video/mpeg", "webm"])
        assert [m.uri for m in selected] == ["720p", "1440p"]

    def test_new_list(self, renditions):
        """The source list is left untouched."""
        select_by_format(renditions, ["video/webm"])
        assert len(renditions) == 5

    def test_no_match(self, renditions):
        """Nothing matching raises EmptyMediaError."""
        with pytest.raises(EmptyMediaError) as exc_info:
            select_by_format(renditions, ["video/ogg"])
        assert exc_info.value.message == "empty media by format"
        assert exc_info.value.criterion == "format"


class TestSelectBySize:
    """Test select_by_size function."""

    def test_exact_area(self, renditions):
        """The rendition with the target area wins."""
        assert select_by_size(renditions, 1280, 720).uri == "720p"
        assert select_by_size(renditions, 1920, 1080).uri == "1080p"
        assert select_by_size(renditions, 2560, 1440).uri == "1440p"

    def test_closest_area(self, renditions):
        """Without an exact match the smallest deviation wins."""
        assert select_by_size(renditions, 1800, 1000).uri == "1080p"
        assert select_by_size(renditions, 1600, 900).uri == "720p"
        assert select_by_size(renditions, 3840, 2160).uri == "1440p"

    def test_orientation_filter(self, renditions):
        """Portrait targets only consider portrait media."""
        assert select_by_size(renditions, 1080, 1920).uri == "portrait"

    def test_square_target(self, renditions):
        """Square targets never match, not even square media."""
        with pytest.raises(EmptyMediaError) as exc_info:
            select_by_size(renditions, 720, 720)
        assert exc_info.value.message == "empty media by size"

    def test_no_candidate_orientation(self):
        """Landscape targets with only portrait media raise EmptyMediaError."""
        with pytest.raises(EmptyMediaError):
            select_by_size([_media("p", 360, 640)], 640, 360)

    def test_tie_first_wins(self):
        """Equal deviations keep the earlier candidate."""
        smaller = _media("smaller", 800, 500)
        larger = _media("larger", 1000, 600)

        assert select_by_size([smaller, larger], 1000, 500).uri == "smaller"
        assert select_by_size([larger, smaller], 1000, 500).uri == "larger"

    def test_target_dimensions(self, renditions):
        """The winner is a copy declaring the target dimensions."""
        best = select_by_size(renditions, 1280, 700)

        assert best.uri == "720p"
        assert (best.width, best.height) == (1280, 700)
        assert (renditions[1].width, renditions[1].height) == (1280, 720)

    @pytest.mark.parametrize("width,height", [(0, 720), (1280, 0), (-1, 720)])
    def test_invalid_target(self, renditions, width, height):
        """Non-positive target dimensions are rejected."""
        with pytest.raises(VastFilterError) as exc_info:
            select_by_size(renditions, width, height)
        assert exc_info.value.message == "invalid target size"

    def test_area_deviation(self):
        """Deviation is the absolute percentage difference in area."""
        assert area_deviation(_media("a", 1280, 720), 921600) == 0.0
        assert area_deviation(_media("a", 1920, 1080), 921600) == 125.0
        assert area_deviation(_media("a", 640, 360), 921600) == 75.0


class TestDocumentFilters:
    """Test VAST.filter_format and VAST.filter_size."""

    def test_filter_format(self, renditions):
        """filter_format replaces the first Linear's media files."""
        vast = _vast_with(renditions)
        vast.filter_format(["mp4"])

        assert [m.uri for m in vast.first_linear().media_files] == ["1080p", "portrait", "square"]

    def test_filter_size(self, renditions):
        """filter_size leaves exactly one media file with the target dimensions."""
        vast = _vast_with(renditions)
        vast.filter_size(1280, 720)

        media_files = vast.first_linear().media_files
        assert len(media_files) == 1
        assert media_files[0].uri == "720p"
        assert (media_files[0].width, media_files[0].height) == (1280, 720)

    def test_filter_format_then_size(self, renditions):
        """Filters compose: format first, then size among the survivors."""
        vast = _vast_with(renditions)
        vast.filter_format(["video/mp4"])
        vast.filter_size(1280, 720)

        media = vast.first_linear().media_files[0]
        assert media.uri == "1080p"
        assert (media.width, media.height) == (1280, 720)

    def test_failed_filter_leaves_media(self, renditions):
        """A filter that finds nothing does not change the media list."""
        vast = _vast_with(renditions)
        with pytest.raises(EmptyMediaError):
            vast.filter_format(["video/ogg"])
        assert len(vast.first_linear().media_files) == 5

    def test_wrapper_not_inline(self):
        """Filters on a Wrapper ad raise NotInlineError."""
        vast = VAST(ads=[Ad(content=Wrapper())])
        with pytest.raises(NotInlineError) as exc_info:
            vast.filter_size(1280, 720)
        assert exc_info.value.message == "not inline"

    def test_no_ads_not_inline(self):
        """Filters on an empty document raise NotInlineError."""
        with pytest.raises(NotInlineError):
            VAST().filter_format(["mp4"])

    def test_first_creative_not_linear(self):
        """A first creative without a Linear raises NotLinearError."""
        inline = InLine(creatives=[Creative(content=CompanionAds())])
        vast = VAST(ads=[Ad(content=inline)])
        with pytest.raises(NotLinearError) as exc_info:
            vast.filter_format(["mp4"])
        assert exc_info.value.message == "not linear"


class TestEndToEnd:
    """Parse, validate, secure and select in sequence."""

    def test_validate_secure_filter_size(self, vast_parser, multi_media_vast_xml):
        """A three-rendition 3.0 document ends with one secure 1280x720 media file."""
        vast = vast_parser.parse(multi_media_vast_xml)
        inline = vast.ads[0].inline
        assert len(inline.impressions) == 2

        vast.validate()
        assert len(inline.impressions) == 1

        vast.set_secure(True)
        assert inline.impressions[0].uri.startswith("https://")

        vast.filter_size(1280, 720)
        media_files = inline.creatives[0].linear.media_files
        assert len(media_files) == 1
        assert media_files[0].width == 1280
        assert media_files[0].height == 720
        assert media_files[0].uri == "https://media.example.com/720p.webm"

        output = vast_parser.parse(vast_parser.serialize(vast))
        assert output == vast
