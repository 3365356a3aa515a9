"""Creative variants: linear, companion and non-linear, plus their wrapper flavors."""

from dataclasses import dataclass, field

from lxml import etree

from .elements import (
    AdParameters,
    Icons,
    MediaFile,
    Resource,
    Tracking,
    VideoClick,
    VideoClicks,
    decode_trackings,
    encode_trackings,
    keep_with_uri,
)
from .exceptions import VastStructureError, VastValidationError
from .helpers import secure_url
from .primitives import CDATAString, Duration, Offset
from .xml_utils import (
    bool_attr,
    child,
    children,
    int_attr,
    set_attr,
    sub_cdata,
    sub_text,
    text_of,
)


def _optional(elem: etree._Element, tag: str, decoder):
    found = child(elem, tag)
    return decoder(found) if found is not None else None


def _append(parent: etree._Element, value) -> None:
    if value is not None:
        parent.append(value.to_element())


def _secure_all(entries: list, secure: bool) -> None:
    for entry in entries:
        entry.uri = secure_url(entry.uri, secure)


@dataclass
class Linear:
    """A linear (video) creative played in place of the content."""

    duration: Duration = field(default_factory=Duration)
    media_files: list[MediaFile] = field(default_factory=list)
    tracking_events: list[Tracking] = field(default_factory=list)
    video_clicks: VideoClicks | None = None
    skip_offset: Offset | None = None
    ad_parameters: AdParameters | None = None
    icons: Icons | None = None

    @classmethod
    def from_element(cls, elem: etree._Element) -> "Linear":
        skip = elem.get("skipoffset")
        return cls(
            duration=Duration(text_of(child(elem, "Duration"))),
            media_files=[
                MediaFile.from_element(m)
                for group in children(elem, "MediaFiles")
                for m in children(group, "MediaFile")
            ],
            tracking_events=decode_trackings(elem),
            video_clicks=_optional(elem, "VideoClicks", VideoClicks.from_element),
            skip_offset=Offset(skip) if skip is not None else None,
            ad_parameters=_optional(elem, "AdParameters", AdParameters.from_element),
            icons=_optional(elem, "Icons", Icons.from_element),
        )

    def to_element(self) -> etree._Element:
        elem = etree.Element("Linear")
        if self.skip_offset:
            set_attr(elem, "skipoffset", self.skip_offset.value)
        sub_text(elem, "Duration", self.duration.value)
        _append(elem, self.ad_parameters)
        _append(elem, self.icons)
        encode_trackings(elem, self.tracking_events)
        if self.video_clicks is not None and not self.video_clicks.is_empty():
            elem.append(self.video_clicks.to_element())
        if self.media_files:
            group = etree.SubElement(elem, "MediaFiles")
            for media in self.media_files:
                group.append(media.to_element())
        return elem

    def validate(self) -> None:
        if not self.media_files:
            raise VastStructureError("empty media")
        for i, media in enumerate(self.media_files):
            try:
                media.validate()
            except VastValidationError as e:
                raise e.wrap("media", i) from e

        self.tracking_events = keep_with_uri(self.tracking_events)
        for i, tracking in enumerate(self.tracking_events):
            try:
                tracking.validate()
            except VastValidationError as e:
                raise e.wrap("track", i) from e

        if self.video_clicks is not None:
            self.video_clicks.validate()

    def set_secure(self, secure: bool) -> None:
        _secure_all(self.tracking_events, secure)
        if self.video_clicks is not None:
            _secure_all(self.video_clicks.click_trackings, secure)
            _secure_all(self.video_clicks.click_throughs, secure)
        _secure_all(self.media_files, secure)


@dataclass
class LinearWrapper:
    """Linear trackers a wrapper adds on top of the wrapped ad."""

    tracking_events: list[Tracking] = field(default_factory=list)
    video_clicks: VideoClicks | None = None
    icons: Icons | None = None

    @classmethod
    def from_element(cls, elem: etree._Element) -> "LinearWrapper":
        return cls(
            tracking_events=decode_trackings(elem),
            video_clicks=_optional(elem, "VideoClicks", VideoClicks.from_element),
            icons=_optional(elem, "Icons", Icons.from_element),
        )

    def to_element(self) -> etree._Element:
        elem = etree.Element("Linear")
        _append(elem, self.icons)
        encode_trackings(elem, self.tracking_events)
        if self.video_clicks is not None and not self.video_clicks.is_empty():
            elem.append(self.video_clicks.to_element())
        return elem


@dataclass
class Companion:
    """A companion banner displayed alongside the video."""

    width: int = 0
    height: int = 0
    id: str = ""
    asset_width: int = 0
    asset_height: int = 0
    expanded_width: int = 0
    expanded_height: int = 0
    api_framework: str = ""
    ad_slot_id: str = ""
    click_through: CDATAString = field(default_factory=CDATAString)
    click_trackings: list[CDATAString] = field(default_factory=list)
    alt_text: str = ""
    tracking_events: list[Tracking] = field(default_factory=list)
    ad_parameters: AdParameters | None = None
    resource: Resource = field(default_factory=Resource)

    @classmethod
    def from_element(cls, elem: etree._Element) -> "Companion":
        return cls(
            width=int_attr(elem, "width"),
            height=int_attr(elem, "height"),
            id=elem.get("id", ""),
            asset_width=int_attr(elem, "assetWidth"),
            asset_height=int_attr(elem, "assetHeight"),
            expanded_width=int_attr(elem, "expandedWidth"),
            expanded_height=int_attr(elem, "expandedHeight"),
            api_framework=elem.get("apiFramework", ""),
            ad_slot_id=elem.get("adSlotId", ""),
            click_through=CDATAString.from_element(child(elem, "CompanionClickThrough")),
            click_trackings=[
                CDATAString.from_element(e) for e in children(elem, "CompanionClickTracking")
            ],
            alt_text=text_of(child(elem, "AltText")),
            tracking_events=decode_trackings(elem),
            ad_parameters=_optional(elem, "AdParameters", AdParameters.from_element),
            resource=Resource.from_element(elem),
        )

    def to_element(self) -> etree._Element:
        elem = etree.Element("Companion")
        set_attr(elem, "id", self.id)
        set_attr(elem, "width", self.width, omitempty=False)
        set_attr(elem, "height", self.height, omitempty=False)
        set_attr(elem, "assetWidth", self.asset_width, omitempty=False)
        set_attr(elem, "assetHeight", self.asset_height, omitempty=False)
        set_attr(elem, "expandedWidth", self.expanded_width, omitempty=False)
        set_attr(elem, "expandedHeight", self.expanded_height, omitempty=False)
        set_attr(elem, "apiFramework", self.api_framework)
        set_attr(elem, "adSlotId", self.ad_slot_id)
        if self.click_through:
            sub_cdata(elem, "CompanionClickThrough", self.click_through.cdata)
        for tracking in self.click_trackings:
            sub_cdata(elem, "CompanionClickTracking", tracking.cdata)
        if self.alt_text:
            sub_text(elem, "AltText", self.alt_text)
        encode_trackings(elem, self.tracking_events)
        _append(elem, self.ad_parameters)
        self.resource.encode_into(elem)
        return elem


@dataclass
class CompanionWrapper(Companion):
    """A companion ad inside a wrapper; same shape as ``Companion``."""


@dataclass
class CompanionAds:
    """Companion creatives; ``required`` is ``all``, ``any`` or ``none``."""

    companions: list[Companion] = field(default_factory=list)
    required: str = ""

    COMPANION = Companion

    @classmethod
    def from_element(cls, elem: etree._Element):
        return cls(
            companions=[cls.COMPANION.from_element(c) for c in children(elem, "Companion")],
            required=elem.get("required", ""),
        )

    def to_element(self) -> etree._Element:
        elem = etree.Element("CompanionAds")
        set_attr(elem, "required", self.required)
        for companion in self.companions:
            elem.append(companion.to_element())
        return elem


@dataclass
class CompanionAdsWrapper(CompanionAds):
    COMPANION = CompanionWrapper


def _decode_non_linear(elem: etree._Element) -> dict:
    """Attributes and click trackers shared by NonLinear and NonLinearWrapper."""
    duration = elem.get("minSuggestedDuration")
    return dict(
        width=int_attr(elem, "width"),
        height=int_attr(elem, "height"),
        id=elem.get("id", ""),
        expanded_width=int_attr(elem, "expandedWidth"),
        expanded_height=int_attr(elem, "expandedHeight"),
        scalable=bool_attr(elem, "scalable"),
        maintain_aspect_ratio=bool_attr(elem, "maintainAspectRatio"),
        min_suggested_duration=Duration(duration) if duration is not None else None,
        api_framework=elem.get("apiFramework", ""),
        click_trackings=[
            CDATAString.from_element(e) for e in children(elem, "NonLinearClickTracking")
        ],
    )


def _encode_non_linear(non_linear, elem: etree._Element) -> None:
    set_attr(elem, "id", non_linear.id)
    set_attr(elem, "width", non_linear.width, omitempty=False)
    set_attr(elem, "height", non_linear.height, omitempty=False)
    set_attr(elem, "expandedWidth", non_linear.expanded_width, omitempty=False)
    set_attr(elem, "expandedHeight", non_linear.expanded_height, omitempty=False)
    set_attr(elem, "scalable", non_linear.scalable)
    set_attr(elem, "maintainAspectRatio", non_linear.maintain_aspect_ratio)
    if non_linear.min_suggested_duration:
        set_attr(elem, "minSuggestedDuration", non_linear.min_suggested_duration.value)
    set_attr(elem, "apiFramework", non_linear.api_framework)


@dataclass
class NonLinear:
    """An overlay creative displayed over the content."""

    width: int = 0
    height: int = 0
    id: str = ""
    expanded_width: int = 0
    expanded_height: int = 0
    scalable: bool = False
    maintain_aspect_ratio: bool = False
    min_suggested_duration: Duration | None = None
    api_framework: str = ""
    click_trackings: list[CDATAString] = field(default_factory=list)
    click_through: CDATAString = field(default_factory=CDATAString)
    ad_parameters: AdParameters | None = None
    resource: Resource = field(default_factory=Resource)

    @classmethod
    def from_element(cls, elem: etree._Element) -> "NonLinear":
        return cls(
            **_decode_non_linear(elem),
            click_through=CDATAString.from_element(child(elem, "NonLinearClickThrough")),
            ad_parameters=_optional(elem, "AdParameters", AdParameters.from_element),
            resource=Resource.from_element(elem),
        )

    def to_element(self) -> etree._Element:
        elem = etree.Element("NonLinear")
        _encode_non_linear(self, elem)
        for tracking in self.click_trackings:
            sub_cdata(elem, "NonLinearClickTracking", tracking.cdata)
        if self.click_through:
            sub_cdata(elem, "NonLinearClickThrough", self.click_through.cdata)
        _append(elem, self.ad_parameters)
        self.resource.encode_into(elem)
        return elem


@dataclass
class NonLinearWrapper:
    """A non-linear ad inside a wrapper: geometry, trackers and click trackers only."""

    width: int = 0
    height: int = 0
    id: str = ""
    expanded_width: int = 0
    expanded_height: int = 0
    scalable: bool = False
    maintain_aspect_ratio: bool = False
    min_suggested_duration: Duration | None = None
    api_framework: str = ""
    click_trackings: list[CDATAString] = field(default_factory=list)
    tracking_events: list[Tracking] = field(default_factory=list)

    @classmethod
    def from_element(cls, elem: etree._Element) -> "NonLinearWrapper":
        return cls(**_decode_non_linear(elem), tracking_events=decode_trackings(elem))

    def to_element(self) -> etree._Element:
        elem = etree.Element("NonLinear")
        _encode_non_linear(self, elem)
        encode_trackings(elem, self.tracking_events)
        for tracking in self.click_trackings:
            sub_cdata(elem, "NonLinearClickTracking", tracking.cdata)
        return elem


@dataclass
class NonLinearAds:
    tracking_events: list[Tracking] = field(default_factory=list)
    non_linears: list[NonLinear] = field(default_factory=list)

    NON_LINEAR = NonLinear

    @classmethod
    def from_element(cls, elem: etree._Element):
        return cls(
            tracking_events=decode_trackings(elem),
            non_linears=[cls.NON_LINEAR.from_element(n) for n in children(elem, "NonLinear")],
        )

    def to_element(self) -> etree._Element:
        elem = etree.Element("NonLinearAds")
        encode_trackings(elem, self.tracking_events)
        for non_linear in self.non_linears:
            elem.append(non_linear.to_element())
        return elem

    def validate(self) -> None:
        """NonLinearAds are accepted as they are; geometry and resources are not checked."""
        return None

    def set_secure(self, secure: bool) -> None:
        _secure_all(self.tracking_events, secure)


@dataclass
class NonLinearAdsWrapper(NonLinearAds):
    non_linears: list[NonLinearWrapper] = field(default_factory=list)

    NON_LINEAR = NonLinearWrapper


def _decode_content(elem: etree._Element, variants: tuple):
    """Decode the first populated creative variant, in priority order."""
    for tag, decoder in variants:
        found = child(elem, tag)
        if found is not None:
            return decoder(found)
    return None


@dataclass
class Creative:
    """A playable unit of an InLine ad.

    ``content`` holds exactly one of ``Linear``, ``CompanionAds`` or
    ``NonLinearAds``; None is representable so that a malformed document
    can be parsed and then rejected by ``validate``.
    """

    content: Linear | CompanionAds | NonLinearAds | None = None
    id: str = ""
    sequence: int = 0
    ad_id: str = ""
    api_framework: str = ""

    VARIANTS = (
        ("Linear", Linear.from_element),
        ("NonLinearAds", NonLinearAds.from_element),
        ("CompanionAds", CompanionAds.from_element),
    )

    @property
    def linear(self) -> Linear | None:
        return self.content if isinstance(self.content, Linear) else None

    @property
    def companion_ads(self) -> CompanionAds | None:
        return self.content if isinstance(self.content, CompanionAds) else None

    @property
    def non_linear_ads(self) -> NonLinearAds | None:
        return self.content if isinstance(self.content, NonLinearAds) else None

    @classmethod
    def from_element(cls, elem: etree._Element) -> "Creative":
        return cls(
            content=_decode_content(elem, cls.VARIANTS),
            id=elem.get("id", ""),
            sequence=int_attr(elem, "sequence"),
            ad_id=elem.get("AdID", ""),
            api_framework=elem.get("apiFramework", ""),
        )

    def to_element(self) -> etree._Element:
        elem = etree.Element("Creative")
        set_attr(elem, "id", self.id)
        set_attr(elem, "sequence", self.sequence)
        set_attr(elem, "AdID", self.ad_id)
        set_attr(elem, "apiFramework", self.api_framework)
        _append(elem, self.content)
        return elem

    def validate(self) -> None:
        """Validate the Linear, else the NonLinearAds payload.

        Companion-only creatives are rejected like empty ones.
        """
        if self.linear is not None:
            self.linear.validate()
        elif self.non_linear_ads is not None:
            self.non_linear_ads.validate()
        else:
            raise VastStructureError("empty linear/nonlinear")

    def set_secure(self, secure: bool) -> None:
        if self.linear is not None:
            self.linear.set_secure(secure)
        elif self.non_linear_ads is not None:
            self.non_linear_ads.set_secure(secure)


@dataclass
class CreativeWrapper:
    """Creative trackers carried by a Wrapper ad."""

    content: LinearWrapper | CompanionAdsWrapper | NonLinearAdsWrapper | None = None
    id: str = ""
    sequence: int = 0
    ad_id: str = ""

    VARIANTS = (
        ("Linear", LinearWrapper.from_element),
        ("NonLinearAds", NonLinearAdsWrapper.from_element),
        ("CompanionAds", CompanionAdsWrapper.from_element),
    )

    @property
    def linear(self) -> LinearWrapper | None:
        return self.content if isinstance(self.content, LinearWrapper) else None

    @property
    def companion_ads(self) -> CompanionAdsWrapper | None:
        return self.content if isinstance(self.content, CompanionAdsWrapper) else None

    @property
    def non_linear_ads(self) -> NonLinearAdsWrapper | None:
        return self.content if isinstance(self.content, NonLinearAdsWrapper) else None

    @classmethod
    def from_element(cls, elem: etree._Element) -> "CreativeWrapper":
        return cls(
            content=_decode_content(elem, cls.VARIANTS),
            id=elem.get("id", ""),
            sequence=int_attr(elem, "sequence"),
            ad_id=elem.get("AdID", ""),
        )

    def to_element(self) -> etree._Element:
        elem = etree.Element("Creative")
        set_attr(elem, "id", self.id)
        set_attr(elem, "sequence", self.sequence)
        set_attr(elem, "AdID", self.ad_id)
        _append(elem, self.content)
        return elem


def add_click_trackings(linear: Linear, clicks: list[VideoClick]) -> None:
    """Append click trackers, creating the VideoClicks group when missing."""
    if linear.video_clicks is None:
        linear.video_clicks = VideoClicks()
    linear.video_clicks.click_trackings = [*linear.video_clicks.click_trackings, *clicks]


__all__ = [
    "Linear",
    "LinearWrapper",
    "Companion",
    "CompanionWrapper",
    "CompanionAds",
    "CompanionAdsWrapper",
    "NonLinear",
    "NonLinearWrapper",
    "NonLinearAds",
    "NonLinearAdsWrapper",
    "Creative",
    "CreativeWrapper",
    "add_click_trackings",
]
