"""Leaf elements of a VAST document.

Each element knows how to decode itself from an lxml element
(``from_element``) and encode itself back (``to_element``). Wire names
follow the VAST 3.0 schema; Python attributes are snake_case.
"""

from dataclasses import dataclass, field

from lxml import etree

from .exceptions import VastFieldError
from .primitives import CDATAString, Duration, Offset
from .xml_utils import (
    bool_attr,
    child,
    children,
    int_attr,
    set_attr,
    set_cdata,
    sub_cdata,
    text_of,
)


@dataclass
class AdSystem:
    """The ad server that returned the ad."""

    name: str = ""
    version: str = ""

    @classmethod
    def from_element(cls, elem: etree._Element) -> "AdSystem":
        return cls(name=text_of(elem), version=elem.get("version", ""))

    def to_element(self) -> etree._Element:
        elem = etree.Element("AdSystem")
        set_attr(elem, "version", self.version)
        return set_cdata(elem, self.name)


@dataclass
class Pricing:
    """Price hint for real-time bidding systems (model is cpm, cpc, cpe or cpv)."""

    model: str = ""
    currency: str = ""
    value: str = ""

    @classmethod
    def from_element(cls, elem: etree._Element) -> "Pricing":
        return cls(
            model=elem.get("model", ""),
            currency=elem.get("currency", ""),
            value=text_of(elem),
        )

    def to_element(self) -> etree._Element:
        elem = etree.Element("Pricing")
        set_attr(elem, "model", self.model, omitempty=False)
        set_attr(elem, "currency", self.currency, omitempty=False)
        return set_cdata(elem, self.value)


@dataclass
class Impression:
    """URI the player requests when the first frame of the ad is displayed."""

    uri: str = ""
    id: str = ""

    TAG = "Impression"

    @classmethod
    def from_element(cls, elem: etree._Element) -> "Impression":
        return cls(uri=text_of(elem), id=elem.get("id", ""))

    def to_element(self) -> etree._Element:
        elem = etree.Element(self.TAG)
        set_attr(elem, "id", self.id)
        return set_cdata(elem, self.uri)


@dataclass
class Viewable(Impression):
    """MRC viewable-impression URI, nested under ``ViewableImpression``."""

    TAG = "Viewable"


@dataclass
class VideoClick(Impression):
    """A click URI of a linear creative (click-through, tracking or custom)."""

    TAG = "VideoClick"

    def to_element(self, tag: str = "ClickThrough") -> etree._Element:
        elem = etree.Element(tag)
        set_attr(elem, "id", self.id)
        return set_cdata(elem, self.uri)


@dataclass
class Tracking:
    """An event tracking URI.

    ``event`` is one of creativeView, start, firstQuartile, midpoint,
    thirdQuartile, complete, mute, unmute, pause, rewind, resume, fullscreen,
    exitFullscreen, expand, collapse, acceptInvitation, close, skip, progress.
    ``offset`` is required for the progress event.
    """

    event: str = ""
    uri: str = ""
    offset: Offset | None = None

    @classmethod
    def from_element(cls, elem: etree._Element) -> "Tracking":
        offset = elem.get("offset")
        return cls(
            event=elem.get("event", ""),
            uri=text_of(elem),
            offset=Offset(offset) if offset is not None else None,
        )

    def to_element(self) -> etree._Element:
        elem = etree.Element("Tracking")
        set_attr(elem, "event", self.event, omitempty=False)
        if self.offset:
            set_attr(elem, "offset", self.offset.value)
        return set_cdata(elem, self.uri)

    def validate(self) -> None:
        if self.event == "":
            raise VastFieldError("empty event")


def decode_trackings(parent: etree._Element) -> list[Tracking]:
    """Decode ``TrackingEvents > Tracking`` children of ``parent``."""
    return [
        Tracking.from_element(elem)
        for group in children(parent, "TrackingEvents")
        for elem in children(group, "Tracking")
    ]


def encode_trackings(parent: etree._Element, trackings: list[Tracking]) -> None:
    """Append a ``TrackingEvents`` group to ``parent`` unless empty."""
    if not trackings:
        return
    group = etree.SubElement(parent, "TrackingEvents")
    for tracking in trackings:
        group.append(tracking.to_element())


def keep_with_uri(entries: list) -> list:
    """Return a new list without the entries whose URI is empty."""
    return [entry for entry in entries if entry.uri != ""]


@dataclass
class VideoClicks:
    """Click-through, click-tracking and custom-click URIs of a linear creative."""

    click_throughs: list[VideoClick] = field(default_factory=list)
    click_trackings: list[VideoClick] = field(default_factory=list)
    custom_clicks: list[VideoClick] = field(default_factory=list)

    _GROUPS = (
        ("click_throughs", "ClickThrough"),
        ("click_trackings", "ClickTracking"),
        ("custom_clicks", "CustomClick"),
    )

    @classmethod
    def from_element(cls, elem: etree._Element) -> "VideoClicks":
        clicks = cls()
        for attr, tag in cls._GROUPS:
            setattr(clicks, attr, [VideoClick.from_element(e) for e in children(elem, tag)])
        return clicks

    def to_element(self) -> etree._Element:
        elem = etree.Element("VideoClicks")
        for attr, tag in self._GROUPS:
            for click in getattr(self, attr):
                elem.append(click.to_element(tag))
        return elem

    def validate(self) -> None:
        """Drop click entries with an empty URI; each group is filtered independently."""
        for attr, _tag in self._GROUPS:
            setattr(self, attr, keep_with_uri(getattr(self, attr)))

    def is_empty(self) -> bool:
        return not (self.click_throughs or self.click_trackings or self.custom_clicks)


@dataclass
class MediaFile:
    """A reference to a linear creative asset.

    Either ``bitrate`` or the ``min_bitrate``/``max_bitrate`` pair is expected,
    not both; this is not enforced.
    """

    uri: str = ""
    delivery: str = ""
    type: str = ""
    width: int = 0
    height: int = 0
    id: str = ""
    codec: str = ""
    bitrate: int = 0
    min_bitrate: int = 0
    max_bitrate: int = 0
    scalable: bool = False
    maintain_aspect_ratio: bool = False
    api_framework: str = ""

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def orientation(self) -> int:
        """1 for landscape, -1 for portrait, 0 for square."""
        diff = self.width - self.height
        return (diff > 0) - (diff < 0)

    @classmethod
    def from_element(cls, elem: etree._Element) -> "MediaFile":
        return cls(
            uri=text_of(elem),
            delivery=elem.get("delivery", ""),
            type=elem.get("type", ""),
            width=int_attr(elem, "width"),
            height=int_attr(elem, "height"),
            id=elem.get("id", ""),
            codec=elem.get("codec", ""),
            bitrate=int_attr(elem, "bitrate"),
            min_bitrate=int_attr(elem, "minBitrate"),
            max_bitrate=int_attr(elem, "maxBitrate"),
            scalable=bool_attr(elem, "scalable"),
            maintain_aspect_ratio=bool_attr(elem, "maintainAspectRatio"),
            api_framework=elem.get("apiFramework", ""),
        )

    def to_element(self) -> etree._Element:
        elem = etree.Element("MediaFile")
        set_attr(elem, "id", self.id)
        set_attr(elem, "delivery", self.delivery, omitempty=False)
        set_attr(elem, "type", self.type, omitempty=False)
        set_attr(elem, "codec", self.codec)
        set_attr(elem, "bitrate", self.bitrate)
        set_attr(elem, "minBitrate", self.min_bitrate)
        set_attr(elem, "maxBitrate", self.max_bitrate)
        set_attr(elem, "width", self.width, omitempty=False)
        set_attr(elem, "height", self.height, omitempty=False)
        set_attr(elem, "scalable", self.scalable)
        set_attr(elem, "maintainAspectRatio", self.maintain_aspect_ratio)
        set_attr(elem, "apiFramework", self.api_framework)
        return set_cdata(elem, self.uri)

    def validate(self) -> None:
        """Check the fields a player needs, in order: uri, type, width, height."""
        if self.uri == "":
            raise VastFieldError("empty uri")
        if self.type == "":
            raise VastFieldError("empty type")
        if self.width == 0:
            raise VastFieldError("empty width")
        if self.height == 0:
            raise VastFieldError("empty height")


@dataclass
class StaticResource:
    """URL of a static file such as an image."""

    uri: str = ""
    creative_type: str = ""

    @classmethod
    def from_element(cls, elem: etree._Element) -> "StaticResource":
        return cls(uri=text_of(elem), creative_type=elem.get("creativeType", ""))

    def to_element(self) -> etree._Element:
        elem = etree.Element("StaticResource")
        set_attr(elem, "creativeType", self.creative_type)
        return set_cdata(elem, self.uri)


@dataclass
class HTMLResource:
    html: str = ""
    xml_encoded: bool = False

    @classmethod
    def from_element(cls, elem: etree._Element) -> "HTMLResource":
        return cls(html=text_of(elem), xml_encoded=bool_attr(elem, "xmlEncoded"))

    def to_element(self) -> etree._Element:
        elem = etree.Element("HTMLResource")
        set_attr(elem, "xmlEncoded", self.xml_encoded)
        return set_cdata(elem, self.html)


@dataclass
class AdParameters:
    """Opaque data passed to the creative."""

    parameters: str = ""
    xml_encoded: bool = False

    @classmethod
    def from_element(cls, elem: etree._Element) -> "AdParameters":
        return cls(parameters=text_of(elem), xml_encoded=bool_attr(elem, "xmlEncoded"))

    def to_element(self) -> etree._Element:
        elem = etree.Element("AdParameters")
        set_attr(elem, "xmlEncoded", self.xml_encoded)
        return set_cdata(elem, self.parameters)


@dataclass
class Resource:
    """The display payload shared by companions, non-linears and icons."""

    static_resource: StaticResource | None = None
    iframe_resource: CDATAString = field(default_factory=CDATAString)
    html_resource: HTMLResource | None = None

    @classmethod
    def from_element(cls, elem: etree._Element) -> "Resource":
        static = child(elem, "StaticResource")
        html = child(elem, "HTMLResource")
        return cls(
            static_resource=StaticResource.from_element(static) if static is not None else None,
            iframe_resource=CDATAString.from_element(child(elem, "IFrameResource")),
            html_resource=HTMLResource.from_element(html) if html is not None else None,
        )

    def encode_into(self, parent: etree._Element) -> None:
        if self.static_resource is not None:
            parent.append(self.static_resource.to_element())
        if self.iframe_resource:
            parent.append(self.iframe_resource.to_element("IFrameResource"))
        if self.html_resource is not None:
            parent.append(self.html_resource.to_element())


@dataclass
class Icon:
    """Advertising industry initiative icon, such as AdChoices."""

    program: str = ""
    width: int = 0
    height: int = 0
    x_position: str = ""
    y_position: str = ""
    offset: Offset = field(default_factory=Offset)
    duration: Duration = field(default_factory=Duration)
    api_framework: str = ""
    click_through: CDATAString = field(default_factory=CDATAString)
    click_trackings: list[CDATAString] = field(default_factory=list)
    resource: Resource = field(default_factory=Resource)

    @classmethod
    def from_element(cls, elem: etree._Element) -> "Icon":
        clicks = child(elem, "IconClicks")
        return cls(
            program=elem.get("program", ""),
            width=int_attr(elem, "width"),
            height=int_attr(elem, "height"),
            x_position=elem.get("xPosition", ""),
            y_position=elem.get("yPosition", ""),
            offset=Offset(elem.get("offset", "")),
            duration=Duration(elem.get("duration", "")),
            api_framework=elem.get("apiFramework", ""),
            click_through=CDATAString.from_element(
                child(clicks, "IconClickThrough") if clicks is not None else None
            ),
            click_trackings=[
                CDATAString.from_element(e)
                for e in (children(clicks, "IconClickTracking") if clicks is not None else [])
            ],
            resource=Resource.from_element(elem),
        )

    def to_element(self) -> etree._Element:
        elem = etree.Element("Icon")
        set_attr(elem, "program", self.program, omitempty=False)
        set_attr(elem, "width", self.width, omitempty=False)
        set_attr(elem, "height", self.height, omitempty=False)
        set_attr(elem, "xPosition", self.x_position, omitempty=False)
        set_attr(elem, "yPosition", self.y_position, omitempty=False)
        set_attr(elem, "offset", self.offset.value, omitempty=False)
        set_attr(elem, "duration", self.duration.value, omitempty=False)
        set_attr(elem, "apiFramework", self.api_framework)
        if self.click_through or self.click_trackings:
            clicks = etree.SubElement(elem, "IconClicks")
            if self.click_through:
                sub_cdata(clicks, "IconClickThrough", self.click_through.cdata)
            for tracking in self.click_trackings:
                sub_cdata(clicks, "IconClickTracking", tracking.cdata)
        self.resource.encode_into(elem)
        return elem


@dataclass
class Icons:
    icons: list[Icon] = field(default_factory=list)

    @classmethod
    def from_element(cls, elem: etree._Element) -> "Icons":
        return cls(icons=[Icon.from_element(e) for e in children(elem, "Icon")])

    def to_element(self) -> etree._Element:
        elem = etree.Element("Icons")
        for icon in self.icons:
            elem.append(icon.to_element())
        return elem


__all__ = [
    "AdSystem",
    "Pricing",
    "Impression",
    "Viewable",
    "VideoClick",
    "Tracking",
    "VideoClicks",
    "MediaFile",
    "StaticResource",
    "HTMLResource",
    "AdParameters",
    "Resource",
    "Icon",
    "Icons",
    "decode_trackings",
    "encode_trackings",
    "keep_with_uri",
]
