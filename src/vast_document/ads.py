"""Ad variants: InLine (full ad definition) and Wrapper (redirect to another ad tag)."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from lxml import etree

from .creatives import Creative, CreativeWrapper
from .elements import AdSystem, Impression, Pricing, Viewable, keep_with_uri
from .events import VastEvents
from .exceptions import VastStructureError, VastValidationError
from .extension import Extension
from .helpers import secure_url
from .log_config import get_context_logger
from .primitives import CDATAString
from .xml_utils import (
    child,
    children,
    grandchildren,
    int_attr,
    opt_bool_attr,
    set_attr,
    sub_cdata,
    sub_text,
    RawMarkup,
    text_of,
)

logger = get_context_logger("vast_document.ads")


def _decode_common(elem: etree._Element, raw_data: Mapping | None) -> dict:
    """Fields both ad variants share.

    ``raw_data`` maps Extension elements to their inner markup in the source.
    """
    raw_data = raw_data or {}
    ad_system = child(elem, "AdSystem")
    return dict(
        ad_system=AdSystem.from_element(ad_system) if ad_system is not None else None,
        impressions=[Impression.from_element(e) for e in children(elem, "Impression")],
        viewable_impressions=[
            Viewable.from_element(e) for e in grandchildren(elem, "ViewableImpression", "Viewable")
        ],
        errors=[CDATAString.from_element(e) for e in children(elem, "Error")],
        extensions=[
            Extension.from_element(e, raw=raw_data.get(e))
            for e in grandchildren(elem, "Extensions", "Extension")
        ],
    )


def _encode_group(parent: etree._Element, tag: str, entries: list) -> None:
    if not entries:
        return
    group = etree.SubElement(parent, tag)
    for entry in entries:
        group.append(entry.to_element())


def _encode_extensions(
    parent: etree._Element, extensions: list[Extension], raw: RawMarkup | None
) -> None:
    if not extensions:
        return
    group = etree.SubElement(parent, "Extensions")
    for extension in extensions:
        group.append(extension.to_element(raw=raw))


def _trimmed(entries: list) -> list:
    kept = keep_with_uri(entries)
    for entry in kept:
        entry.uri = entry.uri.strip()
    return kept


def _log_dropped(kind: str, before: int, after: int) -> None:
    if before != after:
        logger.debug(VastEvents.ENTRIES_DROPPED, kind=kind, dropped=before - after, kept=after)


@dataclass
class InLine:
    """A terminal ad carrying every file and URI needed to display it."""

    ad_system: AdSystem | None = None
    ad_title: CDATAString = field(default_factory=CDATAString)
    impressions: list[Impression] = field(default_factory=list)
    viewable_impressions: list[Viewable] = field(default_factory=list)
    creatives: list[Creative] = field(default_factory=list)
    description: CDATAString = field(default_factory=CDATAString)
    advertiser: str = ""
    survey: CDATAString = field(default_factory=CDATAString)
    errors: list[CDATAString] = field(default_factory=list)
    pricing: Pricing | None = None
    extensions: list[Extension] = field(default_factory=list)

    @classmethod
    def from_element(cls, elem: etree._Element, raw_data: Mapping | None = None) -> "InLine":
        pricing = child(elem, "Pricing")
        return cls(
            **_decode_common(elem, raw_data),
            ad_title=CDATAString.from_element(child(elem, "AdTitle")),
            creatives=[
                Creative.from_element(c) for c in grandchildren(elem, "Creatives", "Creative")
            ],
            description=CDATAString.from_element(child(elem, "Description")),
            advertiser=text_of(child(elem, "Advertiser")),
            survey=CDATAString.from_element(child(elem, "Survey")),
            pricing=Pricing.from_element(pricing) if pricing is not None else None,
        )

    def to_element(self, raw: RawMarkup | None = None) -> etree._Element:
        elem = etree.Element("InLine")
        if self.ad_system is not None:
            elem.append(self.ad_system.to_element())
        elem.append(self.ad_title.to_element("AdTitle"))
        for impression in self.impressions:
            elem.append(impression.to_element())
        _encode_group(elem, "ViewableImpression", self.viewable_impressions)
        _encode_group(elem, "Creatives", self.creatives)
        if self.description:
            elem.append(self.description.to_element("Description"))
        if self.advertiser:
            sub_text(elem, "Advertiser", self.advertiser)
        if self.survey:
            elem.append(self.survey.to_element("Survey"))
        for error in self.errors:
            sub_cdata(elem, "Error", error.cdata)
        if self.pricing is not None:
            elem.append(self.pricing.to_element())
        _encode_extensions(elem, self.extensions, raw)
        return elem

    def validate(self) -> None:
        """Validate every creative, then drop and trim empty tracking URIs.

        Raises:
            VastStructureError: If there are no creatives
            VastValidationError: The first creative failure, prefixed with its index
        """
        if not self.creatives:
            raise VastStructureError("empty creative")
        for i, creative in enumerate(self.creatives):
            try:
                creative.validate()
            except VastValidationError as e:
                raise e.wrap("creative", i) from e

        before = len(self.impressions)
        self.impressions = _trimmed(self.impressions)
        _log_dropped("impression", before, len(self.impressions))

        before = len(self.errors)
        self.errors = [error for error in self.errors if error.cdata != ""]
        _log_dropped("error", before, len(self.errors))

        before = len(self.viewable_impressions)
        self.viewable_impressions = _trimmed(self.viewable_impressions)
        _log_dropped("viewable_impression", before, len(self.viewable_impressions))

    def set_secure(self, secure: bool) -> None:
        for creative in self.creatives:
            creative.set_secure(secure)
        for entry in (*self.viewable_impressions, *self.impressions):
            entry.uri = secure_url(entry.uri, secure)
        for error in self.errors:
            error.cdata = secure_url(error.cdata, secure)


@dataclass
class Wrapper:
    """A redirect to a secondary ad server, with the trackers to add on the way.

    The three policy flags are None when absent from the document.
    """

    vast_ad_tag_uri: CDATAString = field(default_factory=CDATAString)
    ad_system: AdSystem | None = None
    impressions: list[Impression] = field(default_factory=list)
    viewable_impressions: list[Viewable] = field(default_factory=list)
    errors: list[CDATAString] = field(default_factory=list)
    creatives: list[CreativeWrapper] = field(default_factory=list)
    extensions: list[Extension] = field(default_factory=list)
    fallback_on_no_ad: bool | None = None
    allow_multiple_ads: bool | None = None
    follow_additional_wrappers: bool | None = None

    @classmethod
    def from_element(cls, elem: etree._Element, raw_data: Mapping | None = None) -> "Wrapper":
        return cls(
            **_decode_common(elem, raw_data),
            vast_ad_tag_uri=CDATAString.from_element(child(elem, "VASTAdTagURI")),
            creatives=[
                CreativeWrapper.from_element(c)
                for c in grandchildren(elem, "Creatives", "Creative")
            ],
            fallback_on_no_ad=opt_bool_attr(elem, "fallbackOnNoAd"),
            allow_multiple_ads=opt_bool_attr(elem, "allowMultipleAds"),
            follow_additional_wrappers=opt_bool_attr(elem, "followAdditionalWrappers"),
        )

    def to_element(self, raw: RawMarkup | None = None) -> etree._Element:
        elem = etree.Element("Wrapper")
        set_attr(elem, "fallbackOnNoAd", self.fallback_on_no_ad, omitempty=False)
        set_attr(elem, "allowMultipleAds", self.allow_multiple_ads, omitempty=False)
        set_attr(
            elem, "followAdditionalWrappers", self.follow_additional_wrappers, omitempty=False
        )
        if self.ad_system is not None:
            elem.append(self.ad_system.to_element())
        elem.append(self.vast_ad_tag_uri.to_element("VASTAdTagURI"))
        for impression in self.impressions:
            elem.append(impression.to_element())
        _encode_group(elem, "ViewableImpression", self.viewable_impressions)
        for error in self.errors:
            sub_cdata(elem, "Error", error.cdata)
        _encode_group(elem, "Creatives", self.creatives)
        _encode_extensions(elem, self.extensions, raw)
        return elem

    def validate(self) -> None:
        """Drop impressions and viewable impressions with an empty URI.

        Creatives are not inspected and surviving URIs are kept verbatim.
        """
        before = len(self.impressions)
        self.impressions = keep_with_uri(self.impressions)
        _log_dropped("impression", before, len(self.impressions))

        before = len(self.viewable_impressions)
        self.viewable_impressions = keep_with_uri(self.viewable_impressions)
        _log_dropped("viewable_impression", before, len(self.viewable_impressions))

    def set_secure(self, secure: bool) -> None:
        """Rewrite impression and error URIs; wrapper creatives are left as-is."""
        for entry in (*self.viewable_impressions, *self.impressions):
            entry.uri = secure_url(entry.uri, secure)
        for error in self.errors:
            error.cdata = secure_url(error.cdata, secure)


@dataclass
class Ad:
    """An ``<Ad>``: a single InLine or Wrapper, never both.

    ``sequence`` is 0 when unset; ads sharing a pod play in sequence order.
    """

    content: InLine | Wrapper | None = None
    id: str = ""
    sequence: int = 0

    @property
    def inline(self) -> InLine | None:
        return self.content if isinstance(self.content, InLine) else None

    @property
    def wrapper(self) -> Wrapper | None:
        return self.content if isinstance(self.content, Wrapper) else None

    @classmethod
    def from_element(cls, elem: etree._Element, raw_data: Mapping | None = None) -> "Ad":
        inline = child(elem, "InLine")
        wrapper = child(elem, "Wrapper")
        if wrapper is not None:
            content = Wrapper.from_element(wrapper, raw_data)
        elif inline is not None:
            content = InLine.from_element(inline, raw_data)
        else:
            content = None
        return cls(content=content, id=elem.get("id", ""), sequence=int_attr(elem, "sequence"))

    def to_element(self, raw: RawMarkup | None = None) -> etree._Element:
        elem = etree.Element("Ad")
        set_attr(elem, "id", self.id)
        set_attr(elem, "sequence", self.sequence)
        if self.content is not None:
            elem.append(self.content.to_element(raw=raw))
        return elem

    def validate(self) -> None:
        if self.content is None:
            raise VastStructureError("empty inline and wrapper")
        self.content.validate()

    def set_secure(self, secure: bool) -> None:
        if self.content is not None:
            self.content.set_secure(secure)


__all__ = ["InLine", "Wrapper", "Ad"]
