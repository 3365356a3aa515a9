"""The ``<VAST>`` document root and the mutators used to assemble it."""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from lxml import etree

from .ads import Ad, InLine
from .creatives import Linear, add_click_trackings
from .elements import AdSystem, Impression, Tracking, VideoClick, VideoClicks, Viewable
from .events import VastEvents
from .exceptions import NotInlineError, NotLinearError, VastStructureError, VastValidationError
from .extension import Extension
from .helpers import secure_url
from .log_config import get_context_logger
from .normalizer import select_by_format, select_by_size
from .primitives import CDATAString
from .xml_utils import RawMarkup, children, sub_cdata

logger = get_context_logger("vast_document.document")


@dataclass
class DisplayManager:
    """Identity of the system re-serving the document."""

    name: str = ""
    title: str = ""
    version: str = ""


@dataclass
class VAST:
    """The root ``<VAST>`` element.

    Example:
        ```python
        vast = VAST.from_xml(xml_bytes)
        vast.validate()
        vast.set_secure(True)
        vast.filter_size(1280, 720)
        output = vast.to_xml()
        ```
    """

    version: str = "3.0"
    ads: list[Ad] = field(default_factory=list)
    errors: list[CDATAString] = field(default_factory=list)

    # Codec

    @classmethod
    def from_element(cls, elem: etree._Element, raw_data: Mapping | None = None) -> "VAST":
        """Decode a ``<VAST>`` root.

        ``raw_data`` maps Extension elements to their inner markup as found in
        the source bytes; ``VastParser`` builds it so extension data is kept
        byte-for-byte.
        """
        return cls(
            version=elem.get("version", ""),
            ads=[Ad.from_element(e, raw_data) for e in children(elem, "Ad")],
            errors=[CDATAString.from_element(e) for e in children(elem, "Error")],
        )

    def to_element(self, raw: RawMarkup | None = None) -> etree._Element:
        """Encode the tree; extension data goes to ``raw`` when one is given."""
        elem = etree.Element("VAST")
        elem.set("version", self.version)
        for ad in self.ads:
            elem.append(ad.to_element(raw=raw))
        for error in self.errors:
            sub_cdata(elem, "Error", error.cdata)
        return elem

    @classmethod
    def from_xml(cls, data: str | bytes, config=None) -> "VAST":
        """Parse a VAST document; see ``VastParser.parse``."""
        from .parser import VastParser

        return VastParser(config=config).parse(data)

    def to_xml(self, config=None) -> bytes:
        """Serialize the document; see ``VastParser.serialize``."""
        from .parser import VastParser

        return VastParser(config=config).serialize(self)

    # Assembly

    def _first_ad(self) -> Ad:
        if not self.ads:
            raise VastStructureError("empty ads")
        return self.ads[0]

    def set_display_manager(self, info: DisplayManager) -> None:
        ad = self._first_ad()
        if ad.wrapper is not None:
            ad.wrapper.ad_system = AdSystem(name=info.name, version=info.version)
        elif ad.inline is not None:
            ad.inline.ad_system = AdSystem(name=info.name, version=info.version)
            ad.inline.advertiser = info.title

    def add_error(self, *errors: CDATAString) -> None:
        self.errors.extend(errors)

    def add_tracking(self, *tracking: Tracking) -> None:
        """Append trackers to each Linear, else NonLinearAds, of the first ad's creatives."""
        ad = self._first_ad()
        if ad.content is None:
            return
        for creative in ad.content.creatives:
            if creative.linear is not None:
                creative.linear.tracking_events.extend(replace(t) for t in tracking)
            elif creative.non_linear_ads is not None:
                creative.non_linear_ads.tracking_events.extend(replace(t) for t in tracking)

    def add_click_tracking(self, *clicks: VideoClick) -> None:
        """Append click trackers to the InLine Linear creatives of the first ad.

        Wrapper ads are left unchanged.
        """
        ad = self._first_ad()
        if ad.wrapper is not None:
            logger.debug(VastEvents.CLICK_TRACKING_SKIPPED, reason="wrapper", count=len(clicks))
        elif ad.inline is not None:
            for creative in ad.inline.creatives:
                if creative.linear is not None:
                    add_click_trackings(creative.linear, [replace(c) for c in clicks])

    def add_impression(self, *impressions: Impression) -> None:
        ad = self._first_ad()
        if ad.content is not None:
            ad.content.impressions.extend(impressions)

    def add_viewable(self, *viewables: Viewable) -> None:
        ad = self._first_ad()
        if ad.content is not None:
            ad.content.viewable_impressions.extend(viewables)

    def clear_extensions(self) -> None:
        ad = self._first_ad()
        if ad.content is not None:
            ad.content.extensions = []

    def add_extensions(self, *extensions: Extension) -> None:
        """Append extensions to the first ad.

        Extensions without a type, or with neither custom tracking nor data,
        are skipped.
        """
        ad = self._first_ad()
        for extension in extensions:
            if extension.type == "" or extension.is_empty():
                logger.debug(
                    VastEvents.EXTENSION_SKIPPED, type=extension.type, name=extension.name
                )
                continue
            if ad.content is not None:
                ad.content.extensions.append(extension)

    def set_click_through(self, click: VideoClick) -> None:
        ad = self._first_ad()
        if ad.inline is None:
            return
        for creative in ad.inline.creatives:
            if creative.linear is not None:
                if creative.linear.video_clicks is None:
                    creative.linear.video_clicks = VideoClicks()
                creative.linear.video_clicks.click_throughs = [click]

    # Normalization

    def validate(self) -> None:
        """Check the document structure and drop empty tracking entries.

        Raises:
            VastStructureError: If there are no ads, or a required element is missing
            VastFieldError: If a leaf element lacks a required field
        """
        logger.debug(VastEvents.VALIDATE_STARTED, ads_count=len(self.ads))
        if not self.ads:
            logger.warning(VastEvents.VALIDATE_FAILED, reason="empty ads")
            raise VastStructureError("empty ads")
        for i, ad in enumerate(self.ads):
            try:
                ad.validate()
            except VastValidationError as e:
                wrapped = e.wrap("ad", i)
                logger.warning(
                    VastEvents.VALIDATE_FAILED, error=wrapped.message, reason=wrapped.reason
                )
                raise wrapped from e
        logger.debug(VastEvents.VALIDATE_COMPLETED, ads_count=len(self.ads))

    def set_secure(self, secure: bool) -> None:
        """Rewrite every reachable URI onto https (``secure``) or http."""
        for error in self.errors:
            error.cdata = secure_url(error.cdata, secure)
        for ad in self.ads:
            ad.set_secure(secure)
        logger.debug(VastEvents.SECURE_APPLIED, secure=secure)

    def first_linear(self) -> Linear:
        """Return the Linear of the first creative of the first InLine ad.

        Raises:
            NotInlineError: If the first ad is not an InLine
            NotLinearError: If its first creative has no Linear
        """
        inline: InLine | None = self.ads[0].inline if self.ads else None
        if inline is None:
            raise NotInlineError()
        if not inline.creatives or inline.creatives[0].linear is None:
            raise NotLinearError()
        return inline.creatives[0].linear

    def filter_format(self, formats: list[str]) -> None:
        """Keep only the media files whose type matches one of ``formats``.

        Raises:
            NotInlineError: If the first ad is not an InLine
            EmptyMediaError: If no media file matches
        """
        linear = self.first_linear()
        linear.media_files = select_by_format(linear.media_files, formats)
        logger.debug(
            VastEvents.FILTER_FORMAT_COMPLETED,
            formats=list(formats),
            media_files_count=len(linear.media_files),
        )

    def filter_size(self, width: int, height: int) -> None:
        """Reduce the media files to the closest match for a ``width`` x ``height`` slot.

        Raises:
            NotInlineError: If the first ad is not an InLine
            EmptyMediaError: If no media file has the target orientation
        """
        linear = self.first_linear()
        best = select_by_size(linear.media_files, width, height)
        linear.media_files = [best]
        logger.debug(
            VastEvents.FILTER_SIZE_SELECTED, width=width, height=height, uri=best.uri
        )


__all__ = ["VAST", "DisplayManager"]
