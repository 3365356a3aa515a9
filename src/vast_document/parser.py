"""VAST XML parser and serializer for the document model."""

from xml.parsers import expat

from lxml import etree

from .config import VastParserConfig
from .constants import SUPPORTED_VERSIONS
from .document import VAST
from .events import VastEvents
from .exceptions import VastElementError, VastParseError, VastXMLError
from .log_config import get_context_logger
from .xml_utils import RawMarkup, local_name, raw_inner_xml


def _preview(data: str | bytes) -> str:
    if isinstance(data, bytes):
        return data[:200].decode("utf-8", errors="replace")
    return data[:200]


class VastParser:
    """Decodes VAST XML into a ``VAST`` tree and encodes it back."""

    def __init__(self, config: VastParserConfig | None = None):
        self.logger = get_context_logger("vast_parser")
        self.config = config if config is not None else VastParserConfig()

    def parse(self, xml: str | bytes) -> VAST:
        """Parse a VAST XML document.

        Args:
            xml: Raw VAST XML as text or bytes

        Returns:
            VAST: The document tree, not yet validated

        Raises:
            VastXMLError: If the XML is not well-formed
            VastElementError: If the root is not ``<VAST>`` or an attribute is malformed
            VastExtensionError: If an Extension cannot be decoded
        """
        self.logger.debug(VastEvents.PARSE_STARTED, xml_length=len(xml))

        parser = etree.XMLParser(
            recover=self.config.recover_on_error,
            strip_cdata=False,
            resolve_entities=False,
            no_network=True,
        )
        try:
            data = xml.encode(self.config.encoding) if isinstance(xml, str) else xml
            root = etree.fromstring(data, parser=parser)  # noqa: S320
        except etree.XMLSyntaxError as e:
            self.logger.error(VastEvents.PARSE_FAILED, error=str(e), xml_preview=_preview(xml))
            raise VastXMLError(
                f"Failed to parse VAST XML: {str(e)}",
                xml_preview=_preview(xml),
                parser_error=e,
            ) from e
        except (UnicodeError, ValueError) as e:
            self.logger.error(VastEvents.PARSE_FAILED, error=str(e), xml_preview=_preview(xml))
            raise VastXMLError(
                f"Failed to decode or parse VAST XML: {str(e)}",
                xml_preview=_preview(xml),
                parser_error=e,
            ) from e

        if root is None:
            raise VastXMLError("Empty VAST XML document", xml_preview=_preview(xml))
        if local_name(root) != "VAST":
            raise VastElementError(
                f"Unexpected root element <{local_name(root)}>",
                element_tag=local_name(root),
                operation="decode",
            )

        try:
            vast = VAST.from_element(root, raw_data=self._raw_extension_data(root, data))
        except VastParseError as e:
            self.logger.error(VastEvents.PARSE_FAILED, error=str(e))
            raise

        if vast.version not in SUPPORTED_VERSIONS:
            self.logger.warning(
                VastEvents.VERSION_UNSUPPORTED,
                vast_version=vast.version,
                supported=list(SUPPORTED_VERSIONS),
            )

        self.logger.info(
            VastEvents.PARSE_COMPLETED,
            vast_version=vast.version,
            ads_count=len(vast.ads),
            errors_count=len(vast.errors),
        )
        return vast

    def serialize(self, vast: VAST) -> bytes:
        """Encode a ``VAST`` tree as XML bytes.

        Raises:
            VastExtensionError: If an Extension carries malformed raw data
        """
        raw = RawMarkup()
        output = etree.tostring(
            vast.to_element(raw=raw),
            encoding=self.config.encoding,
            xml_declaration=self.config.xml_declaration,
            pretty_print=self.config.pretty_print,
        )
        output = raw.splice(output, self.config.encoding)
        self.logger.debug(VastEvents.SERIALIZE_COMPLETED, xml_length=len(output))
        return output

    def _raw_extension_data(self, root: etree._Element, data: bytes) -> dict:
        """Map each Extension element to its inner markup as found in ``data``.

        Returns an empty map, so data is recovered from the tree instead, when
        the source cannot be scanned (e.g. a document only accepted in
        recover mode).
        """
        elements = [
            e for e in root.iter() if isinstance(e.tag, str) and local_name(e) == "Extension"
        ]
        if not elements:
            return {}
        try:
            sources = raw_inner_xml(data, "Extension")
        except expat.ExpatError as e:
            self.logger.debug(VastEvents.RAW_DATA_UNAVAILABLE, error=str(e))
            return {}
        if len(sources) != len(elements):
            self.logger.debug(
                VastEvents.RAW_DATA_UNAVAILABLE,
                error="extension count mismatch",
                found=len(sources),
                expected=len(elements),
            )
            return {}
        return dict(zip(elements, sources))

    @classmethod
    def from_config(cls, config: dict) -> "VastParser":
        """Create parser from configuration dictionary."""
        return cls(config=VastParserConfig(**config))


__all__ = ["VastParser"]
