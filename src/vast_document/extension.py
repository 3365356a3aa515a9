"""Vendor Extension elements and their conditional wire codec.

An ``<Extension>`` carries exactly one of two payloads:

* ``CustomTracking`` - a list of ``Tracking`` entries, encoded as
  ``<CustomTracking><Tracking .../>...</CustomTracking>``;
* ``Data`` - opaque markup copied verbatim between the start and end tags.

When custom tracking is present the raw data is never written, and when it is
absent the ``CustomTracking`` element is never written.

Data keeps its exact bytes through ``to_xml``/``from_xml`` and through
``VastParser``, which cut it from the source and splice it into the output.
An element built by ``to_element()`` without a ``RawMarkup`` holds the parsed
data, so lxml rewrites character references, attribute quoting and ``>`` when
that tree is serialized.
"""

from dataclasses import dataclass, field
from xml.parsers import expat

from lxml import etree

from .elements import Tracking
from .exceptions import VastException, VastExtensionError
from .xml_utils import (
    RawMarkup,
    check_fragment,
    children,
    inner_xml,
    local_name,
    raw_inner_xml,
    set_attr,
    with_inner_xml,
)

RESERVED_ATTRIBUTES = frozenset({"type", "name"})


@dataclass
class Extension:
    """Arbitrary platform or tracker XML attached to an ad.

    ``payload`` is either a list of ``Tracking`` (custom tracking) or the raw
    inner XML as bytes. ``attributes`` holds any extra start-element
    attributes besides ``type`` and ``name``.

    Example:
        ```python
        Extension(type="tracker", payload=[Tracking(event="start", uri="https://t/s")])
        Extension(type="waterfall", payload=b"<Slot>3</Slot>")
        ```
    """

    type: str = ""
    name: str = ""
    payload: list[Tracking] | bytes = b""
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def custom_tracking(self) -> list[Tracking]:
        if isinstance(self.payload, list):
            return self.payload
        return []

    @property
    def data(self) -> bytes:
        if isinstance(self.payload, bytes):
            return self.payload
        return b""

    def is_empty(self) -> bool:
        return not self.payload

    @classmethod
    def from_element(cls, elem: etree._Element, raw: bytes | None = None) -> "Extension":
        """Decode an ``<Extension>`` element.

        Args:
            elem: The ``<Extension>`` element
            raw: The element's inner markup as found in the source bytes. When
                omitted the data is recovered from the tree with ``inner_xml``

        Raises:
            VastExtensionError: If a CustomTracking entry cannot be decoded
        """
        ext_type = elem.get("type", "")
        try:
            tracking = [
                Tracking.from_element(t)
                for group in children(elem, "CustomTracking")
                for t in children(group, "Tracking")
            ]
        except VastException as e:
            raise VastExtensionError(
                f"Failed to decode custom tracking: {e.message}",
                extension_type=ext_type,
            ) from e

        if tracking:
            payload = tracking
        else:
            payload = raw if raw is not None else inner_xml(elem)
        attributes = {
            key: value for key, value in elem.attrib.items() if key not in RESERVED_ATTRIBUTES
        }
        return cls(
            type=ext_type,
            name=elem.get("name", ""),
            payload=payload,
            attributes=attributes,
        )

    def to_element(self, raw: RawMarkup | None = None) -> etree._Element:
        """Encode into one of the two wire shapes.

        Args:
            raw: Collects the data for verbatim output. Without it the data is
                parsed into the returned element

        Raises:
            VastExtensionError: If the raw data is not well-formed markup
        """
        elem = etree.Element("Extension")
        set_attr(elem, "type", self.type)
        set_attr(elem, "name", self.name)
        for key, value in self.attributes.items():
            if key not in RESERVED_ATTRIBUTES:
                elem.set(key, value)

        if self.custom_tracking:
            group = etree.SubElement(elem, "CustomTracking")
            for tracking in self.custom_tracking:
                group.append(tracking.to_element())
        elif self.data:
            try:
                check_fragment(self.data)
            except expat.ExpatError as e:
                raise VastExtensionError(
                    f"Extension data is not well-formed XML: {str(e)}",
                    extension_type=self.type,
                ) from e
            if raw is not None:
                elem.text = raw.hold(self.data)
            else:
                elem = with_inner_xml(elem, self.data)
        return elem

    @classmethod
    def from_xml(cls, xml: bytes) -> "Extension":
        """Decode a standalone ``<Extension>`` document, keeping the data byte-for-byte.

        Raises:
            VastExtensionError: If the document is malformed or not an Extension
        """
        try:
            elem = etree.fromstring(  # noqa: S320
                xml,
                parser=etree.XMLParser(
                    strip_cdata=False, resolve_entities=False, no_network=True
                ),
            )
            sources = raw_inner_xml(xml, "Extension")
        except (etree.XMLSyntaxError, expat.ExpatError) as e:
            raise VastExtensionError(f"Extension is not well-formed XML: {str(e)}") from e
        if local_name(elem) != "Extension":
            raise VastExtensionError(f"Unexpected root element <{local_name(elem)}>")
        return cls.from_element(elem, raw=sources[0])

    def to_xml(self) -> bytes:
        """Encode as a standalone ``<Extension>`` document with the data written verbatim."""
        raw = RawMarkup()
        return raw.splice(etree.tostring(self.to_element(raw=raw), encoding="utf-8"))


__all__ = ["Extension", "RESERVED_ATTRIBUTES"]
