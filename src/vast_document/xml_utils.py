"""Small lxml helpers shared by the element codecs."""

from typing import Any, Iterator
from uuid import uuid4
from xml.parsers import expat

from lxml import etree

from .exceptions import VastElementError

_TRUE = {"1", "t", "true"}
_FALSE = {"0", "f", "false"}
_QUOTES = b"\"'"
_TAG_CLOSE = ord(">")


def local_name(elem: etree._Element) -> str:
    """Return the tag of an element without its namespace."""
    return etree.QName(elem).localname


def children(parent: etree._Element, tag: str) -> Iterator[etree._Element]:
    """Iterate the direct child elements named ``tag``, ignoring namespaces."""
    for child in parent:
        if isinstance(child.tag, str) and local_name(child) == tag:
            yield child


def child(parent: etree._Element, tag: str) -> etree._Element | None:
    """Return the first direct child named ``tag`` or None."""
    return next(children(parent, tag), None)


def grandchildren(parent: etree._Element, wrapper: str, tag: str) -> list[etree._Element]:
    """Collect ``wrapper > tag`` elements, e.g. ``TrackingEvents > Tracking``."""
    found = []
    for group in children(parent, wrapper):
        found.extend(children(group, tag))
    return found


def text_of(elem: etree._Element | None) -> str:
    """Return the character data of an element, CDATA included."""
    if elem is None:
        return ""
    return elem.text or ""


def int_attr(elem: etree._Element, name: str) -> int:
    """Read an integer attribute, 0 when absent."""
    raw = elem.get(name)
    if raw is None or raw.strip() == "":
        return 0
    try:
        return int(raw.strip())
    except ValueError as e:
        raise VastElementError(
            f"Invalid integer attribute '{name}': {raw!r}",
            element_tag=local_name(elem),
            operation="decode",
        ) from e


def opt_bool_attr(elem: etree._Element, name: str) -> bool | None:
    """Read a boolean attribute, None when absent."""
    raw = elem.get(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise VastElementError(
        f"Invalid boolean attribute '{name}': {raw!r}",
        element_tag=local_name(elem),
        operation="decode",
    )


def bool_attr(elem: etree._Element, name: str) -> bool:
    """Read a boolean attribute, False when absent."""
    return bool(opt_bool_attr(elem, name))


def set_attr(elem: etree._Element, name: str, value: Any, omitempty: bool = True) -> None:
    """Write an attribute; zero values are skipped when ``omitempty``."""
    if value is None or (omitempty and not value):
        return
    if isinstance(value, bool):
        elem.set(name, "true" if value else "false")
    else:
        elem.set(name, str(value))


def set_cdata(elem: etree._Element, text: str) -> etree._Element:
    """Place ``text`` into a CDATA section of ``elem``."""
    if text:
        elem.text = etree.CDATA(text)
    return elem


def sub_cdata(parent: etree._Element, tag: str, text: str, **attrs: Any) -> etree._Element:
    """Append ``<tag attrs><![CDATA[text]]></tag>`` to ``parent``."""
    elem = etree.SubElement(parent, tag)
    for name, value in attrs.items():
        set_attr(elem, name, value)
    return set_cdata(elem, text)


def sub_text(parent: etree._Element, tag: str, text: str) -> etree._Element:
    """Append ``<tag>text</tag>`` to ``parent``."""
    elem = etree.SubElement(parent, tag)
    elem.text = text
    return elem


def start_tag_end(markup: bytes, start: int = 0) -> int:
    """Return the offset just past the ``>`` closing the start tag at ``start``.

    Quoted attribute values may contain ``>`` and are skipped over.
    """
    quote = None
    for i in range(start, len(markup)):
        byte = markup[i]
        if quote is not None:
            if byte == quote:
                quote = None
        elif byte in _QUOTES:
            quote = byte
        elif byte == _TAG_CLOSE:
            return i + 1
    raise ValueError(f"Unterminated start tag at offset {start}")


def inner_xml(elem: etree._Element) -> bytes:
    """Return the markup between the start and end tags of ``elem``.

    The element is serialized on its own and its tags are cut off, so CDATA
    sections are kept and namespace declarations inherited from ancestors
    (which lxml copies onto the serialized start tag) are not. Character
    references and attribute quoting come out the way lxml writes them; use
    ``raw_inner_xml`` on the source bytes to get them unchanged.
    """
    markup = etree.tostring(elem, encoding="utf-8", with_tail=False)
    begin = start_tag_end(markup)
    if markup[begin - 2 : begin] == b"/>":
        return b""
    return markup[begin : markup.rindex(b"</")]


def raw_inner_xml(source: bytes, tag: str) -> list[bytes]:
    """Cut the unparsed inner markup of every ``tag`` element out of ``source``.

    Elements are matched by local name and returned in document order, the
    same order as ``root.iter()`` visits them. lxml does not report source
    offsets, so the document is scanned with expat, which does.

    Raises:
        expat.ExpatError: If ``source`` is not well-formed
    """
    found: list[bytes] = []
    open_tags: list[tuple[int, int]] = []
    parser = expat.ParserCreate()

    def start(name, attrs):
        if name.rpartition(":")[2] == tag:
            open_tags.append((len(found), start_tag_end(source, parser.CurrentByteIndex)))
            found.append(b"")

    def end(name):
        if name.rpartition(":")[2] == tag:
            index, begin = open_tags.pop()
            if source[begin - 2 : begin] != b"/>":
                found[index] = source[begin : parser.CurrentByteIndex]

    parser.StartElementHandler = start
    parser.EndElementHandler = end
    parser.Parse(source, True)
    return found


def check_fragment(data: bytes) -> None:
    """Make sure ``data`` is well-formed element content.

    Namespace prefixes are not resolved, so markup cut from a document that
    declares them on an ancestor is accepted.

    Raises:
        expat.ExpatError: If ``data`` is not well-formed
    """
    expat.ParserCreate().Parse(b"<fragment>" + data + b"</fragment>", True)


def with_inner_xml(elem: etree._Element, data: bytes) -> etree._Element:
    """Return a copy of the childless ``elem`` with ``data`` parsed as its content.

    ``data`` must already pass ``check_fragment``. CDATA sections are kept.
    """
    empty = etree.tostring(elem, encoding="utf-8")
    markup = empty[:-2] + b">" + data + b"</" + elem.tag.encode("utf-8") + b">"
    parser = etree.XMLParser(
        strip_cdata=False, recover=True, resolve_entities=False, no_network=True
    )
    return etree.fromstring(markup, parser=parser)  # noqa: S320


class RawMarkup:
    """Markup fragments written verbatim into serialized output.

    ``hold`` returns a unique token to store as element text while the tree is
    built, and ``splice`` swaps each token in the serialized bytes for its
    fragment. This keeps bytes that a tree cannot represent (character
    references, attribute quoting, unescaped ``>``) exactly as given.

    Example:
        ```python
        raw = RawMarkup()
        elem = etree.Element("Extension")
        elem.text = raw.hold(b"<A x='1'/>")
        raw.splice(etree.tostring(elem))  # b"<Extension><A x='1'/></Extension>"
        ```
    """

    def __init__(self):
        self.fragments: dict[str, bytes] = {}

    def hold(self, data: bytes) -> str:
        token = f"raw-markup-{uuid4().hex}"
        self.fragments[token] = data
        return token

    def splice(self, markup: bytes, encoding: str = "utf-8") -> bytes:
        for token, data in self.fragments.items():
            markup = markup.replace(token.encode(encoding), data, 1)
        return markup



__all__ = [
    "local_name",
    "children",
    "child",
    "grandchildren",
    "text_of",
    "int_attr",
    "opt_bool_attr",
    "bool_attr",
    "set_attr",
    "set_cdata",
    "sub_cdata",
    "sub_text",
    "start_tag_end",
    "inner_xml",
    "raw_inner_xml",
    "check_fragment",
    "with_inner_xml",
    "RawMarkup",
]
