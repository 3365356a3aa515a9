"""Helper functions for VAST document operations."""

import re

from .constants import MIME_TYPES, VN_TRACKING

_SCHEME_PREFIX = re.compile(r"^(?:https?:)?/*", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def secure_url(url: str, secure: bool) -> str:
    """
    Rewrite a URL onto the http or https scheme.

    Every whitespace character is stripped first. Then any ``http:``/``https:``
    prefix (in any casing) and the leading slashes are removed and the
    requested scheme is prepended, so rewriting an already rewritten URL
    returns it unchanged.

    Args:
        url: URL as found in the document, possibly scheme-relative
        secure: Prepend ``https://`` when True, ``http://`` otherwise

    Returns:
        str: The rewritten URL

    Examples:
        >>> secure_url("http://ads.example.com/imp", True)
        'https://ads.example.com/imp'
        >>> secure_url("//ads.example.com/imp", False)
        'http://ads.example.com/imp'
    """
    rest = _SCHEME_PREFIX.sub("", _WHITESPACE.sub("", url), count=1)
    scheme = "https://" if secure else "http://"
    return scheme + rest


def clear_str(value: str) -> str:
    """Strip literal newline and tab characters from a string."""
    return value.replace("\n", "").replace("\t", "")


def clear_buf(buf: bytes) -> bytes:
    """Strip literal newline and tab bytes from a buffer."""
    return buf.replace(b"\n", b"").replace(b"\t", b"")


def vendor_event_name(event: str) -> str | None:
    """
    Look up the VN alias of a tracking event.

    Examples:
        >>> vendor_event_name("firstQuartile")
        'q1'
        >>> vendor_event_name("creativeView") is None
        True
    """
    return VN_TRACKING.get(event)


def matches_format(mime_type: str, formats: list[str]) -> bool:
    """Check whether a MIME type matches any requested format or format alias."""
    for fmt in formats:
        if mime_type == fmt or mime_type == MIME_TYPES.get(fmt):
            return True
    return False


__all__ = ["secure_url", "clear_str", "clear_buf", "vendor_event_name", "matches_format"]
