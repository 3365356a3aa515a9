"""VAST document custom exception hierarchy.

Provides specific exception types for parsing, validating and normalizing
VAST documents. This enables consistent error handling and more informative
error logging throughout the codebase.

Exception Hierarchy:
    VastException (base)
    ├── VastParseError
    │   ├── VastXMLError
    │   ├── VastElementError
    │   ├── VastExtensionError
    │   └── VastDurationError
    ├── VastValidationError
    │   ├── VastStructureError
    │   └── VastFieldError
    ├── VastFilterError
    │   ├── NotInlineError
    │   ├── NotLinearError
    │   └── EmptyMediaError
    └── VastConfigError
"""

from typing import Optional


class VastException(Exception):
    """Base exception for all VAST document errors.

    All VAST-specific exceptions inherit from this class to allow
    catching all VAST errors with a single except clause.
    """

    def __init__(self, message: str, context: Optional[dict] = None):
        """Initialize VAST exception.

        Args:
            message: Error message
            context: Optional context dictionary for debugging
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return string representation with context."""
        if self.context:
            context_str = "; ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


# Parsing Errors

class VastParseError(VastException):
    """Base exception for VAST parsing errors.

    Raised when there are issues decoding VAST XML into the document model.
    """

    pass


class VastXMLError(VastParseError):
    """Raised when XML parsing fails.

    This includes malformed XML, encoding issues, and XML syntax errors.

    Attributes:
        xml_preview: First 200 characters of XML that failed to parse
        parser_error: The underlying lxml parser error
    """

    def __init__(
        self,
        message: str,
        xml_preview: Optional[str] = None,
        parser_error: Optional[Exception] = None,
        context: Optional[dict] = None,
    ):
        if context is None:
            context = {}
        if xml_preview:
            context["xml_preview"] = xml_preview[:200]
        super().__init__(message, context)
        self.xml_preview = xml_preview
        self.parser_error = parser_error


class VastElementError(VastParseError):
    """Raised when decoding or encoding a single element fails.

    Attributes:
        element_tag: XML tag of problematic element
        operation: The operation that failed (e.g., 'decode', 'encode')
    """

    def __init__(
        self,
        message: str,
        element_tag: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[dict] = None,
    ):
        if context is None:
            context = {}
        if element_tag:
            context["element_tag"] = element_tag
        if operation:
            context["operation"] = operation
        super().__init__(message, context)
        self.element_tag = element_tag
        self.operation = operation


class VastExtensionError(VastParseError):
    """Raised when an Extension element cannot be encoded or decoded.

    Attributes:
        extension_type: Type attribute of the extension that failed
    """

    def __init__(
        self,
        message: str,
        extension_type: Optional[str] = None,
        context: Optional[dict] = None,
    ):
        if context is None:
            context = {}
        if extension_type:
            context["extension_type"] = extension_type
        super().__init__(message, context)
        self.extension_type = extension_type


class VastDurationError(VastParseError):
    """Raised when converting a duration or offset fails.

    Attributes:
        duration_text: The duration string that failed to parse
    """

    def __init__(
        self,
        message: str,
        duration_text: Optional[str] = None,
        context: Optional[dict] = None,
    ):
        if context is None:
            context = {}
        if duration_text:
            context["duration_text"] = duration_text
        super().__init__(message, context)
        self.duration_text = duration_text


# Validation Errors

class VastValidationError(VastException):
    """Base exception for document validation failures.

    Each level of the tree that re-raises a child failure prefixes the
    message with its own position, so the final message reads like
    ``bad ad[0] bad creative[1] bad media[0] empty uri``.

    Attributes:
        reason: The innermost failure message (e.g. ``"empty uri"``)
        path: ``(kind, index)`` pairs from the document root to the failure
    """

    def __init__(
        self,
        message: str,
        reason: Optional[str] = None,
        path: Optional[list[tuple[str, int]]] = None,
        context: Optional[dict] = None,
    ):
        super().__init__(message, context)
        self.reason = reason or message
        self.path = list(path or [])

    def wrap(self, kind: str, index: int) -> "VastValidationError":
        """Return a copy of this error positioned under ``kind[index]``."""
        return type(self)(
            f"bad {kind}[{index}] {self.message}",
            reason=self.reason,
            path=[(kind, index), *self.path],
            context=dict(self.context),
        )


class VastStructureError(VastValidationError):
    """Raised when a required sub-element is missing (ads, creatives, media)."""

    pass


class VastFieldError(VastValidationError):
    """Raised when a leaf element lacks a required field."""

    pass


# Filtering Errors

class VastFilterError(VastException):
    """Base exception for media selection precondition failures."""

    pass


class NotInlineError(VastFilterError):
    """Raised when media filtering runs on a document without an InLine ad."""

    def __init__(self, message: str = "not inline", context: Optional[dict] = None):
        super().__init__(message, context)


class NotLinearError(VastFilterError):
    """Raised when the first creative of the InLine ad has no Linear."""

    def __init__(self, message: str = "not linear", context: Optional[dict] = None):
        super().__init__(message, context)


class EmptyMediaError(VastFilterError):
    """Raised when a filter leaves no media files.

    Attributes:
        criterion: The filter that emptied the list ('format' or 'size')
    """

    def __init__(self, criterion: str, context: Optional[dict] = None):
        super().__init__(f"empty media by {criterion}", context)
        self.criterion = criterion


# Configuration Errors

class VastConfigError(VastException):
    """Raised when settings cannot be loaded or are invalid.

    Attributes:
        config_key: Configuration key or file involved, if known
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        context: Optional[dict] = None,
    ):
        if context is None:
            context = {}
        if config_key:
            context["config_key"] = config_key
        super().__init__(message, context)
        self.config_key = config_key


__all__ = [
    "VastException",
    "VastParseError",
    "VastXMLError",
    "VastElementError",
    "VastExtensionError",
    "VastDurationError",
    "VastValidationError",
    "VastStructureError",
    "VastFieldError",
    "VastFilterError",
    "NotInlineError",
    "NotLinearError",
    "EmptyMediaError",
    "VastConfigError",
]
