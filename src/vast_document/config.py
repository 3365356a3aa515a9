"""
VAST Document Configuration Module

Provides configuration classes for parsing, serializing and normalizing
VAST documents.
"""

from dataclasses import dataclass, field


@dataclass
class VastParserConfig:
    """Configuration for VAST XML parsing and serialization."""

    # Parsing options
    recover_on_error: bool = False
    encoding: str = "utf-8"

    # Serialization options
    pretty_print: bool = False
    xml_declaration: bool = True


@dataclass
class NormalizerConfig:
    """
    Configuration for the normalization pipeline.

    Attributes:
        secure: Rewrite URIs onto https (True) or http (False); None skips the step
        formats: MIME types or aliases to keep (empty keeps every format)
        target_width: Slot width for best-fit selection (0 skips the step)
        target_height: Slot height for best-fit selection (0 skips the step)

    Examples:
        Secure only:
        >>> config = NormalizerConfig(secure=True)

        Pick a single 720p MP4 rendition:
        >>> config = NormalizerConfig(
        ...     formats=["video/mp4"],
        ...     target_width=1280,
        ...     target_height=720,
        ... )
    """

    secure: bool | None = True
    formats: list[str] = field(default_factory=list)
    target_width: int = 0
    target_height: int = 0


__all__ = ["VastParserConfig", "NormalizerConfig"]
