"""
VAST Document Package

A document model and normalization engine for IAB VAST (Video Ad Serving
Template) 2.0/3.0 ad responses.

This package provides:
- VAST, Ad, InLine, Wrapper, Creative and friends: the document model
- VastParser: XML decoding/encoding built on lxml
- Normalizer: validation, URL rewriting and media selection in one pass
- Configuration and settings classes

Usage:
    from vast_document import VAST, Normalizer, NormalizerConfig

    vast = VAST.from_xml(xml_bytes)
    vast.validate()
    vast.set_secure(True)
    vast.filter_format(["video/mp4"])
    vast.filter_size(1280, 720)
    output = vast.to_xml()

    # Or as one configured pass
    Normalizer(NormalizerConfig(formats=["mp4"], target_width=1280, target_height=720)).normalize(vast)
"""

from .ads import Ad, InLine, Wrapper
from .config import NormalizerConfig, VastParserConfig
from .creatives import (
    Companion,
    CompanionAds,
    CompanionAdsWrapper,
    CompanionWrapper,
    Creative,
    CreativeWrapper,
    Linear,
    LinearWrapper,
    NonLinear,
    NonLinearAds,
    NonLinearAdsWrapper,
    NonLinearWrapper,
)
from .document import VAST, DisplayManager
from .elements import (
    AdParameters,
    AdSystem,
    HTMLResource,
    Icon,
    Icons,
    Impression,
    MediaFile,
    Pricing,
    Resource,
    StaticResource,
    Tracking,
    VideoClick,
    VideoClicks,
    Viewable,
)
from .exceptions import (
    EmptyMediaError,
    NotInlineError,
    NotLinearError,
    VastConfigError,
    VastException,
    VastExtensionError,
    VastFieldError,
    VastFilterError,
    VastParseError,
    VastStructureError,
    VastValidationError,
    VastXMLError,
)
from .extension import Extension
from .helpers import secure_url
from .normalizer import Normalizer, select_by_format, select_by_size
from .parser import VastParser
from .primitives import CDATAString, Duration, Offset

__version__ = "1.0.0"
__author__ = "CTV Middleware Team"
__email__ = "dev@ctv-middleware.com"

__all__ = [
    # Document model
    "VAST",
    "DisplayManager",
    "Ad",
    "InLine",
    "Wrapper",
    "Creative",
    "CreativeWrapper",
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
    "Extension",
    # Leaf elements
    "AdSystem",
    "Pricing",
    "Impression",
    "Viewable",
    "VideoClick",
    "VideoClicks",
    "Tracking",
    "MediaFile",
    "StaticResource",
    "HTMLResource",
    "AdParameters",
    "Resource",
    "Icon",
    "Icons",
    # Primitive values
    "CDATAString",
    "Duration",
    "Offset",
    # Parsing and normalization
    "VastParser",
    "Normalizer",
    "select_by_format",
    "select_by_size",
    "secure_url",
    # Configuration
    "VastParserConfig",
    "NormalizerConfig",
    # Errors
    "VastException",
    "VastParseError",
    "VastXMLError",
    "VastExtensionError",
    "VastValidationError",
    "VastStructureError",
    "VastFieldError",
    "VastFilterError",
    "NotInlineError",
    "NotLinearError",
    "EmptyMediaError",
    "VastConfigError",
    # Package metadata
    "__version__",
    "__author__",
    "__email__",
]
