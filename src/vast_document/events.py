"""VAST event type constants."""

from enum import Enum


class VastEvents(str, Enum):
    """Event type constants for structured logging."""

    # Parser events
    PARSE_STARTED = "vast.parse.started"
    PARSE_COMPLETED = "vast.parse.completed"
    PARSE_FAILED = "vast.parse.failed"
    VERSION_UNSUPPORTED = "vast.parse.version_unsupported"
    RAW_DATA_UNAVAILABLE = "vast.parse.raw_data_unavailable"
    SERIALIZE_COMPLETED = "vast.serialize.completed"

    # Validation events
    VALIDATE_STARTED = "vast.validate.started"
    VALIDATE_COMPLETED = "vast.validate.completed"
    VALIDATE_FAILED = "vast.validate.failed"
    ENTRIES_DROPPED = "vast.validate.entries_dropped"

    # Normalization events
    SECURE_APPLIED = "vast.secure.applied"
    FILTER_FORMAT_COMPLETED = "vast.filter.format.completed"
    FILTER_SIZE_SELECTED = "vast.filter.size.selected"
    FILTER_FAILED = "vast.filter.failed"
    NORMALIZE_COMPLETED = "vast.normalize.completed"

    # Assembly events
    EXTENSION_SKIPPED = "vast.assembly.extension_skipped"
    CLICK_TRACKING_SKIPPED = "vast.assembly.click_tracking_skipped"


__all__ = ["VastEvents"]
