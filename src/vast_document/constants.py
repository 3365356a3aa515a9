"""Read-only lookup tables shared across the package."""

from types import MappingProxyType

TRACK_IMPRESSION = "impression"
TRACK_CLICK = "click"
TRACK_START = "start"
TRACK_FIRST_QUARTILE = "firstQuartile"
TRACK_MIDPOINT = "midpoint"
TRACK_THIRD_QUARTILE = "thirdQuartile"
TRACK_COMPLETE = "complete"
TRACK_MUTE = "mute"
TRACK_UNMUTE = "unmute"
TRACK_PAUSE = "pause"
TRACK_REWIND = "rewind"
TRACK_RESUME = "resume"
TRACK_FULLSCREEN = "fullscreen"
TRACK_EXPAND = "expand"
TRACK_COLLAPSE = "collapse"
TRACK_CLOSE = "close"
TRACK_VIEWABLE = "viewable"

# Event name -> short alias used by the VN tracking pixel
VN_TRACKING = MappingProxyType(
    {
        TRACK_CLICK: "click",
        TRACK_START: "start",
        TRACK_FIRST_QUARTILE: "q1",
        TRACK_MIDPOINT: "q2",
        TRACK_THIRD_QUARTILE: "q3",
        TRACK_COMPLETE: "end",
        TRACK_MUTE: "mute",
        TRACK_UNMUTE: "unmute",
        TRACK_PAUSE: "pause",
        TRACK_REWIND: "rewind",
        TRACK_RESUME: "resume",
        TRACK_FULLSCREEN: "fullscreen",
        TRACK_EXPAND: "expand",
        TRACK_COLLAPSE: "collapse",
        TRACK_CLOSE: "close",
    }
)

# Short format name -> MIME type
MIME_TYPES = MappingProxyType(
    {
        "mp4": "video/mp4",
        "webm": "video/webm",
        "mpg": "video/mpeg",
    }
)

SUPPORTED_VERSIONS = ("2.0", "3.0")


__all__ = [
    "TRACK_IMPRESSION",
    "TRACK_CLICK",
    "TRACK_START",
    "TRACK_FIRST_QUARTILE",
    "TRACK_MIDPOINT",
    "TRACK_THIRD_QUARTILE",
    "TRACK_COMPLETE",
    "TRACK_MUTE",
    "TRACK_UNMUTE",
    "TRACK_PAUSE",
    "TRACK_REWIND",
    "TRACK_RESUME",
    "TRACK_FULLSCREEN",
    "TRACK_EXPAND",
    "TRACK_COLLAPSE",
    "TRACK_CLOSE",
    "TRACK_VIEWABLE",
    "VN_TRACKING",
    "MIME_TYPES",
    "SUPPORTED_VERSIONS",
]
