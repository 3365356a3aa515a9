"""Primitive value types: CDATA strings, durations and time offsets."""

from dataclasses import dataclass

from lxml import etree

from .exceptions import VastDurationError
from .xml_utils import set_cdata, text_of


@dataclass
class CDATAString:
    """A string serialized inside a CDATA section."""

    cdata: str = ""

    def __bool__(self) -> bool:
        return bool(self.cdata)

    def __str__(self) -> str:
        return self.cdata

    @classmethod
    def from_element(cls, elem: etree._Element | None) -> "CDATAString":
        return cls(text_of(elem))

    def to_element(self, tag: str) -> etree._Element:
        return set_cdata(etree.Element(tag), self.cdata)


def _parse_clock(text: str) -> float:
    """Parse ``HH:MM:SS`` or ``HH:MM:SS.mmm`` into seconds.

    Raises:
        VastDurationError: If the text is not a clock value
    """
    parts = text.strip().split(":")
    if len(parts) != 3:
        raise VastDurationError(
            f"Invalid duration format: {text}. Expected HH:MM:SS",
            duration_text=text,
        )
    try:
        hours, minutes = int(parts[0]), int(parts[1])
        seconds = float(parts[2])
    except ValueError as e:
        raise VastDurationError(
            f"Failed to parse duration value: {str(e)}",
            duration_text=text,
        ) from e
    return hours * 3600 + minutes * 60 + seconds


@dataclass
class Duration:
    """A time span in ``HH:MM:SS[.mmm]`` form, kept verbatim."""

    value: str = ""

    def __bool__(self) -> bool:
        return bool(self.value)

    def __str__(self) -> str:
        return self.value

    def to_seconds(self) -> float:
        """Convert the clock value to seconds.

        Raises:
            VastDurationError: If the value is not ``HH:MM:SS[.mmm]``
        """
        return _parse_clock(self.value)


@dataclass
class Offset:
    """A position in a creative, either a clock value or a percentage (``25%``)."""

    value: str = ""

    def __bool__(self) -> bool:
        return bool(self.value)

    def __str__(self) -> str:
        return self.value

    @property
    def is_percent(self) -> bool:
        return self.value.strip().endswith("%")

    def to_seconds(self, total: float | None = None) -> float:
        """Resolve the offset to seconds.

        Args:
            total: Creative duration in seconds, required for percentage offsets

        Raises:
            VastDurationError: If the value is malformed or ``total`` is missing
        """
        if not self.is_percent:
            return _parse_clock(self.value)
        if total is None:
            raise VastDurationError(
                "Percentage offset needs the creative duration",
                duration_text=self.value,
            )
        try:
            percent = float(self.value.strip()[:-1])
        except ValueError as e:
            raise VastDurationError(
                f"Failed to parse percentage offset: {str(e)}",
                duration_text=self.value,
            ) from e
        return total * percent / 100.0


__all__ = ["CDATAString", "Duration", "Offset"]
