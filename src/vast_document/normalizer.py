"""Media selection and the post-parse normalization pipeline."""

from dataclasses import replace
from typing import TYPE_CHECKING

from .config import NormalizerConfig
from .elements import MediaFile
from .events import VastEvents
from .exceptions import EmptyMediaError, VastFilterError
from .helpers import matches_format
from .log_config import DocumentContext, get_context_logger

if TYPE_CHECKING:
    from .document import VAST


def select_by_format(media_files: list[MediaFile], formats: list[str]) -> list[MediaFile]:
    """Return the media files whose type is one of ``formats``, in document order.

    A format is either a MIME type (``video/mp4``) or a short alias from
    ``MIME_TYPES`` (``mp4``).

    Raises:
        EmptyMediaError: If nothing matches
    """
    selected = [media for media in media_files if matches_format(media.type, formats)]
    if not selected:
        raise EmptyMediaError("format", context={"formats": ",".join(formats)})
    return selected


def area_deviation(media: MediaFile, target_area: int) -> float:
    """Absolute percentage difference between the media area and the target area."""
    return abs(media.area * 100.0 / target_area - 100.0)


def select_by_size(media_files: list[MediaFile], width: int, height: int) -> MediaFile:
    """Pick the media file closest to a ``width`` x ``height`` slot.

    Only media with the same orientation as the target compete (square media
    and square targets never match). The candidate whose pixel area deviates
    least from the target area wins; the first one wins a tie. The returned
    copy declares the target dimensions; the source list is not modified.

    Raises:
        VastFilterError: If either target dimension is not positive
        EmptyMediaError: If no candidate has the target orientation

    Examples:
        >>> media = [MediaFile(uri="a", type="video/mp4", width=640, height=360),
        ...          MediaFile(uri="b", type="video/mp4", width=1920, height=1080)]
        >>> select_by_size(media, 1920, 1080).uri
        'b'
    """
    if width <= 0 or height <= 0:
        raise VastFilterError(
            "invalid target size", context={"width": width, "height": height}
        )
    diff = width - height
    orientation = (diff > 0) - (diff < 0)
    candidates = [
        media for media in media_files if orientation != 0 and media.orientation == orientation
    ]
    if not candidates:
        raise EmptyMediaError("size", context={"width": width, "height": height})

    target_area = width * height
    best = candidates[0]
    best_deviation = area_deviation(best, target_area)
    for media in candidates[1:]:
        deviation = area_deviation(media, target_area)
        if deviation < best_deviation:
            best, best_deviation = media, deviation

    return replace(best, width=width, height=height)


class Normalizer:
    """Runs validation, URL rewriting and media selection over a document."""

    def __init__(self, config: NormalizerConfig | None = None):
        self.logger = get_context_logger("vast_normalizer")
        self.config = config if config is not None else NormalizerConfig()

    def normalize(self, vast: "VAST") -> "VAST":
        """Normalize ``vast`` in place and return it.

        Steps: validate, then set_secure when ``config.secure`` is not None,
        then filter_format when formats are configured, then filter_size when
        both target dimensions are configured.

        Raises:
            VastValidationError: If the document is structurally invalid
            VastFilterError: If media selection cannot be satisfied
        """
        first_id = vast.ads[0].id if vast.ads else None
        with DocumentContext(vast_version=vast.version, ad_id=first_id):
            try:
                vast.validate()
                if self.config.secure is not None:
                    vast.set_secure(self.config.secure)
                if self.config.formats:
                    vast.filter_format(self.config.formats)
                if self.config.target_width and self.config.target_height:
                    vast.filter_size(self.config.target_width, self.config.target_height)
            except VastFilterError as e:
                self.logger.warning(VastEvents.FILTER_FAILED, error=str(e))
                raise

            self.logger.info(
                VastEvents.NORMALIZE_COMPLETED,
                ads_count=len(vast.ads),
                secure=self.config.secure,
                formats=self.config.formats,
            )
        return vast


__all__ = ["select_by_format", "select_by_size", "area_deviation", "Normalizer"]
