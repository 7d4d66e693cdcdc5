"""Document-level progress from per-page OCR progress."""

import math
from collections.abc import Callable

from src.utils.logger import get_logger

logger = get_logger(__name__)


def overall_progress(page_index: int, page_progress: float, page_count: int) -> int:
    """Map progress on one page to progress across the whole document.

    ``round(((page_index + p / 100) / page_count) * 100)`` with halves
    rounded up. Page ``i`` finishing and page ``i + 1`` starting map to
    the same value, so the signal is continuous across page boundaries.

    Args:
        page_index: Zero-based index of the page being recognised.
        page_progress: Progress on that page, clamped to [0, 100].
        page_count: Total number of pages; at least 1.

    Returns:
        Overall progress in [0, 100].
    """
    page_count = max(page_count, 1)
    p = min(max(page_progress, 0), 100)
    value = ((page_index + p / 100) / page_count) * 100
    return min(max(int(math.floor(value + 0.5)), 0), 100)


class ProgressAggregator:
    """Forwards monotonic document-level progress to a single callback.

    One aggregator belongs to one acquisition call; nothing is shared
    between documents.

    Args:
        page_count: Number of pages in the document.
        on_progress: Receives overall progress values. May be ``None``.
    """

    def __init__(
        self, page_count: int, on_progress: Callable[[int], None] | None = None
    ) -> None:
        self.page_count = max(page_count, 1)
        self.on_progress = on_progress
        self.last_reported = -1

    def report(self, page_index: int, page_progress: float) -> None:
        """Report progress on one page; values that would go backwards are dropped."""
        value = overall_progress(page_index, page_progress, self.page_count)
        if value <= self.last_reported:
            return
        self.last_reported = value
        logger.debug(
            "Page %d/%d at %s%% -> %d%%",
            page_index + 1,
            self.page_count,
            page_progress,
            value,
        )
        if self.on_progress is not None:
            self.on_progress(value)

    def for_page(self, page_index: int) -> Callable[[int], None]:
        """Return a per-page callback suitable for the OCR collaborator."""

        def _callback(page_progress: int) -> None:
            self.report(page_index, page_progress)

        return _callback
