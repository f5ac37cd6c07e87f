"""
Trade Desk Idea Core — Window Engine

Pagination over the ranked ACTIVE set.

Rules:
    - The visible set is a prefix slice of the ranked active ideas.
    - Expanding is monotonic; the same visible_count always yields the same
      slice for the same input.
    - Any criteria change resets visible_count to its initial value.
    - No count anywhere is derived from the slice.
"""

from typing import Optional

from .criteria import FilterCriteria
from .models import TradeIdea

DEFAULT_PAGE_SIZE = 12
DEFAULT_PAGE_STEP = 12


def paginate(active_ideas: list[TradeIdea], visible_count: int) -> list[TradeIdea]:
    """Prefix slice. Negative counts behave as 0."""
    return list(active_ideas[: max(0, visible_count)])


class PaginationWindow:
    """
    Visible-count state for one desk list.

    sync() compares the criteria fingerprint against the last one seen and
    resets on change, so a "load more" never survives a filter edit.
    """

    def __init__(self, initial: int = DEFAULT_PAGE_SIZE, step: int = DEFAULT_PAGE_STEP):
        if initial < 0 or step <= 0:
            raise ValueError(f"invalid window: initial={initial} step={step}")
        self.initial = initial
        self.step = step
        self._visible_count = initial
        self._fingerprint: Optional[tuple] = None

    @property
    def visible_count(self) -> int:
        return self._visible_count

    def expand(self, total: Optional[int] = None) -> int:
        """Grow by one step. Capped at total when given, never shrinks."""
        grown = self._visible_count + self.step
        if total is not None:
            grown = max(self._visible_count, min(grown, total))
        self._visible_count = grown
        return self._visible_count

    def reset(self) -> int:
        self._visible_count = self.initial
        return self._visible_count

    def sync(self, criteria: FilterCriteria) -> bool:
        """Reset when criteria differ from the last sync. Returns True on reset."""
        fp = criteria.fingerprint()
        changed = self._fingerprint is not None and fp != self._fingerprint
        self._fingerprint = fp
        if changed:
            self.reset()
        return changed

    def apply(self, active_ideas: list[TradeIdea]) -> list[TradeIdea]:
        return paginate(active_ideas, self._visible_count)

    def has_more(self, total: int) -> bool:
        return total > self._visible_count
