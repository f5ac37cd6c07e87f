"""
Trade Desk Idea Core — Desk Session

Per-consumer state around the pure pipeline: the current idea snapshot, the
filter criteria and the pagination window. Each refresh replaces the
snapshot wholesale; every view is recomputed from scratch.

Not thread-safe. One session per consumer.
"""

from datetime import datetime, timedelta
from typing import Any, Mapping, Optional, Union

from shared.config import DeskSettings, load_desk_settings
from shared.logutil import LogUtil

from .clock import resolve_reference
from .criteria import FilterCriteria
from .curation_engine import count_new_ideas, desk_stats
from .idea_adapter import adapt_idea
from .market_engine import backfill_current_prices, has_upcoming_earnings
from .models import Catalyst, DeskStats, DeskView, MarketQuote, TradeIdea
from .pipeline import build_desk_view
from .status_engine import is_active
from .window_engine import PaginationWindow

SERVICE_NAME = "trade_desk"

IdeaInput = Union[TradeIdea, Mapping[str, Any]]


class DeskSession:

    def __init__(
        self,
        settings: Optional[DeskSettings] = None,
        logger: Optional[LogUtil] = None,
    ):
        self.settings = settings or load_desk_settings()
        self.logger = logger or LogUtil(SERVICE_NAME)
        self.logger.configure_from_config(self.settings)
        self._pipeline_log = self.logger.child("pipeline")

        self.window = PaginationWindow(self.settings.page_size, self.settings.page_step)
        self.criteria = FilterCriteria()
        self.window.sync(self.criteria)
        self._ideas: list[TradeIdea] = []

    @property
    def ideas(self) -> list[TradeIdea]:
        return list(self._ideas)

    def replace_ideas(self, ideas: list[IdeaInput]) -> int:
        """
        Full replacement of the snapshot. Raw mappings go through the idea
        adapter; records it rejects are dropped. Returns the kept count.
        """
        kept: list[TradeIdea] = []
        for item in ideas:
            if isinstance(item, TradeIdea):
                kept.append(item)
                continue
            adapted = adapt_idea(item)
            if adapted is not None:
                kept.append(adapted)
        self._ideas = kept

        dropped = len(ideas) - len(self._ideas)
        if dropped:
            self.logger.warn(f"snapshot refresh dropped {dropped} malformed idea(s)")
        self.logger.debug(f"snapshot replaced: {len(self._ideas)} idea(s)", emoji="🔄")
        return len(self._ideas)

    def backfill_prices(self, quotes: list[MarketQuote]) -> None:
        self._ideas = backfill_current_prices(self._ideas, quotes)

    def update_criteria(
        self,
        criteria: Optional[Union[FilterCriteria, Mapping[str, Any]]] = None,
        **changes: Any,
    ) -> FilterCriteria:
        """
        Replace (criteria given) or patch (keyword changes) the filter state.
        A change resets the pagination window.
        """
        if criteria is None:
            new = self.criteria.updated(**changes)
        elif isinstance(criteria, FilterCriteria):
            new = criteria.updated(**changes) if changes else criteria
        else:
            new = FilterCriteria.model_validate(dict(criteria)).updated(**changes)

        self.criteria = new
        if self.window.sync(new):
            self.logger.debug(
                f"criteria changed ({', '.join(new.active_dimensions()) or 'none'}); "
                f"window reset to {self.window.visible_count}"
            )
        return new

    def view(self, reference_time: Optional[datetime] = None) -> DeskView:
        return build_desk_view(
            self._ideas,
            criteria=self.criteria,
            reference_time=reference_time,
            visible_count=self.window.visible_count,
            settings=self.settings,
            logger=self._pipeline_log,
        )

    def load_more(self, reference_time: Optional[datetime] = None) -> DeskView:
        """Grow the window by one step (capped at the active total) and re-render."""
        ref = resolve_reference(reference_time)
        total = len(self.view(ref).active)
        self.window.expand(total)
        return self.view(ref)

    # -------------------------------------------------
    # Desk header
    # -------------------------------------------------

    def stats(self, reference_time: Optional[datetime] = None) -> DeskStats:
        return desk_stats(self._ideas, reference_time)

    def new_idea_count(self, reference_time: Optional[datetime] = None) -> int:
        window = timedelta(minutes=self.settings.new_idea_minutes)
        return count_new_ideas(self._ideas, reference_time, window)

    def earnings_symbols(
        self,
        catalysts: list[Catalyst],
        reference_time: Optional[datetime] = None,
    ) -> set[str]:
        """Symbols of open ideas with earnings inside the configured look-ahead."""
        ref = resolve_reference(reference_time)
        return {
            idea.symbol
            for idea in self._ideas
            if is_active(idea)
            and has_upcoming_earnings(idea, catalysts, ref, self.settings.earnings_window_days)
        }
