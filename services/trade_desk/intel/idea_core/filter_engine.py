"""
Trade Desk Idea Core — Filter Engine

Independent predicates over single ideas, composed with AND.

Each dimension of FilterCriteria maps to one predicate. A dimension set to
"all" (or empty text) contributes no predicate. Because the result is the
intersection of per-idea tests, the order predicates are evaluated in cannot
change the outcome, and input order is preserved (no implicit sort).

Dimension groups:
    EXPIRY_COUNT_DIMENSIONS   gate the expiry bucket counts
                              (asset_type, quality_grade, symbol,
                               status_view, outcome_view)
    ALL_DIMENSIONS            gate the displayed list
"""

from datetime import datetime
from typing import Callable, Iterable, Optional

from .clock import align, posted_after_threshold, resolve_reference
from .criteria import ALL, FilterCriteria
from .expiry_engine import ExpiryEngine
from .grade_engine import matches_grade
from .models import OutcomeStatus, TradeIdea
from .status_engine import normalize_outcome_status, normalize_publish_status

Predicate = Callable[[TradeIdea], bool]

_OUTCOME_VIEWS: dict[str, frozenset[OutcomeStatus]] = {
    "active": frozenset({OutcomeStatus.OPEN}),
    "won": frozenset({OutcomeStatus.HIT_TARGET}),
    "lost": frozenset({OutcomeStatus.HIT_STOP}),
    "expired": frozenset({OutcomeStatus.EXPIRED}),
}

ALL_DIMENSIONS: tuple[str, ...] = (
    "text_search",
    "direction",
    "source",
    "asset_type",
    "quality_grade",
    "date_range",
    "source_tab",
    "status_view",
    "symbol",
    "outcome_view",
    "expiry_bucket",
)

EXPIRY_COUNT_DIMENSIONS: tuple[str, ...] = (
    "asset_type",
    "quality_grade",
    "symbol",
    "status_view",
    "outcome_view",
)


def is_day_trade(idea: TradeIdea) -> bool:
    if (idea.holding_period or "").strip().lower() == "day":
        return True
    return "day" in (idea.session_context or "").lower()


class FilterEngine:
    """
    Builds the predicate set for a FilterCriteria and applies it.

    reference_time anchors the date-range and expiry predicates.
    """

    def __init__(self, criteria: FilterCriteria, reference_time: datetime | None = None):
        self.criteria = criteria
        self.reference_time = resolve_reference(reference_time)

    # -------------------------------------------------
    # Per-dimension predicates (None = dimension off)
    # -------------------------------------------------

    def _text_search(self) -> Optional[Predicate]:
        needle = self.criteria.text_search.lower()
        if not needle:
            return None
        return lambda i: needle in i.symbol.lower() or needle in (i.catalyst or "").lower()

    def _direction(self) -> Optional[Predicate]:
        wanted = self.criteria.direction
        if wanted == ALL:
            return None
        if wanted == "day_trade":
            return is_day_trade
        return lambda i: i.direction.value == wanted

    def _source(self) -> Optional[Predicate]:
        wanted = self.criteria.source
        if wanted == ALL:
            return None
        return lambda i: i.source.value == wanted

    def _asset_type(self) -> Optional[Predicate]:
        wanted = self.criteria.asset_type
        if wanted == ALL:
            return None
        return lambda i: i.asset_type.value == wanted

    def _quality_grade(self) -> Optional[Predicate]:
        wanted = self.criteria.quality_grade
        if wanted == ALL:
            return None
        return lambda i: matches_grade(i, wanted)

    def _date_range(self) -> Optional[Predicate]:
        threshold = posted_after_threshold(self.criteria.date_range, self.reference_time)
        if threshold is None:
            return None
        ref = self.reference_time
        return lambda i: i.timestamp is not None and align(i.timestamp, ref) >= threshold

    def _source_tab(self) -> Optional[Predicate]:
        tab = self.criteria.source_tab
        if tab == ALL:
            return None
        if tab == "lotto":
            return lambda i: bool(i.is_lotto_play)
        return lambda i: i.source.value == tab

    def _status_view(self) -> Optional[Predicate]:
        view = self.criteria.status_view
        if view == ALL:
            return None
        return lambda i: normalize_publish_status(i.status).value == view

    def _symbol(self) -> Optional[Predicate]:
        needle = self.criteria.symbol.upper()
        if not needle:
            return None
        return lambda i: needle in i.symbol.upper()

    def _outcome_view(self) -> Optional[Predicate]:
        allowed = _OUTCOME_VIEWS.get(self.criteria.outcome_view)
        if allowed is None:
            return None
        return lambda i: normalize_outcome_status(i.outcome_status) in allowed

    def _expiry_bucket(self) -> Optional[Predicate]:
        bucket = self.criteria.expiry_bucket
        if bucket == ALL:
            return None
        engine = ExpiryEngine(self.reference_time)

        def _in_bucket(idea: TradeIdea) -> bool:
            classified = engine.classify(idea)
            return classified is not None and classified.value == bucket

        return _in_bucket

    # -------------------------------------------------
    # Composition
    # -------------------------------------------------

    def predicates(self, dimensions: Iterable[str] = ALL_DIMENSIONS) -> list[Predicate]:
        active: list[Predicate] = []
        for name in dimensions:
            build = getattr(self, f"_{name}", None)
            if build is None:
                raise ValueError(f"unknown filter dimension: {name}")
            pred = build()
            if pred is not None:
                active.append(pred)
        return active

    def apply(
        self,
        ideas: list[TradeIdea],
        dimensions: Iterable[str] = ALL_DIMENSIONS,
    ) -> list[TradeIdea]:
        preds = self.predicates(dimensions)
        if not preds:
            return list(ideas)
        return [i for i in ideas if all(p(i) for p in preds)]


def apply_filters(
    ideas: list[TradeIdea],
    criteria: FilterCriteria,
    reference_time: datetime | None = None,
    dimensions: Iterable[str] = ALL_DIMENSIONS,
) -> list[TradeIdea]:
    """Primary entry point: ideas matching every active dimension, in input order."""
    return FilterEngine(criteria, reference_time).apply(ideas, dimensions)
