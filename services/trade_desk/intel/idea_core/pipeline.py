"""
Trade Desk Idea Core — Desk Pipeline

Single pure composition of the engines into one DeskView:

    filter -> {expiry, timeframe, status} counts -> rank -> split
           -> timeframe select (active) -> paginate (active) -> group

Count populations:
    expiry_counts     ideas filtered by EXPIRY_COUNT_DIMENSIONS only
    status_counts     ideas filtered by every dimension except outcome_view
    timeframe_counts  the fully filtered set (active ideas only)

None of them ever sees the paginated slice.
"""

from datetime import datetime, timedelta
from typing import Any, Optional

from shared.config import DeskSettings
from shared.logutil import summarize

from .clock import resolve_reference
from .criteria import FilterCriteria
from .expiry_engine import bucket_by_expiry
from .filter_engine import ALL_DIMENSIONS, EXPIRY_COUNT_DIMENSIONS, FilterEngine
from .group_engine import GroupEngine
from .models import DeskView, OutcomeStatus, StatusCounts, TradeIdea
from .rank_engine import RankEngine
from .status_engine import normalize_outcome_status, split_active_resolved
from .timeframe_engine import bucket_by_timeframe, count_by_timeframe
from .window_engine import paginate

STATUS_COUNT_DIMENSIONS: tuple[str, ...] = tuple(
    d for d in ALL_DIMENSIONS if d != "outcome_view"
)


def count_statuses(ideas: list[TradeIdea]) -> StatusCounts:
    tally = {s: 0 for s in OutcomeStatus}
    for idea in ideas:
        tally[normalize_outcome_status(idea.outcome_status)] += 1
    return StatusCounts(
        active=tally[OutcomeStatus.OPEN],
        won=tally[OutcomeStatus.HIT_TARGET],
        lost=tally[OutcomeStatus.HIT_STOP],
        expired=tally[OutcomeStatus.EXPIRED],
    )


def build_desk_view(
    ideas: list[TradeIdea],
    criteria: Optional[FilterCriteria] = None,
    reference_time: Optional[datetime] = None,
    visible_count: Optional[int] = None,
    settings: Optional[DeskSettings] = None,
    logger: Any = None,
) -> DeskView:
    """
    Primary entry point. Derive every list and count for one snapshot.

    Deterministic for identical (ideas, criteria, reference_time,
    visible_count). Inputs are never mutated.
    """
    settings = settings or DeskSettings()
    criteria = criteria or FilterCriteria()
    ref = resolve_reference(reference_time)
    if visible_count is None:
        visible_count = settings.page_size

    filters = FilterEngine(criteria, ref)
    filtered = filters.apply(ideas)

    expiry_counts = bucket_by_expiry(filters.apply(ideas, EXPIRY_COUNT_DIMENSIONS), ref)
    status_counts = count_statuses(filters.apply(ideas, STATUS_COUNT_DIMENSIONS))
    timeframe_counts = count_by_timeframe(filtered, ref)

    ranker = RankEngine(ref, timedelta(minutes=settings.fresh_window_minutes))
    ranked = ranker.rank(filtered)
    active_ranked, resolved = split_active_resolved(ranked)
    active = bucket_by_timeframe(active_ranked, criteria.timeframe, ref)

    visible_active = paginate(active, visible_count)
    groups = GroupEngine().build_groups(visible_active + resolved)

    if logger is not None:
        logger.debug("desk view: " + summarize({
            "input": len(ideas),
            "filtered": len(filtered),
            "active": len(active),
            "visible": len(visible_active),
            "resolved": len(resolved),
            "groups": len(groups),
        }))

    return DeskView(
        reference_time=ref,
        filtered=tuple(filtered),
        expiry_counts=expiry_counts,
        timeframe_counts=timeframe_counts,
        status_counts=status_counts,
        active=tuple(active),
        resolved=tuple(resolved),
        visible_active=tuple(visible_active),
        visible_count=max(0, visible_count),
        has_more=len(active) > len(visible_active),
        groups=tuple(groups),
    )
