"""
Trade Desk Idea Core — Timeframe Engine

Trading-horizon buckets for ACTIVE ideas only. Resolved ideas are
horizon-irrelevant and never pass any bucket, including ALL.

Horizon h (calendar days from the reference day):
    - to expiry_date / exit_by when present
    - otherwise to the projected exit: timestamp + holding days
          day = 1, swing = 5, position = 20 (unspecified = swing)
    - no anchor at all (no expiry, unparseable timestamp): ALL only

    h <= 1       -> today_tomorrow   (overdue ideas included)
    2 <= h <= 5  -> few_days
    6 <= h <= 14 -> next_week
    h > 14       -> next_month
"""

from datetime import datetime, timedelta
from typing import Optional

from .clock import calendar_days_between, resolve_reference
from .models import TimeframeBucket, TimeframeCounts, TradeIdea
from .status_engine import is_active

HOLDING_DAYS: dict[str, int] = {
    "day": 1,
    "swing": 5,
    "position": 20,
}
DEFAULT_HOLDING_DAYS = HOLDING_DAYS["swing"]

TODAY_TOMORROW_MAX = 1
FEW_DAYS_MAX = 5
NEXT_WEEK_MAX = 14


def holding_days(idea: TradeIdea) -> int:
    key = (idea.holding_period or "").strip().lower()
    return HOLDING_DAYS.get(key, DEFAULT_HOLDING_DAYS)


def horizon_days(idea: TradeIdea, reference_time: datetime) -> Optional[int]:
    ref = resolve_reference(reference_time)
    anchor = idea.expiry_anchor
    if anchor is not None:
        return calendar_days_between(ref, anchor)
    if idea.timestamp is None:
        return None
    projected_exit = idea.timestamp + timedelta(days=holding_days(idea))
    return calendar_days_between(ref, projected_exit)


def classify_horizon(days: int) -> TimeframeBucket:
    if days <= TODAY_TOMORROW_MAX:
        return TimeframeBucket.TODAY_TOMORROW
    elif days <= FEW_DAYS_MAX:
        return TimeframeBucket.FEW_DAYS
    elif days <= NEXT_WEEK_MAX:
        return TimeframeBucket.NEXT_WEEK
    return TimeframeBucket.NEXT_MONTH


def classify_timeframe(idea: TradeIdea, reference_time: datetime) -> Optional[TimeframeBucket]:
    """Named bucket of an active idea; None for resolved or anchorless ideas."""
    if not is_active(idea):
        return None
    days = horizon_days(idea, reference_time)
    if days is None:
        return None
    return classify_horizon(days)


def bucket_by_timeframe(
    ideas: list[TradeIdea],
    bucket: TimeframeBucket | str,
    reference_time: datetime | None = None,
) -> list[TradeIdea]:
    """
    Active ideas in the bucket, input order preserved. ALL, and any
    unrecognized bucket name, keeps every active idea.
    """
    try:
        target = TimeframeBucket(bucket)
    except ValueError:
        target = TimeframeBucket.ALL
    ref = resolve_reference(reference_time)
    if target is TimeframeBucket.ALL:
        return [i for i in ideas if is_active(i)]
    return [i for i in ideas if classify_timeframe(i, ref) is target]


def count_by_timeframe(
    ideas: list[TradeIdea],
    reference_time: datetime | None = None,
) -> TimeframeCounts:
    ref = resolve_reference(reference_time)
    tally = {b: 0 for b in TimeframeBucket}
    for idea in ideas:
        if not is_active(idea):
            continue
        tally[TimeframeBucket.ALL] += 1
        bucket = classify_timeframe(idea, ref)
        if bucket is not None:
            tally[bucket] += 1
    return TimeframeCounts(
        all=tally[TimeframeBucket.ALL],
        today_tomorrow=tally[TimeframeBucket.TODAY_TOMORROW],
        few_days=tally[TimeframeBucket.FEW_DAYS],
        next_week=tally[TimeframeBucket.NEXT_WEEK],
        next_month=tally[TimeframeBucket.NEXT_MONTH],
    )
