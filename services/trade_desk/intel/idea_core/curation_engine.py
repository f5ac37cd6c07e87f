"""
Trade Desk Idea Core — Curation Engine

Desk-level shortlists and headline numbers.

Staleness (prune_stale):
    option/any idea with an expiry strictly before the reference -> drop
    day trades posted more than 48h ago                           -> drop
    swing or unspecified holding period posted more than 7d ago   -> drop

Dedupe (dedupe_and_limit):
    group key = (symbol, direction, option_type or "stock")
    keep the top N by confidence per group, then sort all by confidence desc.
"""

from datetime import datetime, timedelta

from .clock import align, local_date, resolve_reference
from .grade_engine import ELITE_GRADES, GRADE_GROUPS, band_of
from .models import DeskStats, TradeIdea
from .status_engine import is_active

DAY_TRADE_MAX_AGE = timedelta(hours=48)
SWING_MAX_AGE = timedelta(days=7)
DEFAULT_MAX_PER_GROUP = 2
TOP_CONVICTION_LIMIT = 4
NEW_IDEA_WINDOW = timedelta(hours=1)


def _confidence(idea: TradeIdea) -> float:
    return idea.confidence_score or 0.0


def prune_stale(ideas: list[TradeIdea], reference_time: datetime | None = None) -> list[TradeIdea]:
    ref = resolve_reference(reference_time)
    kept: list[TradeIdea] = []
    for idea in ideas:
        if idea.expiry_date is not None and align(idea.expiry_date, ref) < ref:
            continue
        if idea.timestamp is not None:
            age = ref - align(idea.timestamp, ref)
            period = (idea.holding_period or "").strip().lower()
            if period == "day" and age > DAY_TRADE_MAX_AGE:
                continue
            if period in ("", "swing") and age > SWING_MAX_AGE:
                continue
        kept.append(idea)
    return kept


def dedupe_and_limit(
    ideas: list[TradeIdea],
    reference_time: datetime | None = None,
    max_per_group: int = DEFAULT_MAX_PER_GROUP,
) -> list[TradeIdea]:
    groups: dict[tuple[str, str, str], list[TradeIdea]] = {}
    for idea in prune_stale(ideas, reference_time):
        key = (idea.symbol, idea.direction.value, idea.option_type or "stock")
        groups.setdefault(key, []).append(idea)

    result: list[TradeIdea] = []
    for members in groups.values():
        members = sorted(members, key=lambda i: -_confidence(i))
        result.extend(members[:max_per_group])
    return sorted(result, key=lambda i: -_confidence(i))


def top_conviction(ideas: list[TradeIdea], limit: int = TOP_CONVICTION_LIMIT) -> list[TradeIdea]:
    """Open A-grade ideas (A+/A/A-), highest confidence first."""
    elite = [i for i in ideas if is_active(i) and band_of(i) in ELITE_GRADES]
    return sorted(elite, key=lambda i: -_confidence(i))[:limit]


def desk_stats(ideas: list[TradeIdea], reference_time: datetime | None = None) -> DeskStats:
    ref = resolve_reference(reference_time)
    today = local_date(ref, ref)
    open_ideas = [i for i in ideas if is_active(i)]
    posted_today = sum(
        1 for i in open_ideas
        if i.timestamp is not None and local_date(i.timestamp, ref) == today
    )
    quality = sum(1 for i in open_ideas if band_of(i) in GRADE_GROUPS["quality"])
    if open_ideas:
        avg = round(sum(_confidence(i) for i in open_ideas) / len(open_ideas))
    else:
        avg = 0
    return DeskStats(
        total_open=len(open_ideas),
        posted_today=posted_today,
        quality=quality,
        avg_confidence=int(avg),
    )


def count_new_ideas(
    ideas: list[TradeIdea],
    reference_time: datetime | None = None,
    window: timedelta = NEW_IDEA_WINDOW,
) -> int:
    """Ideas posted less than `window` before the reference."""
    ref = resolve_reference(reference_time)
    count = 0
    for idea in ideas:
        if idea.timestamp is None:
            continue
        age = ref - align(idea.timestamp, ref)
        if timedelta(0) <= age < window:
            count += 1
    return count
