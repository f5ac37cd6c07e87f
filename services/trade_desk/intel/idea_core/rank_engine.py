"""
Trade Desk Idea Core — Rank Engine

Primary ordering (tier-based):
    tier 0  FRESH     open, posted within the fresh window (default 2h)
    tier 1  ACTIVE    open, not fresh (or no parseable timestamp)
    tier 2  RESOLVED  hit_target / hit_stop / expired

    sort key: tier asc, then timestamp desc; missing timestamps last within
    their tier. Python's sort is stable, so exact ties keep input order.

Scalar priority (single-value contexts):
    score = confidence * 0.4 + risk_reward * 15 + hit_probability * 0.3

    A fixed linear heuristic, not a probability. No cross-instrument
    normalization. Missing inputs count as 0.
"""

from datetime import datetime, timedelta

from .clock import align, resolve_reference
from .models import PriorityTier, TradeIdea
from .status_engine import is_active

DEFAULT_FRESH_WINDOW = timedelta(hours=2)

SCORE_WEIGHT_CONFIDENCE = 0.4
SCORE_WEIGHT_RISK_REWARD = 15.0
SCORE_WEIGHT_HIT_PROBABILITY = 0.3


class RankEngine:
    """Deterministic tier + recency ranking."""

    def __init__(
        self,
        reference_time: datetime | None = None,
        fresh_window: timedelta = DEFAULT_FRESH_WINDOW,
    ):
        self.reference_time = resolve_reference(reference_time)
        self.fresh_window = fresh_window

    def is_fresh(self, idea: TradeIdea) -> bool:
        """Open and posted no earlier than reference - fresh_window."""
        if not is_active(idea) or idea.timestamp is None:
            return False
        posted = align(idea.timestamp, self.reference_time)
        return posted >= self.reference_time - self.fresh_window

    def tier(self, idea: TradeIdea) -> PriorityTier:
        if not is_active(idea):
            return PriorityTier.RESOLVED
        if self.is_fresh(idea):
            return PriorityTier.FRESH
        return PriorityTier.ACTIVE

    def _sort_key(self, idea: TradeIdea) -> tuple:
        if idea.timestamp is None:
            return (int(self.tier(idea)), 1, 0.0)
        return (int(self.tier(idea)), 0, -align(idea.timestamp, self.reference_time).timestamp())

    def rank(self, ideas: list[TradeIdea]) -> list[TradeIdea]:
        return sorted(ideas, key=self._sort_key)


def priority_tier(
    idea: TradeIdea,
    reference_time: datetime | None = None,
    fresh_window: timedelta = DEFAULT_FRESH_WINDOW,
) -> PriorityTier:
    return RankEngine(reference_time, fresh_window).tier(idea)


def rank(
    ideas: list[TradeIdea],
    reference_time: datetime | None = None,
    fresh_window: timedelta = DEFAULT_FRESH_WINDOW,
) -> list[TradeIdea]:
    return RankEngine(reference_time, fresh_window).rank(ideas)


def priority_score(idea: TradeIdea) -> float:
    confidence = idea.confidence_score or 0.0
    risk_reward = idea.risk_reward_ratio or 0.0
    hit_probability = idea.target_hit_probability or 0.0
    return (
        SCORE_WEIGHT_CONFIDENCE * confidence
        + SCORE_WEIGHT_RISK_REWARD * risk_reward
        + SCORE_WEIGHT_HIT_PROBABILITY * hit_probability
    )


def rank_by_score(ideas: list[TradeIdea]) -> list[TradeIdea]:
    """Highest priority_score first; stable for equal scores."""
    return sorted(ideas, key=lambda i: -priority_score(i))
