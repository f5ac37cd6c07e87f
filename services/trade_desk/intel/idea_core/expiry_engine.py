"""
Trade Desk Idea Core — Expiry Engine

Days-to-expiry bucketing on calendar days, never wall-clock hours.

    d = floor((startOfDay(expiry) - startOfDay(reference)) / 1 day)

Buckets are disjoint and exhaustive over the integers:
    d < 0          -> expired
    0   <= d <= 7   -> 7d
    7   <  d <= 14  -> 14d
    14  <  d <= 60  -> 30d
    60  <  d <= 270 -> 90d
    d > 270        -> leaps

Ideas without expiry_date/exit_by are counted in `all` only.
"""

from datetime import datetime
from typing import Optional

from .clock import calendar_days_between, resolve_reference
from .models import ExpiryBucket, ExpiryCounts, TradeIdea

D7_MAX = 7
D14_MAX = 14
D30_MAX = 60
D90_MAX = 270


class ExpiryEngine:
    """Stateless expiry classification anchored on an explicit reference time."""

    def __init__(self, reference_time: datetime | None = None):
        self._reference_time = reference_time

    @property
    def reference_time(self) -> datetime:
        return resolve_reference(self._reference_time)

    @staticmethod
    def classify_days(days: int) -> ExpiryBucket:
        if days < 0:
            return ExpiryBucket.EXPIRED
        elif days <= D7_MAX:
            return ExpiryBucket.D7
        elif days <= D14_MAX:
            return ExpiryBucket.D14
        elif days <= D30_MAX:
            return ExpiryBucket.D30
        elif days <= D90_MAX:
            return ExpiryBucket.D90
        else:
            return ExpiryBucket.LEAPS

    def days_to_expiry(self, idea: TradeIdea) -> Optional[int]:
        anchor = idea.expiry_anchor
        if anchor is None:
            return None
        return calendar_days_between(self.reference_time, anchor)

    def classify(self, idea: TradeIdea) -> Optional[ExpiryBucket]:
        days = self.days_to_expiry(idea)
        if days is None:
            return None
        return self.classify_days(days)

    def count(self, ideas: list[TradeIdea]) -> ExpiryCounts:
        tally = {b: 0 for b in ExpiryBucket}
        for idea in ideas:
            bucket = self.classify(idea)
            if bucket is not None:
                tally[bucket] += 1
        return ExpiryCounts(
            expired=tally[ExpiryBucket.EXPIRED],
            d7=tally[ExpiryBucket.D7],
            d14=tally[ExpiryBucket.D14],
            d30=tally[ExpiryBucket.D30],
            d90=tally[ExpiryBucket.D90],
            leaps=tally[ExpiryBucket.LEAPS],
            all=len(ideas),
        )

    def select(self, ideas: list[TradeIdea], bucket: ExpiryBucket | str) -> list[TradeIdea]:
        """
        List-side counterpart of count(): ideas in one bucket, input order kept.
        "all" and unrecognized bucket names select every idea.
        """
        try:
            target = ExpiryBucket(bucket)
        except ValueError:
            return list(ideas)
        return [i for i in ideas if self.classify(i) is target]


def bucket_by_expiry(
    ideas: list[TradeIdea],
    reference_time: datetime | None = None,
) -> ExpiryCounts:
    return ExpiryEngine(reference_time).count(ideas)


def filter_by_expiry(
    ideas: list[TradeIdea],
    bucket: ExpiryBucket | str,
    reference_time: datetime | None = None,
) -> list[TradeIdea]:
    return ExpiryEngine(reference_time).select(ideas, bucket)
