"""
Trade Desk Idea Core — Calendar helpers

Every temporal engine takes its "now" as an explicit reference_time.
Calendar-day arithmetic happens in the reference's timezone so an idea
expiring late today is still "today" until midnight.
"""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Optional


def resolve_reference(reference_time: Optional[datetime] = None) -> datetime:
    """The given anchor, or current UTC time. Naive anchors are taken as UTC."""
    if reference_time is None:
        return datetime.now(timezone.utc)
    if reference_time.tzinfo is None:
        return reference_time.replace(tzinfo=timezone.utc)
    return reference_time


def align(dt: datetime, reference: datetime) -> datetime:
    """Express dt in the reference's timezone. Naive values are read in it."""
    tz = reference.tzinfo or timezone.utc
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def local_date(dt: datetime, reference: datetime) -> date:
    return align(dt, reference).date()


def calendar_days_between(reference: datetime, target: datetime) -> int:
    """floor((startOfDay(target) - startOfDay(reference)) / 1 day)."""
    return (local_date(target, reference) - local_date(reference, reference)).days


def start_of_day(reference: datetime) -> datetime:
    ref = resolve_reference(reference)
    return ref.replace(hour=0, minute=0, second=0, microsecond=0)


def subtract_months(reference: datetime, months: int) -> datetime:
    """Calendar month subtraction, clamping the day (Mar 31 - 1m = Feb 28/29)."""
    total = reference.year * 12 + (reference.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    day = min(reference.day, calendar.monthrange(year, month)[1])
    return reference.replace(year=year, month=month, day=day)


def posted_after_threshold(preset: str, reference: datetime) -> Optional[datetime]:
    """Lower bound on posting time for a date-range preset. None for "all"."""
    ref = resolve_reference(reference)
    if preset == "today":
        return start_of_day(ref)
    if preset == "7d":
        return ref - timedelta(days=7)
    if preset == "30d":
        return ref - timedelta(days=30)
    if preset == "3m":
        return subtract_months(ref, 3)
    if preset == "1y":
        return subtract_months(ref, 12)
    return None
