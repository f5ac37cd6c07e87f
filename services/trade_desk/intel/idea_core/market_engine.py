"""
Trade Desk Idea Core — Market Engine

Side inputs that decorate ideas but never participate in filtering:
    - quotes backfill a missing current_price (latest quote per symbol wins)
    - catalysts answer "is earnings coming up for this idea?"
"""

from dataclasses import replace
from datetime import datetime, timedelta

from .clock import align, resolve_reference
from .models import Catalyst, MarketQuote, TradeIdea

EARNINGS_EVENT = "earnings"
DEFAULT_EARNINGS_WINDOW_DAYS = 7


def latest_prices(
    quotes: list[MarketQuote],
    reference_time: datetime | None = None,
) -> dict[str, float]:
    """
    Symbol -> price. For repeated symbols the quote with the newest timestamp
    wins; untimestamped quotes only fill gaps. Naive quote times are read in
    the reference timezone.
    """
    ref = resolve_reference(reference_time)
    best: dict[str, MarketQuote] = {}
    for q in quotes:
        key = q.symbol.strip().upper()
        if not key or q.current_price is None:
            continue
        held = best.get(key)
        if held is None:
            best[key] = q
        elif q.timestamp is None:
            continue
        elif held.timestamp is None or align(q.timestamp, ref) >= align(held.timestamp, ref):
            best[key] = q
    return {k: q.current_price for k, q in best.items()}


def backfill_current_prices(
    ideas: list[TradeIdea],
    quotes: list[MarketQuote],
    reference_time: datetime | None = None,
) -> list[TradeIdea]:
    """New idea list with missing current_price filled in. Inputs are untouched."""
    prices = latest_prices(quotes, reference_time)
    out: list[TradeIdea] = []
    for idea in ideas:
        if idea.current_price is None and idea.symbol in prices:
            out.append(replace(idea, current_price=prices[idea.symbol]))
        else:
            out.append(idea)
    return out


def has_upcoming_earnings(
    idea: TradeIdea,
    catalysts: list[Catalyst],
    reference_time: datetime | None = None,
    window_days: int = DEFAULT_EARNINGS_WINDOW_DAYS,
) -> bool:
    """An earnings catalyst for the symbol within [reference, reference + window]."""
    ref = resolve_reference(reference_time)
    horizon = ref + timedelta(days=window_days)
    for c in catalysts:
        if c.symbol.strip().upper() != idea.symbol:
            continue
        if c.event_type.strip().lower() != EARNINGS_EVENT or c.timestamp is None:
            continue
        if ref <= align(c.timestamp, ref) <= horizon:
            return True
    return False
