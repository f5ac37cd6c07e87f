"""
Trade Desk Idea Core — Idea Adapter

Bridges upstream idea payloads (JSON dicts, camelCase keys) -> TradeIdea.

Handles:
    - Status normalization, once, at this boundary
      (outcomeStatus -> OutcomeStatus, status -> PublishStatus)
    - Timestamp parsing (ISO 8601 strings, datetimes, epoch s/ms);
      unparseable values become None rather than failing the record,
      naive and date-only values stay naive (read in the reference timezone)
    - Loose scalars: probabilityBand coerced to text, isLottoPlay
      accepts "true"/"false" strings
    - exitBy accepted as an expiry anchor for non-option instruments
    - Enum mapping with the upstream defaults
      (direction -> long, source -> quant, assetType -> stock)

Records without a symbol are skipped (adapt_idea returns None).
"""

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from .models import (
    AssetType,
    Catalyst,
    Direction,
    IdeaSource,
    MarketQuote,
    TradeIdea,
)
from .status_engine import normalize_outcome_status, normalize_publish_status

logger = logging.getLogger(__name__)

# Upstream engine labels that differ from IdeaSource values
_SOURCE_ALIASES: dict[str, IdeaSource] = {
    "flow_scanner": IdeaSource.FLOW,
    "lotto_scanner": IdeaSource.QUANT,
}

_DEFAULT_SOURCE = IdeaSource.QUANT
_DEFAULT_ASSET = AssetType.STOCK

_EPOCH_MS_THRESHOLD = 1e12

_TRUE_STRINGS = frozenset({"true", "1", "yes", "y", "on"})


def _get(raw: Mapping[str, Any], *keys: str, default=None):
    for k in keys:
        if k in raw and raw[k] is not None:
            return raw[k]
    return default


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse to a datetime. None when unparseable.

    Epoch numbers are UTC. Naive and date-only strings stay naive so the
    engines read them in the reference timezone ("2026-02-20" is that
    calendar day wherever the desk runs).
    """
    if value is None or value == "":
        return None
    try:
        if isinstance(value, datetime):
            dt = value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            seconds = value / 1000.0 if value > _EPOCH_MS_THRESHOLD else float(value)
            dt = datetime.fromtimestamp(seconds, tz=timezone.utc)
        else:
            text = str(value).strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            dt = datetime.fromisoformat(text)
    except (ValueError, TypeError, OverflowError, OSError):
        logger.debug(f"unparseable timestamp {value!r}")
        return None
    return dt


def _float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _map_direction(value: Any) -> Direction:
    key = str(value or "long").strip().lower()
    if key in ("short", "bearish", "put"):
        return Direction.SHORT
    return Direction.LONG


def _map_source(value: Any) -> IdeaSource:
    key = str(value or "").strip().lower()
    if key in _SOURCE_ALIASES:
        return _SOURCE_ALIASES[key]
    try:
        return IdeaSource(key)
    except ValueError:
        return _DEFAULT_SOURCE


def _map_asset_type(value: Any, option_type: Optional[str]) -> AssetType:
    key = str(value or "").strip().lower()
    try:
        return AssetType(key)
    except ValueError:
        return AssetType.OPTION if option_type else _DEFAULT_ASSET


def adapt_idea(raw: Mapping[str, Any]) -> TradeIdea | None:
    """Convert one upstream payload. Returns None when the symbol is missing."""
    symbol = str(_get(raw, "symbol", default="")).strip().upper()
    if not symbol:
        logger.warning(f"skipping idea without symbol (id={raw.get('id')!r})")
        return None

    option_type = _get(raw, "optionType", "option_type")
    option_type = str(option_type).strip().lower() if option_type else None
    holding = _get(raw, "holdingPeriod", "holding_period")

    return TradeIdea(
        id=str(_get(raw, "id", default=f"{symbol}-{_get(raw, 'timestamp', default='')}")),
        symbol=symbol,
        direction=_map_direction(_get(raw, "direction")),
        asset_type=_map_asset_type(_get(raw, "assetType", "asset_type"), option_type),
        source=_map_source(_get(raw, "source")),
        status=normalize_publish_status(_get(raw, "status")),
        outcome_status=normalize_outcome_status(_get(raw, "outcomeStatus", "outcome_status")),
        timestamp=_parse_timestamp(_get(raw, "timestamp")),
        expiry_date=_parse_timestamp(_get(raw, "expiryDate", "expiry_date")),
        exit_by=_parse_timestamp(_get(raw, "exitBy", "exit_by")),
        entry_price=_float(_get(raw, "entryPrice", "entry_price")) or 0.0,
        target_price=_float(_get(raw, "targetPrice", "target_price")) or 0.0,
        stop_loss=_float(_get(raw, "stopLoss", "stop_loss")) or 0.0,
        risk_reward_ratio=_float(_get(raw, "riskRewardRatio", "risk_reward_ratio")),
        confidence_score=_float(_get(raw, "confidenceScore", "confidence_score")),
        target_hit_probability=_float(_get(raw, "targetHitProbability", "target_hit_probability")),
        probability_band=_text(_get(raw, "probabilityBand", "probability_band")),
        is_lotto_play=_flag(_get(raw, "isLottoPlay", "is_lotto_play", default=False)),
        realized_pnl=_float(_get(raw, "realizedPnL", "realizedPnl", "realized_pnl")),
        catalyst=str(_get(raw, "catalyst", default="")),
        analysis=str(_get(raw, "analysis", default="")),
        session_context=str(_get(raw, "sessionContext", "session_context", default="")),
        holding_period=str(holding).strip().lower() if holding else None,
        option_type=option_type,
        current_price=_float(_get(raw, "currentPrice", "current_price")),
    )


def adapt_ideas(raws: list[Mapping[str, Any]]) -> list[TradeIdea]:
    """Convert a payload list. Skips records adapt_idea rejects; order preserved."""
    ideas = []
    for raw in raws:
        idea = adapt_idea(raw)
        if idea is not None:
            ideas.append(idea)
    return ideas


def adapt_quote(raw: Mapping[str, Any]) -> MarketQuote | None:
    symbol = str(_get(raw, "symbol", default="")).strip().upper()
    price = _float(_get(raw, "currentPrice", "current_price"))
    if not symbol or price is None:
        return None
    return MarketQuote(
        symbol=symbol,
        current_price=price,
        timestamp=_parse_timestamp(_get(raw, "lastUpdated", "timestamp")),
    )


def adapt_catalyst(raw: Mapping[str, Any]) -> Catalyst | None:
    symbol = str(_get(raw, "symbol", default="")).strip().upper()
    if not symbol:
        return None
    return Catalyst(
        symbol=symbol,
        title=str(_get(raw, "title", default="")),
        event_type=str(_get(raw, "eventType", "event_type", default="")).strip().lower(),
        timestamp=_parse_timestamp(_get(raw, "timestamp")),
        impact=str(_get(raw, "impact", default="medium")),
    )
