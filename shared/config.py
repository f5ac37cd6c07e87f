# shared/config.py
from __future__ import annotations
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

ENV_PREFIX = "TRADE_DESK_"


def _env(k, d=None):
    v = os.getenv(k)
    return v if v and v.strip() else d


def _int(raw, default: int) -> int:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class DeskSettings:
    """
    Tunables for the trade desk idea core.

    fresh_window_minutes : open ideas posted inside this window rank as fresh
    new_idea_minutes     : window for the "NEW" badge count
    page_size            : initial visible count of the active list
    page_step            : growth of the visible count per "load more"
    earnings_window_days : look-ahead for earnings proximity checks
    """
    fresh_window_minutes: int = 120
    new_idea_minutes: int = 60
    page_size: int = 12
    page_step: int = 12
    earnings_window_days: int = 7
    log_level: str = "INFO"

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_desk_settings(overrides: Mapping[str, Any] | None = None) -> DeskSettings:
    """
    Returns DeskSettings built from defaults, then TRADE_DESK_* env vars,
    then explicit overrides (highest precedence).

    Unparseable or non-positive numbers keep the default.
    """
    base = DeskSettings()
    values: dict[str, Any] = {}

    for f in fields(base):
        default = getattr(base, f.name)
        if f.name == "log_level":
            raw = _env("LOG_LEVEL", default)
            values[f.name] = str(raw).strip().upper()
            continue
        raw = _env(f"{ENV_PREFIX}{f.name.upper()}")
        if raw is None:
            continue
        parsed = _int(raw, default)
        values[f.name] = parsed if parsed > 0 else default

    for k, v in (overrides or {}).items():
        if not hasattr(base, k):
            continue
        if k == "log_level":
            values[k] = str(v).strip().upper()
        else:
            parsed = _int(v, getattr(base, k))
            values[k] = parsed if parsed > 0 else getattr(base, k)

    return replace(base, **values)
