from datetime import datetime, UTC
from typing import Any, Dict, Mapping, Optional, TextIO
import os
import sys

# Severity order: a message is printed when its rank <= the logger's rank
LEVELS = ("ERROR", "WARN", "INFO", "DEBUG")
LEVEL_RANK = {name: rank for rank, name in enumerate(LEVELS)}
DEFAULT_LEVEL = "INFO"

LEVEL_EMOJI = {
    "ERROR": "❌",
    "WARN": "⚠️",
    "INFO": "ℹ️",
    "DEBUG": "🔍",
}


def parse_level(raw: Any) -> Optional[str]:
    """Canonical level name, or None when unrecognized."""
    name = str(raw or "").strip().upper()
    return name if name in LEVEL_RANK else None


class LogUtil:
    """
    Two-phase logger for desk services:
      - bootstrap: LOG_LEVEL env var
      - configured: DeskSettings (or a mapping with LOG_LEVEL/log_level),
        applied once

    Lines look like `[ts][service][LEVEL]<emoji> message`.
    Logging must NEVER raise.
    """

    def __init__(self, service_name: str, stream: Optional[TextIO] = None):
        self.service_name = service_name
        self.stream = stream
        self.level = parse_level(os.getenv("LOG_LEVEL")) or DEFAULT_LEVEL
        self._configured = False

    @property
    def level_name(self) -> str:
        return self.level

    @property
    def debug_enabled(self) -> bool:
        return self.level == "DEBUG"

    def configure_from_config(self, config: Any) -> None:
        if self._configured:
            return
        try:
            if isinstance(config, Mapping):
                raw = config.get("LOG_LEVEL") or config.get("log_level")
            else:
                raw = getattr(config, "log_level", None)
            self.level = parse_level(raw) or self.level
            self._configured = True
            self.debug(f"[LOG CONFIGURED] level={self.level}", emoji="🧪")
        except Exception:
            pass

    def child(self, component: str) -> "LogUtil":
        """Logger for a sub-component, sharing this logger's level and stream."""
        sub = LogUtil(f"{self.service_name}:{component}", stream=self.stream)
        sub.level = self.level
        sub._configured = self._configured
        return sub

    def enabled(self, level: str) -> bool:
        return LEVEL_RANK[level] <= LEVEL_RANK[self.level]

    def _emit(self, level: str, message: str, emoji: Optional[str]):
        if not self.enabled(level):
            return
        try:
            ts = datetime.now(UTC).isoformat(timespec="seconds")
            tag = LEVEL_EMOJI[level] if emoji is None else emoji
            print(
                f"[{ts}][{self.service_name}][{level}]{tag} {message}",
                file=self.stream or sys.stdout,
            )
        except Exception:
            pass

    def error(self, message: str, emoji: Optional[str] = None):
        self._emit("ERROR", message, emoji)

    def warn(self, message: str, emoji: Optional[str] = None):
        self._emit("WARN", message, emoji)

    def info(self, message: str, emoji: Optional[str] = None):
        self._emit("INFO", message, emoji)

    def debug(self, message: str, emoji: Optional[str] = None):
        self._emit("DEBUG", message, emoji)


def summarize(counts: Dict[str, int]) -> str:
    """Compact `k=v` rendering for count dictionaries in log lines."""
    return " ".join(f"{k}={v}" for k, v in counts.items())
