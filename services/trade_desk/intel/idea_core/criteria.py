"""
Trade Desk Idea Core — Filter Criteria

Request model for the filter chain. Every dimension defaults to "no
constraint". Unknown option values collapse to "all" instead of raising, so
a stale UI state can never break the desk.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from .models import AssetType, ExpiryBucket, IdeaSource, TimeframeBucket

ALL = "all"

DIRECTION_CHOICES = frozenset({"long", "short", "day_trade"})
SOURCE_CHOICES = frozenset(s.value for s in IdeaSource)
ASSET_TYPE_CHOICES = frozenset(a.value for a in AssetType)
DATE_RANGE_CHOICES = frozenset({"today", "7d", "30d", "3m", "1y"})
SOURCE_TAB_CHOICES = SOURCE_CHOICES | {"lotto"}
STATUS_VIEW_CHOICES = frozenset({"published", "draft"})
OUTCOME_VIEW_CHOICES = frozenset({"active", "won", "lost", "expired"})
EXPIRY_CHOICES = frozenset(b.value for b in ExpiryBucket)
TIMEFRAME_CHOICES = frozenset(b.value for b in TimeframeBucket) - {ALL}


def _choice(value: Any, allowed: frozenset[str]) -> str:
    if value is None:
        return ALL
    key = str(getattr(value, "value", value)).strip().lower()
    return key if key in allowed else ALL


class FilterCriteria(BaseModel):
    """Filter state for one trade desk view. Accepts snake_case or camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    text_search: str = ""
    direction: str = ALL
    source: str = ALL
    asset_type: str = ALL
    quality_grade: str = ALL
    date_range: str = ALL
    source_tab: str = ALL
    status_view: str = ALL
    symbol: str = ""
    outcome_view: str = ALL
    expiry_bucket: str = ALL
    timeframe: str = ALL

    @field_validator("text_search", "symbol", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("quality_grade", mode="before")
    @classmethod
    def _grade(cls, v: Any) -> str:
        key = "" if v is None else str(v).strip()
        return key if key and key.lower() != ALL else ALL

    @field_validator("direction", mode="before")
    @classmethod
    def _direction(cls, v: Any) -> str:
        return _choice(v, DIRECTION_CHOICES)

    @field_validator("source", mode="before")
    @classmethod
    def _source(cls, v: Any) -> str:
        return _choice(v, SOURCE_CHOICES)

    @field_validator("asset_type", mode="before")
    @classmethod
    def _asset_type(cls, v: Any) -> str:
        return _choice(v, ASSET_TYPE_CHOICES)

    @field_validator("date_range", mode="before")
    @classmethod
    def _date_range(cls, v: Any) -> str:
        return _choice(v, DATE_RANGE_CHOICES)

    @field_validator("source_tab", mode="before")
    @classmethod
    def _source_tab(cls, v: Any) -> str:
        return _choice(v, SOURCE_TAB_CHOICES)

    @field_validator("status_view", mode="before")
    @classmethod
    def _status_view(cls, v: Any) -> str:
        return _choice(v, STATUS_VIEW_CHOICES)

    @field_validator("outcome_view", mode="before")
    @classmethod
    def _outcome_view(cls, v: Any) -> str:
        return _choice(v, OUTCOME_VIEW_CHOICES)

    @field_validator("expiry_bucket", mode="before")
    @classmethod
    def _expiry_bucket(cls, v: Any) -> str:
        return _choice(v, EXPIRY_CHOICES)

    @field_validator("timeframe", mode="before")
    @classmethod
    def _timeframe(cls, v: Any) -> str:
        return _choice(v, TIMEFRAME_CHOICES)

    def updated(self, **changes: Any) -> "FilterCriteria":
        """Validated copy with the given fields replaced."""
        data: Dict[str, Any] = self.model_dump()
        data.update(changes)
        return FilterCriteria.model_validate(data)

    def fingerprint(self) -> tuple:
        """Hashable identity used to detect criteria changes."""
        return tuple(sorted(self.model_dump().items()))

    def active_dimensions(self) -> list[str]:
        """Names of dimensions currently constraining the result."""
        defaults = FilterCriteria().model_dump()
        return [k for k, v in self.model_dump().items() if v != defaults[k]]
