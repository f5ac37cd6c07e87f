"""
Trade Desk Idea Core — Data Models

Closed enums for every status-like field and frozen records for ideas and
derived views. Raw upstream strings are normalized into these types once, at
the ingestion boundary (idea_adapter.py). Engines compare enums, never raw
strings.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional


class Direction(str, Enum):
    LONG = "long"
    SHORT = "short"


class AssetType(str, Enum):
    """Instrument classes. Also the grouping key of the Group Aggregator."""
    STOCK = "stock"
    PENNY_STOCK = "penny_stock"
    OPTION = "option"
    CRYPTO = "crypto"


class IdeaSource(str, Enum):
    """Upstream engine that produced the idea."""
    AI = "ai"
    QUANT = "quant"
    HYBRID = "hybrid"
    FLOW = "flow"
    NEWS = "news"
    MANUAL = "manual"
    CHART_ANALYSIS = "chart_analysis"


class PublishStatus(str, Enum):
    """Absent publish status is PUBLISHED everywhere (legacy rows)."""
    PUBLISHED = "published"
    DRAFT = "draft"


class OutcomeStatus(str, Enum):
    """
    Canonical outcome states.

    Lifecycle (reported upstream, never inferred here):
        OPEN -> HIT_TARGET | HIT_STOP | EXPIRED
    """
    OPEN = "open"
    HIT_TARGET = "hit_target"
    HIT_STOP = "hit_stop"
    EXPIRED = "expired"


class ExpiryBucket(str, Enum):
    """
    Days-to-expiry windows over calendar-day differences.

        EXPIRED : d < 0
        D7      : 0  <= d <= 7
        D14     : 7  <  d <= 14
        D30     : 14 <  d <= 60
        D90     : 60 <  d <= 270
        LEAPS   : d > 270
    """
    EXPIRED = "expired"
    D7 = "7d"
    D14 = "14d"
    D30 = "30d"
    D90 = "90d"
    LEAPS = "leaps"


class TimeframeBucket(str, Enum):
    """
    Trading horizons for active ideas (horizon h in calendar days).

        TODAY_TOMORROW : h <= 1
        FEW_DAYS       : 2 <= h <= 5
        NEXT_WEEK      : 6 <= h <= 14
        NEXT_MONTH     : h > 14
    """
    ALL = "all"
    TODAY_TOMORROW = "today_tomorrow"
    FEW_DAYS = "few_days"
    NEXT_WEEK = "next_week"
    NEXT_MONTH = "next_month"


class PriorityTier(IntEnum):
    FRESH = 0
    ACTIVE = 1
    RESOLVED = 2


@dataclass(frozen=True)
class TradeIdea:
    """
    A single directional trading recommendation.

    Immutable input to the core. Status fields are already canonical;
    timestamp is None when the upstream value could not be parsed, which
    excludes the idea from date-dependent filters and buckets.
    """
    id: str
    symbol: str
    direction: Direction = Direction.LONG
    asset_type: AssetType = AssetType.STOCK
    source: IdeaSource = IdeaSource.QUANT
    status: PublishStatus = PublishStatus.PUBLISHED
    outcome_status: OutcomeStatus = OutcomeStatus.OPEN
    timestamp: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    exit_by: Optional[datetime] = None

    entry_price: float = 0.0
    target_price: float = 0.0
    stop_loss: float = 0.0
    risk_reward_ratio: Optional[float] = None
    confidence_score: Optional[float] = None
    target_hit_probability: Optional[float] = None
    probability_band: Optional[str] = None
    is_lotto_play: bool = False
    realized_pnl: Optional[float] = None

    catalyst: str = ""
    analysis: str = ""
    session_context: str = ""
    holding_period: Optional[str] = None
    option_type: Optional[str] = None
    current_price: Optional[float] = None

    @property
    def expiry_anchor(self) -> Optional[datetime]:
        """Contract expiry, falling back to the exit-by deadline."""
        return self.expiry_date or self.exit_by


@dataclass(frozen=True)
class MarketQuote:
    symbol: str
    current_price: float
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class Catalyst:
    symbol: str
    title: str
    event_type: str
    timestamp: Optional[datetime] = None
    impact: str = "medium"


# ---------------------------------------------------------------------------
# Derived results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExpiryCounts:
    """Counts per expiry bucket. `all` includes ideas without any expiry."""
    expired: int = 0
    d7: int = 0
    d14: int = 0
    d30: int = 0
    d90: int = 0
    leaps: int = 0
    all: int = 0

    def get(self, bucket: ExpiryBucket) -> int:
        return getattr(self, _EXPIRY_ATTR[bucket])


_EXPIRY_ATTR: dict[ExpiryBucket, str] = {
    ExpiryBucket.EXPIRED: "expired",
    ExpiryBucket.D7: "d7",
    ExpiryBucket.D14: "d14",
    ExpiryBucket.D30: "d30",
    ExpiryBucket.D90: "d90",
    ExpiryBucket.LEAPS: "leaps",
}


@dataclass(frozen=True)
class TimeframeCounts:
    all: int = 0
    today_tomorrow: int = 0
    few_days: int = 0
    next_week: int = 0
    next_month: int = 0

    def get(self, bucket: TimeframeBucket) -> int:
        return getattr(self, bucket.value)


@dataclass(frozen=True)
class StatusCounts:
    """Outcome badge counts over the full filtered set."""
    active: int = 0
    won: int = 0
    lost: int = 0
    expired: int = 0

    @property
    def resolved(self) -> int:
        return self.won + self.lost + self.expired

    @property
    def total(self) -> int:
        return self.active + self.resolved


@dataclass(frozen=True)
class GroupStats:
    """
    Per-group summary.

    win_rate is wins / (wins + losses) as a fraction; None with no closed
    ideas. avg_risk_reward covers strictly positive R:R only; None when no
    idea qualifies.
    """
    count: int
    wins: int
    losses: int
    expired: int
    closed_count: int
    win_rate: Optional[float]
    net_pnl: float
    avg_risk_reward: Optional[float]


@dataclass(frozen=True)
class IdeaGroup:
    asset_type: AssetType
    ideas: tuple[TradeIdea, ...]
    stats: GroupStats


@dataclass(frozen=True)
class DeskStats:
    total_open: int
    posted_today: int
    quality: int
    avg_confidence: int


@dataclass(frozen=True)
class DeskView:
    """
    Everything a trade desk render needs, derived from one snapshot.

    Counts (expiry_counts, timeframe_counts, status_counts) come from the
    full filtered population. Only visible_active is paginated.
    """
    reference_time: datetime
    filtered: tuple[TradeIdea, ...]
    expiry_counts: ExpiryCounts
    timeframe_counts: TimeframeCounts
    status_counts: StatusCounts
    active: tuple[TradeIdea, ...]
    resolved: tuple[TradeIdea, ...]
    visible_active: tuple[TradeIdea, ...]
    visible_count: int
    has_more: bool
    groups: tuple[IdeaGroup, ...] = field(default_factory=tuple)
