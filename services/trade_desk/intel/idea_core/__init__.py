"""
Trade Desk Idea Core

Filtering, ranking, temporal bucketing, pagination and group statistics for
the trade desk's idea lists. Pure functions over an in-memory snapshot; the
surrounding application owns fetching, persistence and rendering.

    from services.trade_desk.intel.idea_core import build_desk_view, FilterCriteria
    view = build_desk_view(ideas, FilterCriteria(asset_type="option"), now)
"""

from .models import (
    AssetType,
    Catalyst,
    DeskStats,
    DeskView,
    Direction,
    ExpiryBucket,
    ExpiryCounts,
    GroupStats,
    IdeaGroup,
    IdeaSource,
    MarketQuote,
    OutcomeStatus,
    PriorityTier,
    PublishStatus,
    StatusCounts,
    TimeframeBucket,
    TimeframeCounts,
    TradeIdea,
)
from .criteria import FilterCriteria
from .status_engine import (
    normalize_outcome_status,
    normalize_publish_status,
    split_active_resolved,
)
from .filter_engine import FilterEngine, apply_filters
from .expiry_engine import ExpiryEngine, bucket_by_expiry, filter_by_expiry
from .timeframe_engine import bucket_by_timeframe, count_by_timeframe
from .rank_engine import RankEngine, priority_score, priority_tier, rank, rank_by_score
from .group_engine import GroupEngine, aggregate, group_by_asset_class
from .window_engine import PaginationWindow, paginate
from .grade_engine import grade_of, letter_grade, outcome_label
from .market_engine import backfill_current_prices, has_upcoming_earnings
from .curation_engine import (
    count_new_ideas,
    dedupe_and_limit,
    desk_stats,
    prune_stale,
    top_conviction,
)
from .idea_adapter import adapt_idea, adapt_ideas
from .pipeline import build_desk_view
from .session import DeskSession

__all__ = [
    "AssetType",
    "Catalyst",
    "DeskStats",
    "DeskView",
    "Direction",
    "ExpiryBucket",
    "ExpiryCounts",
    "GroupStats",
    "IdeaGroup",
    "IdeaSource",
    "MarketQuote",
    "OutcomeStatus",
    "PriorityTier",
    "PublishStatus",
    "StatusCounts",
    "TimeframeBucket",
    "TimeframeCounts",
    "TradeIdea",
    "FilterCriteria",
    "normalize_outcome_status",
    "normalize_publish_status",
    "split_active_resolved",
    "FilterEngine",
    "apply_filters",
    "ExpiryEngine",
    "bucket_by_expiry",
    "filter_by_expiry",
    "bucket_by_timeframe",
    "count_by_timeframe",
    "RankEngine",
    "priority_score",
    "priority_tier",
    "rank",
    "rank_by_score",
    "GroupEngine",
    "aggregate",
    "group_by_asset_class",
    "PaginationWindow",
    "paginate",
    "grade_of",
    "letter_grade",
    "outcome_label",
    "backfill_current_prices",
    "has_upcoming_earnings",
    "count_new_ideas",
    "dedupe_and_limit",
    "desk_stats",
    "prune_stale",
    "top_conviction",
    "adapt_idea",
    "adapt_ideas",
    "build_desk_view",
    "DeskSession",
]
