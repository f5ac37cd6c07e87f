"""
Trade Desk Idea Core — Engine Unit Tests

Covers:
    - Status normalization (idempotence, legacy defaults)
    - Filter chain (each dimension, AND composition, order independence)
    - Expiry bucketing (boundaries, calendar-day arithmetic, no-expiry ideas)
    - Timeframe bucketing (active-only, horizon anchors)
    - Ranking (tiers, recency, stability, scalar score)
    - Group aggregation (win-rate denominator, P/L closure, R:R average)
    - Pagination window

All tests use a fixed reference time. No randomness. No IO.
"""

from datetime import datetime, timedelta, timezone

import pytest

from services.trade_desk.intel.idea_core.criteria import FilterCriteria
from services.trade_desk.intel.idea_core.expiry_engine import (
    ExpiryEngine,
    bucket_by_expiry,
    filter_by_expiry,
)
from services.trade_desk.intel.idea_core.filter_engine import apply_filters
from services.trade_desk.intel.idea_core.group_engine import (
    GroupEngine,
    aggregate,
    group_by_asset_class,
)
from services.trade_desk.intel.idea_core.models import (
    AssetType,
    Direction,
    ExpiryBucket,
    IdeaSource,
    OutcomeStatus,
    PriorityTier,
    PublishStatus,
    TimeframeBucket,
    TradeIdea,
)
from services.trade_desk.intel.idea_core.rank_engine import (
    RankEngine,
    priority_score,
    priority_tier,
    rank,
    rank_by_score,
)
from services.trade_desk.intel.idea_core.status_engine import (
    normalize_outcome_status,
    normalize_publish_status,
    split_active_resolved,
)
from services.trade_desk.intel.idea_core.timeframe_engine import (
    bucket_by_timeframe,
    classify_horizon,
    count_by_timeframe,
)
from services.trade_desk.intel.idea_core.window_engine import PaginationWindow, paginate


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

NOW = datetime(2026, 2, 15, 12, 0, 0, tzinfo=timezone.utc)


def _make_idea(
    idx: int = 0,
    symbol: str = "AAPL",
    hours_ago: float = 1.0,
    outcome: OutcomeStatus = OutcomeStatus.OPEN,
    **kwargs,
) -> TradeIdea:
    """Factory for deterministic test ideas."""
    fields = dict(
        id=f"idea_{idx}",
        symbol=symbol,
        timestamp=NOW - timedelta(hours=hours_ago),
        outcome_status=outcome,
    )
    fields.update(kwargs)
    return TradeIdea(**fields)


def _ids(ideas) -> list[str]:
    return [i.id for i in ideas]


# ---------------------------------------------------------------------------
# 1. Status Normalizer
# ---------------------------------------------------------------------------

class TestStatusNormalizer:
    @pytest.mark.parametrize("raw,expected", [
        (None, OutcomeStatus.OPEN),
        ("", OutcomeStatus.OPEN),
        ("  ", OutcomeStatus.OPEN),
        ("OPEN", OutcomeStatus.OPEN),
        (" Hit_Target ", OutcomeStatus.HIT_TARGET),
        ("hit-stop", OutcomeStatus.HIT_STOP),
        ("Hit Stop", OutcomeStatus.HIT_STOP),
        ("EXPIRED\n", OutcomeStatus.EXPIRED),
        ("something_else", OutcomeStatus.OPEN),
    ])
    def test_canonical_mapping(self, raw, expected):
        assert normalize_outcome_status(raw) is expected

    @pytest.mark.parametrize("raw", [None, "", "  ", "OPEN", " Hit_Target ", "hit_stop", "Expired", "bogus"])
    def test_idempotent(self, raw):
        once = normalize_outcome_status(raw)
        assert normalize_outcome_status(once) is once
        assert normalize_outcome_status(once.value) is once

    def test_publish_status_defaults_to_published(self):
        assert normalize_publish_status(None) is PublishStatus.PUBLISHED
        assert normalize_publish_status("") is PublishStatus.PUBLISHED
        assert normalize_publish_status(" Draft ") is PublishStatus.DRAFT
        assert normalize_publish_status("archived") is PublishStatus.PUBLISHED

    def test_split_is_total_and_disjoint(self):
        ideas = [
            _make_idea(0, outcome=OutcomeStatus.OPEN),
            _make_idea(1, outcome=OutcomeStatus.HIT_TARGET),
            _make_idea(2, outcome=OutcomeStatus.HIT_STOP),
            _make_idea(3, outcome=OutcomeStatus.EXPIRED),
            _make_idea(4, outcome=OutcomeStatus.OPEN),
        ]
        active, resolved = split_active_resolved(ideas)
        assert _ids(active) == ["idea_0", "idea_4"]
        assert _ids(resolved) == ["idea_1", "idea_2", "idea_3"]
        assert set(_ids(active)).isdisjoint(_ids(resolved))
        assert len(active) + len(resolved) == len(ideas)


# ---------------------------------------------------------------------------
# 2. Predicate Filter Chain
# ---------------------------------------------------------------------------

class TestFilterChain:
    def test_empty_criteria_is_identity(self):
        ideas = [_make_idea(i, hours_ago=i) for i in range(5)]
        assert apply_filters(ideas, FilterCriteria(), NOW) == ideas

    def test_text_search_symbol_or_catalyst(self):
        ideas = [
            _make_idea(0, symbol="NVDA", catalyst="AI capex"),
            _make_idea(1, symbol="TSLA", catalyst="Delivery beat, nvda supplier"),
            _make_idea(2, symbol="AMD", catalyst="Earnings"),
        ]
        result = apply_filters(ideas, FilterCriteria(text_search="Nvda"), NOW)
        assert _ids(result) == ["idea_0", "idea_1"]

    def test_direction_long_short(self):
        ideas = [
            _make_idea(0, direction=Direction.LONG),
            _make_idea(1, direction=Direction.SHORT),
        ]
        assert _ids(apply_filters(ideas, FilterCriteria(direction="short"), NOW)) == ["idea_1"]

    def test_day_trade_uses_holding_period_not_direction(self):
        ideas = [
            _make_idea(0, direction=Direction.SHORT, holding_period="day"),
            _make_idea(1, direction=Direction.LONG, session_context="Day session momentum"),
            _make_idea(2, direction=Direction.LONG, holding_period="swing"),
        ]
        result = apply_filters(ideas, FilterCriteria(direction="day_trade"), NOW)
        assert _ids(result) == ["idea_0", "idea_1"]

    def test_source_and_asset_type(self):
        ideas = [
            _make_idea(0, source=IdeaSource.AI, asset_type=AssetType.OPTION),
            _make_idea(1, source=IdeaSource.AI, asset_type=AssetType.STOCK),
            _make_idea(2, source=IdeaSource.FLOW, asset_type=AssetType.OPTION),
        ]
        result = apply_filters(ideas, FilterCriteria(source="ai", asset_type="option"), NOW)
        assert _ids(result) == ["idea_0"]

    def test_quality_grade_prefix(self):
        ideas = [
            _make_idea(0, probability_band="A+"),
            _make_idea(1, probability_band="A-"),
            _make_idea(2, probability_band="B+"),
            _make_idea(3, probability_band=None),
        ]
        assert _ids(apply_filters(ideas, FilterCriteria(quality_grade="A"), NOW)) == ["idea_0", "idea_1"]
        assert _ids(apply_filters(ideas, FilterCriteria(quality_grade="quality"), NOW)) == [
            "idea_0", "idea_1", "idea_2",
        ]

    def test_date_range_today_uses_start_of_day(self):
        ideas = [
            _make_idea(0, hours_ago=11),   # 01:00 today
            _make_idea(1, hours_ago=13),   # 23:00 yesterday
        ]
        assert _ids(apply_filters(ideas, FilterCriteria(date_range="today"), NOW)) == ["idea_0"]

    def test_date_range_presets(self):
        ideas = [
            _make_idea(0, hours_ago=24 * 6),
            _make_idea(1, hours_ago=24 * 8),
            _make_idea(2, timestamp=datetime(2025, 11, 20, tzinfo=timezone.utc)),
            _make_idea(3, timestamp=datetime(2025, 11, 10, tzinfo=timezone.utc)),
        ]
        assert _ids(apply_filters(ideas, FilterCriteria(date_range="7d"), NOW)) == ["idea_0"]
        assert _ids(apply_filters(ideas, FilterCriteria(date_range="3m"), NOW)) == [
            "idea_0", "idea_1", "idea_2",
        ]
        assert len(apply_filters(ideas, FilterCriteria(date_range="1y"), NOW)) == 4

    def test_unparseable_timestamp_excluded_only_when_dated(self):
        ideas = [_make_idea(0, timestamp=None), _make_idea(1)]
        assert _ids(apply_filters(ideas, FilterCriteria(date_range="30d"), NOW)) == ["idea_1"]
        assert _ids(apply_filters(ideas, FilterCriteria(), NOW)) == ["idea_0", "idea_1"]

    def test_source_tab_lotto(self):
        ideas = [
            _make_idea(0, is_lotto_play=True),
            _make_idea(1),
            _make_idea(2, source=IdeaSource.HYBRID),
        ]
        assert _ids(apply_filters(ideas, FilterCriteria(source_tab="lotto"), NOW)) == ["idea_0"]
        assert _ids(apply_filters(ideas, FilterCriteria(source_tab="hybrid"), NOW)) == ["idea_2"]

    def test_status_view(self):
        ideas = [
            _make_idea(0, status=PublishStatus.DRAFT),
            _make_idea(1),
        ]
        assert _ids(apply_filters(ideas, FilterCriteria(status_view="draft"), NOW)) == ["idea_0"]
        assert _ids(apply_filters(ideas, FilterCriteria(status_view="published"), NOW)) == ["idea_1"]

    def test_symbol_substring(self):
        ideas = [_make_idea(0, symbol="SPY"), _make_idea(1, symbol="SPXL"), _make_idea(2, symbol="QQQ")]
        assert _ids(apply_filters(ideas, FilterCriteria(symbol="sp"), NOW)) == ["idea_0", "idea_1"]

    def test_outcome_view(self):
        ideas = [
            _make_idea(0, outcome=OutcomeStatus.OPEN),
            _make_idea(1, outcome=OutcomeStatus.HIT_TARGET),
            _make_idea(2, outcome=OutcomeStatus.HIT_STOP),
            _make_idea(3, outcome=OutcomeStatus.EXPIRED),
        ]
        for view, expected in [("active", "idea_0"), ("won", "idea_1"), ("lost", "idea_2"), ("expired", "idea_3")]:
            assert _ids(apply_filters(ideas, FilterCriteria(outcome_view=view), NOW)) == [expected]

    def test_filters_commute(self):
        """Applying {A, B} in either order equals applying both at once."""
        ideas = [
            _make_idea(i, symbol=s, asset_type=a, probability_band=g)
            for i, (s, a, g) in enumerate([
                ("AAPL", AssetType.OPTION, "A"),
                ("AMD", AssetType.STOCK, "A+"),
                ("AMZN", AssetType.OPTION, "B"),
                ("MSFT", AssetType.OPTION, "A-"),
            ])
        ]
        a = FilterCriteria(asset_type="option")
        b = FilterCriteria(quality_grade="A")
        both = FilterCriteria(asset_type="option", quality_grade="A")

        ab = apply_filters(apply_filters(ideas, a, NOW), b, NOW)
        ba = apply_filters(apply_filters(ideas, b, NOW), a, NOW)
        assert ab == ba == apply_filters(ideas, both, NOW)
        assert _ids(ab) == ["idea_0", "idea_3"]

    def test_deterministic_and_order_preserving(self):
        ideas = [_make_idea(i, hours_ago=10 - i) for i in range(6)]
        criteria = FilterCriteria(symbol="AA")
        first = apply_filters(ideas, criteria, NOW)
        assert first == apply_filters(ideas, criteria, NOW)
        assert _ids(first) == _ids(ideas)

    def test_unknown_values_disable_dimension(self):
        c = FilterCriteria(direction="sideways", source="oracle", date_range="forever")
        assert c.direction == "all"
        assert c.source == "all"
        assert c.date_range == "all"
        assert c.active_dimensions() == []

    def test_camel_case_criteria(self):
        c = FilterCriteria.model_validate({"assetType": " Option ", "textSearch": "nv", "outcomeView": "WON"})
        assert c.asset_type == "option"
        assert c.text_search == "nv"
        assert c.outcome_view == "won"


# ---------------------------------------------------------------------------
# 3. Expiry Bucketer
# ---------------------------------------------------------------------------

class TestExpiryBucketer:
    @pytest.mark.parametrize("days,expected", [
        (-1, ExpiryBucket.EXPIRED),
        (0, ExpiryBucket.D7),
        (7, ExpiryBucket.D7),
        (8, ExpiryBucket.D14),
        (14, ExpiryBucket.D14),
        (15, ExpiryBucket.D30),
        (60, ExpiryBucket.D30),
        (61, ExpiryBucket.D90),
        (270, ExpiryBucket.D90),
        (271, ExpiryBucket.LEAPS),
    ])
    def test_boundaries(self, days, expected):
        assert ExpiryEngine.classify_days(days) is expected
        idea = _make_idea(0, asset_type=AssetType.OPTION, expiry_date=NOW + timedelta(days=days))
        assert ExpiryEngine(NOW).classify(idea) is expected

    def test_exactly_one_bucket_per_day(self):
        engine = ExpiryEngine(NOW)
        for days in range(-30, 400):
            idea = _make_idea(0, expiry_date=NOW + timedelta(days=days))
            counts = engine.count([idea])
            named = [counts.get(b) for b in ExpiryBucket]
            assert sum(named) == 1
            assert counts.all == 1

    def test_calendar_day_not_wall_clock(self):
        """Expiry at 23:59 seven days out, evaluated at 00:01, is 7d."""
        reference = datetime(2026, 2, 15, 0, 1, tzinfo=timezone.utc)
        idea = _make_idea(0, expiry_date=datetime(2026, 2, 22, 23, 59, tzinfo=timezone.utc))
        engine = ExpiryEngine(reference)
        assert engine.days_to_expiry(idea) == 7
        assert engine.classify(idea) is ExpiryBucket.D7

    def test_expiring_today_stays_until_midnight(self):
        reference = datetime(2026, 2, 15, 22, 0, tzinfo=timezone.utc)
        idea = _make_idea(0, expiry_date=datetime(2026, 2, 15, 9, 30, tzinfo=timezone.utc))
        assert ExpiryEngine(reference).classify(idea) is ExpiryBucket.D7

    def test_no_expiry_only_in_all(self):
        ideas = [
            _make_idea(0, asset_type=AssetType.STOCK),
            _make_idea(1, asset_type=AssetType.OPTION, expiry_date=NOW + timedelta(days=3)),
        ]
        counts = bucket_by_expiry(ideas, NOW)
        assert counts.all == 2
        assert counts.d7 == 1
        assert counts.expired + counts.d14 + counts.d30 + counts.d90 + counts.leaps == 0

    def test_exit_by_is_an_anchor(self):
        idea = _make_idea(0, exit_by=NOW + timedelta(days=100))
        assert ExpiryEngine(NOW).classify(idea) is ExpiryBucket.D90

    def test_filter_by_expiry_matches_counts(self):
        ideas = [
            _make_idea(i, expiry_date=NOW + timedelta(days=d))
            for i, d in enumerate([-3, 2, 10, 10, 40, 300])
        ] + [_make_idea(9)]
        counts = bucket_by_expiry(ideas, NOW)
        for bucket in ExpiryBucket:
            assert len(filter_by_expiry(ideas, bucket, NOW)) == counts.get(bucket)
        assert len(filter_by_expiry(ideas, "all", NOW)) == counts.all

    def test_unknown_bucket_name_selects_everything(self):
        ideas = [_make_idea(0, expiry_date=NOW + timedelta(days=2)), _make_idea(1)]
        assert filter_by_expiry(ideas, "bogus", NOW) == ideas
        assert ExpiryEngine(NOW).select(ideas, "") == ideas


# ---------------------------------------------------------------------------
# 4. Timeframe Bucketer
# ---------------------------------------------------------------------------

class TestTimeframeBucketer:
    def test_horizon_boundaries(self):
        assert classify_horizon(-2) is TimeframeBucket.TODAY_TOMORROW
        assert classify_horizon(1) is TimeframeBucket.TODAY_TOMORROW
        assert classify_horizon(2) is TimeframeBucket.FEW_DAYS
        assert classify_horizon(5) is TimeframeBucket.FEW_DAYS
        assert classify_horizon(6) is TimeframeBucket.NEXT_WEEK
        assert classify_horizon(14) is TimeframeBucket.NEXT_WEEK
        assert classify_horizon(15) is TimeframeBucket.NEXT_MONTH

    def test_resolved_never_reintroduced(self):
        ideas = [
            _make_idea(0, outcome=OutcomeStatus.HIT_TARGET, holding_period="day"),
            _make_idea(1, holding_period="day"),
        ]
        for bucket in TimeframeBucket:
            assert "idea_0" not in _ids(bucket_by_timeframe(ideas, bucket, NOW))
        assert _ids(bucket_by_timeframe(ideas, TimeframeBucket.TODAY_TOMORROW, NOW)) == ["idea_1"]

    def test_stock_without_expiry_uses_posting_time(self):
        """Swing stock posted 1h ago projects 5 days out."""
        idea = _make_idea(0, asset_type=AssetType.STOCK)
        assert _ids(bucket_by_timeframe([idea], TimeframeBucket.FEW_DAYS, NOW)) == ["idea_0"]
        assert _ids(bucket_by_timeframe([idea], TimeframeBucket.ALL, NOW)) == ["idea_0"]
        assert bucket_by_timeframe([idea], TimeframeBucket.NEXT_WEEK, NOW) == []

    def test_expiry_takes_precedence(self):
        ideas = [
            _make_idea(0, asset_type=AssetType.OPTION, expiry_date=NOW + timedelta(days=10)),
            _make_idea(1, asset_type=AssetType.OPTION, expiry_date=NOW + timedelta(days=30)),
        ]
        assert _ids(bucket_by_timeframe(ideas, "next_week", NOW)) == ["idea_0"]
        assert _ids(bucket_by_timeframe(ideas, "next_month", NOW)) == ["idea_1"]

    def test_no_anchor_only_in_all(self):
        idea = _make_idea(0, timestamp=None)
        counts = count_by_timeframe([idea], NOW)
        assert counts.all == 1
        assert counts.today_tomorrow + counts.few_days + counts.next_week + counts.next_month == 0

    def test_unknown_bucket_name_keeps_active(self):
        ideas = [
            _make_idea(0, holding_period="day"),
            _make_idea(1, outcome=OutcomeStatus.EXPIRED),
        ]
        assert _ids(bucket_by_timeframe(ideas, "bogus", NOW)) == ["idea_0"]
        assert bucket_by_timeframe(ideas, "bogus", NOW) == bucket_by_timeframe(ideas, "all", NOW)

    def test_counts_cover_active_only(self):
        ideas = [
            _make_idea(0, holding_period="day"),
            _make_idea(1, holding_period="position"),
            _make_idea(2, outcome=OutcomeStatus.HIT_STOP),
        ]
        counts = count_by_timeframe(ideas, NOW)
        assert counts.all == 2
        assert counts.today_tomorrow == 1
        assert counts.next_month == 1


# ---------------------------------------------------------------------------
# 5. Priority Ranker
# ---------------------------------------------------------------------------

class TestPriorityRanker:
    def test_freshness_scenario(self):
        one = _make_idea(1, hours_ago=1)
        three = _make_idea(2, hours_ago=3)
        day = _make_idea(3, hours_ago=25)
        assert priority_tier(one, NOW) is PriorityTier.FRESH
        assert priority_tier(three, NOW) is PriorityTier.ACTIVE
        assert priority_tier(day, NOW) is PriorityTier.ACTIVE
        assert _ids(rank([day, one, three], NOW)) == ["idea_1", "idea_2", "idea_3"]

    def test_resolved_sorts_last_even_when_newest(self):
        resolved = _make_idea(0, hours_ago=0.1, outcome=OutcomeStatus.HIT_TARGET)
        stale = _make_idea(1, hours_ago=50)
        assert _ids(rank([resolved, stale], NOW)) == ["idea_1", "idea_0"]
        assert priority_tier(resolved, NOW) is PriorityTier.RESOLVED

    def test_fresh_window_boundary_inclusive(self):
        assert priority_tier(_make_idea(0, hours_ago=2), NOW) is PriorityTier.FRESH
        assert priority_tier(_make_idea(0, hours_ago=2.01), NOW) is PriorityTier.ACTIVE

    def test_custom_fresh_window(self):
        idea = _make_idea(0, hours_ago=3)
        assert priority_tier(idea, NOW, timedelta(hours=4)) is PriorityTier.FRESH

    def test_stable_on_identical_timestamps(self):
        ideas = [_make_idea(i, hours_ago=5) for i in range(4)]
        assert _ids(rank(ideas, NOW)) == ["idea_0", "idea_1", "idea_2", "idea_3"]

    def test_missing_timestamp_last_within_tier(self):
        ideas = [_make_idea(0, timestamp=None), _make_idea(1, hours_ago=30)]
        assert _ids(rank(ideas, NOW)) == ["idea_1", "idea_0"]

    def test_open_ideas_fresh_xor_active(self):
        engine = RankEngine(NOW)
        for h in [0, 0.5, 1.99, 2, 2.5, 48]:
            idea = _make_idea(0, hours_ago=h)
            assert engine.tier(idea) in (PriorityTier.FRESH, PriorityTier.ACTIVE)
            assert engine.is_fresh(idea) == (engine.tier(idea) is PriorityTier.FRESH)

    def test_priority_score_blend(self):
        idea = _make_idea(0, confidence_score=80, risk_reward_ratio=2.0, target_hit_probability=50)
        assert priority_score(idea) == pytest.approx(80 * 0.4 + 2.0 * 15 + 50 * 0.3)
        assert priority_score(_make_idea(1)) == 0.0

    def test_rank_by_score(self):
        low = _make_idea(0, confidence_score=50)
        high = _make_idea(1, confidence_score=50, risk_reward_ratio=3.0)
        tie = _make_idea(2, confidence_score=50)
        assert _ids(rank_by_score([low, high, tie])) == ["idea_1", "idea_0", "idea_2"]


# ---------------------------------------------------------------------------
# 6. Group Aggregator
# ---------------------------------------------------------------------------

class TestGroupAggregator:
    def test_win_rate_excludes_open_and_expired(self):
        ideas = [
            _make_idea(0, outcome=OutcomeStatus.HIT_TARGET),
            _make_idea(1, outcome=OutcomeStatus.HIT_TARGET),
            _make_idea(2, outcome=OutcomeStatus.HIT_STOP),
            _make_idea(3, outcome=OutcomeStatus.OPEN),
            _make_idea(4, outcome=OutcomeStatus.EXPIRED),
        ]
        stats = aggregate(ideas)
        assert stats.wins == 2
        assert stats.losses == 1
        assert stats.closed_count == 3
        assert stats.expired == 1
        assert stats.win_rate == pytest.approx(2 / 3)

    def test_open_idea_never_in_win_rate(self):
        closed = [_make_idea(0, outcome=OutcomeStatus.HIT_STOP)]
        with_open = closed + [_make_idea(1, outcome=OutcomeStatus.OPEN)]
        assert aggregate(closed).win_rate == aggregate(with_open).win_rate == 0.0
        assert aggregate(with_open).closed_count == 1

    def test_no_closed_ideas_win_rate_none(self):
        stats = aggregate([_make_idea(0), _make_idea(1, outcome=OutcomeStatus.EXPIRED)])
        assert stats.win_rate is None

    def test_net_pnl_missing_is_zero(self):
        ideas = [
            _make_idea(0, realized_pnl=120.0, outcome=OutcomeStatus.HIT_TARGET),
            _make_idea(1, realized_pnl=-45.5, outcome=OutcomeStatus.HIT_STOP),
            _make_idea(2, realized_pnl=None),
        ]
        assert aggregate(ideas).net_pnl == pytest.approx(74.5)

    def test_avg_risk_reward_positive_only(self):
        ideas = [
            _make_idea(0, risk_reward_ratio=2.0),
            _make_idea(1, risk_reward_ratio=4.0),
            _make_idea(2, risk_reward_ratio=0.0),
            _make_idea(3, risk_reward_ratio=None),
        ]
        assert aggregate(ideas).avg_risk_reward == pytest.approx(3.0)
        assert aggregate([_make_idea(0, risk_reward_ratio=0.0)]).avg_risk_reward is None

    def test_empty_group(self):
        stats = aggregate([])
        assert stats.count == 0
        assert stats.win_rate is None
        assert stats.net_pnl == 0.0
        assert stats.avg_risk_reward is None

    def test_grouping_first_seen_order(self):
        ideas = [
            _make_idea(0, asset_type=AssetType.CRYPTO),
            _make_idea(1, asset_type=AssetType.OPTION),
            _make_idea(2, asset_type=AssetType.CRYPTO),
        ]
        groups = group_by_asset_class(ideas)
        assert list(groups) == [AssetType.CRYPTO, AssetType.OPTION]
        assert _ids(groups[AssetType.CRYPTO]) == ["idea_0", "idea_2"]

    def test_pnl_closure_across_groups(self):
        ideas = [
            _make_idea(0, asset_type=AssetType.STOCK, realized_pnl=10.0),
            _make_idea(1, asset_type=AssetType.OPTION, realized_pnl=-3.0),
            _make_idea(2, asset_type=AssetType.CRYPTO, realized_pnl=7.25),
            _make_idea(3, asset_type=AssetType.OPTION, realized_pnl=None),
        ]
        groups = GroupEngine().build_groups(ideas)
        assert sum(g.stats.net_pnl for g in groups) == pytest.approx(aggregate(ideas).net_pnl)
        assert sum(g.stats.count for g in groups) == len(ideas)


# ---------------------------------------------------------------------------
# 7. Pagination Window
# ---------------------------------------------------------------------------

class TestPaginationWindow:
    def test_prefix_slice(self):
        ideas = [_make_idea(i) for i in range(5)]
        assert _ids(paginate(ideas, 2)) == ["idea_0", "idea_1"]
        assert paginate(ideas, 0) == []
        assert paginate(ideas, -3) == []
        assert paginate(ideas, 50) == ideas

    def test_idempotent(self):
        ideas = [_make_idea(i) for i in range(5)]
        assert paginate(ideas, 3) == paginate(ideas, 3)

    def test_expand_monotonic_and_capped(self):
        window = PaginationWindow(initial=2, step=2)
        assert window.expand() == 4
        assert window.expand(total=5) == 5
        assert window.expand(total=5) == 5
        assert window.expand(total=1) == 5

    def test_sync_resets_on_criteria_change(self):
        window = PaginationWindow(initial=2, step=3)
        window.sync(FilterCriteria())
        window.expand()
        assert window.sync(FilterCriteria()) is False
        assert window.visible_count == 5
        assert window.sync(FilterCriteria(asset_type="crypto")) is True
        assert window.visible_count == 2

    def test_invalid_window(self):
        with pytest.raises(ValueError):
            PaginationWindow(initial=5, step=0)

    def test_has_more(self):
        window = PaginationWindow(initial=3, step=3)
        assert window.has_more(4)
        assert not window.has_more(3)
