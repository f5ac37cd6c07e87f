"""
Trade Desk Idea Core — Group Engine

Per-instrument-class statistics, computed strictly from each group's own
members (whatever the caller passes in: typically the visible set after
filtering and pagination).

Formulas:
    win_rate        = wins / (wins + losses)          (no closed ideas -> None)
    net_pnl         = sum(realized_pnl)               (missing -> 0)
    avg_risk_reward = mean(R:R where R:R > 0)         (none qualify -> None)

Open and expired ideas never enter the win-rate numerator or denominator.
"""

import numpy as np

from .models import AssetType, GroupStats, IdeaGroup, OutcomeStatus, TradeIdea
from .status_engine import is_loss, is_win, normalize_outcome_status


class GroupEngine:
    """Stateless aggregation engine. All methods are pure functions."""

    @staticmethod
    def _pnl_array(ideas: list[TradeIdea]) -> np.ndarray:
        return np.array(
            [i.realized_pnl if i.realized_pnl is not None else 0.0 for i in ideas],
            dtype=np.float64,
        )

    @staticmethod
    def _rr_array(ideas: list[TradeIdea]) -> np.ndarray:
        return np.array(
            [i.risk_reward_ratio if i.risk_reward_ratio is not None else 0.0 for i in ideas],
            dtype=np.float64,
        )

    def compute_win_rate(self, ideas: list[TradeIdea]) -> float | None:
        wins = sum(1 for i in ideas if is_win(i))
        losses = sum(1 for i in ideas if is_loss(i))
        closed = wins + losses
        if closed == 0:
            return None
        return wins / closed

    def compute_net_pnl(self, ideas: list[TradeIdea]) -> float:
        if not ideas:
            return 0.0
        pnl = self._pnl_array(ideas)
        pnl = np.nan_to_num(pnl, nan=0.0)
        return float(np.sum(pnl))

    def compute_avg_risk_reward(self, ideas: list[TradeIdea]) -> float | None:
        if not ideas:
            return None
        rr = self._rr_array(ideas)
        positive = rr[rr > 0]
        if len(positive) == 0:
            return None
        return float(np.mean(positive))

    def aggregate(self, ideas: list[TradeIdea]) -> GroupStats:
        wins = sum(1 for i in ideas if is_win(i))
        losses = sum(1 for i in ideas if is_loss(i))
        expired = sum(
            1 for i in ideas
            if normalize_outcome_status(i.outcome_status) is OutcomeStatus.EXPIRED
        )
        return GroupStats(
            count=len(ideas),
            wins=wins,
            losses=losses,
            expired=expired,
            closed_count=wins + losses,
            win_rate=self.compute_win_rate(ideas),
            net_pnl=self.compute_net_pnl(ideas),
            avg_risk_reward=self.compute_avg_risk_reward(ideas),
        )

    @staticmethod
    def segment(ideas: list[TradeIdea]) -> dict[AssetType, list[TradeIdea]]:
        """Group by asset class. Keys in first-seen order, members in input order."""
        groups: dict[AssetType, list[TradeIdea]] = {}
        for idea in ideas:
            groups.setdefault(idea.asset_type, []).append(idea)
        return groups

    def build_groups(self, ideas: list[TradeIdea]) -> list[IdeaGroup]:
        return [
            IdeaGroup(asset_type=asset_type, ideas=tuple(members), stats=self.aggregate(members))
            for asset_type, members in self.segment(ideas).items()
        ]


def group_by_asset_class(ideas: list[TradeIdea]) -> dict[AssetType, list[TradeIdea]]:
    return GroupEngine.segment(ideas)


def aggregate(ideas: list[TradeIdea]) -> GroupStats:
    return GroupEngine().aggregate(ideas)
