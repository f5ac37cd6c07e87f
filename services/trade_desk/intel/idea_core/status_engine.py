"""
Trade Desk Idea Core — Status Engine

Total, idempotent mapping of raw status strings onto the closed enums.

Outcome rules:
    None / "" / whitespace      -> OPEN   (legacy rows predate the field)
    trim + lowercase, " "/"-" -> "_"
    canonical value              -> that value
    anything else                -> OPEN   (resolution is never inferred)

Publish rules:
    None / "" / unknown          -> PUBLISHED
"""

import logging

from .models import OutcomeStatus, PublishStatus, TradeIdea

logger = logging.getLogger(__name__)

_OUTCOMES: dict[str, OutcomeStatus] = {s.value: s for s in OutcomeStatus}
_PUBLISH: dict[str, PublishStatus] = {s.value: s for s in PublishStatus}

_RESOLVED = frozenset({
    OutcomeStatus.HIT_TARGET,
    OutcomeStatus.HIT_STOP,
    OutcomeStatus.EXPIRED,
})


def _clean(raw) -> str:
    if raw is None:
        return ""
    if isinstance(raw, (OutcomeStatus, PublishStatus)):
        return raw.value
    return str(raw).strip().lower().replace("-", "_").replace(" ", "_")


def normalize_outcome_status(raw) -> OutcomeStatus:
    """Map a raw outcomeStatus value to its canonical state."""
    if isinstance(raw, OutcomeStatus):
        return raw
    key = _clean(raw)
    if not key:
        return OutcomeStatus.OPEN
    status = _OUTCOMES.get(key)
    if status is None:
        logger.debug(f"unrecognized outcome status {raw!r}; treating as open")
        return OutcomeStatus.OPEN
    return status


def normalize_publish_status(raw) -> PublishStatus:
    """Map a raw publish status to PUBLISHED/DRAFT. Absent means published."""
    if isinstance(raw, PublishStatus):
        return raw
    return _PUBLISH.get(_clean(raw), PublishStatus.PUBLISHED)


def is_active(idea: TradeIdea) -> bool:
    return normalize_outcome_status(idea.outcome_status) is OutcomeStatus.OPEN


def is_resolved(idea: TradeIdea) -> bool:
    return normalize_outcome_status(idea.outcome_status) in _RESOLVED


def is_win(idea: TradeIdea) -> bool:
    return normalize_outcome_status(idea.outcome_status) is OutcomeStatus.HIT_TARGET


def is_loss(idea: TradeIdea) -> bool:
    return normalize_outcome_status(idea.outcome_status) is OutcomeStatus.HIT_STOP


def split_active_resolved(
    ideas: list[TradeIdea],
) -> tuple[list[TradeIdea], list[TradeIdea]]:
    """Partition preserving input order. Every idea lands in exactly one side."""
    active: list[TradeIdea] = []
    resolved: list[TradeIdea] = []
    for idea in ideas:
        (active if is_active(idea) else resolved).append(idea)
    return active, resolved
