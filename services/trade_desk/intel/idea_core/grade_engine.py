"""
Trade Desk Idea Core — Grade Engine

Letter grades come from the stored probability_band. The confidence-based
ladder is only a fallback for ideas that arrive without one.

Confidence ladder:
    >= 90 A+   >= 85 A   >= 80 A-
    >= 75 B+   >= 70 B   >= 65 B-
    >= 60 C+   >= 55 C   >= 50 C-
    >= 45 D+   >= 40 D   else F

Grade filters:
    "A", "B", ...  prefix match on the band ("A" matches A+, A, A-)
    "elite"        A+ / A / A-
    "strong"       B+ / B / B-
    "quality"      elite + strong
"""

from .models import OutcomeStatus, TradeIdea
from .status_engine import normalize_outcome_status

DEFAULT_CONFIDENCE = 50.0

_LADDER: tuple[tuple[float, str], ...] = (
    (90.0, "A+"),
    (85.0, "A"),
    (80.0, "A-"),
    (75.0, "B+"),
    (70.0, "B"),
    (65.0, "B-"),
    (60.0, "C+"),
    (55.0, "C"),
    (50.0, "C-"),
    (45.0, "D+"),
    (40.0, "D"),
)

ELITE_GRADES = frozenset({"A+", "A", "A-"})
STRONG_GRADES = frozenset({"B+", "B", "B-"})

GRADE_GROUPS: dict[str, frozenset[str]] = {
    "elite": ELITE_GRADES,
    "strong": STRONG_GRADES,
    "quality": ELITE_GRADES | STRONG_GRADES,
}

_OUTCOME_LABELS: dict[OutcomeStatus, str] = {
    OutcomeStatus.HIT_TARGET: "WIN",
    OutcomeStatus.HIT_STOP: "LOSS",
    OutcomeStatus.EXPIRED: "EXPIRED",
    OutcomeStatus.OPEN: "OPEN",
}


def letter_grade(confidence: float | None) -> str:
    score = DEFAULT_CONFIDENCE if confidence is None else confidence
    for floor, grade in _LADDER:
        if score >= floor:
            return grade
    return "F"


def band_of(idea: TradeIdea) -> str:
    """Stored band, uppercased. Empty when absent."""
    if idea.probability_band is None:
        return ""
    return str(idea.probability_band).strip().upper()


def grade_of(idea: TradeIdea) -> str:
    band = band_of(idea)
    if band:
        return band
    return letter_grade(idea.confidence_score)


def matches_grade(idea: TradeIdea, grade_filter: str) -> bool:
    """
    Grade predicate used by the filter chain.

    Prefix matching reads the stored band only. An idea without a band
    never satisfies a prefix filter.
    """
    key = (grade_filter or "").strip()
    if not key or key.lower() == "all":
        return True
    band = band_of(idea)
    group = GRADE_GROUPS.get(key.lower())
    if group is not None:
        return band in group
    return bool(band) and band.startswith(key.upper())


def outcome_label(raw_status) -> str:
    return _OUTCOME_LABELS[normalize_outcome_status(raw_status)]
