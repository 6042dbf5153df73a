"""Shared issue-count scoring used by every scanner and the checklist."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence, Tuple

SECURITY_WEIGHTS: Mapping[str, int] = {
    "vulnerabilities": 15,
    "warnings": 5,
    "recommendations": 2,
}

VALIDATION_WEIGHTS: Mapping[str, int] = {
    "errors": 5,
    "warnings": 5,
}


def penalty_score(counts: Mapping[str, int], weights: Mapping[str, int]) -> int:
    """``max(0, 100 - sum(weight * count))``; kinds without a weight cost nothing."""

    penalty = sum(weights.get(kind, 0) * count for kind, count in counts.items())
    return max(0, 100 - penalty)


@dataclass(frozen=True)
class LevelTable:
    """Maps a score onto a label using descending minimum thresholds."""

    thresholds: Sequence[Tuple[int, str]]
    floor: str

    def classify(self, score: float) -> str:
        for minimum, label in self.thresholds:
            if score >= minimum:
                return label
        return self.floor


SECURITY_LEVELS = LevelTable(
    thresholds=((90, "EXCELLENT"), (80, "GOOD"), (70, "FAIR"), (60, "POOR")),
    floor="CRITICAL",
)

VALIDATION_LEVELS = SECURITY_LEVELS

CHECKLIST_LEVELS = LevelTable(
    thresholds=(
        (90, "EXCELLENT"),
        (80, "GOOD"),
        (70, "ACCEPTABLE"),
        (60, "NEEDS_IMPROVEMENT"),
    ),
    floor="CRITICAL_ISSUES",
)


def weighted_average(scores: Sequence[Tuple[float, float]]) -> int:
    """Round ``sum(w * s) / sum(w)`` over ``(score, weight)`` pairs; 0 if empty."""

    total_weight = sum(weight for _, weight in scores)
    if total_weight <= 0:
        return 0
    return round(sum(score * weight for score, weight in scores) / total_weight)


__all__ = [
    "CHECKLIST_LEVELS",
    "LevelTable",
    "SECURITY_LEVELS",
    "SECURITY_WEIGHTS",
    "VALIDATION_LEVELS",
    "VALIDATION_WEIGHTS",
    "penalty_score",
    "weighted_average",
]
