import pytest

from siteprep.scoring import (
    CHECKLIST_LEVELS,
    SECURITY_LEVELS,
    SECURITY_WEIGHTS,
    VALIDATION_WEIGHTS,
    penalty_score,
    weighted_average,
)


def test_penalty_score_values():
    assert penalty_score({"vulnerabilities": 1, "warnings": 2, "recommendations": 3}, SECURITY_WEIGHTS) == 69
    assert penalty_score({"errors": 2, "warnings": 1}, VALIDATION_WEIGHTS) == 85
    assert penalty_score({"vulnerabilities": 10}, SECURITY_WEIGHTS) == 0
    assert penalty_score({"passed": 40}, SECURITY_WEIGHTS) == 100


@pytest.mark.parametrize("kind", sorted(SECURITY_WEIGHTS))
def test_security_score_never_increases_with_more_findings(kind: str):
    counts = {"vulnerabilities": 1, "warnings": 1, "recommendations": 1}
    previous = penalty_score(counts, SECURITY_WEIGHTS)
    for _ in range(10):
        counts[kind] += 1
        current = penalty_score(counts, SECURITY_WEIGHTS)
        assert 0 <= current <= previous
        previous = current


@pytest.mark.parametrize(
    ("score", "security", "checklist"),
    [
        (100, "EXCELLENT", "EXCELLENT"),
        (90, "EXCELLENT", "EXCELLENT"),
        (85, "GOOD", "GOOD"),
        (70, "FAIR", "ACCEPTABLE"),
        (65, "POOR", "NEEDS_IMPROVEMENT"),
        (10, "CRITICAL", "CRITICAL_ISSUES"),
    ],
)
def test_level_tables(score: int, security: str, checklist: str):
    assert SECURITY_LEVELS.classify(score) == security
    assert CHECKLIST_LEVELS.classify(score) == checklist


def test_weighted_average_normalizes_by_present_weights():
    assert weighted_average([(80, 0.4), (60, 0.4), (100, 0.2)]) == 76
    assert weighted_average([(80, 0.4), (60, 0.4)]) == 70
    assert weighted_average([]) == 0
