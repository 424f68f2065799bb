"""Aggregation: dimension scores, weighted total, gate, verdict and message caps."""

import pytest

from rubric.scoring.engine import (
    aggregate_dimension,
    build_messages,
    build_suggestions,
    compute_total,
    is_gated,
    make_check,
    resolve_verdict,
)
from rubric.utils import round_half_up

CONTROL_THRESHOLDS = {"pass": 80, "fail": 60}


def _dim(score: int, weight: float, checks=None) -> dict:
    return {"key": "d", "label": "D", "score": score, "max": 100, "weight": weight, "checks": checks or []}


def test_dimension_score_normalizes_regular_checks_and_adds_bonus():
    """25/30 regular → 83, plus 5 bonus → 88."""
    checks = [
        make_check("a", "A", 15, 20, "WARN"),
        make_check("b", "B", 10, 10, "PASS"),
        make_check("c", "C", 5, 5, "PASS", bonus=True),
    ]
    dim = aggregate_dimension("how", "How", 0.35, checks)
    assert dim["score"] == 88
    assert dim["max"] == 100
    assert dim["weight"] == 0.35
    assert dim["checks"] is checks


def test_dimension_score_capped_at_100():
    checks = [make_check("a", "A", 20, 20, "PASS"), make_check("b", "B", 5, 5, "PASS", bonus=True)]
    assert aggregate_dimension("d", "D", 1.0, checks)["score"] == 100


def test_bonus_only_dimension_divides_by_one():
    checks = [make_check("b", "B", 5, 5, "PASS", bonus=True)]
    assert aggregate_dimension("d", "D", 1.0, checks)["score"] == 5


def test_half_points_round_up():
    """1/8 = 12.5% → 13, not banker's 12."""
    checks = [make_check("a", "A", 1, 8, "FAIL")]
    assert aggregate_dimension("d", "D", 1.0, checks)["score"] == 13
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4) == 2


def test_total_is_weighted_sum_rounded():
    """85*0.5 + 90*0.5 = 87.5 → 88."""
    assert compute_total([_dim(85, 0.5), _dim(90, 0.5)]) == 88


def test_gate_requires_fail_on_heavy_check():
    """Only FAIL on a check worth 15+ points gates."""
    heavy_fail = [_dim(0, 1.0, [make_check("a", "A", 0, 15, "FAIL")])]
    light_fail = [_dim(0, 1.0, [make_check("a", "A", 0, 10, "FAIL")])]
    heavy_warn = [_dim(0, 1.0, [make_check("a", "A", 30, 50, "WARN")])]
    assert is_gated(heavy_fail) is True
    assert is_gated(light_fail) is False
    assert is_gated(heavy_warn) is False
    assert is_gated(light_fail, critical_min_max=10) is True


@pytest.mark.parametrize(
    "total,gated,expected",
    [
        (100, False, "pass"),
        (80, False, "pass"),
        (79, False, "partial"),
        (60, False, "partial"),
        (59, False, "fail"),
        (0, False, "fail"),
        (100, True, "fail"),
    ],
)
def test_verdict_thresholds(total, gated, expected):
    assert resolve_verdict(total, gated, CONTROL_THRESHOLDS) == expected


def test_make_check_clamps_points_and_keeps_status():
    """Points clamp to [0, max]; status is whatever the caller decided."""
    low = make_check("a", "A", -3, 10, "FAIL")
    high = make_check("b", "B", 12, 10, "PASS")
    assert low["points"] == 0
    assert low["status"] == "FAIL"
    assert high["points"] == 10


def test_make_check_notes_and_violations():
    """Notes default to the first violation; duplicates and empties are dropped."""
    check = make_check("a", "A", 5, 10, "WARN", ["Fix X", "", "Fix X", "Fix Y"])
    assert check["violations"] == ["Fix X", "Fix Y"]
    assert check["notes"] == "Fix X"

    clean = make_check("b", "B", 10, 10, "PASS")
    assert "notes" not in clean
    assert "violations" not in clean
    assert "bonus" not in clean


def test_make_check_rejects_unknown_status():
    with pytest.raises(ValueError):
        make_check("a", "A", 0, 10, "MAYBE")


def test_messages_only_fail_and_warn_with_notes():
    checks = [
        make_check("a", "A", 0, 10, "FAIL", ["broken"]),
        make_check("b", "B", 5, 10, "WARN", notes="meh"),
        make_check("c", "C", 10, 10, "PASS", notes="informational"),
        make_check("d", "D", 0, 5, "N/A", bonus=True),
    ]
    messages = build_messages([_dim(50, 1.0, checks)])
    assert messages == [{"level": "FAIL", "text": "broken"}, {"level": "WARN", "text": "meh"}]


def test_messages_and_suggestions_are_capped():
    checks = [make_check(f"c{i}", "C", 0, 10, "FAIL", [f"fix {i}", "shared fix"]) for i in range(12)]
    dims = [_dim(0, 1.0, checks)]

    messages = build_messages(dims)
    assert len(messages) == 10
    assert messages[0] == {"level": "FAIL", "text": "fix 0"}

    suggestions = build_suggestions(dims)
    assert len(suggestions) == 8
    assert suggestions[:3] == ["fix 0", "shared fix", "fix 1"]
    assert len(set(suggestions)) == len(suggestions)
