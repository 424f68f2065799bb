"""Deterministic aggregation: checks -> dimensions -> total -> verdict. Pure code, no I/O."""

from rubric.standards import formula_for
from rubric.text import dedupe
from rubric.utils import round_half_up

STATUSES = ("PASS", "WARN", "FAIL", "N/A")
VERDICTS = ("pass", "partial", "fail")


def grade(points: int, pass_at: int, warn_at: int) -> str:
    """PASS at or above pass_at, WARN at or above warn_at, else FAIL."""
    if points >= pass_at:
        return "PASS"
    if points >= warn_at:
        return "WARN"
    return "FAIL"


def make_check(
    check_id: str,
    label: str,
    points: int,
    max_points: int,
    status: str,
    violations: list[str] | None = None,
    notes: str | None = None,
    bonus: bool = False,
) -> dict:
    """
    Build a CheckResult. Points are clamped to [0, max]; status must already be
    decided from the unclamped points. Notes default to the first violation.
    Optional keys are left out when empty.
    """
    if status not in STATUSES:
        raise ValueError(f"Unknown check status: {status!r}")
    violations = dedupe(violations or [])
    result = {
        "id": check_id,
        "label": label,
        "points": max(0, min(max_points, points)),
        "max": max_points,
        "status": status,
    }
    notes = notes or (violations[0] if violations else None)
    if notes:
        result["notes"] = notes
    if violations:
        result["violations"] = violations
    if bonus:
        result["bonus"] = True
    return result


def aggregate_dimension(key: str, label: str, weight: float, checks: list[dict]) -> dict:
    """
    score = min(100, round(100 * base / denom) + bonus), where base and denom
    cover non-bonus checks only. A dimension of nothing but bonus checks
    divides by 1.
    """
    regular = [c for c in checks if not c.get("bonus")]
    bonus = [c for c in checks if c.get("bonus")]

    denom = sum(c["max"] for c in regular) or 1
    base = sum(c["points"] for c in regular)
    normalized = round_half_up(base / denom * 100)
    bonus_points = sum(c["points"] for c in bonus)

    return {
        "key": key,
        "label": label,
        "score": min(100, normalized + bonus_points),
        "max": 100,
        "weight": weight,
        "checks": checks,
    }


def compute_total(dimensions: list[dict]) -> int:
    return round_half_up(sum(d["score"] * d["weight"] for d in dimensions))


def is_gated(dimensions: list[dict], critical_min_max: int = 15) -> bool:
    """Any heavyweight FAIL forces the verdict to fail regardless of total."""
    return any(
        c["status"] == "FAIL" and c["max"] >= critical_min_max
        for d in dimensions
        for c in d["checks"]
    )


def resolve_verdict(total: int, gated: bool, thresholds: dict) -> str:
    if gated:
        return "fail"
    if total >= thresholds["pass"]:
        return "pass"
    if total < thresholds["fail"]:
        return "fail"
    return "partial"


def build_messages(dimensions: list[dict], limit: int = 10) -> list[dict]:
    """FAIL/WARN checks that carry notes, in dimension then check order."""
    messages = [
        {"level": c["status"], "text": c["notes"]}
        for d in dimensions
        for c in d["checks"]
        if c["status"] in ("FAIL", "WARN") and c.get("notes")
    ]
    return messages[:limit]


def build_suggestions(dimensions: list[dict], limit: int = 8) -> list[str]:
    """Every violation once, first-seen order."""
    flat = [v for d in dimensions for c in d["checks"] for v in c.get("violations", [])]
    return dedupe(flat)[:limit]


def assemble_response(standard: dict, checks_by_dimension: dict) -> dict:
    """
    Turn per-dimension check lists into a ScoreResponse using the standard's
    labels, weights, thresholds, gate and caps.
    """
    weights = standard["weights"]
    dimensions = [
        aggregate_dimension(
            dim_def["key"], dim_def["label"], weights[dim_def["weight_key"]], checks_by_dimension[dim_def["key"]]
        )
        for dim_def in standard["dimensions"]
    ]

    total = compute_total(dimensions)
    gated = is_gated(dimensions, standard["gate"]["critical_min_max"])
    limits = standard["limits"]

    return {
        "version": standard["meta"]["version"],
        "verdict": resolve_verdict(total, gated, standard["thresholds"]),
        "total": {
            "score": total,
            "max": 100,
            "formula": formula_for(standard),
            "weights": dict(weights),
            "gated_fail": gated,
        },
        "dimensions": {d["key"]: d for d in dimensions},
        "messages": build_messages(dimensions, limits["messages"]),
        "suggestions": build_suggestions(dimensions, limits["suggestions"]),
    }
