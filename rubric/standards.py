"""Rubric standards: load the packaged JSON, validate against schema."""

import copy
import json
import os
from functools import lru_cache
from pathlib import Path

import jsonschema

PACKAGE_DIR = Path(__file__).resolve().parent
SCHEMAS_DIR = PACKAGE_DIR / "schemas"
STANDARDS_DIR = PACKAGE_DIR / "standards"

RECORD_TYPES = ("control", "et")
DEFAULT_STANDARD_FILES = {
    "control": STANDARDS_DIR / "controls_standard.v1.json",
    "et": STANDARDS_DIR / "ets_standard.v1.2.json",
}
PATH_ENV_VARS = {
    "control": "CONTROLS_STANDARD_PATH",
    "et": "ETS_STANDARD_PATH",
}
WEIGHT_TOLERANCE = 0.001


class StandardError(ValueError):
    """Raised when a standard passes the schema but is internally inconsistent."""


def _load_schema(name: str) -> dict:
    path = SCHEMAS_DIR / f"{name}.schema.json"
    return json.loads(path.read_text(encoding="utf-8"))


def validate_standard(data: dict) -> None:
    """
    Validate a standard against schema, then check the cross-field rules the
    schema can't express. Raises jsonschema.ValidationError or StandardError.
    """
    jsonschema.validate(data, _load_schema("standard"))

    weights = data["weights"]
    weight_sum = sum(weights.values())
    if abs(weight_sum - 1.0) > WEIGHT_TOLERANCE:
        raise StandardError(f"Dimension weights must sum to 1.0 (got {weight_sum:.4f})")

    keys = [d["key"] for d in data["dimensions"]]
    if len(set(keys)) != len(keys):
        raise StandardError(f"Duplicate dimension keys: {keys}")
    missing = [d["weight_key"] for d in data["dimensions"] if d["weight_key"] not in weights]
    if missing:
        raise StandardError(f"No weight for dimension(s): {', '.join(missing)}")

    thresholds = data["thresholds"]
    if thresholds["fail"] > thresholds["pass"]:
        raise StandardError(
            f"Fail threshold ({thresholds['fail']}) is above pass threshold ({thresholds['pass']})"
        )


def standard_path(record_type: str) -> Path:
    """Packaged standard for record_type, unless overridden by env var."""
    if record_type not in RECORD_TYPES:
        raise ValueError(f"Unknown record type: {record_type!r}")
    override = os.environ.get(PATH_ENV_VARS[record_type], "").strip()
    return Path(override) if override else DEFAULT_STANDARD_FILES[record_type]


@lru_cache(maxsize=None)
def _read_standard(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Rubric standard not found: {path}")
    data = json.loads(path.read_text(encoding="utf-8"))
    validate_standard(data)
    return data


def load_standard(record_type: str, path: str | Path | None = None) -> dict:
    """
    Load and validate a standard. Parsed files are cached; callers get their
    own copy so nothing they do leaks into the next scoring call.
    """
    resolved = Path(path) if path else standard_path(record_type)
    data = _read_standard(resolved.resolve())
    if data["meta"]["record_type"] != record_type:
        raise StandardError(
            f"{resolved.name} is a {data['meta']['record_type']!r} standard, expected {record_type!r}"
        )
    return copy.deepcopy(data)


def formula_for(standard: dict) -> str:
    """e.g. "TOTAL = 0.15*ID + 0.15*NAME + 0.30*DESC + 0.40*GUIDANCE"."""
    weights = standard["weights"]
    parts = [f"{weights[d['weight_key']]:.2f}*{d['formula_tag']}" for d in standard["dimensions"]]
    return "TOTAL = " + " + ".join(parts)


def rule(standard: dict, section: str, name: str, default):
    """Numeric rule lookup with a fallback, e.g. rule(std, "id", "max_length", 24)."""
    return standard.get("rules", {}).get(section, {}).get(name, default)
