"""Utilities for hashing, rounding and report metadata."""

import hashlib
import math
from datetime import datetime, timezone


def hash_text(text: str) -> str:
    """Compute SHA256 hash of text. Deterministic."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def iso_now() -> str:
    """Current UTC timestamp as ISO string."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def round_half_up(value: float) -> int:
    """Round half up: 12.5 -> 13, 87.5 -> 88. Inputs are non-negative scores."""
    return int(math.floor(value + 0.5))
