"""Deterministic rubric scoring for Controls and Evidence Tasks."""

from rubric.scoring.controls import score_control
from rubric.scoring.engine import aggregate_dimension, build_messages, build_suggestions, is_gated, resolve_verdict
from rubric.scoring.ets import propose_rewrite, score_et

__all__ = [
    "score_control",
    "score_et",
    "propose_rewrite",
    "aggregate_dimension",
    "build_messages",
    "build_suggestions",
    "is_gated",
    "resolve_verdict",
]
