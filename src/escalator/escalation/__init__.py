"""Health classification and escalation decisions."""

from .evaluator import (
    DEFAULT_HEALTH_THRESHOLD,
    DEFAULT_INCONCLUSIVE_MARKER,
    HealthEvaluator,
    is_actionable,
)

__all__ = [
    "DEFAULT_HEALTH_THRESHOLD",
    "DEFAULT_INCONCLUSIVE_MARKER",
    "HealthEvaluator",
    "is_actionable",
]
