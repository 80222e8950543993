"""Data models for escalator."""

from .verdicts import (
    CycleOutcome,
    CycleResult,
    HealthVerdict,
    ToolArgument,
    ToolArguments,
    VerdictSource,
)

__all__ = [
    "CycleOutcome",
    "CycleResult",
    "HealthVerdict",
    "ToolArgument",
    "ToolArguments",
    "VerdictSource",
]
