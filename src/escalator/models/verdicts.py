"""Data models for health verdicts and monitoring cycle results."""

from datetime import datetime
from enum import Enum
from typing import Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Values accepted by remote tools: scalars or nested keyed maps of the same.
ToolArgument = Union[str, int, float, bool, Mapping[str, "ToolArgument"]]
ToolArguments = Dict[str, ToolArgument]


class VerdictSource(str, Enum):
    """How a health verdict was derived."""

    EMPTY = "empty"  # No content at all, fail-closed
    BUCKETS = "buckets"  # Last value of timeSeries avgBuckets
    RECORDS = "records"  # Last record average of timeSeries data
    PRESENCE = "presence"  # Target identifier found (or not) in the text


class HealthVerdict(BaseModel):
    """Health verdict for one sampled metric result."""

    healthy: bool = Field(..., description="Whether the resource is healthy")
    evidence: str = Field(default="", description="Flattened evidence text")
    source: VerdictSource = Field(..., description="How the verdict was derived")
    value: Optional[float] = Field(
        default=None, description="Compared metric value for numeric verdicts"
    )

    model_config = ConfigDict(use_enum_values=True)

    def __str__(self) -> str:
        """String representation of verdict."""
        status = "HEALTHY" if self.healthy else "UNHEALTHY"
        if self.value is not None:
            return f"[{status}] {self.source} value={self.value}"
        return f"[{status}] {self.source}"


class CycleOutcome(str, Enum):
    """Terminal state reached by one monitoring cycle."""

    SKIPPED = "skipped"
    SAMPLING_FAILED = "sampling_failed"
    DIAGNOSIS_FAILED = "diagnosis_failed"
    HEALTHY = "healthy"
    INCONCLUSIVE = "inconclusive"
    REMEDIATED = "remediated"
    ERROR = "error"


class CycleResult(BaseModel):
    """Outcome of a single monitoring cycle."""

    cycle_number: int = Field(default=0, description="Sequential cycle number")
    outcome: CycleOutcome = Field(..., description="Terminal state of the cycle")
    verdict: Optional[HealthVerdict] = Field(default=None, description="Health verdict")
    anomaly: Optional[str] = Field(default=None, description="Anomaly description sent to Tier 2")
    root_cause_report: Optional[str] = Field(default=None, description="Tier 2 output")
    remediation_summary: Optional[str] = Field(default=None, description="Tier 3 output")
    error: Optional[str] = Field(default=None, description="Error message if the cycle failed")
    started_at: datetime = Field(default_factory=datetime.now)
    duration_seconds: float = Field(default=0.0, description="Cycle duration")

    model_config = ConfigDict(use_enum_values=True)

    def __str__(self) -> str:
        """String representation of cycle result."""
        return f"cycle #{self.cycle_number}: {self.outcome} ({self.duration_seconds:.2f}s)"
