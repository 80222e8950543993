"""Health evaluation of monitoring tool results.

One evaluator serves two tool shapes without the caller knowing which one a tool
returns:

* numeric telemetry, e.g. an Azure metrics query::

    {"results": {"results": [{"timeSeries": [{"avgBuckets": [10, 20, 95.5]}]}]}}

  or the record form ``{"timeSeries": [{"data": [{"average": 85.0}]}]}``. The
  last value is compared against the threshold.

* listings or prose ("Found resource: rg-x"), where the resource is healthy when
  its identifier appears in the text.

Evaluation never raises; anything unparseable falls back to the presence check.
"""

import json
import logging
import math
from typing import Any, Optional

from mcp.types import CallToolResult

from escalator.models import HealthVerdict, VerdictSource
from escalator.tools import flatten_content

DEFAULT_HEALTH_THRESHOLD = 80.0
DEFAULT_INCONCLUSIVE_MARKER = "No root cause identified"

logger = logging.getLogger(__name__)


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _time_series(evidence: str) -> Optional[dict]:
    """Extract results.results[0].timeSeries[0], or None if absent."""
    try:
        data = json.loads(evidence)
        series = data["results"]["results"][0]["timeSeries"][0]
    except (ValueError, KeyError, IndexError, TypeError):
        return None
    return series if isinstance(series, dict) else None


class HealthEvaluator:
    """Classifies tool results as healthy or unhealthy."""

    def __init__(self, threshold: float = DEFAULT_HEALTH_THRESHOLD):
        """Initialize evaluator.

        Args:
            threshold: Metric values at or above this are unhealthy
        """
        self.threshold = threshold

    def classify(
        self, tool_result: Optional[CallToolResult], target_resource: str
    ) -> HealthVerdict:
        """Classify a monitoring tool result.

        Args:
            tool_result: Result of the monitor tool call (None is unhealthy)
            target_resource: Identifier used by the presence fallback

        Returns:
            Health verdict with the evidence text it was derived from
        """
        if tool_result is None or not tool_result.content:
            return HealthVerdict(healthy=False, evidence="", source=VerdictSource.EMPTY)

        evidence = flatten_content(tool_result.content)

        series = _time_series(evidence)
        if series is not None:
            verdict = self._classify_series(series, evidence)
            if verdict is not None:
                return verdict
            logger.debug("timeSeries has no usable avgBuckets/data, using presence check")

        return HealthVerdict(
            healthy=bool(target_resource) and target_resource in evidence,
            evidence=evidence,
            source=VerdictSource.PRESENCE,
        )

    def _classify_series(self, series: dict, evidence: str) -> Optional[HealthVerdict]:
        buckets = series.get("avgBuckets")
        if isinstance(buckets, list) and buckets:
            value = _as_number(buckets[-1])
            if value is not None:
                return self._threshold_verdict(value, evidence, VerdictSource.BUCKETS)

        records = series.get("data")
        if isinstance(records, list) and records and isinstance(records[-1], dict):
            value = _as_number(records[-1].get("average"))
            if value is not None:
                return self._threshold_verdict(value, evidence, VerdictSource.RECORDS)

        return None

    def _threshold_verdict(
        self, value: float, evidence: str, source: VerdictSource
    ) -> HealthVerdict:
        return HealthVerdict(
            healthy=value < self.threshold,
            evidence=evidence,
            source=source,
            value=value,
        )

    def is_healthy(self, tool_result: Optional[CallToolResult], target_resource: str) -> bool:
        """Shorthand for ``classify(...).healthy``."""
        return self.classify(tool_result, target_resource).healthy


def is_actionable(report: Optional[str], marker: str = DEFAULT_INCONCLUSIVE_MARKER) -> bool:
    """Whether a root-cause report warrants remediation.

    A report is actionable when it is non-blank and does not contain the
    inconclusive marker.
    """
    return bool(report and report.strip()) and marker not in report
