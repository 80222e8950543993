"""Tier 1 watchdog: samples metrics and escalates to investigation and remediation.

Each cycle runs a small state machine::

    Sampling -> Classified -> Done (healthy)
                           -> Investigating -> Done (inconclusive or failed)
                                            -> Remediating -> Done

The investigator (Tier 2) only runs on an unhealthy verdict, and the fixer
(Tier 3) only runs when the investigator returned an actionable root cause, so
a healthy system costs one tool call per cycle.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from mcp.types import CallToolResult

from escalator.agents import FixerAgent, InvestigatorAgent
from escalator.agents.investigator import INVESTIGATION_FAILED_PREFIX
from escalator.config import Settings
from escalator.escalation import HealthEvaluator, is_actionable
from escalator.models import CycleOutcome, CycleResult, HealthVerdict, ToolArguments
from escalator.tools import McpService, ToolCallError, flatten_content

EVIDENCE_LOG_CHARS = 500


def _truncate(text: str, limit: int = EVIDENCE_LOG_CHARS) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class WatchdogService:
    """Polls the target resource's metrics and drives the escalation tiers."""

    def __init__(
        self,
        settings: Settings,
        mcp_service: McpService,
        health_evaluator: HealthEvaluator,
        investigator: InvestigatorAgent,
        fixer: FixerAgent,
    ):
        """Initialize watchdog.

        Args:
            settings: Settings instance with all configuration
            mcp_service: Cache of MCP tool clients
            health_evaluator: Classifier for monitor tool results
            investigator: Tier 2 agent
            fixer: Tier 3 agent
        """
        self.settings = settings
        self.mcp_service = mcp_service
        self.health_evaluator = health_evaluator
        self.investigator = investigator
        self.fixer = fixer
        self.logger = logging.getLogger(__name__)

        # State tracking for error recovery
        self.cycle_count = 0
        self.failed_cycles = 0
        self.last_successful_cycle: Optional[datetime] = None
        self.last_cycle_status: Optional[str] = None

    def build_monitor_arguments(self) -> ToolArguments:
        """Arguments for the Azure monitor metrics query.

        A 5-minute interval over the last hour keeps the query under the
        throttling and bucket limits.
        """
        s = self.settings
        return {
            "intent": "metrics",
            "command": s.monitor_command,
            "parameters": {
                "subscription": s.azure_subscription_id,
                "tenant": s.azure_tenant_id,
                "resource-group": s.resource_group,
                "resource-type": s.resource_type,
                "resource": s.target_resource,
                "metric-names": s.metric_names,
                "metric-namespace": s.metric_namespace,
                "interval": s.metric_interval,
                "aggregation": s.metric_aggregation,
                "timespan": s.metric_timespan,
            },
        }

    def build_anomaly_description(self, verdict: HealthVerdict) -> str:
        s = self.settings
        return (
            f"Anomaly detected: {s.metric_names} at or above {s.health_threshold} "
            f"on {s.target_resource} (resource group {s.resource_group}). "
            f"Metrics: {_truncate(verdict.evidence)}"
        )

    async def _sample(self) -> CallToolResult:
        """Invoke the monitor tool; raises on transport or tool errors."""
        s = self.settings
        client = await self.mcp_service.get_azure_client(
            s.azure_subscription_id, s.azure_tenant_id
        )
        if s.github_token:
            # Makes the GitHub tools available to the agents
            try:
                await self.mcp_service.get_github_client(s.github_token)
            except Exception as e:
                self.logger.warning(f"GitHub MCP client unavailable: {e}")

        result = await client.call_tool(s.monitor_tool, self.build_monitor_arguments())
        if result.isError:
            raise ToolCallError(s.monitor_tool, flatten_content(result.content) or "no details")
        return result

    async def check_metrics(self) -> CycleResult:
        """Run one pass of the escalation state machine.

        Sampling and diagnosis failures end the cycle early. Remediation
        failures propagate to the caller.

        Returns:
            Result describing the state the cycle ended in
        """
        self.logger.info("🔍 Checking Azure metrics...")
        s = self.settings

        if not s.has_azure_credentials:
            self.logger.warning(
                "⚠️ AZURE_TENANT_ID or AZURE_SUBSCRIPTION_ID missing in config. "
                "Skipping metrics check."
            )
            return CycleResult(outcome=CycleOutcome.SKIPPED)

        # Sampling
        try:
            sample = await self._sample()
        except Exception as e:
            self.logger.error(f"Failed to call {s.monitor_command} tool: {e}", exc_info=True)
            return CycleResult(outcome=CycleOutcome.SAMPLING_FAILED, error=str(e))

        # Classified
        verdict = self.health_evaluator.classify(sample, s.target_resource)
        self.logger.info(f"📊 Metric Response (first {EVIDENCE_LOG_CHARS} chars):\n{_truncate(verdict.evidence)}")

        if verdict.healthy:
            self.logger.info(f"✅ Watchdog: System is healthy. {verdict}")
            return CycleResult(outcome=CycleOutcome.HEALTHY, verdict=verdict)

        self.logger.warning(
            f"🚨 Watchdog: anomaly detected on {s.target_resource} {verdict}. "
            f"Awakening Tier 2 (Investigator)..."
        )

        # Investigating
        anomaly = self.build_anomaly_description(verdict)
        self.logger.info("🕵️ Starting Investigation...")
        report = await self.investigator.investigate_anomaly(anomaly)
        if report.startswith(INVESTIGATION_FAILED_PREFIX):
            self.logger.error(f"❌ Skipping Remediation: {report}")
            return CycleResult(
                outcome=CycleOutcome.DIAGNOSIS_FAILED,
                verdict=verdict,
                anomaly=anomaly,
                error=report,
            )
        self.logger.info(f"✅ Investigation Complete. RCA: {report}")

        if not is_actionable(report, s.inconclusive_marker):
            self.logger.warning("⚠️ Skipping Remediation: No valid root cause identified.")
            return CycleResult(
                outcome=CycleOutcome.INCONCLUSIVE,
                verdict=verdict,
                anomaly=anomaly,
                root_cause_report=report,
            )

        # Remediating; cancellation waits for an in-flight remediation to finish
        self.logger.info("🛠️ Starting Remediation...")
        remediation = asyncio.ensure_future(self.fixer.remediate(report))
        try:
            summary = await asyncio.shield(remediation)
        except asyncio.CancelledError:
            self.logger.warning("⏳ Cycle cancelled during remediation, waiting for it to finish...")
            try:
                summary = await remediation
            except Exception as e:
                self.logger.error(f"Remediation failed after cancellation: {e}", exc_info=True)
            else:
                self.logger.info(f"✅ Remediation Complete. Summary: {summary}")
            raise
        self.logger.info(f"✅ Remediation Complete. Summary: {summary}")

        return CycleResult(
            outcome=CycleOutcome.REMEDIATED,
            verdict=verdict,
            anomaly=anomaly,
            root_cause_report=report,
            remediation_summary=summary,
        )

    async def run_cycle(self) -> CycleResult:
        """Run a complete monitoring cycle with comprehensive error handling.

        Never raises except on cancellation.

        Returns:
            Result of the cycle, with outcome 'error' if anything failed
        """
        self.cycle_count += 1
        cycle_start = datetime.now()
        self.logger.info(f"🐶 Starting watchdog cycle #{self.cycle_count}")

        try:
            result = await self.check_metrics()
        except asyncio.CancelledError:
            self.logger.warning(f"Watchdog cycle #{self.cycle_count} cancelled")
            raise
        except Exception as e:
            self.logger.error(f"Error during Watchdog cycle: {e}", exc_info=True)
            result = CycleResult(outcome=CycleOutcome.ERROR, error=str(e))

        result.cycle_number = self.cycle_count
        result.started_at = cycle_start
        result.duration_seconds = (datetime.now() - cycle_start).total_seconds()

        if result.outcome in (
            CycleOutcome.ERROR,
            CycleOutcome.SAMPLING_FAILED,
            CycleOutcome.DIAGNOSIS_FAILED,
        ):
            self.failed_cycles += 1
        elif result.outcome != CycleOutcome.SKIPPED:
            self.failed_cycles = 0
            self.last_successful_cycle = datetime.now()
        self.last_cycle_status = result.outcome

        self.logger.info(f"Cycle completed: {result}")
        return result

    def get_status_summary(self) -> Dict[str, Any]:
        """Get current watchdog status summary.

        Returns:
            Dictionary with current watchdog state
        """
        return {
            "cycle_count": self.cycle_count,
            "failed_cycles": self.failed_cycles,
            "last_successful_cycle": (
                self.last_successful_cycle.isoformat()
                if self.last_successful_cycle
                else None
            ),
            "last_cycle_status": self.last_cycle_status,
            "health": "healthy" if self.failed_cycles < 3 else "degraded",
        }
