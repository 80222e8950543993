"""Tier 2 investigator agent: root-cause analysis of a detected anomaly."""

import logging

from escalator.config import Settings
from escalator.tools import McpService

from .prompts import build_investigator_prompt
from .session import ReasoningClient

INVESTIGATION_FAILED_PREFIX = "Investigation failed:"


class InvestigatorAgent:
    """Runs a diagnosis session over every aggregated tool.

    Awakened by the watchdog when a metric anomaly is detected. Never raises:
    a failed investigation is returned as a textual report so the polling loop
    keeps running.
    """

    def __init__(
        self,
        reasoning_client: ReasoningClient,
        mcp_service: McpService,
        settings: Settings,
    ):
        self.reasoning_client = reasoning_client
        self.mcp_service = mcp_service
        self.settings = settings
        self.logger = logging.getLogger(__name__)

    async def investigate_anomaly(self, anomaly_description: str) -> str:
        """Investigate an anomaly.

        Args:
            anomaly_description: What was detected, including the evidence

        Returns:
            Root cause analysis report, the inconclusive marker when the session
            produced no text, or an 'Investigation failed' report
        """
        self.logger.info(f"🕵️ Investigator Agent awakening to investigate: {anomaly_description}")

        try:
            session = self.reasoning_client.create_session(
                build_investigator_prompt(self.settings), name="Investigator"
            )
            tools = await self.mcp_service.get_tools()
            report = await session.run(anomaly_description, tools)
        except Exception as e:
            self.logger.error(f"Error during investigation: {e}", exc_info=True)
            return f"{INVESTIGATION_FAILED_PREFIX} {e}"

        self.logger.info("✅ Investigation complete.")
        if not report or not report.strip():
            return f"{self.settings.inconclusive_marker}."
        return report
