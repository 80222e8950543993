"""Tier 3 fixer agent: proposes a fix for an identified root cause."""

import logging

from escalator.config import Settings
from escalator.tools import McpService
from escalator.tools.registry import filter_by_backend

from .prompts import build_fixer_prompt, build_remediation_request
from .session import ReasoningClient

NO_SUMMARY = "No remediation summary provided."


class FixerAgent:
    """Runs a remediation session that opens a pull request, never merges.

    Unlike the investigator, errors propagate to the caller so a failed
    remediation is reported as a failed cycle.
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

    async def remediate(self, root_cause_report: str) -> str:
        """Remediate the issue described by a root cause report.

        Args:
            root_cause_report: Output of the investigator agent

        Returns:
            Summary of the actions taken (e.g. the pull request created)
        """
        self.logger.info("🛠️ Fixer Agent: Starting remediation based on RCA...")

        all_tools = await self.mcp_service.get_tools()
        tools = filter_by_backend(all_tools, self.settings.remediation_backends)
        if not tools and all_tools:
            self.logger.warning(
                f"No tools from backends {self.settings.remediation_backends}, "
                f"fixer runs without tools"
            )

        session = self.reasoning_client.create_session(
            build_fixer_prompt(self.settings), name="Fixer"
        )
        summary = await session.run(build_remediation_request(root_cause_report), tools)

        return summary if summary and summary.strip() else NO_SUMMARY
