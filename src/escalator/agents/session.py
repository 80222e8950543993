"""Reasoning sessions backed by the Claude Agent SDK.

The agents only depend on ``ReasoningClient``/``ReasoningSession``: a session is
created from an instruction and run with one user turn and a toolset, returning
the final text. The SDK's own tool-calling loop stays opaque.
"""

import logging
from typing import List, Optional, Protocol, Sequence

from claude_agent_sdk import (
    AssistantMessage,
    ClaudeAgentOptions,
    ClaudeSDKClient,
    ResultMessage,
    TextBlock,
)

from escalator.config import Settings
from escalator.tools.registry import BoundTool, allowed_tool_names, build_sdk_servers


class AgentSessionError(RuntimeError):
    """Raised when an agent session ends with an error result."""


class ReasoningSession(Protocol):
    name: str

    async def run(self, user_input: str, tools: Sequence[BoundTool]) -> str:
        ...


class ReasoningClient(Protocol):
    def create_session(self, instruction: str, name: str) -> ReasoningSession:
        ...


class ClaudeSession:
    """One Claude agent conversation with a fixed system prompt."""

    def __init__(
        self,
        instruction: str,
        name: str,
        model: str,
        max_turns: int,
        api_key: Optional[str] = None,
    ):
        self.instruction = instruction
        self.name = name
        self.model = model
        self.max_turns = max_turns
        self.api_key = api_key
        self.logger = logging.getLogger(__name__)

    def build_options(self, tools: Sequence[BoundTool]) -> ClaudeAgentOptions:
        """Agent options exposing the given tools as SDK MCP servers."""
        servers = build_sdk_servers(tools)
        return ClaudeAgentOptions(
            system_prompt=self.instruction,
            mcp_servers=servers,
            allowed_tools=allowed_tool_names(tools),
            model=self.model,
            max_turns=self.max_turns,
            env={"ANTHROPIC_API_KEY": self.api_key} if self.api_key else {},
        )

    async def run(self, user_input: str, tools: Sequence[BoundTool]) -> str:
        """Run the session with a single user turn.

        Args:
            user_input: The user message
            tools: Tools the agent may call

        Returns:
            Final response text (may be empty)
        """
        options = self.build_options(tools)
        self.logger.info(f"{self.name} session starting with {len(tools)} tools")

        text_parts: List[str] = []
        final_result: Optional[str] = None

        async with ClaudeSDKClient(options=options) as client:
            await client.query(user_input)

            async for message in client.receive_response():
                if isinstance(message, AssistantMessage):
                    for block in message.content:
                        if isinstance(block, TextBlock):
                            text_parts.append(block.text)
                elif isinstance(message, ResultMessage):
                    if message.is_error:
                        raise AgentSessionError(
                            f"{self.name} session failed: {message.result or message.subtype}"
                        )
                    final_result = message.result
                    self.logger.info(
                        f"{self.name} session finished in {message.num_turns} turns"
                        + (
                            f", cost ${message.total_cost_usd:.4f}"
                            if message.total_cost_usd is not None
                            else ""
                        )
                    )

        return (final_result or "\n".join(text_parts)).strip()


class ClaudeReasoningClient:
    """Creates Claude agent sessions from settings."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def create_session(self, instruction: str, name: str) -> ClaudeSession:
        return ClaudeSession(
            instruction=instruction,
            name=name,
            model=self.settings.agent_model,
            max_turns=self.settings.agent_max_turns,
            api_key=self.settings.anthropic_api_key,
        )
