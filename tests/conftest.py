"""Pytest fixtures and configuration."""

from typing import Dict, List, Optional, Sequence

import pytest
from mcp.types import CallToolResult, ImageContent, TextContent, Tool

from escalator.config import Settings


def text_result(*texts: str, is_error: bool = False) -> CallToolResult:
    """Build a tool result made of text blocks."""
    return CallToolResult(
        content=[TextContent(type="text", text=t) for t in texts],
        isError=is_error,
    )


def image_block() -> ImageContent:
    return ImageContent(type="image", data="aGVsbG8=", mimeType="image/png")


def make_tool(name: str, description: str = "", schema: Optional[dict] = None) -> Tool:
    return Tool(
        name=name,
        description=description or f"{name} tool",
        inputSchema=schema or {"type": "object", "properties": {}},
    )


class FakeToolClient:
    """In-memory ToolClient with canned results per tool name."""

    def __init__(self, name: str, tools: Sequence[Tool] = (), results: Optional[Dict] = None):
        self.name = name
        self.tools = list(tools)
        self.results = results or {}
        self.calls: List[tuple] = []
        self.closed = False

    async def list_tools(self) -> List[Tool]:
        return list(self.tools)

    async def call_tool(self, name, arguments=None) -> CallToolResult:
        self.calls.append((name, arguments))
        result = self.results.get(name)
        if isinstance(result, Exception):
            raise result
        if result is None:
            return text_result(f"{self.name}:{name}")
        return result

    async def aclose(self) -> None:
        self.closed = True


class FakeSession:
    """Reasoning session returning canned text regardless of the tools offered."""

    def __init__(self, name: str, instruction: str, response="", error: Optional[Exception] = None):
        self.name = name
        self.instruction = instruction
        self.response = response
        self.error = error
        self.runs: List[tuple] = []

    async def run(self, user_input, tools) -> str:
        self.runs.append((user_input, list(tools)))
        if self.error is not None:
            raise self.error
        return self.response


class FakeReasoningClient:
    """Creates FakeSessions and remembers them."""

    def __init__(self, response="", error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.sessions: List[FakeSession] = []

    def create_session(self, instruction: str, name: str) -> FakeSession:
        session = FakeSession(name, instruction, self.response, self.error)
        self.sessions.append(session)
        return session


@pytest.fixture
def test_settings(monkeypatch, tmp_path):
    """Create test settings with minimal configuration."""
    # Keep a developer's .env out of the tests
    monkeypatch.chdir(tmp_path)

    return Settings(
        anthropic_api_key="sk-test-key-12345",
        azure_tenant_id="test-tenant",
        azure_subscription_id="test-sub",
        github_token="test-token",
        target_resource="asp-cpuspiker-free-central",
        resource_group="rg-opsweaver-hackathon",
        log_level="INFO",
    )


@pytest.fixture
def azure_client():
    """Azure client exposing the monitor tool."""
    return FakeToolClient("azure", tools=[make_tool("monitor"), make_tool("group_list")])


@pytest.fixture
def github_client():
    """GitHub client exposing PR tools."""
    return FakeToolClient(
        "github",
        tools=[make_tool("create_branch"), make_tool("create_pull_request")],
    )
