"""Aggregation of MCP tools from every active client into one flat toolset.

The aggregated tools are exposed to a Claude agent session as in-process SDK MCP
servers, one per backend, so two backends exposing the same tool name stay
addressable as ``mcp__<backend>__<tool>``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from claude_agent_sdk import SdkMcpTool, create_sdk_mcp_server
from mcp.types import Tool

from escalator.models import ToolArguments

from .client import ToolCallError, ToolClient, flatten_content

logger = logging.getLogger(__name__)

ToolInvoker = Callable[[ToolArguments], Awaitable[str]]


@dataclass(frozen=True)
class BoundTool:
    """A tool descriptor bound to the client that supplied it."""

    descriptor: Tool
    backend: str
    invoke: ToolInvoker

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def description(self) -> str:
        return self.descriptor.description or ""

    @property
    def qualified_name(self) -> str:
        """Name under which the agent session sees this tool."""
        return f"mcp__{self.backend}__{self.name}"


def bind_tool(tool: Tool, client: ToolClient) -> BoundTool:
    """Bind a tool descriptor to an invoker on its own client."""

    async def invoke(arguments: ToolArguments) -> str:
        result = await client.call_tool(tool.name, dict(arguments or {}))
        text = flatten_content(result.content)
        if result.isError:
            raise ToolCallError(tool.name, text or "no details")
        return text

    return BoundTool(descriptor=tool, backend=client.name, invoke=invoke)


async def aggregate_tools(clients: Iterable[ToolClient]) -> List[BoundTool]:
    """Collect the tools of every client in registration order.

    Args:
        clients: Active tool clients

    Returns:
        Bound tools; duplicate names across clients are kept as distinct entries
    """
    bound: List[BoundTool] = []
    for client in clients:
        tools = await client.list_tools()
        bound.extend(bind_tool(tool, client) for tool in tools)
        logger.debug(f"Aggregated {len(tools)} tools from '{client.name}'")
    return bound


def filter_by_backend(tools: Iterable[BoundTool], backends: Optional[Iterable[str]]) -> List[BoundTool]:
    """Keep only tools from the given backends (all tools when backends is empty)."""
    tools = list(tools)
    wanted = set(backends or [])
    if not wanted:
        return tools
    return [t for t in tools if t.backend in wanted]


def _sdk_input_schema(tool: Tool) -> Dict[str, Any]:
    # The SDK server only passes a schema through unchanged when it has both keys.
    schema = dict(tool.inputSchema or {})
    schema.setdefault("type", "object")
    schema.setdefault("properties", {})
    return schema


def _to_sdk_tool(tool: BoundTool) -> SdkMcpTool:
    async def handler(args: Dict[str, Any]) -> Dict[str, Any]:
        try:
            text = await tool.invoke(args)
        except Exception as e:
            logger.warning(f"Tool {tool.qualified_name} failed: {e}")
            return {"content": [{"type": "text", "text": f"Error: {e}"}], "is_error": True}
        return {"content": [{"type": "text", "text": text}]}

    return SdkMcpTool(
        name=tool.name,
        description=tool.description,
        input_schema=_sdk_input_schema(tool.descriptor),
        handler=handler,
    )


def build_sdk_servers(tools: Iterable[BoundTool]) -> Dict[str, Any]:
    """Group bound tools by backend into SDK MCP server configs."""
    grouped: Dict[str, List[SdkMcpTool]] = {}
    for tool in tools:
        grouped.setdefault(tool.backend, []).append(_to_sdk_tool(tool))

    return {
        backend: create_sdk_mcp_server(name=backend, version="1.0.0", tools=sdk_tools)
        for backend, sdk_tools in grouped.items()
    }


def allowed_tool_names(tools: Iterable[BoundTool]) -> List[str]:
    """Qualified tool names to allow in an agent session."""
    return [tool.qualified_name for tool in tools]
