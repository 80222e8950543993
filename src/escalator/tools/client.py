"""MCP tool-invocation clients.

A tool client lists the named tools of one backend MCP server and invokes them
with keyed arguments. The controller, the registry and the agents depend only on
the ``ToolClient`` protocol, so tests can substitute a fake without launching a
server process.
"""

import logging
from contextlib import AsyncExitStack
from typing import Any, Iterable, List, Optional, Protocol, runtime_checkable

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.types import CallToolResult, TextContent, Tool

from escalator.models import ToolArguments


class ToolCallError(RuntimeError):
    """Raised when a tool invocation reports an error result."""

    def __init__(self, tool_name: str, message: str):
        super().__init__(f"Tool '{tool_name}' failed: {message}")
        self.tool_name = tool_name


def flatten_content(content: Optional[Iterable[Any]]) -> str:
    """Fold content blocks into one newline-joined string.

    Text blocks contribute their text; every other block kind is stringified.

    Args:
        content: Content blocks from a tool result (may be None)

    Returns:
        Flattened text (empty string for no content)
    """
    if not content:
        return ""
    return "\n".join(
        block.text if isinstance(block, TextContent) else str(block)
        for block in content
    )


@runtime_checkable
class ToolClient(Protocol):
    """Client for a single backend that exposes named tools."""

    name: str

    async def list_tools(self) -> List[Tool]:
        ...

    async def call_tool(
        self, name: str, arguments: Optional[ToolArguments] = None
    ) -> CallToolResult:
        ...

    async def aclose(self) -> None:
        ...


class McpToolClient:
    """ToolClient backed by an MCP server launched over stdio."""

    def __init__(self, name: str, server_params: StdioServerParameters):
        """Initialize client.

        Args:
            name: Backend key (e.g. 'azure', 'github')
            server_params: Command, arguments and environment of the server
        """
        self.name = name
        self.server_params = server_params
        self.logger = logging.getLogger(__name__)
        self._exit_stack = AsyncExitStack()
        self._session: Optional[ClientSession] = None

    @property
    def connected(self) -> bool:
        return self._session is not None

    async def connect(self) -> "McpToolClient":
        """Launch the server process and initialize the MCP session."""
        if self._session is not None:
            return self

        self.logger.info(
            f"Starting MCP server '{self.name}': "
            f"{self.server_params.command} {' '.join(self.server_params.args)}"
        )
        try:
            read, write = await self._exit_stack.enter_async_context(
                stdio_client(self.server_params)
            )
            session = await self._exit_stack.enter_async_context(
                ClientSession(read, write)
            )
            await session.initialize()
        except BaseException:
            await self._exit_stack.aclose()
            raise

        self._session = session
        return self

    def _require_session(self) -> ClientSession:
        if self._session is None:
            raise RuntimeError(f"MCP client '{self.name}' is not connected")
        return self._session

    async def list_tools(self) -> List[Tool]:
        """List tools exposed by the server."""
        result = await self._require_session().list_tools()
        self.logger.debug(f"MCP server '{self.name}' exposes {len(result.tools)} tools")
        return list(result.tools)

    async def call_tool(
        self, name: str, arguments: Optional[ToolArguments] = None
    ) -> CallToolResult:
        """Invoke a tool by name.

        Args:
            name: Tool name
            arguments: Keyed tool arguments

        Returns:
            Raw tool result; callers inspect ``isError``
        """
        self.logger.debug(f"Calling {self.name}.{name}")
        return await self._require_session().call_tool(name, arguments=dict(arguments or {}))

    async def aclose(self) -> None:
        """Close the session and stop the server process."""
        self._session = None
        await self._exit_stack.aclose()
        self.logger.info(f"MCP server '{self.name}' disconnected")

    def __repr__(self) -> str:
        return f"McpToolClient(name={self.name!r}, connected={self.connected})"
