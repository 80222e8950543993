"""Cache of persistent MCP tool clients, one per backend."""

import asyncio
import logging
import sys
from typing import Awaitable, Callable, Dict, List, Optional

from mcp import StdioServerParameters

from .client import McpToolClient, ToolClient
from .registry import BoundTool, aggregate_tools

AZURE_BACKEND = "azure"
GITHUB_BACKEND = "github"

ClientFactory = Callable[[str, StdioServerParameters], Awaitable[ToolClient]]


def _npx_command() -> str:
    return "npx.cmd" if sys.platform == "win32" else "npx"


def create_azure_server_params(subscription_id: str, tenant_id: str) -> StdioServerParameters:
    """Launch parameters for the '@azure/mcp' server via npx."""
    return StdioServerParameters(
        command=_npx_command(),
        args=["-y", "@azure/mcp", "server", "start"],
        env={
            "AZURE_SUBSCRIPTION_ID": subscription_id,
            "AZURE_TENANT_ID": tenant_id,
        },
    )


def create_github_server_params(github_token: str) -> StdioServerParameters:
    """Launch parameters for the '@modelcontextprotocol/server-github' server via npx."""
    return StdioServerParameters(
        command=_npx_command(),
        args=["-y", "@modelcontextprotocol/server-github"],
        env={"GITHUB_PERSONAL_ACCESS_TOKEN": github_token},
    )


async def _connect_mcp_client(name: str, params: StdioServerParameters) -> ToolClient:
    return await McpToolClient(name, params).connect()


class McpService:
    """Manages persistent MCP clients keyed by backend.

    Clients are created lazily on first request and reused afterwards. Creation
    is serialized so concurrent first requests for the same backend share one
    connection.
    """

    def __init__(self, client_factory: Optional[ClientFactory] = None):
        """Initialize service.

        Args:
            client_factory: Async callable (name, params) -> connected client.
                Defaults to launching an MCP server over stdio.
        """
        self.logger = logging.getLogger(__name__)
        self._client_factory = client_factory or _connect_mcp_client
        self._clients: Dict[str, ToolClient] = {}
        self._lock = asyncio.Lock()

    async def get_client(self, key: str, params: StdioServerParameters) -> ToolClient:
        """Get the cached client for a backend, creating it if needed.

        Args:
            key: Stable backend identity
            params: Launch parameters used only when the client is created

        Returns:
            Connected tool client
        """
        existing = self._clients.get(key)
        if existing is not None:
            return existing

        async with self._lock:
            existing = self._clients.get(key)
            if existing is not None:
                return existing

            client = await self._client_factory(key, params)
            self._clients[key] = client
            self.logger.info(f"🔌 Connected to {key} MCP server")
            return client

    async def get_azure_client(self, subscription_id: str, tenant_id: str) -> ToolClient:
        """Get or create the Azure MCP client."""
        return await self.get_client(
            AZURE_BACKEND, create_azure_server_params(subscription_id, tenant_id)
        )

    async def get_github_client(self, github_token: str) -> ToolClient:
        """Get or create the GitHub MCP client."""
        return await self.get_client(GITHUB_BACKEND, create_github_server_params(github_token))

    def get_active_clients(self) -> List[ToolClient]:
        """Return all connected clients in registration order."""
        return list(self._clients.values())

    async def get_tools(self) -> List[BoundTool]:
        """Aggregate the tools of every active client."""
        return await aggregate_tools(self.get_active_clients())

    async def aclose(self) -> None:
        """Close every client and clear the cache."""
        async with self._lock:
            clients = list(self._clients.items())
            self._clients.clear()

        for key, client in reversed(clients):
            try:
                await client.aclose()
            except Exception as e:
                self.logger.warning(f"Error closing {key} MCP client: {e}")
