"""MCP tool clients, client cache and tool aggregation."""

from .client import McpToolClient, ToolCallError, ToolClient, flatten_content
from .registry import BoundTool, aggregate_tools, build_sdk_servers
from .service import McpService

__all__ = [
    "BoundTool",
    "McpService",
    "McpToolClient",
    "ToolCallError",
    "ToolClient",
    "aggregate_tools",
    "build_sdk_servers",
    "flatten_content",
]
