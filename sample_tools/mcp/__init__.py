"""
MCP protocol layer: tool registry, request dispatch and the stdio transport.
"""

from .handlers import RpcDispatcher, ToolResult, call_tool, list_tools
from .registry import ToolDescriptor, ToolRegistry, build_default_registry
from .server import McpServer, TransportState, build_server, run_stdio_server

__all__ = [
    "McpServer",
    "RpcDispatcher",
    "ToolDescriptor",
    "ToolRegistry",
    "ToolResult",
    "TransportState",
    "build_default_registry",
    "build_server",
    "call_tool",
    "list_tools",
    "run_stdio_server",
]
