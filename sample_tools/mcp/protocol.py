"""
Sample Tools MCP Protocol Constants
"""

from typing import Optional

JSONRPC_VERSION = "2.0"

# Newest first. Unknown client versions are answered with the newest one.
SUPPORTED_PROTOCOL_VERSIONS = ("2025-06-18", "2025-03-26", "2024-11-05")
LATEST_PROTOCOL_VERSION = SUPPORTED_PROTOCOL_VERSIONS[0]

# Standard JSON-RPC / MCP Error Codes
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
PARSE_ERROR = -32700

# Methods
METHOD_INITIALIZE = "initialize"
METHOD_INITIALIZED = "notifications/initialized"
METHOD_PING = "ping"
METHOD_TOOLS_LIST = "tools/list"
METHOD_TOOLS_CALL = "tools/call"


def negotiate_protocol_version(version: Optional[str]) -> str:
    if version in SUPPORTED_PROTOCOL_VERSIONS:
        return version
    return LATEST_PROTOCOL_VERSION
