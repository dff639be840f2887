"""
Sample Tools exceptions.
"""

from __future__ import annotations

from typing import Optional


class SampleToolsError(RuntimeError):
    """Base class for all server errors."""


class ToolError(SampleToolsError):
    """Request-level failure raised while handling a tool invocation."""

    def __init__(self, message: str, *, tool_name: Optional[str] = None) -> None:
        self.message = message
        self.tool_name = tool_name
        super().__init__(message)


class ToolArgumentError(ToolError):
    """Raised when tool arguments are missing or have the wrong shape."""


class UnknownToolError(ToolError):
    """Raised when a tool name is not present in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}", tool_name=name)


class RegistryError(SampleToolsError):
    """Raised when the tool catalog is built incorrectly."""


class TransportError(SampleToolsError):
    """Channel-level fault. Reported to the operator, never to the peer."""


class FramingError(TransportError):
    """Raised for malformed frames on the stdio channel."""

    def __init__(self, detail: str, *, raw: Optional[bytes] = None) -> None:
        self.raw = raw
        super().__init__(detail)
