"""
Sample Tools: a small MCP tool server over stdio
"""

from sample_tools.errors import (
    FramingError,
    RegistryError,
    SampleToolsError,
    ToolArgumentError,
    ToolError,
    TransportError,
    UnknownToolError,
)
from sample_tools.version import __version__

__all__ = [
    "__version__",
    "SampleToolsError",
    "ToolError",
    "ToolArgumentError",
    "UnknownToolError",
    "RegistryError",
    "TransportError",
    "FramingError",
]
