"""
Sample Tools Configuration
--------------------------
Centralized configuration for the stdio server.
Loads from SAMPLE_TOOLS_* environment variables.
"""

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger("SampleTools.Config")

DEFAULT_SERVER_NAME = "sample-tools-mcp"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_TOOL_RESPONSE_MAX_CHARS = 32768
DEFAULT_MAX_FRAME_BYTES = 4 * 1024 * 1024
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_positive_int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
        if value <= 0:
            raise ValueError
        return value
    except ValueError:
        logger.warning(
            "Invalid %s value '%s'; expected positive integer. Using %d.",
            name,
            raw,
            default,
        )
        return default


def _normalize_log_level(level: Optional[str]) -> str:
    candidate = (level or "").strip().upper()
    if candidate in SUPPORTED_LOG_LEVELS:
        return candidate
    if candidate:
        logger.warning(
            "Unsupported log level '%s'; expected one of %s. Falling back to '%s'.",
            candidate,
            SUPPORTED_LOG_LEVELS,
            DEFAULT_LOG_LEVEL,
        )
    return DEFAULT_LOG_LEVEL


class ServerConfig(BaseModel):
    """Process-wide server configuration."""
    name: str = DEFAULT_SERVER_NAME
    log_level: str = DEFAULT_LOG_LEVEL
    # When unset, diagnostics go to stderr so stdout stays clean for framing.
    log_file: Optional[str] = None
    tool_response_max_chars: int = Field(default=DEFAULT_TOOL_RESPONSE_MAX_CHARS, gt=0)
    # Upper bound for a Content-Length framed payload.
    max_frame_bytes: int = Field(default=DEFAULT_MAX_FRAME_BYTES, gt=0)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Build configuration from environment variables."""
        log_file = os.environ.get("SAMPLE_TOOLS_LOG_FILE", "").strip() or None
        return cls(
            name=os.environ.get("SAMPLE_TOOLS_SERVER_NAME", DEFAULT_SERVER_NAME).strip() or DEFAULT_SERVER_NAME,
            log_level=_normalize_log_level(os.environ.get("SAMPLE_TOOLS_LOG_LEVEL")),
            log_file=log_file,
            tool_response_max_chars=_parse_positive_int_env(
                "SAMPLE_TOOLS_TOOL_RESPONSE_MAX_CHARS",
                DEFAULT_TOOL_RESPONSE_MAX_CHARS,
            ),
            max_frame_bytes=_parse_positive_int_env(
                "SAMPLE_TOOLS_MAX_FRAME_BYTES",
                DEFAULT_MAX_FRAME_BYTES,
            ),
        )
