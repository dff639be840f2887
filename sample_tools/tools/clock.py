"""
Timestamp formatting for the `current_time` tool.

Supported formats:
    iso       UTC, millisecond precision, e.g. 2026-10-18T19:04:05.123Z
    unix      whole seconds since the epoch
    readable  local time, e.g. 10/18/2026, 7:04:05 PM
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from sample_tools.errors import ToolError
from sample_tools.tools.base import parse_arguments

TOOL_NAME = "current_time"
DEFAULT_FORMAT = "iso"


class CurrentTimeArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    format: str = DEFAULT_FORMAT

    @field_validator("format", mode="before")
    @classmethod
    def format_is_string(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError(f"Unsupported format: {v}. Use 'iso', 'unix', or 'readable'.")
        return v


def format_iso(now: datetime) -> str:
    utc = now.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def format_unix(now: datetime) -> str:
    return str(int(now.timestamp()))


def format_readable(now: datetime) -> str:
    local = now.astimezone()
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{local.month}/{local.day}/{local.year}, {hour}:{local:%M:%S} {meridiem}"


FORMATTERS: Dict[str, Callable[[datetime], str]] = {
    "iso": format_iso,
    "unix": format_unix,
    "readable": format_readable,
}


def current_time(arguments: Dict[str, Any], now: Optional[datetime] = None) -> str:
    args = parse_arguments(CurrentTimeArgs, arguments, TOOL_NAME)
    formatter = FORMATTERS.get(args.format)
    if formatter is None:
        raise ToolError(
            f"Unsupported format: {args.format}. Use 'iso', 'unix', or 'readable'.",
            tool_name=TOOL_NAME,
        )
    if now is None:
        now = datetime.now(timezone.utc)
    return formatter(now)
