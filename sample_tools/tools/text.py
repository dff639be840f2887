"""String reversal for the `reverse_string` tool."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sample_tools.tools.base import parse_arguments

TOOL_NAME = "reverse_string"


class ReverseStringArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("text", mode="before")
    @classmethod
    def require_text(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError("Text is required and must be a string")
        return v


def reverse_string(arguments: Dict[str, Any]) -> str:
    args = parse_arguments(ReverseStringArgs, arguments, TOOL_NAME)
    return args.text[::-1]
