"""UUID generation for the `generate_uuid` tool."""

import uuid
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, field_validator

from sample_tools.tools.base import parse_arguments

TOOL_NAME = "generate_uuid"
SUPPORTED_UUID_VERSION = 4


class GenerateUuidArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    version: int = SUPPORTED_UUID_VERSION

    @field_validator("version", mode="before")
    @classmethod
    def only_version_four(cls, v: Any) -> int:
        # bool is an int subclass; True must not pass as version 1.
        if isinstance(v, bool) or not isinstance(v, (int, float)) or v != SUPPORTED_UUID_VERSION:
            raise ValueError("Only UUID version 4 is supported")
        return SUPPORTED_UUID_VERSION


def generate_uuid(arguments: Dict[str, Any]) -> str:
    parse_arguments(GenerateUuidArgs, arguments, TOOL_NAME)
    return str(uuid.uuid4())
