"""
Shared argument handling for tool handlers.

Each tool declares a pydantic model for its arguments; parse_arguments turns
the untyped JSON mapping from the wire into that model or raises
ToolArgumentError carrying a human-readable message.
"""

from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

from sample_tools.errors import ToolArgumentError

ArgsT = TypeVar("ArgsT", bound=BaseModel)


def _describe_validation_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    # Messages raised by our own validators are passed through verbatim.
    original = (first.get("ctx") or {}).get("error")
    if isinstance(original, Exception):
        return str(original)
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def parse_arguments(model: Type[ArgsT], arguments: Dict[str, Any], tool_name: str) -> ArgsT:
    try:
        return model.model_validate(arguments or {})
    except ValidationError as exc:
        raise ToolArgumentError(_describe_validation_error(exc), tool_name=tool_name) from exc
