"""
Tool catalog.

The registry is filled once at startup and sealed before the transport reads
its first message. After that it is read-only: the names it lists are exactly
the names it can resolve.
"""

import copy
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from sample_tools.errors import RegistryError, UnknownToolError
from sample_tools.tools import calculate, current_time, generate_uuid, reverse_string

from .definitions import TOOLS_SCHEMAS

logger = logging.getLogger("SampleTools.mcp.registry")

ToolHandler = Callable[[Dict[str, Any]], str]


@dataclass(frozen=True)
class ToolDescriptor:
    """Name, human description and input schema of one tool."""
    name: str
    description: str
    input_schema: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_schema(cls, schema: Dict[str, Any]) -> "ToolDescriptor":
        name = schema.get("name")
        if not isinstance(name, str) or not name:
            raise RegistryError(f"Tool schema is missing a name: {schema!r}")
        input_schema = schema.get("inputSchema") or {"type": "object", "properties": {}, "required": []}
        if input_schema.get("type") != "object":
            raise RegistryError(f"Tool '{name}' input schema must be of type 'object'")
        return cls(
            name=name,
            description=str(schema.get("description", "")),
            input_schema=MappingProxyType(copy.deepcopy(input_schema)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(dict(self.input_schema)),
        }


class ToolRegistry:
    def __init__(self) -> None:
        self._entries: Dict[str, Tuple[ToolDescriptor, ToolHandler]] = {}
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def register(self, descriptor: ToolDescriptor, handler: ToolHandler) -> None:
        if self._sealed:
            raise RegistryError(f"Registry is sealed; cannot register '{descriptor.name}'")
        if descriptor.name in self._entries:
            raise RegistryError(f"Tool '{descriptor.name}' is already registered")
        if not callable(handler):
            raise RegistryError(f"Handler for '{descriptor.name}' is not callable")
        self._entries[descriptor.name] = (descriptor, handler)
        logger.debug("Registered tool '%s'", descriptor.name)

    def seal(self) -> "ToolRegistry":
        self._sealed = True
        return self

    def list(self) -> List[ToolDescriptor]:
        """Descriptors in registration order."""
        return [descriptor for descriptor, _ in self._entries.values()]

    def names(self) -> List[str]:
        return list(self._entries)

    def get(self, name: str) -> Optional[ToolHandler]:
        entry = self._entries.get(name)
        return entry[1] if entry else None

    def resolve(self, name: str) -> ToolHandler:
        handler = self.get(name)
        if handler is None:
            raise UnknownToolError(name)
        return handler

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self.list())


TOOL_HANDLERS: Dict[str, ToolHandler] = {
    "calculate": calculate,
    "generate_uuid": generate_uuid,
    "reverse_string": reverse_string,
    "current_time": current_time,
}


def build_default_registry() -> ToolRegistry:
    """Build and seal the registry for the built-in tool catalog."""
    registry = ToolRegistry()
    for schema in TOOLS_SCHEMAS:
        descriptor = ToolDescriptor.from_schema(schema)
        handler = TOOL_HANDLERS.get(descriptor.name)
        if handler is None:
            raise RegistryError(f"No handler for tool '{descriptor.name}'")
        registry.register(descriptor, handler)
    missing = set(TOOL_HANDLERS) - set(registry.names())
    if missing:
        raise RegistryError(f"Handlers without a schema: {sorted(missing)}")
    return registry.seal()
