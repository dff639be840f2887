import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from sample_tools.core.config import ServerConfig
from sample_tools.errors import ToolError, UnknownToolError
from sample_tools.version import __version__

from .protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    JSONRPC_VERSION,
    METHOD_INITIALIZE,
    METHOD_INITIALIZED,
    METHOD_NOT_FOUND,
    METHOD_PING,
    METHOD_TOOLS_CALL,
    METHOD_TOOLS_LIST,
    negotiate_protocol_version,
)
from .registry import ToolRegistry
from .utils import truncate_tool_text

logger = logging.getLogger("SampleTools.mcp.handlers")


@dataclass
class ToolResult:
    """Outcome of one tool invocation: success text or an error message."""
    content: List[Dict[str, str]] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        return cls(content=[{"type": "text", "text": text}])

    @classmethod
    def failure(cls, message: str) -> "ToolResult":
        return cls(content=[{"type": "text", "text": message}], is_error=True)

    @property
    def text(self) -> str:
        return "".join(item.get("text", "") for item in self.content)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"content": [dict(item) for item in self.content]}
        if self.is_error:
            payload["isError"] = True
        return payload


def list_tools(registry: ToolRegistry) -> Dict[str, Any]:
    """Listing-response envelope for every registered tool."""
    return {"tools": [descriptor.to_dict() for descriptor in registry.list()]}


def call_tool(
    registry: ToolRegistry,
    name: str,
    arguments: Optional[Dict[str, Any]] = None,
    max_chars: Optional[int] = None,
) -> ToolResult:
    """
    Resolve and invoke a tool.

    Never raises: an unknown name and every handler error are turned into a
    failure result, so a bad request can not take the transport down.
    """
    try:
        handler = registry.resolve(name)
    except UnknownToolError as exc:
        logger.warning("tools/call for unknown tool '%s'", name)
        return ToolResult.failure(exc.message)

    try:
        text = handler(dict(arguments or {}))
    except ToolError as exc:
        logger.info("Tool '%s' rejected request: %s", name, exc)
        return ToolResult.failure(f"Error: {exc}")
    except Exception as exc:
        logger.exception("Tool '%s' raised unexpectedly", name)
        return ToolResult.failure(f"Error: {exc}")

    if not isinstance(text, str):
        text = str(text)
    if max_chars is not None:
        text = truncate_tool_text(text, name, max_chars)
    return ToolResult.success(text)


class RpcDispatcher:
    """
    Routes parsed JSON-RPC messages to their handlers.

    Conformance notes:
    - Unknown request methods (with id) return -32601.
    - Unknown notifications (no id) are ignored.
    - Request-level tool failures are results with isError, never RPC errors.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        send_fn: Callable[[Dict[str, Any]], None],
        config: Optional[ServerConfig] = None,
    ):
        self.registry = registry
        self.send_fn = send_fn
        self.config = config or ServerConfig()
        self.session: Dict[str, Any] = {
            "negotiated": False,
            "initialized": False,
            "protocol_version": None,
            "client_capabilities": {},
            "client_info": {},
        }

    def send_result(self, msg_id: Any, result: Dict[str, Any]) -> None:
        self.send_fn({"jsonrpc": JSONRPC_VERSION, "id": msg_id, "result": result})

    def send_error(self, msg_id: Any, code: int, message: str) -> None:
        self.send_fn({
            "jsonrpc": JSONRPC_VERSION,
            "id": msg_id,
            "error": {
                "code": code,
                "message": message,
            },
        })

    def dispatch(self, msg: Dict[str, Any]) -> None:
        msg_id = msg.get("id")
        try:
            self._dispatch(msg)
        except Exception:
            logger.exception("Unexpected error during RPC dispatch")
            if msg_id is not None:
                self.send_error(msg_id, INTERNAL_ERROR, "Internal error during request dispatch.")

    def _dispatch(self, msg: Dict[str, Any]) -> None:
        msg_id = msg.get("id")
        method = msg.get("method")
        params = msg.get("params")

        if not isinstance(method, str):
            if msg_id is not None:
                self.send_error(msg_id, INVALID_REQUEST, "Invalid Request: missing method")
            else:
                logger.debug("Ignoring message without method or id: %r", msg)
            return

        if method == METHOD_INITIALIZED:
            if self.session["negotiated"]:
                self.session["initialized"] = True
                logger.info("Client initialized connection")
            else:
                logger.warning("Ignored notifications/initialized before successful initialize")
            return

        if msg_id is None:
            logger.debug("Ignoring notification: %s", method)
            return

        if params is None:
            params = {}
        if not isinstance(params, dict):
            self.send_error(msg_id, INVALID_PARAMS, f"Invalid params: {method} params must be an object")
            return

        if method == METHOD_INITIALIZE:
            self.handle_initialize(msg_id, params)
        elif method == METHOD_PING:
            self.send_result(msg_id, {})
        elif method == METHOD_TOOLS_LIST:
            self.handle_list_tools(msg_id)
        elif method == METHOD_TOOLS_CALL:
            self.handle_call_tool(msg_id, params)
        else:
            self.send_error(msg_id, METHOD_NOT_FOUND, f"Method not found: {method}")

    def handle_initialize(self, msg_id: Any, params: Dict[str, Any]) -> None:
        """Handle protocol negotiation and server initialization."""
        requested_version = params.get("protocolVersion")
        negotiated_version = negotiate_protocol_version(requested_version)
        if requested_version and requested_version != negotiated_version:
            logger.warning(
                "Client requested unsupported protocol version %s; offering %s",
                requested_version,
                negotiated_version,
            )

        client_info = params.get("clientInfo")
        self.session["negotiated"] = True
        self.session["protocol_version"] = negotiated_version
        self.session["client_capabilities"] = params.get("capabilities") or {}
        self.session["client_info"] = client_info if isinstance(client_info, dict) else {}
        logger.info(
            "Initialize from %s (protocol %s)",
            self.session["client_info"].get("name", "unknown client"),
            negotiated_version,
        )

        self.send_result(msg_id, {
            "protocolVersion": negotiated_version,
            "capabilities": {
                "tools": {
                    "listChanged": False,
                },
            },
            "serverInfo": {"name": self.config.name, "version": __version__},
        })

    def handle_list_tools(self, msg_id: Any) -> None:
        if not self.session["initialized"]:
            logger.debug("tools/list before initialization completed")
        self.send_result(msg_id, list_tools(self.registry))

    def handle_call_tool(self, msg_id: Any, params: Dict[str, Any]) -> None:
        name = params.get("name")
        if not isinstance(name, str):
            self.send_error(msg_id, INVALID_PARAMS, "Invalid params: tools/call requires a string name")
            return
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            self.send_error(msg_id, INVALID_PARAMS, "Invalid params: tools/call arguments must be an object")
            return

        result = call_tool(
            self.registry,
            name,
            arguments,
            max_chars=self.config.tool_response_max_chars,
        )
        self.send_result(msg_id, result.to_dict())
