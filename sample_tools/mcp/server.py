import json
import logging
import signal
import sys
from enum import Enum
from typing import Any, BinaryIO, Callable, Dict, Iterable, List, Optional, TextIO

from sample_tools.core.config import DEFAULT_MAX_FRAME_BYTES, ServerConfig
from sample_tools.errors import FramingError, TransportError

from .handlers import RpcDispatcher
from .registry import ToolRegistry, build_default_registry

logger = logging.getLogger("SampleTools.mcp.server")

MessageCallback = Callable[[Dict[str, Any]], None]
ErrorCallback = Callable[[TransportError], None]
CloseCallback = Callable[[], None]


class TransportState(str, Enum):
    UNINITIALIZED = "uninitialized"
    CONNECTED = "connected"
    SHUTTING_DOWN = "shutting_down"
    CLOSED = "closed"


class _ShutdownRequested(BaseException):
    """Unwinds a blocking read when a termination signal arrives."""


class McpServer:
    """
    Handles JSON-RPC communication over stdio.

    One message is read, dispatched and answered before the next one is read.
    Termination signals take effect between message cycles.
    """

    def __init__(
        self,
        reader: Optional[BinaryIO] = None,
        writer: Optional[TextIO] = None,
        max_frame_bytes: int = DEFAULT_MAX_FRAME_BYTES,
    ):
        self._reader = reader
        self._writer = writer
        self.max_frame_bytes = max_frame_bytes
        # Lines recovered from a truncated frame, read before the stream.
        self._pending: List[bytes] = []
        self.state = TransportState.UNINITIALIZED

        self.on_message: Optional[MessageCallback] = None
        self.on_error: Optional[ErrorCallback] = None
        self.on_close: Optional[CloseCallback] = None
        self.dispatcher: Optional[RpcDispatcher] = None

        self._in_cycle = False
        self._shutdown_requested = False
        self._previous_signal_handlers: Dict[int, Any] = {}

    @property
    def is_connected(self) -> bool:
        return self.state == TransportState.CONNECTED

    def connect(
        self,
        on_message: MessageCallback,
        on_error: Optional[ErrorCallback] = None,
        on_close: Optional[CloseCallback] = None,
    ) -> None:
        """Open the channel and install the message, error and close callbacks."""
        if self.state != TransportState.UNINITIALIZED:
            raise TransportError(f"Cannot connect transport in state '{self.state.value}'")
        if self._reader is None:
            self._reader = sys.stdin.buffer
        if self._writer is None:
            self._writer = sys.stdout
        self.on_message = on_message
        self.on_error = on_error
        self.on_close = on_close
        self.state = TransportState.CONNECTED
        logger.debug("stdio transport connected")

    def report_error(self, error: TransportError) -> None:
        logger.warning("MCP transport error: %s", error)
        if self.on_error is not None:
            try:
                self.on_error(error)
            except Exception:
                logger.exception("Transport error callback failed")

    def send_rpc(self, message: Dict[str, Any]) -> None:
        """Serialize and send a JSON-RPC message to stdout."""
        if not self.is_connected:
            logger.debug("Dropping outbound message on %s transport", self.state.value)
            return

        try:
            serialized = json.dumps(message)
        except (TypeError, ValueError) as exc:
            self.report_error(TransportError(f"Unserializable outbound message: {exc}"))
            return

        try:
            self._writer.write(serialized + "\n")
            self._writer.flush()
        except (BrokenPipeError, OSError, ValueError) as exc:
            self.report_error(TransportError(f"stdio transport closed while sending: {exc}"))
            self._mark_closed()

    def read_message(self) -> Optional[Dict[str, Any]]:
        """
        Read one inbound JSON-RPC message from the channel.
        Supports Content-Length framing and newline-delimited JSON.
        Malformed frames are reported and skipped; None means end of input.
        """
        while True:
            line = self._readline()
            if not line:
                return None
            if not line.strip():
                continue

            if line.lower().startswith(b"content-length:"):
                try:
                    content_length = int(line.split(b":", 1)[1].strip())
                    if content_length <= 0:
                        raise ValueError("content length must be positive")
                except ValueError:
                    self.report_error(FramingError(f"Invalid Content-Length header: {line!r}", raw=line))
                    if not self._consume_framing_headers():
                        return None
                    continue

                if not self._consume_framing_headers():
                    return None

                if content_length > self.max_frame_bytes:
                    # The body is left on the stream and resynchronized line by line.
                    self.report_error(FramingError(
                        f"Content-Length {content_length} exceeds limit of {self.max_frame_bytes} bytes",
                        raw=line,
                    ))
                    continue

                payload = self._read_exact(content_length)
                if len(payload) != content_length:
                    self.report_error(FramingError(
                        f"Truncated framed JSON payload ({len(payload)}/{content_length} bytes)",
                        raw=payload,
                    ))
                    self._pending.extend(payload.splitlines(keepends=True))
                    continue
                msg = self._decode(payload)
            else:
                msg = self._decode(line)

            if msg is not None:
                return msg

    def _readline(self) -> bytes:
        if self._pending:
            return self._pending.pop(0)
        return self._reader.readline()

    def _read_exact(self, size: int) -> bytes:
        chunks = []
        remaining = size
        while remaining > 0 and self._pending:
            chunk = self._pending.pop(0)
            if len(chunk) > remaining:
                self._pending.insert(0, chunk[remaining:])
                chunk = chunk[:remaining]
            chunks.append(chunk)
            remaining -= len(chunk)
        if remaining > 0:
            chunks.append(self._reader.read(remaining) or b"")
        return b"".join(chunks)

    def _decode(self, payload: bytes) -> Optional[Dict[str, Any]]:
        try:
            msg = json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            self.report_error(FramingError(f"Invalid JSON payload: {exc}", raw=payload))
            return None
        if not isinstance(msg, dict):
            self.report_error(FramingError("Ignoring JSON payload that is not an object", raw=payload))
            return None
        return msg

    def _consume_framing_headers(self) -> bool:
        while True:
            header_line = self._readline()
            if not header_line:
                return False
            if header_line in (b"\r\n", b"\n"):
                return True

    def install_signal_handlers(self, signals: Iterable[int] = (signal.SIGINT, signal.SIGTERM)) -> None:
        for signum in signals:
            self._previous_signal_handlers[signum] = signal.signal(signum, self._handle_signal)

    def restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_signal_handlers.items():
            signal.signal(signum, handler)
        self._previous_signal_handlers.clear()

    def _handle_signal(self, signum, frame) -> None:
        logger.info("Received signal %s; shutting down", signum)
        self.request_shutdown()

    def request_shutdown(self) -> None:
        """Ask the loop to stop. Takes effect once the current message is answered."""
        self._shutdown_requested = True
        if not self._in_cycle and self.is_connected:
            raise _ShutdownRequested()

    def serve_forever(self) -> int:
        """Run the message loop until shutdown or end of input. Returns the exit status."""
        if not self.is_connected:
            raise TransportError("Transport must be connected before serving")
        try:
            while self.is_connected and not self._shutdown_requested:
                msg = self.read_message()
                if msg is None:
                    logger.info("stdin closed by peer")
                    self._mark_closed()
                    break
                self._in_cycle = True
                try:
                    self._deliver(msg)
                finally:
                    self._in_cycle = False
        except _ShutdownRequested:
            pass
        except OSError as exc:
            self.report_error(TransportError(f"stdio transport read failed: {exc}"))
            self._mark_closed()

        if self._shutdown_requested:
            self.close()
        return 0

    def _deliver(self, msg: Dict[str, Any]) -> None:
        try:
            self.on_message(msg)
        except Exception:
            logger.exception("Unhandled error in message callback")

    def close(self) -> None:
        """Orderly shutdown: stop reading, flush output, mark the channel closed."""
        if self.state == TransportState.CLOSED:
            return
        self.state = TransportState.SHUTTING_DOWN
        try:
            if self._writer is not None:
                self._writer.flush()
        except (OSError, ValueError) as exc:
            logger.debug("Flush during shutdown failed: %s", exc)
        self._mark_closed()
        logger.info("MCP stdio transport closed")

    def _mark_closed(self) -> None:
        if self.state == TransportState.CLOSED:
            return
        self.state = TransportState.CLOSED
        if self.on_close is not None:
            try:
                self.on_close()
            except Exception:
                logger.exception("Transport close callback failed")


def build_server(
    config: Optional[ServerConfig] = None,
    registry: Optional[ToolRegistry] = None,
    reader: Optional[BinaryIO] = None,
    writer: Optional[TextIO] = None,
) -> McpServer:
    """Wire registry, dispatcher and transport together and connect."""
    config = config or ServerConfig()
    registry = registry or build_default_registry()
    server = McpServer(reader=reader, writer=writer, max_frame_bytes=config.max_frame_bytes)
    dispatcher = RpcDispatcher(registry, server.send_rpc, config=config)
    server.connect(
        on_message=dispatcher.dispatch,
        on_close=lambda: logger.debug("Transport closed callback fired"),
    )
    server.dispatcher = dispatcher
    return server


def run_stdio_server(config: Optional[ServerConfig] = None) -> int:
    config = config or ServerConfig.from_env()
    server = build_server(config=config)
    server.install_signal_handlers()
    logger.info("%s running on stdio", config.name)
    try:
        return server.serve_forever()
    finally:
        server.restore_signal_handlers()
