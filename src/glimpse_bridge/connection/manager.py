"""Connection to the GLIMPSE request source.

Owns the single WebSocket connection, reconnects on a fixed cadence, and
answers ``extract_dom`` commands with one JSON reply each.
"""

import json
import threading
from typing import Any

from loguru import logger

from glimpse_bridge.config import RECONNECT_DELAY, TARGET_NAME, WS_URL
from glimpse_bridge.connection.transport import ThreadingScheduler, WebSocketTransport
from glimpse_bridge.core.tree.extractor import extract
from glimpse_bridge.core.tree.outline import render_outline
from glimpse_bridge.errors import BridgeError, NoTargetAvailableError, SendFaultError
from glimpse_bridge.models.node import ExtractionFailure, ExtractionSuccess
from glimpse_bridge.protocols import (
    ConnectionState,
    PageProtocol,
    SchedulerProtocol,
    TimerHandle,
    TransportFactory,
    TransportProtocol,
)

EXTRACT_DOM = "extract_dom"
PING = {"action": "ping"}


class ConnectionManager:
    """State machine for the connection to the request source.

    The connection state is always read from the live transport. Transport
    and timer callbacks may arrive on different threads; transitions are
    serialized with a lock.
    """

    def __init__(
        self,
        page: PageProtocol,
        *,
        url: str = WS_URL,
        reconnect_delay: float = RECONNECT_DELAY,
        target_name: str = TARGET_NAME,
        transport_factory: TransportFactory = WebSocketTransport,
        scheduler: SchedulerProtocol | None = None,
        send_ping_on_open: bool = True,
    ) -> None:
        self.page = page
        self.url = url
        self.reconnect_delay = reconnect_delay
        self.target_name = target_name
        self.send_ping_on_open = send_ping_on_open
        self._transport_factory = transport_factory
        self._scheduler = scheduler or ThreadingScheduler()
        self._lock = threading.RLock()
        self._transport: TransportProtocol | None = None
        self._reconnect_timer: TimerHandle | None = None
        self._stopped = False

    @property
    def current_state(self) -> ConnectionState:
        transport = self._transport
        if transport is None:
            return ConnectionState.DISCONNECTED
        return transport.state

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect_timer is not None

    def connect(self) -> None:
        """Open the connection unless it is already open or opening."""
        with self._lock:
            self._stopped = False
            if self.current_state is not ConnectionState.DISCONNECTED:
                return

            logger.info("Connecting to {}", self.url)
            try:
                transport = self._transport_factory(self.url, self)
                self._transport = transport
                transport.open()
            except Exception as e:
                logger.error("Failed to create connection to {}: {}", self.url, e)
                self._transport = None
                self._schedule_reconnect()

    def close(self) -> None:
        """Stop reconnecting and close the connection."""
        with self._lock:
            self._stopped = True
            self._cancel_reconnect()
            transport, self._transport = self._transport, None
        if transport is not None:
            transport.close()
        logger.info("Connection to {} closed", self.url)

    # --- Transport callbacks ---

    def on_open(self, transport: TransportProtocol) -> None:
        with self._lock:
            if transport is not self._transport:
                return
            logger.info("Connected to {}", self.url)
            self._cancel_reconnect()
        if self.send_ping_on_open:
            self._send(transport, PING)

    def on_message(self, transport: TransportProtocol, message: str) -> None:
        try:
            reply = self.handle_message(message)
        except Exception as e:
            logger.exception("Failed to handle request")
            reply = ExtractionFailure(error=str(e) or type(e).__name__).to_dict()
        if reply is not None:
            self._send(transport, reply)

    def on_error(self, transport: TransportProtocol, error: Exception) -> None:
        logger.error("WebSocket error on {}: {}", self.url, error)

    def on_close(self, transport: TransportProtocol) -> None:
        with self._lock:
            if transport is not self._transport:
                return
            logger.warning("Disconnected from {}", self.url)
            self._transport = None
            if not self._stopped:
                self._schedule_reconnect()

    # --- Requests ---

    def handle_message(self, message: str) -> dict[str, Any] | None:
        """Build the reply for one inbound message.

        Returns None for messages that get no reply (unknown actions).
        """
        try:
            request = json.loads(message)
        except ValueError as e:
            logger.error("Malformed request: {}", e)
            return ExtractionFailure(error=f"Malformed request: {e}").to_dict()

        if not isinstance(request, dict):
            logger.debug("Ignoring non-object message")
            return None

        action = request.get("action")
        logger.info("Request from server: {}", action)
        if action != EXTRACT_DOM:
            return None

        reply = self._extract_reply(request.get("node_id"))
        if "request_id" in request:
            reply["request_id"] = request["request_id"]
        return reply

    def _extract_reply(self, node_id: Any) -> dict[str, Any]:
        if not isinstance(node_id, str) or not node_id:
            return ExtractionFailure(error=f"{EXTRACT_DOM} requires a node_id").to_dict()

        try:
            document = self.page.snapshot()
            if document is None:
                raise NoTargetAvailableError(self.target_name)
        except BridgeError as e:
            logger.warning("{}", e)
            return ExtractionFailure(error=str(e)).to_dict()
        except Exception as e:
            logger.exception("Failed to read page")
            return ExtractionFailure(error=str(e) or type(e).__name__).to_dict()

        result = extract(document, node_id)
        if isinstance(result, ExtractionSuccess):
            logger.debug("Tree structure:\n{}", render_outline(result.children))
        return result.to_dict()

    def _send(self, transport: TransportProtocol, reply: dict[str, Any]) -> None:
        try:
            payload = json.dumps(reply)
        except (TypeError, ValueError, RecursionError) as e:
            logger.error("Cannot serialize reply: {}", e)
            payload = json.dumps(ExtractionFailure(error=str(e)).to_dict())

        try:
            transport.send(payload)
        except SendFaultError as e:
            logger.error("Failed to send reply: {}", e)
            return
        except Exception:
            logger.exception("Failed to send reply")
            return

        if "node_count" in reply:
            logger.info("Sent response: {} nodes", reply["node_count"])
        else:
            logger.debug("Sent {}", payload)

    # --- Reconnect timer ---

    def _schedule_reconnect(self) -> None:
        if self._reconnect_timer is not None:
            return
        logger.info("Retrying connection every {}s", self.reconnect_delay)
        self._reconnect_timer = self._scheduler.call_every(self.reconnect_delay, self._reconnect)

    def _cancel_reconnect(self) -> None:
        if self._reconnect_timer is not None:
            self._reconnect_timer.cancel()
            self._reconnect_timer = None

    def _reconnect(self) -> None:
        with self._lock:
            if self._stopped:
                return
        self.connect()
