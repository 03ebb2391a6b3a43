"""WebSocket transport and timers used by the connection manager."""

import threading
from collections.abc import Callable

import websocket  # websocket-client
from loguru import logger

from glimpse_bridge.errors import SendFaultError, TransportFaultError
from glimpse_bridge.protocols import ConnectionState, TransportListener


class WebSocketTransport:
    """One connection attempt to a WebSocket server.

    Runs the websocket-client receive loop on a daemon thread. Messages are
    delivered one at a time, in order, on that thread. The listener's
    on_close is called exactly once, whether the connection failed to open
    or was closed later.
    """

    def __init__(self, url: str, listener: TransportListener) -> None:
        self.url = url
        self._listener = listener
        self._started = False
        self._closed = threading.Event()
        self._close_lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._app = websocket.WebSocketApp(
            url,
            on_open=self._handle_open,
            on_message=self._handle_message,
            on_error=self._handle_error,
            on_close=self._handle_close,
        )

    @property
    def state(self) -> ConnectionState:
        if not self._started or self._closed.is_set():
            return ConnectionState.DISCONNECTED
        sock = self._app.sock
        if sock is not None and sock.connected:
            return ConnectionState.CONNECTED
        return ConnectionState.CONNECTING

    def open(self) -> None:
        if self._started:
            msg = f"Transport to {self.url} was already opened"
            raise TransportFaultError(msg)
        self._started = True
        self._thread = threading.Thread(target=self._run, name="glimpse-websocket", daemon=True)
        self._thread.start()

    def send(self, payload: str) -> None:
        if self.state is not ConnectionState.CONNECTED:
            msg = f"Connection to {self.url} is not open"
            raise SendFaultError(msg)
        try:
            self._app.send(payload)
        except (websocket.WebSocketException, OSError) as e:
            raise SendFaultError(str(e)) from e

    def close(self) -> None:
        self._app.close()

    def _run(self) -> None:
        try:
            self._app.run_forever()
        except Exception as e:
            self._listener.on_error(self, TransportFaultError(str(e)))
        finally:
            self._notify_closed()

    def _handle_open(self, _ws: websocket.WebSocketApp) -> None:
        self._listener.on_open(self)

    def _handle_message(self, _ws: websocket.WebSocketApp, message: str) -> None:
        self._listener.on_message(self, message)

    def _handle_error(self, _ws: websocket.WebSocketApp, error: Exception) -> None:
        self._listener.on_error(self, TransportFaultError(str(error) or type(error).__name__))

    def _handle_close(
        self, _ws: websocket.WebSocketApp, _status: int | None, _reason: str | None
    ) -> None:
        self._notify_closed()

    def _notify_closed(self) -> None:
        with self._close_lock:
            if self._closed.is_set():
                return
            self._closed.set()
        self._listener.on_close(self)


class RepeatingTimer:
    """Calls a function every interval seconds on a daemon thread until cancelled."""

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self.interval = interval
        self.callback = callback
        self._cancelled = threading.Event()
        self._thread = threading.Thread(target=self._run, name="glimpse-reconnect", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def _run(self) -> None:
        while not self._cancelled.wait(self.interval):
            try:
                self.callback()
            except Exception:
                logger.exception("Scheduled callback failed")


class ThreadingScheduler:
    """SchedulerProtocol implementation backed by threads."""

    def call_every(self, interval: float, callback: Callable[[], None]) -> RepeatingTimer:
        timer = RepeatingTimer(interval, callback)
        timer.start()
        return timer
