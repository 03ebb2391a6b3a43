"""Protocols for dependency injection in the bridge."""

from collections.abc import Callable, Sequence
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable


class ConnectionState(StrEnum):
    """State of the single connection to the request source."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@runtime_checkable
class DocumentProtocol(Protocol):
    """Read-only view of a rendered outline document.

    Elements and regions are opaque handles owned by the implementation.
    """

    def find_node(self, node_id: str) -> Any | None:
        """Return the element identified by node_id, or None."""
        ...

    def node_id(self, element: Any) -> str | None:
        """Return the identifier carried by a node element."""
        ...

    def primary_text(self, element: Any) -> str | None:
        """Return the text of the element's name region, None if absent."""
        ...

    def secondary_text(self, element: Any) -> str | None:
        """Return the text of the element's note region, None if absent."""
        ...

    def parent_node(self, element: Any) -> Any | None:
        """Return the nearest enclosing node element, or None."""
        ...

    def children_region(self, element: Any) -> Any | None:
        """Return the element's direct children container, or None."""
        ...

    def region_has_elements(self, region: Any) -> bool:
        """Return whether a children container holds any element."""
        ...

    def direct_child_nodes(self, region: Any) -> Sequence[Any]:
        """Return node elements directly inside a children container, in order."""
        ...


@runtime_checkable
class PageProtocol(Protocol):
    """Access to the page holding the live document."""

    def snapshot(self) -> DocumentProtocol | None:
        """Return the current document, or None if no target page is reachable."""
        ...


@runtime_checkable
class TransportListener(Protocol):
    """Receiver of transport callbacks."""

    def on_open(self, transport: "TransportProtocol") -> None: ...

    def on_message(self, transport: "TransportProtocol", message: str) -> None: ...

    def on_error(self, transport: "TransportProtocol", error: Exception) -> None: ...

    def on_close(self, transport: "TransportProtocol") -> None: ...


@runtime_checkable
class TransportProtocol(Protocol):
    """A single message-oriented connection attempt."""

    @property
    def state(self) -> ConnectionState:
        """Current state of the underlying socket."""
        ...

    def open(self) -> None:
        """Start connecting; the listener is notified asynchronously."""
        ...

    def send(self, payload: str) -> None:
        """Send one text message."""
        ...

    def close(self) -> None:
        """Close the connection."""
        ...


TransportFactory = Callable[[str, TransportListener], TransportProtocol]


@runtime_checkable
class TimerHandle(Protocol):
    """A cancellable scheduled callback."""

    def cancel(self) -> None: ...


@runtime_checkable
class SchedulerProtocol(Protocol):
    """Source of repeating timers."""

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback every interval seconds until cancelled."""
        ...
