"""Error types raised inside the bridge.

None of these cross the connection boundary: per-request errors become
failure replies, transport errors trigger the reconnect policy.
"""


class BridgeError(RuntimeError):
    """Base class for bridge errors."""


class NodeNotFoundError(BridgeError):
    """The requested node has no element in the current document."""

    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(f"Node {node_id} not found in DOM (may be collapsed or not loaded)")


class NoTargetAvailableError(BridgeError):
    """No target page is reachable at all."""

    def __init__(self, target_name: str) -> None:
        self.target_name = target_name
        super().__init__(f"No {target_name} tab open")


class ExtractionFaultError(BridgeError):
    """The document had an unexpected structure during traversal."""


class PageAccessError(BridgeError):
    """The page access layer could not produce a document snapshot."""


class TransportFaultError(BridgeError):
    """The connection to the request source could not be opened or was lost."""


class SendFaultError(BridgeError):
    """A reply could not be transmitted."""
