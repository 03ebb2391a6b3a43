"""Bridge between the GLIMPSE MCP server and a rendered Workflowy outline."""

from glimpse_bridge.connection.manager import ConnectionManager
from glimpse_bridge.core.tree.extractor import extract
from glimpse_bridge.models.node import ExtractionFailure, ExtractionSuccess, NodeRecord
from glimpse_bridge.protocols import ConnectionState, DocumentProtocol, PageProtocol

__all__ = [
    "ConnectionManager",
    "ConnectionState",
    "DocumentProtocol",
    "ExtractionFailure",
    "ExtractionSuccess",
    "NodeRecord",
    "PageProtocol",
    "extract",
]
