"""Extract a rendered subtree from an outline document."""

from collections.abc import Sequence
from typing import Any

from loguru import logger

from glimpse_bridge.config import UNTITLED
from glimpse_bridge.errors import ExtractionFaultError, NodeNotFoundError
from glimpse_bridge.models.node import (
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    NodeRecord,
)
from glimpse_bridge.protocols import DocumentProtocol


def extract(document: DocumentProtocol, node_id: str) -> ExtractionResult:
    """Extract the subtree rooted at node_id.

    Only currently rendered descendants are included: a collapsed node and a
    childless node both come back with no children.

    Args:
        document: Snapshot of the rendered document.
        node_id: Identifier of the extraction root.

    Returns:
        ExtractionSuccess with the root record, node_count (root included)
        and depth (levels below the root), or ExtractionFailure. Never raises.
    """
    logger.debug("Extracting subtree for node {}", node_id)
    try:
        root_element = document.find_node(node_id)
        if root_element is None:
            raise NodeNotFoundError(node_id)

        parent_element = document.parent_node(root_element)
        parent_id = document.node_id(parent_element) if parent_element is not None else None

        root = NodeRecord(
            id=node_id,
            name=node_name(document, root_element),
            note=node_note(document, root_element),
            parent_id=parent_id or None,
            children=_extract_children(document, root_element, node_id),
        )
        node_count = 1 + count_nodes(root.children)
        depth = calculate_depth(root.children)
    except NodeNotFoundError as e:
        logger.warning("Node not found in DOM: {}", node_id)
        return ExtractionFailure(error=str(e))
    except Exception as e:
        logger.exception("Error during extraction of {}", node_id)
        return ExtractionFailure(error=str(e) or type(e).__name__)

    logger.info("Extracted {} nodes, depth {}", node_count, depth)
    return ExtractionSuccess(root=root, node_count=node_count, depth=depth)


def node_name(document: DocumentProtocol, element: Any) -> str:
    text = document.primary_text(element)
    return text.strip() if text is not None else UNTITLED


def node_note(document: DocumentProtocol, element: Any) -> str | None:
    """Return the note text as-is, or None when absent or blank."""
    text = document.secondary_text(element)
    if text is None or not text.strip():
        return None
    return text


def _extract_children(
    document: DocumentProtocol, element: Any, element_id: str
) -> tuple[NodeRecord, ...]:
    region = document.children_region(element)
    if region is None:
        # No children, or collapsed
        return ()

    children: list[NodeRecord] = []
    for child in document.direct_child_nodes(region):
        child_id = document.node_id(child)
        if child_id is None:
            msg = f"Child element under {element_id} carries no node identifier"
            raise ExtractionFaultError(msg)

        child_region = document.children_region(child)
        has_children = child_region is not None and document.region_has_elements(child_region)

        children.append(
            NodeRecord(
                id=child_id,
                name=node_name(document, child),
                note=node_note(document, child),
                parent_id=element_id,
                children=_extract_children(document, child, child_id) if has_children else (),
            )
        )
    return tuple(children)


def count_nodes(nodes: Sequence[NodeRecord]) -> int:
    """Count nodes in a forest, descendants included."""
    count = 0
    stack = list(nodes)
    while stack:
        node = stack.pop()
        count += 1
        stack.extend(node.children)
    return count


def calculate_depth(nodes: Sequence[NodeRecord]) -> int:
    """Return the number of levels in a forest (empty forest = 0)."""
    depth = 0
    stack = [(node, 1) for node in nodes]
    while stack:
        node, level = stack.pop()
        depth = max(depth, level)
        stack.extend((child, level + 1) for child in node.children)
    return depth
