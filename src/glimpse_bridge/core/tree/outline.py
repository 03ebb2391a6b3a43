"""Render extracted node trees as an indented outline."""

import io
from collections.abc import Sequence

from glimpse_bridge.models.node import NodeRecord

BRANCH_BULLET = "◉"
LEAF_BULLET = "●"


def render_outline(nodes: Sequence[NodeRecord], *, indent: str = "    ") -> str:
    """Render a forest as one line per node.

    Args:
        nodes: Top-level nodes, usually the children of an extraction root.
        indent: Indentation per nesting level.

    Returns:
        Outline string; nodes with children get a filled-ring bullet.
    """
    out = io.StringIO()
    _write_level(out, nodes, 0, indent)
    return out.getvalue()


def _write_level(out: io.StringIO, nodes: Sequence[NodeRecord], level: int, indent: str) -> None:
    for node in nodes:
        bullet = BRANCH_BULLET if node.children else LEAF_BULLET
        out.write(f"{indent * level}{bullet} {node.name}\n")
        if node.children:
            _write_level(out, node.children, level + 1, indent)
