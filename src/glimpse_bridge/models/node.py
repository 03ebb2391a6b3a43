"""Domain models for extracted outline trees."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class NodeRecord:
    """A single node of an extracted subtree."""

    id: str
    name: str
    note: str | None
    parent_id: str | None
    children: tuple["NodeRecord", ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "note": self.note,
            "parent_id": self.parent_id,
            "children": [c.to_dict() for c in self.children],
        }


@dataclass(frozen=True)
class ExtractionSuccess:
    """A subtree extracted from the document, with aggregate metadata."""

    root: NodeRecord
    node_count: int
    depth: int

    success = True

    @property
    def children(self) -> tuple[NodeRecord, ...]:
        return self.root.children

    def to_dict(self) -> dict[str, Any]:
        """Serialize as a success reply.

        The root is sent without its children; they travel alongside it.
        """
        return {
            "success": True,
            "root": {
                "id": self.root.id,
                "name": self.root.name,
                "note": self.root.note,
                "parent_id": self.root.parent_id,
            },
            "children": [c.to_dict() for c in self.root.children],
            "node_count": self.node_count,
            "depth": self.depth,
        }


@dataclass(frozen=True)
class ExtractionFailure:
    """A request that produced no tree."""

    error: str

    success = False

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "error": self.error}


ExtractionResult = ExtractionSuccess | ExtractionFailure
