"""
Core data models for mindmap documents.

These models define the canonical schema for a mindmap:
- Nodes with a fixed kind, a position and an opaque host payload
- Edges connecting nodes (using source/target naming convention)
- Snapshots pairing the full node and edge collections at one point in time

Field Naming Convention:
- Nodes accept `type` on input as an alias for `kind` (the host's wire name)
- Edges use `source` and `target`; `from`/`to` are accepted on input
- `to_json_dict()` outputs the host's wire shape for round-tripping
"""

import copy
from enum import Enum
from typing import Any
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


class Tier(str, Enum):
    """Layout tiers, top to bottom."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    LEAF = "leaf"


class NodeKind(str, Enum):
    """Node categories known to the editor."""
    CHAPTER = "chapter"
    MAIN_TOPIC = "main-topic"
    SUB_TOPIC = "sub-topic"
    TEXT = "text"
    IMAGE = "image"
    TABLE = "table"
    SQUARE = "square"
    CIRCLE = "circle"
    TRIANGLE = "triangle"
    STICKY_NOTE = "sticky-note"
    ARROW = "arrow"

    @property
    def tier(self) -> Tier:
        """The layout tier this kind is stacked into."""
        return KIND_TIERS[self]


# Every kind must appear here exactly once
KIND_TIERS: dict[NodeKind, Tier] = {
    NodeKind.CHAPTER: Tier.PRIMARY,
    NodeKind.MAIN_TOPIC: Tier.SECONDARY,
    NodeKind.SUB_TOPIC: Tier.LEAF,
    NodeKind.TEXT: Tier.LEAF,
    NodeKind.IMAGE: Tier.LEAF,
    NodeKind.TABLE: Tier.LEAF,
    NodeKind.SQUARE: Tier.LEAF,
    NodeKind.CIRCLE: Tier.LEAF,
    NodeKind.TRIANGLE: Tier.LEAF,
    NodeKind.STICKY_NOTE: Tier.LEAF,
    NodeKind.ARROW: Tier.LEAF,
}


def _require_text(value: str, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{what} must be a non-empty string")
    return value


class Position(BaseModel):
    """A point on the canvas. Both coordinates are required."""
    x: float
    y: float


class Node(BaseModel):
    """A node in the mindmap."""
    id: str = Field(frozen=True)
    kind: NodeKind = Field(frozen=True, validation_alias=AliasChoices("kind", "type"))
    position: Position = Field(default_factory=lambda: Position(x=0.0, y=0.0))
    data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def check_id(cls, value: Any) -> Any:
        return _require_text(value, "Node id")

    @property
    def tier(self) -> Tier:
        return self.kind.tier

    @property
    def label(self) -> str:
        """The display label from the payload, or an empty string."""
        label = self.data.get("label", "")
        return label if isinstance(label, str) else str(label)

    def to_json_dict(self) -> dict:
        """Convert to the host's JSON shape."""
        return {
            "id": self.id,
            "type": self.kind.value,
            "position": {"x": self.position.x, "y": self.position.y},
            "data": copy.deepcopy(self.data),
        }


class Edge(BaseModel):
    """
    A directed connection between two nodes.

    Uses `source` and `target` as canonical field names.
    Accepts `from`/`to` on input for backward compatibility.
    """
    id: str = Field(frozen=True)
    source: str  # Source node ID
    target: str  # Target node ID
    label: str = ""
    animated: bool = False
    style: dict[str, Any] = Field(default_factory=dict)
    data: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode='before')
    @classmethod
    def convert_legacy_fields(cls, data: Any) -> Any:
        """Convert legacy 'from'/'to' fields to 'source'/'target'."""
        if isinstance(data, dict):
            data = dict(data)
            if 'from' in data and 'source' not in data:
                data['source'] = data.pop('from')
            if 'to' in data and 'target' not in data:
                data['target'] = data.pop('to')
        return data

    @field_validator("id", "source", "target", mode="before")
    @classmethod
    def check_ids(cls, value: Any, info: ValidationInfo) -> Any:
        return _require_text(value, f"Edge {info.field_name}")

    def to_json_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return self.model_dump(include={"id", "source", "target", "label", "animated", "style", "data"})


class DocumentSnapshot(BaseModel):
    """
    The full document at one point in history.

    Frozen: the tuples cannot be reassigned or resized. The history store
    hands out deep copies, so mutating a returned node never reaches the log.
    """
    model_config = ConfigDict(frozen=True)

    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()

    def copy_deep(self) -> "DocumentSnapshot":
        """Return a structurally independent copy."""
        return DocumentSnapshot(
            nodes=tuple(n.model_copy(deep=True) for n in self.nodes),
            edges=tuple(e.model_copy(deep=True) for e in self.edges),
        )

    def is_empty(self) -> bool:
        return not self.nodes and not self.edges

    def get_node(self, node_id: str) -> Node | None:
        """Get a node by ID (O(n))."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_json_dict(self) -> dict:
        return {
            "nodes": [n.to_json_dict() for n in self.nodes],
            "edges": [e.to_json_dict() for e in self.edges],
        }

    @classmethod
    def from_json_dict(cls, data: dict) -> "DocumentSnapshot":
        """Create a snapshot from the host's JSON shape."""
        return cls(
            nodes=tuple(Node.model_validate(n) for n in data.get("nodes", [])),
            edges=tuple(Edge.model_validate(e) for e in data.get("edges", [])),
        )


def coerce_node(item: Any) -> Node:
    """Return `item` as a Node, validating plain mappings."""
    if isinstance(item, Node):
        return item
    return Node.model_validate(item)


def coerce_edge(item: Any) -> Edge:
    """Return `item` as an Edge, validating plain mappings."""
    if isinstance(item, Edge):
        return item
    return Edge.model_validate(item)
