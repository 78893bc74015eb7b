"""
Document Manager - Working document state on top of the history store.

This module implements:
- The live working document the editor mutates (nodes and edges)
- Interactive edits (add/move/edit/connect/delete) committed one by one
- O(1) node/edge lookups via index dictionaries
- Undo/redo that replaces the working document wholesale
- Laying out and importing generated mindmaps
"""

import logging
import uuid
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Optional

from mindmap_core import (
    ContractViolation,
    DocumentSnapshot,
    Edge,
    HistoryStore,
    LayoutConfig,
    Node,
    NodeKind,
    Position,
    Settings,
    layout_mindmap,
)
from mindmap_core.models import coerce_edge, coerce_node

logger = logging.getLogger(__name__)


def generate_edge_id() -> str:
    """Generate a unique edge ID."""
    return f"e{uuid.uuid4().hex[:8]}"


def default_label(kind: NodeKind) -> str:
    return f"New {kind.value.replace('-', ' ')}"


class DocumentManager:
    """
    Owns one mindmap document and its history.

    Every edit builds the next full document, commits it to the store (which
    validates and snapshots it) and only then replaces the working state, so
    a rejected edit leaves the document untouched.
    """

    def __init__(
        self,
        store: Optional[HistoryStore] = None,
        layout_config: Optional[LayoutConfig] = None
    ):
        self._store = store if store is not None else HistoryStore()
        self._layout_config = layout_config or LayoutConfig()
        self._nodes: list[Node] = []
        self._edges: list[Edge] = []

        # O(1) lookup indexes
        self._node_index: dict[str, Node] = {}
        self._edge_index: dict[str, Edge] = {}

        self._on_change_callbacks: list[Callable] = []
        self._changed = False
        self._store.on_change(self._mark_changed)

        self._load(self._store.current)

    @classmethod
    def from_settings(cls, settings: Settings) -> "DocumentManager":
        return cls(
            store=HistoryStore.from_config(settings.history),
            layout_config=settings.layout,
        )

    # --- Index Management ---

    def _load(self, snapshot: DocumentSnapshot):
        """Replace the working document and rebuild the indexes."""
        self._nodes = list(snapshot.nodes)
        self._edges = list(snapshot.edges)
        self._node_index = {n.id: n for n in self._nodes}
        self._edge_index = {e.id: e for e in self._edges}

    def _mark_changed(self):
        self._changed = True

    def _refresh(self) -> DocumentSnapshot:
        """Reload from the store, then notify listeners if the store moved."""
        snapshot = self._store.current
        self._load(snapshot)
        if self._changed:
            self._changed = False
            for callback in self._on_change_callbacks:
                callback()
        return snapshot

    def _commit(self, nodes: Iterable[Any], edges: Iterable[Any]) -> DocumentSnapshot:
        self._store.commit(nodes, edges)
        return self._refresh()

    # --- Properties ---

    @property
    def store(self) -> HistoryStore:
        return self._store

    @property
    def nodes(self) -> list[Node]:
        return list(self._nodes)

    @property
    def edges(self) -> list[Edge]:
        return list(self._edges)

    @property
    def can_undo(self) -> bool:
        return self._store.can_undo

    @property
    def can_redo(self) -> bool:
        return self._store.can_redo

    def on_change(self, callback: Callable[[], Any]):
        """Register a callback run after the working document changes."""
        self._on_change_callbacks.append(callback)

    def snapshot(self) -> DocumentSnapshot:
        """The working document as a snapshot."""
        return DocumentSnapshot(nodes=tuple(self._nodes), edges=tuple(self._edges)).copy_deep()

    def get_state(self) -> dict:
        """Get the full current state for API responses."""
        return {
            "document": self.snapshot().to_json_dict(),
            "history_index": self._store.current_index,
            "history_length": len(self._store),
            "can_undo": self.can_undo,
            "can_redo": self.can_redo,
        }

    def get_node(self, node_id: str) -> Optional[Node]:
        """Get a node by ID (O(1) lookup)."""
        return self._node_index.get(node_id)

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        """Get an edge by ID (O(1) lookup)."""
        return self._edge_index.get(edge_id)

    # --- Whole-document Operations ---

    def commit_document(self, nodes: Iterable[Any], edges: Iterable[Any]) -> DocumentSnapshot:
        """Replace the working document with the given one and commit it."""
        return self._commit(nodes, edges)

    def reset(self, nodes: Iterable[Any] = (), edges: Iterable[Any] = ()) -> DocumentSnapshot:
        """Start a fresh session, optionally seeded with a document."""
        self._store.reset(nodes, edges)
        return self._refresh()

    def clear(self) -> DocumentSnapshot:
        """Remove all nodes and edges (undoable)."""
        return self._commit([], [])

    def undo(self) -> DocumentSnapshot:
        """Undo the last change; a no-op at the start of history."""
        self._store.undo()
        return self._refresh()

    def redo(self) -> DocumentSnapshot:
        """Redo the last undone change; a no-op at the end of history."""
        self._store.redo()
        return self._refresh()

    # --- Node Operations ---

    def _next_node_id(self, kind: NodeKind) -> str:
        n = len(self._nodes) + 1
        while f"{kind.value}-{n}" in self._node_index:
            n += 1
        return f"{kind.value}-{n}"

    def add_node(
        self,
        kind: NodeKind | str,
        label: Optional[str] = None,
        position: Optional[Position | dict] = None,
        data: Optional[dict] = None,
        node_id: Optional[str] = None
    ) -> Node:
        """
        Add a new node to the document.

        When `node_id` is omitted an id of the form "<kind>-<n>" is chosen.
        An explicit id that already exists is rejected.
        """
        kind = NodeKind(kind)
        if node_id is not None and node_id in self._node_index:
            raise ContractViolation(f"Node id already in use: {node_id}")

        payload = dict(data or {})
        payload.setdefault("label", label if label is not None else default_label(kind))

        node = Node(
            id=node_id if node_id is not None else self._next_node_id(kind),
            kind=kind,
            position=position if position is not None else Position(x=0.0, y=0.0),
            data=payload,
        )
        self._commit([*self._nodes, node], self._edges)
        logger.debug("Added %s node %s", kind.value, node.id)
        return self._node_index[node.id]

    def update_node(self, node_id: str, data: dict) -> Optional[Node]:
        """Merge `data` into a node's payload. Returns None if not found."""
        node = self._node_index.get(node_id)
        if node is None:
            return None

        updated = node.model_copy(deep=True, update={"data": {**node.data, **data}})
        self._commit([updated if n.id == node_id else n for n in self._nodes], self._edges)
        return self._node_index[node_id]

    def move_node(self, node_id: str, x: float, y: float) -> Optional[Node]:
        """Move a node. Returns None if not found."""
        node = self._node_index.get(node_id)
        if node is None:
            return None

        moved = node.model_copy(deep=True, update={"position": Position(x=x, y=y)})
        self._commit([moved if n.id == node_id else n for n in self._nodes], self._edges)
        return self._node_index[node_id]

    def delete_node(self, node_id: str) -> bool:
        """Delete a node and all connected edges."""
        if node_id not in self._node_index:
            return False

        self._commit(
            [n for n in self._nodes if n.id != node_id],
            [e for e in self._edges if node_id not in (e.source, e.target)],
        )
        return True

    # --- Edge Operations ---

    def connect(
        self,
        source: str,
        target: str,
        label: str = "",
        animated: bool = True,
        style: Optional[dict] = None,
        edge_id: Optional[str] = None
    ) -> Edge:
        """Add a new edge between two existing nodes."""
        if source not in self._node_index:
            raise ContractViolation(f"Source node not found: {source}")
        if target not in self._node_index:
            raise ContractViolation(f"Target node not found: {target}")
        if edge_id is not None and edge_id in self._edge_index:
            raise ContractViolation(f"Edge id already in use: {edge_id}")

        edge = Edge(
            id=edge_id or generate_edge_id(),
            source=source,
            target=target,
            label=label,
            animated=animated,
            style=dict(style or {}),
        )
        self._commit(self._nodes, [*self._edges, edge])
        return self._edge_index[edge.id]

    def delete_edge(self, edge_id: str) -> bool:
        """Delete an edge."""
        if edge_id not in self._edge_index:
            return False

        self._commit(self._nodes, [e for e in self._edges if e.id != edge_id])
        return True

    # --- Layout Operations (delegated to mindmap_core.layout) ---

    def layout(self, nodes: Optional[Iterable[Any]] = None, strategy: str = "tiered") -> list:
        """
        Compute positions without committing.

        Lays out `nodes` if given, otherwise the working document's nodes.
        """
        source = self._nodes if nodes is None else nodes
        return layout_mindmap(source, strategy=strategy, config=self._layout_config)

    def auto_layout(self, strategy: str = "tiered") -> bool:
        """Rearrange the working document and commit it."""
        if not self._nodes:
            return False

        self._commit(self.layout(strategy=strategy), self._edges)
        return True

    def import_generated(
        self,
        nodes: Iterable[Any],
        edges: Iterable[Any],
        strategy: str = "tiered"
    ) -> DocumentSnapshot:
        """
        Replace the document with a generated mindmap.

        Node records that aren't valid nodes (unknown kind, missing id) are
        dropped with a warning, along with the edges that point at them. The
        rest is laid out and committed as one undoable change. Invalid edge
        records, duplicate ids and dangling references are still rejected.
        """
        kept: list[Node] = []
        dropped_ids: set[str] = set()
        for record in nodes:
            try:
                kept.append(coerce_node(record))
            except ValueError as e:
                logger.warning("Dropping generated node %r: %s", record, e)
                if isinstance(record, Mapping) and isinstance(record.get("id"), str):
                    dropped_ids.add(record["id"])
        dropped_ids -= {n.id for n in kept}

        links = []
        for record in edges:
            edge = coerce_edge(record)
            if edge.source in dropped_ids or edge.target in dropped_ids:
                logger.warning("Dropping generated edge %s to a dropped node", edge.id)
                continue
            links.append(edge)

        positioned = self.layout(kept, strategy=strategy)
        snapshot = self._commit(positioned, links)
        logger.info(
            "Imported generated mindmap: %d nodes, %d edges",
            len(snapshot.nodes), len(snapshot.edges)
        )
        return snapshot
