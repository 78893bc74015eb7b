"""
History Store - Authoritative document state with linear undo/redo.

The store keeps a log of full document snapshots and a cursor into it:
- Every commit deep-copies the whole document, so later mutation of the
  caller's objects can't reach the log
- A commit made after undoing discards the undone entries (no redo tree)
- Undo/redo return fresh copies and are no-ops at the ends of the log

All operations hold a re-entrant lock, so one store can be shared by a
threaded host.
"""

import logging
import threading
from typing import Any, Callable, Iterable, Optional

from .config import HistoryConfig
from .models import DocumentSnapshot, coerce_edge, coerce_node
from .validation import check_document

logger = logging.getLogger(__name__)


class HistoryStore:
    """
    Snapshot log plus cursor for one editing session.

    The cursor is -1 while the log is empty, otherwise the index of the
    active snapshot. Callers always receive copies; snapshots in the log are
    never shared.
    """

    def __init__(
        self,
        max_history: Optional[int] = None,
        skip_unchanged: bool = False,
        enforce_references: bool = True
    ):
        if max_history is not None and max_history < 1:
            raise ValueError("max_history must be at least 1")
        self._log: list[DocumentSnapshot] = []
        self._cursor = -1
        self._max_history = max_history
        self._skip_unchanged = skip_unchanged
        self._enforce_references = enforce_references
        self._lock = threading.RLock()
        self._on_change_callbacks: list[Callable[[], Any]] = []

    @classmethod
    def from_config(cls, config: HistoryConfig) -> "HistoryStore":
        return cls(
            max_history=config.max_history,
            skip_unchanged=config.skip_unchanged,
            enforce_references=config.enforce_references,
        )

    # --- Properties ---

    @property
    def current_index(self) -> int:
        """Index of the active snapshot, -1 when nothing was committed."""
        return self._cursor

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._log) - 1

    @property
    def current(self) -> DocumentSnapshot:
        """A copy of the active snapshot (empty when the log is empty)."""
        with self._lock:
            return self._current_copy()

    def __len__(self) -> int:
        return len(self._log)

    # --- Change Callbacks ---

    def on_change(self, callback: Callable[[], Any]):
        """Register a callback run after every commit, undo, redo or reset."""
        self._on_change_callbacks.append(callback)

    def _notify_change(self):
        for callback in self._on_change_callbacks:
            callback()

    # --- Internals ---

    def _current_copy(self) -> DocumentSnapshot:
        if self._cursor < 0:
            return DocumentSnapshot()
        return self._log[self._cursor].copy_deep()

    def _build_snapshot(self, nodes: Iterable[Any], edges: Iterable[Any]) -> DocumentSnapshot:
        # Validate first, then copy so the log shares nothing with the caller
        node_list = [coerce_node(n) for n in nodes]
        edge_list = [coerce_edge(e) for e in edges]
        check_document(node_list, edge_list, enforce_references=self._enforce_references)
        return DocumentSnapshot(
            nodes=tuple(n.model_copy(deep=True) for n in node_list),
            edges=tuple(e.model_copy(deep=True) for e in edge_list),
        )

    # --- Operations ---

    def commit(self, nodes: Iterable[Any], edges: Iterable[Any]) -> None:
        """
        Record the full document as the new active snapshot.

        Entries after the cursor are discarded first, then the snapshot is
        appended and the cursor moves to it.

        Raises:
            ContractViolation: duplicate ids or dangling edge endpoints
            pydantic.ValidationError: an item isn't a valid node/edge
        """
        with self._lock:
            snapshot = self._build_snapshot(nodes, edges)

            if (self._skip_unchanged and self._cursor >= 0
                    and self._log[self._cursor].to_json_dict() == snapshot.to_json_dict()):
                logger.debug("Commit unchanged, history left at %d", self._cursor)
                return

            discarded = len(self._log) - (self._cursor + 1)
            del self._log[self._cursor + 1:]
            self._log.append(snapshot)

            if self._max_history is not None and len(self._log) > self._max_history:
                del self._log[:len(self._log) - self._max_history]

            self._cursor = len(self._log) - 1
            logger.debug(
                "Committed %d nodes, %d edges at index %d (dropped %d redo entries)",
                len(snapshot.nodes), len(snapshot.edges), self._cursor, discarded
            )

        self._notify_change()

    def undo(self) -> DocumentSnapshot:
        """Step back one snapshot; at the start this returns the current one."""
        with self._lock:
            moved = self._cursor > 0
            if moved:
                self._cursor -= 1
            else:
                logger.debug("Nothing to undo")
            result = self._current_copy()

        if moved:
            self._notify_change()
        return result

    def redo(self) -> DocumentSnapshot:
        """Step forward one snapshot; at the end this returns the current one."""
        with self._lock:
            moved = self._cursor < len(self._log) - 1
            if moved:
                self._cursor += 1
            else:
                logger.debug("Nothing to redo")
            result = self._current_copy()

        if moved:
            self._notify_change()
        return result

    def reset(self, nodes: Iterable[Any] = (), edges: Iterable[Any] = ()) -> None:
        """
        Start a new session.

        A non-empty seed document becomes the single log entry; an empty one
        leaves the log empty.
        """
        with self._lock:
            snapshot = self._build_snapshot(nodes, edges)
            self._log = [] if snapshot.is_empty() else [snapshot]
            self._cursor = len(self._log) - 1

        self._notify_change()
