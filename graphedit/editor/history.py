"""Snapshot-based undo/redo over a graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from ..models import Graph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    graph: Graph
    reason: str = ""  # diagnostics only


class History:
    """Undo and redo stacks of whole-graph snapshots.

    Snapshots are deep copies, so mutating the live graph after a capture can
    never alter a stored snapshot. Restoring a snapshot rewrites the live graph
    in place; references to ``graph``, ``graph.nodes`` and ``graph.links`` held
    elsewhere stay valid.
    """

    def __init__(self, graph: Graph, *, limit: int = 0) -> None:
        self.graph = graph
        self.limit = max(0, limit)
        self._undo: list[Snapshot] = []
        self._redo: list[Snapshot] = []
        self._listeners: list[Callable[[], None]] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def reasons(self) -> list[str]:
        """Reasons on the undo stack, oldest first."""
        return [s.reason for s in self._undo]

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback run after every undo/redo (redraw, id index refresh)."""
        self._listeners.append(callback)

    def capture(self, reason: str = "") -> None:
        """Push the current state before a mutating gesture; clears redo."""
        self._undo.append(Snapshot(self.graph.clone(), reason))
        if self.limit and len(self._undo) > self.limit:
            del self._undo[0]
        self._redo.clear()
        logger.debug("history capture: %s (depth=%d)", reason, len(self._undo))

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append(Snapshot(self.graph.clone(), "redo checkpoint"))
        prev = self._undo.pop()
        self._apply(prev)
        logger.debug("undo: %s", prev.reason)
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(Snapshot(self.graph.clone(), "undo checkpoint"))
        nxt = self._redo.pop()
        self._apply(nxt)
        logger.debug("redo")
        return True

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    def _apply(self, snap: Snapshot) -> None:
        # Restore from a fresh copy so the popped snapshot never aliases live state.
        self.graph.restore(snap.graph.clone())
        for callback in self._listeners:
            callback()
