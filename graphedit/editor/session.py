"""The editing session: one graph plus its history, layout and access level."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from ..config import Settings
from ..errors import GraphFormatError
from ..layout.engine import LayoutEngine
from ..models import ACCESS_LEVELS, Graph
from .history import History
from .ops import dedupe_links, normalize_links

logger = logging.getLogger(__name__)


class GraphSession:
    """Explicitly owned graph context passed to every editing operation.

    Nothing here is process-global; tests and tools can hold several sessions
    side by side.
    """

    def __init__(
        self,
        graph: Graph | None = None,
        *,
        access: str = "owner",
        width: float = 960.0,
        height: float = 640.0,
        history_limit: int = 0,
    ) -> None:
        if access not in ACCESS_LEVELS:
            raise GraphFormatError(f"unknown access level: {access!r}")
        self.graph = graph if graph is not None else Graph()
        self.access = access
        self.history = History(self.graph, limit=history_limit)
        self.layout = LayoutEngine(self.graph, width=width, height=height)
        self.selected: set[str] = set()
        self._listeners: list[Callable[[], None]] = []
        self.history.add_listener(self.notify)

    @classmethod
    def load(
        cls,
        document: dict[str, Any],
        *,
        access: str | None = None,
        settings: Settings | None = None,
    ) -> "GraphSession":
        """Build a session from a loaded document and lay it out.

        Links are reduced to plain ids and deduplicated; an entirely empty
        document is replaced by the three-node starter graph.
        """
        settings = settings or Settings()
        graph = Graph.from_dict(document)
        normalize_links(graph.links)
        removed = dedupe_links(graph.links)
        if removed:
            logger.info("dropped %d duplicate links on load", removed)

        if not graph.nodes and not graph.links:
            graph = Graph.default(graph_type=graph.type, title=graph.title)

        resolved_access = access or str(document.get("access") or "owner")
        session = cls(
            graph,
            access=resolved_access,
            width=settings.canvas_width,
            height=settings.canvas_height,
            history_limit=settings.history_limit,
        )
        session.layout.apply_layout_for_type()
        return session

    @property
    def read_only(self) -> bool:
        return self.access == "viewer"

    def node_ids(self) -> list[str]:
        """Current id index (what the editor offers for completion)."""
        return self.graph.node_ids()

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a redraw callback run after every change."""
        self._listeners.append(callback)

    def notify(self) -> None:
        known = set(self.graph.node_ids())
        self.selected &= known
        for callback in self._listeners:
            callback()

    def select(self, ids: Iterable[str]) -> None:
        self.selected = set(ids)
        self.notify()

    def clear_selection(self) -> None:
        self.selected.clear()
        self.notify()

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()
