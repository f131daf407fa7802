"""Pointer drag of one node or the current selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..models import Node
from .ops import validate_layer_change

if TYPE_CHECKING:
    from .session import GraphSession


@dataclass
class _Grip:
    node: Node
    dx: float
    dy: float
    start_layer: int


class DragGesture:
    """One continuous drag: a single history entry however many moves it has.

    On a hierarchy graph the drop snaps every dragged node to its nearest
    row, provided the new layer keeps all incident links pointing downward;
    otherwise the node goes back to the row it started on.
    """

    def __init__(self, session: GraphSession, grips: list[_Grip]) -> None:
        self.session = session
        self._grips = grips
        self._captured = False
        self.rejected: list[str] = []

    @classmethod
    def begin(cls, session: GraphSession, node_id: str, x: float, y: float) -> "DragGesture | None":
        """Start dragging at pointer (x, y); None for viewers or unknown nodes."""
        if session.read_only:
            return None
        node = session.graph.get_node(node_id)
        if node is None:
            return None

        if session.selected and node_id in session.selected:
            group = [n for n in session.graph.nodes if n.id in session.selected]
        else:
            session.select([node_id])
            group = [node]

        grips = [
            _Grip(
                node=n,
                dx=(n.x or 0.0) - x,
                dy=(n.y or 0.0) - y,
                start_layer=n.layer if n.has_layer else 1,
            )
            for n in group
        ]
        return cls(session, grips)

    @property
    def nodes(self) -> list[Node]:
        return [g.node for g in self._grips]

    def move(self, x: float, y: float) -> None:
        if not self._captured:
            self.session.history.capture("drag move (group)")
            self._captured = True
        for grip in self._grips:
            grip.node.x = x + grip.dx
            grip.node.y = y + grip.dy
        self.session.notify()

    def end(self) -> list[str]:
        """Finish the drag; returns messages for layer changes that were refused."""
        if not self._captured:
            return []

        session = self.session
        layout = session.layout
        if session.graph.is_hierarchy:
            for grip in self._grips:
                node = grip.node
                nearest = layout.nearest_layer(node.y if node.y is not None else 0.0)
                if nearest == grip.start_layer:
                    node.y = layout.y_for_layer(grip.start_layer)
                    continue
                violation = validate_layer_change(session.graph, node, nearest)
                if violation is None:
                    layout.snap_node_to_layer(node, nearest)
                else:
                    node.layer = grip.start_layer
                    node.y = layout.y_for_layer(grip.start_layer)
                    self.rejected.append(violation)

        session.notify()
        return list(self.rejected)
