"""Static node placement for the four graph types.

No physics simulation runs for ``force`` graphs: missing positions are seeded
once on a circle and every node is then pinned where it is.
"""

from __future__ import annotations

import logging
import math
import re
from collections import deque
from dataclasses import dataclass
from typing import Iterable, Sequence

from ..models import Graph, Link, Node, finite_number, ref_id

logger = logging.getLogger(__name__)

# Layout constants
TOP_PAD = 40.0
MIN_Y_GAP = 80.0
MAX_Y_GAP = 140.0
SIDE_PAD = 40.0
MIN_X_GAP = 60.0
GRID_GAP = 40.0
FORCE_SEED_RADIUS = 0.38
CIRCLE_RADIUS = 0.4

_DIGITS = re.compile(r"([0-9]+)")


def natural_key(value: str) -> tuple:
    """Case-insensitive sort key that compares digit runs numerically ("n2" < "n10")."""
    text = str(value)
    parts: list[tuple[int, int, str]] = []
    for i, chunk in enumerate(_DIGITS.split(text.casefold())):
        if not chunk:
            continue
        if i % 2:
            parts.append((0, int(chunk), ""))
        else:
            parts.append((1, 0, chunk))
    return (tuple(parts), text)


def row_gap(height: float, rows: int) -> float:
    """Vertical distance between hierarchy rows for a canvas height."""
    available = max(1.0, height - TOP_PAD * 2)
    raw = available / (rows - 1) if rows > 1 else available
    return max(MIN_Y_GAP, min(MAX_Y_GAP, raw))


@dataclass
class LayerState:
    """Cached row geometry for hierarchy graphs."""

    enabled: bool = False
    start_y: float = TOP_PAD
    gap_y: float = 100.0
    max_layer: int = 1
    x_gap: float = MIN_X_GAP
    side_pad: float = SIDE_PAD


def compute_hierarchy_layers(nodes: Sequence[Node], links: Iterable[Link]) -> None:
    """Assign ``layer`` to every node from the directed link structure.

    Uses Kahn's algorithm: nodes with no incoming links start at layer 1 and
    each link pushes its target to at least one below its source. Nodes left
    unprocessed because they sit on a cycle fall back to one below their
    highest already-layered predecessor.
    """
    ids = [n.id for n in nodes]
    known = set(ids)
    out: dict[str, list[str]] = {i: [] for i in ids}
    preds: dict[str, list[str]] = {i: [] for i in ids}
    in_degree: dict[str, int] = {i: 0 for i in ids}

    for link in links:
        s, t = ref_id(link.source), ref_id(link.target)
        if s not in known or t not in known:
            continue
        out[s].append(t)
        preds[t].append(s)
        in_degree[t] += 1

    layer: dict[str, int] = {}
    queue: deque[str] = deque()
    for node_id, deg in in_degree.items():
        if deg == 0:
            layer[node_id] = 1
            queue.append(node_id)

    while queue:
        u = queue.popleft()
        base = layer.get(u, 1)
        for v in out[u]:
            layer[v] = max(layer.get(v, 1), base + 1)
            in_degree[v] -= 1
            if in_degree[v] == 0:
                queue.append(v)

    for node_id in ids:
        if node_id in layer:
            continue
        max_pred = max((layer.get(p, 0) for p in preds[node_id]), default=0)
        layer[node_id] = max(1, max_pred + 1)
        logger.debug("cycle fallback layer %d for %s", layer[node_id], node_id)

    for node in nodes:
        node.layer = max(1, int(layer.get(node.id, 1)))


class LayoutEngine:
    """Computes node positions for the graph's current type."""

    def __init__(self, graph: Graph, *, width: float = 960.0, height: float = 640.0) -> None:
        self.graph = graph
        self.width = float(width)
        self.height = float(height)
        self.layer_state = LayerState()
        self.pinned = False

    def resize(self, width: float, height: float) -> None:
        """Change the canvas size; cached row geometry becomes stale."""
        self.width = float(width)
        self.height = float(height)
        self.invalidate_layers()

    def invalidate_layers(self) -> None:
        self.layer_state = LayerState()

    def is_pinned(self, node: Node) -> bool:
        return self.pinned and node.has_position

    def all_have_positions(self) -> bool:
        nodes = self.graph.nodes
        return bool(nodes) and all(n.has_position for n in nodes)

    @property
    def center(self) -> tuple[float, float]:
        return self.width / 2, self.height / 2

    def apply_layout_for_type(self) -> None:
        """Position nodes according to ``graph.type``."""
        self.pinned = False
        graph_type = self.graph.type or "force"
        has_saved = self.all_have_positions()

        if graph_type == "force":
            if not has_saved:
                self.seed_positions()
            self.pinned = True
        elif graph_type == "circle":
            if not has_saved:
                self.layout_circle()
        elif graph_type == "grid":
            if not has_saved:
                self.layout_grid()
        elif graph_type == "hierarchy":
            self.layout_hierarchy()
        else:
            logger.warning("no layout for graph type %r", graph_type)

    def seed_positions(self) -> None:
        """Place only nodes lacking a position on a circle around the centre."""
        nodes = self.graph.nodes
        cx, cy = self.center
        count = max(1, len(nodes))
        radius = min(self.width, self.height) * FORCE_SEED_RADIUS

        for i, node in enumerate(nodes):
            if node.has_position:
                continue
            angle = (i / count) * math.pi * 2
            node.x = cx + radius * math.cos(angle)
            node.y = cy + radius * math.sin(angle)

    def layout_circle(self) -> None:
        nodes = self.graph.nodes
        cx, cy = self.center
        count = max(1, len(nodes))
        radius = min(self.width, self.height) * CIRCLE_RADIUS

        for i, node in enumerate(nodes):
            angle = (i / count) * math.pi * 2
            node.x = cx + radius * math.cos(angle)
            node.y = cy + radius * math.sin(angle)

    def layout_grid(self) -> None:
        nodes = self.graph.nodes
        cols = math.ceil(math.sqrt(len(nodes) or 1))
        start_x = self.width / 2 - (cols - 1) * GRID_GAP / 2
        start_y = self.height / 2 - (cols - 1) * GRID_GAP / 2

        for i, node in enumerate(nodes):
            row, col = divmod(i, cols)
            node.x = start_x + col * GRID_GAP
            node.y = start_y + row * GRID_GAP

    def layout_hierarchy(self) -> None:
        """Lay nodes out in horizontal rows by layer.

        Layers are computed only when some node lacks one. A node keeps a
        finite ``x`` (e.g. from a user drag); ``y`` is always snapped to its row.
        """
        nodes = self.graph.nodes
        if any(not n.has_layer for n in nodes):
            compute_hierarchy_layers(nodes, self.graph.links)

        rows = max([1] + [n.layer for n in nodes if n.has_layer])
        gap_y = row_gap(self.height, rows)
        self.layer_state = LayerState(
            enabled=True,
            start_y=TOP_PAD,
            gap_y=gap_y,
            max_layer=rows,
            x_gap=MIN_X_GAP,
            side_pad=SIDE_PAD,
        )

        buckets: dict[int, list[Node]] = {}
        for node in nodes:
            layer = max(1, node.layer) if node.has_layer else 1
            buckets.setdefault(layer, []).append(node)

        for layer, members in buckets.items():
            members.sort(key=lambda n: natural_key(n.id))
            total_w = max(0, (len(members) - 1) * MIN_X_GAP)
            start_x = max(SIDE_PAD, (self.width - total_w) / 2)
            y = TOP_PAD + (layer - 1) * gap_y

            for i, node in enumerate(members):
                if finite_number(node.x) is None:
                    node.x = start_x + i * MIN_X_GAP
                node.y = y
                node.layer = layer

    def _ensure_layer_state(self) -> None:
        if self.layer_state.enabled:
            return
        rows = max([1] + [n.layer for n in self.graph.nodes if n.has_layer])
        self.layer_state = LayerState(
            enabled=True,
            start_y=TOP_PAD,
            gap_y=row_gap(self.height, rows),
            max_layer=rows,
            x_gap=MIN_X_GAP,
            side_pad=SIDE_PAD,
        )

    def y_for_layer(self, layer: float) -> float:
        self._ensure_layer_state()
        state = self.layer_state
        return state.start_y + (max(1, math.floor(layer)) - 1) * state.gap_y

    def snap_node_to_layer(self, node: Node, layer: float) -> None:
        """Set ``node.layer`` and move the node onto that row."""
        self._ensure_layer_state()
        target = max(1, math.floor(layer))
        if target > self.layer_state.max_layer:
            self.layer_state.max_layer = target
        node.layer = target
        node.y = self.y_for_layer(target)

    def nearest_layer(self, y: float) -> int:
        """Row closest to a canvas y coordinate."""
        self._ensure_layer_state()
        state = self.layer_state
        return max(1, math.floor((y - state.start_y) / state.gap_y + 0.5) + 1)
