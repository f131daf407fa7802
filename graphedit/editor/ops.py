"""Validated node and link mutations.

Every operation validates first, then captures one history snapshot, then
mutates the graph in place. A failed validation returns an ``OpResult`` with
an error code from :mod:`graphedit.errors` and leaves the graph untouched.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, MutableSequence

from ..errors import (
    DUPLICATE_ID,
    EDGE_NOT_FOUND,
    EMPTY_ID,
    INVALID_DIRECTION,
    INVALID_LAYER,
    INVALID_TYPE,
    INVALID_WEIGHT,
    MISSING_ENDPOINT,
    NODE_NOT_FOUND,
    READ_ONLY_ACCESS,
    SAME_ENDPOINT,
)
from ..models import GRAPH_TYPES, Graph, Link, Node, coerce_weight, finite_number, ref_id

if TYPE_CHECKING:
    from .session import GraphSession

logger = logging.getLogger(__name__)

LAYER_MUST_BE_POSITIVE = "Layer must be a positive integer."
LAYER_MISSING = "Both nodes must have a valid integer layer."
SAME_LAYER = "No same layer edges allowed in hierarchy."
UPWARD_EDGE = "Edges must go downward (source layer < target layer)."


@dataclass
class OpResult:
    """Outcome of a mutation.

    ``changed`` is False for accepted no-ops. ``warning``/``warning_code`` carry
    the rejected part of a partially applied edit.
    """

    success: bool = True
    error: str | None = None
    message: str | None = None
    node: Node | None = None
    link: Link | None = None
    changed: bool = True
    warning: str | None = None
    warning_code: str | None = None

    @classmethod
    def fail(cls, code: str, message: str) -> "OpResult":
        logger.info("rejected: %s (%s)", message, code)
        return cls(success=False, error=code, message=message, changed=False)


# ---------------------------------------------------------------------------
# Link utilities
# ---------------------------------------------------------------------------


def normalize_links(links: MutableSequence[Link]) -> None:
    """Reduce every link endpoint to a plain id string (idempotent)."""
    for link in links:
        link.source = ref_id(link.source)
        link.target = ref_id(link.target)


def find_edge_index(links: MutableSequence[Link], source: str, target: str) -> int:
    for i, link in enumerate(links):
        if ref_id(link.source) == source and ref_id(link.target) == target:
            return i
    return -1


def dedupe_links(links: MutableSequence[Link]) -> int:
    """Keep only the last link for each ordered (source, target) pair.

    Returns the number of links removed.
    """
    seen: set[tuple[str, str]] = set()
    removed = 0
    for i in range(len(links) - 1, -1, -1):
        key = links[i].key
        if key in seen:
            del links[i]
            removed += 1
        else:
            seen.add(key)
    return removed


# ---------------------------------------------------------------------------
# Hierarchy direction rules
# ---------------------------------------------------------------------------


def _edge_violation(source_layer: Any, target_layer: Any) -> str | None:
    s, t = finite_number(source_layer), finite_number(target_layer)
    if s is None or t is None or s != int(s) or t != int(t):
        return LAYER_MISSING
    if s == t:
        return SAME_LAYER
    if s > t:
        return UPWARD_EDGE
    return None


def validate_hierarchy_edge(source: Node | None, target: Node | None) -> str | None:
    """Message describing why source->target breaks the hierarchy, or None."""
    return _edge_violation(
        source.layer if source is not None else None,
        target.layer if target is not None else None,
    )


def _parse_layer(value: Any) -> int | None:
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    num = finite_number(value)
    if num is None or num < 1:
        return None
    return math.floor(num)


def validate_layer_change(graph: Graph, node: Node, new_layer: Any) -> str | None:
    """Check every link incident to `node` as if it sat on `new_layer`.

    Returns the first violation message, or None when the change is allowed.
    """
    layer = _parse_layer(new_layer)
    if layer is None:
        return LAYER_MUST_BE_POSITIVE

    for link in graph.links:
        s, t = ref_id(link.source), ref_id(link.target)
        if node.id not in (s, t):
            continue
        other_id = t if s == node.id else s
        other = node if other_id == node.id else graph.get_node(other_id)
        if other is None:
            continue

        s_layer = layer if s == node.id else other.layer
        t_layer = layer if t == node.id else other.layer
        violation = _edge_violation(s_layer, t_layer)
        if violation:
            return f"{s} -> {t}: {violation}"
    return None


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


def _guard_writable(session: GraphSession) -> OpResult | None:
    if session.read_only:
        return OpResult.fail(READ_ONLY_ACCESS, "You have viewer access (read-only)")
    return None


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def add_node(
    session: GraphSession,
    node_id: str,
    *,
    label: str | None = None,
    description: str | None = None,
    x: float | None = None,
    y: float | None = None,
    layer: Any = None,
) -> OpResult:
    """Add a node at (x, y), defaulting to the canvas centre.

    Hierarchy graphs put the node on `layer` (default 1) and snap it to that row.
    """
    if (denied := _guard_writable(session)) is not None:
        return denied

    graph = session.graph
    new_id = (node_id or "").strip()
    if not new_id:
        return OpResult.fail(EMPTY_ID, "Enter a new node id")
    if graph.get_node(new_id) is not None:
        return OpResult.fail(DUPLICATE_ID, f"Node id already exists: {new_id}")

    cx, cy = session.layout.center
    px, py = finite_number(x), finite_number(y)
    node = Node(
        id=new_id,
        label=_clean(label),
        description=_clean(description),
        x=cx if px is None else px,
        y=cy if py is None else py,
    )

    session.history.capture("add node")
    if graph.is_hierarchy:
        session.layout.snap_node_to_layer(node, _parse_layer(layer) or 1)
    graph.nodes.append(node)

    session.notify()
    return OpResult(node=node)


def edit_node(
    session: GraphSession,
    node_id: str,
    *,
    new_id: str | None = None,
    label: str | None = None,
    description: str | None = None,
    layer: Any = None,
) -> OpResult:
    """Rename and relabel a node, and (hierarchy only) move it to another layer.

    ``None`` leaves a field unchanged; an empty string clears label or
    description. A rejected layer change does not block the other edits: the
    result is successful, the layer keeps its old value and ``warning`` says why.
    """
    if (denied := _guard_writable(session)) is not None:
        return denied

    graph = session.graph
    node = graph.get_node(node_id)
    if node is None:
        return OpResult.fail(NODE_NOT_FOUND, f"No node with id {node_id}")

    old_id = node.id
    target_id = old_id if new_id is None else new_id.strip()
    if not target_id:
        return OpResult.fail(EMPTY_ID, "ID cannot be empty")
    if target_id != old_id and graph.get_node(target_id) is not None:
        return OpResult.fail(DUPLICATE_ID, "Another node already has that id")
    wants_layer = graph.is_hierarchy and layer is not None
    if target_id == old_id and label is None and description is None and not wants_layer:
        return OpResult(node=node, changed=False)

    session.history.capture("edit node")

    node.id = target_id
    if label is not None:
        node.label = _clean(label)
    if description is not None:
        node.description = _clean(description)

    if target_id != old_id:
        for link in graph.links:
            if ref_id(link.source) == old_id:
                link.source = target_id
            if ref_id(link.target) == old_id:
                link.target = target_id
        if old_id in session.selected:
            session.selected.discard(old_id)
            session.selected.add(target_id)

    result = OpResult(node=node)
    if wants_layer:
        requested = _parse_layer(layer)
        if requested is None:
            result.warning, result.warning_code = LAYER_MUST_BE_POSITIVE, INVALID_LAYER
        elif requested != node.layer:
            violation = validate_layer_change(graph, node, requested)
            if violation:
                result.warning, result.warning_code = violation, INVALID_DIRECTION
                logger.info("layer change for %s rejected: %s", node.id, violation)
            else:
                session.layout.snap_node_to_layer(node, requested)

    session.notify()
    return result


def delete_node(session: GraphSession, node_id: str) -> OpResult:
    """Remove a node with every link touching it, then re-apply the layout."""
    if (denied := _guard_writable(session)) is not None:
        return denied

    graph = session.graph
    node = graph.get_node(node_id)
    if node is None:
        return OpResult.fail(NODE_NOT_FOUND, f"No node with id {node_id}")

    session.history.capture("delete node")

    graph.nodes[:] = [n for n in graph.nodes if n is not node]
    before = len(graph.links)
    graph.links[:] = [
        l for l in graph.links if ref_id(l.source) != node.id and ref_id(l.target) != node.id
    ]
    removed_links = before - len(graph.links)

    session.layout.apply_layout_for_type()
    session.notify()
    return OpResult(node=node, message=f"removed {removed_links} link(s)")


def add_or_update_edge(
    session: GraphSession,
    source: str,
    target: str,
    weight: Any = None,
) -> OpResult:
    """Insert source->target, or update its weight on a force graph.

    Weights are only accepted on force graphs; other types ignore them and
    treat an existing pair as an accepted no-op.
    """
    if (denied := _guard_writable(session)) is not None:
        return denied

    graph = session.graph
    s = (source or "").strip()
    t = (target or "").strip()
    if not s or not t:
        return OpResult.fail(MISSING_ENDPOINT, "Enter source and target ids")
    if s == t:
        return OpResult.fail(SAME_ENDPOINT, "Source and target must differ")

    s_node, t_node = graph.get_node(s), graph.get_node(t)
    if s_node is None or t_node is None:
        return OpResult.fail(MISSING_ENDPOINT, "Both source and target must exist")

    if graph.is_hierarchy:
        violation = validate_hierarchy_edge(s_node, t_node)
        if violation:
            return OpResult.fail(INVALID_DIRECTION, violation)

    new_weight: float | None = None
    if graph.is_force and weight is not None and not (isinstance(weight, str) and not weight.strip()):
        new_weight = coerce_weight(weight)
        if new_weight is None:
            return OpResult.fail(INVALID_WEIGHT, "Weight must be a number")

    idx = find_edge_index(graph.links, s, t)
    if idx != -1:
        existing = graph.links[idx]
        if not graph.is_force or new_weight is None:
            return OpResult(link=existing, changed=False)
        session.history.capture("update edge")
        link = Link(s, t, new_weight)
        graph.links[idx] = link
    else:
        session.history.capture("add edge")
        link = Link(s, t, new_weight)
        graph.links.append(link)

    dedupe_links(graph.links)
    session.notify()
    return OpResult(link=link)


def remove_edge(session: GraphSession, source: str, target: str) -> OpResult:
    if (denied := _guard_writable(session)) is not None:
        return denied

    graph = session.graph
    s = (source or "").strip()
    t = (target or "").strip()
    if not s or not t:
        return OpResult.fail(MISSING_ENDPOINT, "Enter source and target ids")

    idx = find_edge_index(graph.links, s, t)
    if idx == -1:
        return OpResult.fail(EDGE_NOT_FOUND, f"No edge ({s},{t}) found")

    session.history.capture("remove edge")
    link = graph.links.pop(idx)
    session.notify()
    return OpResult(link=link)


def set_graph_type(session: GraphSession, graph_type: str) -> OpResult:
    """Switch layout type; every node is re-placed by the new layout.

    Switching to a hierarchy drops the stored layers so they are recomputed
    from the current links.
    """
    if (denied := _guard_writable(session)) is not None:
        return denied

    graph = session.graph
    new_type = (graph_type or "").strip().lower()
    if new_type not in GRAPH_TYPES:
        return OpResult.fail(INVALID_TYPE, f"Unknown graph type: {graph_type}")
    if new_type == graph.type:
        return OpResult(changed=False)

    session.history.capture("change type")
    graph.type = new_type
    for node in graph.nodes:
        node.x = None
        node.y = None
        if graph.is_hierarchy:
            node.layer = None
    session.layout.invalidate_layers()
    session.layout.apply_layout_for_type()
    session.notify()
    return OpResult()


def set_title(session: GraphSession, title: str) -> OpResult:
    if (denied := _guard_writable(session)) is not None:
        return denied

    session.history.capture("rename graph")
    session.graph.title = (title or "").strip()
    session.notify()
    return OpResult()
