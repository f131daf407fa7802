"""Weighted shortest path (Dijkstra) between two nodes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from ..errors import NO_PATH, UNKNOWN_NODE
from ..models import Graph, finite_number, ref_id


@dataclass
class PathResult:
    ok: bool
    total: float = 0.0
    nodes: list[str] = field(default_factory=list)
    edges: list[tuple[str, str]] = field(default_factory=list)  # in traversal order
    error: str | None = None
    msg: str | None = None

    def highlight(self) -> tuple[set[str], set[str]]:
        """Node ids and ``"source->target"`` edge keys to emphasize when drawing."""
        return set(self.nodes), {f"{s}->{t}" for s, t in self.edges}

    def to_dict(self) -> dict[str, Any]:
        if not self.ok:
            return {"ok": False, "msg": self.msg}
        return {
            "ok": True,
            "total": self.total,
            "nodes": list(self.nodes),
            "edges": [{"source": s, "target": t} for s, t in self.edges],
        }


def _link_weight(value: Any) -> float:
    w = finite_number(value)
    if w is None and isinstance(value, str):
        try:
            w = finite_number(float(value))
        except ValueError:
            w = None
    return 1.0 if w is None else w


def shortest_path(graph: Graph, src_id: str, dst_id: str, *, directed: bool = False) -> PathResult:
    """Minimum-weight path from `src_id` to `dst_id`.

    Missing or non-finite weights count as 1 and negative weights as 0. By
    default links are traversable both ways; ``directed=True`` follows them
    from source to target only. The frontier is a plain O(V^2) scan that
    takes the first node with the smallest tentative distance, so ties are
    resolved by node order.
    """
    nodes = graph.nodes
    if not src_id or not dst_id:
        return PathResult(ok=False, error=UNKNOWN_NODE, msg="missing ids")

    index = {str(n.id): i for i, n in enumerate(nodes)}
    if str(src_id) not in index or str(dst_id) not in index:
        return PathResult(ok=False, error=UNKNOWN_NODE, msg="id not found")

    n = len(nodes)
    adj: list[list[tuple[int, float]]] = [[] for _ in range(n)]
    for link in graph.links:
        si = index.get(str(ref_id(link.source)))
        ti = index.get(str(ref_id(link.target)))
        if si is None or ti is None:
            continue
        w = _link_weight(link.weight)
        adj[si].append((ti, w))
        if not directed:
            adj[ti].append((si, w))

    src = index[str(src_id)]
    dst = index[str(dst_id)]

    dist = [math.inf] * n
    prev = [-1] * n
    done = [False] * n
    dist[src] = 0.0

    for _ in range(n):
        u, best = -1, math.inf
        for i in range(n):
            if not done[i] and dist[i] < best:
                best, u = dist[i], i
        if u == -1:
            break
        done[u] = True
        if u == dst:
            break
        for v, w in adj[u]:
            candidate = dist[u] + max(0.0, w)
            if candidate < dist[v]:
                dist[v] = candidate
                prev[v] = u

    if not math.isfinite(dist[dst]):
        return PathResult(ok=False, error=NO_PATH, msg="no path")

    order: list[int] = []
    v = dst
    while v != -1:
        order.append(v)
        v = prev[v]
    order.reverse()

    node_ids = [nodes[i].id for i in order]
    edges = [(nodes[a].id, nodes[b].id) for a, b in zip(order, order[1:])]
    return PathResult(ok=True, total=dist[dst], nodes=node_ids, edges=edges)
