"""Degree centrality and PageRank."""

from __future__ import annotations

from dataclasses import dataclass

from ..models import Graph, ref_id

DEGREE_MODES = ("total", "in", "out")


@dataclass(frozen=True)
class NodeScore:
    id: str
    score: float


def degree_centrality(graph: Graph, mode: str = "total") -> list[NodeScore]:
    """In-, out- or total degree per node, in node order.

    Every link counts, including parallel links and self-loops; links whose
    endpoints are not in the graph are skipped.
    """
    if mode not in DEGREE_MODES:
        raise ValueError(f"mode must be one of {', '.join(DEGREE_MODES)}")

    nodes = graph.nodes
    index = {n.id: i for i, n in enumerate(nodes)}
    deg_in = [0] * len(nodes)
    deg_out = [0] * len(nodes)

    for link in graph.links:
        si = index.get(ref_id(link.source))
        ti = index.get(ref_id(link.target))
        if si is None or ti is None:
            continue
        deg_out[si] += 1
        deg_in[ti] += 1

    scores: list[NodeScore] = []
    for i, node in enumerate(nodes):
        if mode == "in":
            score = deg_in[i]
        elif mode == "out":
            score = deg_out[i]
        else:
            score = deg_in[i] + deg_out[i]
        scores.append(NodeScore(node.id, score))
    return scores


def page_rank(
    graph: Graph,
    *,
    damping: float = 0.85,
    max_iter: int = 50,
    tol: float = 1e-6,
) -> list[NodeScore]:
    """Power-iteration PageRank over directed links.

    Self-loops are ignored and parallel links count once. Rank held by nodes
    without out-links is spread evenly over all nodes each iteration.
    Iteration stops once the L1 change drops below `tol`, or after `max_iter`
    rounds. Scores sum to 1.
    """
    nodes = graph.nodes
    n = len(nodes)
    if n == 0:
        return []

    index = {node.id: i for i, node in enumerate(nodes)}
    out_neighbors: list[list[int]] = [[] for _ in range(n)]
    seen: list[set[int]] = [set() for _ in range(n)]

    for link in graph.links:
        si = index.get(ref_id(link.source))
        ti = index.get(ref_id(link.target))
        if si is None or ti is None or si == ti:
            continue
        if ti not in seen[si]:
            seen[si].add(ti)
            out_neighbors[si].append(ti)

    rank = [1.0 / n] * n
    for _ in range(max_iter):
        dangling = sum(rank[i] for i in range(n) if not out_neighbors[i])
        fill = (1.0 - damping) / n + damping * dangling / n
        nxt = [fill] * n

        for i in range(n):
            targets = out_neighbors[i]
            if not targets:
                continue
            share = damping * rank[i] / len(targets)
            for j in targets:
                nxt[j] += share

        diff = sum(abs(a - b) for a, b in zip(nxt, rank))
        rank = nxt
        if diff < tol:
            break

    return [NodeScore(node.id, rank[i]) for i, node in enumerate(nodes)]


def ranked(scores: list[NodeScore]) -> list[NodeScore]:
    """Highest score first, ties by id."""
    return sorted(scores, key=lambda s: (-s.score, s.id))
