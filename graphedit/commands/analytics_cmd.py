"""Read-only analytics: shortest path, degree, PageRank and search."""

from __future__ import annotations

import json

from rich.console import Console
from rich.table import Table

from ..analysis.centrality import NodeScore, degree_centrality, page_rank, ranked
from ..analysis.paths import shortest_path
from ..analysis.search import search_nodes
from ..config import Settings
from ..store import GraphStore
from .common import EXIT_INVALID, EXIT_OK, open_session


def run_path(
    store: GraphStore,
    graph_id: str,
    src: str,
    dst: str,
    *,
    directed: bool | None = None,
    output_json: bool = False,
    settings: Settings | None = None,
) -> int:
    """Print the minimum-weight path between two nodes."""
    console = Console(stderr=True)
    settings = settings or Settings()
    opened = open_session(store, graph_id, settings, console)
    if opened is None:
        return EXIT_INVALID
    _, session = opened

    if directed is None:
        directed = settings.directed_paths
    result = shortest_path(session.graph, src, dst, directed=directed)

    if output_json:
        print(json.dumps(result.to_dict(), indent=2))
        return EXIT_OK if result.ok else EXIT_INVALID

    if not result.ok:
        console.print(f"{result.msg} [{result.error}]", style="red")
        return EXIT_INVALID

    print(" -> ".join(result.nodes))
    console.print(f"Total weight: {result.total:g} ({len(result.edges)} hops)")
    return EXIT_OK


def _print_scores(title: str, scores: list[NodeScore], *, fmt: str, top: int | None) -> None:
    rows = ranked(scores)
    if top is not None:
        rows = rows[:top]

    t = Table(title=title, show_header=True, header_style="bold")
    t.add_column("Node", style="cyan", no_wrap=True)
    t.add_column("Score", justify="right")
    for s in rows:
        t.add_row(s.id, fmt.format(s.score))
    Console().print(t)


def run_degree(
    store: GraphStore,
    graph_id: str,
    *,
    mode: str = "total",
    top: int | None = None,
    output_json: bool = False,
    settings: Settings | None = None,
) -> int:
    console = Console(stderr=True)
    opened = open_session(store, graph_id, settings or Settings(), console)
    if opened is None:
        return EXIT_INVALID
    _, session = opened

    scores = degree_centrality(session.graph, mode)
    if output_json:
        print(json.dumps({s.id: s.score for s in scores}, indent=2))
    else:
        _print_scores(f"Degree ({mode})", scores, fmt="{:g}", top=top)
    return EXIT_OK


def run_pagerank(
    store: GraphStore,
    graph_id: str,
    *,
    damping: float | None = None,
    max_iter: int | None = None,
    tol: float | None = None,
    top: int | None = None,
    output_json: bool = False,
    settings: Settings | None = None,
) -> int:
    console = Console(stderr=True)
    settings = settings or Settings()
    opened = open_session(store, graph_id, settings, console)
    if opened is None:
        return EXIT_INVALID
    _, session = opened

    damping = settings.pagerank_damping if damping is None else damping
    if not 0 <= damping <= 1:
        console.print("damping must be between 0 and 1", style="red")
        return EXIT_INVALID

    scores = page_rank(
        session.graph,
        damping=damping,
        max_iter=settings.pagerank_max_iter if max_iter is None else max_iter,
        tol=settings.pagerank_tol if tol is None else tol,
    )
    if output_json:
        print(json.dumps({s.id: s.score for s in scores}, indent=2))
    else:
        _print_scores("PageRank", scores, fmt="{:.4f}", top=top)
    return EXIT_OK


def run_search(
    store: GraphStore,
    graph_id: str,
    query: str,
    *,
    where: str = "both",
    settings: Settings | None = None,
) -> int:
    """Print ids of nodes whose id and/or label contains `query`."""
    console = Console(stderr=True)
    opened = open_session(store, graph_id, settings or Settings(), console)
    if opened is None:
        return EXIT_INVALID
    _, session = opened

    matches = search_nodes(
        session.graph,
        query,
        in_id=where in ("id", "both"),
        in_label=where in ("label", "both"),
    )
    if not matches:
        console.print("No matching nodes.", style="yellow")
        return EXIT_OK

    for node_id in matches:
        print(node_id)
    return EXIT_OK
