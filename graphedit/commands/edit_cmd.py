"""Mutation commands; each change is written back with a full save."""

from __future__ import annotations

from typing import Any, Callable

from rich.console import Console

from ..config import Settings
from ..editor import ops
from ..editor.ops import OpResult
from ..editor.session import GraphSession
from ..errors import ReadOnlyAccessError
from ..store import GraphStore, build_full_payload
from .common import EXIT_INVALID, EXIT_OK, EXIT_READ_ONLY, open_session, report_failure


def _apply(
    store: GraphStore,
    graph_id: str,
    settings: Settings | None,
    op: Callable[[GraphSession], OpResult],
    *,
    done: Callable[[OpResult], str],
) -> int:
    console = Console(stderr=True)
    opened = open_session(store, graph_id, settings or Settings(), console)
    if opened is None:
        return EXIT_INVALID
    _, session = opened

    result = op(session)
    if not result.success:
        return report_failure(result, console)

    if result.warning:
        console.print(f"{result.warning} [{result.warning_code}]", style="yellow")

    if not result.changed:
        console.print("No change", style="dim")
        return EXIT_OK

    try:
        store.save_full(graph_id, build_full_payload(session.graph))
    except ReadOnlyAccessError as e:
        console.print(str(e), style="red")
        return EXIT_READ_ONLY

    console.print(done(result), style="green")
    return EXIT_OK


def run_add_node(
    store: GraphStore,
    graph_id: str,
    node_id: str,
    *,
    label: str | None = None,
    description: str | None = None,
    x: float | None = None,
    y: float | None = None,
    layer: Any = None,
    settings: Settings | None = None,
) -> int:
    return _apply(
        store,
        graph_id,
        settings,
        lambda s: ops.add_node(s, node_id, label=label, description=description, x=x, y=y, layer=layer),
        done=lambda r: f"Added node {r.node.id}",
    )


def run_edit_node(
    store: GraphStore,
    graph_id: str,
    node_id: str,
    *,
    new_id: str | None = None,
    label: str | None = None,
    description: str | None = None,
    layer: Any = None,
    settings: Settings | None = None,
) -> int:
    return _apply(
        store,
        graph_id,
        settings,
        lambda s: ops.edit_node(s, node_id, new_id=new_id, label=label, description=description, layer=layer),
        done=lambda r: f"Updated node {r.node.id}",
    )


def run_delete_node(store: GraphStore, graph_id: str, node_id: str, *, settings: Settings | None = None) -> int:
    return _apply(
        store,
        graph_id,
        settings,
        lambda s: ops.delete_node(s, node_id),
        done=lambda r: f"Deleted node {r.node.id} ({r.message})",
    )


def run_add_edge(
    store: GraphStore,
    graph_id: str,
    source: str,
    target: str,
    *,
    weight: str | None = None,
    settings: Settings | None = None,
) -> int:
    return _apply(
        store,
        graph_id,
        settings,
        lambda s: ops.add_or_update_edge(s, source, target, weight),
        done=lambda r: f"Saved edge {r.link.source} -> {r.link.target}",
    )


def run_remove_edge(
    store: GraphStore,
    graph_id: str,
    source: str,
    target: str,
    *,
    settings: Settings | None = None,
) -> int:
    return _apply(
        store,
        graph_id,
        settings,
        lambda s: ops.remove_edge(s, source, target),
        done=lambda r: f"Removed edge {r.link.source} -> {r.link.target}",
    )
