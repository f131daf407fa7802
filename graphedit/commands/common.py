"""Helpers shared by the command implementations."""

from __future__ import annotations

from rich.console import Console

from ..config import Settings
from ..editor.ops import OpResult
from ..editor.session import GraphSession
from ..errors import READ_ONLY_ACCESS, GraphFormatError, GraphNotFoundError
from ..store import GraphStore, LoadedGraph

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_READ_ONLY = 2


def open_session(
    store: GraphStore,
    graph_id: str,
    settings: Settings,
    console: Console,
) -> tuple[LoadedGraph, GraphSession] | None:
    """Load `graph_id` into a laid-out session; None (after reporting) on failure."""
    try:
        loaded = store.load(graph_id)
        session = GraphSession.load(loaded.document, access=loaded.access, settings=settings)
    except GraphNotFoundError as e:
        console.print(str(e), style="red")
        return None
    except (GraphFormatError, ValueError) as e:
        console.print(f"Could not load {graph_id}: {e}", style="red")
        return None
    return loaded, session


def report_failure(result: OpResult, console: Console) -> int:
    console.print(f"{result.message} [{result.error}]", style="red")
    if result.error == READ_ONLY_ACCESS:
        return EXIT_READ_ONLY
    return EXIT_INVALID
