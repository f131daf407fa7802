"""Graph-level commands: create, show, layout and export."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..analysis.paths import shortest_path
from ..config import Settings
from ..editor.ops import set_graph_type
from ..editor.session import GraphSession
from ..errors import GraphFormatError, ReadOnlyAccessError
from ..layout.engine import natural_key
from ..models import Graph
from ..render.export import export_filename, export_graph
from ..store import GraphStore, build_full_payload, build_positions_payload
from .common import EXIT_INVALID, EXIT_OK, EXIT_READ_ONLY, open_session, report_failure


def run_create(
    store: GraphStore,
    graph_id: str,
    *,
    title: str,
    graph_type: str = "force",
    settings: Settings | None = None,
) -> int:
    """Create a graph document seeded with the laid-out starter graph."""
    console = Console(stderr=True)
    settings = settings or Settings()

    session = GraphSession(
        Graph.default(graph_type=graph_type, title=title),
        width=settings.canvas_width,
        height=settings.canvas_height,
    )
    session.layout.apply_layout_for_type()

    try:
        store.create(graph_id, title=title, graph_type=graph_type, graph=session.graph)
    except (FileExistsError, GraphFormatError, ValueError) as e:
        console.print(str(e), style="red")
        return EXIT_INVALID

    console.print(f"Created {graph_id} ({graph_type})", style="green")
    return EXIT_OK


def _fmt_num(value: float | None) -> str:
    return "" if value is None else f"{value:.1f}"


def _to_markdown(graph: Graph, *, access: str) -> str:
    lines = [f"# {graph.title or '(untitled)'}", ""]
    lines.append(f"- Type: `{graph.type}`")
    lines.append(f"- Access: `{access}`")
    lines.append(f"- Nodes: {len(graph.nodes)}  Links: {len(graph.links)}")
    lines.append("")
    lines.append("## Nodes")
    lines.append("")
    lines.append("| Id | Label | Layer | x | y |")
    lines.append("|---|---|---:|---:|---:|")
    for n in sorted(graph.nodes, key=lambda n: natural_key(n.id)):
        layer = str(n.layer) if graph.is_hierarchy and n.has_layer else ""
        lines.append(f"| `{n.id}` | {n.label or ''} | {layer} | {_fmt_num(n.x)} | {_fmt_num(n.y)} |")
    lines.append("")
    lines.append("## Links")
    lines.append("")
    lines.append("| Source | Target | Weight |")
    lines.append("|---|---|---:|")
    for l in graph.links:
        weight = f"{l.weight:g}" if graph.is_force and l.weight is not None else ""
        lines.append(f"| `{l.source}` | `{l.target}` | {weight} |")
    lines.append("")
    return "\n".join(lines)


def _print_rich(graph: Graph, *, access: str, console: Console) -> None:
    console.print(f"[bold]{graph.title or '(untitled)'}[/bold]")
    console.print(f"Type: {graph.type}  Access: {access}  Nodes: {len(graph.nodes)}  Links: {len(graph.links)}")
    console.print()

    nodes = Table(title="Nodes", show_header=True, header_style="bold")
    nodes.add_column("Id", style="cyan", no_wrap=True)
    nodes.add_column("Label")
    if graph.is_hierarchy:
        nodes.add_column("Layer", justify="right")
    nodes.add_column("x", justify="right")
    nodes.add_column("y", justify="right")
    for n in sorted(graph.nodes, key=lambda n: natural_key(n.id)):
        row = [n.id, n.label or ""]
        if graph.is_hierarchy:
            row.append(str(n.layer) if n.has_layer else "")
        row += [_fmt_num(n.x), _fmt_num(n.y)]
        nodes.add_row(*row)
    console.print(nodes)
    console.print()

    links = Table(title="Links", show_header=True, header_style="bold")
    links.add_column("Source", style="cyan")
    links.add_column("Target", style="cyan")
    if graph.is_force:
        links.add_column("Weight", justify="right")
    for l in graph.links:
        row = [l.source, l.target]
        if graph.is_force:
            row.append("" if l.weight is None else f"{l.weight:g}")
        links.add_row(*row)
    console.print(links)


def run_show(store: GraphStore, graph_id: str, fmt: str = "rich", settings: Settings | None = None) -> int:
    """Print a graph summary with node and link tables."""
    console = Console(stderr=True)
    opened = open_session(store, graph_id, settings or Settings(), console)
    if opened is None:
        return EXIT_INVALID
    loaded, session = opened
    graph = session.graph

    if fmt == "rich":
        _print_rich(graph, access=loaded.access, console=Console())
        return EXIT_OK

    if fmt == "json":
        payload = {**graph.to_dict(), "access": loaded.access}
        text = json.dumps(payload, indent=2) + "\n"
    else:
        text = _to_markdown(graph, access=loaded.access)

    print(text, end="" if text.endswith("\n") else "\n")
    return EXIT_OK


def run_layout(
    store: GraphStore,
    graph_id: str,
    *,
    graph_type: str | None = None,
    width: float | None = None,
    height: float | None = None,
    settings: Settings | None = None,
) -> int:
    """Re-apply the layout (optionally switching type) and save the result."""
    console = Console(stderr=True)
    opened = open_session(store, graph_id, settings or Settings(), console)
    if opened is None:
        return EXIT_INVALID
    _, session = opened

    if session.read_only:
        console.print("You have viewer access (read-only)", style="red")
        return EXIT_READ_ONLY

    layout = session.layout
    if width is not None or height is not None:
        layout.resize(width or layout.width, height or layout.height)

    type_changed = False
    if graph_type is not None:
        result = set_graph_type(session, graph_type)
        if not result.success:
            return report_failure(result, console)
        type_changed = result.changed

    if not type_changed:
        # A fresh layout replaces whatever was stored.
        for node in session.graph.nodes:
            node.x = None
            node.y = None
        layout.invalidate_layers()
        layout.apply_layout_for_type()

    try:
        if type_changed:
            store.save_full(graph_id, build_full_payload(session.graph), graph_type=session.graph.type)
        else:
            store.save_positions(graph_id, build_positions_payload(session.graph))
    except ReadOnlyAccessError as e:
        console.print(str(e), style="red")
        return EXIT_READ_ONLY

    console.print(f"Laid out {graph_id} as {session.graph.type}", style="green")
    return EXIT_OK


def run_export(
    store: GraphStore,
    graph_id: str,
    fmt: str,
    *,
    out: Path | None = None,
    highlight: tuple[str, str] | None = None,
    directed: bool = False,
    settings: Settings | None = None,
) -> int:
    """Export a graph as CSV, JSON, SVG or HTML.

    `out` may be a file or an existing directory; in the latter case the file
    name is derived from the graph title.
    """
    console = Console(stderr=True)
    opened = open_session(store, graph_id, settings or Settings(), console)
    if opened is None:
        return EXIT_INVALID
    _, session = opened
    graph = session.graph

    path = None
    if highlight is not None:
        path = shortest_path(graph, highlight[0], highlight[1], directed=directed)
        if not path.ok:
            console.print(f"Path not highlighted: {path.msg}", style="yellow")

    text = export_graph(graph, fmt, path=path, layout=session.layout)

    if out:
        if out.is_dir():
            out = out / export_filename(graph, fmt)
        out.write_text(text, encoding="utf-8")
        console.print(f"Wrote {fmt} export to {out}", style="green")
    else:
        print(text, end="" if text.endswith("\n") else "\n")

    return EXIT_OK
