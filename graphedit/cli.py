"""CLI entrypoint for graphedit."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import find_settings, load_settings
from .models import GRAPH_TYPES
from .render.export import EXPORT_FORMATS
from .store import GraphStore


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(__version__, prog_name="graphedit")
@click.option(
    "--store",
    "store_dir",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Directory holding graph documents (defaults to store.dir from config, else ./graphs)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to graphedit.toml (defaults to the nearest one above the working directory)",
)
@click.option("--verbose", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, store_dir: Path | None, config_path: Path | None, verbose: bool) -> None:
    """graphedit - Edit, lay out and analyze small node/link graphs.

    Graphs live as JSON documents in a store directory; every write is
    recorded in the store's change journal.
    """
    _configure_logging(verbose)
    ctx.ensure_object(dict)

    if config_path is None:
        config_path = find_settings(Path.cwd())
    try:
        settings = load_settings(config_path)
    except ValueError as e:
        raise click.ClickException(f"Invalid config {config_path}: {e}") from e

    root = (store_dir or settings.store_dir).resolve()
    ctx.obj["settings"] = settings
    ctx.obj["store"] = GraphStore(root)


@cli.command()
@click.argument("graph_id")
@click.option("--title", default="", help="Graph title")
@click.option(
    "--type",
    "graph_type",
    type=click.Choice(GRAPH_TYPES),
    default="force",
    help="Layout type",
)
@click.pass_context
def create(ctx: click.Context, graph_id: str, title: str, graph_type: str) -> None:
    """Create a graph seeded with the starter graph (A -> B -> C)."""
    from .commands.graph_cmd import run_create

    exit_code = run_create(ctx.obj["store"], graph_id, title=title, graph_type=graph_type, settings=ctx.obj["settings"])
    sys.exit(exit_code)


@cli.command()
@click.argument("graph_id")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["rich", "md", "json"]),
    default="rich",
    help="Output format",
)
@click.pass_context
def show(ctx: click.Context, graph_id: str, output_format: str) -> None:
    """Show a graph summary with node and link tables."""
    from .commands.graph_cmd import run_show

    exit_code = run_show(ctx.obj["store"], graph_id, output_format, settings=ctx.obj["settings"])
    sys.exit(exit_code)


@cli.command()
@click.argument("graph_id")
@click.option("--type", "graph_type", type=click.Choice(GRAPH_TYPES), default=None, help="Switch layout type")
@click.option("--width", type=click.FloatRange(min=1), default=None, help="Canvas width")
@click.option("--height", type=click.FloatRange(min=1), default=None, help="Canvas height")
@click.pass_context
def layout(
    ctx: click.Context,
    graph_id: str,
    graph_type: str | None,
    width: float | None,
    height: float | None,
) -> None:
    """Re-apply the layout and save node positions.

    Examples:

        graphedit layout demo

        graphedit layout demo --type hierarchy --height 800
    """
    from .commands.graph_cmd import run_layout

    exit_code = run_layout(
        ctx.obj["store"],
        graph_id,
        graph_type=graph_type,
        width=width,
        height=height,
        settings=ctx.obj["settings"],
    )
    sys.exit(exit_code)


@cli.command("add-node")
@click.argument("graph_id")
@click.argument("node_id")
@click.option("--label", default=None, help="Display label")
@click.option("--description", default=None, help="Free-text description")
@click.option("--x", type=float, default=None, help="x position (defaults to canvas centre)")
@click.option("--y", type=float, default=None, help="y position (defaults to canvas centre)")
@click.option("--layer", type=int, default=None, help="Layer (hierarchy graphs only)")
@click.pass_context
def add_node(
    ctx: click.Context,
    graph_id: str,
    node_id: str,
    label: str | None,
    description: str | None,
    x: float | None,
    y: float | None,
    layer: int | None,
) -> None:
    """Add a node."""
    from .commands.edit_cmd import run_add_node

    exit_code = run_add_node(
        ctx.obj["store"],
        graph_id,
        node_id,
        label=label,
        description=description,
        x=x,
        y=y,
        layer=layer,
        settings=ctx.obj["settings"],
    )
    sys.exit(exit_code)


@cli.command("edit-node")
@click.argument("graph_id")
@click.argument("node_id")
@click.option("--id", "new_id", default=None, help="Rename the node (links follow)")
@click.option("--label", default=None, help="New label (empty string clears)")
@click.option("--description", default=None, help="New description (empty string clears)")
@click.option("--layer", type=int, default=None, help="Move to layer (hierarchy graphs only)")
@click.pass_context
def edit_node(
    ctx: click.Context,
    graph_id: str,
    node_id: str,
    new_id: str | None,
    label: str | None,
    description: str | None,
    layer: int | None,
) -> None:
    """Edit a node's id, label, description or layer.

    A layer change that would make a link point upward is refused while the
    other edits still apply.
    """
    from .commands.edit_cmd import run_edit_node

    exit_code = run_edit_node(
        ctx.obj["store"],
        graph_id,
        node_id,
        new_id=new_id,
        label=label,
        description=description,
        layer=layer,
        settings=ctx.obj["settings"],
    )
    sys.exit(exit_code)


@cli.command("delete-node")
@click.argument("graph_id")
@click.argument("node_id")
@click.pass_context
def delete_node(ctx: click.Context, graph_id: str, node_id: str) -> None:
    """Delete a node and every link touching it."""
    from .commands.edit_cmd import run_delete_node

    exit_code = run_delete_node(ctx.obj["store"], graph_id, node_id, settings=ctx.obj["settings"])
    sys.exit(exit_code)


@cli.command("add-edge")
@click.argument("graph_id")
@click.argument("source")
@click.argument("target")
@click.option("--weight", default=None, help="Link weight (force graphs only)")
@click.pass_context
def add_edge(ctx: click.Context, graph_id: str, source: str, target: str, weight: str | None) -> None:
    """Add SOURCE -> TARGET, or update its weight."""
    from .commands.edit_cmd import run_add_edge

    exit_code = run_add_edge(ctx.obj["store"], graph_id, source, target, weight=weight, settings=ctx.obj["settings"])
    sys.exit(exit_code)


@cli.command("remove-edge")
@click.argument("graph_id")
@click.argument("source")
@click.argument("target")
@click.pass_context
def remove_edge(ctx: click.Context, graph_id: str, source: str, target: str) -> None:
    """Remove the link SOURCE -> TARGET."""
    from .commands.edit_cmd import run_remove_edge

    exit_code = run_remove_edge(ctx.obj["store"], graph_id, source, target, settings=ctx.obj["settings"])
    sys.exit(exit_code)


@cli.command()
@click.argument("graph_id")
@click.argument("src")
@click.argument("dst")
@click.option(
    "--directed/--undirected",
    default=None,
    help="Follow links source-to-target only (default from analytics.directed_paths)",
)
@click.option("--json", "output_json", is_flag=True, help="Output result as JSON")
@click.pass_context
def path(ctx: click.Context, graph_id: str, src: str, dst: str, directed: bool | None, output_json: bool) -> None:
    """Find the minimum-weight path from SRC to DST."""
    from .commands.analytics_cmd import run_path

    exit_code = run_path(
        ctx.obj["store"],
        graph_id,
        src,
        dst,
        directed=directed,
        output_json=output_json,
        settings=ctx.obj["settings"],
    )
    sys.exit(exit_code)


@cli.command()
@click.argument("graph_id")
@click.option("--mode", type=click.Choice(["total", "in", "out"]), default="total", help="Which degree to count")
@click.option("--top", type=click.IntRange(min=1), default=None, help="Only show the top N nodes")
@click.option("--json", "output_json", is_flag=True, help="Output scores as JSON")
@click.pass_context
def degree(ctx: click.Context, graph_id: str, mode: str, top: int | None, output_json: bool) -> None:
    """Degree centrality per node."""
    from .commands.analytics_cmd import run_degree

    exit_code = run_degree(
        ctx.obj["store"],
        graph_id,
        mode=mode,
        top=top,
        output_json=output_json,
        settings=ctx.obj["settings"],
    )
    sys.exit(exit_code)


@cli.command()
@click.argument("graph_id")
@click.option("--damping", type=float, default=None, help="Damping factor (default from config, 0.85)")
@click.option("--max-iter", type=click.IntRange(min=1), default=None, help="Iteration cap")
@click.option("--tol", type=float, default=None, help="Convergence tolerance (L1)")
@click.option("--top", type=click.IntRange(min=1), default=None, help="Only show the top N nodes")
@click.option("--json", "output_json", is_flag=True, help="Output scores as JSON")
@click.pass_context
def pagerank(
    ctx: click.Context,
    graph_id: str,
    damping: float | None,
    max_iter: int | None,
    tol: float | None,
    top: int | None,
    output_json: bool,
) -> None:
    """PageRank over directed links."""
    from .commands.analytics_cmd import run_pagerank

    exit_code = run_pagerank(
        ctx.obj["store"],
        graph_id,
        damping=damping,
        max_iter=max_iter,
        tol=tol,
        top=top,
        output_json=output_json,
        settings=ctx.obj["settings"],
    )
    sys.exit(exit_code)


@cli.command()
@click.argument("graph_id")
@click.argument("query")
@click.option("--in", "where", type=click.Choice(["id", "label", "both"]), default="both", help="Fields to match")
@click.pass_context
def search(ctx: click.Context, graph_id: str, query: str, where: str) -> None:
    """Case-insensitive substring search over node ids and labels."""
    from .commands.analytics_cmd import run_search

    exit_code = run_search(ctx.obj["store"], graph_id, query, where=where, settings=ctx.obj["settings"])
    sys.exit(exit_code)


@cli.command()
@click.argument("graph_id")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(EXPORT_FORMATS),
    default="csv",
    help="Export format",
)
@click.option(
    "--out",
    type=click.Path(dir_okay=True, path_type=Path),
    default=None,
    help="Output file or directory (default: stdout)",
)
@click.option(
    "--highlight-path",
    nargs=2,
    type=str,
    default=None,
    metavar="SRC DST",
    help="Highlight the shortest path between two nodes (svg/html)",
)
@click.option("--directed", is_flag=True, help="Use directed links for --highlight-path")
@click.pass_context
def export(
    ctx: click.Context,
    graph_id: str,
    output_format: str,
    out: Path | None,
    highlight_path: tuple[str, str] | None,
    directed: bool,
) -> None:
    """Export a graph as CSV, JSON, SVG or HTML.

    Examples:

        graphedit export demo --out exports/

        graphedit export demo --format html --highlight-path A C --out demo.html
    """
    from .commands.graph_cmd import run_export

    exit_code = run_export(
        ctx.obj["store"],
        graph_id,
        output_format,
        out=out,
        highlight=tuple(highlight_path) if highlight_path else None,
        directed=directed,
        settings=ctx.obj["settings"],
    )
    sys.exit(exit_code)


@cli.command()
@click.option("--last", type=click.IntRange(min=1), default=None, help="Only show the last N entries")
@click.pass_context
def journal(ctx: click.Context, last: int | None) -> None:
    """Show the store's change journal."""
    from .commands.journal_cmd import run_journal

    exit_code = run_journal(ctx.obj["store"].root, last)
    sys.exit(exit_code)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
