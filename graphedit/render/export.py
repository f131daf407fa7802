"""Graph export: single-file CSV, JSON document, SVG and HTML."""

from __future__ import annotations

import csv
import io
import json
import re

from ..analysis.paths import PathResult
from ..layout.engine import LayoutEngine, natural_key
from ..models import Graph, finite_number, ref_id
from .svg import render_svg, wrap_html

EXPORT_FORMATS = ("csv", "json", "svg", "html")

CSV_HEADER = ["record", "id", "label", "description", "x", "y", "source", "target", "weight", "type"]

_SLUG_JUNK = re.compile(r"[^a-z0-9_-]+")


def _cell(value) -> str:
    if value is None:
        return ""
    return re.sub(r"[\r\n]+", " ", str(value)).replace(",", " ")


def _num(value) -> str:
    v = finite_number(value)
    if v is None:
        return ""
    return str(int(v)) if v.is_integer() else repr(v)


def slugify(title: str | None) -> str:
    slug = _SLUG_JUNK.sub("-", (title or "graph").lower()).strip("-")
    return slug or "graph"


def export_filename(graph: Graph, fmt: str) -> str:
    """``<slug>_single.csv`` for CSV, ``<slug>.<fmt>`` otherwise."""
    slug = slugify(graph.title)
    if fmt == "csv":
        return f"{slug}_single.csv"
    return f"{slug}.{fmt}"


def to_csv(graph: Graph) -> str:
    """One ``meta`` row, node rows in natural id order, then edge rows.

    Weights are written only for force graphs.
    """
    include_weight = graph.is_force
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerow(["meta", "", "", "", "", "", "", "", "", _cell((graph.type or "force").strip().lower())])

    for node in sorted(graph.nodes, key=lambda n: natural_key(n.id)):
        writer.writerow([
            "node",
            _cell(node.id),
            _cell(node.label or ""),
            _cell(node.description or ""),
            _num(node.x),
            _num(node.y),
            "", "", "", "",
        ])

    for link in graph.links:
        s, t = ref_id(link.source), ref_id(link.target)
        if not s or not t:
            continue
        weight = _num(link.weight) if include_weight else ""
        writer.writerow(["edge", "", "", "", "", "", _cell(s), _cell(t), weight, ""])

    return buf.getvalue()


def to_json(graph: Graph) -> str:
    """Title, type, nodes and links; weights only travel with force graphs."""
    return json.dumps(graph.to_dict(), indent=2) + "\n"


def _layer_rows(graph: Graph, layout: LayoutEngine | None) -> dict[int, float] | None:
    if layout is None or not graph.is_hierarchy:
        return None
    rows = max([1] + [n.layer for n in graph.nodes if n.has_layer])
    return {layer: layout.y_for_layer(layer) for layer in range(1, rows + 1)}


def export_graph(
    graph: Graph,
    fmt: str,
    *,
    path: PathResult | None = None,
    layout: LayoutEngine | None = None,
) -> str:
    """Render `graph` in `fmt`; a successful `path` is highlighted in SVG/HTML."""
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"format must be one of {', '.join(EXPORT_FORMATS)}")
    if fmt == "csv":
        return to_csv(graph)
    if fmt == "json":
        return to_json(graph)

    hl_nodes: set[str] = set()
    hl_edges: set[str] = set()
    if path is not None and path.ok:
        hl_nodes, hl_edges = path.highlight()

    svg = render_svg(
        graph,
        highlight_nodes=hl_nodes,
        highlight_edges=hl_edges,
        layer_rows=_layer_rows(graph, layout),
    )
    if fmt == "svg":
        return svg
    return wrap_html(svg, title=graph.title or "graph")
