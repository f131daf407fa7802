"""Static SVG rendering of a laid-out graph, plus the standalone HTML viewer page."""

from __future__ import annotations

import html
import math

from ..models import Graph, ref_id

NODE_R = 5.0
ARROW_LEN = 10.0
ARROW_W = 6.0
MARGIN = 40.0

BG = "#0f1115"
EDGE_COLOR = "#7aa0ff"
NODE_COLOR = "#4f7cff"
TEXT_COLOR = "#dbe2ff"
HIGHLIGHT = "#ffb703"
ROW_COLOR = "#1f2533"


def _fmt(v: float) -> str:
    return f"{v:.1f}"


def render_svg(
    graph: Graph,
    *,
    title: str | None = None,
    highlight_nodes: set[str] | None = None,
    highlight_edges: set[str] | None = None,
    layer_rows: dict[int, float] | None = None,
) -> str:
    """Render nodes as circles and links as arrows, at their stored positions.

    `highlight_edges` holds ``"source->target"`` keys; a link matches in either
    direction so undirected paths light up regardless of link orientation.
    `layer_rows` maps hierarchy layer numbers to the y of their guide line.
    Nodes without a position are drawn at the origin.
    """
    hl_nodes = highlight_nodes or set()
    hl_edges = highlight_edges or set()
    title = graph.title if title is None else title

    pos = {n.id: (n.x or 0.0, n.y or 0.0) for n in graph.nodes}
    xs = [p[0] for p in pos.values()] or [0.0]
    ys = [p[1] for p in pos.values()] or [0.0]
    min_x, max_x = min(xs) - MARGIN, max(xs) + MARGIN
    min_y, max_y = min(ys) - MARGIN, max(ys) + MARGIN
    if title:
        min_y -= 24
    width = max(1.0, max_x - min_x)
    height = max(1.0, max_y - min_y)

    def esc(s: str) -> str:
        return html.escape(s, quote=True)

    parts: list[str] = []
    parts.append(
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:.0f}" height="{height:.0f}" '
        f'viewBox="{_fmt(min_x)} {_fmt(min_y)} {_fmt(width)} {_fmt(height)}" style="background:{BG}">'
    )
    parts.append("<defs>")
    for marker_id, color in (("arrow", EDGE_COLOR), ("arrow-hl", HIGHLIGHT)):
        parts.append(
            f'<marker id="{marker_id}" viewBox="0 0 {ARROW_LEN:.0f} {ARROW_W:.0f}" '
            f'refX="{ARROW_LEN:.0f}" refY="{ARROW_W / 2:.0f}" markerUnits="userSpaceOnUse" '
            f'markerWidth="{ARROW_LEN:.0f}" markerHeight="{ARROW_W:.0f}" orient="auto">'
            f'<path d="M 0 0 L {ARROW_LEN:.0f} {ARROW_W / 2:.0f} L 0 {ARROW_W:.0f} z" fill="{color}"/></marker>'
        )
    parts.append("</defs>")

    if title:
        parts.append(
            f'<text x="{_fmt(min_x + 12)}" y="{_fmt(min_y + 20)}" fill="{TEXT_COLOR}" '
            f'font-family="Helvetica" font-size="16">{esc(title)}</text>'
        )

    if layer_rows:
        parts.append('<g id="layers">')
        for layer, y in sorted(layer_rows.items()):
            parts.append(
                f'<line x1="{_fmt(min_x)}" y1="{_fmt(y)}" x2="{_fmt(max_x)}" y2="{_fmt(y)}" '
                f'stroke="{ROW_COLOR}" stroke-dasharray="4 4"/>'
            )
            parts.append(
                f'<text x="{_fmt(min_x + 4)}" y="{_fmt(y - 4)}" fill="{ROW_COLOR}" '
                f'font-family="Helvetica" font-size="10">L{layer}</text>'
            )
        parts.append("</g>")

    # Edges under nodes
    parts.append('<g id="edges" stroke-linecap="round" fill="none">')
    for link in graph.links:
        s, t = ref_id(link.source), ref_id(link.target)
        if s not in pos or t not in pos or s == t:
            continue
        (x1, y1), (x2, y2) = pos[s], pos[t]
        ang = math.atan2(y2 - y1, x2 - x1)
        sx = x1 + math.cos(ang) * NODE_R
        sy = y1 + math.sin(ang) * NODE_R
        tx = x2 - math.cos(ang) * NODE_R
        ty = y2 - math.sin(ang) * NODE_R

        lit = f"{s}->{t}" in hl_edges or f"{t}->{s}" in hl_edges
        color = HIGHLIGHT if lit else EDGE_COLOR
        marker = "arrow-hl" if lit else "arrow"
        sw = 2.4 if lit else 1.2
        parts.append(
            f'<line x1="{_fmt(sx)}" y1="{_fmt(sy)}" x2="{_fmt(tx)}" y2="{_fmt(ty)}" '
            f'stroke="{color}" stroke-width="{sw}" marker-end="url(#{marker})"/>'
        )
        if graph.is_force and link.weight is not None:
            nx, ny = -math.sin(ang), math.cos(ang)
            mx, my = (sx + tx) / 2 + nx * 8, (sy + ty) / 2 + ny * 8
            parts.append(
                f'<text x="{_fmt(mx)}" y="{_fmt(my)}" fill="{TEXT_COLOR}" font-family="Helvetica" '
                f'font-size="10">{esc(f"{link.weight:g}")}</text>'
            )
    parts.append("</g>")

    parts.append('<g id="nodes">')
    for node in graph.nodes:
        x, y = pos[node.id]
        lit = node.id in hl_nodes
        stroke = f' stroke="{HIGHLIGHT}" stroke-width="2"' if lit else ""
        parts.append(f'<circle cx="{_fmt(x)}" cy="{_fmt(y)}" r="{NODE_R:.0f}" fill="{NODE_COLOR}"{stroke}/>')
        parts.append(
            f'<text x="{_fmt(x + 7)}" y="{_fmt(y + 3)}" fill="{TEXT_COLOR}" font-family="Helvetica" '
            f'font-size="10">{esc(node.label or node.id)}</text>'
        )
    parts.append("</g>")
    parts.append("</svg>")
    return "\n".join(parts) + "\n"


def wrap_html(svg: str, *, title: str) -> str:
    """Wrap SVG in a standalone HTML page with basic pan/zoom (no external deps)."""
    t = html.escape(title, quote=True)
    return (
        "<!doctype html>\n"
        "<html>\n"
        "<head>\n"
        f"  <meta charset=\"utf-8\" />\n  <title>{t}</title>\n"
        "  <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />\n"
        "  <style>\n"
        "    html, body { height: 100%; }\n"
        f"    body {{ margin: 0; background: {BG}; color: #e6e6e6; font-family: system-ui, sans-serif; }}\n"
        "    .wrap { padding: 12px; height: 100vh; box-sizing: border-box; display: flex; flex-direction: column; }\n"
        "    .toolbar { display: flex; gap: 8px; align-items: center; margin: 0 0 10px 0; }\n"
        "    .btn { background: #1b1f2a; color: #e6e6e6; border: 1px solid #3a4154; border-radius: 8px; padding: 6px 10px; cursor: pointer; }\n"
        "    .hint { color: #9aa4b2; font-size: 12px; }\n"
        "    .viewport { border: 1px solid #3a4154; border-radius: 10px; overflow: hidden; flex: 1; min-height: 0; }\n"
        "    svg { width: 100%; height: 100%; display: block; touch-action: none; user-select: none; }\n"
        "  </style>\n"
        "</head>\n"
        "<body>\n"
        "  <div class=\"wrap\">\n"
        "    <div class=\"toolbar\">\n"
        "      <button class=\"btn\" id=\"fitBtn\" type=\"button\">Fit</button>\n"
        f"      <span class=\"hint\">{t} &middot; drag to pan, scroll to zoom</span>\n"
        "    </div>\n"
        "    <div class=\"viewport\" id=\"viewport\">\n"
        f"{svg}\n"
        "    </div>\n"
        "  </div>\n"
        "  <script>\n"
        "    (function () {\n"
        "      const svg = document.querySelector('#viewport svg');\n"
        "      if (!svg) return;\n"
        "      const vb = svg.viewBox.baseVal;\n"
        "      const initial = { x: vb.x, y: vb.y, width: vb.width, height: vb.height };\n"
        "      const zoomAt = (clientX, clientY, factor) => {\n"
        "        const rect = svg.getBoundingClientRect();\n"
        "        const px = (clientX - rect.left) / rect.width;\n"
        "        const py = (clientY - rect.top) / rect.height;\n"
        "        const newW = Math.min(initial.width * 4, Math.max(initial.width * 0.1, vb.width / factor));\n"
        "        const newH = newW * (initial.height / initial.width);\n"
        "        vb.x += (vb.width - newW) * px;\n"
        "        vb.y += (vb.height - newH) * py;\n"
        "        vb.width = newW;\n"
        "        vb.height = newH;\n"
        "      };\n"
        "      let start = null;\n"
        "      svg.addEventListener('pointerdown', (e) => {\n"
        "        svg.setPointerCapture(e.pointerId);\n"
        "        start = { x: e.clientX, y: e.clientY, vbX: vb.x, vbY: vb.y };\n"
        "      });\n"
        "      svg.addEventListener('pointerup', () => { start = null; });\n"
        "      svg.addEventListener('pointercancel', () => { start = null; });\n"
        "      svg.addEventListener('pointermove', (e) => {\n"
        "        if (!start) return;\n"
        "        const rect = svg.getBoundingClientRect();\n"
        "        vb.x = start.vbX - (e.clientX - start.x) * (vb.width / rect.width);\n"
        "        vb.y = start.vbY - (e.clientY - start.y) * (vb.height / rect.height);\n"
        "      });\n"
        "      svg.addEventListener('wheel', (e) => {\n"
        "        e.preventDefault();\n"
        "        zoomAt(e.clientX, e.clientY, e.deltaY > 0 ? 1 / 1.15 : 1.15);\n"
        "      }, { passive: false });\n"
        "      document.getElementById('fitBtn').addEventListener('click', () => {\n"
        "        vb.x = initial.x; vb.y = initial.y; vb.width = initial.width; vb.height = initial.height;\n"
        "      });\n"
        "    })();\n"
        "  </script>\n"
        "</body>\n"
        "</html>\n"
    )
