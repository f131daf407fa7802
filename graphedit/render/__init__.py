"""Static renderers and exporters."""

from .export import EXPORT_FORMATS, export_filename, export_graph, slugify, to_csv, to_json
from .svg import render_svg, wrap_html

__all__ = [
    "EXPORT_FORMATS",
    "export_filename",
    "export_graph",
    "render_svg",
    "slugify",
    "to_csv",
    "to_json",
    "wrap_html",
]
