"""Substring search over node ids and labels."""

from __future__ import annotations

from ..models import Graph


def search_nodes(graph: Graph, query: str, *, in_id: bool = True, in_label: bool = True) -> list[str]:
    """Ids of nodes whose id and/or label contains `query` (case-insensitive).

    With both scopes switched off, both are searched.
    """
    q = (query or "").strip().lower()
    if not q:
        return []
    if not in_id and not in_label:
        in_id = in_label = True

    matches: list[str] = []
    for node in graph.nodes:
        if in_id and q in str(node.id).lower():
            matches.append(node.id)
        elif in_label and q in str(node.label or "").lower():
            matches.append(node.id)
    return matches
