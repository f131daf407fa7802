"""Graph editing: session context, mutations, history and drag gestures."""

from .history import History, Snapshot
from .ops import (
    OpResult,
    add_node,
    add_or_update_edge,
    dedupe_links,
    delete_node,
    edit_node,
    find_edge_index,
    normalize_links,
    remove_edge,
    set_graph_type,
    set_title,
    validate_hierarchy_edge,
    validate_layer_change,
)
from .session import GraphSession
from .drag import DragGesture

__all__ = [
    "History",
    "Snapshot",
    "OpResult",
    "add_node",
    "add_or_update_edge",
    "dedupe_links",
    "delete_node",
    "edit_node",
    "find_edge_index",
    "normalize_links",
    "remove_edge",
    "set_graph_type",
    "set_title",
    "validate_hierarchy_edge",
    "validate_layer_change",
    "GraphSession",
    "DragGesture",
]
