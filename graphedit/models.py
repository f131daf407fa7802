"""Data models for graphs, nodes and links."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field
from typing import Any, Literal

from .errors import GraphFormatError

GraphType = Literal["force", "grid", "circle", "hierarchy"]
GRAPH_TYPES: tuple[str, ...] = ("force", "grid", "circle", "hierarchy")

Access = Literal["owner", "editor", "viewer"]
ACCESS_LEVELS: tuple[str, ...] = ("owner", "editor", "viewer")


def finite_number(value: Any) -> float | None:
    """Return value as a float when it is a finite real number, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def coerce_layer(value: Any) -> int | None:
    """Floor a numeric layer to an integer >= 1; non-numbers give None."""
    num = finite_number(value)
    if num is None:
        return None
    return max(1, math.floor(num))


def coerce_weight(value: Any) -> float | None:
    """Parse an optional link weight from a number or numeric string."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            value = float(value)
        except ValueError:
            return None
    return finite_number(value)


def ref_id(ref: Any) -> str | None:
    """Reduce a link endpoint (id, Node, or mapping with an id) to its plain id."""
    if ref is None:
        return None
    if isinstance(ref, Node):
        return ref.id
    if isinstance(ref, dict):
        inner = ref.get("id")
        return None if inner is None else str(inner)
    return str(ref)


@dataclass
class Node:
    """A labelled point in the graph."""

    id: str
    label: str | None = None
    description: str | None = None
    x: float | None = None
    y: float | None = None
    layer: int | None = None  # hierarchy graphs only

    @property
    def has_position(self) -> bool:
        return finite_number(self.x) is not None and finite_number(self.y) is not None

    @property
    def has_layer(self) -> bool:
        return isinstance(self.layer, int) and not isinstance(self.layer, bool)

    def to_dict(self, *, include_layer: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id}
        if self.label is not None:
            data["label"] = self.label
        if self.description is not None:
            data["description"] = self.description
        if finite_number(self.x) is not None:
            data["x"] = self.x
        if finite_number(self.y) is not None:
            data["y"] = self.y
        if include_layer and self.has_layer:
            data["layer"] = self.layer
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "Node":
        if not isinstance(data, dict):
            raise GraphFormatError(f"node must be an object, got {type(data).__name__}")
        raw_id = data.get("id")
        if raw_id is None or str(raw_id) == "":
            raise GraphFormatError("node is missing an id")
        label = data.get("label")
        description = data.get("description")
        return cls(
            id=str(raw_id),
            label=None if label is None else str(label),
            description=None if description is None else str(description),
            x=finite_number(data.get("x")),
            y=finite_number(data.get("y")),
            layer=coerce_layer(data.get("layer")),
        )


@dataclass
class Link:
    """A directed, optionally weighted relationship between two node ids."""

    source: str
    target: str
    weight: float | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (ref_id(self.source), ref_id(self.target))

    def to_dict(self, *, include_weight: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {"source": ref_id(self.source), "target": ref_id(self.target)}
        if include_weight and self.weight is not None:
            data["weight"] = self.weight
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "Link":
        if not isinstance(data, dict):
            raise GraphFormatError(f"link must be an object, got {type(data).__name__}")
        source = ref_id(data.get("source"))
        target = ref_id(data.get("target"))
        if not source or not target:
            raise GraphFormatError("link is missing a source or target")
        return cls(source=source, target=target, weight=coerce_weight(data.get("weight")))


@dataclass
class Graph:
    """The mutable graph owned by one editing session."""

    nodes: list[Node] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    type: str = "force"
    title: str = ""

    @property
    def is_hierarchy(self) -> bool:
        return self.type == "hierarchy"

    @property
    def is_force(self) -> bool:
        return self.type == "force"

    def get_node(self, node_id: str) -> Node | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def node_ids(self) -> list[str]:
        return [n.id for n in self.nodes]

    def clone(self) -> "Graph":
        """Deep, structurally independent copy."""
        return copy.deepcopy(self)

    def restore(self, other: "Graph") -> None:
        """Replace contents with `other` in place, keeping list identities."""
        self.nodes[:] = other.nodes
        self.links[:] = other.links
        self.type = other.type or self.type
        self.title = other.title if other.title is not None else self.title

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "type": self.type,
            "nodes": [n.to_dict(include_layer=self.is_hierarchy) for n in self.nodes],
            "links": [l.to_dict(include_weight=self.is_force) for l in self.links],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Graph":
        if not isinstance(data, dict):
            raise GraphFormatError("graph document must be an object")

        raw_nodes = data.get("nodes") or []
        raw_links = data.get("links") or []
        if not isinstance(raw_nodes, list):
            raise GraphFormatError("'nodes' must be a list")
        if not isinstance(raw_links, list):
            raise GraphFormatError("'links' must be a list")

        graph_type = str(data.get("type") or "force").strip().lower()
        if graph_type not in GRAPH_TYPES:
            raise GraphFormatError(f"unknown graph type: {graph_type!r}")

        title = data.get("title")
        return cls(
            nodes=[Node.from_dict(n) for n in raw_nodes],
            links=[Link.from_dict(l) for l in raw_links],
            type=graph_type,
            title="" if title is None else str(title),
        )

    @classmethod
    def default(cls, *, graph_type: str = "force", title: str = "") -> "Graph":
        """The three-node starter graph used when a loaded graph is empty."""
        return cls(
            nodes=[Node("A"), Node("B"), Node("C")],
            links=[Link("A", "B"), Link("B", "C")],
            type=graph_type,
            title=title,
        )
