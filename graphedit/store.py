"""JSON file store standing in for the graph backend.

One document per graph id (``<root>/<id>.json``) holding ``title``, ``type``,
``nodes``, ``links`` and the caller's ``access`` level. Full saves replace
the node and link sets; positions-only saves merge by node id.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import GraphFormatError, GraphNotFoundError, ReadOnlyAccessError
from .journal import ChangeCount, log_operation
from .models import ACCESS_LEVELS, GRAPH_TYPES, Graph, Link, Node, ref_id

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclass
class LoadedGraph:
    graph_id: str
    document: dict[str, Any]
    access: str

    @property
    def read_only(self) -> bool:
        return self.access == "viewer"


def build_full_payload(graph: Graph) -> dict[str, Any]:
    """Nodes and links for a full save; layers only travel with hierarchy graphs."""
    return {
        "nodes": [n.to_dict(include_layer=graph.is_hierarchy) for n in graph.nodes],
        "links": [l.to_dict(include_weight=True) for l in graph.links],
    }


def build_positions_payload(graph: Graph) -> dict[str, Any]:
    """Minimal position delta: id, x, y and (hierarchy only) layer."""
    nodes = []
    for n in graph.nodes:
        entry: dict[str, Any] = {"id": n.id, "x": n.x, "y": n.y}
        if graph.is_hierarchy and n.has_layer:
            entry["layer"] = n.layer
        nodes.append(entry)
    return {"nodes": nodes}


def _clean_nodes(raw: Any) -> list[dict[str, Any]]:
    if not isinstance(raw, list):
        raise GraphFormatError("'nodes' must be a list")
    return [Node.from_dict(n).to_dict() for n in raw]


def _clean_links(raw: Any) -> list[dict[str, Any]]:
    if not isinstance(raw, list):
        raise GraphFormatError("'links' must be a list")
    return [Link.from_dict(l).to_dict() for l in raw]


def _link_keys(links: list[dict[str, Any]]) -> set[tuple[str, str]]:
    return {(ref_id(l.get("source")), ref_id(l.get("target"))) for l in links}


class GraphStore:
    """Directory of graph documents."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, graph_id: str) -> Path:
        if not _SAFE_ID.match(graph_id or ""):
            raise ValueError(f"invalid graph id: {graph_id!r}")
        return self.root / f"{graph_id}.json"

    def exists(self, graph_id: str) -> bool:
        return self.path_for(graph_id).is_file()

    def create(
        self,
        graph_id: str,
        *,
        title: str,
        graph_type: str = "force",
        access: str = "owner",
        graph: Graph | None = None,
    ) -> LoadedGraph:
        """Create a new document; empty graphs get the starter graph on first load."""
        path = self.path_for(graph_id)
        if path.exists():
            raise FileExistsError(f"graph already exists: {graph_id}")
        if graph_type not in GRAPH_TYPES:
            raise GraphFormatError(f"unknown graph type: {graph_type!r}")
        if access not in ACCESS_LEVELS:
            raise GraphFormatError(f"unknown access level: {access!r}")

        document: dict[str, Any] = {
            "title": title,
            "type": graph_type,
            "nodes": [],
            "links": [],
            "access": access,
        }
        if graph is not None:
            document.update(build_full_payload(graph))

        self._write(path, document)
        log_operation(
            self.root,
            "create",
            graph_id,
            created=ChangeCount(nodes=len(document["nodes"]), links=len(document["links"])),
            metadata={"type": graph_type},
        )
        return LoadedGraph(graph_id, document, access)

    def load(self, graph_id: str) -> LoadedGraph:
        path = self.path_for(graph_id)
        if not path.is_file():
            raise GraphNotFoundError(f"graph not found: {graph_id}")
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise GraphFormatError(f"{path.name}: invalid JSON ({e})") from e
        if not isinstance(document, dict):
            raise GraphFormatError(f"{path.name}: document must be an object")

        access = str(document.get("access") or "owner")
        if access not in ACCESS_LEVELS:
            raise GraphFormatError(f"{path.name}: unknown access level {access!r}")
        return LoadedGraph(graph_id, document, access)

    def save_full(self, graph_id: str, payload: dict[str, Any], *, title: str | None = None, graph_type: str | None = None) -> dict[str, Any]:
        """Replace the stored node and link sets wholesale."""
        loaded = self._load_writable(graph_id)
        document = loaded.document

        old_nodes = {str(n.get("id")) for n in document.get("nodes") or [] if isinstance(n, dict)}
        old_links = _link_keys([l for l in document.get("links") or [] if isinstance(l, dict)])

        nodes = _clean_nodes(payload.get("nodes", []))
        links = _clean_links(payload.get("links", []))
        document["nodes"] = nodes
        document["links"] = links
        if title is not None:
            document["title"] = title
        if graph_type is not None:
            if graph_type not in GRAPH_TYPES:
                raise GraphFormatError(f"unknown graph type: {graph_type!r}")
            document["type"] = graph_type

        new_nodes = {n["id"] for n in nodes}
        new_links = _link_keys(links)

        self._write(self.path_for(graph_id), document)
        log_operation(
            self.root,
            "save-full",
            graph_id,
            created=ChangeCount(nodes=len(new_nodes - old_nodes), links=len(new_links - old_links)),
            erased=ChangeCount(nodes=len(old_nodes - new_nodes), links=len(old_links - new_links)),
        )
        return document

    def save_positions(self, graph_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Merge node fields by id; unmentioned nodes and absent fields are kept."""
        loaded = self._load_writable(graph_id)
        document = loaded.document

        incoming = _clean_nodes(payload.get("nodes", []))
        by_id = {str(n.get("id")): n for n in document.get("nodes") or [] if isinstance(n, dict)}

        merged: list[dict[str, Any]] = []
        mentioned: set[str] = set()
        for node in incoming:
            mentioned.add(node["id"])
            merged.append({**by_id.get(node["id"], {}), **node})
        for node_id, old in by_id.items():
            if node_id not in mentioned:
                merged.append(old)

        document["nodes"] = merged
        self._write(self.path_for(graph_id), document)
        log_operation(
            self.root,
            "save-positions",
            graph_id,
            created=ChangeCount(nodes=len(mentioned - set(by_id))),
            metadata={"positions": len(incoming)},
        )
        return document

    def _load_writable(self, graph_id: str) -> LoadedGraph:
        loaded = self.load(graph_id)
        if loaded.read_only:
            raise ReadOnlyAccessError(f"viewer access to {graph_id} is read-only")
        return loaded

    def _write(self, path: Path, document: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
        logger.info("wrote %s", path)
