import json
from pathlib import Path

import pytest

from graphedit.editor.session import GraphSession
from graphedit.errors import GraphFormatError, GraphNotFoundError, ReadOnlyAccessError
from graphedit.journal import read_journal
from graphedit.models import Graph
from graphedit.store import GraphStore, build_full_payload, build_positions_payload


def test_create_and_load_roundtrip(store: GraphStore) -> None:
    store.create("demo", title="Demo", graph_type="grid")
    loaded = store.load("demo")
    assert loaded.access == "owner"
    assert loaded.document["title"] == "Demo"
    assert loaded.document["type"] == "grid"
    assert store.exists("demo")

    with pytest.raises(FileExistsError):
        store.create("demo", title="Again")


def test_invalid_ids_and_missing_graphs(store: GraphStore) -> None:
    with pytest.raises(ValueError):
        store.path_for("../escape")
    with pytest.raises(GraphNotFoundError):
        store.load("missing")


def test_load_rejects_bad_json(store: GraphStore) -> None:
    store.root.mkdir(parents=True)
    (store.root / "broken.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(GraphFormatError):
        store.load("broken")


def test_save_full_replaces_nodes_and_links(store: GraphStore) -> None:
    store.create("demo", title="Demo", graph=Graph.default())
    session = GraphSession.load(store.load("demo").document)
    session.graph.nodes.pop()
    session.graph.links.pop()

    document = store.save_full("demo", build_full_payload(session.graph))
    assert [n["id"] for n in document["nodes"]] == ["A", "B"]
    assert document["links"] == [{"source": "A", "target": "B"}]

    entry = read_journal(store.root)[-1]
    assert entry.operation == "save-full"
    assert (entry.erased.nodes, entry.erased.links) == (1, 1)


def test_save_positions_merges_by_id(store: GraphStore) -> None:
    store.create("demo", title="Demo")
    store.save_full(
        "demo",
        {
            "nodes": [
                {"id": "A", "label": "Alpha", "description": "first", "x": 1, "y": 1},
                {"id": "B", "x": 2, "y": 2},
            ],
            "links": [],
        },
    )

    document = store.save_positions("demo", {"nodes": [{"id": "A", "x": 50, "y": 60}]})
    by_id = {n["id"]: n for n in document["nodes"]}
    assert by_id["A"] == {"id": "A", "label": "Alpha", "description": "first", "x": 50, "y": 60}
    assert by_id["B"] == {"id": "B", "x": 2, "y": 2}

    on_disk = json.loads((store.root / "demo.json").read_text(encoding="utf-8"))
    assert on_disk["nodes"] == document["nodes"]


def test_viewer_writes_are_refused(store: GraphStore) -> None:
    store.create("shared", title="Shared", access="viewer")
    with pytest.raises(ReadOnlyAccessError):
        store.save_full("shared", {"nodes": [], "links": []})
    with pytest.raises(ReadOnlyAccessError):
        store.save_positions("shared", {"nodes": []})


def test_positions_payload_layers_only_for_hierarchy(hierarchy_session: GraphSession) -> None:
    payload = build_positions_payload(hierarchy_session.graph)
    assert payload["nodes"][0] == {"id": "A", "x": 480.0, "y": 40.0, "layer": 1}

    hierarchy_session.graph.type = "grid"
    assert "layer" not in build_positions_payload(hierarchy_session.graph)["nodes"][0]
    assert "layer" not in build_full_payload(hierarchy_session.graph)["nodes"][0]


def test_create_is_journaled(tmp_path: Path) -> None:
    store = GraphStore(tmp_path)
    store.create("demo", title="Demo", graph=Graph.default())
    [entry] = read_journal(tmp_path)
    assert entry.operation == "create"
    assert (entry.created.nodes, entry.created.links) == (3, 2)
    assert entry.metadata == {"type": "force"}
