import pytest

from graphedit.errors import GraphFormatError
from graphedit.models import Graph, Link, Node, coerce_layer, coerce_weight, finite_number, ref_id


def test_finite_number_rejects_bools_and_nan() -> None:
    assert finite_number(3) == 3.0
    assert finite_number(True) is None
    assert finite_number(float("nan")) is None
    assert finite_number("4") is None


def test_coerce_layer_floors_and_clamps() -> None:
    assert coerce_layer(2.7) == 2
    assert coerce_layer(0) == 1
    assert coerce_layer("x") is None


def test_coerce_weight_accepts_numeric_strings() -> None:
    assert coerce_weight(" 2.5 ") == 2.5
    assert coerce_weight("") is None
    assert coerce_weight("abc") is None
    assert coerce_weight(float("inf")) is None


def test_ref_id_accepts_nodes_and_mappings() -> None:
    assert ref_id(Node("A")) == "A"
    assert ref_id({"id": 7}) == "7"
    assert ref_id("B") == "B"
    assert ref_id(None) is None


def test_link_from_dict_normalizes_object_endpoints() -> None:
    link = Link.from_dict({"source": {"id": "A", "x": 1}, "target": "B", "weight": "3"})
    assert link.key == ("A", "B")
    assert link.weight == 3.0


def test_graph_from_dict_rejects_unknown_type() -> None:
    with pytest.raises(GraphFormatError):
        Graph.from_dict({"type": "spiral", "nodes": [], "links": []})


def test_graph_from_dict_requires_node_ids() -> None:
    with pytest.raises(GraphFormatError):
        Graph.from_dict({"nodes": [{"label": "no id"}]})


def test_to_dict_includes_layer_only_for_hierarchy() -> None:
    graph = Graph(nodes=[Node("A", layer=2)], links=[Link("A", "A", 4)], type="circle")
    data = graph.to_dict()
    assert "layer" not in data["nodes"][0]
    assert "weight" not in data["links"][0]

    graph.type = "hierarchy"
    assert graph.to_dict()["nodes"][0]["layer"] == 2


def test_default_graph_is_a_to_b_to_c() -> None:
    graph = Graph.default(graph_type="grid", title="T")
    assert graph.node_ids() == ["A", "B", "C"]
    assert [l.key for l in graph.links] == [("A", "B"), ("B", "C")]
    assert graph.type == "grid"
    assert graph.title == "T"


def test_clone_is_structurally_independent() -> None:
    graph = Graph.default()
    copy = graph.clone()
    copy.nodes[0].label = "changed"
    copy.links.append(Link("C", "A"))
    assert graph.nodes[0].label is None
    assert len(graph.links) == 2
