import json

from graphedit.analysis.paths import shortest_path
from graphedit.editor.session import GraphSession
from graphedit.models import Graph, Link, Node
from graphedit.render.export import export_filename, export_graph, slugify, to_csv


def _csv_graph(graph_type: str = "force") -> Graph:
    return Graph(
        nodes=[
            Node("n10", label="Ten, big"),
            Node("n2", description="line1\nline2", x=480.0, y=320.5),
        ],
        links=[Link("n2", "n10", 2.5)],
        type=graph_type,
        title="My Graph!",
    )


def test_csv_layout_and_cleaning() -> None:
    assert to_csv(_csv_graph()).splitlines() == [
        "record,id,label,description,x,y,source,target,weight,type",
        "meta,,,,,,,,,force",
        "node,n2,,line1 line2,480,320.5,,,,",
        "node,n10,Ten  big,,,,,,,",
        "edge,,,,,,n2,n10,2.5,",
    ]


def test_csv_weights_only_for_force() -> None:
    lines = to_csv(_csv_graph("circle")).splitlines()
    assert lines[1] == "meta,,,,,,,,,circle"
    assert lines[-1] == "edge,,,,,,n2,n10,,"


def test_filenames_from_title() -> None:
    assert slugify("My Graph!") == "my-graph"
    assert slugify("") == "graph"
    assert export_filename(_csv_graph(), "csv") == "my-graph_single.csv"
    assert export_filename(Graph(title="!!!"), "html") == "graph.html"


def test_json_export_is_full_payload_with_type_and_title(hierarchy_session: GraphSession) -> None:
    data = json.loads(export_graph(hierarchy_session.graph, "json"))
    assert data["title"] == "Tree"
    assert data["type"] == "hierarchy"
    assert data["nodes"][0] == {"id": "A", "x": 480.0, "y": 40.0, "layer": 1}
    assert data["links"] == [{"source": "A", "target": "B"}, {"source": "B", "target": "C"}]


def test_svg_highlights_path(weighted_graph: Graph) -> None:
    session = GraphSession(weighted_graph)
    session.layout.apply_layout_for_type()

    plain = export_graph(session.graph, "svg")
    assert plain.startswith("<svg")
    assert 'marker-end="url(#arrow)"' in plain
    assert "url(#arrow-hl)" not in plain

    lit = export_graph(session.graph, "svg", path=shortest_path(session.graph, "C", "A"))
    assert lit.count('marker-end="url(#arrow-hl)"') == 2


def test_svg_escapes_labels() -> None:
    graph = Graph(nodes=[Node("A", label="<b>&</b>", x=0.0, y=0.0)])
    svg = export_graph(graph, "svg")
    assert "&lt;b&gt;&amp;&lt;/b&gt;" in svg


def test_html_wraps_svg_with_layer_rows(hierarchy_session: GraphSession) -> None:
    page = export_graph(hierarchy_session.graph, "html", layout=hierarchy_session.layout)
    assert page.startswith("<!doctype html>")
    assert "<title>Tree</title>" in page
    assert ">L3</text>" in page
    assert "<svg" in page


def test_json_export_carries_weights_only_for_force(weighted_graph: Graph) -> None:
    data = json.loads(export_graph(weighted_graph, "json"))
    assert data["links"][0] == {"source": "A", "target": "B", "weight": 2}

    weighted_graph.type = "circle"
    data = json.loads(export_graph(weighted_graph, "json"))
    assert data["links"][0] == {"source": "A", "target": "B"}
