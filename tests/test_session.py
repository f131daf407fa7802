import pytest

from graphedit.config import Settings
from graphedit.editor.drag import DragGesture
from graphedit.editor.session import GraphSession
from graphedit.errors import GraphFormatError
from graphedit.editor import ops


def test_load_empty_document_uses_starter_graph() -> None:
    session = GraphSession.load({"title": "New", "type": "circle", "nodes": [], "links": []})
    graph = session.graph
    assert graph.node_ids() == ["A", "B", "C"]
    assert graph.type == "circle"
    assert graph.title == "New"
    assert all(n.has_position for n in graph.nodes)
    assert not session.history.can_undo


def test_load_normalizes_and_dedupes_links() -> None:
    document = {
        "nodes": [{"id": "A", "x": 1, "y": 2}, {"id": "B", "x": 3, "y": 4}],
        "links": [
            {"source": {"id": "A"}, "target": "B", "weight": 1},
            {"source": "A", "target": {"id": "B"}, "weight": 2},
        ],
    }
    session = GraphSession.load(document)
    assert [(l.source, l.target, l.weight) for l in session.graph.links] == [("A", "B", 2.0)]
    # saved force positions are kept
    assert (session.graph.nodes[0].x, session.graph.nodes[0].y) == (1.0, 2.0)


def test_load_uses_settings_canvas_and_access() -> None:
    settings = Settings(canvas_width=400, canvas_height=300, history_limit=3)
    session = GraphSession.load({"access": "viewer", "type": "hierarchy"}, settings=settings)
    assert session.read_only
    assert session.layout.width == 400
    assert session.history.limit == 3
    assert session.graph.nodes[0].x == 200.0


def test_unknown_access_level_is_rejected() -> None:
    with pytest.raises(GraphFormatError):
        GraphSession(access="admin")


def test_listeners_and_selection_pruning(force_session: GraphSession) -> None:
    calls: list[str] = []
    force_session.add_listener(lambda: calls.append("draw"))
    force_session.select(["A", "B"])
    ops.delete_node(force_session, "B")
    assert force_session.selected == {"A"}

    force_session.undo()
    assert force_session.graph.node_ids() == ["A", "B", "C"]
    assert len(calls) == 3


def test_drag_single_node_is_one_history_entry(force_session: GraphSession) -> None:
    node = force_session.graph.get_node("A")
    drag = DragGesture.begin(force_session, "A", node.x, node.y)
    for step in range(5):
        drag.move(100 + step, 50)
    assert drag.end() == []

    assert (node.x, node.y) == (104, 50)
    assert force_session.selected == {"A"}
    assert force_session.history.reasons() == ["drag move (group)"]


def test_drag_moves_whole_selection(force_session: GraphSession) -> None:
    graph = force_session.graph
    a, b = graph.get_node("A"), graph.get_node("B")
    offset = (b.x - a.x, b.y - a.y)
    force_session.select(["A", "B"])

    drag = DragGesture.begin(force_session, "A", a.x, a.y)
    drag.move(0, 0)
    drag.end()

    assert (a.x, a.y) == (0, 0)
    assert (b.x, b.y) == pytest.approx(offset)


def test_drag_without_move_changes_nothing(force_session: GraphSession) -> None:
    drag = DragGesture.begin(force_session, "A", 0, 0)
    assert drag.end() == []
    assert not force_session.history.can_undo


def test_viewer_and_unknown_node_cannot_drag() -> None:
    viewer = GraphSession.load({}, access="viewer")
    assert DragGesture.begin(viewer, "A", 0, 0) is None
    owner = GraphSession.load({})
    assert DragGesture.begin(owner, "ghost", 0, 0) is None


def test_hierarchy_drop_snaps_to_nearest_row(hierarchy_session: GraphSession) -> None:
    ops.add_node(hierarchy_session, "D", layer=1)
    node = hierarchy_session.graph.get_node("D")

    drag = DragGesture.begin(hierarchy_session, "D", node.x, node.y)
    drag.move(300, 330)
    assert drag.end() == []
    assert (node.x, node.y, node.layer) == (300, 320.0, 3)


def test_hierarchy_drop_reverts_invalid_layer(hierarchy_session: GraphSession) -> None:
    node = hierarchy_session.graph.get_node("C")
    drag = DragGesture.begin(hierarchy_session, "C", node.x, node.y)
    drag.move(node.x, 50)
    rejected = drag.end()

    assert rejected == ["B -> C: Edges must go downward (source layer < target layer)."]
    assert (node.layer, node.y) == (3, 320.0)


def test_drag_undo_restores_start(hierarchy_session: GraphSession) -> None:
    before = hierarchy_session.graph.clone()
    node = hierarchy_session.graph.get_node("A")
    drag = DragGesture.begin(hierarchy_session, "A", node.x, node.y)
    drag.move(10, 10)
    drag.end()

    hierarchy_session.undo()
    assert hierarchy_session.graph == before
