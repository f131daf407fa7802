"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from graphedit.editor.session import GraphSession
from graphedit.models import Graph, Link, Node
from graphedit.store import GraphStore


@pytest.fixture
def store(tmp_path: Path) -> GraphStore:
    """Empty store rooted in a temp directory."""
    return GraphStore(tmp_path / "graphs")


@pytest.fixture
def weighted_graph() -> Graph:
    """A -2-> B -3-> C plus a long A -10-> C shortcut."""
    return Graph(
        nodes=[Node("A"), Node("B"), Node("C")],
        links=[Link("A", "B", 2), Link("B", "C", 3), Link("A", "C", 10)],
        type="force",
        title="Weighted",
    )


@pytest.fixture
def force_session() -> GraphSession:
    """Laid-out starter graph (A -> B -> C) on a force canvas."""
    session = GraphSession(Graph.default(title="Demo"))
    session.layout.apply_layout_for_type()
    return session


@pytest.fixture
def hierarchy_session() -> GraphSession:
    """Starter graph laid out as a hierarchy: A on layer 1, B on 2, C on 3."""
    session = GraphSession(Graph.default(graph_type="hierarchy", title="Tree"))
    session.layout.apply_layout_for_type()
    return session
