"""End-to-end tests for the graphedit CLI."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from graphedit.cli import cli

runner = CliRunner()


@pytest.fixture
def store_dir(tmp_path: Path, monkeypatch) -> Path:
    """Store directory holding a created 'demo' graph; cwd has no config file."""
    monkeypatch.chdir(tmp_path)
    root = tmp_path / "graphs"
    result = runner.invoke(cli, ["--store", str(root), "create", "demo", "--title", "Demo"])
    assert result.exit_code == 0, result.output
    return root


def _run(store_dir: Path, *args: str):
    return runner.invoke(cli, ["--store", str(store_dir), *args])


def _document(store_dir: Path) -> dict:
    return json.loads((store_dir / "demo.json").read_text(encoding="utf-8"))


def test_create_writes_laid_out_starter_graph(store_dir: Path) -> None:
    doc = _document(store_dir)
    assert [n["id"] for n in doc["nodes"]] == ["A", "B", "C"]
    assert all("x" in n and "y" in n for n in doc["nodes"])
    assert doc["access"] == "owner"

    again = _run(store_dir, "create", "demo")
    assert again.exit_code == 1


def test_show_json(store_dir: Path) -> None:
    result = _run(store_dir, "show", "demo", "--format", "json")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["title"] == "Demo"
    assert data["type"] == "force"
    assert data["access"] == "owner"


def test_show_markdown_and_rich(store_dir: Path) -> None:
    md = _run(store_dir, "show", "demo", "--format", "md")
    assert md.exit_code == 0
    assert "# Demo" in md.output
    assert "| `A` | `B` |" in md.output

    rich = _run(store_dir, "show", "demo")
    assert rich.exit_code == 0
    assert "Nodes" in rich.output


def test_missing_graph_fails(store_dir: Path) -> None:
    result = _run(store_dir, "show", "nope")
    assert result.exit_code == 1


def test_node_and_edge_mutations_are_saved(store_dir: Path) -> None:
    assert _run(store_dir, "add-node", "demo", "D", "--label", "Dee").exit_code == 0
    assert _run(store_dir, "add-edge", "demo", "C", "D", "--weight", "4").exit_code == 0
    assert _run(store_dir, "edit-node", "demo", "A", "--id", "Start").exit_code == 0
    assert _run(store_dir, "remove-edge", "demo", "B", "C").exit_code == 0

    doc = _document(store_dir)
    assert [n["id"] for n in doc["nodes"]] == ["Start", "B", "C", "D"]
    assert doc["links"] == [
        {"source": "Start", "target": "B"},
        {"source": "C", "target": "D", "weight": 4.0},
    ]

    assert _run(store_dir, "delete-node", "demo", "C").exit_code == 0
    assert _document(store_dir)["links"] == [{"source": "Start", "target": "B"}]


def test_validation_failures_exit_1(store_dir: Path) -> None:
    assert _run(store_dir, "add-node", "demo", "A").exit_code == 1
    assert _run(store_dir, "add-edge", "demo", "A", "A").exit_code == 1
    assert _run(store_dir, "add-edge", "demo", "A", "C", "--weight", "heavy").exit_code == 1
    assert _run(store_dir, "remove-edge", "demo", "C", "A").exit_code == 1


def test_viewer_mutations_exit_2(store_dir: Path) -> None:
    path = store_dir / "demo.json"
    doc = _document(store_dir)
    doc["access"] = "viewer"
    path.write_text(json.dumps(doc), encoding="utf-8")

    assert _run(store_dir, "add-node", "demo", "D").exit_code == 2
    assert _run(store_dir, "layout", "demo").exit_code == 2
    assert _run(store_dir, "path", "demo", "A", "C").exit_code == 0


def test_layout_switches_type(store_dir: Path) -> None:
    result = _run(store_dir, "layout", "demo", "--type", "hierarchy")
    assert result.exit_code == 0

    doc = _document(store_dir)
    assert doc["type"] == "hierarchy"
    assert [n["layer"] for n in doc["nodes"]] == [1, 2, 3]
    assert [n["y"] for n in doc["nodes"]] == [40.0, 180.0, 320.0]


def test_edit_node_layer_warning_keeps_other_edits(store_dir: Path) -> None:
    _run(store_dir, "layout", "demo", "--type", "hierarchy")
    result = _run(store_dir, "edit-node", "demo", "B", "--label", "bee", "--layer", "3")
    assert result.exit_code == 0

    b = _document(store_dir)["nodes"][1]
    assert b["label"] == "bee"
    assert b["layer"] == 2


def test_path_json(store_dir: Path) -> None:
    result = _run(store_dir, "path", "demo", "C", "A", "--json")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["ok"] is True
    assert data["total"] == 2
    assert data["nodes"] == ["C", "B", "A"]

    directed = _run(store_dir, "path", "demo", "C", "A", "--directed")
    assert directed.exit_code == 1


def test_degree_and_pagerank_json(store_dir: Path) -> None:
    degree = _run(store_dir, "degree", "demo", "--mode", "in", "--json")
    assert json.loads(degree.stdout) == {"A": 0, "B": 1, "C": 1}

    pr = _run(store_dir, "pagerank", "demo", "--json")
    scores = json.loads(pr.stdout)
    assert sum(scores.values()) == pytest.approx(1.0)

    assert _run(store_dir, "pagerank", "demo", "--damping", "1.5").exit_code == 1


def test_search(store_dir: Path) -> None:
    _run(store_dir, "edit-node", "demo", "C", "--label", "Alpha Centauri")
    result = _run(store_dir, "search", "demo", "alpha", "--in", "label")
    assert result.exit_code == 0
    assert result.stdout.split() == ["C"]


def test_export_csv_to_directory(store_dir: Path, tmp_path: Path) -> None:
    out_dir = tmp_path / "exports"
    out_dir.mkdir()
    result = _run(store_dir, "export", "demo", "--out", str(out_dir))
    assert result.exit_code == 0

    lines = (out_dir / "demo_single.csv").read_text(encoding="utf-8").splitlines()
    assert lines[0] == "record,id,label,description,x,y,source,target,weight,type"
    assert lines[1] == "meta,,,,,,,,,force"
    assert len(lines) == 1 + 1 + 3 + 2


def test_export_html_with_highlight(store_dir: Path, tmp_path: Path) -> None:
    out = tmp_path / "demo.html"
    result = _run(store_dir, "export", "demo", "--format", "html", "--highlight-path", "A", "C", "--out", str(out))
    assert result.exit_code == 0
    assert out.read_text(encoding="utf-8").count("url(#arrow-hl)") == 2


def test_journal_lists_writes(store_dir: Path) -> None:
    _run(store_dir, "add-node", "demo", "D")
    result = _run(store_dir, "journal", "--last", "1")
    assert result.exit_code == 0
    assert "save-full demo" in result.stdout
    assert "create demo" not in result.stdout


def test_config_supplies_store_dir(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "graphedit.toml").write_text('[store]\ndir = "from-config"\n', encoding="utf-8")

    result = runner.invoke(cli, ["create", "cfg", "--type", "grid"])
    assert result.exit_code == 0
    assert (tmp_path / "from-config" / "cfg.json").is_file()


def test_invalid_config_is_reported(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "graphedit.toml").write_text("[analytics]\ndamping = 3\n", encoding="utf-8")
    result = runner.invoke(cli, ["journal"])
    assert result.exit_code != 0
    assert "analytics.damping" in result.output
