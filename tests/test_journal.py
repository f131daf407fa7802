from pathlib import Path

from graphedit.journal import (
    ChangeCount,
    format_journal_entry,
    get_journal_path,
    log_operation,
    read_journal,
)


def test_log_and_read_back(tmp_path: Path) -> None:
    log_operation(tmp_path, "create", "one", created=ChangeCount(nodes=3, links=2))
    log_operation(tmp_path, "save-full", "two", erased=ChangeCount(links=1), metadata={"note": "x"})

    entries = read_journal(tmp_path)
    assert [e.graph_id for e in entries] == ["one", "two"]
    assert entries[0].created == ChangeCount(nodes=3, links=2)
    assert [e.graph_id for e in read_journal(tmp_path, last_n=1)] == ["two"]


def test_malformed_lines_are_skipped(tmp_path: Path) -> None:
    log_operation(tmp_path, "create", "one")
    with get_journal_path(tmp_path).open("a", encoding="utf-8") as f:
        f.write("not json\n\n")
    log_operation(tmp_path, "create", "two")

    assert [e.graph_id for e in read_journal(tmp_path)] == ["one", "two"]


def test_missing_journal_is_empty(tmp_path: Path) -> None:
    assert read_journal(tmp_path) == []


def test_format_entry(tmp_path: Path) -> None:
    entry = log_operation(
        tmp_path,
        "save-full",
        "demo",
        created=ChangeCount(nodes=2),
        erased=ChangeCount(nodes=1, links=3),
        metadata={"positions": 4},
    )
    text = format_journal_entry(entry)
    assert text.splitlines()[0].endswith("save-full demo")
    assert "  Created: 2 nodes" in text
    assert "  Erased: 1 nodes, 3 links" in text
    assert "  positions: 4" in text
