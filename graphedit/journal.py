"""
Change journal for the graph store.

Every write to the store appends one JSON Lines record describing what the
write created and erased (node and link counts) so that saves can be
reviewed after the fact with ``graphedit journal``.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class ChangeCount:
    """Number of nodes and links touched by a write."""
    nodes: int = 0
    links: int = 0


@dataclass
class JournalEntry:
    """A single journal entry."""
    timestamp: str
    operation: str
    graph_id: str
    created: ChangeCount
    erased: ChangeCount
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "operation": self.operation,
            "graph_id": self.graph_id,
            "created": asdict(self.created),
            "erased": asdict(self.erased),
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "JournalEntry":
        return cls(
            timestamp=data["timestamp"],
            operation=data["operation"],
            graph_id=data.get("graph_id", ""),
            created=ChangeCount(**data.get("created", {})),
            erased=ChangeCount(**data.get("erased", {})),
            metadata=data.get("metadata", {}),
        )


def get_journal_path(store_root: Path) -> Path:
    return store_root / ".graphedit" / "journal.log"


def log_operation(
    store_root: Path,
    operation: str,
    graph_id: str,
    created: ChangeCount | None = None,
    erased: ChangeCount | None = None,
    metadata: dict[str, Any] | None = None,
) -> JournalEntry:
    """
    Append an operation to the journal.

    Args:
        store_root: Directory holding the graph documents
        operation: Name of the write (e.g., "save-full", "save-positions")
        graph_id: Graph the write applied to
        created: Nodes/links that did not exist before the write
        erased: Nodes/links the write removed
        metadata: Additional context

    Returns:
        The appended entry
    """
    entry = JournalEntry(
        timestamp=datetime.now(timezone.utc).isoformat(),
        operation=operation,
        graph_id=graph_id,
        created=created or ChangeCount(),
        erased=erased or ChangeCount(),
        metadata=metadata or {},
    )

    log_path = get_journal_path(store_root)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(entry.to_dict()) + "\n")

    return entry


def read_journal(store_root: Path, last_n: int | None = None) -> list[JournalEntry]:
    """Read journal entries, oldest first; only the last `last_n` when given."""
    log_path = get_journal_path(store_root)
    if not log_path.exists():
        return []

    entries = []
    with log_path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                entries.append(JournalEntry.from_dict(json.loads(line)))
            except (json.JSONDecodeError, KeyError, TypeError):
                logger.warning("skipping malformed journal line in %s", log_path)
                continue

    if last_n is not None:
        return entries[-last_n:]
    return entries


def format_journal_entry(entry: JournalEntry) -> str:
    """Format an entry for human-readable display."""
    lines = [f"[{entry.timestamp}] {entry.operation} {entry.graph_id}"]

    def counts(c: ChangeCount) -> str:
        parts = []
        if c.nodes:
            parts.append(f"{c.nodes} nodes")
        if c.links:
            parts.append(f"{c.links} links")
        return ", ".join(parts)

    if entry.created.nodes or entry.created.links:
        lines.append(f"  Created: {counts(entry.created)}")
    if entry.erased.nodes or entry.erased.links:
        lines.append(f"  Erased: {counts(entry.erased)}")
    for key, value in entry.metadata.items():
        lines.append(f"  {key}: {value}")

    return "\n".join(lines)
