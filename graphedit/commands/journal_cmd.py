"""Show the store's change journal."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from ..journal import format_journal_entry, read_journal


def run_journal(store_root: Path, last: int | None = None) -> int:
    console = Console(stderr=True)

    entries = read_journal(store_root, last_n=last)
    if not entries:
        console.print("Journal is empty.", style="yellow")
        return 0

    for entry in entries:
        print(format_journal_entry(entry))
        print()
    return 0
