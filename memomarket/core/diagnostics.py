from __future__ import annotations

from typing import List, Tuple


class DropReport:
    """
    Collects items that an operation skipped instead of failing.

    Listing skips unreadable pack files and imports drop incomplete array
    elements. Neither changes its return value when a report is passed; the
    report only lets callers and tests see what was left out.
    """

    def __init__(self) -> None:
        self.entries: List[Tuple[str, str]] = []

    def record(self, source: str, reason: str) -> None:
        self.entries.append((source, reason))

    @property
    def count(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"DropReport(count={self.count})"
