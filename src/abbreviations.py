"""
Book abbreviation loader.

The mapping file is comma-delimited, one alias per row:

    abbreviation,canonical_title[,anything else...]

Titles are matched case-insensitively after trimming, so "Gen,Genesis"
attaches "Gen" to a corpus book titled "GENESIS".
"""
from __future__ import annotations

import csv
from pathlib import Path


def _read_rows(path: Path):
    """Yield (abbreviation, title) pairs, skipping empty and short rows."""
    with open(path, encoding="utf-8", newline="") as f:
        for row in csv.reader(f):
            if len(row) < 2:
                continue
            abbr, title = row[0].strip(), row[1].strip()
            if not abbr:
                continue
            yield abbr, title


class AbbreviationTable:
    """title (lower-cased) -> abbreviations, built from a single read of the file."""

    def __init__(self, mapping: dict[str, list[str]] | None = None):
        self._by_title: dict[str, list[str]] = mapping or {}

    @classmethod
    def from_file(cls, path: Path) -> "AbbreviationTable":
        mapping: dict[str, list[str]] = {}
        for abbr, title in _read_rows(path):
            mapping.setdefault(title.lower(), []).append(abbr)
        return cls(mapping)

    def for_title(self, title: str) -> list[str]:
        return list(self._by_title.get(title.strip().lower(), []))

    def __len__(self) -> int:
        return sum(len(v) for v in self._by_title.values())


def load_abbreviation_table(path: Path) -> AbbreviationTable:
    return AbbreviationTable.from_file(path)
