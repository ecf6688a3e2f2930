"""
Result log writer: appends found verses to a text file, word-wrapped so no
line runs past the configured width.

Each entry is followed by a blank line:

    Genesis 1:1 In the beginning God created the heaven and the earth.
    <blank>
"""
from __future__ import annotations

import textwrap
from pathlib import Path

DEFAULT_WIDTH = 80


def wrap_lines(line: str, width: int = DEFAULT_WIDTH) -> list[str]:
    """
    Break line at whitespace into pieces no longer than width.
    A line that already fits is returned untouched. Words are never split,
    so a single word wider than width gets a line of its own.
    """
    if width < 1:
        raise ValueError(f"width must be positive, got {width}")
    if len(line) <= width:
        return [line]
    return textwrap.wrap(
        line,
        width=width,
        break_long_words=False,
        break_on_hyphens=False,
    )


def print_wrapped(path: Path, line: str, width: int = DEFAULT_WIDTH) -> None:
    """Append one wrapped entry to path, creating the file if needed."""
    path = Path(path)
    lines = wrap_lines(line, width)
    with open(path, "a", encoding="utf-8") as f:
        for piece in lines:
            f.write(piece + "\n")
        f.write("\n")
