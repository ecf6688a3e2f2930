"""
Reference resolver: "<book or abbreviation> <chapter>:<verse>" -> verse text.

Every query ends in exactly one Resolution. Misses are values, not exceptions,
so callers branch on the variant (or Resolution.found) instead of comparing
message strings.
"""
from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from bible_data import (
    Book,
    DEFAULT_ABBREVIATIONS_PATH,
    DEFAULT_BIBLE_PATH,
    book_by_title,
    chapter_by_number,
    corpus_stats,
    format_title,
    verse_by_number,
)
from corpus_parser import load_corpus

_INT_RE = re.compile(r"[+-]?[0-9]+")


# ── Results ───────────────────────────────────────────────────────────────────

class Resolution:
    label = ""
    found = False

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class Found(Resolution):
    book: str
    chapter: int
    verse: int
    text: str
    found = True

    @property
    def label(self) -> str:
        return f"{format_title(self.book)} {self.chapter}:{self.verse} {self.text}"


class BookNotFound(Resolution):
    label = "Book not found"


class ChapterNotFound(Resolution):
    label = "Chapter not found"


class VerseNotFound(Resolution):
    label = "Verse not found"


class InvalidQuery(Resolution):
    label = "Invalid lookup"


BOOK_NOT_FOUND = BookNotFound()
CHAPTER_NOT_FOUND = ChapterNotFound()
VERSE_NOT_FOUND = VerseNotFound()
INVALID_QUERY = InvalidQuery()


# ── Query parsing ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Reference:
    book: str
    chapter: int
    verse: int


def parse_reference(query: str) -> Reference | None:
    """
    Split 'Song of Solomon 6:7' into ('Song of Solomon', 6, 7).
    Returns None when the query is not of that shape.
    """
    tokens = query.split()
    if len(tokens) < 2:
        return None
    parts = tokens[-1].split(":")
    if len(parts) != 2:
        return None
    chapter, verse = parts
    if not _INT_RE.fullmatch(chapter) or not _INT_RE.fullmatch(verse):
        return None
    return Reference(" ".join(tokens[:-1]), int(chapter), int(verse))


def lookup(books: list[Book], ref: Reference) -> Resolution:
    book = book_by_title(books, ref.book)
    if book is None:
        return BOOK_NOT_FOUND
    chapter = chapter_by_number(book, ref.chapter)
    if chapter is None:
        return CHAPTER_NOT_FOUND
    text = verse_by_number(chapter, ref.verse)
    if text is None:
        return VERSE_NOT_FOUND
    return Found(book.title, chapter.number, ref.verse, text)


def resolve(books: list[Book], query: str) -> Resolution:
    ref = parse_reference(query)
    if ref is None:
        return INVALID_QUERY
    return lookup(books, ref)


# ── Facade ────────────────────────────────────────────────────────────────────

class Bible:
    """A loaded corpus. Read-only after construction."""

    def __init__(self, books: list[Book]):
        self.books = list(books)

    @classmethod
    def load(
        cls,
        bible_path: Path = DEFAULT_BIBLE_PATH,
        abbreviations_path: Path | None = DEFAULT_ABBREVIATIONS_PATH,
        verbose: bool = False,
    ) -> "Bible":
        return cls(load_corpus(bible_path, abbreviations_path, verbose=verbose))

    def search(self, query: str) -> Resolution:
        return resolve(self.books, query)

    def stats(self) -> dict[str, int]:
        return corpus_stats(self.books)

    def __len__(self) -> int:
        return len(self.books)
