"""
In-memory Bible data: books, chapters and verses as parsed from the flat-text
corpus, plus the lookups the resolver runs against them.

Hierarchy:
  Book     - title (as found in the corpus), chapters, abbreviations
  Chapter  - number (1-based), verses (index 0 is verse 1)
  verse    - plain string, leading verse digits removed and trimmed

Everything here is immutable once built; corpus_parser.py is the only place
that constructs Book and Chapter values.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# Relative to the working directory, so installed scripts read ./data
DATA_DIR = Path("data")

DEFAULT_BIBLE_PATH = DATA_DIR / "Bible.txt"
DEFAULT_ABBREVIATIONS_PATH = DATA_DIR / "Bible_Abbreviations.csv"


@dataclass(frozen=True)
class Chapter:
    number: int
    verses: tuple[str, ...] = ()


@dataclass(frozen=True)
class Book:
    title: str
    chapters: tuple[Chapter, ...] = ()
    abbreviations: tuple[str, ...] = ()

    def matches(self, name: str) -> bool:
        """True if name is this book's title or one of its abbreviations (any case)."""
        key = name.lower()
        if self.title.lower() == key:
            return True
        return any(abbr.lower() == key for abbr in self.abbreviations)


# ── Lookups ───────────────────────────────────────────────────────────────────

def book_by_title(books: list[Book], name: str) -> Book | None:
    """
    Return the first book whose title or abbreviation equals name,
    case-insensitively. Books are checked in corpus order, title before
    abbreviations for each book.
    """
    for book in books:
        if book.matches(name):
            return book
    return None


def chapter_by_number(book: Book, number: int) -> Chapter | None:
    if number < 1:
        return None
    for chapter in book.chapters:
        if chapter.number == number:
            return chapter
    return None


def verse_by_number(chapter: Chapter, number: int) -> str | None:
    if number < 1 or number > len(chapter.verses):
        return None
    return chapter.verses[number - 1]


# ── Display ───────────────────────────────────────────────────────────────────

def capitalize_word(word: str) -> str:
    """Lower-case word, then upper-case its first letter if that letter is ASCII."""
    word = word.lower()
    first = word[:1]
    if first.isascii():
        first = first.upper()
    return first + word[1:]


def format_title(title: str) -> str:
    """'SONG OF SOLOMON' -> 'Song Of Solomon'."""
    return " ".join(capitalize_word(w) for w in title.split())


def corpus_stats(books: list[Book]) -> dict[str, int]:
    chapters = [ch for b in books for ch in b.chapters]
    return {
        "books": len(books),
        "chapters": len(chapters),
        "verses": sum(len(ch.verses) for ch in chapters),
    }
