"""
Corpus parser: turns the flat-text Bible into Book / Chapter / verse values.

Usage:
  python src/corpus_parser.py                         # parse data/Bible.txt, print stats
  python src/corpus_parser.py --bible other.txt.zst   # parse a (compressed) corpus
  python src/corpus_parser.py --books                 # also list every book

Input layout (one item per line, surrounding whitespace ignored):

  THE BOOK OF GENESIS          - starts a new book, title is the rest of the line
  CHAPTER 1  /  PSALM 23       - starts a new chapter with that number
  1 In the beginning God ...   - a verse; leading digits are stripped

Verse numbers are implicit: the Nth verse line in a chapter is verse N.
Only lines starting with 1-9 are verses, so "0 ..." lines are ignored along
with any other prose (titles, colophons, blank lines).
"""
from __future__ import annotations

import argparse
import re
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Iterable, Sequence

import zstandard

sys.path.insert(0, str(Path(__file__).parent))

from abbreviations import load_abbreviation_table
from bible_data import Book, Chapter, DEFAULT_ABBREVIATIONS_PATH, DEFAULT_BIBLE_PATH, corpus_stats

BOOK_MARKER = "THE BOOK OF "
CHAPTER_MARKERS = ("CHAPTER ", "PSALM ")

_VERSE_START = frozenset("123456789")
_LEADING_DIGITS_RE = re.compile(r"^[0-9]+")
_NUMBER_RE = re.compile(r"\+?[0-9]+")

AbbreviationLookup = Callable[[str], Sequence[str]]


class CorpusFormatError(ValueError):
    """A structural line in the corpus could not be parsed."""

    def __init__(self, lineno: int, line: str, reason: str):
        self.lineno = lineno
        self.line = line
        super().__init__(f"line {lineno}: {reason}: {line!r}")


# ── Parse state ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ChapterBuilder:
    number: int
    verses: tuple[str, ...] = ()

    def add_verse(self, verse: str) -> "ChapterBuilder":
        return replace(self, verses=self.verses + (verse,))

    def build(self) -> Chapter:
        return Chapter(self.number, self.verses)


@dataclass(frozen=True)
class BookBuilder:
    title: str
    abbreviations: tuple[str, ...] = ()
    chapters: tuple[Chapter, ...] = ()

    def add_chapter(self, chapter: Chapter) -> "BookBuilder":
        return replace(self, chapters=self.chapters + (chapter,))

    def build(self) -> Book:
        return Book(self.title, self.chapters, self.abbreviations)


@dataclass(frozen=True)
class ParseState:
    """
    book is None until the first book header (or a stray chapter) is seen.
    chapter is None when no chapter is open - the "not yet started" case,
    which a "CHAPTER 0" header also leaves the parser in.
    """
    book: BookBuilder | None = None
    chapter: ChapterBuilder | None = None


def _no_abbreviations(title: str) -> Sequence[str]:
    return ()


def _close_chapter(state: ParseState) -> ParseState:
    """Move the open chapter, if any, into the current book."""
    if state.chapter is None:
        return state
    # Chapters before any book header land in an untitled book.
    book = state.book or BookBuilder(title="")
    return ParseState(book=book.add_chapter(state.chapter.build()), chapter=None)


def _chapter_number(line: str, marker: str, lineno: int) -> int:
    tokens = line[len(marker):].split()
    if not tokens or not _NUMBER_RE.fullmatch(tokens[0]):
        raise CorpusFormatError(lineno, line, "malformed chapter number")
    return int(tokens[0])


def step(
    state: ParseState,
    line: str,
    lineno: int,
    abbreviations: AbbreviationLookup = _no_abbreviations,
) -> tuple[ParseState, Book | None]:
    """
    Feed one trimmed line through the parser.
    Returns the new state and the book completed by this line, if any.
    """
    if line.startswith(BOOK_MARKER):
        state = _close_chapter(state)
        finished = None
        if state.book is not None and state.book.chapters:
            finished = state.book.build()
        title = line[len(BOOK_MARKER):].strip()
        book = BookBuilder(title=title, abbreviations=tuple(abbreviations(title)))
        return ParseState(book=book), finished

    for marker in CHAPTER_MARKERS:
        if line.startswith(marker):
            state = _close_chapter(state)
            number = _chapter_number(line, marker, lineno)
            if number > 0:
                state = replace(state, chapter=ChapterBuilder(number))
            break

    if not line:
        return state, None

    if line[0] in _VERSE_START and state.chapter is not None:
        verse = _LEADING_DIGITS_RE.sub("", line, count=1).strip()
        state = replace(state, chapter=state.chapter.add_verse(verse))

    return state, None


def finish(state: ParseState) -> Book | None:
    """Close the last chapter and return the last book, whether or not it has chapters."""
    state = _close_chapter(state)
    if state.book is None:
        return None
    return state.book.build()


def parse_corpus(
    lines: Iterable[str],
    abbreviations: AbbreviationLookup | None = None,
) -> list[Book]:
    """Parse the corpus text into books, in the order they appear."""
    lookup = abbreviations or _no_abbreviations
    state = ParseState()
    books: list[Book] = []

    for lineno, raw in enumerate(lines, start=1):
        state, finished = step(state, raw.strip(), lineno, lookup)
        if finished is not None:
            books.append(finished)

    last = finish(state)
    if last is not None:
        books.append(last)
    return books


# ── File loading ──────────────────────────────────────────────────────────────

def read_corpus_lines(path: Path) -> list[str]:
    """Read the corpus as lines; *.zst files are decompressed on the fly."""
    path = Path(path)
    if path.suffix == ".zst":
        # decompressobj copes with frames written without a content size
        dobj = zstandard.ZstdDecompressor().decompressobj()
        return dobj.decompress(path.read_bytes()).decode("utf-8").splitlines()
    return path.read_text(encoding="utf-8").splitlines()


def load_corpus(
    bible_path: Path = DEFAULT_BIBLE_PATH,
    abbreviations_path: Path | None = DEFAULT_ABBREVIATIONS_PATH,
    verbose: bool = False,
) -> list[Book]:
    """
    Read and parse the corpus, attaching abbreviations from abbreviations_path.
    Raises OSError for missing/unreadable files and CorpusFormatError for a
    malformed chapter header.
    """
    lookup = None
    if abbreviations_path is not None:
        table = load_abbreviation_table(abbreviations_path)
        lookup = table.for_title
        if verbose:
            print(f"Loaded {len(table)} abbreviations from {abbreviations_path}")

    lines = read_corpus_lines(bible_path)
    books = parse_corpus(lines, lookup)
    if verbose:
        print(f"Loaded {len(books)} books from {bible_path}")
    return books


def show_stats(books: list[Book], list_books: bool = False) -> None:
    stats = corpus_stats(books)
    print("\n-- Corpus statistics ------------------------------------------------")
    print(f"  Books:     {stats['books']}")
    print(f"  Chapters:  {stats['chapters']}")
    print(f"  Verses:    {stats['verses']}")
    if not list_books:
        return
    print("\n  Books:")
    for book in books:
        n_verses = sum(len(ch.verses) for ch in book.chapters)
        abbrevs = ", ".join(book.abbreviations) or "-"
        print(f"    {book.title:30s} {len(book.chapters):>4} ch  {n_verses:>6} v  [{abbrevs}]")


def main() -> None:
    ap = argparse.ArgumentParser(description="Parse the flat-text Bible and report what was found")
    ap.add_argument("--bible", type=Path, default=DEFAULT_BIBLE_PATH, help="Corpus file (.txt or .txt.zst)")
    ap.add_argument("--abbreviations", type=Path, default=DEFAULT_ABBREVIATIONS_PATH,
                    help="Abbreviation mapping CSV")
    ap.add_argument("--books", action="store_true", help="List every parsed book")
    ap.add_argument("--verbose", "-v", action="store_true", help="Print loading progress")
    args = ap.parse_args()

    try:
        books = load_corpus(args.bible, args.abbreviations, verbose=args.verbose)
    except (OSError, CorpusFormatError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    show_stats(books, list_books=args.books)


if __name__ == "__main__":
    main()
