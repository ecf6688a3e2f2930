"""
Verse lookup CLI.

Loads the corpus once, then answers references like "Genesis 1:1",
"PSALMS 119:105" or "1 Pet 3:5". Found verses are also appended, wrapped,
to a result log (verses.txt by default).

Usage:
  python src/lookup.py                          # interactive prompt
  python src/lookup.py "John 3:16" "Ps 23:1"    # one-shot, exit 1 if any miss
  python src/lookup.py --no-log "Gen 1:1"       # don't touch the result log
  python src/lookup.py --bible data/Bible.txt.zst --width 60
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable

sys.path.insert(0, str(Path(__file__).parent))

from bible_data import DEFAULT_ABBREVIATIONS_PATH, DEFAULT_BIBLE_PATH
from corpus_parser import CorpusFormatError, show_stats
from pretty_print import DEFAULT_WIDTH, print_wrapped
from resolver import Bible, Resolution

DEFAULT_LOG_PATH = Path("verses.txt")

PROMPT = "Please enter a bible verse to search for: "
CONTINUE_PROMPT = "Would you like to look up another verse? (y/n)"


def answer(
    bible: Bible,
    query: str,
    log_path: Path | None,
    width: int = DEFAULT_WIDTH,
) -> Resolution:
    """Resolve query, print the result, and log it if it was found."""
    result = bible.search(query.strip())
    print(result.label)
    if result.found and log_path is not None:
        print_wrapped(log_path, result.label, width)
    return result


def interactive(
    bible: Bible,
    log_path: Path | None,
    width: int = DEFAULT_WIDTH,
    read: Callable[[], str] = input,
) -> None:
    """Prompt until the user declines to continue or input runs out."""
    while True:
        print(PROMPT)
        try:
            query = read()
        except EOFError:
            break
        print()
        answer(bible, query, log_path, width)
        print()

        print(CONTINUE_PROMPT)
        try:
            again = read()
        except EOFError:
            break
        if again.strip().lower() != "y":
            break
        print()


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Look up Bible verses by reference")
    ap.add_argument("queries", nargs="*", help='References such as "Genesis 1:1" (default: interactive)')
    ap.add_argument("--bible", type=Path, default=DEFAULT_BIBLE_PATH, help="Corpus file (.txt or .txt.zst)")
    ap.add_argument("--abbreviations", type=Path, default=DEFAULT_ABBREVIATIONS_PATH,
                    help="Abbreviation mapping CSV")
    ap.add_argument("--log", type=Path, default=DEFAULT_LOG_PATH, help="Result log for found verses")
    ap.add_argument("--no-log", action="store_true", help="Do not write found verses to the result log")
    ap.add_argument("--width", type=int, default=DEFAULT_WIDTH, help="Wrap width for the result log")
    ap.add_argument("--stats", action="store_true", help="Print corpus statistics after loading")
    ap.add_argument("--verbose", "-v", action="store_true", help="Print loading progress")
    args = ap.parse_args(argv)

    if args.width < 1:
        ap.error("--width must be at least 1")

    try:
        bible = Bible.load(args.bible, args.abbreviations, verbose=args.verbose)
    except (OSError, CorpusFormatError) as e:
        print(f"ERROR: could not load corpus: {e}", file=sys.stderr)
        sys.exit(1)

    if args.stats:
        show_stats(bible.books)

    log_path = None if args.no_log else args.log

    try:
        if not args.queries:
            interactive(bible, log_path, args.width)
            return
        missed = 0
        for query in args.queries:
            if not answer(bible, query, log_path, args.width).found:
                missed += 1
    except OSError as e:
        print(f"ERROR: could not write result log: {e}", file=sys.stderr)
        sys.exit(1)

    if missed:
        sys.exit(1)


if __name__ == "__main__":
    main()
