#!/usr/bin/env python3
import tempfile
import unittest
from pathlib import Path

import sys

import zstandard

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parent))
import corpus_parser  # noqa: E402
import sample_corpus  # noqa: E402


class ParseCorpusTests(unittest.TestCase):
    def parse(self, text: str, abbreviations=None):
        return corpus_parser.parse_corpus(text.splitlines(), abbreviations)

    def test_builds_book_chapter_verse_hierarchy(self):
        books = self.parse(
            """THE BOOK OF GENESIS

CHAPTER 1

1 In the beginning God created the heaven and the earth.
2   And the earth was without form, and void.

CHAPTER 2
1 Thus the heavens and the earth were finished.
"""
        )
        self.assertEqual(len(books), 1)
        genesis = books[0]
        self.assertEqual(genesis.title, "GENESIS")
        self.assertEqual([ch.number for ch in genesis.chapters], [1, 2])
        self.assertEqual(
            genesis.chapters[0].verses,
            (
                "In the beginning God created the heaven and the earth.",
                "And the earth was without form, and void.",
            ),
        )
        self.assertEqual(genesis.chapters[1].verses, ("Thus the heavens and the earth were finished.",))

    def test_strips_whole_run_of_leading_digits_and_surrounding_space(self):
        books = self.parse("THE BOOK OF PSALMS\nPSALM 119\n   105 Thy word [is] a lamp.   \n")
        self.assertEqual(books[0].chapters[0].number, 119)
        self.assertEqual(books[0].chapters[0].verses, ("Thy word [is] a lamp.",))

    def test_verse_numbers_are_positional_not_parsed(self):
        books = self.parse("THE BOOK OF JOB\nCHAPTER 1\n7 first\n3 second\n")
        self.assertEqual(books[0].chapters[0].verses, ("first", "second"))

    def test_lines_starting_with_zero_are_not_verses(self):
        books = self.parse("THE BOOK OF JOB\nCHAPTER 1\n1 one\n0 not a verse\n2 two\n")
        self.assertEqual(books[0].chapters[0].verses, ("one", "two"))

    def test_prose_lines_are_ignored(self):
        books = self.parse("THE BOOK OF JOB\nThe story of Job\nCHAPTER 1\nA heading\n1 one\n")
        self.assertEqual(books[0].chapters[0].verses, ("one",))

    def test_psalm_marker_starts_chapter(self):
        books = self.parse("THE BOOK OF PSALMS\nPSALM 1\n1 Blessed\nPSALM 2\n1 Why\n2 The kings\n")
        self.assertEqual([(c.number, len(c.verses)) for c in books[0].chapters], [(1, 1), (2, 2)])

    def test_chapters_do_not_leak_into_next_book(self):
        books = self.parse(
            "THE BOOK OF GENESIS\nCHAPTER 50\n1 a\nTHE BOOK OF EXODUS\nCHAPTER 1\n1 b\n"
        )
        self.assertEqual([b.title for b in books], ["GENESIS", "EXODUS"])
        self.assertEqual([c.number for c in books[1].chapters], [1])
        self.assertEqual(books[1].chapters[0].verses, ("b",))

    def test_book_without_chapters_is_dropped_unless_last(self):
        books = self.parse(
            "THE BOOK OF EMPTY\nTHE BOOK OF GENESIS\nCHAPTER 1\n1 a\nTHE BOOK OF TRAILING\n"
        )
        self.assertEqual([b.title for b in books], ["GENESIS", "TRAILING"])
        self.assertEqual(books[1].chapters, ())

    def test_no_empty_sentinel_chapter_at_end_of_input(self):
        books = self.parse("THE BOOK OF JUDE\nCHAPTER 1\n1 Jude, the servant\n\n\n")
        self.assertEqual([c.number for c in books[0].chapters], [1])
        self.assertTrue(all(c.number >= 1 for b in books for c in b.chapters))

    def test_chapter_before_any_book_goes_to_untitled_book(self):
        books = self.parse("CHAPTER 1\n1 orphan\nTHE BOOK OF JOB\nCHAPTER 1\n1 job\n")
        self.assertEqual([b.title for b in books], ["", "JOB"])
        self.assertEqual(books[0].chapters[0].verses, ("orphan",))

    def test_verse_before_any_chapter_is_ignored(self):
        books = self.parse("THE BOOK OF JOB\n1 stray\nCHAPTER 1\n1 kept\n")
        self.assertEqual(books[0].chapters[0].verses, ("kept",))

    def test_empty_input_yields_no_books(self):
        self.assertEqual(self.parse(""), [])

    def test_malformed_chapter_number_reports_line(self):
        with self.assertRaises(corpus_parser.CorpusFormatError) as ctx:
            self.parse("THE BOOK OF JOB\nCHAPTER ONE\n1 a\n")
        self.assertEqual(ctx.exception.lineno, 2)
        self.assertIn("CHAPTER ONE", str(ctx.exception))

    def test_chapter_zero_opens_no_chapter(self):
        books = self.parse("THE BOOK OF JOB\nCHAPTER 1\n1 a\nPSALM 0\n1 b\nCHAPTER 0\n")
        self.assertEqual(len(books), 1)
        self.assertEqual([c.number for c in books[0].chapters], [1])
        self.assertEqual(books[0].chapters[0].verses, ("a",))

    def test_chapter_number_may_carry_plus_sign(self):
        books = self.parse("THE BOOK OF JOB\nCHAPTER +2\n1 a\n")
        self.assertEqual([c.number for c in books[0].chapters], [2])

    def test_negative_chapter_number_is_malformed(self):
        with self.assertRaises(corpus_parser.CorpusFormatError):
            self.parse("THE BOOK OF JOB\nCHAPTER -1\n")

    def test_abbreviations_are_looked_up_per_book_title(self):
        seen = []

        def lookup(title):
            seen.append(title)
            return ["Gen"] if title == "GENESIS" else []

        books = self.parse("THE BOOK OF GENESIS\nCHAPTER 1\n1 a\nTHE BOOK OF JOB\nCHAPTER 1\n1 b\n", lookup)
        self.assertEqual(seen, ["GENESIS", "JOB"])
        self.assertEqual(books[0].abbreviations, ("Gen",))
        self.assertEqual(books[1].abbreviations, ())

    def test_sample_corpus_layout(self):
        books = corpus_parser.parse_corpus(sample_corpus.corpus_lines())
        self.assertEqual([b.title for b in books], [title for title, _, _ in sample_corpus.LAYOUT])
        for book, (_, _, chapters) in zip(books, sample_corpus.LAYOUT):
            self.assertEqual({c.number: len(c.verses) for c in book.chapters}, chapters)


class StepTests(unittest.TestCase):
    def test_step_leaves_earlier_states_untouched(self):
        first = corpus_parser.ParseState()
        second, _ = corpus_parser.step(first, "THE BOOK OF JOB", 1)
        third, _ = corpus_parser.step(second, "CHAPTER 1", 2)
        fourth, _ = corpus_parser.step(third, "1 a", 3)
        fifth, _ = corpus_parser.step(fourth, "CHAPTER 2", 4)

        self.assertEqual(first, corpus_parser.ParseState())
        self.assertIsNone(second.chapter)
        self.assertEqual(third.chapter.verses, ())
        self.assertEqual(fourth.chapter.verses, ("a",))
        self.assertEqual(fourth.book.chapters, ())
        self.assertEqual([c.number for c in fifth.book.chapters], [1])

    def test_builders_are_frozen(self):
        state, _ = corpus_parser.step(corpus_parser.ParseState(), "CHAPTER 1", 1)
        with self.assertRaises(AttributeError):
            state.chapter.verses = ("x",)

    def test_book_completed_by_next_header(self):
        state = corpus_parser.ParseState()
        for lineno, line in enumerate(["THE BOOK OF JOB", "CHAPTER 1", "1 a"], start=1):
            state, finished = corpus_parser.step(state, line, lineno)
            self.assertIsNone(finished)
        state, finished = corpus_parser.step(state, "THE BOOK OF PSALMS", 4)
        self.assertEqual(finished.title, "JOB")
        self.assertEqual(finished.chapters[0].verses, ("a",))
        self.assertEqual(state.book.title, "PSALMS")


class LoadCorpusTests(unittest.TestCase):
    def test_load_corpus_attaches_abbreviations(self):
        with tempfile.TemporaryDirectory() as td:
            bible_path, abbrev_path = sample_corpus.write_fixture(Path(td))
            books = corpus_parser.load_corpus(bible_path, abbrev_path)
        by_title = {b.title: b for b in books}
        self.assertEqual(by_title["GENESIS"].abbreviations, ("Gen", "Ge"))
        self.assertEqual(by_title["FIRST PETER"].abbreviations, ("1 Pet", "1Pe"))
        self.assertEqual(by_title["MARK"].abbreviations, ("Mk",))

    def test_load_corpus_without_abbreviation_file(self):
        with tempfile.TemporaryDirectory() as td:
            bible_path, _ = sample_corpus.write_fixture(Path(td))
            books = corpus_parser.load_corpus(bible_path, None)
        self.assertTrue(all(b.abbreviations == () for b in books))

    def test_missing_corpus_raises_oserror(self):
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(OSError):
                corpus_parser.load_corpus(Path(td) / "missing.txt", None)

    def test_reads_zstd_compressed_corpus(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "Bible.txt.zst"
            data = sample_corpus.corpus_text().encode("utf-8")
            path.write_bytes(zstandard.ZstdCompressor(level=3).compress(data))
            lines = corpus_parser.read_corpus_lines(path)
        self.assertEqual(lines, sample_corpus.corpus_lines())


if __name__ == "__main__":
    unittest.main()
