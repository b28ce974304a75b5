"""Tests for the command line entry point in dump mode."""

import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest.mock import patch

from support import MemoryContainer, paragraphs

import readbook
from termreader.navigator import GO_LAST, NEXT_PAGE, PREV_PAGE, QUIT, Navigator, PageView
from termreader.source import ChapterSource
from termreader.tui import HELP_TEXT, LIBRARY_HELP_TEXT, choose_book, intent_for_key, render_page_lines
from termreader.viewport import Viewport


class TestDumpBook(unittest.TestCase):

    def test_dumps_every_page_of_every_chapter(self):
        container = MemoryContainer([("one", paragraphs(3)), ("two", paragraphs(2))])
        navigator = Navigator(ChapterSource(container), Viewport(20, 2))
        out = io.StringIO()

        self.assertEqual(readbook.dump_book(navigator, out), 5)
        output = out.getvalue()
        self.assertIn("-- Page 3/3 | Chapter 1/2 --", output)
        self.assertIn("-- Page 2/2 | Chapter 2/2 --", output)
        self.assertEqual(output.count("-- Page"), 5)


class TestMain(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        env = {"TERMREADER_LOG_PATH": str(self.root / "reader.log")}
        self._env = patch.dict(os.environ, env)
        self._env.start()

    def tearDown(self):
        self._env.stop()
        self._tmp.cleanup()

    def test_dump_plain_text(self):
        path = self.root / "book.txt"
        path.write_text("Line one of the book.\n\nSecond paragraph here.\n", encoding="utf-8")
        out = io.StringIO()
        with redirect_stdout(out):
            status = readbook.main(["--dump", "--columns", "30", "--rows", "10", str(path)])

        self.assertEqual(status, 0)
        self.assertEqual(
            out.getvalue().splitlines(),
            [
                "Line one of the",
                "book.",
                "",
                "-- Page 1/2 | Chapter 1/1 --",
                "Second paragraph",
                "here.",
                "-- Page 2/2 | Chapter 1/1 --",
            ],
        )

    def test_missing_book(self):
        err = io.StringIO()
        with redirect_stderr(err):
            status = readbook.main(["--dump", str(self.root / "absent.epub")])
        self.assertEqual(status, 1)
        self.assertIn("not found", err.getvalue())

    def test_dump_requires_path(self):
        with redirect_stderr(io.StringIO()):
            self.assertEqual(readbook.main(["--dump"]), 2)

    def test_bad_configuration(self):
        with patch.dict(os.environ, {"TERMREADER_RESERVED_ROWS": "many"}):
            with redirect_stderr(io.StringIO()):
                self.assertEqual(readbook.main(["--dump", "whatever.txt"]), 2)

    def test_unknown_log_level_in_environment(self):
        with patch.dict(os.environ, {"TERMREADER_LOG_LEVEL": "verbose"}):
            err = io.StringIO()
            with redirect_stderr(err):
                self.assertEqual(readbook.main(["--dump", "whatever.txt"]), 2)
        self.assertIn("TERMREADER_LOG_LEVEL", err.getvalue())

    def test_unknown_log_level_option(self):
        err = io.StringIO()
        with redirect_stderr(err):
            self.assertEqual(readbook.main(["--log-level", "verbose", "--dump", "whatever.txt"]), 2)
        self.assertIn("--log-level", err.getvalue())


class TestLibraryLoop(unittest.TestCase):
    """Interactive runs with curses replaced by a scripted stand-in."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.book = self.root / "book.txt"
        self.book.write_text("A short book.\n", encoding="utf-8")
        env = {
            "TERMREADER_LOG_PATH": str(self.root / "reader.log"),
            "TERMREADER_LIBRARY_DIR": str(self.root),
        }
        self._env = patch.dict(os.environ, env)
        self._env.start()
        self.picks = []
        self.calls = []

    def tearDown(self):
        self._env.stop()
        self._tmp.cleanup()

    def _fake_wrapper(self, func, *args):
        if func is choose_book:
            books, message, selected = args
            self.calls.append(("library", [book.name for book in books], message, selected))
            return self.picks.pop(0)
        navigator, _settings, help_text = args
        self.calls.append(("reader", navigator.current_page().lines, help_text))
        return None

    def _run(self, argv):
        with patch("readbook.curses.wrapper", side_effect=self._fake_wrapper):
            return readbook.main(argv)

    def test_quitting_the_reader_returns_to_the_library(self):
        self.picks = [self.book, self.book, None]
        self.assertEqual(self._run([]), 0)
        self.assertEqual(
            self.calls,
            [
                ("library", ["book.txt"], "", None),
                ("reader", ["A short book."], LIBRARY_HELP_TEXT),
                ("library", ["book.txt"], "", self.book),
                ("reader", ["A short book."], LIBRARY_HELP_TEXT),
                ("library", ["book.txt"], "", self.book),
            ],
        )

    def test_unopenable_book_is_reported_in_the_library(self):
        broken = self.root / "broken.epub"
        broken.write_bytes(b"not a zip archive")
        self.picks = [broken, None]
        self.assertEqual(self._run([]), 0)
        self.assertEqual(len(self.calls), 2)
        _, names, message, selected = self.calls[1]
        self.assertEqual(names, ["book.txt", "broken.epub"])
        self.assertTrue(message.startswith("Error:"))
        self.assertEqual(selected, broken)

    def test_book_from_command_line_quits_directly(self):
        self.assertEqual(self._run([str(self.book)]), 0)
        self.assertEqual(self.calls, [("reader", ["A short book."], HELP_TEXT)])


class TestKeyBindings(unittest.TestCase):

    def test_navigation_keys(self):
        self.assertIs(intent_for_key(ord("n")), NEXT_PAGE)
        self.assertIs(intent_for_key(ord(" ")), NEXT_PAGE)
        self.assertIs(intent_for_key(ord("p")), PREV_PAGE)
        self.assertIs(intent_for_key(ord("G")), GO_LAST)
        self.assertIs(intent_for_key(ord("q")), QUIT)
        self.assertIsNone(intent_for_key(ord("z")))

    def test_short_page_is_padded(self):
        view = PageView(lines=["only"], chapter_number=1, chapter_count=1, page_number=1, page_count=1)
        self.assertEqual(render_page_lines(view, Viewport(10, 3)), ["only", "", ""])


if __name__ == "__main__":
    unittest.main()
