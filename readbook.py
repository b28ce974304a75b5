from __future__ import annotations

import argparse
import curses
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from termreader.config import ConfigError, ReaderSettings, load_settings, validate_log_level
from termreader.container import ContainerError, find_books, open_container
from termreader.navigator import NEXT_PAGE, Navigator
from termreader.source import ChapterSource
from termreader.tui import HELP_TEXT, LIBRARY_HELP_TEXT, choose_book, run_reader
from termreader.viewport import Viewport

logger = logging.getLogger("readbook")


def _configure_logging(settings: ReaderSettings) -> None:
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return
    log_path = settings.log_path
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    formatter = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.log_level)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Read an EPUB or plain text book in the terminal, one page at a time.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        help="Book to open. When omitted, books in the library directory are listed.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level written to the log file (default: TERMREADER_LOG_LEVEL or INFO).",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Widest text column to use (default: TERMREADER_MAX_WIDTH or 80).",
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print every page with its status line instead of starting the interactive reader.",
    )
    parser.add_argument(
        "--columns",
        type=int,
        default=80,
        help="Terminal width assumed by --dump (default: 80).",
    )
    parser.add_argument(
        "--rows",
        type=int,
        default=24,
        help="Terminal height assumed by --dump (default: 24).",
    )
    return parser.parse_args(argv)


def _apply_overrides(settings: ReaderSettings, args: argparse.Namespace) -> ReaderSettings:
    overrides = {}
    if args.log_level:
        overrides["log_level"] = validate_log_level(args.log_level, name="--log-level")
    if args.width is not None:
        overrides["max_text_width"] = max(1, args.width)
    return dataclasses.replace(settings, **overrides)


def dump_book(navigator: Navigator, out: TextIO) -> int:
    """Write every page from the current position to the end of the book."""
    pages = 0
    while True:
        view = navigator.current_page()
        for line in view.lines:
            out.write(f"{line}\n")
        out.write(f"-- {view.status_text()} --\n")
        pages += 1
        before = navigator.position
        if navigator.dispatch(NEXT_PAGE) == before:
            return pages


def _read_book(source: ChapterSource, settings: ReaderSettings, help_text: str) -> bool:
    """Run the interactive reader; return False when it was interrupted."""
    navigator = Navigator(source, Viewport.for_terminal(80, 24, settings))
    finished = True
    try:
        curses.wrapper(run_reader, navigator, settings, help_text)
    except KeyboardInterrupt:
        logger.debug("Interrupted at %s.", navigator.position)
        finished = False
    logger.info("Closed '%s' at %s.", source.title, navigator.position)
    return finished


def _run_library(settings: ReaderSettings) -> int:
    """Alternate between the library list and the reader until the list is quit."""
    books = find_books(settings.library_dir)
    message = ""
    selected: Optional[Path] = None
    while True:
        try:
            path = curses.wrapper(choose_book, books, message, selected)
        except KeyboardInterrupt:
            return 0
        if path is None:
            return 0
        selected = path
        try:
            container = open_container(path)
        except ContainerError as exc:
            message = f"Error: {exc}"
            continue
        message = ""
        source = ChapterSource(container, tab_size=settings.tab_size)
        if not _read_book(source, settings, LIBRARY_HELP_TEXT):
            return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        settings = _apply_overrides(load_settings(), args)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    _configure_logging(settings)

    if not args.path:
        if args.dump:
            print("--dump requires a book path.", file=sys.stderr)
            return 2
        return _run_library(settings)

    try:
        container = open_container(Path(args.path))
    except ContainerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    source = ChapterSource(container, tab_size=settings.tab_size)
    if args.dump:
        viewport = Viewport.for_terminal(args.columns, args.rows, settings)
        navigator = Navigator(source, viewport)
        pages = dump_book(navigator, sys.stdout)
        logger.info("Dumped %d page(s) of '%s'.", pages, source.title)
        return 0

    _read_book(source, settings, HELP_TEXT)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
