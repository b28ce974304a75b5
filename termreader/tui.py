"""Curses front end: library list and reader view driven by the Navigator."""

from __future__ import annotations

import curses
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .config import ReaderSettings
from .navigator import (
    GO_FIRST,
    GO_LAST,
    NEXT_PAGE,
    PREV_PAGE,
    QUIT,
    Intent,
    IntentKind,
    Navigator,
    PageView,
)
from .viewport import Viewport

logger = logging.getLogger(__name__)

HELP_TEXT = "[ (n/Right) Next | (p/Left) Prev | (Home/End) First/Last | (q) Quit ]"
LIBRARY_HELP_TEXT = "[ (n/Right) Next | (p/Left) Prev | (Home/End) First/Last | (q) Library ]"

_KEY_INTENTS = {
    ord("n"): NEXT_PAGE,
    ord("l"): NEXT_PAGE,
    ord(" "): NEXT_PAGE,
    curses.KEY_RIGHT: NEXT_PAGE,
    curses.KEY_NPAGE: NEXT_PAGE,
    ord("p"): PREV_PAGE,
    ord("h"): PREV_PAGE,
    curses.KEY_LEFT: PREV_PAGE,
    curses.KEY_PPAGE: PREV_PAGE,
    ord("g"): GO_FIRST,
    curses.KEY_HOME: GO_FIRST,
    ord("G"): GO_LAST,
    curses.KEY_END: GO_LAST,
    ord("q"): QUIT,
    27: QUIT,  # Esc
    3: QUIT,  # Ctrl-C in raw mode
}


def intent_for_key(key: int) -> Optional[Intent]:
    """Map a curses key code to a navigation intent, or None for unbound keys."""
    return _KEY_INTENTS.get(key)


def render_page_lines(view: PageView, viewport: Viewport) -> List[str]:
    """Return the page padded with blank rows to the full viewport height."""
    lines = list(view.lines)
    if len(lines) < viewport.height:
        lines.extend([""] * (viewport.height - len(lines)))
    return lines


def _addstr(screen: "curses.window", y: int, x: int, text: str) -> None:
    rows, columns = screen.getmaxyx()
    if y < 0 or y >= rows or x >= columns:
        return
    try:
        screen.addstr(y, max(0, x), text[: max(0, columns - max(0, x) - 1)])
    except curses.error:
        # Writing to the bottom-right cell raises even though the text is drawn.
        pass


def _centered(screen: "curses.window", y: int, text: str) -> None:
    _, columns = screen.getmaxyx()
    _addstr(screen, y, (columns - len(text)) // 2, text)


def _terminal_viewport(screen: "curses.window", settings: ReaderSettings) -> Viewport:
    rows, columns = screen.getmaxyx()
    return Viewport.for_terminal(columns, rows, settings)


def draw_reader(screen: "curses.window", navigator: Navigator, help_text: str = HELP_TEXT) -> None:
    screen.erase()
    _, columns = screen.getmaxyx()
    viewport = navigator.viewport
    view = navigator.current_page()
    left = max(0, (columns - viewport.width) // 2)

    if view.chapter_title:
        _centered(screen, 0, view.chapter_title)
    for row, line in enumerate(render_page_lines(view, viewport), start=1):
        _addstr(screen, row, left, line)

    footer = viewport.height + 2
    _centered(screen, footer, view.status_text())
    _centered(screen, footer + 1, help_text)
    screen.refresh()


def run_reader(
    screen: "curses.window",
    navigator: Navigator,
    settings: ReaderSettings,
    help_text: str = HELP_TEXT,
) -> None:
    """
    Process keys until a quit intent arrives.

    ``help_text`` is the key summary under the status line. It names where
    `q` leads, which is the library when the book was picked from it.
    """
    curses.curs_set(0)
    navigator.dispatch(Intent(IntentKind.VIEWPORT_RESIZE, _terminal_viewport(screen, settings)))
    while True:
        draw_reader(screen, navigator, help_text)
        key = screen.getch()
        if key == curses.KEY_RESIZE:
            viewport = _terminal_viewport(screen, settings)
            navigator.dispatch(Intent(IntentKind.VIEWPORT_RESIZE, viewport))
            continue
        intent = intent_for_key(key)
        if intent is None:
            continue
        if intent is QUIT:
            logger.debug("Quit requested at %s.", navigator.position)
            return
        navigator.dispatch(intent)


def choose_book(
    screen: "curses.window",
    books: Sequence[Path],
    message: str = "",
    selected: Optional[Path] = None,
) -> Optional[Path]:
    """
    Show the library list and return the selected book, or None to quit.

    ``message`` is shown under the list, for example why the last book could
    not be opened. The cursor starts on ``selected`` when it is listed.
    """
    curses.curs_set(0)
    cursor = list(books).index(selected) if selected in books else 0
    while True:
        screen.erase()
        _addstr(screen, 1, 2, "MY LIBRARY")
        if not books:
            _addstr(screen, 3, 2, "No .epub or .txt files found in this directory.")
            _addstr(screen, 5, 2, "(Press q to quit)")
        for row, book in enumerate(books):
            marker = "> " if row == cursor else "  "
            _addstr(screen, 3 + row, 2, f"{marker}{book.name}")
        _addstr(screen, 4 + len(books), 2, "[Use Arrows to Move | Enter to Select | q to Quit]")
        if message:
            _addstr(screen, 6 + len(books), 2, message)
        screen.refresh()

        key = screen.getch()
        if key in (ord("q"), 27, 3):
            return None
        if not books:
            continue
        if key in (curses.KEY_UP, ord("k")) and cursor > 0:
            cursor -= 1
        elif key in (curses.KEY_DOWN, ord("j")) and cursor < len(books) - 1:
            cursor += 1
        elif key in (curses.KEY_ENTER, 10, 13):
            return books[cursor]


__all__ = [
    "HELP_TEXT",
    "LIBRARY_HELP_TEXT",
    "choose_book",
    "draw_reader",
    "intent_for_key",
    "render_page_lines",
    "run_reader",
]
