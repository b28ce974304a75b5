from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, NamedTuple, Optional

from .paginator import PageSet, clamp_page_index
from .source import ChapterSource
from .viewport import Viewport
from .wrapper import wrap_text

logger = logging.getLogger(__name__)


class IntentKind(Enum):
    NEXT_PAGE = "next_page"
    PREV_PAGE = "prev_page"
    GO_FIRST = "go_first"
    GO_LAST = "go_last"
    VIEWPORT_RESIZE = "viewport_resize"
    QUIT = "quit"


@dataclass(frozen=True)
class Intent:
    """A navigation request independent of the key or event that produced it."""

    kind: IntentKind
    viewport: Optional[Viewport] = None

    @classmethod
    def resize(cls, width: int, height: int) -> "Intent":
        return cls(IntentKind.VIEWPORT_RESIZE, Viewport(width, height))


NEXT_PAGE = Intent(IntentKind.NEXT_PAGE)
PREV_PAGE = Intent(IntentKind.PREV_PAGE)
GO_FIRST = Intent(IntentKind.GO_FIRST)
GO_LAST = Intent(IntentKind.GO_LAST)
QUIT = Intent(IntentKind.QUIT)


class Position(NamedTuple):
    chapter_index: int
    page_index: int


@dataclass(frozen=True)
class NavigationBounds:
    """
    Limits a transition is evaluated against.

    ``page_count`` is the page count of the position's chapter at the current
    viewport. ``page_count_of`` is only consulted when moving back into the
    previous chapter, whose last page must be known.
    """

    chapter_count: int
    page_count: int
    page_count_of: Callable[[int], int]


def transition(position: Position, intent: Intent, bounds: NavigationBounds) -> Position:
    """Return the position reached by applying ``intent`` at ``position``."""
    chapter, page = position
    last_page = max(bounds.page_count, 1) - 1
    kind = intent.kind

    if kind is IntentKind.NEXT_PAGE:
        if page < last_page:
            return Position(chapter, page + 1)
        if chapter < bounds.chapter_count - 1:
            return Position(chapter + 1, 0)
        return position

    if kind is IntentKind.PREV_PAGE:
        if page > 0:
            return Position(chapter, page - 1)
        if chapter > 0:
            previous_count = bounds.page_count_of(chapter - 1)
            return Position(chapter - 1, max(previous_count, 1) - 1)
        return position

    if kind is IntentKind.GO_FIRST:
        return Position(chapter, 0)

    if kind is IntentKind.GO_LAST:
        return Position(chapter, last_page)

    if kind is IntentKind.VIEWPORT_RESIZE:
        return Position(chapter, clamp_page_index(page, bounds.page_count))

    return position


@dataclass
class ChapterLayout:
    """Derived text, lines and pages of the chapter currently on screen."""

    chapter_index: int
    text: str
    viewport: Viewport
    lines: List[str] = field(init=False)
    page_set: PageSet = field(init=False)

    def __post_init__(self) -> None:
        self.relayout(self.viewport)

    def relayout(self, viewport: Viewport) -> None:
        self.viewport = viewport.clamped()
        self.lines = wrap_text(self.text, self.viewport.width)
        self.page_set = PageSet(self.lines, self.viewport.height)

    @property
    def page_count(self) -> int:
        return self.page_set.page_count


@dataclass(frozen=True)
class PageView:
    """Everything the presentation layer needs to draw one page."""

    lines: List[str]
    chapter_number: int
    chapter_count: int
    page_number: int
    page_count: int
    chapter_title: str = ""

    def status_text(self) -> str:
        return (
            f"Page {self.page_number}/{self.page_count} | "
            f"Chapter {self.chapter_number}/{self.chapter_count}"
        )


class Navigator:
    """Owns the reading position and the layout of the current chapter."""

    def __init__(self, source: ChapterSource, viewport: Viewport) -> None:
        if source.chapter_count < 1:
            raise ValueError("Navigator requires at least one chapter.")
        self._source = source
        self._viewport = viewport.clamped()
        self._layout = self._load(0)
        self._position = Position(0, 0)

    @property
    def position(self) -> Position:
        return self._position

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def chapter_count(self) -> int:
        return self._source.chapter_count

    @property
    def page_count(self) -> int:
        return self._layout.page_count

    def _load(self, chapter_index: int) -> ChapterLayout:
        text = self._source.load_text(chapter_index)
        layout = ChapterLayout(chapter_index, text, self._viewport)
        logger.debug(
            "Laid out chapter %d at %dx%d: %d lines, %d pages.",
            chapter_index,
            self._viewport.width,
            self._viewport.height,
            len(layout.lines),
            layout.page_count,
        )
        return layout

    def _page_count_of(self, chapter_index: int) -> int:
        # Loading replaces the cached layout; only one chapter is kept.
        if self._layout.chapter_index != chapter_index:
            self._layout = self._load(chapter_index)
        return self._layout.page_count

    def dispatch(self, intent: Intent) -> Position:
        """Apply ``intent`` and return the new position."""
        if intent.kind is IntentKind.VIEWPORT_RESIZE and intent.viewport is not None:
            self._viewport = intent.viewport.clamped()
            self._layout.relayout(self._viewport)

        bounds = NavigationBounds(
            chapter_count=self._source.chapter_count,
            page_count=self._layout.page_count,
            page_count_of=self._page_count_of,
        )
        previous = self._position
        updated = transition(previous, intent, bounds)
        if self._layout.chapter_index != updated.chapter_index:
            self._layout = self._load(updated.chapter_index)

        self._position = Position(
            updated.chapter_index,
            clamp_page_index(updated.page_index, self._layout.page_count),
        )
        if self._position == previous and intent.kind in (IntentKind.NEXT_PAGE, IntentKind.PREV_PAGE):
            logger.debug("%s ignored at book boundary %s.", intent.kind.value, previous)
        return self._position

    def current_page(self) -> PageView:
        chapter_index, page_index = self._position
        return PageView(
            lines=list(self._layout.page_set.page(page_index)),
            chapter_number=chapter_index + 1,
            chapter_count=self._source.chapter_count,
            page_number=page_index + 1,
            page_count=self._layout.page_count,
            chapter_title=self._source.chapter_title(chapter_index),
        )


__all__ = [
    "ChapterLayout",
    "GO_FIRST",
    "GO_LAST",
    "Intent",
    "IntentKind",
    "NEXT_PAGE",
    "NavigationBounds",
    "Navigator",
    "PREV_PAGE",
    "PageView",
    "Position",
    "QUIT",
    "transition",
]
