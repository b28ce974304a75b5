from __future__ import annotations

from typing import Dict, List, Optional

from termreader.container import BookContainer, ChapterUnavailableError


def paragraphs(count: int, *, word: str = "para") -> str:
    """Markup with ``count`` one-word paragraphs; wraps to ``2 * count - 1`` lines."""
    return "".join(f"<p>{word}{number}</p>" for number in range(1, count + 1))


class MemoryContainer(BookContainer):
    """In-memory container that records every chapter fetch."""

    def __init__(
        self,
        chapters: List[tuple[str, Optional[str]]],
        *,
        titles: Optional[Dict[str, str]] = None,
        is_markup: bool = True,
    ) -> None:
        self._chapters = chapters
        self._titles = titles or {}
        self.is_markup = is_markup
        self.opened: List[str] = []

    @property
    def title(self) -> str:
        return "Memory Book"

    def list_chapter_ids(self) -> List[str]:
        return [chapter_id for chapter_id, _ in self._chapters]

    def open_chapter(self, chapter_id: str) -> bytes:
        self.opened.append(chapter_id)
        for known_id, markup in self._chapters:
            if known_id == chapter_id and markup is not None:
                return markup.encode("utf-8")
        raise ChapterUnavailableError(f"Chapter '{chapter_id}' not found.")

    def chapter_title(self, chapter_id: str) -> str:
        return self._titles.get(chapter_id, "")
