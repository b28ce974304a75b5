from __future__ import annotations

import logging
from typing import List

from .container import BookContainer, ChapterUnavailableError
from .extractor import extract_text
from .wrapper import normalize_text

logger = logging.getLogger(__name__)

UNAVAILABLE_PLACEHOLDER = "[Error: Chapter file not found]"
EMPTY_PLACEHOLDER = "[This chapter has no readable text]"


class ChapterSource:
    """Turns chapter indices into prepared, displayable text."""

    def __init__(self, container: BookContainer, *, tab_size: int = 4) -> None:
        self._container = container
        self._chapter_ids: List[str] = container.list_chapter_ids()
        self._tab_size = tab_size

    @property
    def title(self) -> str:
        return self._container.title

    @property
    def chapter_count(self) -> int:
        return len(self._chapter_ids)

    def chapter_title(self, index: int) -> str:
        return self._container.chapter_title(self._chapter_ids[index])

    def load_text(self, index: int) -> str:
        """
        Return the text of chapter ``index`` ready for wrapping.

        A chapter the container cannot supply, or one without readable text,
        yields a one-line placeholder instead of an error.
        """
        chapter_id = self._chapter_ids[index]
        try:
            raw_bytes = self._container.open_chapter(chapter_id)
        except ChapterUnavailableError as exc:
            logger.warning("Chapter %d ('%s') unavailable: %s", index, chapter_id, exc)
            return UNAVAILABLE_PLACEHOLDER

        if self._container.is_markup:
            text = extract_text(raw_bytes)
        else:
            text = raw_bytes.decode("utf-8", errors="replace")

        prepared = normalize_text(text, tab_size=self._tab_size, reflow=self._container.is_markup)
        if not prepared.strip():
            logger.debug("Chapter %d ('%s') has no readable text.", index, chapter_id)
            return EMPTY_PLACEHOLDER
        logger.debug("Loaded chapter %d ('%s'), %d characters.", index, chapter_id, len(prepared))
        return prepared


__all__ = ["ChapterSource", "EMPTY_PLACEHOLDER", "UNAVAILABLE_PLACEHOLDER"]
