from __future__ import annotations

import logging
import posixpath
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Tuple

from ebooklib import epub

logger = logging.getLogger(__name__)

BOOK_SUFFIXES = (".epub", ".txt")


class ContainerError(RuntimeError):
    """Raised when a document cannot be opened for reading."""


class ChapterUnavailableError(ContainerError):
    """Raised when the container cannot supply a chapter's bytes."""


def _normalize_whitespace(value: str) -> str:
    """Collapse consecutive whitespace and trim the resulting string."""
    return re.sub(r"\s+", " ", value).strip()


def _normalize_doc_path(path: str) -> str:
    return posixpath.normpath(path) if path else ""


def _split_href(href: str) -> Tuple[str, str]:
    path, _, fragment = (href or "").partition("#")
    return path, fragment


def _flatten_toc_entries(entries: List[Any]) -> List[Tuple[str, str]]:
    """Flatten EbookLib TOC structures into (title, href) pairs."""
    flattened: List[Tuple[str, str]] = []
    for entry in entries:
        if isinstance(entry, (epub.Link, epub.Section)):
            title = _normalize_whitespace(entry.title or "")
            href = entry.href or ""
            if href:
                flattened.append((title, href))
        elif isinstance(entry, tuple) and entry:
            head = entry[0]
            children = entry[1] if len(entry) > 1 else []
            flattened.extend(_flatten_toc_entries([head]))
            if isinstance(children, (list, tuple)):
                flattened.extend(_flatten_toc_entries(list(children)))
        elif isinstance(entry, list):
            flattened.extend(_flatten_toc_entries(entry))
    return flattened


class BookContainer(ABC):
    """Source of chapter bytes for one document, stable for a reading session."""

    #: Whether chapter bytes are markup that needs text extraction.
    is_markup: bool = True

    @property
    @abstractmethod
    def title(self) -> str:
        """Human readable document title."""

    @abstractmethod
    def list_chapter_ids(self) -> List[str]:
        """Return chapter identifiers in reading order."""

    @abstractmethod
    def open_chapter(self, chapter_id: str) -> bytes:
        """Return the raw bytes of a chapter or raise ``ChapterUnavailableError``."""

    def chapter_title(self, chapter_id: str) -> str:
        return ""


class EbooklibContainer(BookContainer):
    """EPUB container backed by EbookLib."""

    is_markup = True

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser().resolve()
        try:
            self._book = epub.read_epub(str(self.path))
        except FileNotFoundError:
            raise ContainerError(f"EPUB file not found: {self.path}") from None
        except Exception as exc:
            raise ContainerError(f"Unable to read EPUB {self.path}: {exc}") from exc
        self._spine = self._build_spine()
        self._titles = self._build_titles()
        self._title = self._read_title()

    def _build_spine(self) -> List[str]:
        spine: List[str] = []
        for entry in self._book.spine:
            if isinstance(entry, tuple):
                item_id, linear = entry[0], entry[1] if len(entry) > 1 else None
            else:
                item_id, linear = entry, None
            if (linear or "yes").lower() == "no":
                continue
            if not item_id:
                continue
            if self._book.get_item_with_id(item_id) is None:
                logger.debug("Spine item '%s' not found in manifest.", item_id)
                continue
            spine.append(item_id)
        return spine

    def _build_titles(self) -> Dict[str, str]:
        """Map manifest ids to the first TOC title pointing into that document."""
        by_path: Dict[str, str] = {}
        for title, href in _flatten_toc_entries(list(self._book.toc or [])):
            path, _ = _split_href(href)
            normalized = _normalize_doc_path(path)
            if title and normalized not in by_path:
                by_path[normalized] = title

        titles: Dict[str, str] = {}
        for item_id in self._spine:
            item = self._book.get_item_with_id(item_id)
            title = by_path.get(_normalize_doc_path(item.get_name() or ""))
            if title:
                titles[item_id] = title
        return titles

    def _read_title(self) -> str:
        try:
            entries = self._book.get_metadata("DC", "title")
        except KeyError:
            entries = []
        for value, _ in entries:
            text = _normalize_whitespace(value or "")
            if text:
                return text
        return self.path.stem

    @property
    def title(self) -> str:
        return self._title

    def list_chapter_ids(self) -> List[str]:
        return list(self._spine)

    def open_chapter(self, chapter_id: str) -> bytes:
        item = self._book.get_item_with_id(chapter_id)
        if item is None:
            raise ChapterUnavailableError(f"Chapter '{chapter_id}' not found in EPUB manifest.")
        try:
            return item.get_content()
        except Exception as exc:
            raise ChapterUnavailableError(f"Unable to read chapter '{chapter_id}': {exc}") from exc

    def chapter_title(self, chapter_id: str) -> str:
        return self._titles.get(chapter_id, "")


class PlainTextContainer(BookContainer):
    """A plain text file read as a single chapter."""

    is_markup = False

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser().resolve()
        if not self.path.is_file():
            raise ContainerError(f"Text file not found: {self.path}")

    @property
    def title(self) -> str:
        return self.path.stem

    def list_chapter_ids(self) -> List[str]:
        return [self.path.name]

    def open_chapter(self, chapter_id: str) -> bytes:
        if chapter_id != self.path.name:
            raise ChapterUnavailableError(f"Chapter '{chapter_id}' not found in {self.path.name}.")
        try:
            return self.path.read_bytes()
        except OSError as exc:
            raise ChapterUnavailableError(f"Unable to read {self.path}: {exc}") from exc


def open_container(path: str | Path) -> BookContainer:
    """Open ``path`` as an EPUB or plain text document with at least one chapter."""
    resolved = Path(path).expanduser()
    if not resolved.exists():
        logger.error("Book file not found: %s", resolved)
        raise ContainerError(f"Book file not found: {resolved}")

    try:
        if resolved.suffix.lower() == ".epub":
            container: BookContainer = EbooklibContainer(resolved)
        else:
            container = PlainTextContainer(resolved)
    except ContainerError:
        logger.exception("Failed to open book %s", resolved)
        raise

    if not container.list_chapter_ids():
        logger.error("Book has no readable chapters: %s", resolved)
        raise ContainerError(f"Book has no readable chapters: {resolved}")
    logger.info(
        "Opened '%s' with %d chapter(s).", container.title, len(container.list_chapter_ids())
    )
    return container


def find_books(directory: str | Path) -> List[Path]:
    """Return readable book files in ``directory`` sorted by name."""
    base = Path(directory).expanduser()
    if not base.is_dir():
        return []
    return sorted(
        (entry for entry in base.iterdir() if entry.is_file() and entry.suffix.lower() in BOOK_SUFFIXES),
        key=lambda entry: entry.name.casefold(),
    )


__all__ = [
    "BookContainer",
    "ChapterUnavailableError",
    "ContainerError",
    "EbooklibContainer",
    "PlainTextContainer",
    "find_books",
    "open_container",
]
