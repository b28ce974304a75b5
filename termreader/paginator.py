from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

Page = List[str]


def paginate(lines: Sequence[str], height: int) -> List[Page]:
    """Partition ``lines`` into consecutive pages of ``height`` lines; the last may be short."""
    height = max(1, height)
    return [list(lines[start : start + height]) for start in range(0, len(lines), height)]


def clamp_page_index(index: int, page_count: int) -> int:
    """Clamp ``index`` into ``[0, page_count - 1]``, or 0 when there are no pages."""
    if page_count <= 0:
        return 0
    return min(max(0, index), page_count - 1)


@dataclass
class PageSet:
    """Pages derived from one set of wrapped lines at a given height."""

    lines: List[str]
    height: int
    pages: List[Page] = field(init=False)

    def __post_init__(self) -> None:
        self.height = max(1, self.height)
        self.pages = paginate(self.lines, self.height)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def page(self, index: int) -> Page:
        if not self.pages:
            return []
        return self.pages[clamp_page_index(index, self.page_count)]


__all__ = ["Page", "PageSet", "clamp_page_index", "paginate"]
