from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .config import ReaderSettings


@dataclass(frozen=True)
class Viewport:
    """Drawable text area in character cells."""

    width: int
    height: int

    def clamped(self) -> "Viewport":
        """Return a copy with both dimensions raised to at least one cell."""
        return Viewport(width=max(1, self.width), height=max(1, self.height))

    @classmethod
    def for_terminal(cls, columns: int, rows: int, settings: "ReaderSettings") -> "Viewport":
        """Derive the text column and page height from a terminal size."""
        width = min(settings.max_text_width, columns - settings.side_margin)
        height = rows - settings.reserved_rows
        return cls(width=width, height=height).clamped()


__all__ = ["Viewport"]
