from __future__ import annotations

import re
import textwrap
from typing import List

_SOFT_BREAK_RE = re.compile(r"(?<!\n)\n(?!\n)")


def normalize_text(text: str, *, tab_size: int = 4, reflow: bool = False) -> str:
    """
    Prepare extracted text for wrapping.

    Tabs become ``tab_size`` spaces and whitespace-only lines become empty.
    With ``reflow`` set, single newlines inside a paragraph are joined with a
    space so that only paragraph breaks survive. Blank lines at either end
    are dropped; blank lines between paragraphs are kept as they are.
    """
    if not text:
        return ""
    cleaned = text.replace("\r\n", "\n").replace("\r", "\n")
    cleaned = cleaned.replace("\t", " " * max(0, tab_size))
    cleaned = "\n".join("" if not line.strip() else line.rstrip() for line in cleaned.split("\n"))
    cleaned = cleaned.strip("\n")
    if reflow:
        cleaned = _SOFT_BREAK_RE.sub(" ", cleaned)
    return cleaned


def _wrap_paragraph(paragraph: str, width: int) -> List[str]:
    words = paragraph.split()
    if not words:
        return [""]
    return textwrap.wrap(
        " ".join(words),
        width=width,
        break_long_words=False,
        break_on_hyphens=False,
    )


def wrap_text(text: str, width: int) -> List[str]:
    """
    Wrap ``text`` into display lines no wider than ``width`` characters.

    Every ``\\n``-separated piece is wrapped on its own, so an empty piece
    between two breaks becomes one blank line. Words are never split: a word
    longer than ``width`` sits alone on an over-long line. Empty text and
    widths below one produce no lines.
    """
    if width < 1 or not text:
        return []
    lines: List[str] = []
    for paragraph in text.split("\n"):
        lines.extend(_wrap_paragraph(paragraph, width))
    return lines


__all__ = ["normalize_text", "wrap_text"]
