from __future__ import annotations

__all__ = [
    "ChapterSource",
    "ChapterUnavailableError",
    "ContainerError",
    "Intent",
    "IntentKind",
    "Navigator",
    "PageView",
    "Position",
    "Viewport",
    "extract_text",
    "open_container",
    "paginate",
    "transition",
    "wrap_text",
]

from .container import ChapterUnavailableError, ContainerError, open_container
from .extractor import extract_text
from .navigator import Intent, IntentKind, Navigator, PageView, Position, transition
from .paginator import paginate
from .source import ChapterSource
from .viewport import Viewport
from .wrapper import wrap_text
