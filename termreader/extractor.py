from __future__ import annotations

import logging
from dataclasses import dataclass
from html.parser import HTMLParser
from typing import Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "\n\n"

_BLOCK_LEVEL_TAGS = {
    "br",
    "div",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "li",
    "p",
}

# Text inside these elements is never shown on a page.
_HIDDEN_TAGS = {
    "head",
    "script",
    "style",
    "title",
}


@dataclass(frozen=True)
class BlockOpen:
    """Opening tag of an element that starts a new block."""

    tag: str


@dataclass(frozen=True)
class Text:
    """Character data in document order."""

    content: str


@dataclass(frozen=True)
class Other:
    """Any token the extractor does not act on."""

    description: str = ""


Token = Union[BlockOpen, Text, Other]


class _MarkupTokenizer(HTMLParser):
    """Turn chapter markup into a flat token list."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.tokens: List[Token] = []
        self._hidden_depth = 0

    def handle_starttag(self, tag: str, attrs: List[tuple[str, Optional[str]]]) -> None:
        name = _local_name(tag)
        if name in _HIDDEN_TAGS:
            self._hidden_depth += 1
            self.tokens.append(Other(f"<{name}>"))
            return
        self.tokens.append(self._classify(name))

    def handle_startendtag(self, tag: str, attrs: List[tuple[str, Optional[str]]]) -> None:
        # Self-closing elements (<br/>, <p/>) never affect the hidden depth.
        self.tokens.append(self._classify(_local_name(tag)))

    def handle_endtag(self, tag: str) -> None:
        name = _local_name(tag)
        if name in _HIDDEN_TAGS and self._hidden_depth:
            self._hidden_depth -= 1
        self.tokens.append(Other(f"</{name}>"))

    def handle_data(self, data: str) -> None:
        if not data:
            return
        if self._hidden_depth:
            self.tokens.append(Other("hidden text"))
            return
        self.tokens.append(Text(data))

    @staticmethod
    def _classify(name: str) -> Token:
        if name in _BLOCK_LEVEL_TAGS:
            return BlockOpen(name)
        return Other(f"<{name}>")


def _local_name(tag: str) -> str:
    """Drop any namespace prefix (``xhtml:p`` -> ``p``) and lowercase the name."""
    if ":" in tag:
        tag = tag.split(":", 1)[1]
    return tag.lower()


def _decode(markup: Union[bytes, str]) -> str:
    if isinstance(markup, bytes):
        return markup.decode("utf-8", errors="ignore")
    return markup


def tokenize(markup: Union[bytes, str]) -> List[Token]:
    """
    Return the token stream for ``markup``.

    Parsing is best effort: if the parser gives up part way through, the tokens
    recovered so far are returned and the failure is logged.
    """
    tokenizer = _MarkupTokenizer()
    try:
        tokenizer.feed(_decode(markup))
        tokenizer.close()
    except (AssertionError, ValueError) as exc:
        logger.warning(
            "Markup parse stopped after %d tokens: %s", len(tokenizer.tokens), exc
        )
    return tokenizer.tokens


def fold_tokens(tokens: Iterable[Token]) -> str:
    """Concatenate text tokens, inserting a block separator at each block opening."""
    parts: List[str] = []
    for token in tokens:
        if isinstance(token, BlockOpen):
            parts.append(BLOCK_SEPARATOR)
        elif isinstance(token, Text):
            parts.append(token.content)
    return "".join(parts)


def extract_text(markup: Union[bytes, str]) -> str:
    """Extract displayable text from chapter markup with paragraph breaks."""
    return fold_tokens(tokenize(markup))


__all__ = [
    "BLOCK_SEPARATOR",
    "BlockOpen",
    "Other",
    "Text",
    "Token",
    "extract_text",
    "fold_tokens",
    "tokenize",
]
