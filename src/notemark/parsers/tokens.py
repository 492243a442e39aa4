#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notemark/parsers/tokens.py
"""Flat token stream exchanged between the tokenizer and the tree builder.

Block structure is expressed with paired ``<name>_open`` / ``<name>_close``
tokens; everything else is a self-closing token. The ``nesting`` field
carries the direction: ``+1`` opens, ``-1`` closes, ``0`` stands alone.

Token vocabulary
----------------
Block pairs
    paragraph, heading, blockquote, bullet_list, ordered_list, list_item,
    table, thead, tbody, tr, th, td
Inline mark pairs
    strong, em, s, mark, link
Self-closing
    text, fence, hr, image, hardbreak, code_inline,
    task_marker, timestamp, note_link

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

OPEN_SUFFIX = "_open"
CLOSE_SUFFIX = "_close"


@dataclass
class Token:
    """A single entry of the token stream.

    Parameters
    ----------
    type : str
        Token type, e.g. ``"heading_open"`` or ``"text"``
    nesting : int, default = 0
        ``1`` for open tokens, ``-1`` for close tokens, ``0`` otherwise
    attrs : dict, default = empty dict
        Raw attributes (heading level, fence language, list start, ...)
    content : str, default = ""
        Text carried by text, fence and code_inline tokens

    """

    type: str
    nesting: int = 0
    attrs: dict[str, Any] = field(default_factory=dict)
    content: str = ""

    @property
    def tag(self) -> str:
        """Token name without its ``_open``/``_close`` suffix."""
        if self.nesting > 0 and self.type.endswith(OPEN_SUFFIX):
            return self.type[: -len(OPEN_SUFFIX)]
        if self.nesting < 0 and self.type.endswith(CLOSE_SUFFIX):
            return self.type[: -len(CLOSE_SUFFIX)]
        return self.type


TokenStream = list[Token]


def open_token(tag: str, **attrs: Any) -> Token:
    """Create the opening token of a ``tag`` pair."""
    return Token(f"{tag}{OPEN_SUFFIX}", nesting=1, attrs=attrs)


def close_token(tag: str) -> Token:
    """Create the closing token of a ``tag`` pair."""
    return Token(f"{tag}{CLOSE_SUFFIX}", nesting=-1)


def text_token(content: str) -> Token:
    """Create a plain text token."""
    return Token("text", content=content)
