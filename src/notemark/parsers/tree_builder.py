#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notemark/parsers/tree_builder.py
"""Stack-based reduction of a token stream into a document tree.

The builder keeps a stack of in-progress block frames, starting with the
``document`` frame, and a separate stack of active inline marks. Block open
tokens push frames, close tokens pop them into their parent, and inline
tokens become leaves of the top frame carrying a copy of the mark stack.
Nesting depth therefore costs heap, not interpreter stack.

The builder never raises on content. Malformed streams are repaired:

- a close token closes the nearest open frame with the same tag, closing
  any frames opened above it first; a close with no matching open is ignored
- inline tokens arriving in a frame that only holds blocks get an implicit
  paragraph
- unknown open tokens push a transparent frame whose children are spliced
  into the parent
- frames still open at the end of the stream are closed in LIFO order

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from notemark.ast.nodes import CONTAINER_TYPES, TEXTBLOCK_TYPES, Mark, MarkType, Node, NodeType, document, text_node
from notemark.constants import DEFAULT_NOTE_TITLE, DEFAULT_TASK_STATE, DEFAULT_TIMESTAMP
from notemark.parsers.tokens import Token

logger = logging.getLogger(__name__)

AttrGetter = Callable[[Token], dict[str, Any]]


@dataclass(frozen=True)
class TokenSpec:
    """How the builder treats one token tag.

    Parameters
    ----------
    kind : {"block", "transparent", "mark", "node", "code", "text"}
        Role of the token
    node_type : str or None
        Node or mark type produced
    get_attrs : callable or None
        Builds attributes from the token

    """

    kind: str
    node_type: Optional[str] = None
    get_attrs: Optional[AttrGetter] = None

    def attrs_for(self, token: Token) -> dict[str, Any]:
        return self.get_attrs(token) if self.get_attrs else {}


def _heading_attrs(token: Token) -> dict[str, Any]:
    level = token.attrs.get("level", 1)
    return {"level": level if isinstance(level, int) and 1 <= level <= 6 else 1}


def _ordered_list_attrs(token: Token) -> dict[str, Any]:
    start = token.attrs.get("start", 1)
    return {"start": start if isinstance(start, int) else 1}


def _link_attrs(token: Token) -> dict[str, Any]:
    return {"href": token.attrs.get("href", ""), "title": token.attrs.get("title")}


def _image_attrs(token: Token) -> dict[str, Any]:
    return {
        "src": token.attrs.get("src", ""),
        "alt": token.attrs.get("alt", ""),
        "title": token.attrs.get("title"),
    }


def _task_marker_attrs(token: Token) -> dict[str, Any]:
    return {"state": token.attrs.get("state") or DEFAULT_TASK_STATE}


def _timestamp_attrs(token: Token) -> dict[str, Any]:
    return {"time": token.attrs.get("time") or DEFAULT_TIMESTAMP}


def _note_link_attrs(token: Token) -> dict[str, Any]:
    return {"title": token.attrs.get("title") or DEFAULT_NOTE_TITLE, "noteId": token.attrs.get("noteId")}


def _fence_attrs(token: Token) -> dict[str, Any]:
    return {"language": token.attrs.get("language") or None}


TOKEN_SPECS: dict[str, TokenSpec] = {
    # Blocks
    "paragraph": TokenSpec("block", NodeType.PARAGRAPH.value),
    "heading": TokenSpec("block", NodeType.HEADING.value, _heading_attrs),
    "blockquote": TokenSpec("block", NodeType.BLOCKQUOTE.value),
    "bullet_list": TokenSpec("block", NodeType.BULLET_LIST.value),
    "ordered_list": TokenSpec("block", NodeType.ORDERED_LIST.value, _ordered_list_attrs),
    "list_item": TokenSpec("block", NodeType.LIST_ITEM.value),
    "table": TokenSpec("block", NodeType.TABLE.value),
    "tr": TokenSpec("block", NodeType.TABLE_ROW.value),
    "th": TokenSpec("block", NodeType.TABLE_HEADER_CELL.value),
    "td": TokenSpec("block", NodeType.TABLE_DATA_CELL.value),
    "thead": TokenSpec("transparent"),
    "tbody": TokenSpec("transparent"),
    # Range-scoped marks
    "strong": TokenSpec("mark", MarkType.BOLD.value),
    "em": TokenSpec("mark", MarkType.ITALIC.value),
    "s": TokenSpec("mark", MarkType.STRIKE.value),
    "mark": TokenSpec("mark", MarkType.HIGHLIGHT.value),
    "link": TokenSpec("mark", MarkType.LINK.value, _link_attrs),
    # Token-scoped mark
    "code_inline": TokenSpec("code", MarkType.CODE.value),
    # Self-closing nodes
    "text": TokenSpec("text", NodeType.TEXT.value),
    "fence": TokenSpec("node", NodeType.CODE_BLOCK.value, _fence_attrs),
    "hr": TokenSpec("node", NodeType.HORIZONTAL_RULE.value),
    "image": TokenSpec("node", NodeType.IMAGE.value, _image_attrs),
    "hardbreak": TokenSpec("node", NodeType.HARD_BREAK.value),
    "task_marker": TokenSpec("node", NodeType.TASK_MARKER.value, _task_marker_attrs),
    "timestamp": TokenSpec("node", NodeType.TIMESTAMP.value, _timestamp_attrs),
    "note_link": TokenSpec("node", NodeType.NOTE_LINK.value, _note_link_attrs),
}

# Self-closing nodes that belong at block level
_BLOCK_NODE_TYPES = frozenset({NodeType.CODE_BLOCK.value, NodeType.HORIZONTAL_RULE.value})

# Inline nodes that do not take part in mark nesting
_MARK_NEUTRAL_TYPES = frozenset({NodeType.HARD_BREAK.value})


@dataclass
class _Frame:
    tag: str
    type: Optional[str]
    attrs: dict[str, Any] = field(default_factory=dict)
    content: list[Node] = field(default_factory=list)
    transparent: bool = False
    implicit: bool = False


class TreeBuilder:
    """Build a document tree from a token stream.

    A builder holds state only for the duration of ``build``; the same
    instance can be reused for any number of streams.

    Examples
    --------
        >>> from notemark.parsers.tokens import open_token, close_token, text_token
        >>> doc = TreeBuilder().build([open_token("paragraph"), text_token("hi"), close_token("paragraph")])
        >>> doc.content[0].content[0].text
        'hi'

    """

    def __init__(self) -> None:
        """Initialize empty stacks."""
        self._frames: list[_Frame] = []
        self._marks: list[Mark] = []

    def build(self, tokens: Iterable[Token]) -> Node:
        """Reduce ``tokens`` to a ``document`` node.

        Parameters
        ----------
        tokens : iterable of Token
            Token stream from the tokenizer

        Returns
        -------
        Node
            Root document node

        """
        self._frames = [_Frame(tag="document", type=NodeType.DOCUMENT.value)]
        self._marks = []

        for token in tokens:
            if token.nesting > 0:
                self._open(token)
            elif token.nesting < 0:
                self._close(token)
            else:
                self._leaf(token)

        if len(self._frames) > 1:
            logger.debug("Force-closing %d frames left open at end of stream", len(self._frames) - 1)
        while len(self._frames) > 1:
            self._pop_frame()

        root = self._frames[0]
        self._frames = []
        self._marks = []
        return document(*root.content)

    # ------------------------------------------------------------------
    # Stack operations
    # ------------------------------------------------------------------

    def _nearest_typed_frame(self) -> _Frame:
        """Return the top frame that produces a node (skipping transparent ones)."""
        for frame in reversed(self._frames):
            if not frame.transparent:
                return frame
        return self._frames[0]

    def _pop_frame(self) -> None:
        frame = self._frames.pop()
        parent = self._frames[-1]
        if frame.type in TEXTBLOCK_TYPES and self._marks:
            logger.debug("Dropping %d unclosed marks at end of %s", len(self._marks), frame.type)
            self._marks = []
        if frame.transparent or frame.type is None:
            parent.content.extend(frame.content)
            return
        parent.content.append(Node(type=frame.type, attrs=frame.attrs, content=frame.content))

    def _close_textblock(self) -> None:
        """Close an open paragraph or heading before block-level content."""
        while len(self._frames) > 1 and self._nearest_typed_frame().type in TEXTBLOCK_TYPES:
            frame = self._nearest_typed_frame()
            if not frame.implicit:
                logger.debug("Closing %s interrupted by block content", frame.type)
            while self._frames[-1] is not frame:
                self._pop_frame()
            self._pop_frame()

    def _inline_target(self) -> _Frame:
        """Return the frame inline content goes to, opening a paragraph if needed."""
        if self._nearest_typed_frame().type in CONTAINER_TYPES:
            logger.debug("Wrapping inline content in an implicit paragraph")
            self._frames.append(
                _Frame(tag="paragraph", type=NodeType.PARAGRAPH.value, implicit=True),
            )
        return self._frames[-1]

    # ------------------------------------------------------------------
    # Token handlers
    # ------------------------------------------------------------------

    def _open(self, token: Token) -> None:
        spec = TOKEN_SPECS.get(token.tag)

        if spec is None:
            logger.debug("Unknown open token %r; keeping its children", token.type)
            self._frames.append(_Frame(tag=token.tag, type=None, transparent=True))
            return

        if spec.kind == "mark":
            self._inline_target()
            self._marks.append(Mark(type=str(spec.node_type), attrs=spec.attrs_for(token) or None))
            return

        if spec.kind == "transparent":
            self._frames.append(_Frame(tag=token.tag, type=None, transparent=True))
            return

        self._close_textblock()
        self._frames.append(_Frame(tag=token.tag, type=spec.node_type, attrs=spec.attrs_for(token)))

    def _close(self, token: Token) -> None:
        spec = TOKEN_SPECS.get(token.tag)

        if spec is not None and spec.kind == "mark":
            for index in range(len(self._marks) - 1, -1, -1):
                if self._marks[index].type == spec.node_type:
                    del self._marks[index]
                    return
            logger.debug("Ignoring unmatched mark close %r", token.type)
            return

        for index in range(len(self._frames) - 1, 0, -1):
            if self._frames[index].tag == token.tag:
                if index < len(self._frames) - 1:
                    logger.debug("Force-closing %d frames inside %r", len(self._frames) - 1 - index, token.tag)
                while len(self._frames) > index:
                    self._pop_frame()
                return

        logger.debug("Ignoring unmatched close token %r", token.type)

    def _leaf(self, token: Token) -> None:
        spec = TOKEN_SPECS.get(token.type)

        if spec is None:
            logger.debug("Skipping unknown token %r", token.type)
            return

        if spec.kind == "text":
            if token.content:
                self._inline_target().content.append(text_node(token.content, self._copy_marks()))
            return

        if spec.kind == "code":
            if token.content:
                marks = self._copy_marks() + [Mark(type=MarkType.CODE.value)]
                self._inline_target().content.append(text_node(token.content, marks))
            return

        if spec.node_type == NodeType.CODE_BLOCK.value:
            self._close_textblock()
            code = token.content[:-1] if token.content.endswith("\n") else token.content
            content = [text_node(code)] if code else []
            self._frames[-1].content.append(Node(type=spec.node_type, attrs=spec.attrs_for(token), content=content))
            return

        if spec.node_type in _BLOCK_NODE_TYPES:
            self._close_textblock()
            self._frames[-1].content.append(Node(type=str(spec.node_type), attrs=spec.attrs_for(token)))
            return

        marks = [] if spec.node_type in _MARK_NEUTRAL_TYPES else self._copy_marks()
        self._inline_target().content.append(Node(type=str(spec.node_type), attrs=spec.attrs_for(token), marks=marks))

    def _copy_marks(self) -> list[Mark]:
        return [mark.copy() for mark in self._marks]


def build_tree(tokens: Iterable[Token]) -> Node:
    """Build a document tree from a token stream with a fresh ``TreeBuilder``."""
    return TreeBuilder().build(tokens)
