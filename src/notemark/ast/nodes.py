#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notemark/ast/nodes.py
"""Document tree node classes.

This module defines the structure exchanged with the editing surface: a
single generic ``Node`` carrying a type discriminator, attributes, children,
and (for text nodes) the text itself plus its ordered marks.

Node Kinds
----------
The set of node types is closed and modelled by ``NodeType``:

Block nodes represent structural document elements:
    - document, paragraph, heading, blockquote, codeBlock, horizontalRule
    - bulletList, orderedList, taskList, listItem, taskItem
    - table, tableRow, tableHeaderCell, tableDataCell

Inline nodes live inside a block's ``content``:
    - text (with marks)
    - hardBreak, image, taskMarker, timestamp, noteLink (atomic)

Marks are inline styles applied to text runs, recorded outermost-first:
    - bold, italic, strike, code, highlight, link

Trees coming from other editors may contain types outside these enums; they
are kept as plain strings so that the serializer can still walk them.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class NodeType(str, Enum):
    """Closed set of node types understood by the converter."""

    DOCUMENT = "document"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BULLET_LIST = "bulletList"
    ORDERED_LIST = "orderedList"
    TASK_LIST = "taskList"
    LIST_ITEM = "listItem"
    TASK_ITEM = "taskItem"
    BLOCKQUOTE = "blockquote"
    CODE_BLOCK = "codeBlock"
    TABLE = "table"
    TABLE_ROW = "tableRow"
    TABLE_HEADER_CELL = "tableHeaderCell"
    TABLE_DATA_CELL = "tableDataCell"
    HORIZONTAL_RULE = "horizontalRule"
    TEXT = "text"
    HARD_BREAK = "hardBreak"
    IMAGE = "image"
    TASK_MARKER = "taskMarker"
    TIMESTAMP = "timestamp"
    NOTE_LINK = "noteLink"

    @classmethod
    def lookup(cls, value: str) -> Optional[NodeType]:
        """Return the enum member for ``value``, or None for foreign types."""
        try:
            return cls(value)
        except ValueError:
            return None


class MarkType(str, Enum):
    """Inline styles that can be applied to a text run."""

    BOLD = "bold"
    ITALIC = "italic"
    STRIKE = "strike"
    CODE = "code"
    HIGHLIGHT = "highlight"
    LINK = "link"


class TaskState(str, Enum):
    """States a task item or task marker can be in."""

    TODO = "todo"
    DOING = "doing"
    WAITING = "waiting"
    HOLD = "hold"
    DONE = "done"
    CANCELED = "canceled"
    IDEA = "idea"

    @property
    def is_completed(self) -> bool:
        """Whether the state counts as finished work."""
        return self.value in COMPLETED_TASK_STATES

    @property
    def keyword(self) -> str:
        """Keyword spelling used in markup."""
        return self.value.upper()


COMPLETED_TASK_STATES = frozenset({TaskState.DONE.value, TaskState.CANCELED.value})


def _values(*types: NodeType) -> frozenset[str]:
    return frozenset(t.value for t in types)


# Type sets hold plain strings so they can be tested against Node.type directly
LIST_TYPES = _values(NodeType.BULLET_LIST, NodeType.ORDERED_LIST, NodeType.TASK_LIST)
LIST_ITEM_TYPES = _values(NodeType.LIST_ITEM, NodeType.TASK_ITEM)
TABLE_CELL_TYPES = _values(NodeType.TABLE_HEADER_CELL, NodeType.TABLE_DATA_CELL)

# Blocks whose content is inline nodes
TEXTBLOCK_TYPES = _values(NodeType.PARAGRAPH, NodeType.HEADING, NodeType.CODE_BLOCK)

# Blocks whose content is other blocks
CONTAINER_TYPES = (
    _values(NodeType.DOCUMENT, NodeType.BLOCKQUOTE, NodeType.TABLE, NodeType.TABLE_ROW)
    | LIST_TYPES
    | LIST_ITEM_TYPES
    | TABLE_CELL_TYPES
)

ATOMIC_TYPES = _values(
    NodeType.TASK_MARKER,
    NodeType.TIMESTAMP,
    NodeType.NOTE_LINK,
    NodeType.IMAGE,
    NodeType.HARD_BREAK,
    NodeType.HORIZONTAL_RULE,
)

INLINE_TYPES = _values(
    NodeType.TEXT,
    NodeType.HARD_BREAK,
    NodeType.IMAGE,
    NodeType.TASK_MARKER,
    NodeType.TIMESTAMP,
    NodeType.NOTE_LINK,
)


@dataclass
class Mark:
    """Inline style applied to a text run.

    Parameters
    ----------
    type : str
        Mark type (see ``MarkType``)
    attrs : dict or None, default = None
        Mark attributes; only links carry any (``href``, ``title``)

    """

    type: str
    attrs: Optional[dict[str, Any]] = None

    def copy(self) -> Mark:
        """Return an independent copy of this mark."""
        return Mark(type=self.type, attrs=dict(self.attrs) if self.attrs is not None else None)


@dataclass
class Node:
    """A node of the document tree.

    Parameters
    ----------
    type : str
        Node type discriminator (see ``NodeType``)
    attrs : dict, default = empty dict
        Semantic attributes such as heading ``level`` or codeBlock ``language``
    content : list of Node, default = empty list
        Child nodes; empty for leaves and atomic nodes
    text : str or None, default = None
        Text of a ``text`` node
    marks : list of Mark, default = empty list
        Styles applied to a ``text`` (or atomic inline) node, outermost first

    Examples
    --------
        >>> doc = Node("document", content=[
        ...     Node("heading", attrs={"level": 1}, content=[Node("text", text="Title")]),
        ... ])
        >>> doc.content[0].attrs["level"]
        1

    """

    type: str
    attrs: dict[str, Any] = field(default_factory=dict)
    content: list[Node] = field(default_factory=list)
    text: Optional[str] = None
    marks: list[Mark] = field(default_factory=list)

    @property
    def kind(self) -> Optional[NodeType]:
        """The ``NodeType`` of this node, or None for a foreign type."""
        return NodeType.lookup(self.type)

    def attr(self, name: str, default: Any = None) -> Any:
        """Return attribute ``name``, treating an explicit None as missing."""
        value = self.attrs.get(name)
        return default if value is None else value


def text_node(text: str, marks: Optional[list[Mark]] = None) -> Node:
    """Create a text node with an optional mark list."""
    return Node(NodeType.TEXT.value, text=text, marks=list(marks or []))


def document(*children: Node) -> Node:
    """Create a document node from block children."""
    return Node(NodeType.DOCUMENT.value, content=list(children))
