#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notemark/ast/utils.py
"""Traversal helpers for document trees.

All walks here use an explicit stack so that deeply nested user documents
cannot exhaust the interpreter's call stack.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional

from notemark.ast.nodes import INLINE_TYPES, Node, NodeType, TaskState
from notemark.constants import TASK_KEYWORD_ALIASES


def iter_nodes(root: Node) -> Iterator[Node]:
    """Yield ``root`` and all of its descendants in document order.

    Parameters
    ----------
    root : Node
        Node to start from

    Yields
    ------
    Node
        Nodes in pre-order

    """
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.content))


def iter_inline_leaves(nodes: list[Node]) -> Iterator[Node]:
    """Yield the inline leaves of ``nodes``, descending into unknown wrappers.

    Known inline nodes are yielded as they are. Any other node is replaced by
    its children, so foreign inline containers (and paragraphs nested inside
    table cells) flatten into a single run.

    Parameters
    ----------
    nodes : list of Node
        Inline content of a block

    Yields
    ------
    Node
        Text and atomic inline nodes in order

    """
    stack: list[Iterator[Node]] = [iter(nodes)]
    while stack:
        node = next(stack[-1], None)
        if node is None:
            stack.pop()
            continue
        if node.type in INLINE_TYPES:
            yield node
        elif node.content:
            stack.append(iter(node.content))


def extract_text(node: Node, joiner: str = "") -> str:
    """Return the plain text of ``node``, ignoring marks.

    Atomic inline nodes contribute their markup spelling so that, for example,
    a task marker reads as ``TODO``.

    Parameters
    ----------
    node : Node
        Node to extract from
    joiner : str, default ""
        String placed between text-bearing blocks

    Returns
    -------
    str
        Concatenated text

    """
    parts: list[str] = []
    for current in iter_nodes(node):
        kind = current.kind
        if kind is NodeType.TEXT and isinstance(current.text, str):
            parts.append(current.text)
        elif kind is NodeType.TASK_MARKER:
            parts.append(task_keyword(current.attrs.get("state")) + " ")
        elif kind is NodeType.TIMESTAMP:
            parts.append(f"[{current.attr('time', '00:00')}]")
        elif kind is NodeType.NOTE_LINK:
            parts.append(f"[[{current.attr('title', '')}]]")
        elif kind is NodeType.HARD_BREAK:
            parts.append("\n")
        elif kind in (NodeType.PARAGRAPH, NodeType.HEADING) and parts and joiner:
            parts.append(joiner)
    return "".join(parts)


def normalize_task_state(value: Any) -> Optional[str]:
    """Fold a task keyword or state value onto a ``TaskState`` value.

    Parameters
    ----------
    value : Any
        Keyword as written (``"DONE"``, ``"Cancelled"``) or a state value

    Returns
    -------
    str or None
        Canonical lowercase state, or None when ``value`` is not a known state

    """
    if not isinstance(value, str):
        return None
    lowered = value.strip().lower()
    lowered = TASK_KEYWORD_ALIASES.get(lowered, lowered)
    try:
        return TaskState(lowered).value
    except ValueError:
        return None


def task_keyword(state: Any) -> str:
    """Return the markup keyword for ``state``; unknown states read as ``TODO``."""
    normalized = normalize_task_state(state)
    return (normalized or TaskState.TODO.value).upper()


def is_completed_state(state: Any) -> bool:
    """Whether ``state`` is one of the finished task states (done, canceled)."""
    normalized = normalize_task_state(state)
    return normalized is not None and TaskState(normalized).is_completed
