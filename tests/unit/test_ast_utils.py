#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for tree traversal helpers and task state folding."""

import pytest

from notemark.ast.nodes import Node, TaskState, document, text_node
from notemark.ast.utils import (
    extract_text,
    is_completed_state,
    iter_inline_leaves,
    iter_nodes,
    normalize_task_state,
    task_keyword,
)


@pytest.mark.unit
class TestTraversal:
    """Test tree walks."""

    def test_iter_nodes_pre_order(self) -> None:
        tree = document(
            Node("heading", {"level": 1}, [text_node("a")]),
            Node("paragraph", content=[text_node("b")]),
        )

        assert [node.type for node in iter_nodes(tree)] == ["document", "heading", "text", "paragraph", "text"]

    def test_iter_inline_leaves_flattens_wrappers(self) -> None:
        """Unknown inline containers are replaced by their children."""
        nodes = [
            text_node("a"),
            Node("span", content=[text_node("b"), Node("hardBreak")]),
            Node("timestamp", {"time": "10:00"}),
        ]

        assert [node.type for node in iter_inline_leaves(nodes)] == ["text", "text", "hardBreak", "timestamp"]

    def test_extract_text(self) -> None:
        tree = document(
            Node("heading", {"level": 1}, [text_node("Title")]),
            Node("paragraph", content=[Node("taskMarker", {"state": "todo"}), text_node("call "), Node("noteLink", {"title": "Ana"})]),
        )

        assert extract_text(tree) == "TitleTODO call [[Ana]]"
        assert extract_text(tree, joiner="\n") == "Title\nTODO call [[Ana]]"


@pytest.mark.unit
class TestTaskStates:
    """Test task keyword and state folding."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("DONE", "done"),
            ("todo", "todo"),
            (" Doing ", "doing"),
            ("CANCELLED", "canceled"),
            ("canceled", "canceled"),
            ("later", None),
            (None, None),
            (3, None),
        ],
    )
    def test_normalize_task_state(self, value, expected) -> None:
        assert normalize_task_state(value) == expected

    def test_task_keyword(self) -> None:
        assert task_keyword("waiting") == "WAITING"
        assert task_keyword("cancelled") == "CANCELED"
        assert task_keyword("unknown") == "TODO"

    def test_completed_states(self) -> None:
        assert is_completed_state("done")
        assert is_completed_state("CANCELLED")
        assert not is_completed_state("hold")
        assert not is_completed_state(None)
        assert TaskState.DONE.is_completed
        assert TaskState.IDEA.keyword == "IDEA"
