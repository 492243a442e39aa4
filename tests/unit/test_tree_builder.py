#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the stack-based tree builder."""

import pytest

from notemark.ast.nodes import Mark
from notemark.parsers.tokens import Token, close_token, open_token, text_token
from notemark.parsers.tree_builder import TreeBuilder, build_tree


def _paragraph(*inner: Token) -> list[Token]:
    return [open_token("paragraph"), *inner, close_token("paragraph")]


@pytest.mark.unit
class TestWellFormedStreams:
    """Test reduction of well-formed token streams."""

    def test_empty_stream_gives_empty_document(self) -> None:
        """No tokens build an empty document."""
        doc = build_tree([])

        assert doc.type == "document"
        assert doc.content == []

    def test_heading_level(self) -> None:
        """Heading attributes come from the open token."""
        doc = build_tree([open_token("heading", level=3), text_token("Title"), close_token("heading")])

        heading = doc.content[0]
        assert heading.type == "heading"
        assert heading.attrs == {"level": 3}
        assert heading.content[0].text == "Title"

    def test_out_of_range_heading_level_falls_back(self) -> None:
        """Levels outside 1-6 become 1."""
        doc = build_tree([open_token("heading", level=9), text_token("x"), close_token("heading")])

        assert doc.content[0].attrs == {"level": 1}

    def test_marks_are_ordered_outermost_first(self) -> None:
        """Nested mark pairs stack onto the text in opening order."""
        doc = build_tree(
            _paragraph(
                open_token("strong"),
                open_token("em"),
                text_token("both"),
                close_token("em"),
                text_token(" bold"),
                close_token("strong"),
            )
        )

        first, second = doc.content[0].content
        assert [m.type for m in first.marks] == ["bold", "italic"]
        assert [m.type for m in second.marks] == ["bold"]

    def test_link_mark_attrs(self) -> None:
        """Link marks carry href and title."""
        doc = build_tree(_paragraph(open_token("link", href="https://x.org", title=None), text_token("x"), close_token("link")))

        assert doc.content[0].content[0].marks == [Mark("link", {"href": "https://x.org", "title": None})]

    def test_code_inline_is_token_scoped(self) -> None:
        """Code marks apply only to their own token, innermost."""
        doc = build_tree(
            _paragraph(open_token("strong"), Token("code_inline", content="x"), text_token(" y"), close_token("strong"))
        )

        code, text = doc.content[0].content
        assert [m.type for m in code.marks] == ["bold", "code"]
        assert [m.type for m in text.marks] == ["bold"]

    def test_atomic_entities(self) -> None:
        """Entity tokens become atomic inline nodes with their attributes."""
        doc = build_tree(
            _paragraph(
                Token("task_marker", attrs={"state": "done"}),
                Token("timestamp", attrs={"time": "09:30"}),
                Token("note_link", attrs={"title": "Plan"}),
            )
        )

        marker, timestamp, link = doc.content[0].content
        assert (marker.type, marker.attrs) == ("taskMarker", {"state": "done"})
        assert (timestamp.type, timestamp.attrs) == ("timestamp", {"time": "09:30"})
        assert (link.type, link.attrs) == ("noteLink", {"title": "Plan", "noteId": None})

    def test_entity_attribute_defaults(self) -> None:
        """Missing entity attributes get their defaults."""
        doc = build_tree(_paragraph(Token("task_marker"), Token("timestamp"), Token("note_link")))

        marker, timestamp, link = doc.content[0].content
        assert marker.attrs == {"state": "todo"}
        assert timestamp.attrs == {"time": "00:00"}
        assert link.attrs["title"] == "Unknown"

    def test_hard_break_carries_no_marks(self) -> None:
        """Hard breaks inside marked text do not take the marks."""
        doc = build_tree(
            _paragraph(open_token("strong"), text_token("a"), Token("hardbreak"), text_token("b"), close_token("strong"))
        )

        assert doc.content[0].content[1].type == "hardBreak"
        assert doc.content[0].content[1].marks == []

    def test_code_block(self) -> None:
        """Fences become codeBlock nodes with one trailing newline removed."""
        doc = build_tree([Token("fence", attrs={"language": "py"}, content="x = 1\n")])

        block = doc.content[0]
        assert block.type == "codeBlock"
        assert block.attrs == {"language": "py"}
        assert block.content[0].text == "x = 1"

    def test_empty_code_block_has_no_content(self) -> None:
        """An empty fence produces a codeBlock without children."""
        doc = build_tree([Token("fence", attrs={"language": None}, content="")])

        assert doc.content[0].content == []

    def test_table_head_and_body_are_transparent(self) -> None:
        """thead/tbody add no nodes; rows attach directly to the table."""
        tokens = [
            open_token("table"),
            open_token("thead"),
            open_token("tr"),
            open_token("th"),
            *_paragraph(text_token("h")),
            close_token("th"),
            close_token("tr"),
            close_token("thead"),
            open_token("tbody"),
            open_token("tr"),
            open_token("td"),
            *_paragraph(text_token("d")),
            close_token("td"),
            close_token("tr"),
            close_token("tbody"),
            close_token("table"),
        ]
        table = build_tree(tokens).content[0]

        assert [row.type for row in table.content] == ["tableRow", "tableRow"]
        assert table.content[0].content[0].type == "tableHeaderCell"
        assert table.content[1].content[0].type == "tableDataCell"
        assert table.content[1].content[0].content[0].type == "paragraph"


@pytest.mark.unit
class TestMalformedStreams:
    """Test that malformed streams are repaired rather than rejected."""

    def test_unmatched_close_is_ignored(self) -> None:
        """A close token without an open leaves the tree unchanged."""
        doc = build_tree([close_token("blockquote"), *_paragraph(text_token("x"))])

        assert [node.type for node in doc.content] == ["paragraph"]

    def test_unclosed_frames_are_closed_at_end(self) -> None:
        """Frames left open at the end of the stream are closed in LIFO order."""
        doc = build_tree([open_token("blockquote"), open_token("paragraph"), text_token("x")])

        quote = doc.content[0]
        assert quote.type == "blockquote"
        assert quote.content[0].type == "paragraph"
        assert quote.content[0].content[0].text == "x"

    def test_close_force_closes_inner_frames(self) -> None:
        """Closing an outer frame closes the frames opened inside it."""
        doc = build_tree(
            [open_token("blockquote"), open_token("paragraph"), text_token("x"), close_token("blockquote"), *_paragraph(text_token("y"))]
        )

        assert [node.type for node in doc.content] == ["blockquote", "paragraph"]
        assert doc.content[0].content[0].content[0].text == "x"

    def test_inline_at_container_level_gets_implicit_paragraph(self) -> None:
        """Text directly inside a list item is wrapped in a paragraph."""
        doc = build_tree([open_token("bullet_list"), open_token("list_item"), text_token("x"), close_token("list_item"), close_token("bullet_list")])

        item = doc.content[0].content[0]
        assert item.type == "listItem"
        assert item.content[0].type == "paragraph"
        assert item.content[0].content[0].text == "x"

    def test_bare_text_at_document_level(self) -> None:
        """Text with no block around it becomes a paragraph."""
        doc = build_tree([text_token("loose")])

        assert doc.content[0].type == "paragraph"

    def test_block_interrupts_open_paragraph(self) -> None:
        """A block token closes an open paragraph first."""
        doc = build_tree([open_token("paragraph"), text_token("x"), Token("hr"), close_token("paragraph")])

        assert [node.type for node in doc.content] == ["paragraph", "horizontalRule"]

    def test_unknown_open_token_keeps_children(self) -> None:
        """Unknown wrappers are transparent."""
        doc = build_tree([open_token("section"), *_paragraph(text_token("kept")), close_token("section")])

        assert [node.type for node in doc.content] == ["paragraph"]
        assert doc.content[0].content[0].text == "kept"

    def test_unknown_self_closing_token_is_skipped(self) -> None:
        """Unknown leaves are dropped."""
        doc = build_tree(_paragraph(Token("sparkle"), text_token("x")))

        assert [node.type for node in doc.content[0].content] == ["text"]

    def test_unclosed_mark_is_dropped_at_paragraph_end(self) -> None:
        """Marks do not leak out of the paragraph that opened them."""
        doc = build_tree([*_paragraph(open_token("strong"), text_token("a")), *_paragraph(text_token("b"))])

        assert [m.type for m in doc.content[0].content[0].marks] == ["bold"]
        assert doc.content[1].content[0].marks == []

    def test_unmatched_mark_close_is_ignored(self) -> None:
        """Closing a mark that is not open changes nothing."""
        doc = build_tree(_paragraph(close_token("em"), text_token("x")))

        assert doc.content[0].content[0].marks == []

    def test_deep_nesting_does_not_recurse(self) -> None:
        """Thousands of nested blockquotes build without hitting the recursion limit."""
        depth = 5000
        tokens = [open_token("blockquote")] * depth + _paragraph(text_token("deep")) + [close_token("blockquote")] * depth
        node = build_tree(tokens)

        for _ in range(depth):
            node = node.content[0]
            assert node.type == "blockquote"
        assert node.content[0].content[0].text == "deep"

    def test_builder_is_reusable(self) -> None:
        """State is reset between builds."""
        builder = TreeBuilder()
        builder.build([open_token("blockquote"), open_token("strong")])
        doc = builder.build(_paragraph(text_token("fresh")))

        assert [node.type for node in doc.content] == ["paragraph"]
        assert doc.content[0].content[0].marks == []
