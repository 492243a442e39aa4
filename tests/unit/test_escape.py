#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for markup escaping helpers."""

import pytest

from notemark.utils.escape import (
    code_span,
    escape_brackets,
    escape_line_start,
    escape_link_title,
    escape_markdown_text,
    escape_table_pipes,
    format_link_destination,
)


@pytest.mark.unit
class TestEscapeLineStart:
    """Test escaping of block syntax at line starts."""

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("# not a heading", "\\# not a heading"),
            ("###", "\\###"),
            ("> not a quote", "\\> not a quote"),
            ("- not an item", "\\- not an item"),
            ("+ not an item", "\\+ not an item"),
            ("1986. A great year", "1986\\. A great year"),
            ("3) three", "3\\) three"),
            ("---", "\\---"),
            ("===", "\\==="),
            ("[ref]: /url", "\\[ref]: /url"),
        ],
    )
    def test_block_syntax_is_escaped(self, line: str, expected: str) -> None:
        assert escape_line_start(line) == expected

    @pytest.mark.parametrize("line", ["plain text", "#hashtag", "-dash", "2024 was busy", "[09:30] standup"])
    def test_safe_lines_are_unchanged(self, line: str) -> None:
        assert escape_line_start(line) == line

    def test_leading_whitespace_is_removed(self) -> None:
        """Indentation would otherwise start a code block."""
        assert escape_line_start("    indented") == "indented"
        assert escape_line_start("   # heading") == "\\# heading"


@pytest.mark.unit
class TestEscapeMarkdownText:
    """Test context-aware inline escaping."""

    def test_always_escaped_characters(self) -> None:
        assert escape_markdown_text("a*b`c\\d") == "a\\*b\\`c\\\\d"

    def test_intraword_underscore_is_kept(self) -> None:
        assert escape_markdown_text("snake_case") == "snake_case"
        assert escape_markdown_text("_private") == "\\_private"

    def test_doubled_strike_and_highlight(self) -> None:
        """Doubled and edge ``~``/``=`` are escaped; single inner ones are not."""
        assert escape_markdown_text("~~not struck~~") == "\\~\\~not struck\\~\\~"
        assert escape_markdown_text("a == b") == "a \\=\\= b"
        assert escape_markdown_text("2 * 3 = 6") == "2 \\* 3 = 6"

    def test_closing_bracket_before_parenthesis(self) -> None:
        assert escape_markdown_text("[a](b)") == "[a\\](b)"
        assert escape_markdown_text("[a]") == "[a]"

    def test_brackets_in_link_text(self) -> None:
        assert escape_markdown_text("[a]", in_link=True) == "\\[a\\]"

    def test_html_and_entities(self) -> None:
        assert escape_markdown_text("<div>") == "\\<div>"
        assert escape_markdown_text("a < b") == "a < b"
        assert escape_markdown_text("&amp;") == "\\&amp;"
        assert escape_markdown_text("R&D") == "R&D"

    def test_table_pipes(self) -> None:
        assert escape_markdown_text("a|b") == "a|b"
        assert escape_markdown_text("a|b", in_table=True) == "a\\|b"

    def test_line_start(self) -> None:
        assert escape_markdown_text("# h", at_line_start=True) == "\\# h"
        assert escape_markdown_text("# h") == "# h"

    def test_empty(self) -> None:
        assert escape_markdown_text("") == ""


@pytest.mark.unit
class TestCodeAndLinks:
    """Test code span and link part formatting."""

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("print()", "`print()`"),
            ("a `tick`", "`` a `tick` ``"),
            ("``", "``` `` ```"),
            (" x ", "`  x  `"),
            ("a\nb", "`a b`"),
        ],
    )
    def test_code_span(self, code: str, expected: str) -> None:
        assert code_span(code) == expected

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://example.com", "https://example.com"),
            ("", "<>"),
            ("my file.png", "<my file.png>"),
            ("wiki/A_(b)", "wiki/A_(b)"),
            ("a)b", "<a)b>"),
        ],
    )
    def test_link_destination(self, url: str, expected: str) -> None:
        assert format_link_destination(url) == expected

    def test_link_title(self) -> None:
        assert escape_link_title('say "hi"') == 'say \\"hi\\"'

    def test_brackets(self) -> None:
        assert escape_brackets("[a]\\") == "\\[a\\]\\\\"

    def test_table_pipes(self) -> None:
        assert escape_table_pipes("a | b") == "a \\| b"
