#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for markup parsing and serialization.

This module defines the options that control which custom inline entities
the tokenizer recognizes and how the serializer spells its output.
"""
# src/notemark/options/markdown.py


from __future__ import annotations

from dataclasses import dataclass, field

from notemark.constants import (
    DEFAULT_ALTERNATE_BULLET_SYMBOL,
    DEFAULT_BULLET_SYMBOL,
    DEFAULT_CODE_FENCE_CHAR,
    DEFAULT_CODE_FENCE_MIN,
    DEFAULT_COLLAPSE_BLANK_LINES,
    DEFAULT_EMPHASIS_SYMBOL,
    DEFAULT_ESCAPE_SPECIAL,
    DEFAULT_PARSE_HIGHLIGHT,
    DEFAULT_PARSE_STRIKETHROUGH,
    DEFAULT_PARSE_TABLES,
    DEFAULT_RECOGNIZE_NOTE_LINKS,
    DEFAULT_RECOGNIZE_TASK_MARKERS,
    DEFAULT_RECOGNIZE_TIMESTAMPS,
    DEFAULT_REWRITE_ASSET_PATHS,
    DEFAULT_SOFT_BREAKS_AS_HARD,
    DEFAULT_TABLE_PIPE_ESCAPE,
    DEFAULT_TASK_MARKERS_CASE_SENSITIVE,
    DEFAULT_TRAILING_NEWLINE,
    BulletSymbol,
    CodeFenceChar,
    EmphasisSymbol,
)
from notemark.options.base import BaseParserOptions, BaseSerializerOptions


@dataclass(frozen=True)
class MarkdownParserOptions(BaseParserOptions):
    """Configuration options for markup-to-tree parsing.

    Parameters
    ----------
    recognize_task_markers : bool, default True
        Split task keywords (TODO, DONE, ...) out of text runs as taskMarker nodes.
    recognize_timestamps : bool, default True
        Split ``[HH:MM]`` out of text runs as timestamp nodes.
    recognize_note_links : bool, default True
        Split ``[[title]]`` out of text runs as noteLink nodes.
    task_markers_case_sensitive : bool, default False
        Only match task keywords written in upper case.
    parse_tables : bool, default True
        Parse pipe tables.
    parse_strikethrough : bool, default True
        Parse ``~~strike~~``.
    parse_highlight : bool, default True
        Parse ``==highlight==``.
    soft_breaks_as_hard : bool, default True
        Turn single newlines inside a paragraph into hardBreak nodes.

    """

    recognize_task_markers: bool = field(
        default=DEFAULT_RECOGNIZE_TASK_MARKERS,
        metadata={"help": "Recognize task keywords (TODO, DOING, DONE, ...) as task markers", "importance": "core"},
    )
    recognize_timestamps: bool = field(
        default=DEFAULT_RECOGNIZE_TIMESTAMPS,
        metadata={"help": "Recognize [HH:MM] timestamps", "importance": "core"},
    )
    recognize_note_links: bool = field(
        default=DEFAULT_RECOGNIZE_NOTE_LINKS,
        metadata={"help": "Recognize [[title]] note links", "importance": "core"},
    )
    task_markers_case_sensitive: bool = field(
        default=DEFAULT_TASK_MARKERS_CASE_SENSITIVE,
        metadata={"help": "Only match upper-case task keywords", "importance": "advanced"},
    )
    parse_tables: bool = field(
        default=DEFAULT_PARSE_TABLES,
        metadata={"help": "Parse pipe tables", "importance": "core"},
    )
    parse_strikethrough: bool = field(
        default=DEFAULT_PARSE_STRIKETHROUGH,
        metadata={"help": "Parse strikethrough syntax (~~text~~)", "importance": "core"},
    )
    parse_highlight: bool = field(
        default=DEFAULT_PARSE_HIGHLIGHT,
        metadata={"help": "Parse highlight syntax (==text==)", "importance": "core"},
    )
    soft_breaks_as_hard: bool = field(
        default=DEFAULT_SOFT_BREAKS_AS_HARD,
        metadata={"help": "Treat single newlines inside paragraphs as hard breaks", "importance": "advanced"},
    )


@dataclass(frozen=True)
class MarkdownSerializerOptions(BaseSerializerOptions):
    """Configuration options for tree-to-markup serialization.

    Parameters
    ----------
    bullet_symbol : {"-", "*", "+"}, default "-"
        Marker for bullet list items.
    alternate_bullet_symbol : {"-", "*", "+"}, default "*"
        Marker used for a bullet list that directly follows another bullet
        list, so the two do not merge when the text is parsed again.
    emphasis_symbol : {"*", "_"}, default "*"
        Delimiter for italic text. Italic combined with bold uses the other
        symbol to avoid an ambiguous ``***`` run.
    code_fence_char : {"`", "~"}, default "`"
        Character used for code fences.
    code_fence_min : int, default 3
        Minimum fence length; grows past the longest run in the code.
    escape_special : bool, default True
        Backslash-escape characters in plain text that would otherwise be
        read back as markup.
    table_pipe_escape : bool, default True
        Escape ``|`` inside table cells.
    collapse_blank_lines : bool, default True
        Collapse runs of blank lines outside code blocks to a single blank line.
    rewrite_asset_paths : bool, default True
        Rewrite ``file://.../.assets/x`` image sources to ``.assets/x``.
    trailing_newline : bool, default True
        End non-empty output with a newline.

    """

    bullet_symbol: BulletSymbol = field(
        default=DEFAULT_BULLET_SYMBOL,
        metadata={"help": "Bullet list marker", "choices": ["-", "*", "+"], "importance": "core"},
    )
    alternate_bullet_symbol: BulletSymbol = field(
        default=DEFAULT_ALTERNATE_BULLET_SYMBOL,
        metadata={
            "help": "Bullet marker for a list directly following another bullet list",
            "choices": ["-", "*", "+"],
            "importance": "advanced",
        },
    )
    emphasis_symbol: EmphasisSymbol = field(
        default=DEFAULT_EMPHASIS_SYMBOL,
        metadata={"help": "Italic delimiter", "choices": ["*", "_"], "importance": "core"},
    )
    code_fence_char: CodeFenceChar = field(
        default=DEFAULT_CODE_FENCE_CHAR,
        metadata={"help": "Code fence character", "choices": ["`", "~"], "importance": "advanced"},
    )
    code_fence_min: int = field(
        default=DEFAULT_CODE_FENCE_MIN,
        metadata={"help": "Minimum code fence length", "type": int, "importance": "advanced"},
    )
    escape_special: bool = field(
        default=DEFAULT_ESCAPE_SPECIAL,
        metadata={"help": "Escape markup characters in plain text", "importance": "core"},
    )
    table_pipe_escape: bool = field(
        default=DEFAULT_TABLE_PIPE_ESCAPE,
        metadata={"help": "Escape | inside table cells", "importance": "advanced"},
    )
    collapse_blank_lines: bool = field(
        default=DEFAULT_COLLAPSE_BLANK_LINES,
        metadata={"help": "Collapse consecutive blank lines outside code blocks", "importance": "advanced"},
    )
    rewrite_asset_paths: bool = field(
        default=DEFAULT_REWRITE_ASSET_PATHS,
        metadata={"help": "Rewrite file:// image paths to relative .assets/ paths", "importance": "core"},
    )
    trailing_newline: bool = field(
        default=DEFAULT_TRAILING_NEWLINE,
        metadata={"help": "End output with a newline", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.bullet_symbol not in ("-", "*", "+"):
            raise ValueError(f"bullet_symbol must be one of '-', '*', '+', got {self.bullet_symbol!r}")
        if self.alternate_bullet_symbol not in ("-", "*", "+"):
            raise ValueError(
                f"alternate_bullet_symbol must be one of '-', '*', '+', got {self.alternate_bullet_symbol!r}"
            )
        if self.alternate_bullet_symbol == self.bullet_symbol:
            raise ValueError("alternate_bullet_symbol must differ from bullet_symbol")
        if self.emphasis_symbol not in ("*", "_"):
            raise ValueError(f"emphasis_symbol must be '*' or '_', got {self.emphasis_symbol!r}")
        if self.code_fence_char not in ("`", "~"):
            raise ValueError(f"code_fence_char must be '`' or '~', got {self.code_fence_char!r}")
        if not isinstance(self.code_fence_min, int) or self.code_fence_min < 3:
            raise ValueError(f"code_fence_min must be an integer of at least 3, got {self.code_fence_min!r}")
