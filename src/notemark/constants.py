#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the notemark converter.

This module centralizes the delimiter tables, keyword vocabularies and
default option values shared by the tokenizer, tree builder and serializer.

Constants are organized by category:
1. Type Definitions - Literal types used by the options classes
2. Custom Inline Entities - task keywords, timestamps, note links
3. Markdown Formatting - delimiters and defaults used by the serializer
4. Parsing Defaults - defaults used by the tokenizer
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

BulletSymbol = Literal["-", "*", "+"]
EmphasisSymbol = Literal["*", "_"]
CodeFenceChar = Literal["`", "~"]

# =============================================================================
# Custom Inline Entities
# =============================================================================

# Keywords recognized as task markers, in the order they are tried
TASK_KEYWORDS: tuple[str, ...] = ("TODO", "DOING", "DONE", "WAITING", "HOLD", "CANCELED", "CANCELLED", "IDEA")

# Spelling variants folded onto a canonical state value
TASK_KEYWORD_ALIASES: dict[str, str] = {"cancelled": "canceled"}

DEFAULT_TASK_STATE = "todo"
DEFAULT_TIMESTAMP = "00:00"
DEFAULT_NOTE_TITLE = "Unknown"

MAX_TIMESTAMP_HOUR = 23
MAX_TIMESTAMP_MINUTE = 59

# Directory name used for note attachments; absolute file:// paths are
# rewritten to start at this segment
ASSETS_DIR_MARKER = ".assets/"

# =============================================================================
# Markdown Formatting
# =============================================================================

# Opening and closing delimiters per mark type (link and code are special-cased)
MARK_DELIMITERS: dict[str, tuple[str, str]] = {
    "bold": ("**", "**"),
    "italic": ("*", "*"),
    "strike": ("~~", "~~"),
    "highlight": ("==", "=="),
    "code": ("`", "`"),
}

# Mark type aliases accepted from trees produced by other editors
MARK_ALIASES: dict[str, str] = {"strong": "bold", "em": "italic", "strikethrough": "strike", "mark": "highlight"}

DEFAULT_BULLET_SYMBOL: BulletSymbol = "-"
DEFAULT_ALTERNATE_BULLET_SYMBOL: BulletSymbol = "*"
DEFAULT_EMPHASIS_SYMBOL: EmphasisSymbol = "*"
DEFAULT_CODE_FENCE_CHAR: CodeFenceChar = "`"
DEFAULT_CODE_FENCE_MIN = 3
DEFAULT_ESCAPE_SPECIAL = True
DEFAULT_TABLE_PIPE_ESCAPE = True
DEFAULT_COLLAPSE_BLANK_LINES = True
DEFAULT_REWRITE_ASSET_PATHS = True
DEFAULT_TRAILING_NEWLINE = True

# Indentation of nested content under bullet and task list items
LIST_INDENT_WIDTH = 2

TABLE_SEPARATOR_CELL = "---"
THEMATIC_BREAK = "---"

# =============================================================================
# Parsing Defaults
# =============================================================================

DEFAULT_RECOGNIZE_TASK_MARKERS = True
DEFAULT_RECOGNIZE_TIMESTAMPS = True
DEFAULT_RECOGNIZE_NOTE_LINKS = True
DEFAULT_TASK_MARKERS_CASE_SENSITIVE = False
DEFAULT_PARSE_TABLES = True
DEFAULT_PARSE_STRIKETHROUGH = True
DEFAULT_PARSE_HIGHLIGHT = True
DEFAULT_SOFT_BREAKS_AS_HARD = True

MIN_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 6

# =============================================================================
# CLI
# =============================================================================

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
