"""notemark - bidirectional converter between note markup and an editor document tree.

notemark reads markdown-style note text into a structured document tree and
writes such trees back out as text. On top of standard block and inline
markup it recognizes three note-specific entities inline:

- task-state keywords at the start of a run (``TODO``, ``DONE``, ...)
- ``[HH:MM]`` timestamps
- ``[[title]]`` references to other notes

Parsing runs in two stages, a tokenizer that produces a flat stream of
open/close/self-closing tokens and a stack-based tree builder. Serializing
walks the tree with an explicit stack, so arbitrarily deep nesting never
exhausts the interpreter stack.

Requirements
------------
- Python 3.10+
- mistune 3 for the block and inline scan

Examples
--------
Parse and serialize:

    >>> from notemark import to_ast, from_ast
    >>> doc = to_ast("# Standup\\n\\nTODO review [[Roadmap]] at [09:30]")
    >>> from_ast(doc)
    '# Standup\\n\\nTODO review [[Roadmap]] at [09:30]\\n'

Exchange trees with the editor as JSON:

    >>> from notemark import ast_to_json, json_to_ast
    >>> json_to_ast(ast_to_json(doc)) == doc
    True

See Also
--------
notemark.ast : Document tree nodes and interchange helpers
notemark.parsers : Tokenizer, entity recognizers and tree builder
notemark.renderers : Markup serializer

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "notemark requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from notemark.api import from_ast, normalize, to_ast
from notemark.ast import Mark, MarkType, Node, NodeType, TaskState, ast_to_json, json_to_ast
from notemark.exceptions import (
    InvalidOptionsError,
    MalformedTreeError,
    NotemarkError,
    ParsingError,
    ValidationError,
)
from notemark.options import MarkdownParserOptions, MarkdownSerializerOptions
from notemark.parsers import MarkdownParser, parse_markdown
from notemark.renderers import MarkdownSerializer, serialize_markdown

__all__ = [
    "__version__",
    "to_ast",
    "from_ast",
    "normalize",
    "parse_markdown",
    "serialize_markdown",
    "MarkdownParser",
    "MarkdownSerializer",
    "MarkdownParserOptions",
    "MarkdownSerializerOptions",
    "Node",
    "Mark",
    "NodeType",
    "MarkType",
    "TaskState",
    "ast_to_json",
    "json_to_ast",
    "NotemarkError",
    "ValidationError",
    "InvalidOptionsError",
    "MalformedTreeError",
    "ParsingError",
]
