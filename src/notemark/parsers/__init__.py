"""Markup parsing: tokenizer, entity recognizers and tree builder."""

from notemark.parsers.base import BaseParser
from notemark.parsers.markdown import MarkdownParser, parse_markdown
from notemark.parsers.recognizers import (
    EntityRecognizer,
    NoteLinkRecognizer,
    TaskMarkerRecognizer,
    TimestampRecognizer,
    apply_recognizers,
    build_recognizers,
)
from notemark.parsers.tokenizer import Tokenizer, tokenize
from notemark.parsers.tokens import Token, TokenStream
from notemark.parsers.tree_builder import TOKEN_SPECS, TreeBuilder, build_tree

__all__ = [
    "BaseParser",
    "MarkdownParser",
    "parse_markdown",
    "EntityRecognizer",
    "NoteLinkRecognizer",
    "TaskMarkerRecognizer",
    "TimestampRecognizer",
    "apply_recognizers",
    "build_recognizers",
    "Tokenizer",
    "tokenize",
    "Token",
    "TokenStream",
    "TOKEN_SPECS",
    "TreeBuilder",
    "build_tree",
]
