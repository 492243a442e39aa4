"""Option classes for the notemark parser and serializer."""

from notemark.options.base import BaseParserOptions, BaseSerializerOptions, CloneFrozenMixin
from notemark.options.markdown import MarkdownParserOptions, MarkdownSerializerOptions

__all__ = [
    "BaseParserOptions",
    "BaseSerializerOptions",
    "CloneFrozenMixin",
    "MarkdownParserOptions",
    "MarkdownSerializerOptions",
]
