"""Document tree serializers."""

from notemark.renderers.base import BaseSerializer
from notemark.renderers.markdown import MarkdownSerializer, serialize_markdown

__all__ = ["BaseSerializer", "MarkdownSerializer", "serialize_markdown"]
