#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notemark/parsers/markdown.py
"""Markup to document tree converter.

This module wires the tokenizer and tree builder together::

    text -> Tokenizer (+ entity recognizers) -> token stream -> TreeBuilder -> tree

"""

from __future__ import annotations

import logging
from typing import Optional, Union

from notemark.ast.nodes import Node
from notemark.options.markdown import MarkdownParserOptions
from notemark.parsers.base import BaseParser
from notemark.parsers.tokenizer import Tokenizer
from notemark.parsers.tree_builder import TreeBuilder

logger = logging.getLogger(__name__)


class MarkdownParser(BaseParser):
    r"""Convert markup text to a document tree.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
    Basic parsing:

        >>> parser = MarkdownParser()
        >>> doc = parser.parse("# Title\n\nTODO call [[Alice]] at [09:30]")
        >>> [node.type for node in doc.content]
        ['heading', 'paragraph']

    Disable a recognizer:

        >>> parser = MarkdownParser(MarkdownParserOptions(recognize_timestamps=False))

    """

    options_class = MarkdownParserOptions
    format_name = "markdown"

    def __init__(self, options: MarkdownParserOptions | None = None):
        super().__init__(options)
        self.options: MarkdownParserOptions
        self._tokenizer = Tokenizer(self.options)

    def parse(self, input_data: Union[str, bytes]) -> Node:
        """Parse markup into a ``document`` node.

        Parameters
        ----------
        input_data : str or bytes
            Markup text, or UTF-8 encoded markup

        Returns
        -------
        Node
            Root document node

        Raises
        ------
        ParsingError
            If the input is not text

        """
        text = self._decode_input(input_data)
        tokens = self._tokenizer.tokenize(text)
        doc = TreeBuilder().build(tokens)
        logger.debug("Parsed document with %d top-level blocks", len(doc.content))
        return doc


def parse_markdown(text: Union[str, bytes], options: Optional[MarkdownParserOptions] = None) -> Node:
    """Parse markup text into a document tree.

    Parameters
    ----------
    text : str or bytes
        Markup source
    options : MarkdownParserOptions or None, default None
        Parser options

    Returns
    -------
    Node
        Root document node

    """
    return MarkdownParser(options).parse(text)
