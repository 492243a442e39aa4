#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notemark/parsers/base.py
"""Base class for markup parsers.

A parser turns markup text into a document tree. Parsers are pure: they read
no files and keep no state between calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Union

from notemark.ast.nodes import Node
from notemark.exceptions import ParsingError
from notemark.options.base import BaseParserOptions, check_options_type


class BaseParser(ABC):
    """Abstract base class for markup parsers.

    Subclasses set ``options_class``; passing None builds its defaults.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Parser-specific options

    Raises
    ------
    InvalidOptionsError
        If ``options`` is not an ``options_class`` instance

    """

    options_class: ClassVar[type[BaseParserOptions]] = BaseParserOptions
    format_name: ClassVar[str] = "base"

    def __init__(self, options: BaseParserOptions | None = None):
        check_options_type(options, self.options_class, f"{self.format_name} parser")
        self.options = options if options is not None else self.options_class()

    @staticmethod
    def _decode_input(input_data: Union[str, bytes]) -> str:
        """Return ``input_data`` as text, decoding bytes as UTF-8.

        Raises
        ------
        ParsingError
            If the input is not text or bytes are not valid UTF-8

        """
        if isinstance(input_data, str):
            return input_data
        if not isinstance(input_data, (bytes, bytearray)):
            raise ParsingError(f"Parser input must be str or bytes, got {type(input_data).__name__}")
        try:
            return bytes(input_data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParsingError("Input bytes are not valid UTF-8", original_error=e) from e

    @abstractmethod
    def parse(self, input_data: Union[str, bytes]) -> Node:
        """Parse markup into a ``document`` node."""
