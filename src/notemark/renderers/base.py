#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notemark/renderers/base.py
"""Base class for document tree serializers.

A serializer turns a document tree into text. Serializers are pure: they
write no files and keep no state between calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Mapping, Union

from notemark.ast.nodes import Node
from notemark.options.base import BaseSerializerOptions, check_options_type


class BaseSerializer(ABC):
    """Abstract base class for document tree serializers.

    Subclasses set ``options_class``; passing None builds its defaults.

    Parameters
    ----------
    options : BaseSerializerOptions or None, default = None
        Serializer-specific options

    Raises
    ------
    InvalidOptionsError
        If ``options`` is not an ``options_class`` instance

    """

    options_class: ClassVar[type[BaseSerializerOptions]] = BaseSerializerOptions
    format_name: ClassVar[str] = "base"

    def __init__(self, options: BaseSerializerOptions | None = None):
        check_options_type(options, self.options_class, f"{self.format_name} serializer")
        self.options = options if options is not None else self.options_class()

    @abstractmethod
    def serialize(self, tree: Union[Node, Mapping[str, Any]]) -> str:
        """Serialize a ``document`` tree, as nodes or in dict form, to text.

        Raises
        ------
        MalformedTreeError
            If the tree violates the interchange contract

        """
