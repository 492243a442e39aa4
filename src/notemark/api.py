"""The major exported API functions for note markup conversion."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/notemark/api.py
import logging
from typing import Any, Mapping, Optional, TypeVar, Union

from notemark.ast.nodes import Node
from notemark.exceptions import ValidationError
from notemark.options.base import BaseParserOptions, BaseSerializerOptions
from notemark.options.markdown import MarkdownParserOptions, MarkdownSerializerOptions
from notemark.parsers.markdown import MarkdownParser
from notemark.renderers.markdown import MarkdownSerializer

logger = logging.getLogger(__name__)

OptionsT = TypeVar("OptionsT", BaseParserOptions, BaseSerializerOptions)


def _create_options_from_kwargs(options_class: type[OptionsT], base: Optional[OptionsT], **kwargs: Any) -> OptionsT:
    """Apply keyword overrides on top of an options object.

    Parameters
    ----------
    options_class : type
        Options dataclass to instantiate when ``base`` is None
    base : options instance or None
        Options to start from
    kwargs : Any
        Field overrides

    Returns
    -------
    options instance
        Options with overrides applied

    Raises
    ------
    ValidationError
        If a keyword is not a field of ``options_class`` or a value is rejected

    """
    options = base if base is not None else options_class()
    if not kwargs:
        return options

    unknown = options_class.unknown_fields(kwargs)
    if unknown:
        raise ValidationError(
            f"Unknown {options_class.__name__} option(s): {', '.join(unknown)}",
            parameter_name=unknown[0],
            parameter_value=kwargs[unknown[0]],
        )

    logger.debug("Overriding %s fields: %s", options_class.__name__, ", ".join(sorted(kwargs)))
    try:
        return options.create_updated(**kwargs)
    except ValueError as e:
        raise ValidationError(str(e), original_error=e) from e


def to_ast(
    source: Union[str, bytes],
    *,
    parser_options: Optional[MarkdownParserOptions] = None,
    **kwargs: Any,
) -> Node:
    """Parse note markup into a document tree.

    Parameters
    ----------
    source : str or bytes
        Markup text, or UTF-8 encoded bytes
    parser_options : MarkdownParserOptions, optional
        Parser options
    kwargs : Any
        Parser option fields that override ``parser_options``

    Returns
    -------
    Node
        Root ``document`` node

    Examples
    --------
        >>> doc = to_ast("DONE ship it [[Release]]")
        >>> [child.type for child in doc.content[0].content]
        ['taskMarker', 'text', 'noteLink']
        >>> doc = to_ast("[09:30] standup", recognize_timestamps=False)

    """
    options = _create_options_from_kwargs(MarkdownParserOptions, parser_options, **kwargs)
    return MarkdownParser(options).parse(source)


def from_ast(
    tree: Union[Node, Mapping[str, Any]],
    *,
    serializer_options: Optional[MarkdownSerializerOptions] = None,
    **kwargs: Any,
) -> str:
    """Serialize a document tree to note markup.

    Parameters
    ----------
    tree : Node or Mapping
        Root ``document`` node, as ``Node`` objects or in dict form
    serializer_options : MarkdownSerializerOptions, optional
        Serializer options
    kwargs : Any
        Serializer option fields that override ``serializer_options``

    Returns
    -------
    str
        Markup text

    Raises
    ------
    MalformedTreeError
        If the tree violates the interchange contract

    """
    options = _create_options_from_kwargs(MarkdownSerializerOptions, serializer_options, **kwargs)
    return MarkdownSerializer(options).serialize(tree)


def normalize(
    source: Union[str, bytes],
    *,
    parser_options: Optional[MarkdownParserOptions] = None,
    serializer_options: Optional[MarkdownSerializerOptions] = None,
) -> str:
    """Parse and re-serialize markup, producing its canonical form.

    Normalizing already-normalized text returns it unchanged.

    Examples
    --------
        >>> normalize("* item\\n* todo task")
        '- item\\n- TODO task\\n'

    """
    return from_ast(to_ast(source, parser_options=parser_options), serializer_options=serializer_options)
