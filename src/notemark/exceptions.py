#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the notemark library.

The converter itself is total over markup: malformed markdown degrades to
plain text and malformed token streams are repaired. Exceptions are reserved
for contract violations at the boundary, which indicate a bug in the caller
rather than bad user input.

Exception Hierarchy
-------------------
- NotemarkError (base exception)

  - ValidationError (bad keyword argument or option value)
    - InvalidOptionsError (options built for another parser or serializer)
    - MalformedTreeError (document tree violates the interchange contract)

  - ParsingError (parser input is not text)

"""

from typing import Any


class NotemarkError(Exception):
    """Root of the notemark exception hierarchy.

    Parameters
    ----------
    message : str
        Text shown to the user, also available as ``message``
    original_error : Exception, optional
        Lower-level exception being wrapped, kept as ``original_error``

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(NotemarkError):
    """A caller-supplied argument or option value was rejected.

    ``parameter_name`` and ``parameter_value`` identify the offending input
    when it can be pinned to a single argument.
    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """An options object was handed to a component that cannot use it.

    For example, serializer options passed to the parser.

    Parameters
    ----------
    converter_name : str
        Component that rejected the options, e.g. ``"markdown parser"``
    expected_type : type
        Options class the component accepts
    received_type : type
        Class of the object it was given
    message : str, optional
        Replaces the generated message

    """

    def __init__(
        self,
        converter_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        if message is None:
            message = (
                f"The {converter_name} takes {expected_type.__name__}, "
                f"not {received_type.__name__}."
            )
        super().__init__(message, parameter_name="options", parameter_value=received_type, original_error=original_error)
        self.converter_name = converter_name
        self.expected_type = expected_type
        self.received_type = received_type


class MalformedTreeError(ValidationError):
    """Exception raised when a document tree breaks the interchange contract.

    Raised for a root that is not a ``document`` node, nodes without a string
    ``type``, ``text`` nodes whose ``text`` is not a string, and containers of
    the wrong shape. These come from the editing surface, never from markup,
    so they are reported rather than repaired.

    Parameters
    ----------
    message : str
        Description of the violation
    path : str, optional
        Slash-separated location of the offending node (e.g. ``content/0/content/2``)
    node_type : str, optional
        Type of the offending node, when known

    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        node_type: str | None = None,
        original_error: Exception | None = None,
    ):
        full_message = f"{message} (at '{path}')" if path else message
        super().__init__(full_message, parameter_name="tree", parameter_value=node_type, original_error=original_error)
        self.path = path
        self.node_type = node_type


class ParsingError(NotemarkError):
    """Exception raised when parser input cannot be read as text.

    Markup content never triggers this error; only input of the wrong kind
    (non-string objects, bytes that are not UTF-8) does.

    Parameters
    ----------
    message : str
        Description of the problem
    original_error : Exception, optional
        The underlying decoding error, if any

    """
