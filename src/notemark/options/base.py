"""Frozen option objects shared by the parser and the serializer.

Options are immutable once built. Callers derive variants with
``create_updated``, which re-runs each class's ``__post_init__`` checks, and
external sources (keyword arguments, configuration tables) are screened with
``unknown_fields`` before they reach the constructor.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields, replace
from typing import Any, Iterable

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from notemark.exceptions import InvalidOptionsError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Copy-with-changes support for frozen option dataclasses."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Return a copy with the given fields replaced.

        Raises
        ------
        TypeError
            If a keyword is not a field
        ValueError
            If the class rejects a new value

        """
        return replace(self, **kwargs)

    @classmethod
    def field_names(cls) -> list[str]:
        """Names of all option fields, in declaration order."""
        return [f.name for f in fields(cls)]  # type: ignore[arg-type]

    @classmethod
    def unknown_fields(cls, names: Iterable[str]) -> list[str]:
        """Return the sorted subset of ``names`` that are not option fields."""
        return sorted(set(names) - set(cls.field_names()))


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Common base of parser option classes."""


@dataclass(frozen=True)
class BaseSerializerOptions(CloneFrozenMixin):
    """Common base of serializer option classes."""


def check_options_type(options: CloneFrozenMixin | None, expected_type: type, component: str) -> None:
    """Reject an options object built for a different parser or serializer.

    Parameters
    ----------
    options : options instance or None
        Options handed to ``component``; None means defaults
    expected_type : type
        Options class ``component`` accepts
    component : str
        Name used in the error message, e.g. ``"markdown parser"``

    Raises
    ------
    InvalidOptionsError
        If ``options`` is neither None nor an ``expected_type``

    """
    if options is None or isinstance(options, expected_type):
        return
    raise InvalidOptionsError(
        converter_name=component,
        expected_type=expected_type,
        received_type=type(options),
    )
