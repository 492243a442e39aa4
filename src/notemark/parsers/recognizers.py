#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notemark/parsers/recognizers.py
"""Entity recognizers for the custom inline constructs.

Each recognizer scans the text of one inline run and splits it into
alternating plain-text spans and typed tokens:

- ``TaskMarkerRecognizer``: task keywords (``TODO``, ``DONE``, ...) become
  ``task_marker`` tokens with a lowercase ``state``.
- ``TimestampRecognizer``: ``[H:MM]`` / ``[HH:MM]`` with a valid hour and
  minute become ``timestamp`` tokens with a zero-padded ``time``.
- ``NoteLinkRecognizer``: ``[[title]]`` becomes a ``note_link`` token.

Recognizers are applied in that fixed order by ``apply_recognizers``; each
pass only sees the text spans left over by the previous one. Patterns are
compiled once and matched with ``finditer``, which keeps no state between
calls, so recognizers can be shared between threads.

Examples
--------
    >>> from notemark.parsers.tokens import text_token
    >>> tokens = apply_recognizers([text_token("TODO call at [09:30]")], build_recognizers())
    >>> [t.type for t in tokens]
    ['task_marker', 'text', 'timestamp']

"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from notemark.ast.utils import normalize_task_state
from notemark.constants import MAX_TIMESTAMP_HOUR, MAX_TIMESTAMP_MINUTE, TASK_KEYWORDS
from notemark.options.markdown import MarkdownParserOptions
from notemark.parsers.tokens import Token, text_token

logger = logging.getLogger(__name__)


class EntityRecognizer(ABC):
    """Base class for recognizers of one inline construct.

    Subclasses provide ``pattern`` and ``make_token``; ``make_token`` may
    return None to reject a match, which then stays plain text.
    """

    name: str = "entity"
    pattern: re.Pattern[str]

    @abstractmethod
    def make_token(self, match: re.Match[str]) -> Optional[Token]:
        """Build the token for ``match``, or return None to keep it as text."""

    def split(self, text: str) -> list[Token]:
        """Split ``text`` into text tokens and recognized entity tokens.

        Parameters
        ----------
        text : str
            Text of an inline run

        Returns
        -------
        list of Token
            Tokens in source order; empty text spans are omitted

        """
        tokens: list[Token] = []
        position = 0
        for match in self.pattern.finditer(text):
            token = self.make_token(match)
            if token is None:
                continue
            if match.start() > position:
                tokens.append(text_token(text[position : match.start()]))
            tokens.append(token)
            position = match.end()

        if position == 0:
            return [text_token(text)] if text else []
        if position < len(text):
            tokens.append(text_token(text[position:]))
        return tokens


class TaskMarkerRecognizer(EntityRecognizer):
    """Recognize task keywords as whole words.

    One space or tab after the keyword belongs to the marker, so
    ``"TODO buy milk"`` yields the marker and the text ``"buy milk"``.

    Parameters
    ----------
    case_sensitive : bool, default False
        Only match keywords written in upper case

    """

    name = "task_marker"

    def __init__(self, case_sensitive: bool = False):
        """Compile the keyword pattern."""
        keywords = "|".join(TASK_KEYWORDS)
        flags = 0 if case_sensitive else re.IGNORECASE
        self.pattern = re.compile(rf"\b({keywords})\b[ \t]?", flags)

    def make_token(self, match: re.Match[str]) -> Optional[Token]:
        state = normalize_task_state(match.group(1))
        if state is None:
            return None
        return Token("task_marker", attrs={"state": state})


class TimestampRecognizer(EntityRecognizer):
    """Recognize ``[H:MM]`` and ``[HH:MM]`` timestamps with valid ranges."""

    name = "timestamp"
    pattern = re.compile(r"\[(\d{1,2}):(\d{2})\]")

    def make_token(self, match: re.Match[str]) -> Optional[Token]:
        hour = int(match.group(1))
        minute = int(match.group(2))
        if hour > MAX_TIMESTAMP_HOUR or minute > MAX_TIMESTAMP_MINUTE:
            logger.debug("Ignoring out-of-range timestamp %s", match.group(0))
            return None
        return Token("timestamp", attrs={"time": f"{hour:02d}:{minute:02d}"})


class NoteLinkRecognizer(EntityRecognizer):
    """Recognize ``[[title]]`` references to other notes."""

    name = "note_link"
    pattern = re.compile(r"\[\[([^\]]+)\]\]")

    def make_token(self, match: re.Match[str]) -> Optional[Token]:
        return Token("note_link", attrs={"title": match.group(1)})


def build_recognizers(options: Optional[MarkdownParserOptions] = None) -> list[EntityRecognizer]:
    """Create the recognizer chain enabled by ``options``, in application order.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default None
        Parser options; defaults enable all three recognizers

    Returns
    -------
    list of EntityRecognizer
        Task markers, then timestamps, then note links

    """
    options = options or MarkdownParserOptions()
    recognizers: list[EntityRecognizer] = []
    if options.recognize_task_markers:
        recognizers.append(TaskMarkerRecognizer(case_sensitive=options.task_markers_case_sensitive))
    if options.recognize_timestamps:
        recognizers.append(TimestampRecognizer())
    if options.recognize_note_links:
        recognizers.append(NoteLinkRecognizer())
    return recognizers


def apply_recognizers(run: Iterable[Token], recognizers: Iterable[EntityRecognizer]) -> list[Token]:
    """Run each recognizer over the text tokens left by the previous one.

    Parameters
    ----------
    run : iterable of Token
        Inline tokens of one block
    recognizers : iterable of EntityRecognizer
        Recognizers in application order

    Returns
    -------
    list of Token
        The run with recognized entities split out

    """
    tokens = list(run)
    for recognizer in recognizers:
        result: list[Token] = []
        for token in tokens:
            if token.type == "text":
                result.extend(recognizer.split(token.content))
            else:
                result.append(token)
        tokens = result
    return tokens
