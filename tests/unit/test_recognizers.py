#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the task marker, timestamp and note link recognizers."""

import pytest

from notemark.options.markdown import MarkdownParserOptions
from notemark.parsers.recognizers import (
    NoteLinkRecognizer,
    TaskMarkerRecognizer,
    TimestampRecognizer,
    apply_recognizers,
    build_recognizers,
)
from notemark.parsers.tokens import Token, text_token


def _summary(tokens: list[Token]) -> list[tuple[str, object]]:
    """Reduce tokens to (type, payload) pairs for compact assertions."""
    result = []
    for token in tokens:
        if token.type == "text":
            result.append(("text", token.content))
        elif token.type == "task_marker":
            result.append(("task_marker", token.attrs["state"]))
        elif token.type == "timestamp":
            result.append(("timestamp", token.attrs["time"]))
        elif token.type == "note_link":
            result.append(("note_link", token.attrs["title"]))
        else:
            result.append((token.type, token.content))
    return result


@pytest.mark.unit
class TestTaskMarkerRecognizer:
    """Test task keyword recognition."""

    def test_keyword_consumes_following_space(self) -> None:
        """The single space after the keyword belongs to the marker."""
        tokens = TaskMarkerRecognizer().split("TODO buy milk")

        assert _summary(tokens) == [("task_marker", "todo"), ("text", "buy milk")]

    @pytest.mark.parametrize(
        "keyword,state",
        [
            ("TODO", "todo"),
            ("DOING", "doing"),
            ("DONE", "done"),
            ("WAITING", "waiting"),
            ("HOLD", "hold"),
            ("CANCELED", "canceled"),
            ("CANCELLED", "canceled"),
            ("IDEA", "idea"),
        ],
    )
    def test_all_keywords_normalize_to_lowercase_state(self, keyword: str, state: str) -> None:
        """Every keyword maps to its lowercase state, CANCELLED folding onto canceled."""
        tokens = TaskMarkerRecognizer().split(f"{keyword} something")

        assert tokens[0].type == "task_marker"
        assert tokens[0].attrs == {"state": state}

    def test_case_insensitive_by_default(self) -> None:
        """Lowercase keywords are recognized unless case sensitivity is requested."""
        assert _summary(TaskMarkerRecognizer().split("done here")) == [("task_marker", "done"), ("text", "here")]

    def test_case_sensitive_ignores_lowercase(self) -> None:
        """With case sensitivity only upper-case keywords match."""
        tokens = TaskMarkerRecognizer(case_sensitive=True).split("done here")

        assert _summary(tokens) == [("text", "done here")]

    def test_whole_words_only(self) -> None:
        """Keywords embedded in longer words stay text."""
        tokens = TaskMarkerRecognizer().split("TODOS and UNDONE items")

        assert _summary(tokens) == [("text", "TODOS and UNDONE items")]

    def test_keyword_in_middle_of_run(self) -> None:
        """A keyword later in the run splits the surrounding text."""
        tokens = TaskMarkerRecognizer().split("ship it DONE")

        assert _summary(tokens) == [("text", "ship it "), ("task_marker", "done")]

    def test_no_match_returns_single_text_token(self) -> None:
        """Plain text passes through as one token."""
        assert _summary(TaskMarkerRecognizer().split("nothing here")) == [("text", "nothing here")]

    def test_empty_text_returns_no_tokens(self) -> None:
        """Empty input produces no tokens."""
        assert TaskMarkerRecognizer().split("") == []


@pytest.mark.unit
class TestTimestampRecognizer:
    """Test ``[HH:MM]`` timestamp recognition."""

    def test_two_digit_hour(self) -> None:
        """A well-formed timestamp becomes a timestamp token."""
        assert _summary(TimestampRecognizer().split("[09:30]")) == [("timestamp", "09:30")]

    def test_single_digit_hour_is_zero_padded(self) -> None:
        """``[H:MM]`` is normalized to ``HH:MM``."""
        assert _summary(TimestampRecognizer().split("at [9:05] sharp")) == [
            ("text", "at "),
            ("timestamp", "09:05"),
            ("text", " sharp"),
        ]

    @pytest.mark.parametrize("text", ["[25:61]", "[24:00]", "[12:60]", "[99:99]"])
    def test_out_of_range_stays_text(self, text: str) -> None:
        """Hour above 23 or minute above 59 is not a timestamp."""
        assert _summary(TimestampRecognizer().split(text)) == [("text", text)]

    def test_boundaries_are_accepted(self) -> None:
        """``[00:00]`` and ``[23:59]`` are the valid extremes."""
        tokens = TimestampRecognizer().split("[00:00]-[23:59]")

        assert _summary(tokens) == [("timestamp", "00:00"), ("text", "-"), ("timestamp", "23:59")]

    def test_invalid_match_does_not_hide_later_valid_one(self) -> None:
        """A rejected match stays text and scanning continues after it."""
        tokens = TimestampRecognizer().split("[25:00] then [10:15]")

        assert _summary(tokens) == [("text", "[25:00] then "), ("timestamp", "10:15")]

    def test_missing_brackets_stay_text(self) -> None:
        """Bare times are not timestamps."""
        assert _summary(TimestampRecognizer().split("meet at 09:30")) == [("text", "meet at 09:30")]


@pytest.mark.unit
class TestNoteLinkRecognizer:
    """Test ``[[title]]`` note reference recognition."""

    def test_title_with_spaces(self) -> None:
        """The whole bracketed run is the title."""
        assert _summary(NoteLinkRecognizer().split("[[Meeting Notes]]")) == [("note_link", "Meeting Notes")]

    def test_unclosed_reference_stays_text(self) -> None:
        """``[[`` without ``]]`` is plain text."""
        assert _summary(NoteLinkRecognizer().split("see [[Meeting Notes")) == [("text", "see [[Meeting Notes")]

    def test_empty_title_stays_text(self) -> None:
        """``[[]]`` carries no title and is not a reference."""
        assert _summary(NoteLinkRecognizer().split("[[]]")) == [("text", "[[]]")]

    def test_multiple_references(self) -> None:
        """Several references in one run are split in order."""
        tokens = NoteLinkRecognizer().split("[[A]] and [[B]]")

        assert _summary(tokens) == [("note_link", "A"), ("text", " and "), ("note_link", "B")]


@pytest.mark.unit
class TestRecognizerChain:
    """Test ``build_recognizers`` and ``apply_recognizers``."""

    def test_fixed_order(self) -> None:
        """Task markers, then timestamps, then note links."""
        names = [recognizer.name for recognizer in build_recognizers()]

        assert names == ["task_marker", "timestamp", "note_link"]

    def test_all_entities_in_one_run(self) -> None:
        """Every recognizer contributes its tokens in source order."""
        tokens = apply_recognizers([text_token("TODO call at [09:30] about [[Plan]]")], build_recognizers())

        assert _summary(tokens) == [
            ("task_marker", "todo"),
            ("text", "call at "),
            ("timestamp", "09:30"),
            ("text", " about "),
            ("note_link", "Plan"),
        ]

    def test_later_recognizers_only_see_remaining_text(self) -> None:
        """A timestamp inside double brackets is taken before note links run."""
        tokens = apply_recognizers([text_token("[[09:30]]")], build_recognizers())

        assert _summary(tokens) == [("text", "["), ("timestamp", "09:30"), ("text", "]")]

    def test_non_text_tokens_are_untouched(self) -> None:
        """Code spans are never scanned for entities."""
        code = Token("code_inline", content="TODO [09:30]")
        tokens = apply_recognizers([code], build_recognizers())

        assert tokens == [code]

    def test_options_disable_recognizers(self) -> None:
        """Disabled recognizers are left out of the chain."""
        options = MarkdownParserOptions(recognize_task_markers=False, recognize_note_links=False)
        recognizers = build_recognizers(options)

        assert [recognizer.name for recognizer in recognizers] == ["timestamp"]
        tokens = apply_recognizers([text_token("TODO [[x]] [08:00]")], recognizers)
        assert _summary(tokens) == [("text", "TODO [[x]] "), ("timestamp", "08:00")]

    def test_recognizers_are_reentrant(self) -> None:
        """Reusing a recognizer gives the same result every time."""
        recognizer = TimestampRecognizer()
        first = recognizer.split("[09:30] and [10:00]")
        second = recognizer.split("[09:30] and [10:00]")

        assert _summary(first) == _summary(second)
