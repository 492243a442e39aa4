#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notemark/utils/escape.py
"""Markup escaping utilities.

These helpers make plain text, code and link parts safe to emit so that the
tokenizer reads them back as the same text rather than as markup.

"""

from __future__ import annotations

import re

_ENTITY_RE = re.compile(r"&(#[0-9]{1,7}|#[xX][0-9a-fA-F]{1,6}|[A-Za-z][A-Za-z0-9]{1,31});")
_ATX_HEADING_RE = re.compile(r"#{1,6}(?=[ \t]|$)")
_LIST_MARKER_RE = re.compile(r"[-+](?=[ \t]|$)")
_ORDERED_MARKER_RE = re.compile(r"(\d{1,9})([.)])(?=[ \t]|$)")
_SETEXT_RE = re.compile(r"(=+|-+)[ \t]*$")
_REFERENCE_DEF_RE = re.compile(r"\[[^\]]*\]:")


def _escape_char_at(text: str, index: int) -> str:
    return text[:index] + "\\" + text[index:]


def escape_line_start(line: str) -> str:
    r"""Escape block syntax at the start of a line of plain text.

    Leading whitespace is removed, since it is insignificant at the start of
    a paragraph line and four spaces would start an indented code block.

    Parameters
    ----------
    line : str
        Text that will be emitted at the start of a line

    Returns
    -------
    str
        Text that cannot be read as a heading, quote, list item, thematic
        break, setext underline or link reference definition

    Examples
    --------
        >>> escape_line_start("# not a heading")
        '\\# not a heading'
        >>> escape_line_start("1986. A great year")
        '1986\\. A great year'

    """
    line = line.lstrip(" \t")
    if not line:
        return line

    if _ATX_HEADING_RE.match(line) or line.startswith(">"):
        return _escape_char_at(line, 0)

    if _LIST_MARKER_RE.match(line) or _SETEXT_RE.match(line):
        return _escape_char_at(line, 0)

    match = _ORDERED_MARKER_RE.match(line)
    if match:
        return _escape_char_at(line, match.end(1))

    if _REFERENCE_DEF_RE.match(line):
        return _escape_char_at(line, 0)

    return line


def escape_markdown_text(
    text: str, at_line_start: bool = False, in_table: bool = False, in_link: bool = False
) -> str:
    r"""Escape inline markup characters in plain text.

    Context-aware escaping keeps the output readable:

    - backslash, backtick and asterisk are always escaped
    - underscores are escaped only at word boundaries (``snake_case`` is safe)
    - ``~`` and ``=`` are escaped when doubled (strike and highlight) or at
      either end of the text, where they could join a neighbouring delimiter
    - ``]`` is escaped only where it could close a link (before ``(`` or ``[``)
    - ``<`` is escaped before a letter, ``/``, ``!`` or ``?`` (autolinks, HTML)
    - ``&`` is escaped when it starts a character reference

    Parameters
    ----------
    text : str
        Text to escape
    at_line_start : bool, default False
        The text begins a line, so block syntax must be escaped as well
    in_table : bool, default False
        The text sits in a table cell, so ``|`` is escaped
    in_link : bool, default False
        The text is link text, so every square bracket is escaped

    Returns
    -------
    str
        Escaped text

    Examples
    --------
        >>> escape_markdown_text("2 * 3 = 6, my_var")
        '2 \\* 3 = 6, my_var'
        >>> escape_markdown_text("~~not struck~~")
        '\\~\\~not struck\\~\\~'

    """
    if not text:
        return text

    entity_starts = {match.start() for match in _ENTITY_RE.finditer(text)}
    length = len(text)
    escaped: list[str] = []

    for i, char in enumerate(text):
        prev_char = text[i - 1] if i > 0 else ""
        next_char = text[i + 1] if i < length - 1 else ""

        if char in "\\`*":
            escaped.append("\\" + char)
        elif char == "_":
            if prev_char.isalnum() and next_char.isalnum():
                escaped.append(char)
            else:
                escaped.append("\\_")
        elif char in "~=":
            at_edge = i == 0 or i == length - 1
            escaped.append("\\" + char if at_edge or char in (prev_char, next_char) else char)
        elif char in "[]" and in_link:
            escaped.append("\\" + char)
        elif char == "]":
            escaped.append("\\]" if next_char in ("(", "[") else char)
        elif char == "<":
            escaped.append("\\<" if next_char and (next_char.isalpha() or next_char in "/!?") else char)
        elif char == "&":
            escaped.append("\\&" if i in entity_starts else char)
        elif char == "|" and in_table:
            escaped.append("\\|")
        else:
            escaped.append(char)

    result = "".join(escaped)
    if at_line_start:
        result = escape_line_start(result)
    return result


def escape_table_pipes(text: str) -> str:
    r"""Escape ``|`` so that text stays inside its table cell.

    Examples
    --------
        >>> escape_table_pipes("a | b")
        'a \\| b'

    """
    return text.replace("|", r"\|")


def escape_brackets(text: str) -> str:
    r"""Escape backslashes and square brackets for link text and image alt text."""
    return text.replace("\\", "\\\\").replace("[", r"\[").replace("]", r"\]")


def code_span(code: str) -> str:
    """Wrap ``code`` in a backtick fence longer than any backtick run inside it.

    A space is added on both sides when the code starts or ends with a
    backtick, or when it is padded with spaces on both sides (which the
    tokenizer would otherwise strip).

    Parameters
    ----------
    code : str
        Code text; newlines are folded to spaces

    Returns
    -------
    str
        Code span markup

    Examples
    --------
        >>> code_span("print()")
        '`print()`'
        >>> code_span("a `tick`")
        '`` a `tick` ``'

    """
    code = code.replace("\n", " ")
    longest = max((len(run) for run in re.findall(r"`+", code)), default=0)
    fence = "`" * (longest + 1)

    pad = ""
    if code.startswith("`") or code.endswith("`"):
        pad = " "
    elif code.startswith(" ") and code.endswith(" ") and code.strip(" "):
        pad = " "

    return f"{fence}{pad}{code}{pad}{fence}"


def format_link_destination(url: str) -> str:
    """Format a link or image destination.

    Destinations containing whitespace, angle brackets or unbalanced
    parentheses are wrapped in ``<...>``.

    Examples
    --------
        >>> format_link_destination("https://example.com")
        'https://example.com'
        >>> format_link_destination("my file.png")
        '<my file.png>'

    """
    if not url:
        return "<>"

    depth = 0
    balanced = True
    for char in url:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                balanced = False
                break
    balanced = balanced and depth == 0

    if balanced and not re.search(r"[\s<>]", url):
        return url

    escaped = url.replace("\\", "\\\\").replace("<", r"\<").replace(">", r"\>").replace("\n", " ")
    return f"<{escaped}>"


def escape_link_title(title: str) -> str:
    """Escape a link or image title for use inside double quotes."""
    return title.replace("\\", "\\\\").replace('"', r"\"").replace("\n", " ")
