#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notemark/parsers/tokenizer.py
"""Markup tokenizer.

The block and inline scan is delegated to mistune, configured without a
renderer so that it returns its nested token tree. The tree is flattened
into the paired open/close token stream consumed by the tree builder, and
each inline run is passed through the entity recognizers.

Malformed markup never raises: constructs mistune cannot match are already
plain text in its output, and raw HTML is carried through as text.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional

import mistune

from notemark.options.markdown import MarkdownParserOptions
from notemark.parsers.recognizers import EntityRecognizer, apply_recognizers, build_recognizers
from notemark.parsers.tokens import Token, TokenStream, close_token, open_token, text_token

logger = logging.getLogger(__name__)

# mistune inline container -> stream tag of the mark pair it becomes
_INLINE_MARK_TAGS: dict[str, str] = {
    "strong": "strong",
    "emphasis": "em",
    "strikethrough": "s",
    "mark": "mark",
}


def _plain_text(children: Any) -> str:
    """Concatenate the raw text below a list of mistune inline tokens."""
    parts: list[str] = []
    stack: list[Iterator[Any]] = [iter(children if isinstance(children, list) else [])]
    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            continue
        if not isinstance(child, dict):
            continue
        if isinstance(child.get("children"), list):
            stack.append(iter(child["children"]))
        elif child.get("type") in ("linebreak", "softbreak"):
            parts.append(" ")
        else:
            parts.append(str(child.get("raw", "")))
    return "".join(parts)


def _merge_text(tokens: list[Token]) -> list[Token]:
    """Join consecutive text tokens; mistune splits text at every bracket it tries."""
    merged: list[Token] = []
    for token in tokens:
        if token.type == "text":
            if not token.content:
                continue
            if merged and merged[-1].type == "text":
                merged[-1] = text_token(merged[-1].content + token.content)
                continue
        merged.append(token)
    return merged


class Tokenizer:
    """Turn markup text into a flat token stream.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Controls the optional syntax (tables, strikethrough, highlight) and
        which entity recognizers run

    Examples
    --------
        >>> tokens = Tokenizer().tokenize("# Title")
        >>> [t.type for t in tokens]
        ['heading_open', 'text', 'heading_close']

    """

    def __init__(self, options: Optional[MarkdownParserOptions] = None):
        """Configure mistune and the recognizer chain."""
        self.options = options or MarkdownParserOptions()
        self.recognizers: list[EntityRecognizer] = build_recognizers(self.options)

        plugins = []
        if self.options.parse_strikethrough:
            plugins.append("strikethrough")
        if self.options.parse_highlight:
            plugins.append("mark")
        if self.options.parse_tables:
            plugins.append("table")

        # A fresh instance per tokenizer; mistune keeps no state between parse calls
        self._markdown = mistune.create_markdown(plugins=plugins, renderer=None)

    def tokenize(self, text: str) -> TokenStream:
        """Tokenize markup text.

        Parameters
        ----------
        text : str
            Markup source

        Returns
        -------
        TokenStream
            Flat list of open, close and self-closing tokens

        """
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        block_tokens, _state = self._markdown.parse(text)
        stream = self._flatten_blocks(block_tokens if isinstance(block_tokens, list) else [])
        logger.debug("Tokenized %d characters into %d tokens", len(text), len(stream))
        return stream

    def _flatten_blocks(self, tokens: list[dict[str, Any]]) -> TokenStream:
        """Flatten mistune block tokens with an explicit stack.

        Each stack entry pairs an iterator over sibling tokens with the close
        tokens to emit once those siblings are exhausted.
        """
        stream: TokenStream = []
        stack: list[tuple[Iterator[Any], list[Token]]] = [(iter(tokens), [])]

        while stack:
            token = next(stack[-1][0], None)
            if token is None:
                _, closers = stack.pop()
                stream.extend(closers)
                continue
            if not isinstance(token, dict):
                continue

            token_type = token.get("type", "")
            attrs = token.get("attrs") if isinstance(token.get("attrs"), dict) else {}
            children = token.get("children") if isinstance(token.get("children"), list) else []

            if token_type == "heading":
                level = attrs.get("level", 1)
                if not isinstance(level, int) or level < 1 or level > 6:
                    level = 1
                self._emit_textblock(stream, "heading", children, level=level)
            elif token_type in ("paragraph", "block_text"):
                self._emit_textblock(stream, "paragraph", children)
            elif token_type == "block_code":
                stream.append(self._fence_token(token, attrs))
            elif token_type == "block_quote":
                stream.append(open_token("blockquote"))
                stack.append((iter(children), [close_token("blockquote")]))
            elif token_type == "list":
                if attrs.get("ordered"):
                    start = attrs.get("start", 1)
                    stream.append(open_token("ordered_list", start=start if isinstance(start, int) else 1))
                    stack.append((iter(children), [close_token("ordered_list")]))
                else:
                    stream.append(open_token("bullet_list"))
                    stack.append((iter(children), [close_token("bullet_list")]))
            elif token_type == "list_item":
                stream.append(open_token("list_item"))
                stack.append((iter(children), [close_token("list_item")]))
            elif token_type == "thematic_break":
                stream.append(Token("hr"))
            elif token_type == "block_html":
                self._emit_raw_paragraph(stream, str(token.get("raw", "")))
            elif token_type == "table":
                stream.append(open_token("table"))
                stack.append((iter(children), [close_token("table")]))
            elif token_type == "table_head":
                # Header cells are direct children of the head; the row is implied
                stream.append(open_token("thead"))
                stream.append(open_token("tr"))
                stack.append((iter(children), [close_token("tr"), close_token("thead")]))
            elif token_type == "table_body":
                stream.append(open_token("tbody"))
                stack.append((iter(children), [close_token("tbody")]))
            elif token_type == "table_row":
                stream.append(open_token("tr"))
                stack.append((iter(children), [close_token("tr")]))
            elif token_type == "table_cell":
                tag = "th" if attrs.get("head") else "td"
                stream.append(open_token(tag))
                self._emit_textblock(stream, "paragraph", children)
                stream.append(close_token(tag))
            elif token_type == "blank_line":
                continue
            elif children:
                logger.debug("Flattening children of unknown block token %r", token_type)
                stack.append((iter(children), []))
            elif token.get("raw"):
                logger.debug("Keeping unknown block token %r as text", token_type)
                self._emit_raw_paragraph(stream, str(token["raw"]))

        return stream

    def _fence_token(self, token: dict[str, Any], attrs: dict[str, Any]) -> Token:
        info = attrs.get("info")
        language = None
        if isinstance(info, str) and info.strip():
            language = info.strip().split(maxsplit=1)[0]
        return Token("fence", attrs={"language": language}, content=str(token.get("raw", "")))

    def _emit_textblock(self, stream: TokenStream, tag: str, children: list[Any], **attrs: Any) -> None:
        stream.append(open_token(tag, **attrs))
        stream.extend(self._inline_run(children))
        stream.append(close_token(tag))

    def _emit_raw_paragraph(self, stream: TokenStream, raw: str) -> None:
        """Emit raw block text (HTML) as a paragraph, one hard break per line."""
        lines = raw.strip("\n").split("\n")
        run: list[Token] = []
        for index, line in enumerate(lines):
            if index:
                run.append(Token("hardbreak"))
            run.append(text_token(line))
        stream.append(open_token("paragraph"))
        stream.extend(apply_recognizers(_merge_text(run), self.recognizers))
        stream.append(close_token("paragraph"))

    def _inline_run(self, children: list[Any]) -> list[Token]:
        """Flatten the inline tokens of one block and split out entities."""
        run: list[Token] = []
        stack: list[tuple[Iterator[Any], Optional[Token]]] = [(iter(children), None)]

        while stack:
            child = next(stack[-1][0], None)
            if child is None:
                _, closer = stack.pop()
                if closer is not None:
                    run.append(closer)
                continue
            if not isinstance(child, dict):
                continue

            child_type = child.get("type", "")
            attrs = child.get("attrs") if isinstance(child.get("attrs"), dict) else {}
            grandchildren = child.get("children") if isinstance(child.get("children"), list) else []

            if child_type == "text":
                run.append(text_token(str(child.get("raw", ""))))
            elif child_type in _INLINE_MARK_TAGS:
                tag = _INLINE_MARK_TAGS[child_type]
                run.append(open_token(tag))
                stack.append((iter(grandchildren), close_token(tag)))
            elif child_type == "codespan":
                run.append(Token("code_inline", content=str(child.get("raw", ""))))
            elif child_type == "link":
                run.append(open_token("link", href=str(attrs.get("url", "")), title=attrs.get("title")))
                stack.append((iter(grandchildren), close_token("link")))
            elif child_type == "image":
                run.append(
                    Token(
                        "image",
                        attrs={
                            "src": str(attrs.get("url", "")),
                            "alt": _plain_text(grandchildren),
                            "title": attrs.get("title"),
                        },
                    )
                )
            elif child_type == "linebreak":
                run.append(Token("hardbreak"))
            elif child_type == "softbreak":
                run.append(Token("hardbreak") if self.options.soft_breaks_as_hard else text_token(" "))
            elif child_type == "inline_html":
                run.append(text_token(str(child.get("raw", ""))))
            elif grandchildren:
                logger.debug("Flattening children of unknown inline token %r", child_type)
                stack.append((iter(grandchildren), None))
            elif child.get("raw"):
                run.append(text_token(str(child["raw"])))

        return apply_recognizers(_merge_text(run), self.recognizers)


def tokenize(text: str, options: Optional[MarkdownParserOptions] = None) -> TokenStream:
    """Tokenize markup text with a fresh ``Tokenizer``.

    Parameters
    ----------
    text : str
        Markup source
    options : MarkdownParserOptions or None, default None
        Parser options

    Returns
    -------
    TokenStream
        Flat token stream

    """
    return Tokenizer(options).tokenize(text)
