#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notemark/renderers/markdown.py
"""Document tree to markup serializer.

This module provides the MarkdownSerializer class which converts a document
tree back into markup that the tokenizer reads as the same tree.

Block output is collected as a list of lines per container. Containers
(blockquotes, list items) render their children into their own line list,
which the parent then prefixes (``"> "``, ``"- "`` plus continuation
indentation) and appends. The walk uses an explicit stack of frames so that
deeply nested documents do not grow the interpreter stack.

Inline output merges adjacent runs that share marks: at every run
transition the marks that end are closed, then the marks that begin are
opened, outermost first. Whitespace at the edge of a run is moved outside
the delimiters, since ``** bold**`` does not read back as bold.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Union

from notemark.ast.nodes import INLINE_TYPES, LIST_ITEM_TYPES, Mark, MarkType, Node, NodeType
from notemark.ast.serialization import coerce_tree
from notemark.ast.utils import iter_inline_leaves, task_keyword
from notemark.constants import (
    ASSETS_DIR_MARKER,
    DEFAULT_NOTE_TITLE,
    DEFAULT_TIMESTAMP,
    LIST_INDENT_WIDTH,
    MARK_ALIASES,
    MARK_DELIMITERS,
    MAX_HEADING_LEVEL,
    MIN_HEADING_LEVEL,
    TABLE_SEPARATOR_CELL,
    THEMATIC_BREAK,
)
from notemark.options.markdown import MarkdownSerializerOptions
from notemark.renderers.base import BaseSerializer
from notemark.utils.escape import (
    code_span,
    escape_brackets,
    escape_link_title,
    escape_markdown_text,
    escape_table_pipes,
    format_link_destination,
)

logger = logging.getLogger(__name__)

# Pending block boundaries
_BLANK = "blank"
_SOFT = "soft"

# Inline rendering modes
_BLOCK = "block"  # hard breaks are newlines
_LINE = "line"  # single line (headings): hard breaks are spaces
_CELL = "cell"  # table cell: hard breaks are spaces, pipes escaped

_KNOWN_MARKS = frozenset(mark.value for mark in MarkType)

_HEADING_CLOSING_RE = re.compile(r"(^|[ \t])(#+)$")
_WORD_CHAR_RE = re.compile(r"\w")


@dataclass
class _Line:
    text: str
    verbatim: bool = False


class _BlockWriter:
    """Lines of one container together with the pending block boundary."""

    def __init__(self) -> None:
        self.lines: list[_Line] = []
        self.last_block: Optional[str] = None
        self.last_marker: Optional[str] = None
        self._boundary: Optional[str] = None
        self._task_line = False

    def begin(self, allow_soft: bool = False, task_line: bool = False) -> None:
        """Start a block, separating it from the previous one by a blank line.

        A soft boundary (left by a paragraph inside a list item) lets a
        block that allows it follow directly on the next line. Task lines
        follow each other directly as well.
        """
        if self._boundary is None:
            return
        joins = (task_line and self._task_line) or (allow_soft and self._boundary == _SOFT)
        if not joins:
            self.lines.append(_Line(""))
        self._boundary = None
        self._task_line = False

    def end(
        self, block_type: str, soft: bool = False, marker: Optional[str] = None, task_line: bool = False
    ) -> None:
        self._boundary = _SOFT if soft else _BLANK
        self._task_line = task_line
        self.last_block = block_type
        self.last_marker = marker

    def write(self, text: str, verbatim: bool = False) -> None:
        for line in text.split("\n"):
            self.lines.append(_Line(line, verbatim))

    def extend(self, lines: list[_Line]) -> None:
        self.lines.extend(lines)


@dataclass
class _ListState:
    type: str
    marker: str
    counter: int = 1


@dataclass
class _Frame:
    nodes: list[Node]
    writer: _BlockWriter
    in_list_item: bool = False
    list_state: Optional[_ListState] = None
    on_exit: Optional[Callable[[], None]] = None
    index: int = 0


@dataclass
class _Leaf:
    node: Node
    marks: list[Mark] = field(default_factory=list)
    code: bool = False
    text: str = ""


def _prefix_lines(lines: list[_Line], first: str, rest: str, blank: str = "") -> list[_Line]:
    """Prefix the first line with ``first`` and the others with ``rest``."""
    if not lines:
        return [_Line(first.rstrip())]
    result = []
    for index, line in enumerate(lines):
        if not line.text:
            result.append(_Line(first.rstrip() if index == 0 else blank, line.verbatim))
        else:
            result.append(_Line((first if index == 0 else rest) + line.text, line.verbatim))
    return result


def _same_mark(a: Mark, b: Mark) -> bool:
    if a.type != b.type:
        return False
    if a.type == MarkType.LINK.value:
        a_attrs = a.attrs or {}
        b_attrs = b.attrs or {}
        return a_attrs.get("href") == b_attrs.get("href") and a_attrs.get("title") == b_attrs.get("title")
    return True


def _normalize_marks(marks: list[Mark]) -> tuple[list[Mark], bool]:
    """Resolve aliases and split off the code mark.

    Returns the range marks in their original order (unknown and repeated
    types dropped) and whether the run is code.
    """
    result: list[Mark] = []
    seen: set[str] = set()
    code = False
    for mark in marks:
        mark_type = MARK_ALIASES.get(mark.type, mark.type)
        if mark_type == MarkType.CODE.value:
            code = True
            continue
        if mark_type not in _KNOWN_MARKS:
            logger.debug("Dropping unknown mark %r", mark.type)
            continue
        if mark_type in seen:
            continue
        seen.add(mark_type)
        result.append(Mark(type=mark_type, attrs=mark.attrs))
    return result, code


def _split_whitespace(text: str) -> tuple[str, str, str]:
    core = text.strip(" \t")
    if not core:
        return text, "", ""
    start = text.index(core[0])
    end = start + len(core)
    return text[:start], core, text[end:]


def _task_item_blocks(node: Node) -> list[Node]:
    """Blocks of a task item, the first being a paragraph led by its state keyword."""
    marker = Node(NodeType.TASK_MARKER.value, {"state": node.attrs.get("state")})
    children = node.content if node.type in LIST_ITEM_TYPES else [node]
    if children and children[0].type == NodeType.PARAGRAPH.value:
        head = children[0]
        return [Node(head.type, head.attrs, [marker, *head.content]), *children[1:]]
    return [Node(NodeType.PARAGRAPH.value, content=[marker]), *children]


def _last_char(parts: list[str]) -> str:
    for part in reversed(parts):
        if part:
            return part[-1]
    return ""


class MarkdownSerializer(BaseSerializer):
    r"""Serialize a document tree to markup.

    Parameters
    ----------
    options : MarkdownSerializerOptions or None, default = None
        Serializer configuration options

    Examples
    --------
    Basic usage:

        >>> from notemark.ast import Node, document, text_node
        >>> doc = document(Node("heading", attrs={"level": 1}, content=[text_node("Title")]))
        >>> MarkdownSerializer().serialize(doc)
        '# Title\n'

    Trees in dict form are accepted as well:

        >>> MarkdownSerializer().serialize({"type": "document", "content": [{"type": "horizontalRule"}]})
        '---\n'

    """

    options_class = MarkdownSerializerOptions
    format_name = "markdown"

    def __init__(self, options: MarkdownSerializerOptions | None = None):
        super().__init__(options)
        self.options: MarkdownSerializerOptions

    def serialize(self, tree: Union[Node, Mapping[str, Any]]) -> str:
        """Serialize a document tree to markup.

        Parameters
        ----------
        tree : Node or Mapping
            Root ``document`` node, as ``Node`` objects or in dict form

        Returns
        -------
        str
            Markup text

        Raises
        ------
        MalformedTreeError
            If the tree violates the interchange contract

        """
        root = coerce_tree(tree)
        lines = self._render_blocks(root)
        return self._finalize(lines)

    # ------------------------------------------------------------------
    # Block level
    # ------------------------------------------------------------------

    def _render_blocks(self, root: Node) -> list[_Line]:
        writer = _BlockWriter()
        stack = [_Frame(nodes=root.content, writer=writer)]

        while stack:
            frame = stack[-1]
            if frame.index >= len(frame.nodes):
                stack.pop()
                if frame.on_exit is not None:
                    frame.on_exit()
                continue

            node = frame.nodes[frame.index]
            frame.index += 1

            if frame.list_state is not None:
                self._enter_list_item(node, frame.list_state, frame, stack)
            elif node.type in INLINE_TYPES:
                # Stray inline siblings render together as one paragraph
                start = frame.index - 1
                while frame.index < len(frame.nodes) and frame.nodes[frame.index].type in INLINE_TYPES:
                    frame.index += 1
                logger.debug("Rendering %d stray inline nodes as a paragraph", frame.index - start)
                self._write_paragraph(frame.nodes[start : frame.index], frame)
            else:
                self._enter_block(node, frame, stack)

        return writer.lines

    def _enter_block(self, node: Node, frame: _Frame, stack: list[_Frame]) -> None:
        kind = node.kind
        writer = frame.writer

        if kind is NodeType.PARAGRAPH:
            self._write_paragraph(node.content, frame)
        elif kind is NodeType.HEADING:
            self._write_heading(node, writer)
        elif kind is NodeType.CODE_BLOCK:
            self._write_code_block(node, writer)
        elif kind is NodeType.HORIZONTAL_RULE:
            writer.begin()
            writer.write(THEMATIC_BREAK)
            writer.end(node.type)
        elif kind is NodeType.TABLE:
            self._write_table(node, writer)
        elif kind is NodeType.BLOCKQUOTE:
            quote_writer = _BlockWriter()

            def close_quote() -> None:
                writer.begin()
                writer.extend(_prefix_lines(quote_writer.lines, "> ", "> ", blank=">"))
                writer.end(node.type)

            stack.append(_Frame(nodes=node.content, writer=quote_writer, on_exit=close_quote))
        elif kind in (NodeType.BULLET_LIST, NodeType.ORDERED_LIST, NodeType.TASK_LIST):
            self._enter_list(node, frame, stack)
        elif node.content:
            logger.debug("Rendering children of %r in place", node.type)
            stack.append(_Frame(nodes=node.content, writer=writer, in_list_item=frame.in_list_item))
        else:
            logger.debug("Skipping empty node of type %r", node.type)

    def _write_paragraph(self, nodes: list[Node], frame: _Frame) -> None:
        text = self._render_inline(nodes, _BLOCK)
        frame.writer.begin()
        frame.writer.write(text)
        frame.writer.end(NodeType.PARAGRAPH.value, soft=frame.in_list_item)

    def _write_heading(self, node: Node, writer: _BlockWriter) -> None:
        level = node.attr("level", MIN_HEADING_LEVEL)
        if not isinstance(level, int) or isinstance(level, bool):
            level = MIN_HEADING_LEVEL
        level = max(MIN_HEADING_LEVEL, min(MAX_HEADING_LEVEL, level))

        text = self._render_inline(node.content, _LINE)
        if self.options.escape_special:
            # A trailing run of '#' would be read as a closing sequence
            text = _HEADING_CLOSING_RE.sub(lambda m: m.group(1) + "\\" + m.group(2), text)

        writer.begin()
        writer.write(f"{'#' * level} {text}")
        writer.end(node.type)

    def _write_code_block(self, node: Node, writer: _BlockWriter) -> None:
        parts: list[str] = []
        for leaf in iter_inline_leaves(node.content):
            if leaf.type == NodeType.TEXT.value:
                parts.append(leaf.text or "")
            elif leaf.type == NodeType.HARD_BREAK.value:
                parts.append("\n")
        code = "".join(parts)

        language = node.attr("language")
        info = str(language).strip().replace("\n", " ") if language else ""

        fence_char = self.options.code_fence_char
        if fence_char == "`" and "`" in info:
            fence_char = "~"
        longest = max((len(run) for run in re.findall(re.escape(fence_char) + "+", code)), default=0)
        fence = fence_char * max(self.options.code_fence_min, longest + 1)

        writer.begin()
        writer.write(fence + info)
        if code:
            writer.write(code, verbatim=True)
        writer.write(fence)
        writer.end(node.type)

    def _write_table(self, node: Node, writer: _BlockWriter) -> None:
        rows = [self._row_cells(row) for row in node.content]
        if not rows:
            return

        rendered = [[self._render_inline(cell.content, _CELL) for cell in cells] for cells in rows]
        header = rendered[0] or [""]
        width = len(header)

        def format_row(cells: list[str]) -> str:
            cells = (cells + [""] * width)[:width]
            return "| " + " | ".join(cells) + " |"

        writer.begin()
        writer.write(format_row(header))
        writer.write(format_row([TABLE_SEPARATOR_CELL] * width))
        for cells in rendered[1:]:
            writer.write(format_row(cells))
        writer.end(node.type)

    @staticmethod
    def _row_cells(row: Node) -> list[Node]:
        if row.type == NodeType.TABLE_ROW.value:
            return row.content
        return [row]

    def _enter_list(self, node: Node, frame: _Frame, stack: list[_Frame]) -> None:
        if not node.content:
            logger.debug("Skipping empty %s", node.type)
            return

        writer = frame.writer
        kind = node.kind
        follows_same = writer.last_block == node.type

        if kind is NodeType.ORDERED_LIST:
            start = node.attr("start", 1)
            if not isinstance(start, int) or isinstance(start, bool) or start < 0:
                start = 1
            delimiter = ")" if follows_same and writer.last_marker == "." else "."
            state = _ListState(type=node.type, marker=delimiter, counter=start)
            # Only a list starting at 1 may follow a paragraph line directly
            allow_soft = start == 1
        elif kind is NodeType.TASK_LIST:
            # Task lines read back as paragraphs, so the list leaves no boundary of its own
            writer.begin()
            stack.append(
                _Frame(
                    nodes=node.content,
                    writer=writer,
                    in_list_item=frame.in_list_item,
                    list_state=_ListState(type=node.type, marker=""),
                )
            )
            return
        else:
            symbol = self.options.bullet_symbol
            if follows_same and writer.last_marker == symbol:
                symbol = self.options.alternate_bullet_symbol
            state = _ListState(type=node.type, marker=symbol)
            allow_soft = True

        writer.begin(allow_soft=allow_soft)
        stack.append(
            _Frame(
                nodes=node.content,
                writer=writer,
                list_state=state,
                on_exit=lambda: writer.end(node.type, marker=state.marker),
            )
        )

    def _enter_list_item(self, node: Node, state: _ListState, frame: _Frame, stack: list[_Frame]) -> None:
        if state.type == NodeType.TASK_LIST.value:
            self._enter_task_line(node, frame, stack)
            return

        if state.type == NodeType.ORDERED_LIST.value:
            marker = f"{state.counter}{state.marker} "
            indent = len(marker)
            state.counter += 1
        else:
            marker = f"{state.marker} "
            indent = LIST_INDENT_WIDTH

        item_writer = _BlockWriter()
        parent_writer = frame.writer
        if node.type == NodeType.TASK_ITEM.value:
            children = _task_item_blocks(node)
        else:
            children = node.content if node.type in LIST_ITEM_TYPES else [node]

        def close_item() -> None:
            parent_writer.extend(_prefix_lines(item_writer.lines, marker, " " * indent))

        stack.append(_Frame(nodes=children, writer=item_writer, in_list_item=True, on_exit=close_item))

    def _enter_task_line(self, node: Node, frame: _Frame, stack: list[_Frame]) -> None:
        """Write one task list item as a keyword line.

        A keyword is not a list marker, so indented content under it would
        not stay attached when read back. The item's other blocks follow as
        siblings of the line, and consecutive task lines share a paragraph.
        """
        first, *rest = _task_item_blocks(node)
        writer = frame.writer
        writer.begin(task_line=True)
        writer.write(self._render_inline(first.content, _BLOCK))
        writer.end(NodeType.PARAGRAPH.value, soft=frame.in_list_item, task_line=True)
        if rest:
            stack.append(_Frame(nodes=rest, writer=writer, in_list_item=frame.in_list_item))

    # ------------------------------------------------------------------
    # Inline level
    # ------------------------------------------------------------------

    def _collect_leaves(self, nodes: list[Node]) -> list[_Leaf]:
        """Flatten inline content into leaves with normalized marks.

        Newlines inside text become hard breaks, and adjacent text leaves
        with the same marks are merged so that they share delimiters.
        """
        leaves: list[_Leaf] = []
        for node in iter_inline_leaves(nodes):
            marks, code = _normalize_marks(node.marks)
            if node.type != NodeType.TEXT.value:
                leaves.append(_Leaf(node=node, marks=[] if node.type == NodeType.HARD_BREAK.value else marks))
                continue

            for index, piece in enumerate((node.text or "").split("\n")):
                if index:
                    leaves.append(_Leaf(node=Node(NodeType.HARD_BREAK.value)))
                if not piece:
                    continue
                previous = leaves[-1] if leaves else None
                if (
                    previous is not None
                    and previous.node.type == NodeType.TEXT.value
                    and previous.code == code
                    and len(previous.marks) == len(marks)
                    and all(_same_mark(a, b) for a, b in zip(previous.marks, marks))
                ):
                    previous.text += piece
                else:
                    leaves.append(_Leaf(node=node, marks=marks, code=code, text=piece))
        return leaves

    def _render_inline(self, nodes: list[Node], mode: str) -> str:
        leaves = self._collect_leaves(nodes)
        if mode == _BLOCK:
            # A break at the end of a block cannot be written; drop trailing breaks
            while leaves and (
                leaves[-1].node.type == NodeType.HARD_BREAK.value
                or (leaves[-1].node.type == NodeType.TEXT.value and not leaves[-1].code and not leaves[-1].text.strip(" \t"))
            ):
                leaves.pop()

        out: list[str] = []
        open_marks: list[tuple[Mark, str]] = []
        pending = ""
        line_start = True

        for index, leaf in enumerate(leaves):
            if leaf.node.type == NodeType.HARD_BREAK.value:
                if mode == _BLOCK:
                    # Delimiters cannot span the break safely; reopen on the next line
                    out.extend(closer for _, closer in reversed(open_marks))
                    open_marks = []
                    # An empty line would end the paragraph, so it gets an explicit break
                    out.append("\\\n" if line_start else "\n")
                    pending = ""
                    line_start = True
                else:
                    pending += " "
                continue

            leading, core, trailing = self._leaf_parts(leaf, mode)
            if not core:
                pending += leading
                continue

            common = 0
            while (
                common < len(open_marks)
                and common < len(leaf.marks)
                and _same_mark(open_marks[common][0], leaf.marks[common])
            ):
                common += 1
            out.extend(closer for _, closer in reversed(open_marks[common:]))
            del open_marks[common:]

            if not line_start:
                out.append(pending + leading)
            pending = ""

            openers = leaf.marks[common:]
            is_marker = leaf.node.type == NodeType.TASK_MARKER.value
            if is_marker and not openers and _WORD_CHAR_RE.match(_last_char(out)):
                # A keyword glued to a preceding word is not a whole word
                out.append(" ")
            for mark in openers:
                opener, closer = self._delimiters(mark, leaves, index, mode)
                out.append(opener)
                open_marks.append((mark, closer))

            if leaf.node.type == NodeType.TEXT.value and not leaf.code:
                in_link = any(mark.type == MarkType.LINK.value for mark in leaf.marks)
                core = self._escape_text(
                    core, at_line_start=line_start and not openers and mode == _BLOCK, mode=mode, in_link=in_link
                )
                if core.startswith("(") and self.options.escape_special and _last_char(out) == "]":
                    # "[09:30](x)" would read back as a link
                    core = "\\" + core
            out.append(core)
            pending = self._marker_separator(leaves, index) if is_marker else trailing
            line_start = False

        out.extend(closer for _, closer in reversed(open_marks))
        return "".join(out)

    def _leaf_parts(self, leaf: _Leaf, mode: str) -> tuple[str, str, str]:
        """Return (leading whitespace, core markup, trailing whitespace) of a leaf."""
        kind = leaf.node.kind
        node = leaf.node

        if kind is NodeType.TEXT:
            if leaf.code:
                return "", self._cell_safe(code_span(leaf.text), mode), ""
            return _split_whitespace(leaf.text)
        if kind is NodeType.TASK_MARKER:
            return "", task_keyword(node.attrs.get("state")), ""
        if kind is NodeType.TIMESTAMP:
            return "", f"[{node.attr('time', DEFAULT_TIMESTAMP)}]", ""
        if kind is NodeType.NOTE_LINK:
            return "", self._cell_safe(f"[[{node.attr('title', DEFAULT_NOTE_TITLE)}]]", mode), ""
        if kind is NodeType.IMAGE:
            return "", self._cell_safe(self._image_markup(node), mode), ""
        return "", "", ""

    @staticmethod
    def _marker_separator(leaves: list[_Leaf], index: int) -> str:
        """Whitespace to write after the task keyword at ``leaves[index]``.

        When reading, one space or tab directly after a keyword belongs to
        the marker, and the keyword must not run into a word. A space is
        therefore written before a word, and before whitespace the next run
        already starts with unless a closing delimiter comes first. Nothing
        is written before punctuation or at the end of a line.
        """
        if index + 1 >= len(leaves):
            return ""
        marker, following = leaves[index], leaves[index + 1]
        if following.node.type == NodeType.HARD_BREAK.value:
            return ""
        if following.node.type != NodeType.TEXT.value or following.code:
            return " "

        closes = len(following.marks) < len(marker.marks) or not all(
            _same_mark(a, b) for a, b in zip(marker.marks, following.marks)
        )
        first = following.text[:1]
        if first in (" ", "\t"):
            return "" if closes else " "
        if _WORD_CHAR_RE.match(first):
            return " "
        opens = len(following.marks) > len(marker.marks)
        return " " if opens and not closes else ""

    def _cell_safe(self, markup: str, mode: str) -> str:
        if mode == _CELL and self.options.table_pipe_escape:
            return escape_table_pipes(markup)
        return markup

    def _image_markup(self, node: Node) -> str:
        src = self._rewrite_asset_path(str(node.attr("src", "")))
        alt = escape_brackets(str(node.attr("alt", "")))
        title = node.attr("title")
        title_part = f' "{escape_link_title(str(title))}"' if title else ""
        return f"![{alt}]({format_link_destination(src)}{title_part})"

    def _rewrite_asset_path(self, src: str) -> str:
        """Rewrite ``file://.../.assets/name`` to the relative ``.assets/name``."""
        if not self.options.rewrite_asset_paths or not src.startswith("file://"):
            return src
        position = src.find("/" + ASSETS_DIR_MARKER)
        if position < 0:
            return src
        return src[position + 1 :]

    def _escape_text(self, text: str, at_line_start: bool, mode: str, in_link: bool = False) -> str:
        in_table = mode == _CELL and self.options.table_pipe_escape
        if self.options.escape_special:
            return escape_markdown_text(text, at_line_start=at_line_start, in_table=in_table, in_link=in_link)
        return escape_table_pipes(text) if in_table else text

    def _delimiters(self, mark: Mark, leaves: list[_Leaf], index: int, mode: str) -> tuple[str, str]:
        """Return the opening and closing delimiters for ``mark`` opened at ``leaves[index]``."""
        if mark.type == MarkType.LINK.value:
            attrs = mark.attrs or {}
            destination = format_link_destination(str(attrs.get("href") or ""))
            title = attrs.get("title")
            title_part = f' "{escape_link_title(str(title))}"' if title else ""
            return "[", f"]({destination}{title_part})"
        if mark.type == MarkType.ITALIC.value:
            symbol = "_" if self._italic_touches_bold(leaves, index, mode) else self.options.emphasis_symbol
            return symbol, symbol
        opener, closer = MARK_DELIMITERS[mark.type]
        return opener, closer

    @staticmethod
    def _italic_touches_bold(leaves: list[_Leaf], index: int, mode: str) -> bool:
        """Whether the italic span opened at ``index`` contains or borders bold text.

        ``***`` runs are ambiguous, so italic next to bold uses the other
        emphasis symbol.
        """
        bold = MarkType.BOLD.value
        italic = MarkType.ITALIC.value

        def has(leaf: _Leaf, mark_type: str) -> bool:
            return any(mark.type == mark_type for mark in leaf.marks)

        end = index
        while end < len(leaves):
            leaf = leaves[end]
            if leaf.node.type == NodeType.HARD_BREAK.value:
                if mode == _BLOCK:
                    break
            elif leaf.node.type == NodeType.TEXT.value and not leaf.code and not leaf.text.strip():
                pass
            elif not has(leaf, italic):
                break
            elif has(leaf, bold):
                return True
            end += 1

        if index > 0 and has(leaves[index - 1], bold):
            return True
        return end < len(leaves) and has(leaves[end], bold)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _finalize(self, lines: list[_Line]) -> str:
        """Trim trailing whitespace, collapse blank lines and add the final newline.

        Lines inside code blocks are left untouched.
        """
        output: list[str] = []
        previous_blank = False
        for line in lines:
            if line.verbatim:
                output.append(line.text)
                previous_blank = False
                continue
            text = line.text.rstrip()
            if not text:
                if previous_blank and self.options.collapse_blank_lines:
                    continue
                previous_blank = True
            else:
                previous_blank = False
            output.append(text)

        while output and output[0] == "":
            output.pop(0)
        while output and output[-1] == "":
            output.pop()

        if not output:
            return ""
        result = "\n".join(output)
        return result + "\n" if self.options.trailing_newline else result


def serialize_markdown(
    tree: Union[Node, Mapping[str, Any]], options: Optional[MarkdownSerializerOptions] = None
) -> str:
    """Serialize a document tree to markup.

    Parameters
    ----------
    tree : Node or Mapping
        Root ``document`` node, as ``Node`` objects or in dict form
    options : MarkdownSerializerOptions or None, default None
        Serializer options

    Returns
    -------
    str
        Markup text

    """
    return MarkdownSerializer(options).serialize(tree)
