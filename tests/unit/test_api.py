#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the top-level conversion functions."""

import pytest

import notemark
from notemark import from_ast, normalize, to_ast
from notemark.ast.nodes import Node, document, text_node
from notemark.ast.serialization import node_to_dict
from notemark.exceptions import MalformedTreeError, ValidationError
from notemark.options.markdown import MarkdownParserOptions, MarkdownSerializerOptions


@pytest.mark.unit
class TestToAst:
    """Test to_ast."""

    def test_entities(self) -> None:
        doc = to_ast("DONE ship it [[Release]]")

        assert [child.type for child in doc.content[0].content] == ["taskMarker", "text", "noteLink"]

    def test_keyword_overrides(self) -> None:
        """Keyword arguments override fields of the options object."""
        options = MarkdownParserOptions(recognize_note_links=False)
        doc = to_ast("[09:30] [[x]]", parser_options=options, recognize_timestamps=False)

        assert [child.type for child in doc.content[0].content] == ["text"]

    def test_unknown_keyword(self) -> None:
        with pytest.raises(ValidationError, match="bullet_symbol") as exc_info:
            to_ast("x", bullet_symbol="*")

        assert exc_info.value.parameter_name == "bullet_symbol"


@pytest.mark.unit
class TestFromAst:
    """Test from_ast."""

    def test_node_and_dict_forms(self) -> None:
        tree = document(Node("paragraph", content=[text_node("hello")]))

        assert from_ast(tree) == "hello\n"
        assert from_ast(node_to_dict(tree)) == "hello\n"

    def test_keyword_overrides(self) -> None:
        tree = to_ast("- a")
        options = MarkdownSerializerOptions(trailing_newline=False)

        assert from_ast(tree, serializer_options=options, bullet_symbol="+") == "+ a"

    def test_invalid_override_value(self) -> None:
        """Values rejected by the options become validation errors."""
        with pytest.raises(ValidationError):
            from_ast(document(), emphasis_symbol="~")

    def test_malformed_tree(self) -> None:
        with pytest.raises(MalformedTreeError):
            from_ast({"type": "paragraph"})

    def test_empty_document(self) -> None:
        assert from_ast(document()) == ""


@pytest.mark.unit
class TestNormalize:
    """Test normalize and the package exports."""

    def test_canonical_form(self) -> None:
        assert normalize("* item\n* todo task") == "- item\n- TODO task\n"

    def test_options(self) -> None:
        text = normalize(
            "*a* TODO",
            parser_options=MarkdownParserOptions(recognize_task_markers=False),
            serializer_options=MarkdownSerializerOptions(emphasis_symbol="_"),
        )

        assert text == "_a_ TODO\n"

    def test_package_exports(self) -> None:
        for name in notemark.__all__:
            assert hasattr(notemark, name)
        assert notemark.__version__
