#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notemark/ast/serialization.py
"""JSON interchange for document trees.

The editing surface exchanges trees as JSON-like dictionaries::

    {"type": "document", "content": [
        {"type": "paragraph", "content": [
            {"type": "text", "text": "hi", "marks": [{"type": "bold"}]}
        ]}
    ]}

Empty ``attrs``, ``content`` and ``marks`` are omitted on output and
optional on input; ``text`` appears only on text nodes. Incoming trees are
validated and contract violations raise ``MalformedTreeError`` with the
location of the offending node.

Examples
--------
Serialize a tree to JSON and back:

    >>> from notemark.ast.nodes import document, text_node, Node
    >>> doc = document(Node("paragraph", content=[text_node("Hello")]))
    >>> json_str = ast_to_json(doc)
    >>> json_to_ast(json_str) == doc
    True

"""

from __future__ import annotations

import json
from typing import Any, Mapping

from notemark.ast.nodes import Mark, Node, NodeType
from notemark.exceptions import MalformedTreeError


def _mark_to_dict(mark: Mark) -> dict[str, Any]:
    result: dict[str, Any] = {"type": mark.type}
    if mark.attrs:
        result["attrs"] = dict(mark.attrs)
    return result


def node_to_dict(node: Node) -> dict[str, Any]:
    """Convert a node and its descendants to the JSON-like dict form.

    Parameters
    ----------
    node : Node
        Root of the (sub)tree to convert

    Returns
    -------
    dict
        Interchange representation

    """
    root: dict[str, Any] = {}
    stack: list[tuple[Node, dict[str, Any]]] = [(node, root)]
    while stack:
        current, target = stack.pop()
        target["type"] = current.type
        if current.attrs:
            target["attrs"] = dict(current.attrs)
        if current.type == NodeType.TEXT.value:
            target["text"] = current.text
        if current.marks:
            target["marks"] = [_mark_to_dict(mark) for mark in current.marks]
        if current.content:
            children: list[dict[str, Any]] = [{} for _ in current.content]
            target["content"] = children
            stack.extend(zip(current.content, children))
    return root


def _child_path(path: str, index: int) -> str:
    return f"{path}/content/{index}" if path else f"content/{index}"


def _mark_from_dict(data: Any, path: str) -> Mark:
    if not isinstance(data, Mapping):
        raise MalformedTreeError("Mark must be a mapping", path=path)
    mark_type = data.get("type")
    if not isinstance(mark_type, str) or not mark_type:
        raise MalformedTreeError("Mark is missing a string 'type'", path=path)
    attrs = data.get("attrs")
    if attrs is not None and not isinstance(attrs, Mapping):
        raise MalformedTreeError(f"Attributes of mark '{mark_type}' must be a mapping", path=path)
    return Mark(type=mark_type, attrs=dict(attrs) if attrs else None)


def _node_shell(data: Any, path: str) -> Node:
    """Build a node from ``data`` without its children, validating the shape."""
    if not isinstance(data, Mapping):
        raise MalformedTreeError(f"Node must be a mapping, got {type(data).__name__}", path=path)

    node_type = data.get("type")
    if not isinstance(node_type, str) or not node_type:
        raise MalformedTreeError("Node is missing a string 'type'", path=path)

    attrs = data.get("attrs")
    if attrs is not None and not isinstance(attrs, Mapping):
        raise MalformedTreeError(f"Attributes of '{node_type}' must be a mapping", path=path, node_type=node_type)

    content = data.get("content")
    if content is not None and not isinstance(content, list):
        raise MalformedTreeError(f"Content of '{node_type}' must be a list", path=path, node_type=node_type)

    text = data.get("text")
    if node_type == NodeType.TEXT.value and not isinstance(text, str):
        raise MalformedTreeError(
            f"Text node must carry a string 'text', got {type(text).__name__}", path=path, node_type=node_type
        )

    raw_marks = data.get("marks")
    if raw_marks is not None and not isinstance(raw_marks, list):
        raise MalformedTreeError(f"Marks of '{node_type}' must be a list", path=path, node_type=node_type)
    marks = [
        _mark_from_dict(mark, f"{path}/marks/{index}" if path else f"marks/{index}")
        for index, mark in enumerate(raw_marks or [])
    ]

    return Node(
        type=node_type,
        attrs=dict(attrs) if attrs else {},
        text=text if node_type == NodeType.TEXT.value else None,
        marks=marks,
    )


def dict_to_node(data: Any, require_document: bool = True) -> Node:
    """Build a tree from its JSON-like dict form.

    Parameters
    ----------
    data : Mapping
        Interchange representation of the tree
    require_document : bool, default True
        Reject roots that are not ``document`` nodes

    Returns
    -------
    Node
        Root node

    Raises
    ------
    MalformedTreeError
        If the data violates the interchange contract

    """
    root = _node_shell(data, "")
    if require_document and root.type != NodeType.DOCUMENT.value:
        raise MalformedTreeError(f"Root node must be of type 'document', got '{root.type}'", node_type=root.type)

    stack: list[tuple[Mapping[str, Any], Node, str]] = [(data, root, "")]
    while stack:
        raw, node, path = stack.pop()
        for index, child in enumerate(raw.get("content") or []):
            child_path = _child_path(path, index)
            child_node = _node_shell(child, child_path)
            node.content.append(child_node)
            stack.append((child, child_node, child_path))
    return root


def validate_tree(root: Node) -> None:
    """Check a tree of ``Node`` objects against the interchange contract.

    Parameters
    ----------
    root : Node
        Tree to check; must be a ``document`` node

    Raises
    ------
    MalformedTreeError
        On the first violation found

    """
    if not isinstance(root, Node):
        raise MalformedTreeError(f"Tree must be a Node or a mapping, got {type(root).__name__}")
    if root.type != NodeType.DOCUMENT.value:
        raise MalformedTreeError(f"Root node must be of type 'document', got '{root.type}'", node_type=str(root.type))

    stack: list[tuple[Node, str]] = [(root, "")]
    while stack:
        node, path = stack.pop()
        if not isinstance(node.type, str) or not node.type:
            raise MalformedTreeError("Node is missing a string 'type'", path=path)
        if node.type == NodeType.TEXT.value and not isinstance(node.text, str):
            raise MalformedTreeError(
                f"Text node must carry a string 'text', got {type(node.text).__name__}", path=path, node_type=node.type
            )
        if not isinstance(node.attrs, Mapping):
            raise MalformedTreeError(f"Attributes of '{node.type}' must be a mapping", path=path, node_type=node.type)
        for mark in node.marks:
            if not isinstance(mark, Mark) or not isinstance(mark.type, str):
                raise MalformedTreeError(f"Marks of '{node.type}' must be Mark objects", path=path, node_type=node.type)
        if not isinstance(node.content, list):
            raise MalformedTreeError(f"Content of '{node.type}' must be a list", path=path, node_type=node.type)
        for index, child in enumerate(node.content):
            child_path = _child_path(path, index)
            if not isinstance(child, Node):
                raise MalformedTreeError(f"Child must be a Node, got {type(child).__name__}", path=child_path)
            stack.append((child, child_path))


def coerce_tree(tree: Node | Mapping[str, Any]) -> Node:
    """Accept a tree as ``Node`` objects or dict form and return validated nodes."""
    if isinstance(tree, Mapping):
        return dict_to_node(tree)
    validate_tree(tree)
    return tree


def ast_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize a tree to a JSON string.

    Parameters
    ----------
    node : Node
        Root of the tree
    indent : int or None, default None
        Indentation passed to ``json.dumps``

    Returns
    -------
    str
        JSON text

    """
    return json.dumps(node_to_dict(node), indent=indent, ensure_ascii=False)


def json_to_ast(json_str: str) -> Node:
    """Deserialize a tree from a JSON string.

    Parameters
    ----------
    json_str : str
        JSON text produced by ``ast_to_json`` or the editing surface

    Returns
    -------
    Node
        Root document node

    Raises
    ------
    MalformedTreeError
        If the text is not JSON or the tree violates the contract

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise MalformedTreeError(f"Invalid JSON: {e.msg}", original_error=e) from e
    return dict_to_node(data)
