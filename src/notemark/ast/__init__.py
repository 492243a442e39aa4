#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notemark/ast/__init__.py
"""Document tree for notemark.

The tree is the structure exchanged with the editing surface: a single
``document`` root of block nodes, inline content inside text blocks, and
ordered marks on text runs.
"""

from notemark.ast.nodes import (
    ATOMIC_TYPES,
    COMPLETED_TASK_STATES,
    CONTAINER_TYPES,
    INLINE_TYPES,
    LIST_ITEM_TYPES,
    LIST_TYPES,
    TABLE_CELL_TYPES,
    TEXTBLOCK_TYPES,
    Mark,
    MarkType,
    Node,
    NodeType,
    TaskState,
    document,
    text_node,
)
from notemark.ast.serialization import (
    ast_to_json,
    coerce_tree,
    dict_to_node,
    json_to_ast,
    node_to_dict,
    validate_tree,
)
from notemark.ast.utils import (
    extract_text,
    is_completed_state,
    iter_inline_leaves,
    iter_nodes,
    normalize_task_state,
    task_keyword,
)

__all__ = [
    "ATOMIC_TYPES",
    "COMPLETED_TASK_STATES",
    "CONTAINER_TYPES",
    "INLINE_TYPES",
    "LIST_ITEM_TYPES",
    "LIST_TYPES",
    "TABLE_CELL_TYPES",
    "TEXTBLOCK_TYPES",
    "Mark",
    "MarkType",
    "Node",
    "NodeType",
    "TaskState",
    "document",
    "text_node",
    "ast_to_json",
    "coerce_tree",
    "dict_to_node",
    "json_to_ast",
    "node_to_dict",
    "validate_tree",
    "extract_text",
    "is_completed_state",
    "iter_inline_leaves",
    "iter_nodes",
    "normalize_task_state",
    "task_keyword",
]
