"""Generic depth-first traversal and rewriting of document trees."""

from __future__ import annotations

from typing import Callable, Union

from adfmd.config import ADFMD_MAX_TREE_DEPTH
from adfmd.exceptions import DepthLimitError
from adfmd.nodes import Document, Node, node_children

# Returning False skips the node's children; anything else continues.
Visitor = Callable[[Node, Union[Node, None], int], Union[bool, None]]
# A node replaces, a list splices zero or more nodes in, None deletes.
Transformer = Callable[[Node], Union[Node, list[Node], None]]


def traverse(nodes: list[Node], visitor: Visitor) -> None:
    """Visit ``nodes`` depth-first, parents before children.

    ``visitor`` is called as ``visitor(node, parent, depth)`` with ``parent``
    None and ``depth`` 0 for the given nodes. Uses an explicit stack, so
    arbitrarily deep trees are safe to walk.
    """
    stack: list[tuple[Node, Node | None, int]] = [
        (node, None, 0) for node in reversed(nodes) if isinstance(node, dict)
    ]
    while stack:
        node, parent, depth = stack.pop()
        if visitor(node, parent, depth) is False:
            continue
        for child in reversed(node_children(node)):
            stack.append((child, node, depth + 1))


def traverse_document(doc: Document, visitor: Visitor) -> None:
    content = doc.get("content") if isinstance(doc, dict) else None
    traverse(content if isinstance(content, list) else [], visitor)


def transform(
    nodes: list[Node],
    transformer: Transformer,
    *,
    max_depth: int | None = None,
) -> list[Node]:
    """Rewrite ``nodes`` depth-first, children before parents.

    Each node's children are transformed first, then ``transformer`` is
    called with the rebuilt node. The input is never mutated; nodes without
    children are handed to ``transformer`` as-is.

    Raises:
        DepthLimitError: If the tree nests deeper than ``max_depth``.
    """
    limit = ADFMD_MAX_TREE_DEPTH if max_depth is None else max_depth
    return _transform(nodes, transformer, 0, limit)


def _transform(
    nodes: list[Node], transformer: Transformer, depth: int, limit: int
) -> list[Node]:
    if depth > limit:
        raise DepthLimitError(limit)

    result: list[Node] = []
    for node in nodes:
        if isinstance(node.get("content"), list):
            node = {
                **node,
                "content": _transform(node["content"], transformer, depth + 1, limit),
            }

        transformed = transformer(node)
        if transformed is None:
            continue
        if isinstance(transformed, list):
            result.extend(transformed)
        else:
            result.append(transformed)
    return result


def transform_document(
    doc: Document, transformer: Transformer, *, max_depth: int | None = None
) -> Document:
    """Transform a document's content, keeping its other top-level keys."""
    return {
        **doc,
        "content": transform(doc.get("content") or [], transformer, max_depth=max_depth),
    }


def find_nodes(
    source: Document | list[Node], predicate: Callable[[Node], bool]
) -> list[Node]:
    """Collect every node matching ``predicate`` in document order."""
    matches: list[Node] = []

    def _visit(node: Node, parent: Node | None, depth: int) -> None:
        if predicate(node):
            matches.append(node)

    if isinstance(source, list):
        traverse(source, _visit)
    else:
        traverse_document(source, _visit)
    return matches


def find_nodes_by_type(source: Document | list[Node], node_type: str) -> list[Node]:
    return find_nodes(source, lambda node: node.get("type") == node_type)
