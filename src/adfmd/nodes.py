"""Node model helpers: validation, vocabularies, builders, and cloning.

Trees are plain JSON-compatible dicts and lists. Any node type outside the
known vocabularies is still a valid node; it is never rejected, only passed
through untouched.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from pydantic import ValidationError

from adfmd.config import DEFAULT_HEADING_LEVEL
from adfmd.exceptions import InvalidDocumentError
from adfmd.schemas import AdfDocument

logger = logging.getLogger(__name__)

Node = dict[str, Any]
Mark = dict[str, Any]
Document = dict[str, Any]

BLOCK_NODE_TYPES = frozenset(
    {
        "paragraph",
        "heading",
        "bulletList",
        "orderedList",
        "listItem",
        "codeBlock",
        "blockquote",
        "rule",
        "table",
        "tableRow",
        "tableHeader",
        "tableCell",
        "blockCard",
        "embedCard",
    }
)
INLINE_NODE_TYPES = frozenset({"text", "hardBreak", "inlineCard", "mention", "emoji"})
MARK_TYPES = frozenset({"strong", "em", "code", "link", "strike", "underline"})


def is_valid_document(value: Any) -> bool:
    """Return True if ``value`` has the top-level shape of a document.

    Only ``version``, ``type`` and ``content`` are checked; descendants are
    not inspected.
    """
    if not isinstance(value, dict):
        return False

    version = value.get("version")
    valid = (
        isinstance(version, int)
        and not isinstance(version, bool)
        and version == 1
        and value.get("type") == "doc"
        and isinstance(value.get("content"), list)
    )
    if not valid:
        logger.warning("Invalid document structure - missing required fields")
    return valid


def parse_document(value: Any) -> AdfDocument:
    """Validate ``value`` into an :class:`AdfDocument`.

    Unlike :func:`is_valid_document` this also checks that every descendant
    is node-shaped.

    Raises:
        InvalidDocumentError: If ``value`` is not a document.
    """
    if not is_valid_document(value):
        raise InvalidDocumentError("Value is not a version 1 document")
    try:
        return AdfDocument.model_validate(value)
    except ValidationError as exc:
        raise InvalidDocumentError(f"Malformed document content: {exc}") from exc


def is_known_type(node_type: str) -> bool:
    """Return True for node types the converters understand."""
    return node_type in BLOCK_NODE_TYPES or node_type in INLINE_NODE_TYPES


def node_attrs(node: Node) -> dict[str, Any]:
    attrs = node.get("attrs")
    return attrs if isinstance(attrs, dict) else {}


def node_children(node: Node) -> list[Node]:
    content = node.get("content")
    if not isinstance(content, list):
        return []
    return [child for child in content if isinstance(child, dict)]


def heading_level(node: Node) -> int:
    """Return a heading's level, defaulting to 1 when it is missing."""
    level = node_attrs(node).get("level")
    if isinstance(level, int) and not isinstance(level, bool):
        return level
    return DEFAULT_HEADING_LEVEL


def text_node(text: str, marks: list[Mark] | None = None) -> Node:
    node: Node = {"type": "text", "text": text}
    if marks:
        node["marks"] = marks
    return node


def paragraph(text: str, marks: list[Mark] | None = None) -> Node:
    """Create a paragraph holding a single text node."""
    return {"type": "paragraph", "content": [text_node(text, marks)]}


def heading(level: int, text: str) -> Node:
    return {"type": "heading", "attrs": {"level": level}, "content": [text_node(text)]}


def bullet_list(items: list[list[Node]]) -> Node:
    """Create a bullet list; each entry of ``items`` is one item's content."""
    return {
        "type": "bulletList",
        "content": [{"type": "listItem", "content": item} for item in items],
    }


def ordered_list(items: list[list[Node]], *, order: int = 1) -> Node:
    node: Node = {
        "type": "orderedList",
        "content": [{"type": "listItem", "content": item} for item in items],
    }
    if order != 1:
        node["attrs"] = {"order": order}
    return node


def hard_break() -> Node:
    return {"type": "hardBreak"}


def rule() -> Node:
    return {"type": "rule"}


def make_document(content: list[Node]) -> Document:
    return {"version": 1, "type": "doc", "content": list(content)}


def clone_node(node: Node) -> Node:
    """Deep copy a node, keeping properties this package does not know about."""
    return copy.deepcopy(node)


def clone_nodes(nodes: list[Node]) -> list[Node]:
    return [clone_node(node) for node in nodes]
