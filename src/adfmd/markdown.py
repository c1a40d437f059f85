"""Render document trees as Markdown with a custom serializer."""

from __future__ import annotations

import logging

from adfmd.config import ADFMD_MAX_TREE_DEPTH
from adfmd.exceptions import AdfmdError, DepthLimitError
from adfmd.extractors import collect_text
from adfmd.nodes import (
    INLINE_NODE_TYPES,
    Document,
    Mark,
    Node,
    heading_level,
    node_attrs,
    node_children,
)

logger = logging.getLogger(__name__)

_LIST_TYPES = {"bulletList", "orderedList"}
_CELL_TYPES = {"tableCell", "tableHeader"}


def doc_to_markdown(doc: Document, *, max_depth: int | None = None) -> str:
    """Convert a document into Markdown.

    Never raises: if rendering fails, including on trees nested deeper than
    ``max_depth``, the plain text of the document is returned instead.
    """
    limit = ADFMD_MAX_TREE_DEPTH if max_depth is None else max_depth
    content = doc.get("content") if isinstance(doc, dict) else None
    if not isinstance(content, list):
        content = []
    nodes = [node for node in content if isinstance(node, dict)]

    try:
        blocks = _serialize_children(nodes, depth=0, limit=limit)
    except (AdfmdError, AttributeError, KeyError, RecursionError, TypeError, ValueError) as exc:
        logger.warning("Markdown rendering failed, falling back to plain text: %s", exc)
        text = collect_text(doc if isinstance(doc, dict) else {})
        return " ".join(text.split())

    markdown = "\n\n".join(block for block in blocks if block).strip()
    logger.debug("Rendered %d blocks into %d characters", len(nodes), len(markdown))
    return markdown


def _check_depth(depth: int, limit: int) -> None:
    if depth > limit:
        raise DepthLimitError(limit)


def _serialize_children(nodes: list[Node], *, depth: int, limit: int) -> list[str]:
    blocks: list[str] = []
    for node in nodes:
        blocks.extend(_serialize_block(node, depth=depth, limit=limit))
    return blocks


def _serialize_block(node: Node, *, depth: int, limit: int) -> list[str]:
    _check_depth(depth, limit)
    node_type = node.get("type")
    children = node_children(node)

    if node_type == "paragraph":
        text = _serialize_inline_nodes(children, depth=depth + 1, limit=limit)
        return [text] if text else []

    if node_type == "heading":
        level = max(1, min(heading_level(node), 6))
        text = _serialize_inline_nodes(children, depth=depth + 1, limit=limit)
        return [f"{'#' * level} {text}".rstrip()]

    if node_type in _LIST_TYPES:
        lines = _serialize_list(node, 0, depth=depth, limit=limit)
        return ["\n".join(lines)] if lines else []

    if node_type == "codeBlock":
        return [_serialize_code_block(node)]

    if node_type == "table":
        table = _serialize_table(node, depth=depth, limit=limit)
        return [table] if table else []

    if node_type == "blockquote":
        inner = "\n\n".join(_serialize_children(children, depth=depth + 1, limit=limit))
        lines = [f"> {line}" for line in inner.split("\n") if line.strip()]
        return ["\n".join(lines)] if lines else []

    if node_type == "rule":
        return ["---"]

    if node_type in {"blockCard", "embedCard"}:
        url = node_attrs(node).get("url")
        return [f"[{url}]({url})"] if url else []

    if node_type in INLINE_NODE_TYPES:
        text = _serialize_inline(node, depth=depth, limit=limit)
        return [text] if text else []

    if children and all(child.get("type") in INLINE_NODE_TYPES for child in children):
        text = _serialize_inline_nodes(children, depth=depth + 1, limit=limit)
        return [text] if text else []
    if children:
        return _serialize_children(children, depth=depth + 1, limit=limit)

    logger.debug("Skipping node without content", extra={"node_type": node_type})
    return []


def _serialize_inline_nodes(nodes: list[Node], *, depth: int, limit: int) -> str:
    return "".join(_serialize_inline(node, depth=depth, limit=limit) for node in nodes)


def _serialize_inline(node: Node, *, depth: int, limit: int) -> str:
    _check_depth(depth, limit)
    node_type = node.get("type")
    attrs = node_attrs(node)

    if node_type == "text":
        return _apply_marks(str(node.get("text") or ""), node.get("marks"))

    if node_type == "hardBreak":
        return "\n"

    if node_type == "inlineCard":
        url = attrs.get("url") or ""
        title = attrs.get("title") or url
        return f"[{title}]({url})"

    if node_type == "mention":
        name = attrs.get("text") or attrs.get("id") or "unknown"
        return f"@[{str(name).lstrip('@')}]"

    if node_type == "emoji":
        short_name = str(attrs.get("shortName") or "emoji").strip(":")
        return f":{short_name}:"

    if isinstance(node.get("text"), str):
        return node["text"]
    return _serialize_inline_nodes(node_children(node), depth=depth + 1, limit=limit)


def _apply_marks(text: str, marks: object) -> str:
    """Wrap ``text`` in each mark's tokens, in the order the marks are listed."""
    if not isinstance(marks, list):
        return text

    result = text
    for mark in marks:
        if not isinstance(mark, dict):
            continue
        mark_type = mark.get("type")
        if mark_type == "strong":
            result = f"**{result}**"
        elif mark_type == "em":
            result = f"*{result}*"
        elif mark_type == "code":
            result = f"`{result}`"
        elif mark_type == "link":
            result = f"[{result}]({_mark_href(mark)})"
        elif mark_type == "strike":
            result = f"~~{result}~~"
        elif mark_type == "underline":
            # No native underline in Markdown.
            result = f"<u>{result}</u>"
    return result


def _mark_href(mark: Mark) -> str:
    return str(node_attrs(mark).get("href") or "")


def _serialize_list(list_node: Node, indent: int, *, depth: int, limit: int) -> list[str]:
    _check_depth(depth, limit)
    ordered = list_node.get("type") == "orderedList"
    start = node_attrs(list_node).get("order", 1)
    if not isinstance(start, int) or isinstance(start, bool):
        start = 1

    lines: list[str] = []
    pad = "  " * indent
    items = [item for item in node_children(list_node) if item.get("type") == "listItem"]
    for number, item in enumerate(items, start=start):
        marker = f"{number}. " if ordered else "- "
        has_marker = False
        for child in node_children(item):
            child_type = child.get("type")
            if child_type in _LIST_TYPES:
                if not has_marker:
                    lines.append((pad + marker).rstrip())
                    has_marker = True
                lines.extend(_serialize_list(child, indent + 1, depth=depth + 2, limit=limit))
                continue
            if child_type == "paragraph":
                text = _serialize_inline_nodes(node_children(child), depth=depth + 3, limit=limit).strip()
                blocks = [text] if text else []
            else:
                blocks = _serialize_block(child, depth=depth + 2, limit=limit)
            for block in blocks:
                if not has_marker:
                    first, *rest = block.split("\n")
                    lines.append(pad + marker + first)
                    lines.extend(pad + "  " + line for line in rest)
                    has_marker = True
                else:
                    lines.extend(pad + "  " + line for line in block.split("\n"))
        if not has_marker:
            lines.append((pad + marker).rstrip())
    return lines


def _serialize_code_block(node: Node) -> str:
    language = node_attrs(node).get("language") or ""
    # Text nodes already carry their own newlines; join without a separator.
    code = "".join(str(child.get("text") or "") for child in node_children(node))
    return f"```{language}\n{code}\n```"


def _serialize_table(table: Node, *, depth: int, limit: int) -> str:
    rows: list[list[str]] = []
    for row in node_children(table):
        if row.get("type") != "tableRow":
            continue
        values = []
        for cell in node_children(row):
            if cell.get("type") not in _CELL_TYPES:
                continue
            cell_blocks = _serialize_children(node_children(cell), depth=depth + 3, limit=limit)
            cell_text = " ".join(block.strip() for block in cell_blocks if block.strip())
            values.append(cell_text.replace("\n", "<br>"))
        rows.append(values)

    if not rows:
        return ""

    max_cols = max(len(row) for row in rows)
    if max_cols == 0:
        return ""
    normalized = [row + [""] * (max_cols - len(row)) for row in rows]
    header = normalized[0]
    lines = [
        "| " + " | ".join(header) + " |",
        "| " + " | ".join("---" for _ in header) + " |",
    ]
    for row in normalized[1:]:
        lines.append("| " + " | ".join(row) + " |")
    return "\n".join(lines)
