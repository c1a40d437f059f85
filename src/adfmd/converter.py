"""Convert Markdown into document trees.

Parsing is done by mistune in AST mode; its tokens are mapped onto document
nodes here. ``markdown_to_doc`` never raises: when the parser fails, or the
input is not a non-empty string, it returns a plain paragraph split of the
input instead.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Iterable

import mistune
from pydantic import ValidationError

from adfmd.exceptions import ConversionError
from adfmd.extractors import INLINE_CARD_URL_PATTERNS, url_matches
from adfmd.nodes import Document, Mark, Node, hard_break, make_document, text_node
from adfmd.schemas import AdfDocument

try:
    from bs4 import BeautifulSoup
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise ConversionError(
        "BeautifulSoup4 is required for HTML fragments (pip install beautifulsoup4)."
    ) from exc

logger = logging.getLogger(__name__)

_MISTUNE_PLUGINS = ["strikethrough", "table", "url"]
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
_BR_TAG_RE = re.compile(r"^<br\s*/?>$", re.IGNORECASE)
_SIMPLE_MARKS = {"strong": "strong", "emphasis": "em", "strikethrough": "strike"}

Token = dict[str, Any]


async def markdown_to_doc(markdown: Any) -> Document:
    """Convert Markdown to a document, falling back to plain paragraphs.

    The parser runs in a worker thread; this is the only call in the package
    that suspends.
    """
    if not isinstance(markdown, str) or not markdown:
        logger.warning("Invalid markdown input provided, using fallback document")
        return fallback_document(markdown if isinstance(markdown, str) else "")

    try:
        doc = await asyncio.to_thread(convert_markdown, markdown)
    except ConversionError as exc:
        logger.warning("Markdown conversion failed, using fallback: %s", exc)
        return fallback_document(markdown)

    if not doc["content"]:
        return fallback_document(markdown)
    return doc


def fallback_document(text: str) -> Document:
    """Build a document with one paragraph per blank-line separated chunk."""
    chunks = [chunk.strip() for chunk in _PARAGRAPH_SPLIT_RE.split(text or "")]
    paragraphs = [
        {"type": "paragraph", "content": [text_node(chunk)]} for chunk in chunks if chunk
    ]
    if not paragraphs:
        paragraphs = [{"type": "paragraph", "content": []}]
    logger.debug("Built fallback document with %d paragraphs", len(paragraphs))
    return make_document(paragraphs)


def convert_markdown(
    markdown: str,
    *,
    inline_card_patterns: Iterable[str] = INLINE_CARD_URL_PATTERNS,
) -> Document:
    """Convert Markdown to a document (sync version).

    Links whose URL contains one of ``inline_card_patterns`` become inline
    cards instead of linked text.

    Raises:
        ConversionError: If parsing fails, the parser's tokens cannot be
            mapped, or the result is not a valid document.
    """
    parser = mistune.create_markdown(renderer=None, plugins=_MISTUNE_PLUGINS)
    try:
        tokens, _state = parser.parse(markdown)
    except Exception as exc:
        raise ConversionError(f"Markdown parsing failed: {exc}") from exc

    try:
        content = _convert_blocks(tokens, card_patterns=tuple(inline_card_patterns))
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ConversionError(f"Unexpected markdown token structure: {exc!r}") from exc

    doc = make_document(content)
    try:
        AdfDocument.model_validate(doc)
    except ValidationError as exc:
        raise ConversionError(f"Converted document failed validation: {exc}") from exc

    logger.debug(
        "Converted %d characters of markdown into %d blocks", len(markdown), len(content)
    )
    return doc


def _convert_blocks(tokens: list[Token], *, card_patterns: tuple[str, ...]) -> list[Node]:
    nodes: list[Node] = []
    for token in tokens:
        node = _convert_block(token, card_patterns=card_patterns)
        if node is not None:
            nodes.append(node)
    return nodes


def _convert_block(token: Token, *, card_patterns: tuple[str, ...]) -> Node | None:
    token_type = token.get("type")
    attrs = token.get("attrs") or {}
    children = token.get("children") or []

    if token_type == "heading":
        level = attrs.get("level", 1)
        return {
            "type": "heading",
            "attrs": {"level": max(1, min(level, 6))},
            "content": _convert_inline(children, [], card_patterns=card_patterns),
        }

    if token_type in {"paragraph", "block_text"}:
        return {
            "type": "paragraph",
            "content": _convert_inline(children, [], card_patterns=card_patterns),
        }

    if token_type == "block_code":
        return _convert_code_block(token)

    if token_type == "block_quote":
        return {
            "type": "blockquote",
            "content": _convert_blocks(children, card_patterns=card_patterns),
        }

    if token_type == "list":
        return _convert_list(token, card_patterns=card_patterns)

    if token_type == "table":
        return _convert_table(token, card_patterns=card_patterns)

    if token_type == "thematic_break":
        return {"type": "rule"}

    if token_type == "block_html":
        text = _html_text(token.get("raw", ""))
        return {"type": "paragraph", "content": [text_node(text)]} if text else None

    if token_type != "blank_line":
        logger.debug("Dropping unsupported markdown token", extra={"token_type": token_type})
    return None


def _convert_code_block(token: Token) -> Node:
    code = token.get("raw", "")
    if code.endswith("\n"):
        code = code[:-1]
    info = (token.get("attrs") or {}).get("info") or ""
    language = info.split(maxsplit=1)[0] if info.strip() else ""

    node: Node = {"type": "codeBlock"}
    if language:
        node["attrs"] = {"language": language}
    node["content"] = [text_node(code)] if code else []
    return node


def _convert_list(token: Token, *, card_patterns: tuple[str, ...]) -> Node:
    attrs = token.get("attrs") or {}
    ordered = bool(attrs.get("ordered"))
    items = []
    for item in token.get("children") or []:
        if item.get("type") != "list_item":
            continue
        content = _convert_blocks(item.get("children") or [], card_patterns=card_patterns)
        items.append({"type": "listItem", "content": content or [{"type": "paragraph", "content": []}]})

    node: Node = {"type": "orderedList" if ordered else "bulletList", "content": items}
    start = attrs.get("start", 1)
    if ordered and start != 1:
        node["attrs"] = {"order": start}
    return node


def _convert_table(token: Token, *, card_patterns: tuple[str, ...]) -> Node:
    rows: list[Node] = []
    for section in token.get("children") or []:
        section_type = section.get("type")
        if section_type == "table_head":
            rows.append(_table_row(section.get("children") or [], "tableHeader", card_patterns))
        elif section_type == "table_body":
            for row in section.get("children") or []:
                rows.append(_table_row(row.get("children") or [], "tableCell", card_patterns))
    return {"type": "table", "content": rows}


def _table_row(cells: list[Token], cell_type: str, card_patterns: tuple[str, ...]) -> Node:
    return {
        "type": "tableRow",
        "content": [
            {
                "type": cell_type,
                "content": [
                    {
                        "type": "paragraph",
                        "content": _convert_inline(
                            cell.get("children") or [], [], card_patterns=card_patterns
                        ),
                    }
                ],
            }
            for cell in cells
        ],
    }


def _convert_inline(
    tokens: list[Token], marks: list[Mark], *, card_patterns: tuple[str, ...]
) -> list[Node]:
    nodes: list[Node] = []
    active = list(marks)

    for token in tokens:
        token_type = token.get("type")
        attrs = token.get("attrs") or {}
        children = token.get("children") or []

        if token_type == "text":
            nodes.append(_text(token.get("raw", ""), active))
        elif token_type in _SIMPLE_MARKS:
            mark = {"type": _SIMPLE_MARKS[token_type]}
            nodes.extend(_convert_inline(children, [*active, mark], card_patterns=card_patterns))
        elif token_type == "codespan":
            # Code only combines with links.
            code_marks = [m for m in active if m["type"] == "link"] + [{"type": "code"}]
            nodes.append(_text(token.get("raw", ""), code_marks))
        elif token_type == "link":
            url = attrs.get("url", "")
            if url and any(url_matches(url, pattern) for pattern in card_patterns):
                nodes.append({"type": "inlineCard", "attrs": {"url": url}})
            else:
                link = {"type": "link", "attrs": {"href": url}}
                nodes.extend(_convert_inline(children, [*active, link], card_patterns=card_patterns))
        elif token_type == "image":
            alt = "".join(child.get("raw", "") for child in children) or attrs.get("url", "")
            link = {"type": "link", "attrs": {"href": attrs.get("url", "")}}
            nodes.append(_text(alt, [*active, link]))
        elif token_type == "linebreak":
            nodes.append(hard_break())
        elif token_type == "softbreak":
            nodes.append(_text(" ", active))
        elif token_type == "inline_html":
            raw = token.get("raw", "").strip()
            tag = raw.lower()
            if _BR_TAG_RE.match(raw):
                nodes.append(hard_break())
            elif tag == "<u>":
                active.append({"type": "underline"})
            elif tag == "</u>":
                active = _drop_last(active, "underline")
            else:
                text = _html_text(raw)
                if text:
                    nodes.append(_text(text, active))
        elif children:
            nodes.extend(_convert_inline(children, active, card_patterns=card_patterns))
        elif token.get("raw"):
            nodes.append(_text(token["raw"], active))

    return _merge_text_nodes(nodes)


def _text(text: str, marks: list[Mark]) -> Node:
    return text_node(text, [dict(mark) for mark in marks] or None)


def _drop_last(marks: list[Mark], mark_type: str) -> list[Mark]:
    for index in range(len(marks) - 1, -1, -1):
        if marks[index]["type"] == mark_type:
            return marks[:index] + marks[index + 1 :]
    return marks


def _merge_text_nodes(nodes: list[Node]) -> list[Node]:
    merged: list[Node] = []
    for node in nodes:
        if node["type"] == "text" and not node["text"]:
            continue
        previous = merged[-1] if merged else None
        if (
            previous is not None
            and previous["type"] == "text"
            and node["type"] == "text"
            and previous.get("marks") == node.get("marks")
        ):
            merged[-1] = {**previous, "text": previous["text"] + node["text"]}
        else:
            merged.append(node)
    return merged


def _html_text(html: str) -> str:
    return BeautifulSoup(html, "lxml").get_text(" ", strip=True)
