"""Locate headings and section boundaries in a flat list of block nodes.

A section starts at a heading and runs up to, but not including, the next
heading whose level is less than or equal to its own. Heading level is the
only nesting signal: a level 3 heading directly under a level 1 heading is
simply nested inside it.
"""

from __future__ import annotations

from adfmd.nodes import Node, heading_level
from adfmd.schemas import SectionNode
from adfmd.traversal import traverse


def normalize_heading_text(text: str) -> str:
    """Normalize heading text for comparison."""
    return text.strip().lower()


def heading_text(node: Node) -> str:
    """Concatenate the literal text under a heading, ignoring marks."""
    parts: list[str] = []

    def _visit(child: Node, parent: Node | None, depth: int) -> None:
        if child.get("type") == "text" and isinstance(child.get("text"), str):
            parts.append(child["text"])

    traverse([node], _visit)
    return "".join(parts)


def _matches(node: Node, wanted: str) -> bool:
    return node.get("type") == "heading" and normalize_heading_text(heading_text(node)) == wanted


def find_heading(nodes: list[Node], text: str) -> int:
    """Return the index of the first heading matching ``text``, or -1."""
    wanted = normalize_heading_text(text)
    for index, node in enumerate(nodes):
        if _matches(node, wanted):
            return index
    return -1


def count_headings(nodes: list[Node], text: str) -> int:
    """Count headings matching ``text``, to detect duplicate sections."""
    wanted = normalize_heading_text(text)
    return sum(1 for node in nodes if _matches(node, wanted))


def section_end(nodes: list[Node], start_index: int) -> int:
    """Return the index where the section starting at ``start_index`` ends.

    That is the index of the first later heading at the same or a shallower
    level, or ``len(nodes)`` when there is none.
    """
    start_level = heading_level(nodes[start_index])
    for index in range(start_index + 1, len(nodes)):
        node = nodes[index]
        if node.get("type") == "heading" and heading_level(node) <= start_level:
            return index
    return len(nodes)


def list_sections(nodes: list[Node]) -> list[SectionNode]:
    """Build the heading outline of ``nodes``."""
    sections: list[SectionNode] = []
    stack: list[SectionNode] = []

    for index, node in enumerate(nodes):
        if node.get("type") != "heading":
            continue
        level = max(heading_level(node), 1)
        section = SectionNode(
            title=heading_text(node).strip(),
            level=level,
            start=index,
            end=section_end(nodes, index),
        )

        while stack and stack[-1].level >= level:
            stack.pop()

        if stack:
            stack[-1].children.append(section)
        else:
            sections.append(section)

        stack.append(section)

    return sections


def render_outline(sections: list[SectionNode], indent: int = 0) -> str:
    lines: list[str] = []
    for section in sections:
        lines.append(" " * (indent * 4) + section.title)
        if section.children:
            lines.append(render_outline(section.children, indent + 1))
    return "\n".join(lines)
