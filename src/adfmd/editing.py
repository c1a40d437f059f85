"""Pure edits on the section of a node list that a heading introduces.

None of these functions mutate their arguments. When the heading cannot be
found (including when ``nodes`` is empty) extraction and removal are no-ops
and appending or replacing adds the new nodes at the end of the document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from adfmd.nodes import Node
from adfmd.sections import find_heading, section_end

logger = logging.getLogger(__name__)


@dataclass
class SectionSplit:
    """A section cut out of a node list.

    Attributes:
        section: The heading and its section body, in order.
        remaining: Every other node, in order.
    """

    section: list[Node] = field(default_factory=list)
    remaining: list[Node] = field(default_factory=list)


def extract_section(nodes: list[Node], heading_text: str) -> SectionSplit:
    """Split ``nodes`` into the section under ``heading_text`` and the rest."""
    start = find_heading(nodes, heading_text)
    if start == -1:
        return SectionSplit(section=[], remaining=list(nodes))

    end = section_end(nodes, start)
    logger.debug(
        "Extracted section %r", heading_text, extra={"start": start, "end": end}
    )
    return SectionSplit(section=nodes[start:end], remaining=nodes[:start] + nodes[end:])


def remove_section(nodes: list[Node], heading_text: str) -> list[Node]:
    """Return ``nodes`` without the section under ``heading_text``."""
    return extract_section(nodes, heading_text).remaining


def append_to_section(
    nodes: list[Node], heading_text: str, new_nodes: list[Node]
) -> list[Node]:
    """Add ``new_nodes`` as the trailing content of a section."""
    start = find_heading(nodes, heading_text)
    if start == -1:
        logger.debug("Section %r not found, appending at end", heading_text)
        return [*nodes, *new_nodes]

    end = section_end(nodes, start)
    return [*nodes[:end], *new_nodes, *nodes[end:]]


def replace_section(
    nodes: list[Node], heading_text: str, new_section_nodes: list[Node]
) -> list[Node]:
    """Swap a whole section, heading included, for ``new_section_nodes``.

    If the heading is missing the new nodes are appended; include a heading
    in ``new_section_nodes`` to start a new section that way.
    """
    start = find_heading(nodes, heading_text)
    if start == -1:
        logger.debug("Section %r not found, appending at end", heading_text)
        return [*nodes, *new_section_nodes]

    end = section_end(nodes, start)
    return [*nodes[:start], *new_section_nodes, *nodes[end:]]
