"""Collect hyperlinks and plain text from documents."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from adfmd.nodes import Document, Node, node_attrs
from adfmd.traversal import traverse_document

FIGMA_URL_PATTERN = "figma.com"
CONFLUENCE_URL_PATTERN = "atlassian.net/wiki"
# Google Docs only, not Sheets or Slides.
GOOGLE_DOCS_URL_PATTERN = "docs.google.com/document"

# Links to these become inline cards when converting from markdown; Figma
# links stay plain.
INLINE_CARD_URL_PATTERNS = (CONFLUENCE_URL_PATTERN, GOOGLE_DOCS_URL_PATTERN)

CARD_NODE_TYPES = frozenset({"inlineCard", "blockCard", "embedCard"})

_PLAIN_TEXT_URL_RE = re.compile(r"https?://[^\s)>\]\"'|]+")
_TRAILING_PUNCTUATION_RE = re.compile(r"[),.\]}>]+$")
_ENCODED_PIPE_RE = re.compile(r"%7C", re.IGNORECASE)


@dataclass
class ExtractUrlsOptions:
    """Options for URL extraction.

    Attributes:
        search_plain_text: If True, also scan text node contents for URLs.
        plain_text_regex: Regex used to find URLs in plain text.
    """

    search_plain_text: bool = True
    plain_text_regex: re.Pattern[str] = field(default=_PLAIN_TEXT_URL_RE)


def clean_url(url: str) -> str:
    """Cut a smart-link suffix and strip trailing punctuation from ``url``."""
    url = _ENCODED_PIPE_RE.split(url, maxsplit=1)[0]
    return _TRAILING_PUNCTUATION_RE.sub("", url.strip())


def url_matches(url: str, pattern: str | re.Pattern[str] | None) -> bool:
    if pattern is None:
        return True
    if isinstance(pattern, str):
        return pattern in url
    return pattern.search(url) is not None


def extract_urls(
    doc: Document,
    pattern: str | re.Pattern[str] | None,
    options: ExtractUrlsOptions | None = None,
) -> list[str]:
    """Return unique URLs in ``doc`` matching ``pattern``, in document order.

    Looks at card nodes with a ``url`` attribute, text nodes carrying a link
    mark, and, unless disabled, URLs written out in plain text. A ``None``
    pattern matches every URL.
    """
    opts = options or ExtractUrlsOptions()
    found: dict[str, None] = {}

    def _add(candidate: object) -> None:
        if not isinstance(candidate, str):
            return
        url = clean_url(candidate)
        if url and url_matches(url, pattern):
            found.setdefault(url, None)

    def _visit(node: Node, parent: Node | None, depth: int) -> None:
        node_type = node.get("type")
        if node_type in CARD_NODE_TYPES:
            _add(node_attrs(node).get("url"))
            return
        if node_type != "text":
            return

        marks = node.get("marks")
        for mark in marks if isinstance(marks, list) else []:
            if isinstance(mark, dict) and mark.get("type") == "link":
                _add(node_attrs(mark).get("href"))

        text = node.get("text")
        if opts.search_plain_text and isinstance(text, str):
            for match in opts.plain_text_regex.finditer(text):
                _add(match.group(0))

    traverse_document(doc, _visit)
    return list(found)


def extract_all_urls(doc: Document, *, search_plain_text: bool = True) -> list[str]:
    return extract_urls(doc, None, ExtractUrlsOptions(search_plain_text=search_plain_text))


def extract_figma_urls(doc: Document) -> list[str]:
    return extract_urls(doc, FIGMA_URL_PATTERN)


def extract_confluence_urls(doc: Document) -> list[str]:
    return extract_urls(doc, CONFLUENCE_URL_PATTERN)


def extract_google_docs_urls(doc: Document) -> list[str]:
    return extract_urls(doc, GOOGLE_DOCS_URL_PATTERN)


def collect_text(doc: Document) -> str:
    """Join the text of every text node with single spaces."""
    parts: list[str] = []

    def _visit(node: Node, parent: Node | None, depth: int) -> None:
        text = node.get("text")
        if node.get("type") == "text" and isinstance(text, str) and text:
            parts.append(text)

    traverse_document(doc, _visit)
    return " ".join(parts)
