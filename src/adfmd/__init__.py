"""adfmd: convert and edit rich-text document trees and Markdown."""

from adfmd.converter import convert_markdown, fallback_document, markdown_to_doc
from adfmd.editing import (
    SectionSplit,
    append_to_section,
    extract_section,
    remove_section,
    replace_section,
)
from adfmd.exceptions import (
    AdfmdError,
    ConversionError,
    DepthLimitError,
    InvalidDocumentError,
)
from adfmd.extractors import (
    CONFLUENCE_URL_PATTERN,
    FIGMA_URL_PATTERN,
    GOOGLE_DOCS_URL_PATTERN,
    INLINE_CARD_URL_PATTERNS,
    ExtractUrlsOptions,
    collect_text,
    extract_all_urls,
    extract_confluence_urls,
    extract_figma_urls,
    extract_google_docs_urls,
    extract_urls,
)
from adfmd.markdown import doc_to_markdown
from adfmd.nodes import is_valid_document, parse_document
from adfmd.schemas import AdfDocument, AdfMark, AdfNode, SectionNode
from adfmd.sections import (
    count_headings,
    find_heading,
    heading_text,
    list_sections,
    render_outline,
    section_end,
)
from adfmd.traversal import (
    find_nodes,
    find_nodes_by_type,
    transform,
    transform_document,
    traverse,
    traverse_document,
)

__all__ = [
    "AdfDocument",
    "AdfMark",
    "AdfNode",
    "AdfmdError",
    "CONFLUENCE_URL_PATTERN",
    "ConversionError",
    "DepthLimitError",
    "ExtractUrlsOptions",
    "FIGMA_URL_PATTERN",
    "GOOGLE_DOCS_URL_PATTERN",
    "INLINE_CARD_URL_PATTERNS",
    "InvalidDocumentError",
    "SectionNode",
    "SectionSplit",
    "append_to_section",
    "collect_text",
    "convert_markdown",
    "count_headings",
    "doc_to_markdown",
    "extract_all_urls",
    "extract_confluence_urls",
    "extract_figma_urls",
    "extract_google_docs_urls",
    "extract_section",
    "extract_urls",
    "fallback_document",
    "find_heading",
    "find_nodes",
    "find_nodes_by_type",
    "heading_text",
    "is_valid_document",
    "list_sections",
    "markdown_to_doc",
    "parse_document",
    "remove_section",
    "render_outline",
    "replace_section",
    "section_end",
    "transform",
    "transform_document",
    "traverse",
    "traverse_document",
]
