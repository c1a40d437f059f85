"""Tests for Markdown to document conversion."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from adfmd.converter import convert_markdown, fallback_document, markdown_to_doc
from adfmd.exceptions import ConversionError
from adfmd.markdown import doc_to_markdown
from adfmd.nodes import is_valid_document
from adfmd.traversal import find_nodes_by_type

EMPTY_DOCUMENT = {
    "version": 1,
    "type": "doc",
    "content": [{"type": "paragraph", "content": []}],
}


def _list_depth(node: dict) -> int:
    child_depths = [
        _list_depth(child)
        for item in node.get("content", [])
        for child in item.get("content", [])
        if child.get("type") in {"bulletList", "orderedList"}
    ]
    return 1 + max(child_depths, default=0)


class TestMarkdownToDoc:
    """Tests for the async markdown_to_doc entry point."""

    @pytest.mark.asyncio
    async def test_empty_string(self) -> None:
        assert await markdown_to_doc("") == EMPTY_DOCUMENT

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [None, 42, ["# Title"]])
    async def test_non_string_input(self, value: object) -> None:
        assert await markdown_to_doc(value) == EMPTY_DOCUMENT

    @pytest.mark.asyncio
    async def test_whitespace_only_input(self) -> None:
        assert await markdown_to_doc("   \n\n  ") == EMPTY_DOCUMENT

    @pytest.mark.asyncio
    async def test_heading_and_paragraph(self) -> None:
        doc = await markdown_to_doc("# Hello World\n\nThis is a test.")

        assert doc == {
            "version": 1,
            "type": "doc",
            "content": [
                {
                    "type": "heading",
                    "attrs": {"level": 1},
                    "content": [{"type": "text", "text": "Hello World"}],
                },
                {"type": "paragraph", "content": [{"type": "text", "text": "This is a test."}]},
            ],
        }

    @pytest.mark.asyncio
    async def test_nested_bullet_lists(self) -> None:
        markdown = (
            "## Shell Stories\n\n"
            "- st001 Display greeting\n"
            "  * ANALYSIS: docs/analysis.md\n"
            "  * DEPENDENCIES: none\n"
        )

        doc = await markdown_to_doc(markdown)

        assert doc["content"][0]["attrs"] == {"level": 2}
        story_list = doc["content"][1]
        assert story_list["type"] == "bulletList"
        assert len(story_list["content"]) == 1
        assert _list_depth(story_list) == 2
        nested = story_list["content"][0]["content"][1]
        assert [item["content"][0]["content"][0]["text"] for item in nested["content"]] == [
            "ANALYSIS: docs/analysis.md",
            "DEPENDENCIES: none",
        ]

    @pytest.mark.asyncio
    async def test_bold_and_inline_code_marks(self) -> None:
        doc = await markdown_to_doc("- **Important** item\n- `code` item")

        texts = find_nodes_by_type(doc, "text")

        assert {"type": "text", "text": "Important", "marks": [{"type": "strong"}]} in texts
        assert {"type": "text", "text": "code", "marks": [{"type": "code"}]} in texts
        assert {"type": "text", "text": " item"} in texts

    @pytest.mark.asyncio
    async def test_escaped_characters(self) -> None:
        doc = await markdown_to_doc("- \\+ escaped plus\n- \\* escaped star")

        texts = [node["text"] for node in find_nodes_by_type(doc, "text")]

        assert texts == ["+ escaped plus", "* escaped star"]

    @pytest.mark.asyncio
    async def test_parser_failure_uses_fallback(self) -> None:
        with patch(
            "adfmd.converter.convert_markdown", side_effect=ConversionError("boom")
        ) as mock_convert:
            doc = await markdown_to_doc("first para\n\n  second para  ")

        mock_convert.assert_called_once()
        assert doc == {
            "version": 1,
            "type": "doc",
            "content": [
                {"type": "paragraph", "content": [{"type": "text", "text": "first para"}]},
                {"type": "paragraph", "content": [{"type": "text", "text": "second para"}]},
            ],
        }

    @pytest.mark.asyncio
    async def test_token_mapping_error_uses_fallback(self) -> None:
        markdown = "# Title\n\nbody text"

        with patch("adfmd.converter._convert_blocks", side_effect=KeyError("children")):
            doc = await markdown_to_doc(markdown)

        assert doc == fallback_document(markdown)

    @pytest.mark.asyncio
    async def test_results_are_valid_documents(self) -> None:
        samples = ["plain", "# H\n\n> quote\n\n---", "| a |\n| - |\n| b |", "1. one\n2. two"]

        for sample in samples:
            assert is_valid_document(await markdown_to_doc(sample))


class TestConvertMarkdown:
    """Tests for the synchronous converter."""

    def test_fenced_code_block(self) -> None:
        doc = convert_markdown("```python extra\nprint('hi')\n```")

        assert doc["content"] == [
            {
                "type": "codeBlock",
                "attrs": {"language": "python"},
                "content": [{"type": "text", "text": "print('hi')"}],
            }
        ]

    def test_code_block_without_language(self) -> None:
        doc = convert_markdown("```\nx = 1\n```")

        assert doc["content"] == [{"type": "codeBlock", "content": [{"type": "text", "text": "x = 1"}]}]

    def test_ordered_list_start(self) -> None:
        doc = convert_markdown("3. three\n4. four")

        ordered = doc["content"][0]
        assert ordered["type"] == "orderedList"
        assert ordered["attrs"] == {"order": 3}
        assert len(ordered["content"]) == 2

    def test_ordered_list_default_start_has_no_attrs(self) -> None:
        doc = convert_markdown("1. one\n2. two")

        assert "attrs" not in doc["content"][0]

    def test_table(self) -> None:
        doc = convert_markdown("| Name | Role |\n| --- | --- |\n| Ann | Dev |")

        table = doc["content"][0]
        assert table["type"] == "table"
        header, body = table["content"]
        assert [cell["type"] for cell in header["content"]] == ["tableHeader", "tableHeader"]
        assert [cell["type"] for cell in body["content"]] == ["tableCell", "tableCell"]
        assert body["content"][0]["content"][0] == {
            "type": "paragraph",
            "content": [{"type": "text", "text": "Ann"}],
        }

    def test_blockquote_and_rule(self) -> None:
        doc = convert_markdown("> quoted\n\n---\n\nafter")

        assert [node["type"] for node in doc["content"]] == ["blockquote", "rule", "paragraph"]
        assert doc["content"][0]["content"][0]["type"] == "paragraph"

    def test_hard_break_and_soft_break(self) -> None:
        doc = convert_markdown("line one  \nline two\nline three")

        assert doc["content"][0]["content"] == [
            {"type": "text", "text": "line one"},
            {"type": "hardBreak"},
            {"type": "text", "text": "line two line three"},
        ]

    def test_html_break_and_underline(self) -> None:
        doc = convert_markdown("Some <u>under</u> text<br>next")

        assert doc["content"][0]["content"] == [
            {"type": "text", "text": "Some "},
            {"type": "text", "text": "under", "marks": [{"type": "underline"}]},
            {"type": "text", "text": " text"},
            {"type": "hardBreak"},
            {"type": "text", "text": "next"},
        ]

    def test_strikethrough_and_emphasis(self) -> None:
        doc = convert_markdown("~~gone~~ and *soft*")

        assert doc["content"][0]["content"] == [
            {"type": "text", "text": "gone", "marks": [{"type": "strike"}]},
            {"type": "text", "text": " and "},
            {"type": "text", "text": "soft", "marks": [{"type": "em"}]},
        ]

    def test_links_become_marks_or_inline_cards(self) -> None:
        markdown = (
            "[Design](https://acme.atlassian.net/wiki/spaces/ENG/pages/42) "
            "[Doc](https://docs.google.com/document/d/xyz/edit) "
            "[Site](https://example.com)"
        )

        content = convert_markdown(markdown)["content"][0]["content"]

        assert content[0] == {
            "type": "inlineCard",
            "attrs": {"url": "https://acme.atlassian.net/wiki/spaces/ENG/pages/42"},
        }
        assert content[2] == {
            "type": "inlineCard",
            "attrs": {"url": "https://docs.google.com/document/d/xyz/edit"},
        }
        assert content[4] == {
            "type": "text",
            "text": "Site",
            "marks": [{"type": "link", "attrs": {"href": "https://example.com"}}],
        }

    def test_custom_inline_card_patterns(self) -> None:
        markdown = "[Site](https://example.com)"

        content = convert_markdown(markdown, inline_card_patterns=["example.com"])["content"][0]["content"]

        assert content == [{"type": "inlineCard", "attrs": {"url": "https://example.com"}}]

    def test_parse_error_is_wrapped(self) -> None:
        parser = MagicMock()
        parser.parse.side_effect = RuntimeError("tokenizer exploded")

        with patch("adfmd.converter.mistune.create_markdown", return_value=parser):
            with pytest.raises(ConversionError, match="tokenizer exploded"):
                convert_markdown("# anything")

    @pytest.mark.parametrize("error", [KeyError("raw"), TypeError("bad"), AttributeError("get")])
    def test_token_mapping_error_is_wrapped(self, error: Exception) -> None:
        with patch("adfmd.converter._convert_blocks", side_effect=error):
            with pytest.raises(ConversionError, match="Unexpected markdown token structure"):
                convert_markdown("# anything")

    def test_round_trip_of_simple_markdown(self) -> None:
        markdown = "# Title\n\nSome **bold** and `code`.\n\n- one\n- two"

        assert doc_to_markdown(convert_markdown(markdown)) == markdown


class TestFallbackDocument:
    """Tests for fallback_document function."""

    def test_splits_on_blank_lines(self) -> None:
        doc = fallback_document("one\n\ntwo\n   \nthree")

        texts = [node["content"][0]["text"] for node in doc["content"]]
        assert texts == ["one", "two", "three"]

    def test_empty_text(self) -> None:
        assert fallback_document("") == EMPTY_DOCUMENT
        assert fallback_document("\n\n  \n") == EMPTY_DOCUMENT
