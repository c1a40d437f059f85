"""Test setup for adfmd."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def _heading(level: int, text: str) -> dict:
    return {"type": "heading", "attrs": {"level": level}, "content": [{"type": "text", "text": text}]}


def _paragraph(text: str) -> dict:
    return {"type": "paragraph", "content": [{"type": "text", "text": text}]}


@pytest.fixture
def story_content() -> list[dict]:
    """Flat block content with nested and sibling sections."""
    return [
        _paragraph("Intro"),
        _heading(2, "Shell Stories"),
        {
            "type": "bulletList",
            "content": [
                {"type": "listItem", "content": [_paragraph("st001 Display list")]},
                {"type": "listItem", "content": [_paragraph("st002 Add filters")]},
            ],
        },
        _heading(3, "Notes"),
        _paragraph("Nested under stories"),
        _heading(2, "Other"),
        _paragraph("Other body"),
    ]


@pytest.fixture
def link_document() -> dict:
    """Document with links in cards, link marks, and plain text."""
    return {
        "version": 1,
        "type": "doc",
        "content": [
            {
                "type": "blockCard",
                "attrs": {"url": "https://www.figma.com/design/abc123/My-Design?node-id=1-2"},
            },
            {
                "type": "paragraph",
                "content": [
                    {"type": "text", "text": "See "},
                    {
                        "type": "text",
                        "text": "the design page",
                        "marks": [
                            {
                                "type": "link",
                                "attrs": {"href": "https://acme.atlassian.net/wiki/spaces/ENG/pages/42"},
                            }
                        ],
                    },
                    {"type": "text", "text": " and https://docs.google.com/document/d/xyz/edit."},
                ],
            },
        ],
    }
