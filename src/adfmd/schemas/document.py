"""Document tree models.

These mirror the JSON wire shape used in issue and comment bodies. Every
model allows extra keys so node kinds and properties added upstream survive
a validate/dump cycle.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class AdfMark(BaseModel):
    """A formatting annotation on an inline text node."""

    model_config = ConfigDict(extra="allow")

    type: str
    attrs: dict[str, Any] | None = None


class AdfNode(BaseModel):
    """A node of any type, known or not."""

    model_config = ConfigDict(extra="allow")

    type: str
    attrs: dict[str, Any] | None = None
    marks: list[AdfMark] | None = None
    text: str | None = None
    content: list["AdfNode"] | None = None


class AdfDocument(BaseModel):
    """The document root."""

    model_config = ConfigDict(extra="allow")

    version: Literal[1]
    type: Literal["doc"]
    content: list[AdfNode]
