"""Section outline models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SectionNode(BaseModel):
    """A heading and the span of top-level nodes its section covers."""

    title: str
    level: int = Field(..., ge=1)
    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    children: list["SectionNode"] = Field(default_factory=list)
