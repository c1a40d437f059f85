"""Shared schemas for adfmd."""

from adfmd.schemas.document import AdfDocument, AdfMark, AdfNode
from adfmd.schemas.sections import SectionNode

__all__ = ["AdfDocument", "AdfMark", "AdfNode", "SectionNode"]
