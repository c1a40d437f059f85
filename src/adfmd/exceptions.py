"""Custom exceptions for adfmd."""


class AdfmdError(Exception):
    """Base exception for adfmd operations."""


class ConversionError(AdfmdError):
    """Error during markdown to document conversion."""


class InvalidDocumentError(AdfmdError):
    """Value does not have the shape of a document."""


class DepthLimitError(AdfmdError):
    """Tree nests deeper than the configured limit."""

    def __init__(self, max_depth: int) -> None:
        super().__init__(f"Document tree exceeds maximum depth of {max_depth}")
        self.max_depth = max_depth
