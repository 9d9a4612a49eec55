"""Custom exceptions for pageflow."""

from typing import Optional


class PageflowError(Exception):
    """Base exception for pageflow errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ParseError(PageflowError):
    """Exception raised for malformed length literals."""

    pass


class StyleError(PageflowError):
    """Exception raised for malformed style or content input."""

    pass


class ShapingError(PageflowError):
    """Exception raised when the typesetter cannot lay out a block."""

    pass


class OutputError(PageflowError):
    """Exception raised when the finished document cannot be written."""

    pass


class DocumentStateError(PageflowError):
    """Exception raised when a document is used out of order."""

    pass
