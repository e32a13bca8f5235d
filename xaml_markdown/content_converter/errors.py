"""Typed exceptions for rich-text conversion errors."""

from typing import Optional

from xaml_markdown.errors import XamlMarkdownError


class ConversionError(XamlMarkdownError):
    """Raised when rich-text content cannot be converted."""

    def __init__(self, message: str, content_preview: Optional[str] = None):
        super().__init__(message)
        self.content_preview = content_preview


class ParseError(ConversionError):
    """Raised when the sanitized markup is not well-formed."""

    def __init__(self, message: str, line: Optional[int] = None):
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)
        self.line = line
