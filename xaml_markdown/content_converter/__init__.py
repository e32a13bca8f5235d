"""Rich-text (XAML) to Markdown conversion.

This package parses the flow-document markup, walks the tree into Markdown
and hands image references to the image pipeline.
"""

from .errors import ConversionError, ParseError
from .markdown_converter import XamlToMarkdownConverter

__all__ = ['ConversionError', 'ParseError', 'XamlToMarkdownConverter']
