"""Convert rich-text (XAML) note bodies to Markdown with local image caching."""

from xaml_markdown.content_converter.markdown_converter import XamlToMarkdownConverter
from xaml_markdown.models.conversion_options import ConversionOptions
from xaml_markdown.models.conversion_result import ConversionResult

__version__ = '0.1.0'

__all__ = ['ConversionOptions', 'ConversionResult', 'XamlToMarkdownConverter', '__version__']
