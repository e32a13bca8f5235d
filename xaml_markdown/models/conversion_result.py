"""Data model for the outcome of converting one note."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from xaml_markdown.models.image_models import ImageFailure, ImageStats

CONTENT_PREVIEW_LENGTH = 150


class ElementFailureType(Enum):
    """Classification of a structural conversion failure."""
    EMPTY_CONTENT = "empty_content"
    EXCEPTION = "exception"


@dataclass
class ElementFailure:
    """Record of markup that could not be converted structurally."""
    failure_type: ElementFailureType
    error_message: str
    content_preview: str = ''

    @classmethod
    def from_content(
        cls,
        failure_type: ElementFailureType,
        error_message: str,
        content: str
    ) -> 'ElementFailure':
        preview = content[:CONTENT_PREVIEW_LENGTH]
        if len(content) > CONTENT_PREVIEW_LENGTH:
            preview += '...'
        return cls(failure_type, error_message, preview)


@dataclass
class ConversionResult:
    """Result of a rich-text to Markdown conversion.

    Attributes:
        markdown: Final Markdown body
        degraded: True when the plain-text fallback produced the body
        image_stats: Image counters for this note
        image_failures: Images replaced by the unavailable marker
        element_failures: Structural conversion failures
        warnings: Human-readable warnings for the caller

    Example:
        >>> result = ConversionResult(markdown="# Title")
        >>> result.has_failures
        False
    """
    markdown: str
    degraded: bool = False
    image_stats: ImageStats = field(default_factory=ImageStats)
    image_failures: List[ImageFailure] = field(default_factory=list)
    element_failures: List[ElementFailure] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.image_failures or self.element_failures)
