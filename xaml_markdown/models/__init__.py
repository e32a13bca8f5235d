"""Data models for document trees, options and conversion results."""

from xaml_markdown.models.conversion_options import ConversionOptions
from xaml_markdown.models.conversion_result import (
    ConversionResult,
    ElementFailure,
    ElementFailureType,
)
from xaml_markdown.models.document_node import DocumentNode, get_attributes
from xaml_markdown.models.image_models import (
    FailureType,
    ImageFailure,
    ImageStats,
    RecoveryAction,
    failure_summary,
)

__all__ = [
    'ConversionOptions',
    'ConversionResult',
    'DocumentNode',
    'ElementFailure',
    'ElementFailureType',
    'FailureType',
    'ImageFailure',
    'ImageStats',
    'RecoveryAction',
    'failure_summary',
    'get_attributes',
]
