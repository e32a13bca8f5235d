"""Test fixtures for conversion and image pipeline tests.

This module provides:
- Sample rich-text (XAML) note bodies
- Fake HTTP responses and sessions for the image client
"""

from .sample_xaml import (
    SAMPLE_HEADING,
    SAMPLE_INDENTED,
    SAMPLE_NESTED_LIST,
    SAMPLE_CODE_BLOCK,
    SAMPLE_TABLE,
    SAMPLE_WITH_IMAGE,
    SAMPLE_MALFORMED,
    IMAGE_URL,
)
from .http_responses import make_response, make_session

__all__ = [
    "SAMPLE_HEADING",
    "SAMPLE_INDENTED",
    "SAMPLE_NESTED_LIST",
    "SAMPLE_CODE_BLOCK",
    "SAMPLE_TABLE",
    "SAMPLE_WITH_IMAGE",
    "SAMPLE_MALFORMED",
    "IMAGE_URL",
    "make_response",
    "make_session",
]
