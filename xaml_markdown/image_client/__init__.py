"""Image pipeline: allow-listed, size-capped downloads into a local images folder."""

from .errors import (
    ImageError,
    ImageFilesystemError,
    ImageNetworkError,
    ImageTooLargeError,
    ImageValidationError,
)
from .filename_resolver import FilenameResolver
from .image_processor import UNAVAILABLE_IMAGE, ImageProcessor
from .retry_logic import retry_with_backoff

__all__ = [
    'FilenameResolver',
    'ImageError',
    'ImageFilesystemError',
    'ImageNetworkError',
    'ImageProcessor',
    'ImageTooLargeError',
    'ImageValidationError',
    'UNAVAILABLE_IMAGE',
    'retry_with_backoff',
]
