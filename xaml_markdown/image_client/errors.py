"""Typed exception hierarchy for image pipeline errors.

Each exception maps to one failure classification used in ImageFailure
records. None of these escape the image pipeline: they are caught at its
boundary and turned into an unavailable-image marker.
"""

from typing import Optional

from xaml_markdown.errors import (
    ErrorCategory,
    ErrorSeverity,
    XamlMarkdownError,
)
from xaml_markdown.models.image_models import FailureType


class ImageError(XamlMarkdownError):
    """Base exception for image pipeline errors."""
    severity = ErrorSeverity.WARN
    failure_type = FailureType.EXCEPTION

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


class ImageValidationError(ImageError):
    """Raised when an image URL is malformed or not on the allow-list."""
    category = ErrorCategory.VALIDATION
    failure_type = FailureType.VALIDATION

    def __init__(self, url: str, reason: str):
        super().__init__(url, f"Invalid image URL: {reason}")
        self.reason = reason


class ImageNetworkError(ImageError):
    """Raised when an image request times out or returns an HTTP error."""
    category = ErrorCategory.NETWORK
    failure_type = FailureType.NETWORK

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        super().__init__(url, f"Image request failed: {reason}")
        self.reason = reason
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        """Client errors other than timeouts and throttling are permanent."""
        if self.status_code is None:
            return True
        return not (400 <= self.status_code < 500) or self.status_code in (408, 429)


class ImageTooLargeError(ImageNetworkError):
    """Raised when a downloaded image exceeds the configured size cap."""

    def __init__(self, url: str, size_bytes: int, limit_bytes: int):
        size_mb = size_bytes / (1024 * 1024)
        limit_mb = limit_bytes / (1024 * 1024)
        reason = f"image is {size_mb:.2f} MB, limit is {limit_mb:.2f} MB"
        ImageError.__init__(self, url, f"Image too large: {reason}")
        self.reason = reason
        self.status_code = None
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes

    @property
    def retryable(self) -> bool:
        return False


class ImageFilesystemError(ImageError):
    """Raised when the images directory or file cannot be written."""
    category = ErrorCategory.FILE_SYSTEM
    failure_type = FailureType.FILESYSTEM

    def __init__(self, url: str, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Image file operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(url, message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason
