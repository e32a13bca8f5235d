"""Data models for image pipeline statistics and failures."""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

URL_PREVIEW_LENGTH = 80


class FailureType(Enum):
    """Classification of an image failure for upstream reporting."""
    VALIDATION = "validation"
    NETWORK = "network"
    FILESYSTEM = "filesystem"
    EXCEPTION = "exception"


class RecoveryAction(Enum):
    """What the pipeline did instead of producing the image."""
    PLACEHOLDER = "placeholder"


@dataclass
class ImageStats:
    """Per-note image counters.

    Attributes:
        images_found: Image references encountered
        images_downloaded: Images resolved to a local file (new or reused)
        images_reused: Subset of images_downloaded served from an existing file
        image_downloads_failed: Images replaced by the unavailable marker
        total_image_size_mb: Megabytes written to disk by this note
    """
    images_found: int = 0
    images_downloaded: int = 0
    images_reused: int = 0
    image_downloads_failed: int = 0
    total_image_size_mb: float = 0.0


@dataclass
class ImageFailure:
    """Structured record of one image that could not be resolved.

    Attributes:
        original_url: URL as found in the markup
        failure_type: Failure classification
        error_message: Human-readable reason
        note_filename: Note the image belonged to, if known
        url_preview: Truncated URL for log lines
        recovery: Recovery action taken
        error: Typed exception that caused the failure
    """
    original_url: str
    failure_type: FailureType
    error_message: str
    note_filename: Optional[str] = None
    url_preview: str = ''
    recovery: RecoveryAction = RecoveryAction.PLACEHOLDER
    error: Optional[Exception] = None

    def __post_init__(self):
        if not self.url_preview:
            self.url_preview = preview_url(self.original_url)


def preview_url(url: str, limit: int = URL_PREVIEW_LENGTH) -> str:
    """Truncate a URL for display, appending '...' when shortened."""
    if len(url) <= limit:
        return url
    return url[:limit] + '...'


def failure_summary(failures: List[ImageFailure]) -> Dict[str, Any]:
    """Summarize failures by classification.

    Args:
        failures: Failure records to summarize

    Returns:
        Dict with 'total', 'by_type' (classification value to count) and
        'most_common' (classification value or None when empty)
    """
    counts = Counter(failure.failure_type.value for failure in failures)
    by_type = {failure_type.value: counts.get(failure_type.value, 0) for failure_type in FailureType}
    most_common = counts.most_common(1)[0][0] if counts else None
    return {
        'total': len(failures),
        'by_type': by_type,
        'most_common': most_common,
    }
