"""Retry logic with exponential backoff for image requests.

Network failures are retried with a 1s, 2s, 4s, ... backoff until the attempt
budget is spent. Validation failures, oversize images and permanent HTTP
errors fail fast.
"""

import time
import logging
from typing import Callable, TypeVar

import requests

from .errors import ImageNetworkError, ImageValidationError

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_MAX_ATTEMPTS = 3


def retry_with_backoff(
    func: Callable[..., T],
    *args,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    description: str = 'Image request',
    **kwargs
) -> T:
    """Call func, retrying transient failures with exponential backoff.

    Sleeps ``2 ** (attempt - 1)`` seconds between attempts. The last error is
    re-raised once the attempt budget is exhausted.

    Args:
        func: The function to execute with retry logic
        *args: Positional arguments to pass to the function
        max_attempts: Total number of attempts, including the first
        description: Label used in log messages
        **kwargs: Keyword arguments to pass to the function

    Returns:
        The return value of the function

    Raises:
        Exception: The last error after max_attempts, or any non-retryable
            error immediately

    Example:
        >>> size = retry_with_backoff(processor.download, url, target, max_attempts=3)
    """
    for attempt in range(1, max_attempts + 1):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if not _is_retryable_error(e):
                raise

            if attempt >= max_attempts:
                logger.warning(
                    f"{description} failed after {max_attempts} attempts, giving up: {e}"
                )
                raise

            wait_time = 2 ** (attempt - 1)
            logger.info(
                f"{description} failed ({e}), retrying in {wait_time}s "
                f"(attempt {attempt + 1}/{max_attempts})"
            )
            time.sleep(wait_time)

    raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")


def _is_retryable_error(exception: Exception) -> bool:
    """Check if an exception represents a transient network failure.

    Args:
        exception: The exception to check

    Returns:
        True if the call should be attempted again
    """
    if isinstance(exception, ImageValidationError):
        return False

    if isinstance(exception, ImageNetworkError):
        return exception.retryable

    return isinstance(exception, (requests.exceptions.Timeout, requests.exceptions.ConnectionError))
