"""Download and local caching of images referenced by notes.

ImageProcessor resolves one image URL to a relative Markdown image reference.
The steps are URL validation against the host allow-list, a metadata probe
for the server's filename, filename de-duplication, and a size-capped
streaming download. Any failure is recorded and the unavailable marker is
returned instead; errors never propagate to the caller.
"""

import logging
import os
import re
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import urlparse

import requests

from xaml_markdown.models.conversion_options import ConversionOptions
from xaml_markdown.models.image_models import (
    FailureType,
    ImageFailure,
    ImageStats,
    preview_url,
)
from .errors import (
    ImageError,
    ImageFilesystemError,
    ImageNetworkError,
    ImageTooLargeError,
    ImageValidationError,
)
from .filename_resolver import DEFAULT_FILENAME, FilenameResolver
from .retry_logic import retry_with_backoff

logger = logging.getLogger(__name__)

IMAGES_DIRNAME = 'images'
UNAVAILABLE_IMAGE = '![image unavailable]()'
USER_AGENT = 'xaml-markdown image fetcher'
ALLOWED_HOST_SUFFIXES = ('logoscdn.com', 'unsplash.com')
CHUNK_SIZE = 64 * 1024
BYTES_PER_MB = 1024 * 1024

CONTENT_RANGE_TOTAL_PATTERN = re.compile(r'/\s*(\d+)\s*$')


class ImageProcessor:
    """Resolves image URLs to files under ``<output>/images``.

    Attributes:
        options: Conversion options; output_directory must be set
        session: requests Session used for all HTTP traffic
        stats: Counters for the current note
        failures: Failure records for the current note

    Example:
        >>> processor = ImageProcessor(options.for_note('./export', 'John 3.md'))
        >>> processor.resolve('https://files.logoscdn.com/v1/files/123/content')
        '![](images/sunset.jpg)'
    """

    def __init__(
        self,
        options: ConversionOptions,
        session: Optional[requests.Session] = None,
        log: Optional[Callable[[str], None]] = None
    ):
        self.options = options
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({'User-Agent': USER_AGENT})
        self.stats = ImageStats()
        self.failures: List[ImageFailure] = []
        self._log = log if log is not None else logger.debug
        self._resolved: Dict[str, str] = {}

    def reset(self) -> None:
        """Clear counters, failures and the per-note URL cache."""
        self.stats = ImageStats()
        self.failures = []
        self._resolved = {}

    def resolve(self, url: str) -> str:
        """Resolve one image URL to Markdown.

        Args:
            url: Remote image URL from the markup

        Returns:
            ``![](images/<name>)`` on success, the unavailable marker otherwise
        """
        self.stats.images_found += 1

        if not self.options.download_images:
            self._log(f"Image downloads disabled, leaving image unavailable: {preview_url(url)}")
            return UNAVAILABLE_IMAGE

        try:
            reference = self._resolve(url)
        except ImageError as e:
            self._record_failure(url, e.failure_type, str(e), e)
            return UNAVAILABLE_IMAGE
        except Exception as e:
            logger.exception(f"Unexpected error processing image {preview_url(url)}")
            self._record_failure(url, FailureType.EXCEPTION, f"Unexpected error: {e}", e)
            return UNAVAILABLE_IMAGE

        self.stats.images_downloaded += 1
        return reference

    def validate_url(self, url: str) -> None:
        """Check scheme and host against the allow-list.

        Raises:
            ImageValidationError: If the URL is not an allowed HTTPS URL
        """
        try:
            parsed = urlparse(url)
        except ValueError as e:
            raise ImageValidationError(url, f"unparseable URL ({e})") from e

        if parsed.scheme != 'https':
            raise ImageValidationError(url, f"scheme '{parsed.scheme}' is not https")

        host = (parsed.hostname or '').lower()
        if not host:
            raise ImageValidationError(url, "missing host")
        if not any(host == allowed or host.endswith('.' + allowed) for allowed in ALLOWED_HOST_SUFFIXES):
            raise ImageValidationError(url, f"host '{host}' is not allowed")

    def _resolve(self, url: str) -> str:
        self.validate_url(url)

        if url in self._resolved:
            self._log(f"Image already resolved for this note: {preview_url(url)}")
            self.stats.images_reused += 1
            return self._resolved[url]

        attempts = self.options.download_retries
        filename, remote_size = retry_with_backoff(
            self._fetch_metadata, url,
            max_attempts=attempts,
            description=f"Metadata request for {preview_url(url)}",
        )

        images_dir = self._images_directory(url)
        target, reused = FilenameResolver.resolve_target(images_dir, filename, remote_size)

        if reused:
            self._log(f"Reusing existing image {target.name}")
            self.stats.images_reused += 1
        else:
            size = retry_with_backoff(
                self._download, url, target,
                max_attempts=attempts,
                description=f"Download of {preview_url(url)}",
            )
            self.stats.total_image_size_mb += size / BYTES_PER_MB
            self._log(f"Downloaded {target.name} ({size / BYTES_PER_MB:.2f} MB)")

        reference = f"![]({IMAGES_DIRNAME}/{target.name})"
        self._resolved[url] = reference
        return reference

    def _images_directory(self, url: str) -> Path:
        images_dir = Path(self.options.output_directory) / IMAGES_DIRNAME
        try:
            images_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ImageFilesystemError(url, str(images_dir), 'mkdir', e.strerror or str(e)) from e
        return images_dir

    def _fetch_metadata(self, url: str) -> Tuple[str, Optional[int]]:
        """Probe the server for the image's filename and total size.

        The origin does not support HEAD, so a one-byte ranged GET is used.

        Returns:
            Tuple of (sanitized filename, total size in bytes or None)
        """
        response = self._get(url, headers={'Range': 'bytes=0-0'})
        try:
            if response.status_code not in (200, 206):
                raise ImageNetworkError(
                    url,
                    f"metadata request returned HTTP {response.status_code}",
                    status_code=response.status_code,
                )
            disposition = response.headers.get('content-disposition')
            remote_size = _total_size(response)
        finally:
            response.close()

        filename = FilenameResolver.parse_content_disposition(disposition)
        if filename:
            return FilenameResolver.sanitize(filename), remote_size

        if self.options.note_filename:
            return FilenameResolver.default_for_note(self.options.note_filename), remote_size
        return DEFAULT_FILENAME, remote_size

    def _download(self, url: str, target: Path) -> int:
        """Download url to target, enforcing the timeout and size cap.

        Returns:
            Number of bytes written

        Raises:
            ImageTooLargeError: If the declared or actual size exceeds the cap
            ImageNetworkError: If the request fails or exceeds the timeout
            ImageFilesystemError: If the file cannot be written
        """
        limit = self.options.max_image_bytes
        deadline = time.monotonic() + self.options.download_timeout

        response = self._get(url)
        try:
            if response.status_code != 200:
                raise ImageNetworkError(
                    url,
                    f"download returned HTTP {response.status_code}",
                    status_code=response.status_code,
                )

            declared = _parse_int(response.headers.get('content-length'))
            if declared is not None and declared > limit:
                raise ImageTooLargeError(url, declared, limit)

            body = self._read_body(url, response, limit, deadline)
        finally:
            response.close()

        if len(body) > limit:
            raise ImageTooLargeError(url, len(body), limit)

        self._write_file(url, target, body)
        return len(body)

    def _read_body(self, url: str, response, limit: int, deadline: float) -> bytes:
        body = bytearray()
        try:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if time.monotonic() > deadline:
                    raise ImageNetworkError(
                        url, f"download exceeded {self.options.download_timeout}s"
                    )
                if not chunk:
                    continue
                body.extend(chunk)
                if len(body) > limit:
                    raise ImageTooLargeError(url, len(body), limit)
        except requests.exceptions.RequestException as e:
            raise ImageNetworkError(url, f"connection lost during download ({e})") from e
        return bytes(body)

    def _write_file(self, url: str, target: Path, body: bytes) -> None:
        partial = target.with_name(target.name + '.part')
        try:
            partial.write_bytes(body)
            os.replace(partial, target)
        except OSError as e:
            if partial.exists():
                partial.unlink()
            raise ImageFilesystemError(url, str(target), 'write', e.strerror or str(e)) from e

    def _get(self, url: str, headers: Optional[Dict[str, str]] = None) -> requests.Response:
        timeout = self.options.download_timeout
        try:
            return self.session.get(url, headers=headers, timeout=timeout, stream=True)
        except requests.exceptions.Timeout as e:
            raise ImageNetworkError(url, f"timed out after {timeout}s") from e
        except requests.exceptions.ConnectionError as e:
            raise ImageNetworkError(url, f"host unreachable ({e})") from e
        except requests.exceptions.RequestException as e:
            raise ImageNetworkError(url, str(e)) from e

    def _record_failure(
        self,
        url: str,
        failure_type: FailureType,
        message: str,
        error: Exception
    ) -> None:
        failure = ImageFailure(
            original_url=url,
            failure_type=failure_type,
            error_message=message,
            note_filename=self.options.note_filename,
            error=error,
        )
        self.failures.append(failure)
        self.stats.image_downloads_failed += 1
        logger.warning(
            f"Image unavailable ({failure_type.value}): {failure.url_preview}: {message}"
        )
        self._log(f"Image failed [{failure_type.value}] {failure.url_preview}: {message}")


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _total_size(response) -> Optional[int]:
    """Total resource size from Content-Range, or Content-Length on a 200."""
    content_range = response.headers.get('content-range')
    if content_range:
        match = CONTENT_RANGE_TOTAL_PATTERN.search(content_range)
        return int(match.group(1)) if match else None
    if response.status_code == 200:
        return _parse_int(response.headers.get('content-length'))
    return None
