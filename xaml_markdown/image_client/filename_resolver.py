"""Local filename resolution for downloaded images.

Filenames come from the server's content-disposition header, are reduced to
a conservative character set and are de-duplicated against the images
directory.
"""

import re
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import unquote

DEFAULT_FILENAME = 'image.jpg'
IMAGE_EXTENSION = '.jpg'

RFC5987_FILENAME_PATTERN = re.compile(r"filename\*\s*=\s*UTF-8''([^;]+)", re.IGNORECASE)
QUOTED_FILENAME_PATTERN = re.compile(r'filename\s*=\s*"([^"]+)"', re.IGNORECASE)


class FilenameResolver:
    """Converts server-supplied image names to safe, unique local filenames.

    Sanitizing rules:
    - Lowercase
    - Whitespace → hyphens (-)
    - Characters outside [a-z0-9-_.] → removed
    - Multiple consecutive hyphens → collapsed to a single hyphen
    - Leading/trailing hyphens → trimmed
    - Extension forced to .jpg

    Examples:
        - "Sunset Over Galilee.PNG" → "sunset-over-galilee.jpg"
        - "Map (1).jpeg" → "map-1.jpg"
    """

    @staticmethod
    def parse_content_disposition(header: Optional[str]) -> Optional[str]:
        """Extract the filename from a content-disposition header.

        The RFC 5987 ``filename*=UTF-8''...`` form wins over a quoted
        ``filename="..."`` value.

        Args:
            header: Raw header value, or None

        Returns:
            The decoded filename, or None if the header carries none

        Examples:
            >>> FilenameResolver.parse_content_disposition("attachment; filename*=UTF-8''Sea%20of%20Galilee.png")
            'Sea of Galilee.png'
            >>> FilenameResolver.parse_content_disposition('inline; filename="map.jpg"')
            'map.jpg'
        """
        if not header:
            return None

        match = RFC5987_FILENAME_PATTERN.search(header)
        if match:
            return unquote(match.group(1).strip().strip('"'))

        match = QUOTED_FILENAME_PATTERN.search(header)
        if match:
            return match.group(1)

        return None

    @staticmethod
    def sanitize(filename: str) -> str:
        """Reduce a filename to ``[a-z0-9-_.]`` with a .jpg extension.

        Examples:
            >>> FilenameResolver.sanitize("Sunset Over Galilee.PNG")
            'sunset-over-galilee.jpg'
        """
        name = filename.strip().lower()
        name = re.sub(r'\s+', '-', name)
        name = re.sub(r'[^a-z0-9\-_.]', '', name)
        name = re.sub(r'-{2,}', '-', name)
        name = name.strip('-')

        stem = name.rsplit('.', 1)[0] if '.' in name else name
        stem = stem.strip('-.')
        if not stem:
            stem = Path(DEFAULT_FILENAME).stem
        return f"{stem}{IMAGE_EXTENSION}"

    @staticmethod
    def default_for_note(note_filename: Optional[str]) -> str:
        """Fallback image name derived from the note's Markdown filename."""
        if not note_filename:
            return DEFAULT_FILENAME
        return FilenameResolver.sanitize(f"{Path(note_filename).stem}{IMAGE_EXTENSION}")

    @staticmethod
    def resolve_target(
        directory: Path,
        filename: str,
        remote_size: Optional[int] = None
    ) -> Tuple[Path, bool]:
        """Pick the local path for an image, appending (n) on collisions.

        An existing file whose size equals the remote size is treated as the
        same image downloaded for an earlier note and is reused.

        Args:
            directory: Images directory
            filename: Sanitized filename
            remote_size: Total remote size in bytes, if the server reported it

        Returns:
            Tuple of (target path, reused) where reused is True when the
            existing file should be used without downloading

        Examples:
            >>> FilenameResolver.resolve_target(Path('images'), 'map.jpg')
            (PosixPath('images/map.jpg'), False)
        """
        stem = Path(filename).stem
        suffix = Path(filename).suffix
        candidate = directory / filename
        counter = 1

        while candidate.exists():
            if remote_size is not None and candidate.stat().st_size == remote_size:
                return candidate, True
            candidate = directory / f"{stem}({counter}){suffix}"
            counter += 1

        return candidate, False
