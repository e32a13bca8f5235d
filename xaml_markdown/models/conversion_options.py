"""Immutable configuration snapshot for a single conversion call."""

from dataclasses import dataclass, replace
from typing import Callable, Optional

DEFAULT_MONOSPACE_FONT = 'Courier New'
DEFAULT_MAX_IMAGE_SIZE_MB = 8
DEFAULT_DOWNLOAD_TIMEOUT = 30.0
DEFAULT_DOWNLOAD_RETRIES = 3


@dataclass(frozen=True)
class ConversionOptions:
    """Options controlling markup rendering and the image pipeline.

    Attributes:
        monospace_font_name: Font family treated as code in addition to the
            built-in monospace list
        disable_heading_sizes: Legacy flag; when True no paragraph is promoted
            to a heading based on font size
        html_sub_superscript: Emit <sub>/<sup> instead of ~x~/^x^
        convert_indents_to_quotes: Render paragraph indents as blockquotes
            (True) or as non-breaking-space indents (False)
        download_images: Download referenced images when an output
            directory is available
        max_image_size_mb: Hard cap for a single downloaded image
        download_timeout: Per-attempt timeout in seconds
        download_retries: Total attempts per request
        on_log: Optional sink receiving verbose trace messages
        verbose: Forward trace messages to on_log
        output_directory: Root directory images are written under
        note_filename: Target Markdown filename of the note being converted

    Example:
        >>> options = ConversionOptions(convert_indents_to_quotes=False)
        >>> note_options = options.for_note('/tmp/export', 'Romans 8.md')
    """
    monospace_font_name: str = DEFAULT_MONOSPACE_FONT
    disable_heading_sizes: bool = False
    html_sub_superscript: bool = False
    convert_indents_to_quotes: bool = True
    download_images: bool = True
    max_image_size_mb: float = DEFAULT_MAX_IMAGE_SIZE_MB
    download_timeout: float = DEFAULT_DOWNLOAD_TIMEOUT
    download_retries: int = DEFAULT_DOWNLOAD_RETRIES
    on_log: Optional[Callable[[str], None]] = None
    verbose: bool = False
    output_directory: Optional[str] = None
    note_filename: Optional[str] = None

    def __post_init__(self):
        if self.max_image_size_mb <= 0:
            raise ValueError(f"max_image_size_mb must be positive, got {self.max_image_size_mb}")
        if self.download_timeout <= 0:
            raise ValueError(f"download_timeout must be positive, got {self.download_timeout}")
        if self.download_retries < 1:
            raise ValueError(f"download_retries must be at least 1, got {self.download_retries}")

    @property
    def max_image_bytes(self) -> int:
        return int(self.max_image_size_mb * 1024 * 1024)

    @property
    def image_pipeline_enabled(self) -> bool:
        """True when image references should be deferred to the pipeline."""
        return self.output_directory is not None

    def for_note(
        self,
        output_directory: Optional[str],
        note_filename: Optional[str] = None
    ) -> 'ConversionOptions':
        """Return a copy scoped to one note's output location."""
        return replace(
            self,
            output_directory=output_directory,
            note_filename=note_filename,
        )
