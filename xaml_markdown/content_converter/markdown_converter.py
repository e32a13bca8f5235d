"""Rich-text (XAML) to Markdown conversion entry point.

Conversion runs in two passes. The first pass parses the markup and walks the
tree synchronously, leaving a unique placeholder wherever an image is
referenced. The second pass downloads the collected images in insertion order
and replaces each placeholder with its resolved reference. Malformed markup
never raises: it degrades to plain text behind a visible warning banner.
"""

import logging
from dataclasses import replace
from typing import List, Optional

import requests

from xaml_markdown.image_client.image_processor import UNAVAILABLE_IMAGE, ImageProcessor
from xaml_markdown.models.conversion_options import ConversionOptions
from xaml_markdown.models.conversion_result import (
    ConversionResult,
    ElementFailure,
    ElementFailureType,
)
from xaml_markdown.models.image_models import ImageFailure, ImageStats
from .element_processor import ElementProcessor, placeholder_markdown
from .normalizer import normalize_markdown
from .xaml_parser import decode_text, extract_plain_text, looks_like_rich_text, parse_xaml

logger = logging.getLogger(__name__)

DEGRADED_BANNER = '*[Warning: Some formatting lost due to complex content]*\n\n'


class XamlToMarkdownConverter:
    """Converts rich-text note bodies to Markdown.

    One instance handles one note at a time. Call ``clear_collected_images``
    (or use ``convert``, which does it for you) before reusing an instance for
    the next note.

    Attributes:
        options: Options in effect for the current note
        elements: Tree walker holding pending image placeholders
        image_processor: Image pipeline, or None without an output directory
        element_failures: Structural failures for the current note
        warnings: Human-readable warnings for the current note

    Example:
        >>> converter = XamlToMarkdownConverter(ConversionOptions().for_note('./out', 'Psalm 23.md'))
        >>> result = converter.convert('<Paragraph FontSize="24"><Run Text="Psalm 23"/></Paragraph>')
        >>> result.markdown
        '# Psalm 23'
    """

    def __init__(
        self,
        options: Optional[ConversionOptions] = None,
        session: Optional[requests.Session] = None
    ):
        self.options = options if options is not None else ConversionOptions()
        self._session = session
        self.element_failures: List[ElementFailure] = []
        self.warnings: List[str] = []
        self.degraded = False
        self._build_processors()

    def _build_processors(self) -> None:
        self.elements = ElementProcessor(self.options)
        self.image_processor: Optional[ImageProcessor] = None
        if self.options.image_pipeline_enabled:
            self.image_processor = ImageProcessor(self.options, self._session, log=self._log)
            self._session = self.image_processor.session

    def set_note_context(self, output_directory: Optional[str], note_filename: Optional[str] = None) -> None:
        """Point the image pipeline at another note's output location.

        Clears all per-note state.
        """
        self.options = self.options.for_note(output_directory, note_filename)
        self._build_processors()
        self.clear_collected_images()

    def convert(self, xaml: str) -> ConversionResult:
        """Run the full pipeline for one note.

        Resets per-note state, converts the markup, resolves images and
        bundles the Markdown with statistics and failure records.

        Args:
            xaml: Rich-text markup (or plain text) of the note body

        Returns:
            ConversionResult for the note
        """
        self.clear_collected_images()

        if xaml and xaml.strip() and not looks_like_rich_text(xaml):
            self._log("Content is not rich text, passing through as plain text")
            markdown = normalize_markdown(decode_text(xaml), self.options.convert_indents_to_quotes)
        else:
            markdown = self.convert_to_markdown(xaml)
            markdown = self.process_collected_images(markdown)

        if xaml and xaml.strip() and not markdown.strip():
            self.element_failures.append(ElementFailure.from_content(
                ElementFailureType.EMPTY_CONTENT,
                "Conversion produced no content",
                xaml,
            ))

        return ConversionResult(
            markdown=markdown,
            degraded=self.degraded,
            image_stats=self.get_image_stats(),
            image_failures=self.get_image_failures(),
            element_failures=list(self.element_failures),
            warnings=list(self.warnings),
        )

    def convert_to_markdown(self, xaml: str) -> str:
        """First pass: convert markup to Markdown with image placeholders.

        Args:
            xaml: Rich-text markup

        Returns:
            Normalized Markdown; a degraded plain-text rendering if the markup
            could not be parsed or walked
        """
        if not xaml or not xaml.strip():
            return ''

        try:
            tree = parse_xaml(xaml)
            markdown = self.elements.convert(tree)
        except Exception as e:
            return self._fallback(xaml, e)

        return normalize_markdown(markdown, self.options.convert_indents_to_quotes)

    def _fallback(self, xaml: str, error: Exception) -> str:
        logger.warning(f"Rich-text conversion failed, falling back to plain text: {error}")
        self.elements.clear_pending_images()
        self.degraded = True
        self.element_failures.append(ElementFailure.from_content(
            ElementFailureType.EXCEPTION,
            str(error),
            xaml,
        ))
        self.warnings.append(f"Some formatting lost due to complex content: {error}")

        plain_text = extract_plain_text(xaml)
        self._log(f"Plain-text fallback produced {len(plain_text)} chars")
        return DEGRADED_BANNER + plain_text

    def process_collected_images(self, markdown: str) -> str:
        """Second pass: resolve pending images and splice them in.

        Images are resolved sequentially in the order they were found. Each
        placeholder is replaced literally, so no other text is touched.

        Args:
            markdown: Output of convert_to_markdown

        Returns:
            Markdown with every placeholder replaced
        """
        pending = self.elements.pending_images
        if not pending:
            return markdown

        self._log(f"Resolving {len(pending)} image(s)")
        for placeholder_id, uri in pending.items():
            if self.image_processor is not None:
                reference = self.image_processor.resolve(uri)
            else:
                reference = UNAVAILABLE_IMAGE
            markdown = markdown.replace(placeholder_markdown(placeholder_id), reference)

        self.elements.clear_pending_images()
        return markdown

    def clear_collected_images(self) -> None:
        """Reset pending images, image statistics and failure records."""
        self.elements.clear_pending_images()
        if self.image_processor is not None:
            self.image_processor.reset()
        self.element_failures = []
        self.warnings = []
        self.degraded = False

    def get_image_stats(self) -> ImageStats:
        if self.image_processor is None:
            return ImageStats()
        return replace(self.image_processor.stats)

    def get_image_failures(self) -> List[ImageFailure]:
        if self.image_processor is None:
            return []
        return list(self.image_processor.failures)

    def _log(self, message: str) -> None:
        logger.debug(message)
        if self.options.verbose and self.options.on_log is not None:
            self.options.on_log(message)
