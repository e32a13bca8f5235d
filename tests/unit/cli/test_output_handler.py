"""Unit tests for cli.output module."""

import pytest

from xaml_markdown.cli.output import OutputHandler
from xaml_markdown.models.conversion_result import (
    ConversionResult,
    ElementFailure,
    ElementFailureType,
)
from xaml_markdown.models.image_models import FailureType, ImageFailure, ImageStats


@pytest.fixture
def handler():
    return OutputHandler(verbosity=0, no_color=True)


def captured(handler, func, *args):
    with handler.console.capture() as capture:
        func(*args)
    return capture.get()


class TestOutputHandlerInit:
    """Test cases for OutputHandler initialization."""

    def test_init_default_verbosity_and_color(self):
        """Initialize with default verbosity (0) and color enabled."""
        handler = OutputHandler()

        assert handler.verbosity == 0
        assert handler.console.no_color is False
        assert handler.console.stderr is True

    def test_init_no_color_true(self):
        """Initialize with no_color=True disables colors."""
        handler = OutputHandler(no_color=True)

        assert handler.console.no_color is True


class TestOutputHandlerMessages:
    """Test cases for message methods and verbosity."""

    def test_success(self, handler):
        """Success messages carry a check mark."""
        assert captured(handler, handler.success, "Wrote note.md") == "✓ Wrote note.md\n"

    def test_error(self, handler):
        """Error messages carry a cross."""
        assert captured(handler, handler.error, "failed") == "✗ failed\n"

    def test_warning(self, handler):
        """Warning messages carry a warning sign."""
        assert captured(handler, handler.warning, "careful") == "⚠ careful\n"

    def test_markup_in_message_is_literal(self, handler):
        """Square brackets in messages are not treated as markup."""
        assert captured(handler, handler.error, "bad [network] url") == "✗ bad [network] url\n"

    def test_info_hidden_at_verbosity_0(self, handler):
        """Info output needs verbosity 1."""
        assert captured(handler, handler.info, "hello") == ""

    def test_info_shown_at_verbosity_1(self):
        """Info output appears at verbosity 1."""
        handler = OutputHandler(verbosity=1, no_color=True)

        assert captured(handler, handler.info, "hello") == "hello\n"

    def test_debug_needs_verbosity_2(self):
        """Debug output appears only at verbosity 2."""
        quiet = OutputHandler(verbosity=1, no_color=True)
        loud = OutputHandler(verbosity=2, no_color=True)

        assert captured(quiet, quiet.debug, "trace") == ""
        assert captured(loud, loud.debug, "trace") == "trace\n"

    def test_spinner_runs_body(self, handler):
        """The spinner context runs its body."""
        ran = []
        with handler.spinner("Working..."):
            ran.append(True)

        assert ran == [True]


class TestPrintConversionSummary:
    """Test cases for print_conversion_summary."""

    def test_clean_result_without_images(self, handler):
        """Nothing is printed for a clean note without images."""
        assert captured(handler, handler.print_conversion_summary, ConversionResult(markdown="x")) == ""

    def test_degraded_result(self, handler):
        """Degradation and element failures are warned about."""
        result = ConversionResult(
            markdown="x",
            degraded=True,
            element_failures=[ElementFailure(ElementFailureType.EXCEPTION, "Malformed rich-text markup")],
        )

        output = captured(handler, handler.print_conversion_summary, result)

        assert "Formatting was lost" in output
        assert "Conversion problem (exception): Malformed rich-text markup" in output

    def test_image_summary(self, handler):
        """Image counters and failures are listed."""
        result = ConversionResult(
            markdown="x",
            image_stats=ImageStats(
                images_found=3,
                images_downloaded=2,
                images_reused=1,
                image_downloads_failed=1,
                total_image_size_mb=1.5,
            ),
            image_failures=[
                ImageFailure("https://x.logoscdn.com/a", FailureType.NETWORK, "timed out"),
            ],
        )

        output = captured(handler, handler.print_conversion_summary, result)

        assert "Image Summary:" in output
        assert "Found: 3" in output
        assert "Downloaded: 2 (1.50 MB)" in output
        assert "Reused: 1" in output
        assert "Failed: 1" in output
        assert "Unavailable images (1, mostly network):" in output
        assert "[network] https://x.logoscdn.com/a: timed out" in output
