"""Main CLI entry point for the xaml-markdown command.

This module provides the Typer application that converts one rich-text (XAML)
note body to Markdown. Images are downloaded next to the output file when an
output location is known.
"""

import logging
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from xaml_markdown import __version__
from xaml_markdown.cli.config import ConfigLoader
from xaml_markdown.cli.errors import CLIError, FilesystemError
from xaml_markdown.cli.models import ExitCode
from xaml_markdown.cli.output import OutputHandler
from xaml_markdown.content_converter.markdown_converter import XamlToMarkdownConverter
from xaml_markdown.models.conversion_result import ConversionResult

app = typer.Typer(
    name="xaml-markdown",
    help="""Convert a rich-text (XAML) note body to Markdown.

EXAMPLES:
  xaml-markdown note.xaml                          # Markdown to stdout, no image downloads
  xaml-markdown note.xaml -o export/note.md        # Write file, images in export/images/
  xaml-markdown note.xaml -o note.md --no-images   # Keep image markers, skip downloads""",
    add_completion=False,
    rich_markup_mode=None,
)

# Module logger
logger = logging.getLogger(__name__)

STDIN_MARKER = '-'


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'xaml_markdown' namespace logger to avoid affecting
    third-party libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    app_logger = logging.getLogger("xaml_markdown")
    app_logger.setLevel(level)

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"xaml-markdown_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _read_input(input_file: str) -> str:
    """Read note content from a file or stdin.

    Raises:
        FilesystemError: If the file cannot be read
    """
    if input_file == STDIN_MARKER:
        return sys.stdin.read()

    try:
        with open(input_file, 'r', encoding='utf-8-sig') as f:
            return f.read()
    except FileNotFoundError:
        raise FilesystemError(input_file, 'read', 'Input file not found')
    except UnicodeDecodeError as e:
        raise FilesystemError(input_file, 'read', f'Not valid UTF-8 ({e.reason})')
    except OSError as e:
        raise FilesystemError(input_file, 'read', e.strerror or str(e))


def _write_output(markdown: str, output_file: Optional[str]) -> None:
    """Write Markdown to a file, or to stdout when no file is given.

    Raises:
        FilesystemError: If the file cannot be written
    """
    if output_file is None:
        typer.echo(markdown)
        return

    path = Path(output_file)
    try:
        if path.parent != Path(''):
            path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(markdown + '\n', encoding='utf-8')
    except OSError as e:
        raise FilesystemError(output_file, 'write', e.strerror or str(e))


def _exit_code_for(result: ConversionResult) -> ExitCode:
    if result.degraded or result.has_failures:
        return ExitCode.COMPLETED_WITH_FAILURES
    return ExitCode.SUCCESS


@app.command()
def main_command(
    input_file: Optional[str] = typer.Argument(
        None,
        help="Rich-text (XAML) file to convert, or '-' to read stdin",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Markdown file to write (defaults to stdout)",
        metavar="FILE",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output-dir",
        help="Directory images are saved under (defaults to the output file's directory)",
        metavar="DIR",
    ),
    note_filename: Optional[str] = typer.Option(
        None,
        "--note-filename",
        help="Note filename used to name images without a server filename",
        metavar="NAME",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML file with conversion options",
        metavar="FILE",
    ),
    no_images: bool = typer.Option(
        False,
        "--no-images",
        help="Do not download images; emit unavailable markers instead",
    ),
    html_sub_superscript: bool = typer.Option(
        False,
        "--html-sub-superscript",
        help="Use <sub>/<sup> tags instead of ~x~ and ^x^",
    ),
    indents_not_quotes: bool = typer.Option(
        False,
        "--indents-not-quotes",
        help="Render paragraph indents with &nbsp; instead of blockquotes",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v info, -vv debug)",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Convert a rich-text (XAML) note body to Markdown."""
    if version:
        typer.echo(f"xaml-markdown version {__version__}")
        raise typer.Exit()

    if input_file is None:
        typer.echo("Error: Missing input file (use '-' to read stdin)", err=True)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    _configure_logging(verbose, logdir)
    output_handler = OutputHandler(verbosity=verbose, no_color=no_color)

    overrides = {}
    if no_images:
        overrides['download_images'] = False
    if html_sub_superscript:
        overrides['html_sub_superscript'] = True
    if indents_not_quotes:
        overrides['convert_indents_to_quotes'] = False

    try:
        options = ConfigLoader.load(config, overrides=overrides)
        options = replace(options, verbose=verbose >= 2, on_log=output_handler.debug)

        image_root = output_dir
        if image_root is None and output is not None:
            image_root = str(Path(output).parent)
        if image_root is not None:
            note_name = note_filename or (Path(output).name if output else None)
            options = options.for_note(image_root, note_name)

        content = _read_input(input_file)

        output_handler.info(f"Converting {input_file}")
        converter = XamlToMarkdownConverter(options)
        with output_handler.spinner("Converting note..."):
            result = converter.convert(content)

        _write_output(result.markdown, output)
        if output:
            output_handler.success(f"Wrote {output}")
        output_handler.print_conversion_summary(result)

    except CLIError as e:
        logger.error(f"Conversion failed: {e}")
        output_handler.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    except Exception as e:
        logger.exception("Unexpected error during conversion")
        output_handler.error(f"Unexpected error: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    raise typer.Exit(_exit_code_for(result))


def main() -> None:
    """Main entry point for the CLI application."""
    app()


# Allow running as: python -m xaml_markdown.cli.main
if __name__ == "__main__":
    main()
