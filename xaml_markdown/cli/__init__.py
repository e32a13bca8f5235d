"""Command-line interface for converting a single rich-text note.

This package provides the `xaml-markdown` CLI tool: option loading from YAML
and the environment, terminal reporting with Rich, and the Typer entry point.
"""

from .config import ConfigLoader
from .errors import CLIError, ConfigError, FilesystemError
from .models import ExitCode
from .output import OutputHandler

__all__ = [
    'CLIError',
    'ConfigError',
    'ConfigLoader',
    'ExitCode',
    'FilesystemError',
    'OutputHandler',
]
