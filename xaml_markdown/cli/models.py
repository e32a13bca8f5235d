"""Data models for CLI operations."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for the xaml-markdown command.

    These exit codes provide meaningful feedback about the operation result:
    - SUCCESS (0): Note converted with all images resolved
    - GENERAL_ERROR (1): Config, input or output problem; nothing written
    - COMPLETED_WITH_FAILURES (2): Markdown written, but some images are
      unavailable or the formatting was degraded

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    COMPLETED_WITH_FAILURES = 2
