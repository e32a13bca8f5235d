"""Base exception and error taxonomy shared by all xaml-markdown packages.

Every exception raised by this project inherits from XamlMarkdownError and
carries a severity and a category so callers can route errors to their own
reporting without inspecting messages.
"""

from enum import Enum


class ErrorSeverity(Enum):
    """How serious an error is for the note being converted."""
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class ErrorCategory(Enum):
    """Which subsystem an error belongs to."""
    XAML_CONVERSION = "xaml_conversion"
    FILE_SYSTEM = "file_system"
    VALIDATION = "validation"
    NETWORK = "network"


class XamlMarkdownError(Exception):
    """Base exception for all xaml-markdown errors.

    Use this to catch any application-level error from the converter.
    """
    severity = ErrorSeverity.ERROR
    category = ErrorCategory.XAML_CONVERSION
