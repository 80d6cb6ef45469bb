"""
Quill exception hierarchy.

Everything raised from ``add_sink`` inherits from QuillError. Errors that happen
while a record is being written never reach the caller; they are reported to
standard error with :func:`report` instead.
"""

from rich.console import Console
from rich.text import Text


class QuillError(Exception):
    """Base exception class for all quill errors."""


class UnsupportedAdapter(QuillError):
    """Raised when add_sink is asked for an unknown sink kind."""


class UnsupportedLevel(QuillError):
    """Raised for an unknown level name."""


class HelperParseError(QuillError):
    """Raised when a sink's helper JSON is malformed."""


class SinkIOError(QuillError):
    """Raised when the underlying file or stream fails."""


# Resolves sys.stderr lazily, so redirected/captured stderr is honoured
_stderr = Console(stderr=True, highlight=False, soft_wrap=True)


def report(message: str | BaseException, *, source: str | None = None) -> None:
    """Write a diagnostic line to standard error. Never raises."""
    if isinstance(message, BaseException):
        message = f"{type(message).__name__}: {message}"
    if source:
        message = f"{source}: {message}"

    try:
        _stderr.print(Text(f"quill: {message}", style="red"))
    except Exception:
        # stderr itself is gone, nothing left to report to
        pass
