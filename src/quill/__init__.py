from .errors import (
    HelperParseError,
    QuillError,
    SinkIOError,
    UnsupportedAdapter,
    UnsupportedLevel,
)
from .levels import Level, parse_level
from .logger import (
    DEFAULT_QUEUE_SIZE,
    Logger,
    new_logger,
    new_logger_with_console,
    new_logger_with_debug_console,
    new_logger_with_trace_console,
)
from .sinks import ConsoleSink, FileSink
from .types import Record, Sink, Trace

__all__ = [
    "DEFAULT_QUEUE_SIZE",
    "ConsoleSink",
    "FileSink",
    "HelperParseError",
    "Level",
    "Logger",
    "QuillError",
    "Record",
    "Sink",
    "SinkIOError",
    "Trace",
    "UnsupportedAdapter",
    "UnsupportedLevel",
    "new_logger",
    "new_logger_with_console",
    "new_logger_with_debug_console",
    "new_logger_with_trace_console",
    "parse_level",
]
