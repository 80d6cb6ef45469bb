import sys
from typing import TextIO

from quill.config import ConsoleHelper, parse_helper
from quill.errors import SinkIOError
from quill.formatting import render_line
from quill.levels import Level, parse_level
from quill.types import Record


class ConsoleSink:
    """Plain line output to standard output or standard error."""

    __slots__ = ("level", "use_stdout")

    def __init__(self, level: int = Level.INFO, use_stdout: bool = False):
        self.level = level
        self.use_stdout = use_stdout

    @classmethod
    def from_helper(cls, level_name: str, helper: str) -> "ConsoleSink":
        config = parse_helper(ConsoleHelper, helper)
        return cls(parse_level(level_name), use_stdout=config.use_stdout)

    @property
    def stream(self) -> TextIO:
        # Looked up on every write so a redirected sys.stdout / sys.stderr is honoured
        return sys.stdout if self.use_stdout else sys.stderr

    def write(self, record: Record) -> None:
        if record.level < self.level:
            return

        # Same bytes the file sink writes: no markup, wrapping or tab expansion
        line = render_line(record, self.level)
        try:
            self.stream.write(line)
        except (OSError, ValueError) as exc:
            raise SinkIOError(f"console write failed: {exc}") from exc

    def flush(self) -> None:
        try:
            self.stream.flush()
        except (OSError, ValueError):
            # Best effort: the stream may already be closed by the host
            pass

    def destroy(self) -> None:
        """Flush only; the process owns stdout and stderr."""
        self.flush()
