from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True, slots=True)
class Trace:
    """Call site of a log call. Fields stay empty when the stack can't be inspected."""

    file: str = ""
    line: int = 0
    func_name: str = ""


@dataclass(frozen=True, slots=True)
class Record:
    """A single log entry, built once per log call and shared by every sink."""

    time_ns: int  # wall clock in nanoseconds since epoch (time.time_ns())
    time_string: str  # "YYYY-MM-DD HH:MM:SS.TTTT"
    level: int
    message: str
    trace: Trace = field(default_factory=Trace)


class Sink(Protocol):
    """Protocol for log output destinations."""

    level: int

    def write(self, record: Record) -> None:
        """Write a record if it passes the sink threshold."""
        ...

    def flush(self) -> None:
        """Ask the OS to sync the underlying stream."""
        ...

    def destroy(self) -> None:
        """Release the sink. Called exactly once, when the logger closes."""
        ...
