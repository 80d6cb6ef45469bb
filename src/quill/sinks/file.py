import contextlib
import os
import threading
import time
from typing import BinaryIO, Callable

from quill.config import FileHelper, parse_helper
from quill.errors import SinkIOError
from quill.formatting import render_line
from quill.levels import Level, parse_level
from quill.types import Record

ACTIVE_FILE_MODE = 0o664
ARCHIVE_FILE_MODE = 0o444
DIRECTORY_MODE = 0o755
COUNT_BUFFER_SIZE = 32 * 1024


def _date_string(time_ns: int) -> str:
    return time.strftime("%Y-%m-%d", time.localtime(time_ns // 1_000_000_000))


def count_lines(path: str) -> int:
    """Count newline bytes in a file, reading it in 32 KiB chunks."""
    count = 0
    with open(path, "rb") as fd:
        while chunk := fd.read(COUNT_BUFFER_SIZE):
            count += chunk.count(b"\n")
    return count


class FileSink:
    """
    Appends lines to a file, optionally rotating it.

    With rotation on, the active file is named ``<base>-<YYYY-MM-DD><ext>``. It
    is rotated when the day changes (``daily``), when it reaches ``max_size``
    bytes or when it holds ``max_lines`` lines. A rotated file is renamed to
    ``<base>-<date>-<unix>[-<nanos>]<ext>``, made read-only, and a fresh active
    file is opened.

    With rotation off, the configured filename is used verbatim, forever.
    """

    def __init__(
        self,
        filename: str = "app.log",
        level: int = Level.INFO,
        *,
        rotate: bool = True,
        daily: bool = True,
        max_lines: int = 0,
        max_size: int = 0,
        clock: Callable[[], int] = time.time_ns,
    ):
        self.level = level
        self.filename = filename
        self.base, self.ext = os.path.splitext(filename)
        self.rotate = rotate
        self.daily = daily
        self.max_lines = max_lines
        self.max_size = max_size
        self.clock = clock

        self.active_filename = filename
        self.open_time_ns = 0
        self.open_date = ""
        self.current_size = 0
        self.current_lines = 0

        self._handle: BinaryIO | None = None
        self._lock = threading.Lock()

        try:
            self._start()
        except OSError as exc:
            raise SinkIOError(f"cannot open log file {self.active_filename!r}: {exc}") from exc

    @classmethod
    def from_helper(cls, level_name: str, helper: str) -> "FileSink":
        config = parse_helper(FileHelper, helper)
        return cls(
            config.filename,
            parse_level(level_name),
            rotate=config.rotate,
            daily=config.daily,
            max_lines=config.maxlines,
            max_size=config.maxsize,
        )

    # --- Sink protocol ---

    def write(self, record: Record) -> None:
        if record.level < self.level:
            return

        if self.need_rotate():
            with self._lock:
                # Another writer may have rotated while we waited
                if self.need_rotate():
                    self._rotate()

        data = render_line(record, self.level).encode("utf-8")

        with self._lock:
            if self._handle is None:
                raise SinkIOError(f"log file {self.active_filename!r} is not open")
            try:
                written = self._handle.write(data)
            except (OSError, ValueError) as exc:
                raise SinkIOError(f"write to {self.active_filename!r} failed: {exc}") from exc

            self.current_lines += 1
            self.current_size += written

    def flush(self) -> None:
        with self._lock:
            if self._handle is None:
                return
            try:
                self._handle.flush()
                os.fsync(self._handle.fileno())
            except (OSError, ValueError) as exc:
                raise SinkIOError(f"sync of {self.active_filename!r} failed: {exc}") from exc

    def destroy(self) -> None:
        with self._lock:
            self._close_handle()

    # --- Rotation state machine ---

    def need_rotate(self) -> bool:
        if not self.rotate:
            return False

        return (
            (self.daily and _date_string(self.clock()) != self.open_date)
            or (self.max_size > 0 and self.current_size >= self.max_size)
            or (self.max_lines > 0 and self.current_lines >= self.max_lines)
        )

    def archive_filename(self) -> str:
        """Name the active file gets when rotated out at the current clock."""
        open_seconds, open_nanos = divmod(self.open_time_ns, 1_000_000_000)
        stem = f"{self.base}-{self.open_date}-{open_seconds}"

        # Several rotations within one second need the nanoseconds to stay unique
        if self.clock() // 1_000_000_000 == open_seconds:
            return f"{stem}-{open_nanos}{self.ext}"
        return f"{stem}{self.ext}"

    def _rotate(self, *, recheck: bool = True) -> None:
        """Close, archive and reopen. Callers hold the lock (or own the sink exclusively)."""
        self._close_handle()

        archive = self.archive_filename()
        try:
            os.rename(self.active_filename, archive)
        except OSError:
            # Keep appending to whatever we can reopen
            pass
        else:
            with contextlib.suppress(OSError):
                os.chmod(archive, ARCHIVE_FILE_MODE)

        try:
            self._open()
        except OSError:
            # No handle now, the next write reports a SinkIOError
            return

        if recheck and self.need_rotate():
            self._rotate(recheck=False)

    def _start(self) -> None:
        self._open()
        if self.need_rotate():
            self._rotate()

    def _open(self) -> None:
        """Open the active file for appending and re-derive the counters from disk."""
        directory = os.path.dirname(self.filename)
        if directory:
            os.makedirs(directory, mode=DIRECTORY_MODE, exist_ok=True)

        self.open_time_ns = self.clock()
        self.open_date = _date_string(self.open_time_ns)
        self.active_filename = self.active_name()

        fd = os.open(
            self.active_filename,
            os.O_WRONLY | os.O_APPEND | os.O_CREAT,
            ACTIVE_FILE_MODE,
        )
        try:
            # os.open obeys the umask
            with contextlib.suppress(OSError):
                os.chmod(self.active_filename, ACTIVE_FILE_MODE)
            size = os.fstat(fd).st_size
            lines = count_lines(self.active_filename) if size > 0 else 0
        except OSError:
            os.close(fd)
            raise

        self._handle = os.fdopen(fd, "ab", buffering=0)
        self.current_size = size
        self.current_lines = lines

    def active_name(self) -> str:
        if self.rotate:
            return f"{self.base}-{self.open_date}{self.ext}"
        return self.filename

    def _close_handle(self) -> None:
        if self._handle is None:
            return
        with contextlib.suppress(OSError):
            self._handle.close()
        self._handle = None
