import queue
import threading
import time
import weakref

from .config import DEFAULT_HELPER
from .errors import QuillError, report
from .formatting import extract_trace, format_timestamp, interpolate, printf
from .levels import Level
from .sinks import CONSOLE, create_sink
from .types import Record, Sink

DEFAULT_QUEUE_SIZE = 128

# Enqueued by close(); the worker destroys the sinks when it sees it
_CLOSED = object()


class _Dispatcher:
    """
    Owns the sinks and, once async is started, the queue and its worker.

    Kept apart from Logger so the finalizer can close it without holding a
    reference to the logger itself.
    """

    __slots__ = (
        "sinks",
        "queue_size",
        "queue",
        "worker",
        "async_started",
        "closed",
        "lock",
    )

    def __init__(self, queue_size: int):
        self.sinks: list[Sink] = []
        self.queue_size = queue_size
        self.queue: queue.Queue | None = None
        self.worker: threading.Thread | None = None
        self.async_started = False
        self.closed = False
        self.lock = threading.Lock()

    def submit(self, record: Record) -> None:
        if not self.sinks:
            report("no sink in the logger")
            return

        if self.async_started:
            # Holding the lock while a full queue blocks keeps close() from
            # slipping the sentinel in ahead of this record
            with self.lock:
                if self.closed:
                    report("logger is closed, record dropped")
                    return
                self.queue.put(record)
            return

        if self.closed:
            report("logger is closed, record dropped")
            return
        self.fan_out(record)

    def fan_out(self, record: Record) -> None:
        for sink in self.sinks:
            try:
                sink.write(record)
            except Exception as exc:
                report(exc, source=type(sink).__name__)

    def destroy_sinks(self) -> None:
        for sink in self.sinks:
            try:
                sink.destroy()
            except Exception as exc:
                report(exc, source=type(sink).__name__)

    def start_async(self) -> None:
        with self.lock:
            if self.async_started or self.closed:
                return

            self.queue = queue.Queue(maxsize=self.queue_size)
            self.worker = threading.Thread(
                target=self._work,
                name="quill-worker",
                daemon=True,
            )
            self.worker.start()
            self.async_started = True

    def _work(self) -> None:
        while True:
            record = self.queue.get()
            if record is _CLOSED:
                self.destroy_sinks()
                return
            self.fan_out(record)

    def close(self) -> None:
        with self.lock:
            if self.closed:
                return
            self.closed = True
            if self.async_started:
                self.queue.put(_CLOSED)

        if not self.async_started:
            self.destroy_sinks()
        elif self.worker is not threading.current_thread():
            self.worker.join()


class Logger:
    """
    Leveled logger fanning each record out to its sinks.

    Records are written synchronously by the calling thread until ``async_()``
    is called; from then on a single worker thread drains a bounded queue.
    ``close()`` must be called (or the logger used as a context manager) to
    flush and release the sinks; it also runs when the logger is garbage
    collected or the interpreter exits.
    """

    __slots__ = ("_dispatcher", "_finalizer", "__weakref__")

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE):
        self._dispatcher = _Dispatcher(queue_size)
        self._finalizer = weakref.finalize(self, self._dispatcher.close)

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def sinks(self) -> tuple[Sink, ...]:
        return tuple(self._dispatcher.sinks)

    @property
    def async_started(self) -> bool:
        return self._dispatcher.async_started

    @property
    def closed(self) -> bool:
        return self._dispatcher.closed

    def add_sink(self, kind: str, level: str, helper: str = "") -> Sink:
        """
        Create a sink and append it to the logger.

        Raises UnsupportedAdapter, UnsupportedLevel, HelperParseError or
        SinkIOError; the logger is left unchanged on failure.
        """
        if self._dispatcher.closed:
            raise QuillError("cannot add a sink to a closed logger")

        sink = create_sink(kind, level, helper or DEFAULT_HELPER)
        self._dispatcher.sinks.append(sink)
        return sink

    def async_(self) -> None:
        """Switch to background dispatch. Only the first call has an effect."""
        self._dispatcher.start_async()

    def close(self) -> None:
        """Drain pending records and destroy every sink. Safe to call twice."""
        self._finalizer()

    # use {} as message placeholder
    def debug(self, template: str, *args: object) -> None:
        self._save_log(Level.DEBUG, interpolate(template, *args))

    def info(self, template: str, *args: object) -> None:
        self._save_log(Level.INFO, interpolate(template, *args))

    def warning(self, template: str, *args: object) -> None:
        self._save_log(Level.WARNING, interpolate(template, *args))

    def error(self, template: str, *args: object) -> None:
        self._save_log(Level.ERROR, interpolate(template, *args))

    # use %-formatting
    def debug_f(self, template: str, *args: object) -> None:
        self._save_log(Level.DEBUG, printf(template, *args))

    def info_f(self, template: str, *args: object) -> None:
        self._save_log(Level.INFO, printf(template, *args))

    def warning_f(self, template: str, *args: object) -> None:
        self._save_log(Level.WARNING, printf(template, *args))

    def error_f(self, template: str, *args: object) -> None:
        self._save_log(Level.ERROR, printf(template, *args))

    def _save_log(self, level: Level, message: str) -> None:
        # Must be called straight from a public log method: the trace skips
        # exactly this frame and that one
        trace = extract_trace()
        now = time.time_ns()
        self._dispatcher.submit(
            Record(
                time_ns=now,
                time_string=format_timestamp(now),
                level=level,
                message=message,
                trace=trace,
            )
        )


def new_logger(queue_size: int = DEFAULT_QUEUE_SIZE) -> Logger:
    """Return a logger with no sinks, dispatching synchronously."""
    return Logger(queue_size)


def new_logger_with_console(level: str) -> Logger:
    """Return a logger with one standard-error console sink. Failures are reported, not raised."""
    logger = Logger()
    try:
        logger.add_sink(CONSOLE, level, DEFAULT_HELPER)
    except QuillError as exc:
        report(exc)
    return logger


def new_logger_with_trace_console() -> Logger:
    return new_logger_with_console(Level.TRACE.name.lower())


def new_logger_with_debug_console() -> Logger:
    return new_logger_with_console(Level.DEBUG.name.lower())
