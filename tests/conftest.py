"""Shared test fixtures for quill."""

import json
import time

import pytest

from quill.errors import SinkIOError
from quill.formatting import format_timestamp
from quill.levels import Level, parse_level
from quill.sinks import SINK_FACTORIES
from quill.types import Record, Trace


class MemorySink:
    """Keeps records in a list and counts lifecycle calls."""

    def __init__(self, level: int = Level.TRACE):
        self.level = level
        self.records: list[Record] = []
        self.flushes = 0
        self.destroyed = 0

    @classmethod
    def from_helper(cls, level_name: str, helper: str) -> "MemorySink":
        return cls(parse_level(level_name))

    def write(self, record: Record) -> None:
        if record.level >= self.level:
            self.records.append(record)

    def flush(self) -> None:
        self.flushes += 1

    def destroy(self) -> None:
        self.destroyed += 1


class FailingSink(MemorySink):
    def write(self, record: Record) -> None:
        raise SinkIOError("disk on fire")


@pytest.fixture
def memory_kinds(monkeypatch):
    """Register the in-memory sink kinds with add_sink."""
    monkeypatch.setitem(SINK_FACTORIES, "memory", MemorySink.from_helper)
    monkeypatch.setitem(SINK_FACTORIES, "failing", FailingSink.from_helper)


@pytest.fixture
def make_record():
    def _make(level: int = Level.INFO, message: str = "hello", trace: Trace | None = None) -> Record:
        now = time.time_ns()
        return Record(
            time_ns=now,
            time_string=format_timestamp(now),
            level=level,
            message=message,
            trace=trace or Trace("app.py", 42, "app.main"),
        )

    return _make


@pytest.fixture
def file_helper(tmp_path):
    """Build a file sink helper JSON pointing inside tmp_path."""

    def _helper(name: str = "app.log", **options) -> str:
        return json.dumps({"filename": str(tmp_path / name), **options})

    return _helper
