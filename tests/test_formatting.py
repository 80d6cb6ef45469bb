import sys
import time

from quill.formatting import (
    MISSING_ARG,
    extract_trace,
    format_timestamp,
    interpolate,
    printf,
    render_line,
)
from quill.levels import Level
from quill.types import Record, Trace


def _local_ns(*parts: int, nanos: int = 0) -> int:
    seconds = int(time.mktime((*parts, 0, 0, -1)))
    return seconds * 1_000_000_000 + nanos


class TestInterpolate:
    def test_matching_count(self):
        assert interpolate("a {} b {}", 1, "two") == "a 1 b two"

    def test_surplus_args_are_appended(self):
        assert interpolate("x", 1, 2) == "x 1 2"
        assert interpolate("a {} b", 1, 2, 3) == "a 1 b 2 3"

    def test_missing_args_are_filled(self):
        assert interpolate("{} and {}", "a") == f"a and {MISSING_ARG}"
        assert interpolate("{}") == "[Not thing]"

    def test_no_placeholders_no_args(self):
        assert interpolate("plain text") == "plain text"

    def test_other_braces_are_kept(self):
        assert interpolate("{name} {} {", 1) == "{name} 1 {"
        assert interpolate("100% {}", "done") == "100% done"

    def test_values_use_str(self):
        assert interpolate("{} {}", None, [1, 2]) == "None [1, 2]"

    def test_broken_str_does_not_raise(self):
        class Broken:
            def __str__(self):
                raise RuntimeError("nope")

        assert "Broken object at" in interpolate("{}", Broken())


class TestPrintf:
    def test_positional(self):
        assert printf("%s=%d", "answer", 42) == "answer=42"

    def test_no_args_returns_template(self):
        assert printf("100%") == "100%"

    def test_escaped_percent_without_args(self):
        assert printf("100%% done") == "100% done"
        assert printf("plain") == "plain"

    def test_bad_template_does_not_raise(self):
        message = printf("%d items", "many")
        assert message.startswith("%d items")
        assert "many" in message

    def test_too_few_args_does_not_raise(self):
        assert printf("%s %s", "one").startswith("%s %s")


class TestTimestamp:
    def test_layout(self):
        ns = _local_ns(2024, 1, 2, 3, 4, 5, nanos=123_456_789)
        assert format_timestamp(ns) == "2024-01-02 03:04:05.1234"

    def test_fraction_is_zero_padded(self):
        ns = _local_ns(2024, 12, 31, 23, 59, 59, nanos=5_000_000)
        assert format_timestamp(ns) == "2024-12-31 23:59:59.0050"


def _save_log():
    return extract_trace()


def _public_method():
    return _save_log()


class TestExtractTrace:
    def test_points_at_caller(self):
        trace, line = _public_method(), sys._getframe().f_lineno
        assert trace.file == "test_formatting.py"
        assert trace.line == line
        assert trace.func_name.endswith("TestExtractTrace.test_points_at_caller")

    def test_too_deep_gives_empty_trace(self):
        assert extract_trace(10_000) == Trace()


class TestRenderLine:
    record = Record(
        time_ns=0,
        time_string="2024-01-02 03:04:05.0000",
        level=Level.WARNING,
        message="disk almost full",
        trace=Trace("worker.py", 17, "worker.run"),
    )

    def test_plain(self):
        assert render_line(self.record, Level.INFO) == (
            "2024-01-02 03:04:05.0000 [warning] - disk almost full\n"
        )

    def test_trace_threshold_decorates(self):
        assert render_line(self.record, Level.TRACE) == (
            "2024-01-02 03:04:05.0000 [warning] [worker.run] [worker.py:17] - disk almost full\n"
        )

    def test_record_level_does_not_decorate(self):
        record = Record(0, "2024-01-02 03:04:05.0000", Level.TRACE, "x", Trace("a.py", 1, "a.f"))
        assert "[a.py:1]" not in render_line(record, Level.DEBUG)
