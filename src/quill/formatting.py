import sys
import time
from pathlib import PurePath

from .levels import Level, level_name
from .types import Record, Trace

PLACEHOLDER = "{}"
MISSING_ARG = "[Not thing]"


def format_timestamp(time_ns: int) -> str:
    """Format as local "YYYY-MM-DD HH:MM:SS.TTTT", TTTT being tenths of a millisecond."""
    seconds, nanos = divmod(time_ns, 1_000_000_000)
    return f"{time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(seconds))}.{nanos // 100_000:04d}"


def _stringify(value: object) -> str:
    try:
        return str(value)
    except Exception:
        return object.__repr__(value)


def interpolate(template: str, *args: object) -> str:
    """
    Substitute ``{}`` placeholders positionally.

    Surplus arguments are appended separated by spaces, surplus placeholders are
    filled with "[Not thing]". Any other braces in the template are left alone,
    so this never fails on a count or syntax mismatch.
    """
    values = [_stringify(arg) for arg in args]

    placeholders = template.count(PLACEHOLDER)
    if len(values) > placeholders:
        template += f" {PLACEHOLDER}" * (len(values) - placeholders)
    elif len(values) < placeholders:
        values.extend([MISSING_ARG] * (placeholders - len(values)))

    pieces = template.split(PLACEHOLDER)
    out = [pieces[0]]
    for value, piece in zip(values, pieces[1:]):
        out.append(value)
        out.append(piece)
    return "".join(out)


def printf(template: str, *args: object) -> str:
    """Apply %-style formatting; a broken template degrades to template plus args."""
    try:
        return template % args
    except (TypeError, ValueError, KeyError) as exc:
        if not args:
            return template
        return f"{template} {args!r} [{type(exc).__name__}: {exc}]"


def extract_trace(depth: int = 3) -> Trace:
    """
    Locate the user's call site.

    ``depth`` counts frames above this function: the record builder, the public
    log method, then the caller.
    """
    try:
        frame = sys._getframe(depth)
    except ValueError:
        return Trace()

    code = frame.f_code
    module = frame.f_globals.get("__name__", "")
    qualname = getattr(code, "co_qualname", code.co_name)
    func_name = f"{module.rpartition('.')[2]}.{qualname}" if module else qualname

    return Trace(
        file=PurePath(code.co_filename).name,
        line=frame.f_lineno or 0,
        func_name=func_name.rpartition("/")[2],
    )


def render_line(record: Record, threshold: int) -> str:
    """Render a record for a sink. The sink threshold, not the record level, decides on trace fields."""
    name = level_name(record.level)
    if threshold == Level.TRACE:
        trace = record.trace
        return (
            f"{record.time_string} [{name}] [{trace.func_name}] "
            f"[{trace.file}:{trace.line}] - {record.message}\n"
        )
    return f"{record.time_string} [{name}] - {record.message}\n"
