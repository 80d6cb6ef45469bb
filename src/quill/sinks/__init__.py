from typing import Callable, TypeAlias

from quill.errors import UnsupportedAdapter
from quill.types import Sink

from .console import ConsoleSink
from .file import FileSink

CONSOLE = "console"
FILE = "file"

SinkFactory: TypeAlias = Callable[[str, str], Sink]

SINK_FACTORIES: dict[str, SinkFactory] = {
    CONSOLE: ConsoleSink.from_helper,
    FILE: FileSink.from_helper,
}


def create_sink(kind: str, level_name: str, helper: str) -> Sink:
    """Build a sink of the given kind from its level name and helper JSON."""
    try:
        factory = SINK_FACTORIES[kind]
    except KeyError:
        raise UnsupportedAdapter(f"not support adapter: {kind!r}") from None
    return factory(level_name, helper)


__all__ = ["CONSOLE", "FILE", "ConsoleSink", "FileSink", "create_sink"]
