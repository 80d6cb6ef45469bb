from enum import IntEnum

from .errors import UnsupportedLevel


class Level(IntEnum):
    """Record levels. Only a sink configured at TRACE decorates lines with the call site."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4


# Right-aligned so the level column lines up across records
_LEVEL_NAMES: dict[Level, str] = {
    Level.TRACE: "  trace",
    Level.DEBUG: "  debug",
    Level.INFO: "   info",
    Level.WARNING: "warning",
    Level.ERROR: "  error",
}


def parse_level(name: str) -> Level:
    """Resolve a case-insensitive level name, raising UnsupportedLevel for anything unknown."""
    try:
        return Level[name.upper()]
    except (KeyError, AttributeError):
        raise UnsupportedLevel(f"not support log record level: {name!r}") from None


def level_name(level: int) -> str:
    return _LEVEL_NAMES[Level(level)]
