"""Pydantic models for the helper JSON each sink kind accepts.

Unknown keys are ignored; known keys must carry the JSON type they are
documented with (no string-to-bool coercion).
"""

from typing import TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import HelperParseError

DEFAULT_HELPER = "{}"

_H = TypeVar("_H", bound="SinkHelper")


class SinkHelper(BaseModel):
    model_config = ConfigDict(extra="ignore", strict=True, frozen=True)


class ConsoleHelper(SinkHelper):
    """``{"writer": "stdout"}`` selects standard output; anything else standard error."""

    writer: str = "stderr"

    @property
    def use_stdout(self) -> bool:
        return self.writer == "stdout"


class FileHelper(SinkHelper):
    """File sink settings. Zero disables a size or line limit."""

    filename: str = "app.log"
    rotate: bool = True
    daily: bool = True
    maxlines: int = 0
    maxsize: int = 0


def parse_helper(model: type[_H], helper: str) -> _H:
    try:
        return model.model_validate_json(helper or DEFAULT_HELPER)
    except ValidationError as exc:
        raise HelperParseError(f"invalid {model.__name__} helper {helper!r}: {exc}") from exc
