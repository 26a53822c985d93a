"""Error types raised while resolving and parsing sheet schemas."""

from __future__ import annotations

import enum
from dataclasses import dataclass

__all__ = ["ErrorKind", "ErrorValue", "Error", "NotFoundError", "SchemaError"]


class ErrorKind(enum.Enum):
    """What sort of value an :class:`ErrorValue` describes."""

    VERSION = "version"
    SHEET = "sheet"
    OTHER = "other"


@dataclass(frozen=True)
class ErrorValue:
    """A value associated with an error, such as the name of a missing sheet."""

    kind: ErrorKind
    value: str

    def __str__(self) -> str:
        if self.kind is ErrorKind.VERSION:
            return f"version {self.value}"
        if self.kind is ErrorKind.SHEET:
            return f"sheet {self.value}"
        return self.value


class Error(Exception):
    """Base class for every error raised by this package."""


class NotFoundError(Error):
    """The requested value could not be found."""

    def __init__(self, value: ErrorValue) -> None:
        self.value = value
        super().__init__(f"The {value} could not be found.")


class SchemaError(Error):
    """A schema definition could not be turned into a schema."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Schema error: {message}.")