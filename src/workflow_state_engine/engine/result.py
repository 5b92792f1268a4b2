from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from .errors import EngineError, ErrorKind

T = TypeVar("T")


class ResultError(Exception):
    """Raised by :meth:`Err.unwrap`."""

    def __init__(self, error: EngineError) -> None:
        super().__init__(error.message)
        self.error = error


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T
    message: str = ""

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err:
    error: EngineError

    @property
    def ok(self) -> bool:
        return False

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    @property
    def message(self) -> str:
        return self.error.message

    def unwrap(self) -> object:
        raise ResultError(self.error)


Result = Ok[T] | Err


def fail(kind: ErrorKind, message: str, **details: object) -> Err:
    return Err(EngineError(kind=kind, message=message, details=details))
