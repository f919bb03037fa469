from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


# PUBLIC_INTERFACE
class ErrorKind(str, Enum):
    """Kinds of recoverable failures a store operation can report."""

    VALIDATION = "ValidationError"
    NOT_FOUND = "NotFound"
    ALREADY_COMPLETED = "AlreadyCompleted"
    INDEX_OUT_OF_BOUNDS = "IndexOutOfBounds"
    INVALID_RANGE = "InvalidRange"
    RANGE_TOO_LARGE = "RangeTooLarge"


@dataclass(frozen=True)
class TodoError:
    kind: ErrorKind
    message: str


class ResultError(Exception):
    """Raised by Err.unwrap() so callers outside the store can bail out."""

    def __init__(self, error: TodoError) -> None:
        super().__init__(error.message)
        self.error = error


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: TodoError

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self):
        raise ResultError(self.error)


Result = Union[Ok[T], Err]


def err(kind: ErrorKind, message: str) -> Err:
    """Shorthand for building an Err from a kind and message."""
    return Err(TodoError(kind, message))
