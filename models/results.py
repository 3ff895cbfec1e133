"""Tagged success/failure values returned by the service layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")
E = TypeVar("E")


class ErrorKind(str, Enum):
    """Categories of failure an assessment operation can report."""

    validation = "validation"
    not_found = "not_found"
    store_write = "store_write"


@dataclass(frozen=True)
class ServiceError:
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Result(Generic[T, E]):
    """Either a success value or an error, never both.

    Build instances with :meth:`ok` and :meth:`err`. Reading the arm that is
    not populated raises ``ValueError``.
    """

    _value: Optional[Any] = None
    _error: Optional[Any] = None
    _is_ok: bool = True

    @classmethod
    def ok(cls, value: T) -> "Result[T, E]":
        return cls(_value=value, _is_ok=True)

    @classmethod
    def err(cls, error: E) -> "Result[T, E]":
        return cls(_error=error, _is_ok=False)

    @property
    def is_ok(self) -> bool:
        return self._is_ok

    @property
    def is_err(self) -> bool:
        return not self._is_ok

    @property
    def value(self) -> T:
        if not self._is_ok:
            raise ValueError(f"Called value on Result.err: {self._error}")
        return self._value

    @property
    def error(self) -> E:
        if self._is_ok:
            raise ValueError("Called error on Result.ok")
        return self._error


def validation_error(message: str) -> Result[Any, ServiceError]:
    return Result.err(ServiceError(kind=ErrorKind.validation, message=message))


def not_found(assessment_id: str) -> Result[Any, ServiceError]:
    return Result.err(
        ServiceError(
            kind=ErrorKind.not_found,
            message=f"Energy assessment with id {assessment_id!r} not found.",
        )
    )
