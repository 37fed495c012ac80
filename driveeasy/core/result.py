"""Result values returned by the domain services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from driveeasy.core.errors import AppError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: AppError


Result = Union[Ok[T], Err]


def unwrap(result: Result[T]) -> T:
    """Return the success value or raise the carried error."""
    if isinstance(result, Err):
        raise result.error
    return result.value
