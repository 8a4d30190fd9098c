"""
Uniform result type returned by the entity access layer
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class Result(Generic[T]):
    """Outcome of an operation: data, an error, or a plain "not found" """

    data: Optional[T] = None
    error: Optional[Exception] = None
    not_found: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: Optional[T] = None) -> "Result[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, error: Exception) -> "Result[T]":
        return cls(error=error)

    @classmethod
    def missing(cls) -> "Result[T]":
        return cls(not_found=True)
