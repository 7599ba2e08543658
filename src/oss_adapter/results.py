"""Success/failure results returned by adapter operations.

Adapter operations never raise backend errors. They return either a
``Success`` carrying the payload or a ``Failure`` naming the operation and
path that failed. Backend error detail is logged, never returned.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """A completed operation and its payload."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap_or(self, default):
        return self.value


@dataclass(frozen=True)
class Failure:
    """A failed backend operation."""

    operation: str
    path: str = ""

    @property
    def ok(self) -> bool:
        return False

    def unwrap_or(self, default):
        return default

    def __str__(self) -> str:
        return f"{self.operation} failed for '{self.path}'"


Result = Union[Success[T], Failure]
