"""Tagged results returned by the table store."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    """The operation succeeded; value holds its payload."""

    value: T


@dataclass(frozen=True)
class NotFound:
    """No row matched the key."""

    key: str


@dataclass(frozen=True)
class StorageFailure:
    """The database could not complete the operation."""

    operation: str
    cause: Exception
