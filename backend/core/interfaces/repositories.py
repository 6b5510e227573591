"""Storage interface for the content catalogue."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Sequence

from ..domain.content import Collection


class FilterOp(str, Enum):
    EQ = "eq"
    ILIKE = "ilike"  # case-insensitive substring
    IN = "in"


@dataclass(frozen=True)
class Filter:
    """A single row predicate on a collection field."""

    field: str
    op: FilterOp
    value: Any

    @classmethod
    def eq(cls, field: str, value: Any) -> "Filter":
        return cls(field, FilterOp.EQ, value)

    @classmethod
    def ilike(cls, field: str, value: str) -> "Filter":
        return cls(field, FilterOp.ILIKE, value)

    @classmethod
    def in_(cls, field: str, values: Iterable[Any]) -> "Filter":
        return cls(field, FilterOp.IN, tuple(values))


class ContentStore(ABC):
    """Abstract async store over typed record collections.

    Every mutating call is its own transaction unless it runs inside
    ``transaction()``, in which case all calls commit or roll back together.
    Failures raise ``core.exceptions.StoreError``.
    """

    @abstractmethod
    async def select(
        self,
        collection: Collection,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Any]:
        """Rows matching all filters (AND)."""
        ...

    @abstractmethod
    async def count(self, collection: Collection, filters: Sequence[Filter] = ()) -> int:
        ...

    @abstractmethod
    async def get(self, collection: Collection, record_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    async def insert_one(self, collection: Collection, record: dict) -> Any:
        ...

    @abstractmethod
    async def insert_many(self, collection: Collection, records: Sequence[dict]) -> int:
        """Insert all records atomically; returns the number inserted."""
        ...

    @abstractmethod
    async def update_by_id(
        self, collection: Collection, record_id: str, values: dict
    ) -> Optional[Any]:
        """Updated row, or None if no row has that id."""
        ...

    @abstractmethod
    async def delete_by_id(self, collection: Collection, record_id: str) -> int:
        ...

    @abstractmethod
    async def delete_by_ids(self, collection: Collection, record_ids: Sequence[str]) -> int:
        """Delete a set of rows in one statement; all or nothing."""
        ...

    @abstractmethod
    async def delete_where(self, collection: Collection, filters: Sequence[Filter]) -> int:
        ...

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Group several calls into one commit."""
        ...
