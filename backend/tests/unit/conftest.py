"""
Fixtures for unit tests that run without a database.
"""

from contextlib import asynccontextmanager

import pytest

from core.exceptions import StoreError
from core.interfaces.repositories import ContentStore


class RecordingStore(ContentStore):
    """
    In-memory ContentStore.

    ``insert_many`` batches are kept in ``batches``; batch numbers listed in
    ``fail_batches`` raise StoreError. ``rows`` backs ``get`` and ``select``
    per collection.
    """

    def __init__(self, fail_batches=(), rows=None):
        self.batches: list[list] = []
        self.fail_batches = set(fail_batches)
        self.rows: dict = rows or {}
        self.fail_selects = False

    async def insert_many(self, collection, records):
        self.batches.append(list(records))
        if len(self.batches) in self.fail_batches:
            raise StoreError("Database operation failed", collection=collection.value)
        return len(records)

    async def select(self, collection, filters=(), order_by=None, descending=False, limit=None, offset=0):
        if self.fail_selects:
            raise StoreError("Database operation failed", collection=collection.value)
        rows = list(self.rows.get(collection, []))
        for f in filters:
            rows = [r for r in rows if getattr(r, f.field) == f.value]
        return rows

    async def count(self, collection, filters=()):
        return len(await self.select(collection, filters))

    async def get(self, collection, record_id):
        for row in self.rows.get(collection, []):
            if row.id == record_id:
                return row
        return None

    async def insert_one(self, collection, record):
        raise NotImplementedError

    async def update_by_id(self, collection, record_id, values):
        return None

    async def delete_by_id(self, collection, record_id):
        return 0

    async def delete_by_ids(self, collection, record_ids):
        return 0

    async def delete_where(self, collection, filters):
        return 0

    @asynccontextmanager
    async def transaction(self):
        yield


@pytest.fixture
def make_store():
    """Factory for RecordingStore instances."""
    return RecordingStore
