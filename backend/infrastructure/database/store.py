"""
SQLAlchemy implementation of the content store.

Wraps one ``AsyncSession``. Outside ``transaction()`` every mutating call
commits on its own; inside it, calls only flush and the block commits or
rolls back as a whole.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.content import Collection
from core.exceptions import StoreError
from core.interfaces.repositories import ContentStore, Filter, FilterOp

from .models import (
    Category,
    CodingCategory,
    CodingQuestion,
    Project,
    Question,
    Subcategory,
    SystemDesignProblem,
    User,
    UserSubscription,
)

logger = logging.getLogger(__name__)

COLLECTION_MODELS = {
    Collection.CATEGORIES: Category,
    Collection.SUBCATEGORIES: Subcategory,
    Collection.QUESTIONS: Question,
    Collection.CODING_QUESTIONS: CodingQuestion,
    Collection.CODING_CATEGORIES: CodingCategory,
    Collection.SYSTEM_DESIGN_PROBLEMS: SystemDesignProblem,
    Collection.PROJECTS: Project,
    Collection.PROFILES: User,
    Collection.SUBSCRIPTIONS: UserSubscription,
}


def escape_like(value: str) -> str:
    """Escape LIKE wildcards for safe use in SQL LIKE/ILIKE patterns."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _safe_reason(exc: Exception) -> str:
    if isinstance(exc, IntegrityError):
        return "Record conflicts with existing data or is missing a required field"
    if isinstance(exc, TypeError):
        # Raised by the ORM constructor for unknown keys
        return f"Invalid field: {exc}"
    return "Database operation failed"


class SqlAlchemyContentStore(ContentStore):
    """Content store backed by a SQLAlchemy async session."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._in_transaction = False

    @staticmethod
    def _model(collection: Collection) -> Any:
        return COLLECTION_MODELS[Collection(collection)]

    @staticmethod
    def _column(model: Any, field: str) -> Any:
        column = model.__table__.columns.get(field)
        if column is None:
            raise StoreError(f"Unknown field '{field}'", collection=model.__tablename__)
        return getattr(model, field)

    def _conditions(self, model: Any, filters: Sequence[Filter]) -> list:
        conditions = []
        for f in filters:
            column = self._column(model, f.field)
            if f.op == FilterOp.EQ:
                conditions.append(column.is_(None) if f.value is None else column == f.value)
            elif f.op == FilterOp.ILIKE:
                conditions.append(column.ilike(f"%{escape_like(f.value)}%", escape="\\"))
            elif f.op == FilterOp.IN:
                conditions.append(column.in_(list(f.value)))
            else:
                raise StoreError(f"Unsupported filter operator '{f.op}'")
        return conditions

    async def _finish(self) -> None:
        if self._in_transaction:
            await self.session.flush()
        else:
            await self.session.commit()

    async def _fail(self, exc: Exception, collection: Collection, action: str) -> StoreError:
        logger.error(
            f"Store {action} on {Collection(collection).value} failed: {exc}",
            extra={"collection": Collection(collection).value},
        )
        if not self._in_transaction:
            await self.session.rollback()
        return StoreError(_safe_reason(exc), collection=Collection(collection).value)

    async def select(
        self,
        collection: Collection,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Any]:
        model = self._model(collection)
        query = select(model).where(*self._conditions(model, filters))
        if order_by:
            column = self._column(model, order_by)
            query = query.order_by(column.desc() if descending else column.asc())
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            raise await self._fail(exc, collection, "select") from exc
        return list(result.scalars().all())

    async def count(self, collection: Collection, filters: Sequence[Filter] = ()) -> int:
        model = self._model(collection)
        query = select(func.count()).select_from(model).where(*self._conditions(model, filters))
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            raise await self._fail(exc, collection, "count") from exc
        return result.scalar() or 0

    async def get(self, collection: Collection, record_id: str) -> Optional[Any]:
        try:
            return await self.session.get(self._model(collection), record_id)
        except SQLAlchemyError as exc:
            raise await self._fail(exc, collection, "get") from exc

    async def insert_one(self, collection: Collection, record: dict) -> Any:
        model = self._model(collection)
        try:
            obj = model(**record)
            self.session.add(obj)
            await self._finish()
            await self.session.refresh(obj)
        except (SQLAlchemyError, TypeError) as exc:
            raise await self._fail(exc, collection, "insert") from exc
        return obj

    async def insert_many(self, collection: Collection, records: Sequence[dict]) -> int:
        if not records:
            return 0
        model = self._model(collection)
        try:
            objs = [model(**record) for record in records]
            self.session.add_all(objs)
            await self._finish()
        except (SQLAlchemyError, TypeError) as exc:
            raise await self._fail(exc, collection, "bulk insert") from exc
        return len(objs)

    async def update_by_id(
        self, collection: Collection, record_id: str, values: dict
    ) -> Optional[Any]:
        model = self._model(collection)
        for field in values:
            self._column(model, field)
        try:
            obj = await self.session.get(model, record_id)
            if obj is None:
                return None
            for field, value in values.items():
                setattr(obj, field, value)
            await self._finish()
            await self.session.refresh(obj)
        except SQLAlchemyError as exc:
            raise await self._fail(exc, collection, "update") from exc
        return obj

    async def delete_by_id(self, collection: Collection, record_id: str) -> int:
        return await self.delete_by_ids(collection, [record_id])

    async def delete_by_ids(self, collection: Collection, record_ids: Sequence[str]) -> int:
        if not record_ids:
            return 0
        model = self._model(collection)
        try:
            result = await self.session.execute(
                delete(model).where(model.id.in_(list(record_ids)))
            )
            await self._finish()
        except SQLAlchemyError as exc:
            raise await self._fail(exc, collection, "delete") from exc
        return result.rowcount or 0

    async def delete_where(self, collection: Collection, filters: Sequence[Filter]) -> int:
        if not filters:
            raise StoreError("Refusing to delete without a filter", collection=Collection(collection).value)
        model = self._model(collection)
        try:
            result = await self.session.execute(
                delete(model).where(*self._conditions(model, filters))
            )
            await self._finish()
        except SQLAlchemyError as exc:
            raise await self._fail(exc, collection, "delete") from exc
        return result.rowcount or 0

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._in_transaction:
            # Nested blocks join the outer transaction
            yield
            return

        self._in_transaction = True
        try:
            yield
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error(f"Store transaction failed: {exc}")
            raise StoreError(_safe_reason(exc)) from exc
        except Exception:
            await self.session.rollback()
            raise
        finally:
            self._in_transaction = False
