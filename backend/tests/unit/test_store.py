"""
Tests for the SQLAlchemy content store against in-memory SQLite.
"""

import pytest
from uuid import uuid4

from sqlalchemy import func, select

from core.domain.content import Collection
from core.exceptions import StoreError
from core.interfaces.repositories import Filter
from infrastructure.database.models import CodingQuestion, Question, User
from infrastructure.database.store import SqlAlchemyContentStore, escape_like


def question(subcategory_id, title="Q", **extra) -> dict:
    return {
        "subcategory_id": subcategory_id,
        "title": title,
        "content": "C",
        "answer": "A",
        "type": "MC",
        "level": "Junior",
        **extra,
    }


async def count_rows(db_session, model) -> int:
    result = await db_session.execute(select(func.count()).select_from(model))
    return result.scalar()


class TestEscapeLike:
    def test_wildcards_are_escaped(self):
        assert escape_like("100%_done\\") == "100\\%\\_done\\\\"


class TestSelect:
    @pytest.mark.asyncio
    async def test_filters_and_ilike(self, db_session, subcategory):
        store = SqlAlchemyContentStore(db_session)
        await store.insert_many(
            Collection.QUESTIONS,
            [
                question(subcategory.id, "HashMap internals", level="Senior"),
                question(subcategory.id, "ArrayList vs LinkedList"),
                question(subcategory.id, "100% coverage?"),
            ],
        )

        rows = await store.select(Collection.QUESTIONS, filters=[Filter.ilike("title", "hashmap")])
        assert [r.title for r in rows] == ["HashMap internals"]

        assert await store.count(Collection.QUESTIONS, [Filter.eq("level", "Junior")]) == 2
        assert await store.count(Collection.QUESTIONS, [Filter.ilike("title", "%")]) == 1

    @pytest.mark.asyncio
    async def test_unknown_field_is_a_store_error(self, db_session):
        store = SqlAlchemyContentStore(db_session)
        with pytest.raises(StoreError) as exc_info:
            await store.select(Collection.QUESTIONS, filters=[Filter.eq("nope", 1)])
        assert "nope" in exc_info.value.message


class TestInsert:
    @pytest.mark.asyncio
    async def test_defaults_are_applied(self, db_session, subcategory):
        store = SqlAlchemyContentStore(db_session)

        row = await store.insert_one(Collection.QUESTIONS, question(subcategory.id))

        assert row.id
        assert row.tier == "Explorer"
        assert row.created_at is not None

    @pytest.mark.asyncio
    async def test_insert_many_is_all_or_nothing(self, db_session):
        store = SqlAlchemyContentStore(db_session)
        records = [
            {"title": "Two Sum", "slug": "two-sum", "description": "D"},
            {"title": "Dup", "slug": "two-sum", "description": "D"},
        ]

        with pytest.raises(StoreError):
            await store.insert_many(Collection.CODING_QUESTIONS, records)

        assert await count_rows(db_session, CodingQuestion) == 0

    @pytest.mark.asyncio
    async def test_unknown_key_is_rejected(self, db_session):
        store = SqlAlchemyContentStore(db_session)

        with pytest.raises(StoreError) as exc_info:
            await store.insert_many(
                Collection.CODING_QUESTIONS,
                [{"title": "A", "slug": "a", "description": "D", "rating": 5}],
            )

        assert exc_info.value.message.startswith("Invalid field")
        assert exc_info.value.collection == "coding_questions"


class TestUpdateAndDelete:
    @pytest.mark.asyncio
    async def test_update_missing_row(self, db_session):
        store = SqlAlchemyContentStore(db_session)
        assert await store.update_by_id(Collection.QUESTIONS, str(uuid4()), {"title": "X"}) is None

    @pytest.mark.asyncio
    async def test_delete_by_ids_counts_existing_rows(self, db_session, subcategory):
        store = SqlAlchemyContentStore(db_session)
        rows = [
            await store.insert_one(Collection.QUESTIONS, question(subcategory.id, f"Q{i}"))
            for i in range(3)
        ]

        deleted = await store.delete_by_ids(
            Collection.QUESTIONS, [rows[0].id, rows[1].id, str(uuid4())]
        )

        assert deleted == 2
        assert await count_rows(db_session, Question) == 1

    @pytest.mark.asyncio
    async def test_delete_where_requires_a_filter(self, db_session):
        store = SqlAlchemyContentStore(db_session)
        with pytest.raises(StoreError):
            await store.delete_where(Collection.QUESTIONS, [])


class TestTransaction:
    @pytest.mark.asyncio
    async def test_commits_as_a_whole(self, db_session, subcategory):
        store = SqlAlchemyContentStore(db_session)

        async with store.transaction():
            await store.insert_one(Collection.QUESTIONS, question(subcategory.id, "Q1"))
            await store.insert_one(Collection.QUESTIONS, question(subcategory.id, "Q2"))

        assert await count_rows(db_session, Question) == 2

    @pytest.mark.asyncio
    async def test_error_rolls_everything_back(self, db_session, subcategory):
        store = SqlAlchemyContentStore(db_session)
        subcategory_id = subcategory.id

        with pytest.raises(RuntimeError):
            async with store.transaction():
                await store.insert_one(Collection.QUESTIONS, question(subcategory_id, "Q1"))
                raise RuntimeError("interrupted")

        assert await count_rows(db_session, Question) == 0


class TestUserModel:
    def test_subscriptions_are_read_through_the_store_only(self):
        relationship = User.subscriptions.property

        assert relationship.lazy == "raise"
        assert relationship.passive_deletes is True
