"""
Integration tests for coding categories and their headerless CSV import.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import StoreError
from infrastructure.database.models import AdminAuditLog, CodingCategory, CodingQuestion
from infrastructure.database.store import SqlAlchemyContentStore


@pytest.fixture
async def coding_category(db_session: AsyncSession) -> CodingCategory:
    category = CodingCategory(id=str(uuid4()), name="Arrays", description="Array problems")
    db_session.add(category)
    await db_session.commit()
    await db_session.refresh(category)
    return category


async def coding_question_count(db_session: AsyncSession) -> int:
    result = await db_session.execute(select(func.count()).select_from(CodingQuestion))
    return result.scalar()


class TestCodingCategoryReads:
    @pytest.mark.asyncio
    async def test_list_is_newest_first(self, async_client: AsyncClient, db_session: AsyncSession):
        now = datetime.now(timezone.utc)
        for offset, name in enumerate(("Graphs", "Strings", "Trees")):
            db_session.add(
                CodingCategory(
                    id=str(uuid4()), name=name, created_at=now + timedelta(minutes=offset)
                )
            )
        await db_session.commit()

        response = await async_client.get("/api/v1/coding-categories")

        assert response.status_code == status.HTTP_200_OK
        assert [c["name"] for c in response.json()] == ["Trees", "Strings", "Graphs"]

    @pytest.mark.asyncio
    async def test_get_unknown(self, async_client: AsyncClient):
        response = await async_client.get(f"/api/v1/coding-categories/{uuid4()}")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_list_store_failure(self, async_client: AsyncClient, monkeypatch):
        async def reject(self, collection, *args, **kwargs):
            raise StoreError("Database operation failed", collection=collection.value)

        monkeypatch.setattr(SqlAlchemyContentStore, "select", reject)

        response = await async_client.get("/api/v1/coding-categories")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"] == (
            "Failed to load coding categories: Database operation failed"
        )


class TestCodingCategoryCrud:
    @pytest.mark.asyncio
    async def test_create(self, async_client: AsyncClient, admin_token: dict):
        response = await async_client.post(
            "/api/v1/coding-categories",
            headers=admin_token,
            json={"name": "Dynamic Programming", "description": "Memoise it"},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["name"] == "Dynamic Programming"

    @pytest.mark.asyncio
    async def test_duplicate_name(
        self, async_client: AsyncClient, admin_token: dict, coding_category: CodingCategory
    ):
        response = await async_client.post(
            "/api/v1/coding-categories", headers=admin_token, json={"name": "Arrays"}
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_requires_admin(self, async_client: AsyncClient, auth_headers: dict):
        response = await async_client.post(
            "/api/v1/coding-categories", headers=auth_headers, json={"name": "Heaps"}
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_update(
        self, async_client: AsyncClient, admin_token: dict, coding_category: CodingCategory
    ):
        response = await async_client.put(
            f"/api/v1/coding-categories/{coding_category.id}",
            headers=admin_token,
            json={"description": "Contiguous memory"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["description"] == "Contiguous memory"
        assert response.json()["name"] == "Arrays"

    @pytest.mark.asyncio
    async def test_delete_keeps_questions(
        self,
        async_client: AsyncClient,
        db_session: AsyncSession,
        admin_token: dict,
        coding_category: CodingCategory,
    ):
        db_session.add(
            CodingQuestion(
                id=str(uuid4()),
                title="Two Sum",
                slug="two-sum",
                description="D",
                category="Arrays",
                tags=[],
            )
        )
        await db_session.commit()

        response = await async_client.delete(
            f"/api/v1/coding-categories/{coding_category.id}", headers=admin_token
        )

        assert response.status_code == status.HTTP_200_OK
        assert await coding_question_count(db_session) == 1
        audit = (await db_session.execute(select(AdminAuditLog))).scalar_one()
        assert audit.action == "coding_category_deleted"
        assert audit.details == {"name": "Arrays"}


class TestCodingCsvImport:
    @pytest.mark.asyncio
    async def test_import_into_category(
        self,
        async_client: AsyncClient,
        db_session: AsyncSession,
        admin_token: dict,
        admin_user,
        coding_category: CodingCategory,
    ):
        csv = "\n".join(
            [
                "Two Sum,Find a pair,Hash map,Easy,arrays;hashing,https://github.com/x",
                '"Three Sum",Find triples,Sort then scan,Medium,arrays,,https://youtu.be/y,Innovator',
            ]
        )

        response = await async_client.post(
            f"/api/v1/coding-categories/{coding_category.id}/import",
            headers=admin_token,
            json={"csv": csv, "default_tier": "Voyager"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success_count"] == 2
        assert data["message"] == "Imported 2 coding questions"

        rows = (
            await db_session.execute(select(CodingQuestion).order_by(CodingQuestion.slug))
        ).scalars().all()
        assert [(q.slug, q.tier, q.category) for q in rows] == [
            ("three-sum", "Innovator", "Arrays"),
            ("two-sum", "Builder", "Arrays"),
        ]
        assert rows[1].tags == ["arrays", "hashing"]
        assert rows[1].status == "Published"
        assert rows[1].created_by == admin_user.id

    @pytest.mark.asyncio
    async def test_malformed_line_imports_nothing(
        self,
        async_client: AsyncClient,
        db_session: AsyncSession,
        admin_token: dict,
        coding_category: CodingCategory,
    ):
        response = await async_client.post(
            f"/api/v1/coding-categories/{coding_category.id}/import",
            headers=admin_token,
            json={"csv": "Two Sum,d,e,Easy,,\nBroken line"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"].startswith("Invalid format at line 2.")
        assert await coding_question_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_unknown_default_tier(
        self, async_client: AsyncClient, admin_token: dict, coding_category: CodingCategory
    ):
        response = await async_client.post(
            f"/api/v1/coding-categories/{coding_category.id}/import",
            headers=admin_token,
            json={"csv": "Two Sum,d,e,Easy,,", "default_tier": "Gold"},
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_duplicate_slug_rolls_back_everything(
        self,
        async_client: AsyncClient,
        db_session: AsyncSession,
        admin_token: dict,
        coding_category: CodingCategory,
    ):
        response = await async_client.post(
            f"/api/v1/coding-categories/{coding_category.id}/import",
            headers=admin_token,
            json={"csv": "Two Sum,a,b,Easy,,\nTwo sum!,c,d,Easy,,"},
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"].startswith("Failed to import coding questions")
        assert await coding_question_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_unknown_category(self, async_client: AsyncClient, admin_token: dict):
        response = await async_client.post(
            f"/api/v1/coding-categories/{uuid4()}/import",
            headers=admin_token,
            json={"csv": "Two Sum,d,e,Easy,,"},
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
