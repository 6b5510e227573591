"""
Integration tests for system design problems.
"""

import json

import pytest
from uuid import uuid4

from fastapi import status
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.models import Category, SystemDesignProblem


@pytest.fixture
async def problems(db_session: AsyncSession, category: Category) -> None:
    for slug, tier in (("url-shortener", "Explorer"), ("chat-system", "Builder")):
        db_session.add(
            SystemDesignProblem(
                id=str(uuid4()),
                category_id=category.id,
                title=slug.replace("-", " ").title(),
                slug=slug,
                description=f"{slug} description",
                requirement_discussion="Functional and non-functional requirements",
                solution=f"{slug} solution",
                tier=tier,
            )
        )
    await db_session.commit()


class TestSystemDesignReads:
    @pytest.mark.asyncio
    async def test_filter_by_category(
        self, async_client: AsyncClient, category: Category, problems
    ):
        response = await async_client.get(
            "/api/v1/system-design", params={"category_id": category.id}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["total"] == 2

        other = await async_client.get(
            "/api/v1/system-design", params={"category_id": str(uuid4())}
        )
        assert other.json()["total"] == 0

    @pytest.mark.asyncio
    async def test_explorer_member_is_asked_to_upgrade(
        self, async_client: AsyncClient, auth_headers: dict, problems
    ):
        response = await async_client.get(
            "/api/v1/system-design/chat-system", headers=auth_headers
        )

        data = response.json()
        assert data["description"] == "chat-system description"
        assert data["solution"] is None
        assert data["requirement_discussion"] is None
        assert data["access"]["required_tier"] == "Builder"
        assert data["access"]["action"] == "upgrade"

    @pytest.mark.asyncio
    async def test_builder_sees_builder_problem(
        self, async_client: AsyncClient, builder_headers: dict, problems
    ):
        response = await async_client.get(
            "/api/v1/system-design/chat-system", headers=builder_headers
        )

        assert response.json()["solution"] == "chat-system solution"


class TestSystemDesignImport:
    @pytest.mark.asyncio
    async def test_import(
        self,
        async_client: AsyncClient,
        db_session: AsyncSession,
        admin_token: dict,
        category: Category,
    ):
        records = [
            {
                "category_id": category.id,
                "title": "Design Twitter",
                "slug": "design-twitter",
                "description": "Timeline and fan-out",
                "tags": ["feeds"],
                "difficulty": "Hard",
                "tier": "Innovator",
            }
        ]

        response = await async_client.post(
            "/api/v1/system-design/import",
            headers=admin_token,
            json={"json": json.dumps(records)},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Imported 1 system design problems"
        result = await db_session.execute(select(func.count()).select_from(SystemDesignProblem))
        assert result.scalar() == 1

    @pytest.mark.asyncio
    async def test_record_missing_required_field_fails_whole_import(
        self, async_client: AsyncClient, db_session: AsyncSession, admin_token: dict
    ):
        records = [
            {"title": "Design Uber", "slug": "design-uber", "description": "Matching"},
            {"title": "No description", "slug": "no-description"},
        ]

        response = await async_client.post(
            "/api/v1/system-design/import",
            headers=admin_token,
            json={"json": json.dumps(records)},
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        result = await db_session.execute(select(func.count()).select_from(SystemDesignProblem))
        assert result.scalar() == 0
