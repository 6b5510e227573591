"""
Integration tests for application wiring: health, middleware headers and the
unknown-tier error handler.
"""

import pytest
from uuid import uuid4

from fastapi import status
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.config.settings import settings
from infrastructure.database.models import Question, Subcategory


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_health_db(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/health/db")

        assert response.json()["database"] == "connected"


class TestMiddleware:
    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/health")

        assert response.headers["X-Request-ID"]
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Response-Time"].endswith("ms")

    @pytest.mark.asyncio
    async def test_valid_request_id_is_echoed(self, async_client: AsyncClient):
        request_id = str(uuid4())

        response = await async_client.get("/api/v1/health", headers={"X-Request-ID": request_id})

        assert response.headers["X-Request-ID"] == request_id

    @pytest.mark.asyncio
    async def test_invalid_request_id_is_replaced(self, async_client: AsyncClient):
        response = await async_client.get(
            "/api/v1/health", headers={"X-Request-ID": "not-a-uuid"}
        )

        assert response.headers["X-Request-ID"] != "not-a-uuid"


class TestUnknownTier:
    @pytest.fixture
    async def platinum_question(self, db_session: AsyncSession, subcategory: Subcategory) -> str:
        question = Question(
            id=str(uuid4()),
            subcategory_id=subcategory.id,
            title="Mistyped tier",
            content="C",
            answer="A",
            type="MC",
            level="Junior",
            tier="Platinum",
        )
        db_session.add(question)
        await db_session.commit()
        return question.id

    @pytest.mark.asyncio
    async def test_lenient_mode_treats_it_as_lowest_tier(
        self, async_client: AsyncClient, auth_headers: dict, platinum_question: str
    ):
        response = await async_client.get(
            f"/api/v1/questions/{platinum_question}", headers=auth_headers
        )

        data = response.json()
        assert data["tier"] == "Platinum"
        assert data["access"]["state"] == "visible"
        assert data["access"]["required_tier"] == "Explorer"

    @pytest.mark.asyncio
    async def test_strict_mode_fails_the_request(
        self, async_client: AsyncClient, platinum_question: str, monkeypatch
    ):
        monkeypatch.setattr(settings, "strict_tier_names", True)

        response = await async_client.get(f"/api/v1/questions/{platinum_question}")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"] == "Content tier configuration error"
