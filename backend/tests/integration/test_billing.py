"""
Integration tests for plans and the simulated upgrade flow.
"""

import pytest
from uuid import uuid4

from fastapi import status
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.models import Question, Subcategory, User, UserSubscription


@pytest.fixture
async def innovator_question(db_session: AsyncSession, subcategory: Subcategory) -> str:
    question = Question(
        id=str(uuid4()),
        subcategory_id=subcategory.id,
        title="Design a rate limiter",
        content="C",
        answer="Token bucket",
        type="Design",
        level="Senior",
        tier="Innovator",
    )
    db_session.add(question)
    await db_session.commit()
    return question.id


class TestPlans:
    @pytest.mark.asyncio
    async def test_plans_lowest_first(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/billing/plans")

        assert response.status_code == status.HTTP_200_OK
        plans = response.json()["plans"]
        assert [p["tier"] for p in plans] == ["Explorer", "Builder", "Innovator"]
        assert plans[0]["price_monthly"] == 0
        assert all(p["currency"] == "INR" for p in plans)


class TestSubscription:
    @pytest.mark.asyncio
    async def test_no_subscription(self, async_client: AsyncClient, auth_headers: dict):
        response = await async_client.get("/api/v1/billing/subscription", headers=auth_headers)

        data = response.json()
        assert data["status"] == "none"
        assert data["tier"] is None
        assert data["effective_tier"] == "Explorer"

    @pytest.mark.asyncio
    async def test_active_subscription(self, async_client: AsyncClient, builder_headers: dict):
        response = await async_client.get("/api/v1/billing/subscription", headers=builder_headers)

        data = response.json()
        assert data["status"] == "active"
        assert data["tier"] == "Builder"

    @pytest.mark.asyncio
    async def test_requires_sign_in(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/billing/subscription")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestUpgrade:
    @pytest.mark.asyncio
    async def test_upgrade_unlocks_content_immediately(
        self,
        async_client: AsyncClient,
        builder_headers: dict,
        innovator_question: str,
    ):
        before = await async_client.get(
            f"/api/v1/questions/{innovator_question}", headers=builder_headers
        )
        assert before.json()["access"]["state"] == "upgrade_required"

        upgrade = await async_client.post(
            "/api/v1/billing/upgrade",
            headers=builder_headers,
            json={"tier": "Innovator", "billing_interval": "yearly"},
        )
        assert upgrade.status_code == status.HTTP_200_OK
        assert upgrade.json()["tier"] == "Innovator"
        assert upgrade.json()["expires_at"] is not None

        after = await async_client.get(
            f"/api/v1/questions/{innovator_question}", headers=builder_headers
        )
        assert after.json()["access"]["state"] == "visible"
        assert after.json()["answer"] == "Token bucket"

    @pytest.mark.asyncio
    async def test_previous_subscription_is_cancelled(
        self,
        async_client: AsyncClient,
        db_session: AsyncSession,
        builder_user: User,
        builder_headers: dict,
    ):
        user_id = builder_user.id

        await async_client.post(
            "/api/v1/billing/upgrade", headers=builder_headers, json={"tier": "Innovator"}
        )

        result = await db_session.execute(
            select(UserSubscription).where(UserSubscription.user_id == user_id)
        )
        statuses = sorted((s.tier, s.status) for s in result.scalars())
        assert statuses == [("Builder", "cancelled"), ("Innovator", "active")]

    @pytest.mark.asyncio
    async def test_downgrade_to_explorer_never_expires(
        self, async_client: AsyncClient, builder_headers: dict
    ):
        response = await async_client.post(
            "/api/v1/billing/upgrade", headers=builder_headers, json={"tier": "Explorer"}
        )

        data = response.json()
        assert data["tier"] == "Explorer"
        assert data["expires_at"] is None

    @pytest.mark.asyncio
    async def test_voyager_alias(self, async_client: AsyncClient, auth_headers: dict):
        response = await async_client.post(
            "/api/v1/billing/upgrade", headers=auth_headers, json={"tier": "Voyager"}
        )

        assert response.json()["tier"] == "Builder"

    @pytest.mark.asyncio
    async def test_unknown_tier(self, async_client: AsyncClient, auth_headers: dict):
        response = await async_client.post(
            "/api/v1/billing/upgrade", headers=auth_headers, json={"tier": "Platinum"}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_other_users_are_unaffected(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
        builder_headers: dict,
        innovator_question: str,
    ):
        await async_client.post(
            "/api/v1/billing/upgrade", headers=builder_headers, json={"tier": "Innovator"}
        )

        response = await async_client.get(
            f"/api/v1/questions/{innovator_question}", headers=auth_headers
        )

        assert response.json()["access"]["state"] == "upgrade_required"
