"""
Integration tests for portfolio projects.
"""

import pytest
from uuid import uuid4

from fastapi import status
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.models import Category, Project


@pytest.fixture
async def project_id(db_session: AsyncSession, category: Category) -> str:
    project = Project(
        id=str(uuid4()),
        category_id=category.id,
        title="Realtime Chat",
        description="WebSockets end to end",
        type="Full Stack",
        difficulty="Advanced",
        github_url="https://github.com/example/chat",
        key_features=["rooms", "presence"],
        technologies=["FastAPI", "Redis"],
        tier="Builder",
    )
    db_session.add(project)
    await db_session.commit()
    return project.id


class TestProjects:
    @pytest.mark.asyncio
    async def test_locked_project_keeps_listing_fields(
        self, async_client: AsyncClient, auth_headers: dict, project_id: str
    ):
        response = await async_client.get(f"/api/v1/projects/{project_id}", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["technologies"] == ["FastAPI", "Redis"]
        assert data["description"] is None
        assert data["github_url"] is None
        assert data["key_features"] is None
        assert data["access"]["state"] == "upgrade_required"

    @pytest.mark.asyncio
    async def test_builder_sees_project(
        self, async_client: AsyncClient, builder_headers: dict, project_id: str
    ):
        response = await async_client.get(f"/api/v1/projects/{project_id}", headers=builder_headers)

        assert response.json()["key_features"] == ["rooms", "presence"]

    @pytest.mark.asyncio
    async def test_filters(self, async_client: AsyncClient, project_id: str):
        match = await async_client.get("/api/v1/projects", params={"type": "Full Stack"})
        miss = await async_client.get("/api/v1/projects", params={"difficulty": "Beginner"})

        assert match.json()["total"] == 1
        assert miss.json()["total"] == 0

    @pytest.mark.asyncio
    async def test_admin_crud(
        self, async_client: AsyncClient, admin_token: dict, category: Category
    ):
        created = await async_client.post(
            "/api/v1/projects",
            headers=admin_token,
            json={"category_id": category.id, "title": "CLI Todo", "type": "Backend"},
        )
        assert created.status_code == status.HTTP_201_CREATED
        new_id = created.json()["id"]
        assert created.json()["tier"] == "Explorer"

        updated = await async_client.put(
            f"/api/v1/projects/{new_id}", headers=admin_token, json={"tier": "Innovator"}
        )
        assert updated.json()["tier"] == "Innovator"

        deleted = await async_client.delete(f"/api/v1/projects/{new_id}", headers=admin_token)
        assert deleted.status_code == status.HTTP_200_OK

        missing = await async_client.get(f"/api/v1/projects/{new_id}")
        assert missing.status_code == status.HTTP_404_NOT_FOUND
