"""
Portfolio project API routes.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.content import Collection
from core.domain.user import Principal
from core.exceptions import StoreError
from core.interfaces.repositories import ContentStore, Filter
from infrastructure.database.connection import get_db
from infrastructure.database.models.admin import AuditAction, AuditTargetType
from infrastructure.database.models.user import User
from api.dependencies import get_principal, get_store
from api.deps_admin import get_current_admin_user
from api.gating import render_item, render_page
from api.routes.admin_content import log_audit
from api.schemas.content import (
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)
from api.utils import store_failure

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["Projects"])


async def get_project_or_404(store: ContentStore, project_id: str):
    try:
        project = await store.get(Collection.PROJECTS, project_id)
    except StoreError as e:
        raise store_failure("load project", e)
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found",
        )
    return project


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    principal: Annotated[Principal, Depends(get_principal)],
    store: ContentStore = Depends(get_store),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    category_id: Optional[str] = Query(None),
    type: Optional[str] = Query(None, max_length=100),
    difficulty: Optional[str] = Query(None, max_length=50),
):
    filters = []
    if category_id:
        filters.append(Filter.eq("category_id", category_id))
    if type:
        filters.append(Filter.eq("type", type))
    if difficulty:
        filters.append(Filter.eq("difficulty", difficulty))

    try:
        total = await store.count(Collection.PROJECTS, filters)
        rows = await store.select(
            Collection.PROJECTS,
            filters=filters,
            order_by="created_at",
            descending=True,
            limit=page_size,
            offset=(page - 1) * page_size,
        )
    except StoreError as e:
        raise store_failure("load projects", e)
    return render_page(rows, ProjectResponse, principal, total, page, page_size)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    principal: Annotated[Principal, Depends(get_principal)],
    store: ContentStore = Depends(get_store),
):
    project = await get_project_or_404(store, project_id)
    return render_item(project, ProjectResponse, principal)


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreate,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    principal: Annotated[Principal, Depends(get_principal)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    record = {**body.model_dump(exclude_none=True), "created_by": admin_user.id}
    try:
        project = await store.insert_one(Collection.PROJECTS, record)
    except StoreError as e:
        raise store_failure("create project", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.CONTENT_CREATED,
        target_type=AuditTargetType.PROJECT,
        target_id=project.id,
    )
    return render_item(project, ProjectResponse, principal)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    body: ProjectUpdate,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    principal: Annotated[Principal, Depends(get_principal)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    await get_project_or_404(store, project_id)
    changes = body.model_dump(exclude_unset=True)
    try:
        project = await store.update_by_id(Collection.PROJECTS, project_id, changes)
    except StoreError as e:
        raise store_failure("update project", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.CONTENT_UPDATED,
        target_type=AuditTargetType.PROJECT,
        target_id=project_id,
        details={"fields": sorted(changes)},
    )
    return render_item(project, ProjectResponse, principal)


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
) -> dict:
    project = await get_project_or_404(store, project_id)
    project_title = project.title

    try:
        await store.delete_by_id(Collection.PROJECTS, project_id)
    except StoreError as e:
        raise store_failure("delete project", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.CONTENT_DELETED,
        target_type=AuditTargetType.PROJECT,
        target_id=project_id,
        details={"title": project_title},
    )
    logger.info(f"Admin {admin_user.email} deleted project {project_id} ({project_title})")

    return {"message": "Project deleted successfully"}
