"""
System design problem API routes.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.content import Collection, slugify
from core.domain.user import Principal
from core.exceptions import BulkImportError, StoreError
from core.interfaces.repositories import ContentStore, Filter
from infrastructure.database.connection import get_db
from infrastructure.database.models.admin import AuditAction, AuditTargetType
from infrastructure.database.models.user import User
from services.bulk_import import import_json_records
from api.dependencies import get_principal, get_store
from api.deps_admin import get_current_admin_user
from api.gating import render_item, render_page
from api.middleware.rate_limit import get_rate_limit, limiter
from api.routes.admin_content import log_audit
from api.schemas.content import (
    SystemDesignCreate,
    SystemDesignListResponse,
    SystemDesignResponse,
    SystemDesignUpdate,
)
from api.schemas.imports import ImportResponse, JsonImportRequest
from api.utils import check_payload_size, store_failure

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/system-design", tags=["System Design"])


async def _ensure_slug_free(store: ContentStore, slug: str, exclude_id: Optional[str] = None) -> None:
    try:
        clash = await store.select(
            Collection.SYSTEM_DESIGN_PROBLEMS, filters=[Filter.eq("slug", slug)]
        )
    except StoreError as e:
        raise store_failure("check slug", e)
    if any(row.id != exclude_id for row in clash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"A system design problem with slug '{slug}' already exists",
        )


async def _get_by_id_or_404(store: ContentStore, problem_id: str):
    try:
        problem = await store.get(Collection.SYSTEM_DESIGN_PROBLEMS, problem_id)
    except StoreError as e:
        raise store_failure("load system design problem", e)
    if not problem:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="System design problem not found",
        )
    return problem


@router.get("", response_model=SystemDesignListResponse)
async def list_system_design_problems(
    principal: Annotated[Principal, Depends(get_principal)],
    store: ContentStore = Depends(get_store),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    category_id: Optional[str] = Query(None),
    difficulty: Optional[str] = Query(None, max_length=50),
    search: Optional[str] = Query(None, max_length=200),
):
    """Published problems, newest first."""
    filters = [Filter.eq("status", "Published")]
    if category_id:
        filters.append(Filter.eq("category_id", category_id))
    if difficulty:
        filters.append(Filter.eq("difficulty", difficulty))
    if search:
        filters.append(Filter.ilike("title", search))

    try:
        total = await store.count(Collection.SYSTEM_DESIGN_PROBLEMS, filters)
        rows = await store.select(
            Collection.SYSTEM_DESIGN_PROBLEMS,
            filters=filters,
            order_by="created_at",
            descending=True,
            limit=page_size,
            offset=(page - 1) * page_size,
        )
    except StoreError as e:
        raise store_failure("load system design problems", e)
    return render_page(rows, SystemDesignResponse, principal, total, page, page_size)


@router.get("/{slug}", response_model=SystemDesignResponse)
async def get_system_design_problem(
    slug: str,
    principal: Annotated[Principal, Depends(get_principal)],
    store: ContentStore = Depends(get_store),
):
    try:
        rows = await store.select(
            Collection.SYSTEM_DESIGN_PROBLEMS, filters=[Filter.eq("slug", slug)], limit=1
        )
    except StoreError as e:
        raise store_failure("load system design problem", e)
    if not rows:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="System design problem not found",
        )
    return render_item(rows[0], SystemDesignResponse, principal)


@router.post("", response_model=SystemDesignResponse, status_code=status.HTTP_201_CREATED)
async def create_system_design_problem(
    body: SystemDesignCreate,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    principal: Annotated[Principal, Depends(get_principal)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    record = body.model_dump(exclude_none=True)
    record["slug"] = body.slug or slugify(body.title)
    await _ensure_slug_free(store, record["slug"])

    try:
        problem = await store.insert_one(Collection.SYSTEM_DESIGN_PROBLEMS, record)
    except StoreError as e:
        raise store_failure("create system design problem", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.CONTENT_CREATED,
        target_type=AuditTargetType.SYSTEM_DESIGN_PROBLEM,
        target_id=problem.id,
    )
    return render_item(problem, SystemDesignResponse, principal)


@router.put("/{problem_id}", response_model=SystemDesignResponse)
async def update_system_design_problem(
    problem_id: str,
    body: SystemDesignUpdate,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    principal: Annotated[Principal, Depends(get_principal)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    await _get_by_id_or_404(store, problem_id)
    changes = body.model_dump(exclude_unset=True)
    if changes.get("slug"):
        await _ensure_slug_free(store, changes["slug"], exclude_id=problem_id)

    try:
        problem = await store.update_by_id(Collection.SYSTEM_DESIGN_PROBLEMS, problem_id, changes)
    except StoreError as e:
        raise store_failure("update system design problem", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.CONTENT_UPDATED,
        target_type=AuditTargetType.SYSTEM_DESIGN_PROBLEM,
        target_id=problem_id,
        details={"fields": sorted(changes)},
    )
    return render_item(problem, SystemDesignResponse, principal)


@router.delete("/{problem_id}")
async def delete_system_design_problem(
    problem_id: str,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
) -> dict:
    problem = await _get_by_id_or_404(store, problem_id)
    slug = problem.slug

    try:
        await store.delete_by_id(Collection.SYSTEM_DESIGN_PROBLEMS, problem_id)
    except StoreError as e:
        raise store_failure("delete system design problem", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.CONTENT_DELETED,
        target_type=AuditTargetType.SYSTEM_DESIGN_PROBLEM,
        target_id=problem_id,
        details={"slug": slug},
    )
    logger.info(f"Admin {admin_user.email} deleted system design problem {problem_id} ({slug})")

    return {"message": "System design problem deleted successfully"}


@router.post("/import", response_model=ImportResponse)
@limiter.limit(get_rate_limit("import"))
async def import_system_design_problems(
    request: Request,
    body: JsonImportRequest,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    """
    Import a JSON array of system design problems in one transaction. Any
    rejected record fails the whole import.
    """
    check_payload_size(body.json_text)
    try:
        result = await import_json_records(
            store, Collection.SYSTEM_DESIGN_PROBLEMS, body.json_text
        )
    except BulkImportError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except StoreError as e:
        raise store_failure("import system design problems", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.DATA_IMPORT,
        target_type=AuditTargetType.SYSTEM_DESIGN_PROBLEM,
        target_id=None,
        details={"format": "json", "success_count": result.success_count},
    )

    return ImportResponse(
        completed=result.completed,
        success_count=result.success_count,
        total_rows=result.total_rows,
        errors=result.errors,
        message=f"Imported {result.success_count} system design problems",
    )
