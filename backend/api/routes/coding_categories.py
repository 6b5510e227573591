"""
Coding category API routes.

Coding questions name their category instead of pointing at a row, so
deleting a category leaves its questions in place.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.content import Collection
from core.domain.subscription import Tier
from core.exceptions import BulkImportError, StoreError
from core.interfaces.repositories import ContentStore, Filter
from infrastructure.database.connection import get_db
from infrastructure.database.models.admin import AuditAction, AuditTargetType
from infrastructure.database.models.user import User
from services.bulk_import import import_coding_csv
from api.dependencies import get_store
from api.deps_admin import get_current_admin_user
from api.middleware.rate_limit import get_rate_limit, limiter
from api.routes.admin_content import log_audit
from api.schemas.catalogue import (
    CodingCategoryCreate,
    CodingCategoryResponse,
    CodingCategoryUpdate,
)
from api.schemas.imports import CodingCsvImportRequest, ImportResponse
from api.utils import check_payload_size, store_failure

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/coding-categories", tags=["Coding Categories"])


async def get_coding_category_or_404(store: ContentStore, category_id: str):
    try:
        category = await store.get(Collection.CODING_CATEGORIES, category_id)
    except StoreError as e:
        raise store_failure("load coding category", e)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Coding category not found",
        )
    return category


async def _ensure_name_free(store: ContentStore, name: str, exclude_id: str | None = None) -> None:
    try:
        clash = await store.select(
            Collection.CODING_CATEGORIES, filters=[Filter.eq("name", name)]
        )
    except StoreError as e:
        raise store_failure("check coding category name", e)
    if any(row.id != exclude_id for row in clash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A coding category with this name already exists",
        )


@router.get("", response_model=list[CodingCategoryResponse])
async def list_coding_categories(store: ContentStore = Depends(get_store)):
    """All coding categories, newest first."""
    try:
        return await store.select(
            Collection.CODING_CATEGORIES, order_by="created_at", descending=True
        )
    except StoreError as e:
        raise store_failure("load coding categories", e)


@router.get("/{category_id}", response_model=CodingCategoryResponse)
async def get_coding_category(category_id: str, store: ContentStore = Depends(get_store)):
    return await get_coding_category_or_404(store, category_id)


@router.post("", response_model=CodingCategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_coding_category(
    body: CodingCategoryCreate,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
):
    await _ensure_name_free(store, body.name)
    try:
        category = await store.insert_one(
            Collection.CODING_CATEGORIES, body.model_dump(exclude_none=True)
        )
    except StoreError as e:
        raise store_failure("create coding category", e)

    logger.info(f"Admin {admin_user.email} created coding category {category.id} ({category.name})")
    return category


@router.put("/{category_id}", response_model=CodingCategoryResponse)
async def update_coding_category(
    category_id: str,
    body: CodingCategoryUpdate,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
):
    await get_coding_category_or_404(store, category_id)
    changes = body.model_dump(exclude_unset=True)
    if changes.get("name"):
        await _ensure_name_free(store, changes["name"], exclude_id=category_id)
    try:
        return await store.update_by_id(Collection.CODING_CATEGORIES, category_id, changes)
    except StoreError as e:
        raise store_failure("update coding category", e)


@router.delete("/{category_id}")
async def delete_coding_category(
    category_id: str,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
) -> dict:
    category = await get_coding_category_or_404(store, category_id)
    name = category.name

    try:
        await store.delete_by_id(Collection.CODING_CATEGORIES, category_id)
    except StoreError as e:
        raise store_failure("delete coding category", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.CODING_CATEGORY_DELETED,
        target_type=AuditTargetType.CODING_CATEGORY,
        target_id=category_id,
        details={"name": name},
    )
    logger.info(f"Admin {admin_user.email} deleted coding category {category_id} ({name})")

    return {"message": "Coding category deleted successfully"}


@router.post("/{category_id}/import", response_model=ImportResponse)
@limiter.limit(get_rate_limit("import"))
async def import_coding_category_csv(
    request: Request,
    category_id: str,
    body: CodingCsvImportRequest,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    """
    Import headerless CSV coding questions into this category. The first
    malformed line rejects the whole payload.
    """
    category = await get_coding_category_or_404(store, category_id)
    check_payload_size(body.csv)
    default_tier = Tier.parse(body.default_tier) or Tier.lowest()

    try:
        result = await import_coding_csv(
            store,
            body.csv,
            category.name,
            default_tier=default_tier,
            created_by=admin_user.id,
        )
    except BulkImportError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except StoreError as e:
        raise store_failure("import coding questions", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.DATA_IMPORT,
        target_type=AuditTargetType.CODING_CATEGORY,
        target_id=category_id,
        details={"format": "csv", "success_count": result.success_count},
    )

    return ImportResponse(
        completed=result.completed,
        success_count=result.success_count,
        total_rows=result.total_rows,
        errors=result.errors,
        message=f"Imported {result.success_count} coding questions",
    )
