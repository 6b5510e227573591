"""
Category and subcategory API routes.

Reads are public. Writes are admin-only; deletes cascade to the content
filed underneath.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.content import Collection
from core.exceptions import StoreError
from core.interfaces.repositories import ContentStore, Filter
from infrastructure.database.connection import get_db
from infrastructure.database.models.admin import AuditAction, AuditTargetType
from infrastructure.database.models.user import User
from services.catalogue import delete_category_cascade, delete_subcategory_cascade
from api.dependencies import get_store
from api.deps_admin import get_current_admin_user
from api.routes.admin_content import log_audit
from api.schemas.catalogue import (
    CascadeDeleteResponse,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    SubcategoryCreate,
    SubcategoryResponse,
    SubcategoryUpdate,
)
from api.utils import store_failure

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Catalogue"])


async def get_category_or_404(store: ContentStore, category_id: str):
    try:
        category = await store.get(Collection.CATEGORIES, category_id)
    except StoreError as e:
        raise store_failure("load category", e)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )
    return category


async def get_subcategory_or_404(store: ContentStore, subcategory_id: str):
    try:
        subcategory = await store.get(Collection.SUBCATEGORIES, subcategory_id)
    except StoreError as e:
        raise store_failure("load subcategory", e)
    if not subcategory:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Subcategory not found",
        )
    return subcategory


# --- Categories ---


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(store: ContentStore = Depends(get_store)):
    """All categories, by name."""
    try:
        return await store.select(Collection.CATEGORIES, order_by="name")
    except StoreError as e:
        raise store_failure("load categories", e)


@router.get("/categories/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: str, store: ContentStore = Depends(get_store)):
    return await get_category_or_404(store, category_id)


@router.post(
    "/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED
)
async def create_category(
    body: CategoryCreate,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
):
    try:
        existing = await store.select(
            Collection.CATEGORIES, filters=[Filter.eq("name", body.name)]
        )
    except StoreError as e:
        raise store_failure("check category name", e)
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A category with this name already exists",
        )

    try:
        category = await store.insert_one(Collection.CATEGORIES, body.model_dump(exclude_none=True))
    except StoreError as e:
        raise store_failure("create category", e)

    logger.info(f"Admin {admin_user.email} created category {category.id} ({category.name})")
    return category


@router.put("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    body: CategoryUpdate,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
):
    await get_category_or_404(store, category_id)
    try:
        return await store.update_by_id(
            Collection.CATEGORIES, category_id, body.model_dump(exclude_unset=True)
        )
    except StoreError as e:
        raise store_failure("update category", e)


@router.delete("/categories/{category_id}", response_model=CascadeDeleteResponse)
async def delete_category(
    category_id: str,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a category with its subcategories, their questions, and the
    system design problems and projects filed under it.
    """
    category = await get_category_or_404(store, category_id)
    category_name = category.name

    try:
        counts = await delete_category_cascade(store, category_id)
    except StoreError as e:
        raise store_failure("delete category", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.CATEGORY_DELETED,
        target_type=AuditTargetType.CATEGORY,
        target_id=category_id,
        details={"name": category_name, "deleted": counts},
    )
    logger.info(f"Admin {admin_user.email} deleted category {category_id} ({category_name})")

    return CascadeDeleteResponse(message=f"Deleted category '{category_name}'", deleted=counts)


# --- Subcategories ---


@router.get("/categories/{category_id}/subcategories", response_model=list[SubcategoryResponse])
async def list_subcategories(category_id: str, store: ContentStore = Depends(get_store)):
    await get_category_or_404(store, category_id)
    try:
        return await store.select(
            Collection.SUBCATEGORIES,
            filters=[Filter.eq("category_id", category_id)],
            order_by="name",
        )
    except StoreError as e:
        raise store_failure("load subcategories", e)


@router.get("/subcategories/{subcategory_id}", response_model=SubcategoryResponse)
async def get_subcategory(subcategory_id: str, store: ContentStore = Depends(get_store)):
    return await get_subcategory_or_404(store, subcategory_id)


@router.post(
    "/categories/{category_id}/subcategories",
    response_model=SubcategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_subcategory(
    category_id: str,
    body: SubcategoryCreate,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
):
    await get_category_or_404(store, category_id)
    record = {**body.model_dump(exclude_none=True), "category_id": category_id}
    try:
        return await store.insert_one(Collection.SUBCATEGORIES, record)
    except StoreError as e:
        raise store_failure("create subcategory", e)


@router.put("/subcategories/{subcategory_id}", response_model=SubcategoryResponse)
async def update_subcategory(
    subcategory_id: str,
    body: SubcategoryUpdate,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
):
    await get_subcategory_or_404(store, subcategory_id)
    try:
        return await store.update_by_id(
            Collection.SUBCATEGORIES, subcategory_id, body.model_dump(exclude_unset=True)
        )
    except StoreError as e:
        raise store_failure("update subcategory", e)


@router.delete("/subcategories/{subcategory_id}", response_model=CascadeDeleteResponse)
async def delete_subcategory(
    subcategory_id: str,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    """Delete a subcategory and all of its questions."""
    subcategory = await get_subcategory_or_404(store, subcategory_id)
    subcategory_name = subcategory.name

    try:
        counts = await delete_subcategory_cascade(store, subcategory_id)
    except StoreError as e:
        raise store_failure("delete subcategory", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.SUBCATEGORY_DELETED,
        target_type=AuditTargetType.SUBCATEGORY,
        target_id=subcategory_id,
        details={"name": subcategory_name, "deleted": counts},
    )
    logger.info(f"Admin {admin_user.email} deleted subcategory {subcategory_id}")

    return CascadeDeleteResponse(
        message=f"Deleted subcategory '{subcategory_name}'", deleted=counts
    )
