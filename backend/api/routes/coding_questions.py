"""
Coding question API routes.
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
    CodingQuestionCreate,
    CodingQuestionListResponse,
    CodingQuestionResponse,
    CodingQuestionUpdate,
)
from api.schemas.imports import ImportResponse, JsonImportRequest
from api.utils import check_payload_size, store_failure

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/coding-questions", tags=["Coding Questions"])


async def _ensure_slug_free(store: ContentStore, slug: str, exclude_id: Optional[str] = None) -> None:
    try:
        clash = await store.select(
            Collection.CODING_QUESTIONS, filters=[Filter.eq("slug", slug)]
        )
    except StoreError as e:
        raise store_failure("check slug", e)
    if any(row.id != exclude_id for row in clash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"A coding question with slug '{slug}' already exists",
        )


async def _get_by_id_or_404(store: ContentStore, question_id: str):
    try:
        question = await store.get(Collection.CODING_QUESTIONS, question_id)
    except StoreError as e:
        raise store_failure("load coding question", e)
    if not question:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Coding question not found",
        )
    return question


@router.get("", response_model=CodingQuestionListResponse)
async def list_coding_questions(
    principal: Annotated[Principal, Depends(get_principal)],
    store: ContentStore = Depends(get_store),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    category: Optional[str] = Query(None, max_length=255),
    difficulty: Optional[str] = Query(None, max_length=50),
    search: Optional[str] = Query(None, max_length=200),
):
    """Published coding questions, newest first."""
    filters = [Filter.eq("status", "Published")]
    if category:
        filters.append(Filter.eq("category", category))
    if difficulty:
        filters.append(Filter.eq("difficulty", difficulty))
    if search:
        filters.append(Filter.ilike("title", search))

    try:
        total = await store.count(Collection.CODING_QUESTIONS, filters)
        rows = await store.select(
            Collection.CODING_QUESTIONS,
            filters=filters,
            order_by="created_at",
            descending=True,
            limit=page_size,
            offset=(page - 1) * page_size,
        )
    except StoreError as e:
        raise store_failure("load coding questions", e)
    return render_page(rows, CodingQuestionResponse, principal, total, page, page_size)


@router.get("/{slug}", response_model=CodingQuestionResponse)
async def get_coding_question(
    slug: str,
    principal: Annotated[Principal, Depends(get_principal)],
    store: ContentStore = Depends(get_store),
):
    try:
        rows = await store.select(
            Collection.CODING_QUESTIONS, filters=[Filter.eq("slug", slug)], limit=1
        )
    except StoreError as e:
        raise store_failure("load coding question", e)
    if not rows:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Coding question not found",
        )
    return render_item(rows[0], CodingQuestionResponse, principal)


@router.post("", response_model=CodingQuestionResponse, status_code=status.HTTP_201_CREATED)
async def create_coding_question(
    body: CodingQuestionCreate,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    principal: Annotated[Principal, Depends(get_principal)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    record = body.model_dump(exclude_none=True)
    record["slug"] = body.slug or slugify(body.title)
    record["created_by"] = admin_user.id
    await _ensure_slug_free(store, record["slug"])

    try:
        question = await store.insert_one(Collection.CODING_QUESTIONS, record)
    except StoreError as e:
        raise store_failure("create coding question", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.CONTENT_CREATED,
        target_type=AuditTargetType.CODING_QUESTION,
        target_id=question.id,
    )
    return render_item(question, CodingQuestionResponse, principal)


@router.put("/{question_id}", response_model=CodingQuestionResponse)
async def update_coding_question(
    question_id: str,
    body: CodingQuestionUpdate,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    principal: Annotated[Principal, Depends(get_principal)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    await _get_by_id_or_404(store, question_id)
    changes = body.model_dump(exclude_unset=True)
    if changes.get("slug"):
        await _ensure_slug_free(store, changes["slug"], exclude_id=question_id)

    try:
        question = await store.update_by_id(Collection.CODING_QUESTIONS, question_id, changes)
    except StoreError as e:
        raise store_failure("update coding question", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.CONTENT_UPDATED,
        target_type=AuditTargetType.CODING_QUESTION,
        target_id=question_id,
        details={"fields": sorted(changes)},
    )
    return render_item(question, CodingQuestionResponse, principal)


@router.delete("/{question_id}")
async def delete_coding_question(
    question_id: str,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
) -> dict:
    question = await _get_by_id_or_404(store, question_id)
    slug = question.slug

    try:
        await store.delete_by_id(Collection.CODING_QUESTIONS, question_id)
    except StoreError as e:
        raise store_failure("delete coding question", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.CONTENT_DELETED,
        target_type=AuditTargetType.CODING_QUESTION,
        target_id=question_id,
        details={"slug": slug},
    )
    logger.info(f"Admin {admin_user.email} deleted coding question {question_id} ({slug})")

    return {"message": "Coding question deleted successfully"}


@router.post("/import", response_model=ImportResponse)
@limiter.limit(get_rate_limit("import"))
async def import_coding_questions(
    request: Request,
    body: JsonImportRequest,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    """
    Import a JSON array of coding questions in one transaction. Any rejected
    record fails the whole import.
    """
    check_payload_size(body.json_text)
    try:
        result = await import_json_records(store, Collection.CODING_QUESTIONS, body.json_text)
    except BulkImportError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except StoreError as e:
        raise store_failure("import coding questions", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.DATA_IMPORT,
        target_type=AuditTargetType.CODING_QUESTION,
        target_id=None,
        details={"format": "json", "success_count": result.success_count},
    )

    return ImportResponse(
        completed=result.completed,
        success_count=result.success_count,
        total_rows=result.total_rows,
        errors=result.errors,
        message=f"Imported {result.success_count} coding questions",
    )
