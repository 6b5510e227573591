"""
Interview question API routes.

Reads are gated per item: locked questions come back with their listing
metadata and an access payload but without content or answer.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.content import Collection
from core.domain.user import Principal
from core.exceptions import BulkImportError, StoreError
from core.interfaces.repositories import ContentStore, Filter
from infrastructure.config.settings import settings
from infrastructure.database.connection import get_db
from infrastructure.database.models.admin import AuditAction, AuditTargetType
from infrastructure.database.models.user import User
from services.bulk_import import import_csv_questions, import_json_questions
from api.dependencies import get_principal, get_store
from api.deps_admin import get_current_admin_user
from api.gating import render_item, render_page
from api.middleware.rate_limit import get_rate_limit, limiter
from api.routes.admin_content import log_audit
from api.routes.catalogue import get_subcategory_or_404
from api.schemas.content import (
    QuestionCreate,
    QuestionListResponse,
    QuestionResponse,
    QuestionUpdate,
)
from api.schemas.imports import CsvImportRequest, ImportResponse, JsonImportRequest
from api.utils import check_payload_size, store_failure

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Questions"])


async def get_question_or_404(store: ContentStore, question_id: str):
    try:
        question = await store.get(Collection.QUESTIONS, question_id)
    except StoreError as e:
        raise store_failure("load question", e)
    if not question:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Question not found",
        )
    return question


@router.get("/subcategories/{subcategory_id}/questions", response_model=QuestionListResponse)
async def list_questions(
    subcategory_id: str,
    principal: Annotated[Principal, Depends(get_principal)],
    store: ContentStore = Depends(get_store),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=200),
    level: Optional[str] = Query(None, max_length=50),
):
    """Questions in a subcategory, oldest first."""
    await get_subcategory_or_404(store, subcategory_id)

    filters = [Filter.eq("subcategory_id", subcategory_id)]
    if level:
        filters.append(Filter.eq("level", level))
    if search:
        filters.append(Filter.ilike("title", search))

    try:
        total = await store.count(Collection.QUESTIONS, filters)
        rows = await store.select(
            Collection.QUESTIONS,
            filters=filters,
            order_by="created_at",
            limit=page_size,
            offset=(page - 1) * page_size,
        )
    except StoreError as e:
        raise store_failure("load questions", e)
    return render_page(rows, QuestionResponse, principal, total, page, page_size)


@router.get("/questions/{question_id}", response_model=QuestionResponse)
async def get_question(
    question_id: str,
    principal: Annotated[Principal, Depends(get_principal)],
    store: ContentStore = Depends(get_store),
):
    question = await get_question_or_404(store, question_id)
    return render_item(question, QuestionResponse, principal)


@router.post(
    "/subcategories/{subcategory_id}/questions",
    response_model=QuestionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_question(
    subcategory_id: str,
    body: QuestionCreate,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    principal: Annotated[Principal, Depends(get_principal)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    await get_subcategory_or_404(store, subcategory_id)
    record = {
        **body.model_dump(exclude_none=True),
        "subcategory_id": subcategory_id,
        "created_by": admin_user.id,
    }
    try:
        question = await store.insert_one(Collection.QUESTIONS, record)
    except StoreError as e:
        raise store_failure("create question", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.CONTENT_CREATED,
        target_type=AuditTargetType.QUESTION,
        target_id=question.id,
    )
    return render_item(question, QuestionResponse, principal)


@router.put("/questions/{question_id}", response_model=QuestionResponse)
async def update_question(
    question_id: str,
    body: QuestionUpdate,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    principal: Annotated[Principal, Depends(get_principal)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    await get_question_or_404(store, question_id)
    changes = body.model_dump(exclude_unset=True)
    try:
        question = await store.update_by_id(Collection.QUESTIONS, question_id, changes)
    except StoreError as e:
        raise store_failure("update question", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.CONTENT_UPDATED,
        target_type=AuditTargetType.QUESTION,
        target_id=question_id,
        details={"fields": sorted(changes)},
    )
    return render_item(question, QuestionResponse, principal)


@router.delete("/questions/{question_id}")
async def delete_question(
    question_id: str,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
) -> dict:
    question = await get_question_or_404(store, question_id)
    question_title = question.title

    try:
        await store.delete_by_id(Collection.QUESTIONS, question_id)
    except StoreError as e:
        raise store_failure("delete question", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.CONTENT_DELETED,
        target_type=AuditTargetType.QUESTION,
        target_id=question_id,
        details={"title": question_title},
    )
    logger.info(f"Admin {admin_user.email} deleted question {question_id} ({question_title})")

    return {"message": "Question deleted successfully"}


@router.post("/subcategories/{subcategory_id}/questions/import", response_model=ImportResponse)
@limiter.limit(get_rate_limit("import"))
async def import_questions(
    request: Request,
    subcategory_id: str,
    body: CsvImportRequest,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    """
    Import a CSV question bank into a subcategory.

    Invalid rows and failed batches are listed in ``errors``; the rest is
    written. Batches stop being sent once the client disconnects.
    """
    await get_subcategory_or_404(store, subcategory_id)
    check_payload_size(body.csv)

    async def client_connected() -> bool:
        return not await request.is_disconnected()

    try:
        result = await import_csv_questions(
            store,
            body.csv,
            subcategory_id,
            created_by=admin_user.id,
            batch_size=settings.import_batch_size,
            should_continue=client_connected,
        )
    except BulkImportError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.DATA_IMPORT,
        target_type=AuditTargetType.SUBCATEGORY,
        target_id=subcategory_id,
        details={
            "format": "csv",
            "success_count": result.success_count,
            "errors": result.errors,
        },
    )

    return ImportResponse(
        completed=result.completed,
        success_count=result.success_count,
        total_rows=result.total_rows,
        errors=result.errors,
        message=f"Imported {result.success_count} questions",
    )


@router.post(
    "/subcategories/{subcategory_id}/questions/import/json", response_model=ImportResponse
)
@limiter.limit(get_rate_limit("import"))
async def import_questions_json(
    request: Request,
    subcategory_id: str,
    body: JsonImportRequest,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    """Import a JSON array of questions into a subcategory, all or nothing."""
    await get_subcategory_or_404(store, subcategory_id)
    check_payload_size(body.json_text)

    try:
        result = await import_json_questions(
            store, body.json_text, subcategory_id, created_by=admin_user.id
        )
    except BulkImportError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except StoreError as e:
        raise store_failure("import questions", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.DATA_IMPORT,
        target_type=AuditTargetType.SUBCATEGORY,
        target_id=subcategory_id,
        details={"format": "json", "success_count": result.success_count},
    )

    return ImportResponse(
        completed=result.completed,
        success_count=result.success_count,
        total_rows=result.total_rows,
        errors=result.errors,
        message=f"Imported {result.success_count} questions",
    )
