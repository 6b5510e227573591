"""
Admin content moderation API routes.

Bulk operations across content types, plus the audit helper the other admin
write routes use.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.content import ContentType
from core.exceptions import StoreError
from core.interfaces.repositories import ContentStore
from infrastructure.database.connection import get_db
from infrastructure.database.models.admin import AdminAuditLog, AuditAction, AuditTargetType
from infrastructure.database.models.user import User
from api.dependencies import get_store
from api.deps_admin import get_current_admin_user
from api.schemas.admin_content import BulkDeleteRequest, BulkDeleteResponse
from api.utils import store_failure

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/content", tags=["Admin - Content"])

TARGET_TYPES = {
    ContentType.QUESTION: AuditTargetType.QUESTION,
    ContentType.CODING_QUESTION: AuditTargetType.CODING_QUESTION,
    ContentType.SYSTEM_DESIGN_PROBLEM: AuditTargetType.SYSTEM_DESIGN_PROBLEM,
    ContentType.PROJECT: AuditTargetType.PROJECT,
}


async def log_audit(
    db: AsyncSession,
    admin_user: User,
    action: AuditAction,
    target_type: AuditTargetType,
    target_id: Optional[str],
    details: Optional[dict] = None,
) -> None:
    """Log an admin action to the audit log."""
    audit_log = AdminAuditLog(
        admin_user_id=admin_user.id,
        action=action.value,
        target_type=target_type.value,
        target_id=target_id,
        details=details,
    )
    db.add(audit_log)
    await db.commit()


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_content(
    request: BulkDeleteRequest,
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    store: ContentStore = Depends(get_store),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete several items of one content type.

    The ids go to the store in one statement: either every existing row is
    removed or, if the store rejects the delete, none is.
    """
    content_type = request.content_type
    try:
        deleted_count = await store.delete_by_ids(content_type.collection, request.ids)
    except StoreError as e:
        raise store_failure(f"delete {content_type.value}(s)", e)

    await log_audit(
        db=db,
        admin_user=admin_user,
        action=AuditAction.BULK_DELETE_CONTENT,
        target_type=TARGET_TYPES[content_type],
        target_id=None,
        details={
            "content_type": content_type.value,
            "total_requested": len(request.ids),
            "deleted_count": deleted_count,
            "ids": request.ids,
        },
    )

    logger.info(
        f"Admin {admin_user.email} bulk deleted {deleted_count} {content_type.value}(s) "
        f"of {len(request.ids)} requested"
    )

    return BulkDeleteResponse(
        success=deleted_count > 0,
        deleted_count=deleted_count,
        message=f"Deleted {deleted_count} {content_type.value}(s)",
    )
