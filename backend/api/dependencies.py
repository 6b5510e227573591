"""
API dependencies: authentication, store access and the caller's principal.
"""

from datetime import timezone
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.user import Principal
from core.exceptions import StoreError
from core.interfaces.repositories import ContentStore
from core.security.tokens import TokenPayload, TokenService
from infrastructure.config.settings import settings
from infrastructure.database.connection import get_db
from infrastructure.database.models.user import User
from infrastructure.database.store import SqlAlchemyContentStore
from services.principal_cache import load_principal, principal_cache
from api.utils import store_failure

token_service = TokenService(
    secret_key=settings.jwt_secret_key,
    algorithm=settings.jwt_algorithm,
    access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
    refresh_token_expire_days=settings.jwt_refresh_token_expire_days,
)


def extract_token(request: Request, authorization: Optional[str]) -> Optional[str]:
    """Bearer token from the Authorization header, else the access_token cookie."""
    token = None
    if authorization and authorization.startswith("Bearer "):
        token = authorization[len("Bearer "):].strip() or None
    if not token:
        token = request.cookies.get("access_token")
    return token


def token_predates_password_change(payload: TokenPayload, user: User) -> bool:
    if not payload.iat or not user.password_changed_at:
        return False
    # JWT iat has whole-second precision
    changed_at = user.password_changed_at.replace(microsecond=0)
    if changed_at.tzinfo is None:
        changed_at = changed_at.replace(tzinfo=timezone.utc)
    return payload.iat < changed_at


async def get_current_user(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Dependency to get the current authenticated user.

    Reads the bearer token from the Authorization header, falling back to the
    HttpOnly access_token cookie.
    """
    token = extract_token(request, authorization)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = token_service.verify_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = await db.execute(select(User).where(User.id == payload.sub))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is not active",
        )

    # Tokens issued before the last password change are rejected
    if token_predates_password_change(payload, user):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token invalidated due to security event",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


async def get_store(db: AsyncSession = Depends(get_db)) -> ContentStore:
    """Content store bound to the request's session."""
    return SqlAlchemyContentStore(db)


async def resolve_principal(store: ContentStore, user_id: str) -> Principal | None:
    """Cached principal for ``user_id``, loading it from the store on a miss."""
    return await principal_cache.get_or_load(
        user_id,
        lambda uid: load_principal(store, uid, strict_tiers=settings.strict_tier_names),
    )


async def get_principal(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
    store: ContentStore = Depends(get_store),
) -> Principal:
    """
    The caller's principal for access checks.

    No token means an anonymous principal. A token that does not verify is a
    401 so the client can refresh and retry.
    """
    token = extract_token(request, authorization)
    if not token:
        return Principal.anonymous()

    payload = token_service.verify_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        principal = await resolve_principal(store, payload.sub)
    except StoreError as e:
        raise store_failure("load session", e)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal
