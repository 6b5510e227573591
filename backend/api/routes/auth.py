"""
Authentication API routes.
"""

import logging
from datetime import datetime, timezone
from typing import Annotated, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.user import Principal
from core.exceptions import StoreError
from core.security.password import password_hasher
from infrastructure.config.settings import settings
from infrastructure.database.connection import get_db
from infrastructure.database.models.user import User, UserStatus
from infrastructure.database.store import SqlAlchemyContentStore
from services.principal_cache import load_principal, principal_cache
from api.dependencies import (
    get_current_user,
    token_predates_password_change,
    token_service,
)
from api.middleware.rate_limit import get_rate_limit, limiter
from api.schemas.auth import (
    LoginRequest,
    PasswordChangeRequest,
    PrincipalResponse,
    RefreshTokenRequest,
    RegisterRequest,
    SessionResponse,
    TokenResponse,
    UserResponse,
    UserUpdateRequest,
)
from api.utils import store_failure

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _cookie_kwargs() -> dict:
    """SameSite=None; Secure for deployed frontends, Lax for localhost."""
    is_deployed = settings.is_production or not any(
        h in settings.frontend_url for h in ("localhost", "127.0.0.1", "0.0.0.0")
    )
    return dict(
        httponly=True,
        secure=is_deployed,
        samesite="none" if is_deployed else "lax",
        path="/",
    )


def _token_response(user: User) -> JSONResponse:
    """Token pair in the body and as HttpOnly cookies."""
    access_token, refresh_token = token_service.create_token_pair(user.id, email=user.email)
    response = JSONResponse(
        content={
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer",
            "expires_in": token_service.access_token_expires_in,
        }
    )
    kwargs = _cookie_kwargs()
    response.set_cookie(
        "access_token", access_token, max_age=token_service.access_token_expires_in, **kwargs
    )
    response.set_cookie(
        "refresh_token",
        refresh_token,
        max_age=settings.jwt_refresh_token_expire_days * 86400,
        **kwargs,
    )
    return response


def _principal_response(principal: Principal) -> PrincipalResponse:
    return PrincipalResponse(
        user_id=principal.user_id,
        authenticated=principal.authenticated,
        is_admin=principal.is_admin,
        tier=principal.tier.value if principal.tier else None,
        effective_tier=principal.effective_tier.value,
    )


async def _session(db: AsyncSession, user: User) -> SessionResponse:
    store = SqlAlchemyContentStore(db)
    try:
        principal = await principal_cache.get_or_load(
            user.id,
            lambda uid: load_principal(store, uid, strict_tiers=settings.strict_tier_names),
        )
    except StoreError as e:
        raise store_failure("load session", e)
    if principal is None:
        principal = Principal.anonymous()
    return SessionResponse(
        user=UserResponse.model_validate(user),
        principal=_principal_response(principal),
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(get_rate_limit("register"))
async def register(
    request: Request,
    register_data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Register a new user account. New accounts have no subscription and see
    Explorer content.
    """
    result = await db.execute(select(User).where(User.email == register_data.email.lower()))
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An account with this email already exists",
        )

    if register_data.username:
        result = await db.execute(select(User).where(User.username == register_data.username))
        if result.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="This username is already taken",
            )

    user = User(
        email=register_data.email.lower(),
        username=register_data.username,
        first_name=register_data.first_name,
        last_name=register_data.last_name,
        password_hash=password_hasher.hash(register_data.password),
        status=UserStatus.ACTIVE.value,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info("Registered user %s", user.id)
    return user


@router.post("/login", response_model=TokenResponse)
@limiter.limit(get_rate_limit("login"))
async def login(
    request: Request,
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """
    Authenticate with email or username and return access tokens.
    """
    identifier = login_data.identifier.strip()
    result = await db.execute(
        select(User).where(or_(User.email == identifier.lower(), User.username == identifier))
    )
    user = result.scalar_one_or_none()

    # Always run bcrypt so response time does not reveal whether the account exists
    password_ok = password_hasher.verify(login_data.password, user.password_hash if user else None)
    if not user or not password_ok:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email/username or password",
        )

    if user.status == UserStatus.SUSPENDED.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account has been suspended",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )

    user.last_login = datetime.now(timezone.utc)
    user.login_count += 1
    await db.commit()

    # A fresh sign-in always reloads the principal
    principal_cache.invalidate(user.id)

    return _token_response(user)


@router.post("/refresh", response_model=TokenResponse)
@limiter.limit(get_rate_limit("refresh"))
async def refresh_token(
    request: Request,
    body: Optional[RefreshTokenRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """
    Exchange a refresh token (cookie first, then body) for a new token pair.
    """
    refresh_tok = request.cookies.get("refresh_token")
    if not refresh_tok and body is not None:
        refresh_tok = body.refresh_token

    if not refresh_tok:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token required",
        )

    payload = token_service.verify_refresh_token(refresh_tok)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )

    result = await db.execute(select(User).where(User.id == payload.sub))
    user = result.scalar_one_or_none()

    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    if token_predates_password_change(payload, user):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token invalidated due to password change. Please log in again.",
        )

    return _token_response(user)


@router.post("/logout", status_code=status.HTTP_200_OK)
@limiter.limit("20/minute")
async def logout(
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
) -> JSONResponse:
    """
    Logout current user.

    JWTs are stateless; the client discards its tokens. The cached principal
    is dropped and the auth cookies are cleared.
    """
    principal_cache.invalidate(current_user.id)

    response = JSONResponse(content={"message": "Logged out successfully"})
    kwargs = _cookie_kwargs()
    response.delete_cookie("access_token", **kwargs)
    response.delete_cookie("refresh_token", **kwargs)
    return response


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """
    Get current authenticated user profile.
    """
    return current_user


@router.put("/me", response_model=UserResponse)
async def update_me(
    update_data: UserUpdateRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Update current authenticated user profile.
    """
    changes = update_data.model_dump(exclude_unset=True)

    new_username = changes.get("username")
    if new_username and new_username != current_user.username:
        result = await db.execute(select(User).where(User.username == new_username))
        if result.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="This username is already taken",
            )

    for field, value in changes.items():
        setattr(current_user, field, value)
    await db.commit()
    await db.refresh(current_user)
    return current_user


@router.post("/password/change", status_code=status.HTTP_200_OK)
@limiter.limit(get_rate_limit("password_change"))
async def change_password(
    request: Request,
    body: PasswordChangeRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> dict:
    """
    Change password for authenticated user. Tokens issued before the change
    stop working.
    """
    if not password_hasher.verify(body.current_password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )

    current_user.password_hash = password_hasher.hash(body.new_password)
    current_user.password_changed_at = datetime.now(timezone.utc)
    await db.commit()

    return {"message": "Password has been changed successfully"}


@router.get("/session", response_model=SessionResponse)
async def get_session(
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> SessionResponse:
    """
    Profile plus the principal access checks currently use (possibly cached).
    """
    return await _session(db, current_user)


@router.post("/session/refresh", response_model=SessionResponse)
async def refresh_session(
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> SessionResponse:
    """
    Drop the cached principal and reload admin flag and tier from the database.
    """
    principal_cache.invalidate(current_user.id)
    return await _session(db, current_user)
