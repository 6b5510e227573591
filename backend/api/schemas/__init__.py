"""
API request and response schemas.
"""

from .access import AccessInfo
from .auth import (
    LoginRequest,
    PasswordChangeRequest,
    RefreshTokenRequest,
    RegisterRequest,
    SessionResponse,
    TokenResponse,
    UserResponse,
    UserUpdateRequest,
)

__all__ = [
    "AccessInfo",
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserResponse",
    "UserUpdateRequest",
    "PasswordChangeRequest",
    "RefreshTokenRequest",
    "SessionResponse",
]
