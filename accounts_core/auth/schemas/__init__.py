"""Authentication Pydantic schemas for API validation."""

from .auth import (
    AuthResponse,
    CamelModel,
    GoogleIdentity,
    LoginRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    TokenPayload,
)

__all__ = [
    "AuthResponse",
    "CamelModel",
    "GoogleIdentity",
    "LoginRequest",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "TokenPayload",
]
