"""Pydantic schemas for the authentication and profile API.

Request and response bodies use camelCase on the wire (``fullName``,
``userId``, ``authProvider``...) and snake_case in Python. Requests accept
either spelling.
"""

from collections.abc import Mapping
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from ...schemas import Account, AuthProvider

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 50
FULL_NAME_MAX_LENGTH = 100

EMAIL_MESSAGES = {
    ("email", "missing"): "Email is required",
    ("email", "value_error"): "Email should be valid",
}


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases.

    error_messages maps (field alias, pydantic error type) to the message
    @validate_request reports for that field instead of pydantic's default.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    error_messages: ClassVar[dict[tuple[str, str], str]] = {}

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def _check_password(value: str) -> str:
    if not PASSWORD_MIN_LENGTH <= len(value) <= PASSWORD_MAX_LENGTH:
        raise PydanticCustomError(
            "password_length",
            "Password must be between {min} and {max} characters",
            {"min": PASSWORD_MIN_LENGTH, "max": PASSWORD_MAX_LENGTH},
        )
    return value


def _check_full_name_length(value: str) -> str:
    if len(value) > FULL_NAME_MAX_LENGTH:
        raise PydanticCustomError(
            "full_name_length",
            "Full name must not exceed {max} characters",
            {"max": FULL_NAME_MAX_LENGTH},
        )
    return value


# ============================================================================
# Requests
# ============================================================================


class RegisterRequest(CamelModel):
    """Body of POST /api/auth/register."""

    email: EmailStr
    password: str
    full_name: str

    error_messages = {
        **EMAIL_MESSAGES,
        ("password", "missing"): "Password is required",
        ("fullName", "missing"): "Full name is required",
    }

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _check_password(v)

    @field_validator("full_name")
    @classmethod
    def full_name_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise PydanticCustomError("full_name_required", "Full name is required")
        return _check_full_name_length(v)


class LoginRequest(CamelModel):
    """Body of POST /api/auth/login."""

    email: EmailStr
    password: str

    error_messages = {
        **EMAIL_MESSAGES,
        ("password", "missing"): "Password is required",
    }

    @field_validator("password")
    @classmethod
    def password_required(cls, v: str) -> str:
        if not v:
            raise PydanticCustomError("password_required", "Password is required")
        return v


class ProfileUpdateRequest(CamelModel):
    """Body of PUT /api/users/profile.

    Both fields are optional. Blank values are ignored by the update.
    """

    full_name: str | None = None
    password: str | None = None

    @field_validator("full_name")
    @classmethod
    def full_name_length(cls, v: str | None) -> str | None:
        return v if v is None else _check_full_name_length(v)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str | None) -> str | None:
        # Blank means "leave unchanged"; only a real value has to fit the policy
        if v is None or not v.strip():
            return v
        return _check_password(v)


# ============================================================================
# Responses
# ============================================================================


class AuthResponse(CamelModel):
    """Token plus a minimal identity echo, returned by register and login."""

    token: str
    type: Literal["Bearer"] = "Bearer"
    user_id: str
    email: str
    full_name: str | None = None

    @classmethod
    def for_account(cls, account: Account, token: str) -> "AuthResponse":
        return cls(
            token=token,
            user_id=account.id,
            email=account.email,
            full_name=account.full_name,
        )


class ProfileResponse(CamelModel):
    """Public view of an account. Never includes the password hash."""

    id: str
    email: str
    full_name: str | None = None
    auth_provider: AuthProvider
    created_at: str
    updated_at: str

    @classmethod
    def from_account(cls, account: Account) -> "ProfileResponse":
        return cls(
            id=account.id,
            email=account.email,
            full_name=account.full_name,
            auth_provider=account.auth_provider,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


# ============================================================================
# Tokens and external identities
# ============================================================================


class TokenPayload(BaseModel):
    """Claims carried by an access token. sub is the account email."""

    sub: str
    iat: int
    exp: int


class GoogleIdentity(BaseModel):
    """Verified attributes asserted by Google after a successful sign-in."""

    email: EmailStr
    full_name: str | None = None
    subject: str = Field(min_length=1)

    @classmethod
    def from_claims(cls, claims: Mapping) -> "GoogleIdentity":
        """Build from OpenID Connect userinfo claims (email, name, sub)."""
        return cls(
            email=claims.get("email"),
            full_name=claims.get("name"),
            subject=claims.get("sub"),
        )
