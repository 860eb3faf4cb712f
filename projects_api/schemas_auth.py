"""
projects_api/schemas_auth.py

Pydantic schemas for registration, login and the current user.
Security: the password hash never appears in any response schema.
"""

from __future__ import annotations

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator

from projects_api.config import MAX_PASSWORD_LENGTH, MIN_PASSWORD_LENGTH
from projects_api.models import User, UserRole


def _check_email(v: str) -> str:
    """
    Validate email syntax. The address is returned exactly as sent: lookups
    and uniqueness are case-sensitive, so no normalization happens here.
    """
    try:
        validate_email(v, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("Invalid email format")
    return v


class RegisterRequest(BaseModel):
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Unique email address")
    password: str = Field(..., description=f"At least {MIN_PASSWORD_LENGTH} characters")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        # DoS protection first - reject before checking other rules
        if len(v) > MAX_PASSWORD_LENGTH:
            raise ValueError("Password too long")
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        # Sanity check only; policy changes must not lock out existing users
        if not v:
            raise ValueError("Password is required")
        if len(v) > MAX_PASSWORD_LENGTH:
            raise ValueError("Password too long")
        return v


class UserResponse(BaseModel):
    """User data returned to clients (no password hash)."""
    id: str
    name: str
    email: str
    role: UserRole
    created_at: str
    updated_at: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthResponse(BaseModel):
    user: UserResponse
    token: str
