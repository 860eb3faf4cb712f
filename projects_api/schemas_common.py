"""
projects_api/schemas_common.py

Envelope and pagination schemas shared by every router.
"""

from __future__ import annotations

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator

from projects_api.config import DEFAULT_LIMIT, MAX_LIMIT, MAX_OFFSET

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Success wrapper: {"success": true, "data": ...}."""
    success: bool = True
    data: T


class ErrorDetail(BaseModel):
    field: str
    message: str


class ErrorInfo(BaseModel):
    code: str
    message: str
    details: Optional[List[ErrorDetail]] = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: ErrorInfo


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str


class Page(BaseModel, Generic[T]):
    items: List[T] = Field(default_factory=list)
    total: int = Field(0, description="Count of all matching rows, not just this page")
    limit: int
    offset: int


class PaginationQuery(BaseModel):
    """
    limit/offset parsed from query strings.

    Missing or empty values take the defaults; integers outside the allowed
    range are clamped rather than rejected. Non-integers are rejected.
    """
    limit: int = DEFAULT_LIMIT
    offset: int = 0

    @field_validator("limit", "offset", mode="before")
    @classmethod
    def blank_to_default(cls, v, info):
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_LIMIT if info.field_name == "limit" else 0
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("limit")
    @classmethod
    def clamp_limit(cls, v: int) -> int:
        return min(max(1, v), MAX_LIMIT)

    @field_validator("offset")
    @classmethod
    def clamp_offset(cls, v: int) -> int:
        return min(max(0, v), MAX_OFFSET)
