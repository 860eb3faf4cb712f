"""
projects_api/schemas_projects.py

Pydantic schemas for the project resource.

Security notes:
- owner_id is never accepted from the client; it comes from the token
- title is trimmed before its length is checked
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from projects_api.config import MIN_TITLE_LENGTH
from projects_api.models import OwnerSummary, ProjectStatus


def _check_title(v: str) -> str:
    v = v.strip()
    if len(v) < MIN_TITLE_LENGTH:
        raise ValueError(f"Title must be at least {MIN_TITLE_LENGTH} characters")
    return v


class ProjectCreateRequest(BaseModel):
    title: str = Field(..., description=f"Project title (min {MIN_TITLE_LENGTH} chars)")
    description: Optional[str] = Field(None, description="Free-form description")
    status: ProjectStatus = Field(ProjectStatus.todo, description="todo | doing | done (default todo)")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _check_title(v)


class ProjectUpdateRequest(BaseModel):
    """
    Partial update. Only keys present in the body are written; use
    model_dump(exclude_unset=True) to get them. description may be set to
    null to clear it, title and status may not.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("Title cannot be null")
        return _check_title(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[ProjectStatus]) -> ProjectStatus:
        if v is None:
            raise ValueError("Status cannot be null")
        return v


class ProjectResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    status: ProjectStatus
    owner_id: str
    created_at: str
    updated_at: str


class ProjectWithOwnerResponse(ProjectResponse):
    owner: OwnerSummary
