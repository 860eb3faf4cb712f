"""
projects_api/models.py

Domain enums and the pydantic row models the stores return.
User carries the password hash and never leaves the service layer;
response schemas live in schemas_*.py.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel


# Enums
class UserRole(str, Enum):
    user = "user"
    admin = "admin"


class ProjectStatus(str, Enum):
    todo = "todo"
    doing = "doing"
    done = "done"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# Models
class User(BaseModel):
    id: str
    name: str
    email: str
    password_hash: str
    role: UserRole = UserRole.user
    created_at: str
    updated_at: str


class Project(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.todo
    owner_id: str
    created_at: str
    updated_at: str


class OwnerSummary(BaseModel):
    id: str
    name: str
    email: str


class ProjectWithOwner(Project):
    owner: OwnerSummary


class SessionClaim(BaseModel):
    """Decoded bearer token: who is calling and with which role."""
    user_id: str
    role: UserRole
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin
