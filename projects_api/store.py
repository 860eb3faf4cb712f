"""
projects_api/store.py

Data access for users and projects.

Every query is parameterized. Stores hold an engine and open one short
transaction per call; there is no cross-call transaction and no locking,
so concurrent updates to the same row are last-write-wins.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from projects_api.db import connection
from projects_api.models import (
    OwnerSummary,
    Project,
    ProjectStatus,
    ProjectWithOwner,
    User,
    UserRole,
    utc_now_iso,
)

PROJECT_COLUMNS = "id, title, description, status, owner_id, created_at, updated_at"
UPDATABLE_PROJECT_FIELDS = ("title", "description", "status")


class RecordNotFoundError(Exception):
    """A write targeted a row that does not exist (anymore)."""


def new_id() -> str:
    return str(uuid.uuid4())


def _enum_value(value: Any) -> Any:
    return value.value if hasattr(value, "value") else value


class UserStore:
    def __init__(self, engine: Engine):
        self.engine = engine

    def find_by_email(self, email: str) -> Optional[User]:
        # Exact, case-sensitive match
        with connection(self.engine) as conn:
            row = conn.execute(
                text("SELECT * FROM users WHERE email = :email"),
                {"email": email},
            ).mappings().first()
        return User(**row) if row else None

    def find_by_id(self, user_id: str) -> Optional[User]:
        with connection(self.engine) as conn:
            row = conn.execute(
                text("SELECT * FROM users WHERE id = :id"),
                {"id": user_id},
            ).mappings().first()
        return User(**row) if row else None

    def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: UserRole = UserRole.user,
        user_id: Optional[str] = None,
    ) -> User:
        """
        Insert a user. A duplicate email surfaces as sqlalchemy IntegrityError
        from the unique index; callers map it to CONFLICT.
        """
        now = utc_now_iso()
        user = User(
            id=user_id or new_id(),
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            created_at=now,
            updated_at=now,
        )
        with connection(self.engine) as conn:
            conn.execute(
                text(
                    """
                    INSERT INTO users (id, name, email, password_hash, role, created_at, updated_at)
                    VALUES (:id, :name, :email, :password_hash, :role, :created_at, :updated_at)
                    """
                ),
                {**user.model_dump(), "role": _enum_value(user.role)},
            )
        return user


class ProjectStore:
    def __init__(self, engine: Engine):
        self.engine = engine

    def create(
        self,
        owner_id: str,
        title: str,
        description: Optional[str] = None,
        status: ProjectStatus = ProjectStatus.todo,
        project_id: Optional[str] = None,
    ) -> Project:
        now = utc_now_iso()
        project = Project(
            id=project_id or new_id(),
            title=title,
            description=description,
            status=status,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )
        with connection(self.engine) as conn:
            conn.execute(
                text(
                    f"""
                    INSERT INTO projects ({PROJECT_COLUMNS})
                    VALUES (:id, :title, :description, :status, :owner_id, :created_at, :updated_at)
                    """
                ),
                {**project.model_dump(), "status": _enum_value(project.status)},
            )
        return project

    def find_by_id(self, project_id: str) -> Optional[Project]:
        with connection(self.engine) as conn:
            row = conn.execute(
                text(f"SELECT {PROJECT_COLUMNS} FROM projects WHERE id = :id"),
                {"id": project_id},
            ).mappings().first()
        return Project(**row) if row else None

    def list_by_owner(self, owner_id: str, limit: int, offset: int) -> List[Project]:
        """Owner's projects, newest first."""
        with connection(self.engine) as conn:
            rows = conn.execute(
                text(
                    f"""
                    SELECT {PROJECT_COLUMNS}
                    FROM projects
                    WHERE owner_id = :owner_id
                    ORDER BY created_at DESC, id DESC
                    LIMIT :limit OFFSET :offset
                    """
                ),
                {"owner_id": owner_id, "limit": limit, "offset": offset},
            ).mappings().all()
        return [Project(**row) for row in rows]

    def count_by_owner(self, owner_id: str) -> int:
        with connection(self.engine) as conn:
            return conn.execute(
                text("SELECT COUNT(*) FROM projects WHERE owner_id = :owner_id"),
                {"owner_id": owner_id},
            ).scalar_one()

    def update(self, project_id: str, fields: Mapping[str, Any]) -> Project:
        """
        Overwrite only the given columns (title/description/status) and bump
        updated_at. Raises RecordNotFoundError if the row is gone.
        """
        unknown = set(fields) - set(UPDATABLE_PROJECT_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update project fields: {sorted(unknown)}")

        params: Dict[str, Any] = {key: _enum_value(value) for key, value in fields.items()}
        params["id"] = project_id
        params["updated_at"] = utc_now_iso()
        assignments = ", ".join(f"{key} = :{key}" for key in fields)
        assignments = f"{assignments}, updated_at = :updated_at" if assignments else "updated_at = :updated_at"

        with connection(self.engine) as conn:
            result = conn.execute(
                text(f"UPDATE projects SET {assignments} WHERE id = :id"),
                params,
            )
            if result.rowcount == 0:
                raise RecordNotFoundError(f"project {project_id} not found")
            row = conn.execute(
                text(f"SELECT {PROJECT_COLUMNS} FROM projects WHERE id = :id"),
                {"id": project_id},
            ).mappings().one()
        return Project(**row)

    def delete(self, project_id: str) -> None:
        with connection(self.engine) as conn:
            result = conn.execute(
                text("DELETE FROM projects WHERE id = :id"),
                {"id": project_id},
            )
            if result.rowcount == 0:
                raise RecordNotFoundError(f"project {project_id} not found")

    def list_with_owner(self, limit: int, offset: int) -> List[ProjectWithOwner]:
        """All projects across owners, newest first, each with an owner summary."""
        with connection(self.engine) as conn:
            rows = conn.execute(
                text(
                    """
                    SELECT
                        p.id, p.title, p.description, p.status, p.owner_id,
                        p.created_at, p.updated_at,
                        u.name AS owner_name, u.email AS owner_email
                    FROM projects p
                    JOIN users u ON u.id = p.owner_id
                    ORDER BY p.created_at DESC, p.id DESC
                    LIMIT :limit OFFSET :offset
                    """
                ),
                {"limit": limit, "offset": offset},
            ).mappings().all()

        items = []
        for row in rows:
            data = dict(row)
            owner = OwnerSummary(
                id=data["owner_id"],
                name=data.pop("owner_name"),
                email=data.pop("owner_email"),
            )
            items.append(ProjectWithOwner(**data, owner=owner))
        return items

    def count_all(self) -> int:
        with connection(self.engine) as conn:
            return conn.execute(text("SELECT COUNT(*) FROM projects")).scalar_one()
