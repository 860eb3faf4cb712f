"""
projects_api/services_projects.py

Ownership-scoped project operations plus the admin overrides.

Check order for single-project operations is fixed:
    1. existence  -> NOT_FOUND if the id does not resolve
    2. ownership  -> FORBIDDEN if the caller is not the owner
Admin operations skip step 2; the admin role check on the route gates them.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from projects_api.errors import ApiError, ErrorCode
from projects_api.models import Project, ProjectStatus
from projects_api.schemas_common import Page
from projects_api.schemas_projects import ProjectResponse, ProjectWithOwnerResponse
from projects_api.store import ProjectStore, UserStore

log = logging.getLogger(__name__)

PROJECT_NOT_FOUND = "Project not found."
USER_NOT_FOUND = "User not found."


def _to_response(project: Project) -> ProjectResponse:
    return ProjectResponse(**project.model_dump())


class ProjectService:
    def __init__(self, projects: ProjectStore, users: UserStore):
        self.projects = projects
        self.users = users

    # ---------------------------------------------------------
    # Owner operations
    # ---------------------------------------------------------
    def create_project(
        self,
        owner_id: str,
        title: str,
        description: Optional[str] = None,
        status: Optional[ProjectStatus] = None,
    ) -> ProjectResponse:
        if self.users.find_by_id(owner_id) is None:
            # Token outlived its account
            raise ApiError(ErrorCode.NOT_FOUND, USER_NOT_FOUND)
        project = self.projects.create(
            owner_id=owner_id,
            title=title,
            description=description,
            status=status or ProjectStatus.todo,
        )
        log.info("[PROJECTS] Created project_id=%s owner_id=%s", project.id, owner_id)
        return _to_response(project)

    def list_owned_projects(self, owner_id: str, limit: int, offset: int) -> Page[ProjectResponse]:
        items = self.projects.list_by_owner(owner_id, limit=limit, offset=offset)
        total = self.projects.count_by_owner(owner_id)
        return Page[ProjectResponse](
            items=[_to_response(p) for p in items],
            total=total,
            limit=limit,
            offset=offset,
        )

    def get_project(self, project_id: str, requester_id: str) -> ProjectResponse:
        project = self._load_owned(project_id, requester_id, "access")
        return _to_response(project)

    def update_project(self, project_id: str, requester_id: str, fields: Dict[str, Any]) -> ProjectResponse:
        """
        Apply a partial update: only keys present in `fields` are written.
        An empty patch returns the project untouched.
        """
        project = self._load_owned(project_id, requester_id, "modify")
        if not fields:
            return _to_response(project)

        updated = self.projects.update(project_id, fields)
        log.info("[PROJECTS] Updated project_id=%s fields=%s", project_id, sorted(fields))
        return _to_response(updated)

    def delete_project(self, project_id: str, requester_id: str) -> None:
        self._load_owned(project_id, requester_id, "delete")
        self.projects.delete(project_id)
        log.info("[PROJECTS] Deleted project_id=%s", project_id)

    # ---------------------------------------------------------
    # Admin operations (no ownership check)
    # ---------------------------------------------------------
    def admin_list_all_projects(self, limit: int, offset: int) -> Page[ProjectWithOwnerResponse]:
        items = self.projects.list_with_owner(limit=limit, offset=offset)
        total = self.projects.count_all()
        return Page[ProjectWithOwnerResponse](
            items=[ProjectWithOwnerResponse(**p.model_dump()) for p in items],
            total=total,
            limit=limit,
            offset=offset,
        )

    def admin_delete_project(self, project_id: str) -> None:
        if self.projects.find_by_id(project_id) is None:
            raise ApiError(ErrorCode.NOT_FOUND, PROJECT_NOT_FOUND)
        self.projects.delete(project_id)
        log.info("[ADMIN] Deleted project_id=%s", project_id)

    # ---------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------
    def _load_owned(self, project_id: str, requester_id: str, verb: str) -> Project:
        project = self.projects.find_by_id(project_id)
        if project is None:
            raise ApiError(ErrorCode.NOT_FOUND, PROJECT_NOT_FOUND)
        if project.owner_id != requester_id:
            log.info(
                "[SECURITY] Ownership denied: project_id=%s requester_id=%s verb=%s",
                project_id,
                requester_id,
                verb,
            )
            raise ApiError(
                ErrorCode.FORBIDDEN,
                f"You do not have permission to {verb} this project.",
            )
        return project
