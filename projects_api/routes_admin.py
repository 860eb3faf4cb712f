"""
projects_api/routes_admin.py

Admin-only project endpoints. The admin role check replaces the
ownership check: an admin may list and delete any user's projects.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from projects_api.dependencies import get_project_service, pagination_params, require_admin
from projects_api.errors import success
from projects_api.schemas_common import Envelope, MessageResponse, Page, PaginationQuery
from projects_api.schemas_projects import ProjectWithOwnerResponse
from projects_api.services_projects import ProjectService

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("/projects", response_model=Envelope[Page[ProjectWithOwnerResponse]])
def list_all_projects(
    page: PaginationQuery = Depends(pagination_params),
    service: ProjectService = Depends(get_project_service),
):
    """All projects across owners, newest first, each with an owner summary."""
    return success(service.admin_list_all_projects(limit=page.limit, offset=page.offset))


@router.delete("/projects/{project_id}", response_model=Envelope[MessageResponse])
def delete_any_project(
    project_id: str = Path(..., description="Project ID to delete"),
    service: ProjectService = Depends(get_project_service),
):
    service.admin_delete_project(project_id)
    return success({"message": "Project deleted successfully"})
