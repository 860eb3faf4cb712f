"""
projects_api/routes_projects.py

Project CRUD endpoints scoped to the authenticated owner.

Security guarantees:
- All endpoints require authentication (require_auth_context)
- owner_id comes from the token ONLY, never from the client
- Unknown id -> 404 NOT_FOUND; someone else's project -> 403 FORBIDDEN
- Input validation via Pydantic schemas
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from projects_api.auth_context import AuthContext, require_auth_context
from projects_api.dependencies import get_project_service, pagination_params
from projects_api.errors import success
from projects_api.schemas_common import Envelope, MessageResponse, Page, PaginationQuery
from projects_api.schemas_projects import ProjectCreateRequest, ProjectResponse, ProjectUpdateRequest
from projects_api.services_projects import ProjectService

router = APIRouter(
    prefix="/projects",
    tags=["projects"],
    dependencies=[Depends(require_auth_context)],
)


@router.post("", status_code=201, response_model=Envelope[ProjectResponse])
def create_project(
    request: ProjectCreateRequest,
    ctx: AuthContext = Depends(require_auth_context),
    service: ProjectService = Depends(get_project_service),
):
    """Create a project owned by the caller. status defaults to "todo"."""
    project = service.create_project(
        owner_id=ctx.user_id,
        title=request.title,
        description=request.description,
        status=request.status,
    )
    return success(project)


@router.get("", response_model=Envelope[Page[ProjectResponse]])
def list_projects(
    page: PaginationQuery = Depends(pagination_params),
    ctx: AuthContext = Depends(require_auth_context),
    service: ProjectService = Depends(get_project_service),
):
    """
    List the caller's projects, newest first.

    total counts all of the caller's projects, independent of limit/offset.
    """
    return success(service.list_owned_projects(ctx.user_id, limit=page.limit, offset=page.offset))


@router.get("/{project_id}", response_model=Envelope[ProjectResponse])
def get_project(
    project_id: str = Path(..., description="Project ID"),
    ctx: AuthContext = Depends(require_auth_context),
    service: ProjectService = Depends(get_project_service),
):
    return success(service.get_project(project_id, ctx.user_id))


@router.patch("/{project_id}", response_model=Envelope[ProjectResponse])
def update_project(
    request: ProjectUpdateRequest,
    project_id: str = Path(..., description="Project ID"),
    ctx: AuthContext = Depends(require_auth_context),
    service: ProjectService = Depends(get_project_service),
):
    """Partial update: fields left out of the body keep their current values."""
    fields = request.model_dump(exclude_unset=True)
    return success(service.update_project(project_id, ctx.user_id, fields))


@router.delete("/{project_id}", response_model=Envelope[MessageResponse])
def delete_project(
    project_id: str = Path(..., description="Project ID to delete"),
    ctx: AuthContext = Depends(require_auth_context),
    service: ProjectService = Depends(get_project_service),
):
    service.delete_project(project_id, ctx.user_id)
    return success({"message": "Project deleted successfully"})
