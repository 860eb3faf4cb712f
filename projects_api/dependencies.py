"""
projects_api/dependencies.py

Reusable FastAPI dependencies: role enforcement, service providers,
pagination parsing and auth rate limiting.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import Depends, Query, Request, Response
from pydantic import ValidationError

from projects_api.auth_context import AuthContext, require_auth_context
from projects_api.errors import ApiError, ErrorCode, validation_error
from projects_api.models import UserRole
from projects_api.rate_limit import RateLimiter
from projects_api.schemas_common import PaginationQuery
from projects_api.services_auth import AuthService
from projects_api.services_projects import ProjectService

log = logging.getLogger(__name__)


def require_role(role: UserRole) -> Callable:
    """
    Dependency factory for role authorization.

    Composes after require_auth_context, so an unauthenticated request is
    still UNAUTHORIZED; an authenticated caller with another role gets
    FORBIDDEN.

    Usage in routes:
        @router.get("/projects", dependencies=[Depends(require_role(UserRole.admin))])
    """
    def _check_role(ctx: AuthContext = Depends(require_auth_context)) -> AuthContext:
        if ctx.role != role:
            log.info("[AUTHZ] Role denied: user_id=%s role=%s required=%s", ctx.user_id, ctx.role.value, role.value)
            raise ApiError(ErrorCode.FORBIDDEN, f"{role.value.capitalize()} access required.")
        return ctx

    return _check_role


require_admin = require_role(UserRole.admin)


# ---------------------------------------------------------
# Service providers (wired once in create_app)
# ---------------------------------------------------------
def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_project_service(request: Request) -> ProjectService:
    return request.app.state.project_service


# ---------------------------------------------------------
# Pagination
# ---------------------------------------------------------
def pagination_params(
    limit: Optional[str] = Query(None, description="Page size (default 10, clamped to 1..50)"),
    offset: Optional[str] = Query(None, description="Rows to skip (default 0, minimum 0)"),
) -> PaginationQuery:
    try:
        return PaginationQuery.model_validate({"limit": limit, "offset": offset})
    except ValidationError as e:
        raise validation_error(e.errors())


# ---------------------------------------------------------
# Rate limiting
# ---------------------------------------------------------
def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def auth_rate_limit(request: Request, response: Response) -> None:
    """Count this request against the caller's auth window; 429 once exhausted."""
    limiter: RateLimiter = request.app.state.auth_rate_limiter
    status = limiter.hit(client_key(request))
    headers = status.headers()
    # Error handlers re-attach these when the route itself fails
    request.state.rate_limit_headers = headers
    if not status.allowed:
        raise ApiError(
            ErrorCode.RATE_LIMIT_EXCEEDED,
            "Too many requests. Please try again later.",
            headers=headers,
        )
    for name, value in headers.items():
        response.headers[name] = value
