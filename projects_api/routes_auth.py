"""
projects_api/routes_auth.py

Registration, login and current-user endpoints.

- POST /auth/register and POST /auth/login are rate limited per client
- GET /auth/me requires a bearer token
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from projects_api.auth_context import AuthContext, require_auth_context
from projects_api.dependencies import auth_rate_limit, get_auth_service
from projects_api.errors import success
from projects_api.schemas_auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from projects_api.schemas_common import Envelope
from projects_api.services_auth import AuthService

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post(
    "/register",
    status_code=201,
    response_model=Envelope[AuthResponse],
    dependencies=[Depends(auth_rate_limit)],
)
def register(
    request: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
):
    """
    Create a user account and return it with a fresh token.

    Raises:
        400 VALIDATION_ERROR: bad name/email/password
        409 CONFLICT: email already registered
        429 RATE_LIMIT_EXCEEDED
    """
    result = service.register(request.name, request.email, request.password)
    return success(result)


@router.post(
    "/login",
    response_model=Envelope[AuthResponse],
    dependencies=[Depends(auth_rate_limit)],
)
def login(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Exchange email + password for a token. Wrong email and wrong password look the same."""
    result = service.login(request.email, request.password)
    return success(result)


@router.get("/me", response_model=Envelope[UserResponse])
def me(
    ctx: AuthContext = Depends(require_auth_context),
    service: AuthService = Depends(get_auth_service),
):
    return success(service.get_current_user(ctx.user_id))
