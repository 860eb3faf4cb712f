"""
projects_api/auth_context.py

Authentication stage of the authorization gate.

Contains:
- AuthContext: the decoded session claim (user id + role) for a request
- require_auth_context: FastAPI dependency enforcing "Authorization: Bearer <token>"

Missing header, wrong prefix, bad signature, expiry and malformed claims
all fail with the same UNAUTHORIZED code. The claim is the only identity
source for protected routes; never trust ids from bodies or query params.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from projects_api.errors import ApiError, ErrorCode
from projects_api.models import SessionClaim
from projects_api.security import TokenCodec, TokenError

log = logging.getLogger(__name__)

# Declares the bearer scheme for OpenAPI; the header itself is parsed below
security = HTTPBearer(auto_error=False, bearerFormat="JWT")

BEARER_PREFIX = "Bearer "

AuthContext = SessionClaim


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def require_auth_context(
    request: Request,
    _credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    codec: TokenCodec = Depends(get_token_codec),
) -> AuthContext:
    """
    Auth context dependency for protected routes.

    Usage:
        @router.get("/protected")
        def protected_route(ctx: AuthContext = Depends(require_auth_context)):
            ...

    Raises:
        ApiError(UNAUTHORIZED): header missing/malformed or token rejected
    """
    header = request.headers.get("Authorization")
    if not header or not header.startswith(BEARER_PREFIX):
        raise ApiError(
            ErrorCode.UNAUTHORIZED,
            "Authentication required. Please provide a valid Bearer token.",
        )

    token = header[len(BEARER_PREFIX):]
    try:
        ctx = codec.verify(token)
    except TokenError as e:
        log.info("[AUTH] Token rejected: %s", e)
        raise ApiError(ErrorCode.UNAUTHORIZED, "Invalid or expired token.")

    request.state.auth_context = ctx
    return ctx
