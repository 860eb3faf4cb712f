# ---------------------------------------------------------
# projects_api/main.py
# Projects API - users, JWT sessions and owner-scoped projects
#
# Run: uvicorn projects_api.main:app --reload (from repo root)
#
# - FastAPI + SQLAlchemy (SQLite locally, PostgreSQL in production)
# - /auth/register, /auth/login : rate limited, return a bearer token
# - /auth/me                    : current user
# - /projects                   : CRUD over the caller's own projects
# - /admin/projects             : admin listing / deletion across owners
# - /health                     : liveness
# - /docs, /openapi.json        : generated API documentation
# ---------------------------------------------------------

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from projects_api import config
from projects_api.db import create_engine_for
from projects_api.errors import register_exception_handlers, success
from projects_api.migrate import run_migrations
from projects_api.rate_limit import RateLimiter
from projects_api.routes_admin import router as admin_router
from projects_api.routes_auth import router as auth_router
from projects_api.routes_projects import router as projects_router
from projects_api.schemas_common import Envelope, HealthResponse
from projects_api.security import Argon2PasswordHasher, TokenCodec
from projects_api.services_auth import AuthService
from projects_api.services_projects import ProjectService
from projects_api.store import ProjectStore, UserStore

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)


def create_app(
    database_url: Optional[str] = None,
    hasher: Optional[Argon2PasswordHasher] = None,
) -> FastAPI:
    """
    Build the application and wire its collaborators once:
    engine -> stores, hasher, token codec -> services -> app.state.
    """
    config.validate_config()
    config.describe()

    app = FastAPI(title="Projects API", version="1.0.0")

    # CORS configuration from config module
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS if config.IS_PROD else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    engine = create_engine_for(database_url)
    run_migrations(engine)

    token_codec = TokenCodec(
        secret_key=config.SECRET_KEY,
        algorithm=config.ALGORITHM,
        expires_minutes=config.ACCESS_TOKEN_MINUTES,
    )
    app.state.engine = engine
    app.state.token_codec = token_codec
    app.state.auth_service = AuthService(
        users=UserStore(engine),
        hasher=hasher or Argon2PasswordHasher(),
        tokens=token_codec,
    )
    app.state.project_service = ProjectService(ProjectStore(engine), UserStore(engine))
    app.state.auth_rate_limiter = RateLimiter(
        max_requests=config.AUTH_RATE_LIMIT_MAX_REQUESTS,
        window_seconds=config.AUTH_RATE_LIMIT_WINDOW_SECONDS,
        sweep_seconds=config.RATE_LIMIT_SWEEP_SECONDS,
    )

    register_exception_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000
        log.info(
            "[REQUEST] %s %s -> %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response

    @app.get("/health", response_model=Envelope[HealthResponse], tags=["health"])
    def health():
        return success({"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()})

    app.include_router(auth_router)
    app.include_router(projects_router)
    app.include_router(admin_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("projects_api.main:app", host="0.0.0.0", port=config.PORT)
