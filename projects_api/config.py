# projects_api/config.py
# Environment-aware configuration for the Projects API

import logging
import os
from typing import List, Literal

log = logging.getLogger(__name__)

# Environment detection
ENV: Literal["dev", "staging", "prod"] = os.environ.get("ENV", "dev")  # type: ignore
IS_DEV = (ENV == "dev")
IS_STAGING = (ENV == "staging")
IS_PROD = (ENV == "prod")

# JWT configuration
_DEV_SECRET_KEY = "dev-secret-key-change-me"
SECRET_KEY = os.environ.get("SECRET_KEY", _DEV_SECRET_KEY)
ALGORITHM = "HS256"

# Token lifetime (default 24h)
ACCESS_TOKEN_MINUTES = int(os.environ.get("ACCESS_TOKEN_MINUTES", "1440"))

# Database configuration
# Any SQLAlchemy URL works; Postgres in production, SQLite file for local dev
DATABASE_URL = os.environ.get("DATABASE_URL", "").strip() or "sqlite:///projects.db"
IS_POSTGRES = DATABASE_URL.startswith(("postgres://", "postgresql://", "postgresql+"))
IS_SQLITE = DATABASE_URL.startswith("sqlite")

# Rate limiting for /auth/register and /auth/login (20 requests / 15 minutes)
AUTH_RATE_LIMIT_WINDOW_SECONDS = int(os.environ.get("AUTH_RATE_LIMIT_WINDOW_SECONDS", "900"))
AUTH_RATE_LIMIT_MAX_REQUESTS = int(os.environ.get("AUTH_RATE_LIMIT_MAX_REQUESTS", "20"))
RATE_LIMIT_SWEEP_SECONDS = int(os.environ.get("RATE_LIMIT_SWEEP_SECONDS", "60"))

# Validation rules
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 1024
MIN_TITLE_LENGTH = 3

# Pagination
DEFAULT_LIMIT = 10
MAX_LIMIT = 50
# Largest OFFSET a 64-bit SQL integer column accepts
MAX_OFFSET = 2**63 - 1

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
PORT = int(os.environ.get("PORT", "8000"))

# CORS origins (expand for staging/prod)
CORS_ORIGINS: List[str] = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

if IS_STAGING or IS_PROD:
    extra_origins = os.environ.get("CORS_ORIGINS", "")
    if extra_origins:
        CORS_ORIGINS.extend(o.strip() for o in extra_origins.split(",") if o.strip())


def validate_config() -> None:
    """
    Fail fast on unsafe configuration.

    Dev may run on the built-in secret; staging/prod must provide a real one.
    """
    if IS_DEV:
        return
    if SECRET_KEY == _DEV_SECRET_KEY:
        raise RuntimeError("SECRET_KEY must be set outside of dev")
    if len(SECRET_KEY) < 10:
        raise RuntimeError("SECRET_KEY must be at least 10 characters")


def describe() -> None:
    log.info("[CONFIG] Environment: %s", ENV)
    log.info("[CONFIG] Database: %s", "PostgreSQL" if IS_POSTGRES else "SQLite (local dev)" if IS_SQLITE else "other")
    log.info("[CONFIG] Access token: %s minutes", ACCESS_TOKEN_MINUTES)
    log.info(
        "[CONFIG] Auth rate limit: %s requests / %s seconds",
        AUTH_RATE_LIMIT_MAX_REQUESTS,
        AUTH_RATE_LIMIT_WINDOW_SECONDS,
    )
