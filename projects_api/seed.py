# projects_api/seed.py
# Seed an admin, a normal user and two sample projects (idempotent)
# Run: python -m projects_api.seed

import logging
from typing import Optional

from sqlalchemy.engine import Engine

from projects_api.db import create_engine_for
from projects_api.migrate import run_migrations
from projects_api.models import ProjectStatus, User, UserRole
from projects_api.security import Argon2PasswordHasher
from projects_api.store import ProjectStore, UserStore

log = logging.getLogger(__name__)

SEED_USERS = [
    {"name": "Admin User", "email": "admin@example.com", "password": "Admin@1234", "role": UserRole.admin},
    {"name": "Normal User", "email": "user@example.com", "password": "User@1234", "role": UserRole.user},
]

SEED_PROJECTS = [
    {
        "id": "sample-project-1",
        "title": "Sample Project 1",
        "description": "This is a sample project in todo status",
        "status": ProjectStatus.todo,
    },
    {
        "id": "sample-project-2",
        "title": "Sample Project 2",
        "description": "This project is in progress",
        "status": ProjectStatus.doing,
    },
]


def _ensure_user(users: UserStore, hasher: Argon2PasswordHasher, entry: dict) -> User:
    existing = users.find_by_email(entry["email"])
    if existing:
        log.info("[SEED] User exists: %s", entry["email"])
        return existing
    user = users.create(
        name=entry["name"],
        email=entry["email"],
        password_hash=hasher.hash(entry["password"]),
        role=entry["role"],
    )
    log.info("[SEED] Created user: %s (%s)", user.email, user.role.value)
    return user


def seed_all(engine: Engine, hasher: Optional[Argon2PasswordHasher] = None) -> None:
    hasher = hasher or Argon2PasswordHasher()
    users = UserStore(engine)
    projects = ProjectStore(engine)

    seeded = [_ensure_user(users, hasher, entry) for entry in SEED_USERS]
    owner = next(u for u in seeded if u.role == UserRole.user)

    for entry in SEED_PROJECTS:
        if projects.find_by_id(entry["id"]):
            log.info("[SEED] Project exists: %s", entry["id"])
            continue
        projects.create(
            owner_id=owner.id,
            title=entry["title"],
            description=entry["description"],
            status=entry["status"],
            project_id=entry["id"],
        )
        log.info("[SEED] Created project: %s", entry["title"])


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    engine = create_engine_for()
    run_migrations(engine)
    seed_all(engine)
    log.info("[SEED] Seeding completed")
