"""
projects_api/services_auth.py

Registration, login and current-user lookup.

Business rules:
- emails are unique (pre-checked, and a late unique-index violation from a
  concurrent registration is also reported as CONFLICT)
- passwords are hashed before storage and never logged
- a wrong email and a wrong password fail identically
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from projects_api.errors import ApiError, ErrorCode
from projects_api.models import UserRole
from projects_api.schemas_auth import AuthResponse, UserResponse
from projects_api.security import Argon2PasswordHasher, TokenCodec
from projects_api.store import UserStore

log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."
EMAIL_TAKEN = "A user with this email already exists."


class AuthService:
    def __init__(self, users: UserStore, hasher: Argon2PasswordHasher, tokens: TokenCodec):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    def register(self, name: str, email: str, password: str) -> AuthResponse:
        if self.users.find_by_email(email) is not None:
            log.info("[REGISTER] Rejected duplicate email")
            raise ApiError(ErrorCode.CONFLICT, EMAIL_TAKEN)

        password_hash = self.hasher.hash(password)
        try:
            user = self.users.create(
                name=name,
                email=email,
                password_hash=password_hash,
                role=UserRole.user,
            )
        except IntegrityError:
            # Lost the race against a concurrent registration
            log.info("[REGISTER] Duplicate email caught by unique index")
            raise ApiError(ErrorCode.CONFLICT, EMAIL_TAKEN)

        log.info("[REGISTER] User created: user_id=%s", user.id)
        token = self.tokens.sign(user.id, user.role)
        return AuthResponse(user=UserResponse.from_user(user), token=token)

    def login(self, email: str, password: str) -> AuthResponse:
        user = self.users.find_by_email(email)

        if user is None:
            # Same hashing work as a real check, then the same failure
            self.hasher.verify(password, self.hasher.dummy_hash)
            log.info("[LOGIN] Failed login")
            raise ApiError(ErrorCode.UNAUTHORIZED, INVALID_CREDENTIALS)

        if not self.hasher.verify(password, user.password_hash):
            log.info("[LOGIN] Failed login")
            raise ApiError(ErrorCode.UNAUTHORIZED, INVALID_CREDENTIALS)

        log.info("[LOGIN] User logged in: user_id=%s", user.id)
        token = self.tokens.sign(user.id, user.role)
        return AuthResponse(user=UserResponse.from_user(user), token=token)

    def get_current_user(self, user_id: str) -> UserResponse:
        user = self.users.find_by_id(user_id)
        if user is None:
            # Token still valid but the account is gone
            raise ApiError(ErrorCode.NOT_FOUND, "User not found.")
        return UserResponse.from_user(user)
