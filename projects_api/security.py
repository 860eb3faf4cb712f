"""
projects_api/security.py

Password hashing (argon2) and the bearer token codec (JWT).

Neither piece touches the database or the request; services receive
instances at startup.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError

from projects_api.models import SessionClaim, UserRole


# ---------------------------------------------------------
# Password hashing
# ---------------------------------------------------------
class Argon2PasswordHasher:
    """One-way password hashing with constant-time verification."""

    def __init__(self, time_cost: Optional[int] = None, memory_cost: Optional[int] = None):
        kwargs = {}
        if time_cost is not None:
            kwargs["time_cost"] = time_cost
        if memory_cost is not None:
            kwargs["memory_cost"] = memory_cost
        self._ph = PasswordHasher(**kwargs)
        # Verified when the email is unknown so both login failures cost the same
        self.dummy_hash = self._ph.hash("dummy-password-for-timing-attack-prevention")

    def hash(self, password: str) -> str:
        return self._ph.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return self._ph.verify(password_hash, password)
        except (VerifyMismatchError, InvalidHashError):
            return False


# ---------------------------------------------------------
# JWT token codec
# ---------------------------------------------------------
class TokenError(Exception):
    """Token is invalid, expired, or carries a malformed claim."""


class TokenCodec:
    def __init__(self, secret_key: str, algorithm: str = "HS256", expires_minutes: int = 1440):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes

    def sign(self, user_id: str, role: UserRole) -> str:
        """Create a signed access token carrying subject id and role."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "role": role.value if isinstance(role, UserRole) else str(role),
            "iat": now,
            "exp": now + timedelta(minutes=self.expires_minutes),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> SessionClaim:
        """
        Decode and validate a token.

        Raises:
            TokenError: bad signature, expired, malformed, or unknown role
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenError("Token expired")
        except jwt.InvalidTokenError as e:
            raise TokenError(f"Invalid token: {e}")

        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise TokenError("Invalid token payload")

        try:
            role = UserRole(payload.get("role"))
        except ValueError:
            raise TokenError("Invalid role in token")

        return SessionClaim(
            user_id=user_id,
            role=role,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
