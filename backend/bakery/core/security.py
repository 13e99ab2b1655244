"""Dashboard credentials: bcrypt password hashes and signed bearer tokens."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import bcrypt
from jose import JWTError, jwt

from bakery.core.config import get_settings

TOKEN_TYPE = "schedule-dashboard"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    user_id: uuid.UUID
    role: str
    expires_at: datetime


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str | None) -> bool:
    """True when ``password`` matches the stored hash; malformed hashes never match."""
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        return False


def issue_dashboard_token(
    user_id: uuid.UUID, role: str, *, ttl: timedelta | None = None
) -> str:
    """Sign a bearer token for a schedule dashboard user."""
    settings = get_settings()
    issued = datetime.now(UTC)
    if ttl is None:
        ttl = timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        "sub": str(user_id),
        "role": role,
        "typ": TOKEN_TYPE,
        "iat": issued,
        "exp": issued + ttl,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def read_dashboard_token(token: str) -> TokenClaims:
    """Verify ``token`` and return its claims.

    Raises ``JWTError`` for bad signatures, expired tokens and tokens that
    were not issued to a dashboard user.
    """
    settings = get_settings()
    payload = jwt.decode(
        token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
    )
    if payload.get("typ") != TOKEN_TYPE:
        raise JWTError("Token was not issued for the schedule dashboard")
    try:
        user_id = uuid.UUID(str(payload["sub"]))
    except (KeyError, ValueError) as exc:
        raise JWTError("Token subject is not a user id") from exc
    return TokenClaims(
        user_id=user_id,
        role=str(payload.get("role", "")),
        expires_at=datetime.fromtimestamp(payload["exp"], UTC),
    )
