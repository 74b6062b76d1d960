"""
JWT token creation / verification and password hashing (bcrypt).

Every token carries a ``user_type`` claim naming its session namespace so
a company token can never authenticate a user endpoint and vice versa.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from jobboard.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

_ALGORITHM = settings.ALGORITHM
_SECRET = settings.SECRET_KEY


# ── Passwords ───────────────────────────────────────────────────────
def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def get_password_hash(plain: str) -> str:
    return pwd_context.hash(plain)


# ── JWT tokens ──────────────────────────────────────────────────────
def create_access_token(
    subject: str | Any,
    user_type: str = "user",
    expires_delta: timedelta | None = None,
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return jwt.encode(
        {"exp": expire, "sub": str(subject), "type": "access", "user_type": user_type},
        _SECRET,
        algorithm=_ALGORITHM,
    )


def create_refresh_token(subject: str | Any, user_type: str = "user") -> str:
    expire = datetime.now(timezone.utc) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return jwt.encode(
        {"exp": expire, "sub": str(subject), "type": "refresh", "user_type": user_type},
        _SECRET,
        algorithm=_ALGORITHM,
    )


def _decode(token: str, token_kind: str, user_type: str) -> dict | None:
    try:
        payload = jwt.decode(token, _SECRET, algorithms=[_ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != token_kind or payload.get("user_type") != user_type:
        return None
    return payload


def decode_access_token(token: str, user_type: str = "user") -> dict | None:
    """Return payload dict if *access* token is valid for ``user_type``, else ``None``."""
    return _decode(token, "access", user_type)


def decode_refresh_token(token: str, user_type: str = "user") -> dict | None:
    """Return payload dict if *refresh* token is valid for ``user_type``, else ``None``."""
    return _decode(token, "refresh", user_type)
