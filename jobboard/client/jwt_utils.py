"""
Unverified JWT inspection for the client side.

The client cannot check signatures; these helpers only read claims so it
can tell when a token is about to expire and which namespace issued it.
Anything that is not a well-formed JWT is treated as opaque.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from typing import Any

from jose import jwt
from jose.exceptions import JOSEError

from jobboard.client.namespaces import SessionNamespace

_MAX_CACHE_SIZE = 16
_claims_cache: OrderedDict[str, dict[str, Any]] = OrderedDict()


def decode_claims(token: str | None) -> dict[str, Any] | None:
    """Return the token's claims without verifying the signature, or ``None``."""
    if not token or not isinstance(token, str) or not token.strip():
        return None
    cached = _claims_cache.get(token)
    if cached is not None:
        return dict(cached)
    if token.count(".") != 2:
        return None
    try:
        claims = jwt.get_unverified_claims(token)
    except (JOSEError, ValueError):
        return None
    if not isinstance(claims, dict):
        return None

    _claims_cache[token] = dict(claims)
    if len(_claims_cache) > _MAX_CACHE_SIZE:
        _claims_cache.popitem(last=False)
    return claims


def get_token_expiration(token: str | None) -> int | None:
    claims = decode_claims(token)
    if not claims:
        return None
    exp = claims.get("exp")
    if isinstance(exp, (int, float)):
        return int(exp)
    return None


def is_token_expired(token: str | None) -> bool:
    exp = get_token_expiration(token)
    if exp is None:
        return True
    return int(time.time()) >= exp


def is_token_expiring_soon(token: str | None, buffer_seconds: int = 300) -> bool:
    exp = get_token_expiration(token)
    if exp is None:
        return True
    return exp - int(time.time()) <= buffer_seconds


def get_token_remaining_time(token: str | None) -> int | None:
    """Seconds until expiry, floored at zero; ``None`` if the token has no ``exp``."""
    exp = get_token_expiration(token)
    if exp is None:
        return None
    return max(0, exp - int(time.time()))


def namespace_from_token(token: str | None) -> SessionNamespace | None:
    """Infer the issuing namespace from ``user_type``, then ``role``, then ``sub``."""
    claims = decode_claims(token)
    if not claims:
        return None

    for field in ("user_type", "role"):
        value = claims.get(field)
        if isinstance(value, str):
            lowered = value.lower()
            if lowered == SessionNamespace.COMPANY.value:
                return SessionNamespace.COMPANY
            if lowered == SessionNamespace.USER.value:
                return SessionNamespace.USER

    sub = claims.get("sub")
    if isinstance(sub, str) and "company" in sub:
        return SessionNamespace.COMPANY
    return SessionNamespace.USER
