"""
FastAPI dependencies — account registry and per-namespace auth guards.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from jobboard.core.security import decode_access_token
from jobboard.db.registry import AccountRegistry
from jobboard.models.account import Account

# auto_error=False so a missing header yields our own 401 body
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/company/login", auto_error=False)


async def get_accounts(request: Request) -> AccountRegistry:
    return request.app.state.accounts


def _authenticate(token: str | None, accounts: AccountRegistry, user_type: str) -> Account:
    credentials_exc = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not token:
        raise credentials_exc

    payload = decode_access_token(token, user_type)
    if payload is None:
        raise credentials_exc

    account = accounts.get(payload.get("sub"), user_type)
    if account is None or not account.is_active:
        raise credentials_exc
    return account


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    accounts: AccountRegistry = Depends(get_accounts),
) -> Account:
    """Job-seeker account behind the bearer token."""
    return _authenticate(token, accounts, "user")


async def get_current_company(
    token: Optional[str] = Depends(oauth2_scheme),
    accounts: AccountRegistry = Depends(get_accounts),
) -> Account:
    """Company account behind the bearer token."""
    return _authenticate(token, accounts, "company")
