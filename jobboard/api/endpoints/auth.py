"""
Auth endpoints — signup, login, token refresh and logout for both
job seekers and companies.

The refresh credential travels only as an HttpOnly cookie; each
namespace has its own cookie so the two sessions never overwrite each
other.  Access tokens are returned in the body for the client to keep.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordRequestForm

from jobboard.api.deps import get_accounts
from jobboard.core.config import settings
from jobboard.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
)
from jobboard.db.registry import AccountRegistry, DuplicateAccountError
from jobboard.models.account import Account
from jobboard.schemas.account import AccountRead, CompanyCreate, LoginRequest, UserCreate
from jobboard.schemas.token import LogoutResponse, Token

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)

REFRESH_COOKIES = {
    "user": "refresh_token",
    "company": "company_refresh_token",
}
TOKEN_TYPES = {
    "user": "access",
    "company": "access_company",
}


def _set_refresh_cookie(response: Response, user_type: str, token: str) -> None:
    response.set_cookie(
        key=REFRESH_COOKIES[user_type],
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
    )


def _issue_tokens(response: Response, account: Account) -> Token:
    _set_refresh_cookie(response, account.user_type, create_refresh_token(account.id, account.user_type))
    return Token(
        access_token=create_access_token(account.id, account.user_type),
        token_type=TOKEN_TYPES[account.user_type],
    )


def _login(accounts: AccountRegistry, response: Response, email: str, password: str, user_type: str) -> Token:
    account = accounts.authenticate(email, password, user_type)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not account.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )
    logger.info("%s %s logged in", user_type, account.id)
    return _issue_tokens(response, account)


def _refresh(request: Request, response: Response, accounts: AccountRegistry, user_type: str) -> Token:
    token_str = request.cookies.get(REFRESH_COOKIES[user_type])
    if not token_str:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token missing",
        )

    payload = decode_refresh_token(token_str, user_type)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )

    account = accounts.get(payload.get("sub"), user_type)
    if account is None or not account.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account not found or inactive",
        )
    return _issue_tokens(response, account)


def _register(accounts: AccountRegistry, body: UserCreate, user_type: str, business_number: str | None = None) -> Account:
    try:
        return accounts.create(
            email=body.email,
            password=body.password,
            user_type=user_type,
            name=body.name,
            business_number=business_number,
        )
    except DuplicateAccountError:
        raise HTTPException(status_code=400, detail="Email already registered") from None


# ── Job seekers ─────────────────────────────────────────────────────
@router.post("/signup", response_model=AccountRead, status_code=201)
async def signup(body: UserCreate, accounts: AccountRegistry = Depends(get_accounts)) -> Account:
    return _register(accounts, body, "user")


@router.post("/login", response_model=Token)
async def login(
    body: LoginRequest,
    response: Response,
    accounts: AccountRegistry = Depends(get_accounts),
) -> Token:
    """Authenticate with email/password. Sets the HttpOnly refresh cookie."""
    return _login(accounts, response, body.email, body.password, "user")


@router.post("/refresh", response_model=Token)
async def refresh(
    request: Request,
    response: Response,
    accounts: AccountRegistry = Depends(get_accounts),
) -> Token:
    return _refresh(request, response, accounts, "user")


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response) -> LogoutResponse:
    response.delete_cookie(REFRESH_COOKIES["user"])
    return LogoutResponse(message="Logged out")


# ── Companies ───────────────────────────────────────────────────────
@router.post("/company/signup", response_model=AccountRead, status_code=201)
async def company_signup(
    body: CompanyCreate, accounts: AccountRegistry = Depends(get_accounts)
) -> Account:
    return _register(accounts, body, "company", business_number=body.business_number)


@router.post("/company/login", response_model=Token)
async def company_login(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    accounts: AccountRegistry = Depends(get_accounts),
) -> Token:
    """OAuth2 password flow for company accounts."""
    return _login(accounts, response, form_data.username, form_data.password, "company")


@router.post("/company/refresh", response_model=Token)
async def company_refresh(
    request: Request,
    response: Response,
    accounts: AccountRegistry = Depends(get_accounts),
) -> Token:
    return _refresh(request, response, accounts, "company")


@router.post("/company/logout", response_model=LogoutResponse)
async def company_logout(response: Response) -> LogoutResponse:
    response.delete_cookie(REFRESH_COOKIES["company"])
    return LogoutResponse(message="Logged out")
