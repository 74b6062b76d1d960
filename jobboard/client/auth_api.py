"""
Auth endpoints as seen from the client: login, signup, refresh, logout.

Login and signup go out with ``skip_auth`` so a stale token never rides
along and a wrong password surfaces as a plain 401 instead of triggering a
refresh.  Login still forwards credentials so the server can set the
http-only refresh cookie.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

from jobboard.client.api_client import ApiClient, extract_access_token
from jobboard.client.errors import ApiError
from jobboard.client.namespaces import SessionNamespace

logger = logging.getLogger(__name__)


class AuthApi:
    LOGIN_PATH = "/api/auth/login"
    SIGNUP_PATH = "/api/auth/signup"
    LOGOUT_PATH = "/api/auth/logout"
    COMPANY_LOGIN_PATH = "/api/auth/company/login"
    COMPANY_SIGNUP_PATH = "/api/auth/company/signup"
    COMPANY_LOGOUT_PATH = "/api/auth/company/logout"

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def login(self, email: str, password: str) -> dict[str, Any]:
        data = await self.client.post(
            self.LOGIN_PATH,
            {"email": email, "password": password},
            skip_auth=True,
            with_credentials=True,
        )
        self._store_token(data, SessionNamespace.USER)
        return data

    async def company_login(self, username: str, password: str) -> dict[str, Any]:
        # OAuth2 password flow expects a form body
        data = await self.client.request(
            self.COMPANY_LOGIN_PATH,
            method="POST",
            body=urlencode({"username": username, "password": password}),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            skip_auth=True,
            with_credentials=True,
            token_type=SessionNamespace.COMPANY,
        )
        self._store_token(data, SessionNamespace.COMPANY)
        return data

    async def signup(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self.client.post(self.SIGNUP_PATH, payload, skip_auth=True)

    async def company_signup(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self.client.post(self.COMPANY_SIGNUP_PATH, payload, skip_auth=True)

    async def refresh(self, namespace: SessionNamespace | str = SessionNamespace.USER) -> str:
        return await self.client.refresh_token(namespace)

    async def logout(self, namespace: SessionNamespace | str = SessionNamespace.USER) -> Any:
        """End the session server-side; the local token is dropped regardless.

        A 401 here never starts a refresh or a login redirect.
        """
        ns = SessionNamespace.coerce(namespace)
        path = self.COMPANY_LOGOUT_PATH if ns is SessionNamespace.COMPANY else self.LOGOUT_PATH
        headers = {}
        token = self.client.store.get(ns)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            return await self.client.post(
                path, skip_auth=True, with_credentials=True, token_type=ns, headers=headers
            )
        finally:
            self.client.store.remove(ns)
            logger.info("Logged out of %s session", ns.value)

    def _store_token(self, data: Any, namespace: SessionNamespace) -> None:
        token = extract_access_token(data)
        if token is None:
            raise ApiError("Login response did not contain an access token", status=200, data=data)
        self.client.store.set(token, namespace)
