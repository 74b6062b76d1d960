"""
Authenticated request client.

Wraps an ``httpx.AsyncClient`` and, per request:

* attaches ``Authorization: Bearer <token>`` for the requested namespace,
* forwards cookies only when credentials are wanted,
* bounds every attempt by ``REQUEST_TIMEOUT_SECONDS``,
* on a 401 refreshes the namespace's token once (shared by every request
  that fails concurrently) and retries the original request exactly once.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

import httpx

from jobboard.client.coordinator import RefreshCoordinator
from jobboard.client.errors import (
    ApiClientError,
    ApiError,
    NetworkError,
    RefreshError,
    RequestTimeoutError,
)
from jobboard.client.jwt_utils import decode_claims, is_token_expiring_soon
from jobboard.client.namespaces import SessionNamespace
from jobboard.client.navigation import LoggingNavigator, NavigationNotifier
from jobboard.client.token_store import InMemoryTokenStore, SessionStore
from jobboard.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

# Priority order of the field names a refresh response may carry the token under.
ACCESS_TOKEN_FIELDS: tuple[str, ...] = ("accessToken", "access_token", "token")


def extract_access_token(payload: Any) -> str | None:
    """Pull the new access token out of a refresh/login response body."""
    if not isinstance(payload, Mapping):
        return None
    for name in ACCESS_TOKEN_FIELDS:
        value = payload.get(name)
        if isinstance(value, str) and value.strip():
            return value
    return None


@dataclass(frozen=True)
class PendingRequest:
    """Everything needed to replay a request after a refresh."""

    endpoint: str
    method: str
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: str | bytes | None = None
    namespace: SessionNamespace = SessionNamespace.USER
    with_credentials: bool = True

    def with_token(self, token: str) -> PendingRequest:
        headers = httpx.Headers(self.headers)
        headers["Authorization"] = f"Bearer {token}"
        return replace(self, headers=headers)


class ApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        store: SessionStore | None = None,
        navigator: NavigationNotifier | None = None,
        http_client: httpx.AsyncClient | None = None,
        config: Settings | None = None,
        timeout: float | None = None,
    ) -> None:
        self.config = config or default_settings
        self.store: SessionStore = store if store is not None else InMemoryTokenStore()
        self.navigator: NavigationNotifier = navigator or LoggingNavigator()
        self.timeout = timeout if timeout is not None else self.config.REQUEST_TIMEOUT_SECONDS

        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=base_url or self.config.API_BASE_URL
        )
        self._refresh_paths = {
            SessionNamespace.USER: self.config.USER_REFRESH_PATH,
            SessionNamespace.COMPANY: self.config.COMPANY_REFRESH_PATH,
        }
        self._login_paths = {
            SessionNamespace.USER: self.config.USER_LOGIN_PATH,
            SessionNamespace.COMPANY: self.config.COMPANY_LOGIN_PATH,
        }
        # one coordinator per namespace so a company refresh never hands
        # its token to a queued user request
        self._coordinators = {
            ns: RefreshCoordinator(name=ns.value) for ns in SessionNamespace
        }

    # ── lifecycle ───────────────────────────────────────────────────
    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ── introspection ───────────────────────────────────────────────
    def coordinator(self, namespace: SessionNamespace | str = SessionNamespace.USER) -> RefreshCoordinator:
        return self._coordinators[SessionNamespace.coerce(namespace)]

    def refresh_path(self, namespace: SessionNamespace | str = SessionNamespace.USER) -> str:
        return self._refresh_paths[SessionNamespace.coerce(namespace)]

    def is_refresh_endpoint(self, endpoint: str) -> bool:
        path = httpx.URL(endpoint).path
        return any(
            path.rstrip("/") == refresh.rstrip("/") for refresh in self._refresh_paths.values()
        )

    # ── public API ──────────────────────────────────────────────────
    async def request(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        body: str | bytes | None = None,
        headers: Mapping[str, str] | None = None,
        skip_auth: bool = False,
        token_type: SessionNamespace | str = SessionNamespace.USER,
        with_credentials: bool | None = None,
    ) -> Any:
        namespace = SessionNamespace.coerce(token_type)
        merged_headers = httpx.Headers({"Content-Type": "application/json"})
        if headers:
            merged_headers.update(headers)

        token = None
        if not skip_auth:
            token = await self._current_token(namespace)
            if token:
                merged_headers["Authorization"] = f"Bearer {token}"

        pending = PendingRequest(
            endpoint=endpoint,
            method=method.upper(),
            headers=merged_headers,
            body=body,
            namespace=namespace,
            with_credentials=(not skip_auth) if with_credentials is None else with_credentials,
        )

        response = await self._send(pending)
        if response.status_code != 401:
            return self._handle_response(response)

        if skip_auth or self.is_refresh_endpoint(endpoint):
            logger.debug("401 on %s %s; not eligible for refresh", pending.method, endpoint)
            return self._handle_response(response)

        stored = self.store.get(namespace)
        if stored and stored != token:
            # another request already refreshed while this one was in flight
            logger.debug("401 on %s %s with a superseded token", pending.method, endpoint)
            new_token = stored
        else:
            logger.info("401 on %s %s, refreshing %s token", pending.method, endpoint, namespace.value)
            new_token = await self.refresh_token(namespace)

        logger.debug("Retrying %s %s with refreshed token", pending.method, endpoint)
        retry_response = await self._send(pending.with_token(new_token))
        return self._handle_response(retry_response)

    async def get(self, endpoint: str, **options: Any) -> Any:
        return await self.request(endpoint, method="GET", **options)

    async def post(self, endpoint: str, data: Any = None, **options: Any) -> Any:
        return await self.request(endpoint, method="POST", body=_json_body(data), **options)

    async def put(self, endpoint: str, data: Any = None, **options: Any) -> Any:
        return await self.request(endpoint, method="PUT", body=_json_body(data), **options)

    async def patch(self, endpoint: str, data: Any = None, **options: Any) -> Any:
        return await self.request(endpoint, method="PATCH", body=_json_body(data), **options)

    async def delete(self, endpoint: str, **options: Any) -> Any:
        return await self.request(endpoint, method="DELETE", **options)

    async def refresh_token(self, namespace: SessionNamespace | str = SessionNamespace.USER) -> str:
        """Obtain a new access token, coalescing concurrent callers into one refresh."""
        ns = SessionNamespace.coerce(namespace)
        return await self._coordinators[ns].run(lambda: self._perform_refresh(ns))

    # ── internals ───────────────────────────────────────────────────
    async def _current_token(self, namespace: SessionNamespace) -> str | None:
        token = self.store.get(namespace)
        window = self.config.PROACTIVE_REFRESH_SECONDS
        if (
            token
            and window > 0
            and decode_claims(token) is not None
            and is_token_expiring_soon(token, window)
        ):
            logger.debug("%s token expires within %ss, refreshing ahead", namespace.value, window)
            return await self.refresh_token(namespace)
        return token

    async def _perform_refresh(self, namespace: SessionNamespace) -> str:
        path = self._refresh_paths[namespace]
        logger.info("Starting token refresh for %s via %s", namespace.value, path)
        try:
            payload = await self.request(
                path,
                method="POST",
                skip_auth=True,
                with_credentials=True,
                token_type=namespace,
            )
            token = extract_access_token(payload)
            if token is None:
                raise RefreshError("Refresh response did not contain an access token", data=payload)
        except ApiClientError as exc:
            self._end_session(namespace)
            if isinstance(exc, RefreshError):
                raise
            raise RefreshError(
                f"Token refresh failed: {exc.message}", status=exc.status, data=exc.data
            ) from exc

        self.store.set(token, namespace)
        logger.info("Token refresh succeeded for %s", namespace.value)
        return token

    def _end_session(self, namespace: SessionNamespace) -> None:
        logger.warning("Token refresh failed for %s; clearing session", namespace.value)
        self.store.remove(namespace)
        login_path = self._login_paths[namespace]
        logger.info("Redirecting %s session to %s", namespace.value, login_path)
        self.navigator.redirect_to_login(namespace, login_path)

    async def _send(self, pending: PendingRequest) -> httpx.Response:
        request = self._http.build_request(
            pending.method,
            pending.endpoint,
            headers=pending.headers,
            content=pending.body,
        )
        if not pending.with_credentials:
            request.headers.pop("Cookie", None)

        try:
            return await asyncio.wait_for(self._http.send(request), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.warning(
                "%s %s timed out after %ss", pending.method, pending.endpoint, self.timeout
            )
            raise RequestTimeoutError(timeout=self.timeout) from exc
        except httpx.HTTPError as exc:
            logger.error("Network error on %s %s: %s", pending.method, pending.endpoint, exc)
            raise NetworkError(f"Network request failed: {exc}") from exc

    @staticmethod
    def _handle_response(response: httpx.Response) -> Any:
        if response.is_success:
            if response.status_code == 204 or not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise ApiError(
                    "Response body is not valid JSON",
                    status=response.status_code,
                    data={"error": response.text},
                ) from exc

        try:
            data = response.json()
        except ValueError:
            data = {"error": response.reason_phrase or "Request failed"}
        raise ApiError(_error_message(data, response), status=response.status_code, data=data)


def _json_body(data: Any) -> str | None:
    if data is None:
        return None
    return json.dumps(data)


def _error_message(data: Any, response: httpx.Response) -> str:
    if isinstance(data, Mapping):
        for key in ("error", "message", "detail"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return response.reason_phrase or f"HTTP {response.status_code}"
