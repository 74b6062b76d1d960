"""
Shared test fixtures for the job-board auth client test suite.

Two kinds of backends are used:

* ``FakeApi`` — an ``httpx.MockTransport`` handler with scripted 401 /
  refresh behaviour, for exercising the client in isolation;
* the reference FastAPI service, mounted through ``ASGITransport``, for
  end-to-end flows with real cookies and JWTs.
"""

import asyncio
import json
import os
import sys
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["SECRET_KEY"] = "test-secret-key-for-the-job-board-suite"
os.environ["COOKIE_SECURE"] = "false"

import httpx
from httpx import ASGITransport, AsyncClient

from jobboard.client.api_client import ApiClient
from jobboard.client.namespaces import SessionNamespace
from jobboard.client.token_store import InMemoryTokenStore
from jobboard.db.registry import AccountRegistry
from jobboard.main import create_app

USER_REFRESH = "/api/auth/refresh"
COMPANY_REFRESH = "/api/auth/company/refresh"


class RecordingNavigator:
    """Collects every login redirect the client asks for."""

    def __init__(self) -> None:
        self.redirects: list[tuple[SessionNamespace, str]] = []

    def redirect_to_login(self, namespace: SessionNamespace, login_path: str) -> None:
        self.redirects.append((namespace, login_path))


class FakeApi:
    """
    Scripted backend for ``httpx.MockTransport``.

    Protected paths accept only the tokens in ``valid_tokens``; anything
    else gets ``401 {"error": "Token expired"}``.  Refresh endpoints answer
    with ``refresh_status`` / ``refresh_bodies``.  ``hold_refresh(n)``
    parks the refresh response until ``n`` requests have been rejected,
    so tests can line up concurrent 401s inside one refresh window.
    """

    def __init__(self) -> None:
        self.valid_tokens: dict[str, str] = {"T2": "user", "C2": "company"}
        self.refresh_status = 200
        self.refresh_bodies: dict[str, object] = {
            USER_REFRESH: {"accessToken": "T2"},
            COMPANY_REFRESH: {"access_token": "C2"},
        }
        self.requests: list[httpx.Request] = []
        self.refresh_calls: list[httpx.Request] = []
        self.rejections = 0
        self._hold_until: int | None = None
        self._enough_rejected = asyncio.Event()

    def hold_refresh(self, rejections: int) -> None:
        self._hold_until = rejections
        self._enough_rejected = asyncio.Event()

    def calls_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path in (USER_REFRESH, COMPANY_REFRESH):
            self.refresh_calls.append(request)
            if self._hold_until is not None:
                await asyncio.wait_for(self._enough_rejected.wait(), timeout=1)
            return httpx.Response(self.refresh_status, json=self.refresh_bodies[path])

        if path == "/api/slow":
            await asyncio.sleep(5)
            return httpx.Response(200, json={"slow": True})
        if path == "/api/no-content":
            return httpx.Response(204)
        if path == "/api/broken":
            return httpx.Response(500, text="upstream exploded")
        if path == "/api/missing":
            return httpx.Response(404, json={"error": "Not found", "message": "No such job posting"})
        if path == "/api/public":
            return httpx.Response(200, json={"public": True})

        header = request.headers.get("Authorization", "")
        token = header.removeprefix("Bearer ")
        namespace = "company" if path.startswith("/api/company") else "user"
        if self.valid_tokens.get(token) != namespace:
            self.rejections += 1
            if self._hold_until is not None and self.rejections >= self._hold_until:
                self._enough_rejected.set()
            return httpx.Response(401, json={"error": "Token expired"})

        body = json.loads(request.content) if request.content else None
        return httpx.Response(
            200,
            json={"path": path, "method": request.method, "token": token, "body": body},
        )


# ── Client fixtures (mock transport) ────────────────────────────────
@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def store() -> InMemoryTokenStore:
    return InMemoryTokenStore()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
async def http_client(fake_api: FakeApi) -> AsyncGenerator[AsyncClient, None]:
    """Raw httpx client over the fake backend, carrying a refresh cookie."""
    transport = httpx.MockTransport(fake_api)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        cookies={"refresh_token": "r1"},
    ) as client:
        yield client


@pytest.fixture
async def api_client(
    http_client: AsyncClient, store: InMemoryTokenStore, navigator: RecordingNavigator
) -> ApiClient:
    return ApiClient(store=store, navigator=navigator, http_client=http_client)


# ── Reference service fixtures (ASGI transport) ─────────────────────
@pytest.fixture
def accounts() -> AccountRegistry:
    return AccountRegistry()


@pytest.fixture
def service(accounts: AccountRegistry):
    return create_app(accounts)


@pytest.fixture
async def async_client(service) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the reference service."""
    transport = ASGITransport(app=service)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sent_paths() -> list[str]:
    return []


@pytest.fixture
async def service_client(
    service,
    store: InMemoryTokenStore,
    navigator: RecordingNavigator,
    sent_paths: list[str],
) -> AsyncGenerator[ApiClient, None]:
    """ApiClient talking to the reference service; ``sent_paths`` logs every request."""

    async def _record(request: httpx.Request) -> None:
        sent_paths.append(request.url.path)

    transport = ASGITransport(app=service)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        event_hooks={"request": [_record]},
    ) as http:
        yield ApiClient(store=store, navigator=navigator, http_client=http)


@pytest.fixture
def seeker(accounts: AccountRegistry):
    return accounts.create("seeker@example.com", "password123", "user", name="Jane Seeker")


@pytest.fixture
def company(accounts: AccountRegistry):
    return accounts.create(
        "hr@acme.example", "password123", "company", name="Acme", business_number="1234567890"
    )
