"""
Single-flight token refresh.

The first caller to need a new token starts the refresh in a task owned by
the coordinator; everyone arriving while it is in flight parks on a future
and receives the same outcome.  The starting caller only awaits the task
through ``asyncio.shield``, so cancelling it abandons that caller alone and
the refresh still settles every waiter.  The task is recorded before the
first ``await`` so no other coroutine can slip in between the check and the
start of the refresh.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from jobboard.client.errors import RefreshError

logger = logging.getLogger(__name__)


class RefreshCoordinator:
    def __init__(self, name: str = "default") -> None:
        self.name = name
        self._task: asyncio.Future[str] | None = None
        self._waiters: list[asyncio.Future[str]] = []

    @property
    def is_refreshing(self) -> bool:
        return self._task is not None

    @property
    def pending(self) -> int:
        """Number of callers currently parked behind the in-flight refresh."""
        return len(self._waiters)

    async def run(self, refresh: Callable[[], Awaitable[str]]) -> str:
        """Return a fresh token, starting ``refresh`` only if none is in flight."""
        if self._task is not None:
            waiter: asyncio.Future[str] = asyncio.get_running_loop().create_future()
            self._waiters.append(waiter)
            logger.debug(
                "[%s] refresh in progress, queued waiter #%d", self.name, len(self._waiters)
            )
            return await waiter

        self._task = asyncio.ensure_future(self._drive(refresh))
        return await asyncio.shield(self._task)

    async def _drive(self, refresh: Callable[[], Awaitable[str]]) -> str:
        try:
            token = await refresh()
        except asyncio.CancelledError:
            self._settle(error=RefreshError("Token refresh was cancelled"))
            raise
        except Exception as exc:
            self._settle(error=exc)
            raise
        self._settle(token=token)
        return token

    def _settle(self, token: str | None = None, error: BaseException | None = None) -> None:
        waiters, self._waiters = self._waiters, []
        self._task = None
        for waiter in waiters:
            # a waiter whose caller was cancelled is already done
            if waiter.done():
                continue
            if error is not None:
                waiter.set_exception(error)
            else:
                waiter.set_result(token)  # type: ignore[arg-type]
        if waiters:
            logger.debug(
                "[%s] %s %d queued request(s)",
                self.name,
                "rejected" if error is not None else "released",
                len(waiters),
            )
