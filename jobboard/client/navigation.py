"""
Login-redirect sink.

The client never navigates by itself; on an unrecoverable auth failure it
tells a :class:`NavigationNotifier` which login surface to show.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from jobboard.client.namespaces import SessionNamespace

logger = logging.getLogger(__name__)


@runtime_checkable
class NavigationNotifier(Protocol):
    def redirect_to_login(self, namespace: SessionNamespace, login_path: str) -> None: ...


class CallbackNavigator:
    """Adapt a plain ``callback(namespace, login_path)`` to the notifier interface."""

    def __init__(self, callback: Callable[[SessionNamespace, str], None]) -> None:
        self._callback = callback

    def redirect_to_login(self, namespace: SessionNamespace, login_path: str) -> None:
        self._callback(namespace, login_path)


class LoggingNavigator:
    """Headless default: records the redirect in the log only."""

    def redirect_to_login(self, namespace: SessionNamespace, login_path: str) -> None:
        logger.warning(
            "Session for %s expired; login required at %s", namespace.value, login_path
        )
