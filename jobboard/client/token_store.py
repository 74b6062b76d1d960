"""Namespace-scoped access-token storage."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from jobboard.client.namespaces import SessionNamespace


@runtime_checkable
class SessionStore(Protocol):
    """Synchronous get/set/remove of one access token per namespace."""

    def get(self, namespace: SessionNamespace) -> str | None: ...

    def set(self, token: str, namespace: SessionNamespace) -> None: ...

    def remove(self, namespace: SessionNamespace) -> None: ...

    def clear_all(self) -> None: ...


class InMemoryTokenStore:
    """Process-local store; tokens live as long as the object does."""

    def __init__(self) -> None:
        self._tokens: dict[SessionNamespace, str] = {}

    def get(self, namespace: SessionNamespace | str = SessionNamespace.USER) -> str | None:
        return self._tokens.get(SessionNamespace.coerce(namespace))

    def set(self, token: str, namespace: SessionNamespace | str = SessionNamespace.USER) -> None:
        if not isinstance(token, str) or not token.strip():
            raise ValueError("Token must be a non-empty string")
        self._tokens[SessionNamespace.coerce(namespace)] = token

    def remove(self, namespace: SessionNamespace | str = SessionNamespace.USER) -> None:
        self._tokens.pop(SessionNamespace.coerce(namespace), None)

    def clear_all(self) -> None:
        self._tokens.clear()

    def __contains__(self, namespace: object) -> bool:
        try:
            return SessionNamespace.coerce(namespace) in self._tokens  # type: ignore[arg-type]
        except ValueError:
            return False
