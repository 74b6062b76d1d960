"""Session namespaces — independent authentication contexts."""

from __future__ import annotations

from enum import Enum


class SessionNamespace(str, Enum):
    USER = "user"
    COMPANY = "company"

    @classmethod
    def coerce(cls, value: SessionNamespace | str) -> SessionNamespace:
        """Accept either an enum member or its string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Unknown session namespace {value!r}; expected one of "
                f"{[ns.value for ns in cls]}"
            ) from None
