"""
Account model — job seekers (``user``) and employers (``company``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class Account:
    id: int
    email: str
    hashed_password: str
    user_type: str  # user | company
    name: str | None = None
    description: str | None = None
    business_number: str | None = None
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
