"""
In-memory account registry backing the reference auth service.

Emails are unique per namespace: the same address may hold both a job
seeker and a company account.
"""

from __future__ import annotations

import itertools

from jobboard.core.security import get_password_hash, verify_password
from jobboard.models.account import Account


class DuplicateAccountError(Exception):
    pass


class AccountRegistry:
    def __init__(self) -> None:
        self._accounts: dict[int, Account] = {}
        self._ids = itertools.count(1)

    def create(
        self,
        email: str,
        password: str,
        user_type: str,
        name: str | None = None,
        business_number: str | None = None,
    ) -> Account:
        email = email.strip().lower()
        if self.find_by_email(email, user_type) is not None:
            raise DuplicateAccountError(f"{email} is already registered")
        account = Account(
            id=next(self._ids),
            email=email,
            hashed_password=get_password_hash(password),
            user_type=user_type,
            name=name,
            business_number=business_number,
        )
        self._accounts[account.id] = account
        return account

    def get(self, account_id: int | str, user_type: str) -> Account | None:
        try:
            account = self._accounts.get(int(account_id))
        except (TypeError, ValueError):
            return None
        if account is None or account.user_type != user_type:
            return None
        return account

    def find_by_email(self, email: str, user_type: str) -> Account | None:
        email = email.strip().lower()
        for account in self._accounts.values():
            if account.email == email and account.user_type == user_type:
                return account
        return None

    def authenticate(self, email: str, password: str, user_type: str) -> Account | None:
        account = self.find_by_email(email, user_type)
        if account is None or not verify_password(password, account.hashed_password):
            return None
        return account

    def __len__(self) -> int:
        return len(self._accounts)
