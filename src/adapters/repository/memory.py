"""
In-memory repository adapter - Implements AccountRepository protocol.

Default backend for development and tests. Uniqueness of email and phone
is enforced under a lock at save time, so concurrent registrations of the
same identity produce exactly one account.
"""

import threading
from dataclasses import replace
from datetime import datetime, timezone
from itertools import count

from src.domain.account import Account
from src.domain.exceptions import DuplicateEmail, DuplicatePhone


class InMemoryAccountRepository:
    """
    Implements AccountRepository protocol with a dict keyed by email.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Accounts are copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        self._ids = count(1)
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> Account | None:
        with self._lock:
            account = self._accounts.get(email)
            return replace(account) if account is not None else None

    def exists_by_email(self, email: str) -> bool:
        with self._lock:
            return email in self._accounts

    def exists_by_phone(self, phone: str) -> bool:
        with self._lock:
            return any(a.phone == phone for a in self._accounts.values())

    def save(self, account: Account) -> Account:
        """
        Insert (id is None) or update an account.

        Raises:
            DuplicateEmail: Insert with an email already stored
            DuplicatePhone: Insert with a phone already stored
        """
        with self._lock:
            if account.id is None:
                if account.email in self._accounts:
                    raise DuplicateEmail(account.email)
                if account.phone and any(
                    a.phone == account.phone for a in self._accounts.values()
                ):
                    raise DuplicatePhone(account.phone)
                stored = replace(
                    account,
                    id=next(self._ids),
                    created_at=account.created_at or datetime.now(timezone.utc),
                )
            else:
                stored = replace(account)
            self._accounts[stored.email] = stored
            return replace(stored)

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)
