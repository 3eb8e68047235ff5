"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the lifecycle enums shared across the domain and the
interfaces (ports) that the domain requires from infrastructure.
Adapters implement these protocols.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .account import Account
    from .audit import AuditRecord


class AccountStatus(str, Enum):
    """
    Account lifecycle status.

    Forward-only progression:
    - PENDING -> ACTIVE (email code confirmed)
    - ACTIVE -> COMPLETE (phone OTP confirmed as well)

    Administrative terminal states:
    - SUSPENDED, REJECTED: reachable from any non-terminal state, never left
    """

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    COMPLETE = "COMPLETE"
    SUSPENDED = "SUSPENDED"
    REJECTED = "REJECTED"

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]

    @property
    def is_terminal(self) -> bool:
        return self in (AccountStatus.SUSPENDED, AccountStatus.REJECTED)

    @property
    def allows_login(self) -> bool:
        return self in (AccountStatus.ACTIVE, AccountStatus.COMPLETE)


_STATUS_RANK = {
    AccountStatus.PENDING: 0,
    AccountStatus.ACTIVE: 1,
    AccountStatus.COMPLETE: 2,
    AccountStatus.SUSPENDED: 3,
    AccountStatus.REJECTED: 3,
}


class SessionState(str, Enum):
    """
    Verification session progress.

    - CREATED: no code confirmed yet
    - EMAIL_VERIFIED: email code confirmed, OTP outstanding
    - COMPLETE: terminal, verification finished and session removed
    - TERMINATED: terminal, session evicted without finishing (expired)
    """

    CREATED = "CREATED"
    EMAIL_VERIFIED = "EMAIL_VERIFIED"
    COMPLETE = "COMPLETE"
    TERMINATED = "TERMINATED"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.COMPLETE, SessionState.TERMINATED)


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def find_by_email(self, email: str) -> Account | None:
        """
        Look up an account by normalized email.

        Returns:
            The stored account, or None if no account uses this email
        """
        ...

    def exists_by_email(self, email: str) -> bool:
        """Return True if an account already uses this email."""
        ...

    def exists_by_phone(self, phone: str) -> bool:
        """Return True if an account already uses this phone number."""
        ...

    def save(self, account: Account) -> Account:
        """
        Insert a new account (id is None) or update an existing one.

        Uniqueness of email and phone must be enforced atomically on insert.

        Returns:
            The persisted account, with id and created_at populated

        Raises:
            DuplicateEmail: If another account already uses the email
            DuplicatePhone: If another account already uses the phone
        """
        ...


class NotificationSender(Protocol):
    """Port interface for out-of-band code delivery."""

    def send_email_verification(self, email: str, code: str, name: str) -> bool:
        """
        Send the email verification code (and activation link).

        Returns:
            True if the message was handed off, False otherwise

        Raises:
            NotificationError: If delivery failed in a way worth reporting
        """
        ...

    def send_sms_otp(self, phone: str, code: str, name: str) -> bool:
        """
        Send the one-time password by SMS.

        Returns:
            True if the message was handed off, False otherwise

        Raises:
            NotificationError: If delivery failed in a way worth reporting
        """
        ...


class AuditSink(Protocol):
    """Port interface for the append-only audit trail."""

    def append(self, record: AuditRecord) -> None:
        """Append one immutable audit record."""
        ...
