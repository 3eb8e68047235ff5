"""
Account record - The durable identity entity.

The Account is created by the registration workflow and mutated only by
the registration workflow and the verification state machine. Accounts
are never physically deleted.
"""

from dataclasses import dataclass
from datetime import date, datetime

from .exceptions import InvalidStatusTransition
from .ports import AccountStatus


@dataclass
class AccountCandidate:
    """Registration input, already validated by the presentation layer."""

    given_name: str
    family_name: str
    email: str
    password: str
    phone: str | None = None
    birth_date: date | None = None
    address: str = ""


@dataclass
class Account:
    """Persisted account with verification flags and lifecycle status."""

    given_name: str
    family_name: str
    email: str
    password_hash: str
    phone: str | None = None
    birth_date: date | None = None
    address: str = ""
    email_verified: bool = False
    phone_verified: bool = False
    status: AccountStatus = AccountStatus.PENDING
    created_at: datetime | None = None
    id: int | None = None

    @property
    def full_name(self) -> str:
        return f"{self.given_name} {self.family_name}"

    @property
    def has_phone(self) -> bool:
        return bool(self.phone)

    @property
    def is_active(self) -> bool:
        return self.status.allows_login

    def advance_to(self, status: AccountStatus) -> None:
        """
        Move the lifecycle forward to `status`.

        Re-applying the current status is a no-op. Terminal administrative
        states can be entered from any non-terminal state.

        Raises:
            InvalidStatusTransition: If the move would go backward or leave
                a terminal state
        """
        if status == self.status:
            return
        if self.status.is_terminal or (
            not status.is_terminal and status.rank < self.status.rank
        ):
            raise InvalidStatusTransition(f"{self.status.value} -> {status.value}")
        self.status = status
