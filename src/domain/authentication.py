"""
Login gating - Credential check followed by activation-state check.

Unknown email and wrong password raise the same InvalidCredentials error,
and a bcrypt comparison runs in both cases so response time does not
reveal whether the account exists.
"""

from dataclasses import dataclass

from .account import Account
from .exceptions import AccountNotActive, InvalidCredentials
from .passwords import check_password
from .ports import AccountRepository
from .registration import normalize_email


@dataclass
class AuthenticationService:
    """Domain service gating login on account activation."""

    repository: AccountRepository

    def login(self, email: str, password: str) -> Account:
        """
        Authenticate and return the account.

        Raises:
            InvalidCredentials: Unknown email or wrong password
            AccountNotActive: Status is neither ACTIVE nor COMPLETE
        """
        account = self.repository.find_by_email(normalize_email(email))
        password_hash = account.password_hash if account is not None else None

        if not check_password(password, password_hash) or account is None:
            raise InvalidCredentials("Invalid email or password")

        if not account.is_active:
            raise AccountNotActive(account.email)
        return account
