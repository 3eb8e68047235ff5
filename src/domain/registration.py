"""
Registration domain service - Account creation and session bootstrap.

Registration flow:
1. Normalize email (strip + lowercase) and phone (strip, blank -> absent)
2. Reject duplicate email, then duplicate phone
3. Persist the account as PENDING with both verification flags false
4. Generate one email code and one OTP code
5. Send the email code, and the OTP when a phone was supplied
6. Open a verification session holding both codes

Notification delivery is best-effort: a failed send never rolls back the
account. It is logged at WARNING and reported back in
RegistrationResult.warnings so the caller can offer a resend.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .account import Account, AccountCandidate
from .codes import generate_email_code, generate_otp_code
from .exceptions import DuplicateEmail, DuplicatePhone, NotificationError
from .passwords import DEFAULT_BCRYPT_COST, hash_password
from .ports import AccountRepository, AccountStatus, NotificationSender
from .sessions import VerificationSessionStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    """Strip whitespace and lowercase for consistent storage and lookup."""
    return email.strip().lower()


def normalize_phone(phone: str | None) -> str | None:
    if phone is None:
        return None
    phone = phone.strip()
    return phone or None


@dataclass
class RegistrationResult:
    """
    Outcome of a registration.

    The codes are exposed here for session bootstrap only; nothing else
    in the domain hands them out again.
    """

    account: Account
    session_token: str
    email_code: str
    otp_code: str
    warnings: list[str] = field(default_factory=list)


@dataclass
class RegistrationService:
    """
    Domain service for user registration.

    Orchestrates uniqueness checks, password hashing, account persistence,
    code generation, notification dispatch and session creation.
    """

    repository: AccountRepository
    notifier: NotificationSender
    sessions: VerificationSessionStore
    bcrypt_cost: int = DEFAULT_BCRYPT_COST
    clock: Callable[[], datetime] = _utcnow

    def register(self, candidate: AccountCandidate) -> RegistrationResult:
        """
        Register a new account and open its verification session.

        Args:
            candidate: Validated registration input

        Returns:
            RegistrationResult with the persisted account, session token and codes

        Raises:
            DuplicateEmail: If the email is already registered
            DuplicatePhone: If a phone is supplied and already registered
        """
        email = normalize_email(candidate.email)
        phone = normalize_phone(candidate.phone)

        if self.repository.exists_by_email(email):
            raise DuplicateEmail(email)
        if phone is not None and self.repository.exists_by_phone(phone):
            raise DuplicatePhone(phone)

        account = self.repository.save(
            Account(
                given_name=candidate.given_name,
                family_name=candidate.family_name,
                email=email,
                phone=phone,
                birth_date=candidate.birth_date,
                address=candidate.address,
                password_hash=hash_password(candidate.password, self.bcrypt_cost),
                email_verified=False,
                phone_verified=False,
                status=AccountStatus.PENDING,
                created_at=self.clock(),
            )
        )

        email_code = generate_email_code()
        otp_code = generate_otp_code()

        warnings = []
        warning = self._dispatch(
            "email",
            self.notifier.send_email_verification,
            account.email,
            email_code,
            account.given_name,
        )
        if warning:
            warnings.append(warning)
        if account.has_phone:
            warning = self._dispatch(
                "sms", self.notifier.send_sms_otp, account.phone, otp_code, account.given_name
            )
            if warning:
                warnings.append(warning)

        token = self.sessions.create(
            account.email, email_code, otp_code, expects_otp=account.has_phone
        )
        logger.info("Account registered as PENDING: %s (id=%s)", account.email, account.id)

        return RegistrationResult(
            account=account,
            session_token=token,
            email_code=email_code,
            otp_code=otp_code,
            warnings=warnings,
        )

    def find_by_email(self, email: str) -> Account | None:
        return self.repository.find_by_email(normalize_email(email))

    def _dispatch(
        self,
        channel: str,
        send: Callable[[str, str, str], bool],
        address: str,
        code: str,
        name: str,
    ) -> str | None:
        """Send one notification; return a warning message if it failed."""
        try:
            delivered = send(address, code, name)
        except NotificationError as exc:
            logger.warning("%s notification to %s failed: %s", channel, address, exc)
            return f"{channel} notification failed: {exc}"
        if not delivered:
            logger.warning("%s notification to %s was not delivered", channel, address)
            return f"{channel} notification was not delivered"
        return None
