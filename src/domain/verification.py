"""
Verification state machine - Consumes submitted codes and moves state forward.

Session states:
    CREATED -> EMAIL_VERIFIED -> COMPLETE

Account states:
    PENDING -> ACTIVE     (email code confirmed)
    ACTIVE  -> COMPLETE   (SMS OTP confirmed as well)

Sequencing is fixed: the OTP is only accepted once the email code has been
confirmed. Failed submissions leave session and account untouched and may
be retried against the same session; there is no lockout.

Session removal
===============

A session is removed when the registrant reaches a terminal verified state:
- email confirmed and no phone on file -> removed right away
- email confirmed with a phone on file -> kept for the OTP stage only; its
  email code is retired from link lookup and further email submissions
  raise SessionNotFound
- OTP confirmed -> removed
"""

import logging
import secrets
from dataclasses import dataclass

from .account import Account
from .audit import ACTION_ACCOUNT_ACTIVATED, AuditRecorder
from .exceptions import (
    AccountNotFound,
    EmailNotYetVerified,
    InvalidCode,
    InvalidOrExpiredLink,
    SessionNotFound,
)
from .ports import AccountRepository, AccountStatus
from .sessions import VerificationSession, VerificationSessionStore

logger = logging.getLogger(__name__)


def _codes_match(submitted: str, expected: str) -> bool:
    """Exact, case-sensitive comparison after trimming; constant-time."""
    return secrets.compare_digest(submitted.strip().encode(), expected.encode())


@dataclass
class VerificationService:
    """Domain service driving sessions and accounts through verification."""

    repository: AccountRepository
    sessions: VerificationSessionStore
    auditor: AuditRecorder

    def submit_email_code(self, token: str, code: str) -> str:
        """
        Confirm the email code for a session and activate the account.

        Args:
            token: Session token returned at registration
            code: Code received by email

        Returns:
            Audit identifier of the activation record

        Raises:
            SessionNotFound: Unknown or expired token, or email stage already done
            InvalidCode: Code does not match
        """
        with self.sessions.acquire(token) as session:
            return self._confirm_email(session, code)

    def submit_email_code_by_link(self, code: str) -> str:
        """
        Activate through the emailed link, which carries only the code.

        Raises:
            InvalidOrExpiredLink: No live session was issued this code
        """
        code = code.strip()
        token = self.sessions.find_token_by_email_code(code)
        if token is None:
            raise InvalidOrExpiredLink("No live verification session for this link")
        try:
            with self.sessions.acquire(token) as session:
                if session.email_verified:
                    raise InvalidOrExpiredLink("Verification link already used")
                return self._confirm_email(session, code)
        except SessionNotFound:
            raise InvalidOrExpiredLink("Verification session expired") from None

    def submit_otp_code(self, token: str, code: str) -> None:
        """
        Confirm the SMS one-time password and complete the registration.

        Raises:
            SessionNotFound: Unknown or expired token
            EmailNotYetVerified: Email code not confirmed yet (checked first)
            InvalidCode: OTP does not match
        """
        with self.sessions.acquire(token) as session:
            if not session.email_verified:
                raise EmailNotYetVerified(session.email)

            if not _codes_match(code, session.otp_code):
                self.auditor.record_verification(session.email, "sms", succeeded=False)
                raise InvalidCode("SMS code does not match")

            account = self._load_account(session.email)
            account.phone_verified = True
            if account.email_verified:
                account.advance_to(AccountStatus.COMPLETE)
            self.repository.save(account)

            self.auditor.record_verification(session.email, "sms", succeeded=True)
            self.sessions.complete(session)
            logger.info("Registration complete for %s", session.email)

    def _confirm_email(self, session: VerificationSession, code: str) -> str:
        # Caller holds the session lock.
        if session.email_verified:
            raise SessionNotFound(session.token)

        if not _codes_match(code, session.email_code):
            self.auditor.record_verification(session.email, "email", succeeded=False)
            raise InvalidCode("Email code does not match")

        account = self._load_account(session.email)
        account.email_verified = True
        account.advance_to(AccountStatus.ACTIVE)
        account = self.repository.save(account)
        session.mark_email_verified()

        self.auditor.record_verification(session.email, "email", succeeded=True)
        audit_id = self.auditor.record_activation(
            account.email,
            ACTION_ACCOUNT_ACTIVATED,
            _activation_details(account),
        )

        if session.expects_otp:
            self.sessions.retire_email_code(session)
        else:
            self.sessions.complete(session)

        logger.info("Account activated: %s (audit_id=%s)", account.email, audit_id)
        return audit_id

    def _load_account(self, email: str) -> Account:
        account = self.repository.find_by_email(email)
        if account is None:
            raise AccountNotFound(email)
        return account


def _activation_details(account: Account) -> str:
    registered = account.created_at.isoformat() if account.created_at else "unknown"
    return (
        "Activated after successful email verification. "
        f"account_id={account.id}, registered_at={registered}, "
        f"email_verified={account.email_verified}, status={account.status.value}"
    )
