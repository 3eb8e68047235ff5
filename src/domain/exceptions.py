"""
Domain exceptions - Semantic error types for registration and verification.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Every condition here is recoverable by the caller; none is fatal
to the process.
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class DuplicateEmail(RegistrationError):
    """An account with this email address already exists."""

    pass


class DuplicatePhone(RegistrationError):
    """An account with this phone number already exists."""

    pass


class SessionNotFound(RegistrationError):
    """Verification session token is unknown, expired, or already consumed."""

    pass


class InvalidOrExpiredLink(RegistrationError):
    """No live verification session matches the code carried by the link."""

    pass


class InvalidCode(RegistrationError):
    """Submitted code does not match the code stored in the session."""

    pass


class EmailNotYetVerified(RegistrationError):
    """OTP submitted before the email code was confirmed."""

    pass


class AccountNotFound(RegistrationError):
    """The account referenced by a verification session no longer exists."""

    pass


class InvalidStatusTransition(RegistrationError):
    """Account status change would move the lifecycle backward."""

    pass


class InvalidCredentials(RegistrationError):
    """Unknown email or wrong password (deliberately indistinguishable)."""

    pass


class AccountNotActive(RegistrationError):
    """Credentials are valid but the account has not been activated."""

    pass


class NotificationError(Exception):
    """Raised by notification senders when a message cannot be dispatched."""

    pass
