"""
Domain layer - Pure business logic with zero framework imports.

This package contains the registration and identity-verification logic:
account records, code generation, the verification session store, the
verification state machine, audit recording and login gating. It defines
its own port interfaces for infrastructure abstraction.
"""

from .account import Account, AccountCandidate
from .audit import AuditRecord, AuditRecorder
from .authentication import AuthenticationService
from .exceptions import (
    AccountNotActive,
    AccountNotFound,
    DuplicateEmail,
    DuplicatePhone,
    EmailNotYetVerified,
    InvalidCode,
    InvalidCredentials,
    InvalidOrExpiredLink,
    InvalidStatusTransition,
    NotificationError,
    RegistrationError,
    SessionNotFound,
)
from .ports import (
    AccountRepository,
    AccountStatus,
    AuditSink,
    NotificationSender,
    SessionState,
)
from .registration import RegistrationResult, RegistrationService
from .sessions import VerificationSession, VerificationSessionStore
from .verification import VerificationService

__all__ = [
    "Account",
    "AccountCandidate",
    "AccountNotActive",
    "AccountNotFound",
    "AccountRepository",
    "AccountStatus",
    "AuditRecord",
    "AuditRecorder",
    "AuditSink",
    "AuthenticationService",
    "DuplicateEmail",
    "DuplicatePhone",
    "EmailNotYetVerified",
    "InvalidCode",
    "InvalidCredentials",
    "InvalidOrExpiredLink",
    "InvalidStatusTransition",
    "NotificationError",
    "NotificationSender",
    "RegistrationError",
    "RegistrationResult",
    "RegistrationService",
    "SessionNotFound",
    "SessionState",
    "VerificationService",
    "VerificationSession",
    "VerificationSessionStore",
]
