"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory repository and verification session store
- Audit recorder backed by a list sink
- Registration and verification services wired together
- Candidate account factory
"""

from datetime import date
from unittest.mock import Mock

import pytest

from src.adapters.repository.memory import InMemoryAccountRepository
from src.domain.account import AccountCandidate
from src.domain.audit import AuditRecord, AuditRecorder
from src.domain.registration import RegistrationService
from src.domain.sessions import VerificationSessionStore
from src.domain.verification import VerificationService

# Lowest bcrypt cost keeps the suite fast; production default stays at 10.
TEST_BCRYPT_COST = 4


class ListAuditSink:
    """AuditSink collecting records in memory."""

    def __init__(self) -> None:
        self.records: list[AuditRecord] = []

    def append(self, record: AuditRecord) -> None:
        self.records.append(record)


def make_candidate(
    email: str = "a@b.com",
    phone: str | None = "5141234567",
    password: str = "MotDePasse123!",
) -> AccountCandidate:
    """Build a valid registration candidate."""
    return AccountCandidate(
        given_name="Jean",
        family_name="Dupont",
        email=email,
        password=password,
        phone=phone,
        birth_date=date(1990, 5, 15),
        address="123 Rue de la Paix, Montreal",
    )


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def sessions() -> VerificationSessionStore:
    return VerificationSessionStore()


@pytest.fixture
def notifier() -> Mock:
    """Notification sender that always reports successful delivery."""
    sender = Mock()
    sender.send_email_verification.return_value = True
    sender.send_sms_otp.return_value = True
    return sender


@pytest.fixture
def audit_sink() -> ListAuditSink:
    return ListAuditSink()


@pytest.fixture
def auditor(audit_sink: ListAuditSink) -> AuditRecorder:
    return AuditRecorder(audit_sink)


@pytest.fixture
def registration(
    repository: InMemoryAccountRepository,
    notifier: Mock,
    sessions: VerificationSessionStore,
) -> RegistrationService:
    return RegistrationService(
        repository=repository,
        notifier=notifier,
        sessions=sessions,
        bcrypt_cost=TEST_BCRYPT_COST,
    )


@pytest.fixture
def verification(
    repository: InMemoryAccountRepository,
    sessions: VerificationSessionStore,
    auditor: AuditRecorder,
) -> VerificationService:
    return VerificationService(repository=repository, sessions=sessions, auditor=auditor)


@pytest.fixture
def candidate_factory():
    """Factory building registration candidates with overridable fields."""
    return make_candidate


@pytest.fixture
def candidate() -> AccountCandidate:
    """Candidate with email a@b.com and phone 5141234567."""
    return make_candidate()
