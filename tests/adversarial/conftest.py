"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition, replay and
timing tests. Everything runs against the in-memory backend; the
Postgres uniqueness race is covered by the integration suite.
"""

from collections.abc import Callable

import pytest

from src.domain.authentication import AuthenticationService
from src.domain.registration import RegistrationResult, RegistrationService


@pytest.fixture
def authentication(repository) -> AuthenticationService:
    return AuthenticationService(repository=repository)


@pytest.fixture
def register(
    registration: RegistrationService, candidate_factory
) -> Callable[..., RegistrationResult]:
    """Register a candidate and return the result, codes included."""

    def _register(email: str = "victim@example.com", phone: str | None = None):
        return registration.register(candidate_factory(email=email, phone=phone))

    return _register
