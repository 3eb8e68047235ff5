"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
The process-wide collaborators (repository, session store, notifier,
audit recorder) live on app.state and are wired during lifespan startup.
"""

from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from src.config.settings import get_settings
from src.domain.audit import AuditRecorder
from src.domain.authentication import AuthenticationService
from src.domain.ports import AccountRepository, NotificationSender
from src.domain.registration import RegistrationService
from src.domain.sessions import VerificationSessionStore
from src.domain.verification import VerificationService


def get_repository(request: Request) -> AccountRepository:
    """Get the account repository from app state."""
    return request.app.state.repository


def get_session_store(request: Request) -> VerificationSessionStore:
    """Get the process-wide verification session store from app state."""
    return request.app.state.sessions


def get_notifier(request: Request) -> NotificationSender:
    return request.app.state.notifier


def get_auditor(request: Request) -> AuditRecorder:
    return request.app.state.auditor


def get_registration_service(request: Request) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repository, notifier and session store.
    """
    return RegistrationService(
        repository=get_repository(request),
        notifier=get_notifier(request),
        sessions=get_session_store(request),
        bcrypt_cost=get_settings().bcrypt_cost,
    )


def get_verification_service(request: Request) -> VerificationService:
    """Create the verification state machine with injected dependencies."""
    return VerificationService(
        repository=get_repository(request),
        sessions=get_session_store(request),
        auditor=get_auditor(request),
    )


def get_authentication_service(request: Request) -> AuthenticationService:
    return AuthenticationService(repository=get_repository(request))


# HTTP BASIC AUTH security scheme for OpenAPI documentation
http_basic = HTTPBasic()


def get_basic_auth_credentials(
    credentials: HTTPBasicCredentials = Depends(http_basic),
) -> tuple[str, str]:
    """
    Extract and normalize credentials from HTTP BASIC AUTH header.

    FastAPI's HTTPBasic automatically:
    - Returns 401 for missing Authorization header
    - Returns 401 for malformed base64 encoding
    - Parses base64(email:password) format

    Returns:
        Tuple of (normalized_email, password)
    """
    email = credentials.username.strip().lower()
    password = credentials.password
    return email, password
