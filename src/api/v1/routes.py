"""
API v1 routes.

Defines REST endpoints for registration, two-factor verification and login.
Domain exceptions are mapped to HTTP errors here; the domain never sees
HTTP concepts.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.dependencies import (
    get_authentication_service,
    get_basic_auth_credentials,
    get_registration_service,
    get_session_store,
    get_verification_service,
)
from src.api.models import (
    ErrorResponse,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    SessionResponse,
    VerifyEmailRequest,
    VerifyEmailResponse,
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from src.domain.account import AccountCandidate
from src.domain.authentication import AuthenticationService
from src.domain.exceptions import (
    AccountNotActive,
    AccountNotFound,
    DuplicateEmail,
    DuplicatePhone,
    EmailNotYetVerified,
    InvalidCode,
    InvalidCredentials,
    InvalidOrExpiredLink,
    InvalidStatusTransition,
    SessionNotFound,
)
from src.domain.registration import RegistrationService
from src.domain.sessions import VerificationSessionStore
from src.domain.verification import VerificationService

router = APIRouter(tags=["v1"])


def _session_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Verification session not found or expired",
    )


def _invalid_code() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Invalid verification code",
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "Email or phone already registered"},
        422: {"description": "Validation error"},
    },
    summary="Register a new account",
    description="Create a PENDING account, send a 6-digit code by email and, "
    "when a phone is given, a 4-digit code by SMS.",
)
async def register(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> RegisterResponse:
    """
    Register a new account and open a verification session.

    The returned session token correlates the following verification calls.
    Codes are only delivered out-of-band.
    """
    candidate = AccountCandidate(
        given_name=request_data.given_name,
        family_name=request_data.family_name,
        email=request_data.email,
        password=request_data.password,
        phone=request_data.phone,
        birth_date=request_data.birth_date,
        address=request_data.address,
    )
    try:
        result = service.register(candidate)
    except DuplicateEmail:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists",
        ) from None
    except DuplicatePhone:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this phone number already exists",
        ) from None

    return RegisterResponse(
        message="Verification code sent",
        email=result.account.email,
        session_token=result.session_token,
        status=result.account.status,
        warnings=result.warnings,
    )


@router.get(
    "/sessions/{session_token}",
    response_model=SessionResponse,
    responses={404: {"model": ErrorResponse, "description": "Unknown or expired session"}},
    summary="Inspect a verification session",
)
async def get_session(
    session_token: str,
    sessions: VerificationSessionStore = Depends(get_session_store),
) -> SessionResponse:
    session = sessions.get(session_token)
    if session is None:
        raise _session_not_found()
    return SessionResponse(
        email=session.email,
        state=session.state,
        expects_otp=session.expects_otp,
    )


@router.post(
    "/verify-email",
    response_model=VerifyEmailResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid code"},
        404: {"model": ErrorResponse, "description": "Unknown or expired session"},
        409: {"model": ErrorResponse, "description": "Account cannot be activated"},
    },
    summary="Confirm the email code",
)
async def verify_email(
    request_data: VerifyEmailRequest,
    service: VerificationService = Depends(get_verification_service),
) -> VerifyEmailResponse:
    """Submit the emailed code with the session token; activates the account."""
    try:
        audit_id = service.submit_email_code(request_data.session_token, request_data.code)
    except (SessionNotFound, AccountNotFound):
        raise _session_not_found() from None
    except InvalidCode:
        raise _invalid_code() from None
    except InvalidStatusTransition:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Account cannot be activated",
        ) from None
    return VerifyEmailResponse(message="Account activated", audit_id=audit_id)


@router.get(
    "/verify-email",
    response_model=VerifyEmailResponse,
    responses={404: {"model": ErrorResponse, "description": "Invalid or expired link"}},
    summary="Activate through the emailed link",
)
async def verify_email_link(
    code: str = Query(..., min_length=1),
    service: VerificationService = Depends(get_verification_service),
) -> VerifyEmailResponse:
    """Target of the link in the verification email; resolves the session by code."""
    try:
        audit_id = service.submit_email_code_by_link(code)
    except (InvalidOrExpiredLink, AccountNotFound, InvalidStatusTransition):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid or expired verification link",
        ) from None
    return VerifyEmailResponse(message="Account activated", audit_id=audit_id)


@router.post(
    "/verify-otp",
    response_model=VerifyOtpResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid code"},
        404: {"model": ErrorResponse, "description": "Unknown or expired session"},
        409: {
            "model": ErrorResponse,
            "description": "Email not verified yet, or account cannot be completed",
        },
    },
    summary="Confirm the SMS one-time password",
)
async def verify_otp(
    request_data: VerifyOtpRequest,
    service: VerificationService = Depends(get_verification_service),
) -> VerifyOtpResponse:
    """Submit the SMS code; only accepted after the email code was confirmed."""
    try:
        service.submit_otp_code(request_data.session_token, request_data.code)
    except (SessionNotFound, AccountNotFound):
        raise _session_not_found() from None
    except EmailNotYetVerified:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Verify your email before your phone",
        ) from None
    except InvalidCode:
        raise _invalid_code() from None
    except InvalidStatusTransition:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Account cannot be completed",
        ) from None
    return VerifyOtpResponse(message="Registration complete")


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        403: {"model": ErrorResponse, "description": "Account not activated"},
    },
    summary="Log in with an activated account",
    description="Credentials are provided via HTTP BASIC AUTH.",
)
async def login(
    credentials: tuple[str, str] = Depends(get_basic_auth_credentials),
    service: AuthenticationService = Depends(get_authentication_service),
) -> LoginResponse:
    email, password = credentials
    try:
        account = service.login(email, password)
    except InvalidCredentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        ) from None
    except AccountNotActive:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account not activated, verify your email first",
        ) from None
    return LoginResponse(
        message="Login successful",
        email=account.email,
        full_name=account.full_name,
        status=account.status,
    )
