"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Form-level validation (name lengths, phone format, address length) lives
here; the domain assumes its input has passed these checks.
"""

from datetime import date

from pydantic import BaseModel, EmailStr, Field

from src.domain.ports import AccountStatus, SessionState


class RegisterRequest(BaseModel):
    """Request model for account registration."""

    given_name: str = Field(..., min_length=2, max_length=50)
    family_name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    phone: str | None = Field(
        None,
        pattern=r"^\d{10}$",
        description="Optional 10-digit phone number for SMS verification",
    )
    birth_date: date
    address: str = Field(..., min_length=10, max_length=200)


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    message: str
    email: str
    session_token: str
    status: AccountStatus
    warnings: list[str] = []


class VerifyEmailRequest(BaseModel):
    """Request model for email code submission."""

    session_token: str = Field(..., min_length=1)
    code: str = Field(
        ...,
        pattern=r"^\s*\d{6}\s*$",
        description="6-digit code received by email",
    )


class VerifyEmailResponse(BaseModel):
    """Response model for successful email verification."""

    message: str
    audit_id: str


class VerifyOtpRequest(BaseModel):
    """Request model for SMS one-time password submission."""

    session_token: str = Field(..., min_length=1)
    code: str = Field(
        ...,
        pattern=r"^\s*\d{4}\s*$",
        description="4-digit code received by SMS",
    )


class VerifyOtpResponse(BaseModel):
    """Response model for successful OTP verification."""

    message: str


class SessionResponse(BaseModel):
    """Public view of a verification session (codes are never exposed)."""

    email: str
    state: SessionState
    expects_otp: bool


class LoginResponse(BaseModel):
    """Response model for successful login."""

    message: str
    email: str
    full_name: str
    status: AccountStatus


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
