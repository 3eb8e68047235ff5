"""
Verification code generation.

Codes are drawn uniformly with the secrets module and returned as
zero-padded strings to preserve leading zeros. Codes are scoped to one
verification session: collisions across sessions, or between the email
code and the OTP of the same session, are possible and accepted.
"""

import secrets

EMAIL_CODE_LENGTH = 6
OTP_CODE_LENGTH = 4


def _numeric_code(length: int) -> str:
    return f"{secrets.randbelow(10**length):0{length}d}"


def generate_email_code() -> str:
    """Generate a 6-digit email verification code (000000-999999)."""
    return _numeric_code(EMAIL_CODE_LENGTH)


def generate_otp_code() -> str:
    """Generate a 4-digit SMS one-time password (0000-9999)."""
    return _numeric_code(OTP_CODE_LENGTH)
