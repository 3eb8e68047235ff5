"""
Unit tests for verification code generation.

Tests verify:
- Email codes are 6-digit zero-padded strings
- OTP codes are 4-digit zero-padded strings
- Codes are drawn from the whole range (randomness check)
"""

import re
from unittest.mock import patch

from src.domain import codes
from src.domain.codes import generate_email_code, generate_otp_code


class TestEmailCode:
    """Tests for generate_email_code."""

    def test_email_code_is_6_digits(self) -> None:
        """Email code matches ^\\d{6}$."""
        for _ in range(50):
            assert re.match(r"^\d{6}$", generate_email_code())

    def test_email_code_preserves_leading_zeros(self) -> None:
        """A small random value is zero-padded to 6 characters."""
        with patch.object(codes.secrets, "randbelow", return_value=42):
            assert generate_email_code() == "000042"

    def test_email_code_upper_bound(self) -> None:
        """randbelow is asked for the full 000000-999999 range."""
        with patch.object(codes.secrets, "randbelow", return_value=999999) as randbelow:
            assert generate_email_code() == "999999"
        randbelow.assert_called_once_with(1_000_000)

    def test_email_codes_vary(self) -> None:
        """Email codes are not always the same."""
        assert len({generate_email_code() for _ in range(10)}) >= 2


class TestOtpCode:
    """Tests for generate_otp_code."""

    def test_otp_code_is_4_digits(self) -> None:
        """OTP matches ^\\d{4}$."""
        for _ in range(50):
            assert re.match(r"^\d{4}$", generate_otp_code())

    def test_otp_code_preserves_leading_zeros(self) -> None:
        with patch.object(codes.secrets, "randbelow", return_value=7):
            assert generate_otp_code() == "0007"

    def test_otp_code_range(self) -> None:
        """randbelow is asked for the full 0000-9999 range."""
        with patch.object(codes.secrets, "randbelow", return_value=0) as randbelow:
            assert generate_otp_code() == "0000"
        randbelow.assert_called_once_with(10_000)

    def test_otp_codes_vary(self) -> None:
        """OTP codes are not always the same (probability of 20 equal is 1/10^76)."""
        assert len({generate_otp_code() for _ in range(20)}) >= 2
