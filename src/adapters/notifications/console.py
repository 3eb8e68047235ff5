"""
Console notification adapter - Implements NotificationSender protocol.

This module provides a console-based implementation of the domain's
notification port, logging verification codes for demo purposes.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleNotificationSender:
    """
    Implements NotificationSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - codes are logged instead of delivered.
    """

    def __init__(self, link_base_url: str = "http://localhost:8000/v1/verify-email") -> None:
        self._link_base_url = link_base_url

    def send_email_verification(self, email: str, code: str, name: str) -> bool:
        """
        Log the verification email (simulates email delivery).

        The message carries both the code and an activation link that
        resolves the session by code alone.

        Args:
            email: Recipient email address (normalized by domain layer)
            code: 6-digit verification code
            name: Given name used to greet the registrant

        Returns:
            True (console delivery cannot fail)
        """
        link = f"{self._link_base_url}?code={code}"
        logger.info("[VERIFICATION] Email: %s Name: %s Code: %s Link: %s", email, name, code, link)
        return True

    def send_sms_otp(self, phone: str, code: str, name: str) -> bool:
        """
        Log the SMS one-time password (simulates SMS delivery).

        Args:
            phone: Recipient phone number
            code: 4-digit OTP
            name: Given name used to greet the registrant

        Returns:
            True if a phone number was given, False otherwise
        """
        if not phone or not phone.strip():
            logger.warning("[OTP] No phone number for %s, SMS not sent", name)
            return False
        logger.info("[OTP] Phone: %s Name: %s Code: %s", phone, name, code)
        return True
