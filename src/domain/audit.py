"""
Audit recorder - Tamper-evident trail of verification and activation events.

Each event yields an AuditRecord with:
- audit_id: "AUDIT_" + millisecond timestamp + "_" + short hash of the email
- fingerprint: SHA-256 over "email|action|details|timestamp", truncated to
  16 uppercase hex characters

Records are appended to an AuditSink and never updated or deleted. The
recorder is a pure observer: it never touches account or session state.
"""

import hashlib
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from .ports import AuditSink

FINGERPRINT_LENGTH = 16
EMAIL_HASH_LENGTH = 8

ACTION_ACCOUNT_ACTIVATED = "ACCOUNT_ACTIVATED"
ACTION_EMAIL_VERIFICATION = "EMAIL_VERIFICATION"
ACTION_PHONE_VERIFICATION = "PHONE_VERIFICATION"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AuditRecord:
    """One immutable audit event."""

    audit_id: str
    email: str
    action: str
    timestamp: datetime
    fingerprint: str
    details: str


def audit_id_for(email: str, timestamp: datetime) -> str:
    """Build the audit identifier from a timestamp and a hash of the email."""
    stamp = timestamp.strftime("%Y%m%d%H%M%S") + f"{timestamp.microsecond // 1000:03d}"
    email_hash = hashlib.sha256(email.encode()).hexdigest()[:EMAIL_HASH_LENGTH]
    return f"AUDIT_{stamp}_{email_hash}"


def fingerprint_for(email: str, action: str, details: str, timestamp: datetime) -> str:
    """Content fingerprint over the event fields."""
    payload = f"{email}|{action}|{details}|{timestamp.isoformat()}"
    return hashlib.sha256(payload.encode()).hexdigest()[:FINGERPRINT_LENGTH].upper()


class AuditRecorder:
    """Produces audit records and appends them to the sink."""

    def __init__(self, sink: AuditSink, clock: Callable[[], datetime] = _utcnow) -> None:
        self._sink = sink
        self._clock = clock

    def record_activation(self, email: str, action: str, details: str) -> str:
        """
        Record an account activation event.

        Args:
            email: Email of the activated account
            action: Action type, e.g. ACCOUNT_ACTIVATED
            details: Free-form description of the state after activation

        Returns:
            The audit identifier
        """
        return self._record(email, action, details).audit_id

    def record_verification(self, email: str, channel: str, succeeded: bool) -> str:
        """
        Record one verification attempt on a channel ("email" or "sms").

        The submitted code itself is never written to the trail.
        """
        action = ACTION_EMAIL_VERIFICATION if channel == "email" else ACTION_PHONE_VERIFICATION
        details = f"channel={channel} result={'success' if succeeded else 'failure'}"
        return self._record(email, action, details).audit_id

    def _record(self, email: str, action: str, details: str) -> AuditRecord:
        timestamp = self._clock()
        record = AuditRecord(
            audit_id=audit_id_for(email, timestamp),
            email=email,
            action=action,
            timestamp=timestamp,
            fingerprint=fingerprint_for(email, action, details, timestamp),
            details=details,
        )
        self._sink.append(record)
        return record
