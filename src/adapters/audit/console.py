"""
Logging audit sink adapter - Implements AuditSink protocol.

Audit records are written as one structured log line each, on a dedicated
logger so that deployments can route the trail to an append-only handler.
"""

import logging

from src.domain.audit import AuditRecord

logger = logging.getLogger(__name__)


class LoggingAuditSink:
    """
    Implements AuditSink protocol via logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def append(self, record: AuditRecord) -> None:
        logger.info(
            "[AUDIT] id=%s email=%s action=%s timestamp=%s fingerprint=%s details=%s",
            record.audit_id,
            record.email,
            record.action,
            record.timestamp.isoformat(),
            record.fingerprint,
            record.details,
        )
