"""
Verification session store - In-flight verification state.

A verification session bridges account creation and activation. It is
keyed by an opaque token handed to the registrant and holds the codes
issued at registration time.

Concurrency
===========

The store is shared by every in-flight request. A store-level lock guards
the token map and the email-code index; each session carries its own lock
so that read-then-mutate-then-delete sequences on one token never
interleave. Sessions are independent, so no cross-session locking exists.

Expiry
======

A time-to-live is optional. Without one, sessions live until terminal
verification. With one, expired sessions are evicted lazily on access or
explicitly by purge_expired(). create() also sweeps at most once per TTL
period, so abandoned sessions do not accumulate. len() counts live sessions.
"""

import logging
import secrets
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone

from .exceptions import SessionNotFound
from .ports import SessionState

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class VerificationSession:
    """State of one registrant's progress through verification."""

    token: str
    email: str
    email_code: str
    otp_code: str
    expects_otp: bool = False
    email_verified: bool = False
    state: SessionState = SessionState.CREATED
    created_at: datetime = field(default_factory=_utcnow)
    lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def mark_email_verified(self) -> None:
        self.email_verified = True
        self.state = SessionState.EMAIL_VERIFIED


class VerificationSessionStore:
    """Process-wide mapping from session token to verification session."""

    def __init__(
        self,
        *,
        ttl: timedelta | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._sessions: dict[str, VerificationSession] = {}
        # email code -> insertion-ordered set of tokens
        self._by_email_code: dict[str, dict[str, None]] = {}
        self._lock = threading.Lock()
        self._next_sweep: datetime | None = None

    @property
    def ttl(self) -> timedelta | None:
        return self._ttl

    def __len__(self) -> int:
        """Number of live sessions; expired ones are evicted first."""
        with self._lock:
            self._evict_expired()
            return len(self._sessions)

    def __contains__(self, token: object) -> bool:
        if not isinstance(token, str):
            return False
        with self._lock:
            return self._live(token) is not None

    def create(
        self, email: str, email_code: str, otp_code: str, *, expects_otp: bool = False
    ) -> str:
        """
        Open a new session and return its freshly generated token.

        Args:
            email: Normalized email of the account being verified
            email_code: 6-digit code sent by email
            otp_code: 4-digit code sent by SMS
            expects_otp: True when a phone was supplied and an OTP stage follows
        """
        token = secrets.token_urlsafe(32)
        session = VerificationSession(
            token=token,
            email=email,
            email_code=email_code,
            otp_code=otp_code,
            expects_otp=expects_otp,
            created_at=self._clock(),
        )
        with self._lock:
            self._maybe_sweep()
            self._sessions[token] = session
            self._by_email_code.setdefault(email_code, {})[token] = None
        return token

    def get(self, token: str) -> VerificationSession | None:
        """Return a snapshot of the live session, or None."""
        with self._lock:
            session = self._live(token)
            return replace(session) if session is not None else None

    @contextmanager
    def acquire(self, token: str) -> Iterator[VerificationSession]:
        """
        Hold the session's lock for an atomic read-then-mutate sequence.

        Raises:
            SessionNotFound: If the token is unknown, expired, or was
                completed while waiting for the lock
        """
        with self._lock:
            session = self._live(token)
        if session is None:
            raise SessionNotFound(token)
        with session.lock:
            if session.state.is_terminal:
                raise SessionNotFound(token)
            yield session

    def complete(self, session: VerificationSession) -> None:
        """Remove a session that reached terminal verification."""
        with self._lock:
            self._discard(session, SessionState.COMPLETE)

    def retire_email_code(self, session: VerificationSession) -> None:
        """Drop the session from email-code lookup once the code is used."""
        with self._lock:
            self._unindex(session)

    def find_token_by_email_code(self, code: str) -> str | None:
        """Return the token of a live session issued `code`, or None."""
        with self._lock:
            for token in list(self._by_email_code.get(code, ())):
                if self._live(token) is not None:
                    return token
        return None

    def purge_expired(self) -> int:
        """Evict every expired session and return how many were removed."""
        if self._ttl is None:
            return 0
        with self._lock:
            purged = self._evict_expired()
        if purged:
            logger.info("Purged %d expired verification session(s)", purged)
        return purged

    # Helpers below expect self._lock to be held.

    def _maybe_sweep(self) -> None:
        # At most one full sweep per TTL period, so abandoned sessions are
        # dropped even if nobody looks them up again.
        if self._ttl is None:
            return
        now = self._clock()
        if self._next_sweep is not None and now < self._next_sweep:
            return
        self._next_sweep = now + self._ttl
        purged = self._evict_expired()
        if purged:
            logger.info("Evicted %d abandoned verification session(s)", purged)

    def _evict_expired(self) -> int:
        if self._ttl is None:
            return 0
        expired = [s for s in self._sessions.values() if self._is_expired(s)]
        for session in expired:
            self._discard(session, SessionState.TERMINATED)
        return len(expired)

    def _live(self, token: str) -> VerificationSession | None:
        session = self._sessions.get(token)
        if session is None:
            return None
        if self._is_expired(session):
            self._discard(session, SessionState.TERMINATED)
            return None
        return session

    def _is_expired(self, session: VerificationSession) -> bool:
        return self._ttl is not None and session.created_at + self._ttl <= self._clock()

    def _discard(self, session: VerificationSession, state: SessionState) -> None:
        self._sessions.pop(session.token, None)
        self._unindex(session)
        session.state = state

    def _unindex(self, session: VerificationSession) -> None:
        tokens = self._by_email_code.get(session.email_code)
        if tokens is None:
            return
        tokens.pop(session.token, None)
        if not tokens:
            del self._by_email_code[session.email_code]
