"""
In-memory OTP ledger adapter - Implements OTPLedger protocol.

Process-local table from email to the currently valid code. Every
operation holds a single lock, so the compare-and-delete performed on
verification cannot interleave with a concurrent resend for the same
email.

The table is not shared between processes. Deployments running more
than one instance need a shared store behind the same protocol.
"""

import logging
import secrets
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Entry:
    value: str
    issued_at: float


class InMemoryOTPLedger:
    """
    Implements OTPLedger protocol with dicts guarded by a lock.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Emails are used as given (case-sensitive, never normalized).
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            ttl_seconds: Lifetime of codes and verified marks; None disables expiry
            clock: Monotonic time source (injectable for tests)
        """
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._codes: dict[str, _Entry] = {}
        self._verified: dict[str, float] = {}

    def put(self, email: str, code: str) -> None:
        with self._lock:
            self._codes[email] = _Entry(code, self._clock())
            self._verified.pop(email, None)

    def peek(self, email: str) -> str | None:
        with self._lock:
            entry = self._live_code(email)
            return entry.value if entry else None

    def consume(self, email: str) -> None:
        with self._lock:
            self._codes.pop(email, None)

    def consume_if_matches(self, email: str, code: str) -> bool:
        with self._lock:
            entry = self._live_code(email)
            if entry is None:
                return False
            if not secrets.compare_digest(entry.value.encode(), code.encode()):
                return False
            del self._codes[email]
            return True

    def mark_verified(self, email: str) -> None:
        with self._lock:
            self._verified[email] = self._clock()

    def is_verified(self, email: str) -> bool:
        with self._lock:
            return self._live_mark(email)

    def consume_verified(self, email: str) -> bool:
        with self._lock:
            if not self._live_mark(email):
                return False
            del self._verified[email]
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._codes)

    def _expired(self, issued_at: float) -> bool:
        return self._ttl is not None and self._clock() - issued_at > self._ttl

    def _live_code(self, email: str) -> _Entry | None:
        # Caller holds the lock
        entry = self._codes.get(email)
        if entry is not None and self._expired(entry.issued_at):
            logger.info("OTP for %s expired", email)
            del self._codes[email]
            return None
        return entry

    def _live_mark(self, email: str) -> bool:
        # Caller holds the lock
        marked_at = self._verified.get(email)
        if marked_at is None:
            return False
        if self._expired(marked_at):
            del self._verified[email]
            return False
        return True
