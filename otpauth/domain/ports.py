"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Protocol


class OTPState(str, Enum):
    """
    Per-email server-side OTP lifecycle.

    Transitions:
    - NO_OTP -> OTP_PENDING (send_otp)
    - OTP_PENDING -> OTP_PENDING (resend overwrites the code)
    - OTP_PENDING -> VERIFIED (verify_otp with the current code)
    - VERIFIED -> REGISTERED (register consumes the verified mark)
    """

    NO_OTP = "NO_OTP"
    OTP_PENDING = "OTP_PENDING"
    VERIFIED = "VERIFIED"
    REGISTERED = "REGISTERED"


@dataclass(frozen=True)
class UserRecord:
    """Registered user as held by the credential store."""

    id: int
    name: str
    email: str
    password_hash: str
    verified: bool
    created_at: datetime | None = None


@dataclass(frozen=True)
class LoginResult:
    """Successful login: signed session token plus the user."""

    token: str
    user: UserRecord


class OTPLedger(Protocol):
    """Port interface for the volatile email -> code table."""

    def put(self, email: str, code: str) -> None:
        """Store code for email, replacing any previous code."""
        ...

    def peek(self, email: str) -> str | None:
        """Return the live code for email without removing it."""
        ...

    def consume(self, email: str) -> None:
        """Remove the code for email; no-op if absent."""
        ...

    def consume_if_matches(self, email: str, code: str) -> bool:
        """
        Atomically remove the entry if code equals the stored code.

        Returns:
            True if the entry matched and was removed, False otherwise
            (the entry is left in place on mismatch)
        """
        ...

    def mark_verified(self, email: str) -> None:
        """Remember that email completed OTP verification."""
        ...

    def is_verified(self, email: str) -> bool:
        """Return True if email holds a live verified mark."""
        ...

    def consume_verified(self, email: str) -> bool:
        """Remove the verified mark; True if one was present."""
        ...


class UserRepository(Protocol):
    """Port interface for the credential store."""

    def find_by_email(self, email: str) -> UserRecord | None:
        """Return the user with this exact email, or None."""
        ...

    def create(
        self, name: str, email: str, password_hash: str, verified: bool
    ) -> UserRecord | None:
        """
        Insert a new user.

        Returns:
            The created record, or None if the email is already taken
        """
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send(self, to: str, subject: str, html_body: str) -> None:
        """
        Deliver an HTML message.

        Raises:
            Exception: Any transport failure; the caller treats it as
            a delivery failure
        """
        ...


class TokenIssuer(Protocol):
    """Port interface for signed session tokens."""

    def issue(self, user_id: int) -> str:
        """Return a signed token for user_id."""
        ...

    def verify(self, token: str) -> dict[str, Any]:
        """Return the claims of a valid, unexpired token."""
        ...
