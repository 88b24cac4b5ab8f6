"""
Auth flow domain service - OTP-gated registration and password login.

This module contains the core business logic. It orchestrates the OTP
ledger, the credential store, the email channel, and the token issuer,
all injected as ports.

Server-side flow per email
==========================

    NO_OTP --send_otp--> OTP_PENDING --verify_otp--> VERIFIED --register--> REGISTERED
                           |    ^
                           +----+  (resend overwrites the pending code)

The pending code is single-use: a successful verification removes it.
A wrong code leaves it in place so the user can retry without a resend.

Registration trusts nothing the client says about verification. When
``require_verified_email`` is enabled (the default) the verified mark left
by ``verify_otp`` must be present and is consumed by ``register``.
"""

import logging
import secrets
from dataclasses import dataclass

import bcrypt

from .exceptions import (
    DeliveryFailure,
    DuplicateEmail,
    EmailNotVerified,
    IncorrectPassword,
    InvalidInput,
    InvalidOTP,
    UserNotFound,
)
from .ports import (
    EmailSender,
    LoginResult,
    OTPLedger,
    OTPState,
    TokenIssuer,
    UserRecord,
    UserRepository,
)

logger = logging.getLogger(__name__)

OTP_SUBJECT = "Your OTP Code"

# bcrypt accepts at most this many bytes of a password
MAX_PASSWORD_BYTES = 72


def render_otp_email(code: str) -> str:
    """HTML body carrying the code."""
    return f"<h2>Your OTP is: <b>{code}</b></h2>"


@dataclass
class AuthFlowService:
    """
    Domain service for the OTP-gated auth flow.

    Exposes the four entry points the API calls: send_otp, verify_otp,
    register and login.
    """

    users: UserRepository
    ledger: OTPLedger
    email_sender: EmailSender
    tokens: TokenIssuer
    bcrypt_cost: int = 10
    require_verified_email: bool = True

    def send_otp(self, email: str) -> None:
        """
        Issue a fresh code for email and deliver it.

        The code is stored before delivery and is never returned to the
        caller; it only reaches the user through the email channel.

        Raises:
            InvalidInput: If email is missing
            DeliveryFailure: If the email channel fails
        """
        if not email or not email.strip():
            raise InvalidInput("Email is required")

        code = self._generate_otp()
        self.ledger.put(email, code)

        try:
            self.email_sender.send(email, OTP_SUBJECT, render_otp_email(code))
        except Exception as e:
            logger.exception("OTP delivery failed for %s", email)
            raise DeliveryFailure() from e

        logger.info("OTP issued for %s", email)

    def verify_otp(self, email: str, code: str) -> None:
        """
        Check code against the pending entry for email.

        Raises:
            InvalidOTP: On mismatch or when nothing is pending
        """
        if not email or not code or not self.ledger.consume_if_matches(email, code):
            logger.warning("OTP verification failed for %s", email)
            raise InvalidOTP()

        self.ledger.mark_verified(email)
        logger.info("OTP verified for %s", email)

    def register(self, name: str, email: str, password: str) -> UserRecord:
        """
        Create a verified user account.

        Args:
            name: Display name
            email: Email address, stored exactly as given
            password: Plaintext password (will be hashed)

        Returns:
            The created user record

        Raises:
            InvalidInput: If a field is missing or the password is too long
            DuplicateEmail: If the email is already registered
            EmailNotVerified: If verification is required and absent
        """
        self._require(name=name, email=email, password=password)
        if len(password.encode()) > MAX_PASSWORD_BYTES:
            raise InvalidInput(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        if self.users.find_by_email(email) is not None:
            raise DuplicateEmail()

        if self.require_verified_email and not self.ledger.consume_verified(email):
            logger.warning("Registration without verified OTP for %s", email)
            raise EmailNotVerified()

        try:
            password_hash = self._hash_password(password)
            user = self.users.create(name, email, password_hash, verified=True)
        except Exception:
            if self.require_verified_email:
                # The mark was consumed above; the user keeps it
                self.ledger.mark_verified(email)
            raise

        if user is None:
            # Lost a concurrent race for the same email
            raise DuplicateEmail()

        logger.info("User %s registered", user.id)
        return user

    def login(self, email: str, password: str) -> LoginResult:
        """
        Authenticate by password and issue a session token.

        The user lookup happens first, so an unknown email never reaches
        the bcrypt comparison.

        Raises:
            InvalidInput: If a field is missing
            UserNotFound: If no user has this email
            IncorrectPassword: If the password does not match
        """
        self._require(email=email, password=password)

        user = self.users.find_by_email(email)
        if user is None:
            raise UserNotFound()

        if not self._check_password(password, user.password_hash):
            logger.warning("Incorrect password for user %s", user.id)
            raise IncorrectPassword()

        token = self.tokens.issue(user.id)
        logger.info("User %s logged in", user.id)
        return LoginResult(token=token, user=user)

    def otp_state(self, email: str) -> OTPState:
        """Report where email currently sits in the flow."""
        if self.users.find_by_email(email) is not None:
            return OTPState.REGISTERED
        if self.ledger.is_verified(email):
            return OTPState.VERIFIED
        if self.ledger.peek(email) is not None:
            return OTPState.OTP_PENDING
        return OTPState.NO_OTP

    def _require(self, **fields: str) -> None:
        """Raise InvalidInput naming the first blank field."""
        for field_name, value in fields.items():
            if not value or not value.strip():
                raise InvalidInput(f"{field_name.capitalize()} is required")

    def _generate_otp(self) -> str:
        """
        Generate a 4-digit code, uniform over 1000-9999.

        Uses secrets module for cryptographic randomness.
        """
        return str(1000 + secrets.randbelow(9000))

    def _hash_password(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self.bcrypt_cost)).decode()

    def _check_password(self, password: str, password_hash: str) -> bool:
        secret = password.encode()
        if len(secret) > MAX_PASSWORD_BYTES:
            # No stored hash can match; bcrypt refuses such input
            return False
        return bcrypt.checkpw(secret, password_hash.encode())
