"""
Client auth flow - State machine behind the login/signup form.

AuthFlow owns the form fields and flow flags, sequences the calls
send-otp -> verify-otp -> register (signup) or login, and derives which
controls are visible or enabled. It holds no UI code: every user-visible
message goes through the `notify` callback, which plays the role of a
blocking alert.

Gating rules:
- OTP controls only while signing up and not yet verified
- Password only when logging in or once the email is verified
- Submit only when logging in or once the email is verified
- Email is locked once verified
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from otpauth.config.settings import Settings, get_settings

from .api import ApiError, AuthApiClient
from .countdown import CountdownPhase, ResendCountdown

logger = logging.getLogger(__name__)

OTP_LENGTH = 4


@dataclass
class FormState:
    name: str = ""
    email: str = ""
    otp: str = ""
    password: str = ""
    is_login: bool = False
    otp_sent: bool = False
    otp_verified: bool = False
    loading: bool = False


class AuthFlow:
    """Drives one login/signup form instance."""

    def __init__(
        self,
        api: AuthApiClient,
        notify: Callable[[str], None],
        countdown: ResendCountdown | None = None,
    ) -> None:
        self.api = api
        self.notify = notify
        self.countdown = countdown or ResendCountdown()
        self.state = FormState()
        self.token: str | None = None
        self.user: dict[str, Any] | None = None

    # View

    @property
    def show_otp_section(self) -> bool:
        return not self.state.is_login and not self.state.otp_verified

    @property
    def show_password(self) -> bool:
        return self.state.is_login or self.state.otp_verified

    @property
    def submit_enabled(self) -> bool:
        return self.state.is_login or self.state.otp_verified

    @property
    def can_send_otp(self) -> bool:
        return not self.state.loading and bool(self.state.email)

    @property
    def show_resend(self) -> bool:
        return self.show_otp_section and self.state.otp_sent and self.countdown.can_resend

    @property
    def resend_label(self) -> str:
        if self.countdown.phase is CountdownPhase.PENDING:
            return f"Resend OTP in {self.countdown.seconds_left}s"
        return "Resend OTP"

    # Input

    def set_field(self, name: str, value: str) -> None:
        if name not in ("name", "email", "otp", "password"):
            raise ValueError(f"Unknown field: {name}")
        if name == "email" and self.state.otp_verified:
            return
        if name == "otp":
            value = value[:OTP_LENGTH]
        setattr(self.state, name, value)

    def toggle_mode(self) -> None:
        """Switch between login and signup, clearing everything else."""
        self.countdown.cancel()
        self.state = FormState(is_login=not self.state.is_login)
        self.token = None
        self.user = None

    # Actions

    async def send_otp(self) -> bool:
        """Request a code (also used for resend)."""
        if "@" not in self.state.email:
            self.notify("Please enter a valid email")
            return False

        self.state.loading = True
        try:
            body = await self.api.send_otp(self.state.email)
        except ApiError as e:
            self.notify(e.msg or "Error sending OTP")
            return False
        finally:
            self.state.loading = False

        self.state.otp_sent = True
        self.countdown.start()
        self.notify(body.get("msg", "OTP sent"))
        return True

    async def verify_otp(self) -> bool:
        try:
            body = await self.api.verify_otp(self.state.email, self.state.otp)
        except ApiError as e:
            self.notify(e.msg or "Invalid OTP")
            return False

        self.notify(body.get("msg", "OTP verified"))
        self.state.otp_verified = True
        self.state.otp_sent = False
        self.countdown.cancel()
        return True

    async def submit(self) -> bool:
        if self.state.is_login:
            return await self._login()

        if not self.state.otp_verified:
            self.notify("Please verify email first")
            return False
        return await self._register()

    async def aclose(self) -> None:
        """Tear down: stop the countdown and close the HTTP client."""
        self.countdown.cancel()
        await self.api.aclose()

    async def _login(self) -> bool:
        try:
            body = await self.api.login(self.state.email, self.state.password)
        except ApiError as e:
            self.notify(e.msg or "Login failed")
            return False

        self.token = body.get("token")
        self.user = body.get("user")
        logger.info("Logged in as %s", self.state.email)
        self.notify("Login successful!")
        return True

    async def _register(self) -> bool:
        try:
            body = await self.api.register(
                self.state.name, self.state.email, self.state.password
            )
        except ApiError as e:
            self.notify(e.msg or "Registration failed")
            return False

        self.user = body.get("user")
        logger.info("Registered %s", self.state.email)
        self.notify("Account created successfully!")
        return True


def create_flow(notify: Callable[[str], None], settings: Settings | None = None) -> AuthFlow:
    """Build an AuthFlow against the configured API with the configured cooldown."""
    settings = settings or get_settings()
    return AuthFlow(
        api=AuthApiClient(settings.api_base_url),
        notify=notify,
        countdown=ResendCountdown(seconds=settings.resend_cooldown_seconds),
    )
