"""
Domain exceptions - Semantic error types for the OTP auth flow.

Each exception carries the short, human-readable message that the API
returns to the client. Messages never reveal whether an email has a
pending code.
"""


class AuthFlowError(Exception):
    """Base class for auth flow domain errors."""

    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(AuthFlowError):
    """A required field is missing or blank."""

    default_message = "Invalid input"


class InvalidOTP(AuthFlowError):
    """Submitted code does not match, or no code is pending."""

    default_message = "Invalid OTP"


class DuplicateEmail(AuthFlowError):
    """A user with this email already exists."""

    default_message = "Email already used"


class EmailNotVerified(AuthFlowError):
    """Registration attempted without a prior successful OTP verification."""

    default_message = "Email not verified"


class UserNotFound(AuthFlowError):
    """No user is registered under this email."""

    default_message = "User not found"


class IncorrectPassword(AuthFlowError):
    """Password does not match the stored hash."""

    default_message = "Incorrect password"


class DeliveryFailure(AuthFlowError):
    """The notification channel rejected the OTP message."""

    default_message = "Failed to send OTP"
