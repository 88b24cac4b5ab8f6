"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core logic of the OTP-gated auth flow. It
defines its own port interfaces for infrastructure abstraction.
"""

from .auth_flow import AuthFlowService
from .exceptions import (
    AuthFlowError,
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

__all__ = [
    "AuthFlowError",
    "AuthFlowService",
    "DeliveryFailure",
    "DuplicateEmail",
    "EmailNotVerified",
    "EmailSender",
    "IncorrectPassword",
    "InvalidInput",
    "InvalidOTP",
    "LoginResult",
    "OTPLedger",
    "OTPState",
    "TokenIssuer",
    "UserNotFound",
    "UserRecord",
    "UserRepository",
]
