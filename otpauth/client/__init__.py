"""
Client side of the auth flow.

Contains the HTTP client, the resend countdown and the form state
machine that sequences send-otp, verify-otp, register and login.
"""

from .api import ApiError, AuthApiClient
from .countdown import CountdownPhase, ResendCountdown
from .flow import AuthFlow, FormState, create_flow

__all__ = [
    "ApiError",
    "AuthApiClient",
    "AuthFlow",
    "CountdownPhase",
    "FormState",
    "ResendCountdown",
    "create_flow",
]
