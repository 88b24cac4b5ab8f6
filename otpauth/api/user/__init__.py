"""
User API package.

Contains the routes of the OTP-gated registration and login flow.
"""

from otpauth.api.user.routes import router

__all__ = ["router"]
