"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.

Request fields default to an empty string so that a missing field reaches
the domain layer and is reported as a 400 with a readable message rather
than a 422 validation error. Null and non-string values are treated the
same way as a missing field. Emails are plain strings: they are matched
exactly as submitted.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from otpauth.domain.ports import UserRecord


class TextFieldsRequest(BaseModel):
    """Base for request bodies made only of text fields."""

    @field_validator("*", mode="before")
    @classmethod
    def blank_unless_text(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""


class SendOtpRequest(TextFieldsRequest):
    """Request model for OTP issuance."""

    email: str = ""


class VerifyOtpRequest(TextFieldsRequest):
    """Request model for OTP verification."""

    email: str = ""
    otp: str = Field("", description="4-digit code received by email")


class RegisterRequest(TextFieldsRequest):
    """Request model for user registration."""

    name: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(TextFieldsRequest):
    """Request model for password login."""

    email: str = ""
    password: str = ""


class UserOut(BaseModel):
    """Public projection of a user; the password hash is never exposed."""

    id: int
    name: str
    email: str
    verified: bool
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserOut":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            verified=user.verified,
            created_at=user.created_at,
        )


class MessageResponse(BaseModel):
    """Plain acknowledgement; also the shape of every error body."""

    msg: str


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    msg: str
    user: UserOut


class LoginResponse(BaseModel):
    """Response model for successful login."""

    msg: str
    token: str
    user: UserOut
