"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from datetime import timedelta

from fastapi import Depends, Request
from psycopg_pool import ConnectionPool

from otpauth.adapters.ledger import InMemoryOTPLedger
from otpauth.adapters.repository.postgres import PostgresUserRepository
from otpauth.adapters.smtp import ConsoleEmailSender, SmtpEmailSender
from otpauth.adapters.tokens import JwtTokenIssuer
from otpauth.config.settings import Settings, get_settings
from otpauth.domain.auth_flow import AuthFlowService
from otpauth.domain.ports import EmailSender


def build_email_sender(settings: Settings) -> EmailSender:
    """SMTP sender when credentials are configured, console sender otherwise."""
    if settings.smtp_username and settings.smtp_password:
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            from_name=settings.mail_from_name,
        )
    return ConsoleEmailSender()


def build_token_issuer(settings: Settings) -> JwtTokenIssuer:
    return JwtTokenIssuer(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(days=settings.token_ttl_days),
    )


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_otp_ledger(request: Request) -> InMemoryOTPLedger:
    """
    Get the process-wide OTP ledger from app state.

    A single ledger must serve every request, so it lives on app.state
    rather than being created per request.
    """
    return request.app.state.otp_ledger


def get_repository(request: Request) -> PostgresUserRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresUserRepository(pool)


def get_auth_service(
    request: Request,
    users: PostgresUserRepository = Depends(get_repository),
) -> AuthFlowService:
    """
    Create auth flow service with injected dependencies.

    Wires together the repository, OTP ledger, email sender and token
    issuer for the domain service.
    """
    settings = get_settings()
    return AuthFlowService(
        users=users,
        ledger=get_otp_ledger(request),
        email_sender=request.app.state.email_sender,
        tokens=request.app.state.token_issuer,
        bcrypt_cost=settings.bcrypt_cost,
        require_verified_email=settings.require_verified_email,
    )
