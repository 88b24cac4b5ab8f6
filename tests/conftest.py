"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory fakes of the credential store and email channel
- A fully wired AuthFlowService over the real ledger and token adapters
- A FastAPI test application with the service injected
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from otpauth.adapters.ledger import InMemoryOTPLedger
from otpauth.adapters.tokens import JwtTokenIssuer
from otpauth.api.dependencies import get_auth_service
from otpauth.api.errors import install_error_handlers
from otpauth.api.user import router
from otpauth.domain.auth_flow import AuthFlowService
from tests.fakes import (
    TEST_BCRYPT_COST,
    TEST_SECRET,
    FakeUserRepository,
    RecordingEmailSender,
)


@pytest.fixture
def users() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def ledger() -> InMemoryOTPLedger:
    return InMemoryOTPLedger()


@pytest.fixture
def sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def tokens() -> JwtTokenIssuer:
    return JwtTokenIssuer(secret_key=TEST_SECRET)


@pytest.fixture
def service(
    users: FakeUserRepository,
    ledger: InMemoryOTPLedger,
    sender: RecordingEmailSender,
    tokens: JwtTokenIssuer,
) -> AuthFlowService:
    """Auth flow service over fakes, requiring OTP verification before register."""
    return AuthFlowService(
        users=users,
        ledger=ledger,
        email_sender=sender,
        tokens=tokens,
        bcrypt_cost=TEST_BCRYPT_COST,
    )


@pytest.fixture
def app(service: AuthFlowService) -> FastAPI:
    """FastAPI application with the user router and the fake-backed service."""
    test_app = FastAPI()
    install_error_handlers(test_app)
    test_app.include_router(router, prefix="/user")
    test_app.dependency_overrides[get_auth_service] = lambda: service
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client for the application."""
    return TestClient(app)
