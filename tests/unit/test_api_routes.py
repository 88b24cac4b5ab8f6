"""
Unit tests for the user API routes.

Tests endpoint responses with mocked dependencies.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from otpauth.api.dependencies import get_auth_service
from otpauth.api.errors import install_error_handlers
from otpauth.api.user import router
from otpauth.domain.auth_flow import AuthFlowService
from otpauth.domain.exceptions import (
    DeliveryFailure,
    DuplicateEmail,
    EmailNotVerified,
    IncorrectPassword,
    InvalidInput,
    InvalidOTP,
    UserNotFound,
)
from otpauth.domain.ports import LoginResult, UserRecord

USER = UserRecord(
    id=1,
    name="Ann",
    email="a@x.com",
    password_hash="$2b$10$storedhashvalue",
    verified=True,
    created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
)


@pytest.fixture
def mock_service() -> MagicMock:
    return MagicMock(spec=AuthFlowService)


@pytest.fixture
def app(mock_service: MagicMock) -> FastAPI:
    """Create test FastAPI application with the mocked service injected."""
    test_app = FastAPI()
    install_error_handlers(test_app)
    test_app.include_router(router, prefix="/user")
    test_app.dependency_overrides[get_auth_service] = lambda: mock_service
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


class TestSendOtpEndpoint:
    """Tests for POST /user/send-otp."""

    def test_success(self, client: TestClient, mock_service: MagicMock) -> None:
        response = client.post("/user/send-otp", json={"email": "a@x.com"})

        assert response.status_code == 200
        assert response.json() == {"msg": "OTP sent"}
        mock_service.send_otp.assert_called_once_with("a@x.com")

    def test_missing_email_is_400(self, client: TestClient, mock_service: MagicMock) -> None:
        """A missing field reaches the service instead of failing validation."""
        mock_service.send_otp.side_effect = InvalidInput("Email is required")

        response = client.post("/user/send-otp", json={})

        assert response.status_code == 400
        assert response.json() == {"msg": "Email is required"}
        mock_service.send_otp.assert_called_once_with("")

    def test_delivery_failure_is_400(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.send_otp.side_effect = DeliveryFailure()

        response = client.post("/user/send-otp", json={"email": "a@x.com"})

        assert response.status_code == 400
        assert response.json() == {"msg": "Failed to send OTP"}

    def test_null_email_is_400(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.send_otp.side_effect = InvalidInput("Email is required")

        response = client.post("/user/send-otp", json={"email": None})

        assert response.status_code == 400
        assert response.json() == {"msg": "Email is required"}
        mock_service.send_otp.assert_called_once_with("")

    @pytest.mark.parametrize("body", ["not json", "[1, 2]", "null"])
    def test_malformed_body_is_400(
        self, client: TestClient, mock_service: MagicMock, body: str
    ) -> None:
        response = client.post(
            "/user/send-otp", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"msg": "Invalid request body"}
        mock_service.send_otp.assert_not_called()


class TestVerifyOtpEndpoint:
    """Tests for POST /user/verify-otp."""

    def test_success(self, client: TestClient, mock_service: MagicMock) -> None:
        response = client.post("/user/verify-otp", json={"email": "a@x.com", "otp": "1234"})

        assert response.status_code == 200
        assert response.json() == {"msg": "OTP verified"}
        mock_service.verify_otp.assert_called_once_with("a@x.com", "1234")

    def test_invalid_otp_is_400(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.verify_otp.side_effect = InvalidOTP()

        response = client.post("/user/verify-otp", json={"email": "a@x.com", "otp": "0000"})

        assert response.status_code == 400
        assert response.json() == {"msg": "Invalid OTP"}

    def test_numeric_otp_is_not_coerced(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        mock_service.verify_otp.side_effect = InvalidOTP()

        response = client.post("/user/verify-otp", json={"email": "a@x.com", "otp": 1234})

        assert response.status_code == 400
        assert response.json() == {"msg": "Invalid OTP"}
        mock_service.verify_otp.assert_called_once_with("a@x.com", "")


class TestRegisterEndpoint:
    """Tests for POST /user/register."""

    def test_success(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.register.return_value = USER

        response = client.post(
            "/user/register",
            json={"name": "Ann", "email": "a@x.com", "password": "pw123"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["msg"] == "User registered successfully"
        assert body["user"]["id"] == 1
        assert body["user"]["email"] == "a@x.com"
        assert body["user"]["verified"] is True
        mock_service.register.assert_called_once_with("Ann", "a@x.com", "pw123")

    def test_password_hash_not_exposed(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.register.return_value = USER

        response = client.post(
            "/user/register",
            json={"name": "Ann", "email": "a@x.com", "password": "pw123"},
        )

        assert "password_hash" not in response.json()["user"]
        assert USER.password_hash not in response.text

    def test_duplicate_is_400(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.register.side_effect = DuplicateEmail()

        response = client.post(
            "/user/register",
            json={"name": "Ann", "email": "a@x.com", "password": "pw123"},
        )

        assert response.status_code == 400
        assert response.json() == {"msg": "Email already used"}

    def test_unverified_is_400(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.register.side_effect = EmailNotVerified()

        response = client.post(
            "/user/register",
            json={"name": "Ann", "email": "a@x.com", "password": "pw123"},
        )

        assert response.status_code == 400
        assert response.json() == {"msg": "Email not verified"}


class TestLoginEndpoint:
    """Tests for POST /user/login."""

    def test_success(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.login.return_value = LoginResult(token="signed.jwt.token", user=USER)

        response = client.post("/user/login", json={"email": "a@x.com", "password": "pw123"})

        assert response.status_code == 200
        body = response.json()
        assert body["msg"] == "Login success"
        assert body["token"] == "signed.jwt.token"
        assert body["user"]["name"] == "Ann"
        assert "password_hash" not in body["user"]

    @pytest.mark.parametrize(
        ("error", "message"),
        [(UserNotFound(), "User not found"), (IncorrectPassword(), "Incorrect password")],
    )
    def test_failures_are_400(
        self, client: TestClient, mock_service: MagicMock, error: Exception, message: str
    ) -> None:
        mock_service.login.side_effect = error

        response = client.post("/user/login", json={"email": "a@x.com", "password": "pw"})

        assert response.status_code == 400
        assert response.json() == {"msg": message}
