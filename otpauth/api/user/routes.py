"""
User routes.

Defines the REST endpoints of the OTP-gated auth flow:
- POST /user/send-otp - Email a fresh 4-digit code
- POST /user/verify-otp - Check the code
- POST /user/register - Create the account once the email is verified
- POST /user/login - Password login, returns a session token

Handlers are plain functions so FastAPI runs them in its threadpool;
bcrypt and SMTP delivery both block. Domain errors are turned into
400 {"msg": ...} responses by the handlers in otpauth.api.errors.
"""

from fastapi import APIRouter, Depends

from otpauth.api.dependencies import get_auth_service
from otpauth.api.models import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    SendOtpRequest,
    UserOut,
    VerifyOtpRequest,
)
from otpauth.domain.auth_flow import AuthFlowService

router = APIRouter(tags=["user"])

_errors = {400: {"model": MessageResponse, "description": "Rejected request"}}


@router.post(
    "/send-otp",
    response_model=MessageResponse,
    responses=_errors,
    summary="Send an OTP",
    description="Email a 4-digit one-time passcode. The code is never returned in the response.",
)
def send_otp(
    request_data: SendOtpRequest,
    service: AuthFlowService = Depends(get_auth_service),
) -> MessageResponse:
    service.send_otp(request_data.email)
    return MessageResponse(msg="OTP sent")


@router.post(
    "/verify-otp",
    response_model=MessageResponse,
    responses=_errors,
    summary="Verify an OTP",
    description="Check the code sent to the email. A code can be used only once.",
)
def verify_otp(
    request_data: VerifyOtpRequest,
    service: AuthFlowService = Depends(get_auth_service),
) -> MessageResponse:
    service.verify_otp(request_data.email, request_data.otp)
    return MessageResponse(msg="OTP verified")


@router.post(
    "/register",
    response_model=RegisterResponse,
    responses=_errors,
    summary="Register a new user",
    description="Create an account for an email that has completed OTP verification.",
)
def register(
    request_data: RegisterRequest,
    service: AuthFlowService = Depends(get_auth_service),
) -> RegisterResponse:
    user = service.register(request_data.name, request_data.email, request_data.password)
    return RegisterResponse(msg="User registered successfully", user=UserOut.from_record(user))


@router.post(
    "/login",
    response_model=LoginResponse,
    responses=_errors,
    summary="Log in",
    description="Check email and password and issue a bearer token valid for 7 days.",
)
def login(
    request_data: LoginRequest,
    service: AuthFlowService = Depends(get_auth_service),
) -> LoginResponse:
    result = service.login(request_data.email, request_data.password)
    return LoginResponse(
        msg="Login success", token=result.token, user=UserOut.from_record(result.user)
    )
