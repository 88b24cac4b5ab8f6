"""
Exception handlers - Map domain errors to HTTP responses.

Every AuthFlowError is recovered at the request boundary and returned as
400 with a {"msg": ...} body. None of them is fatal to the process.
Bodies that cannot be read as a JSON object at all get the same shape.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from otpauth.domain.exceptions import AuthFlowError

logger = logging.getLogger(__name__)

INVALID_BODY_MESSAGE = "Invalid request body"


async def auth_flow_error_handler(request: Request, exc: AuthFlowError) -> JSONResponse:
    logger.info("%s %s rejected: %s", request.method, request.url.path, type(exc).__name__)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"msg": exc.message})


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("%s %s rejected: malformed body", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"msg": INVALID_BODY_MESSAGE}
    )


def install_error_handlers(app: FastAPI) -> None:
    """Register domain and request validation handlers on app."""
    app.add_exception_handler(AuthFlowError, auth_flow_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
