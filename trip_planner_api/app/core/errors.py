"""
Application error taxonomy and the handlers that render it.

Services raise subclasses of ``AppError``; the handlers registered by
``register_exception_handlers`` turn every failure into the JSON shape
``{"success": false, "message": ...}`` with a matching status code.
Unexpected exceptions are logged and reported as a generic 500.
"""

import logging
from typing import Optional

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

logger = logging.getLogger(__name__)


class AppError(Exception):
    code = "app_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code


class ValidationError(AppError):
    code = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateEmailError(AppError):
    code = "duplicate_email"
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidCredentialsError(AppError):
    """Raised for an unknown email and for a wrong secret alike."""

    code = "invalid_credentials"
    status_code = status.HTTP_401_UNAUTHORIZED


class UnauthenticatedError(AppError):
    code = "unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED


class SessionNotFoundError(UnauthenticatedError):
    code = "session_not_found"


class SessionExpiredError(UnauthenticatedError):
    code = "session_expired"


class UserNotFoundError(AppError):
    code = "user_not_found"
    status_code = status.HTTP_404_NOT_FOUND


class NotFoundError(AppError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(AppError):
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class InternalError(AppError):
    code = "internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if location:
        return f"Invalid value for {location}: {first.get('msg')}"
    return str(first.get("msg", "Invalid request"))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error handlers to ``app``."""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        headers = None
        if isinstance(exc, UnauthenticatedError):
            headers = {"WWW-Authenticate": "Bearer"}
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return error_response(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(status.HTTP_400_BAD_REQUEST, _validation_message(exc))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        internal = InternalError("Internal server error")
        return error_response(internal.status_code, internal.message)
