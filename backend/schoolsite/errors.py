"""Error taxonomy and the JSON error mapping for the HTTP surface.

Services raise these exceptions; the handlers registered here turn every
one of them into ``{"error": message}`` with the class's status code.
Messages are client-safe by construction: internal failures are logged and
reported only as "Internal server error".
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"

# The only messages a session failure may carry
AUTHENTICATION_REQUIRED = "Authentication required"
NOT_AUTHENTICATED = "Not authenticated"
INVALID_SESSION = "Invalid or expired session"
SESSION_ERROR_MESSAGES = frozenset({AUTHENTICATION_REQUIRED, NOT_AUTHENTICATED, INVALID_SESSION})

ALREADY_INITIALIZED = "Password already initialized"
INVALID_REQUEST_BODY = "Invalid request body"


class AdminError(Exception):
    """Base class for errors reported to API callers."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = INTERNAL_ERROR_MESSAGE):
        self.message = message
        super().__init__(message)


class AuthenticationError(AdminError):
    """Missing, unknown, logged-out or expired session token."""

    status_code = status.HTTP_401_UNAUTHORIZED


class CredentialError(AdminError):
    """Username/password mismatch at login or password change."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ValidationError(AdminError):
    """Malformed or missing input field."""

    status_code = status.HTTP_400_BAD_REQUEST


class StateError(AdminError):
    """Operation not allowed in the current credential state."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AdminError):
    status_code = status.HTTP_404_NOT_FOUND


class InternalError(AdminError):
    """Storage or transport failure. The message never carries details."""

    def __init__(self, message: str = INTERNAL_ERROR_MESSAGE):
        super().__init__(message)


ERRORS_BY_STATUS = {
    status.HTTP_400_BAD_REQUEST: ValidationError,
    status.HTTP_401_UNAUTHORIZED: CredentialError,
    status.HTTP_404_NOT_FOUND: NotFoundError,
}


def error_for_status(status_code: int, message: str) -> AdminError:
    """Rebuild an error from a status code and server-provided message.

    Session failures and credential mismatches share 401, and state errors
    share 400 with validation errors; fixed messages tell them apart.
    """
    if status_code == status.HTTP_401_UNAUTHORIZED and message in SESSION_ERROR_MESSAGES:
        return AuthenticationError(message)
    if status_code == status.HTTP_400_BAD_REQUEST and message == ALREADY_INITIALIZED:
        return StateError(message)
    error_class = ERRORS_BY_STATUS.get(status_code, InternalError)
    return error_class(message)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def admin_error_handler(request: Request, exc: AdminError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error(f"Internal error on {request.url.path}: {exc.message}")
        return error_response(exc.status_code, INTERNAL_ERROR_MESSAGE)
    return error_response(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug(f"Rejected malformed body on {request.url.path}: {exc.errors()}")
    return error_response(status.HTTP_400_BAD_REQUEST, INVALID_REQUEST_BODY)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path}", exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Turn unexpected exceptions into the JSON 500 inside the middleware stack.

    Must be added before ``CORSMiddleware`` so error responses still carry
    the CORS headers.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await unhandled_error_handler(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error mapping on an application."""
    app.add_exception_handler(AdminError, admin_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
