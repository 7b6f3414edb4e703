"""Domain error taxonomy and the handlers that render it as ``{"error": ...}``."""

import sentry_sdk
import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

logger = structlog.get_logger()

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


class WorkmateError(Exception):
    """Base exception for errors reported to the client.

    Raise subclasses from services and routes; the registered handler turns
    them into a JSON body with the matching status code.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = GENERIC_ERROR_MESSAGE

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(WorkmateError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class AuthenticationError(WorkmateError):
    """Missing, invalid or expired credential on a protected route."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class AuthorizationError(WorkmateError):
    """Identified, but not permitted."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFoundError(WorkmateError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(WorkmateError):
    """Duplicate unique key (email, like edge)."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class ServiceUnavailableError(WorkmateError):
    """A dependency that is switched off or temporarily unavailable."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service unavailable"


class InfrastructureError(WorkmateError):
    """Store unreachable or another unexpected failure."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def workmate_error_handler(request: Request, exc: WorkmateError) -> JSONResponse:
    if isinstance(exc, InfrastructureError):
        logger.error("Infrastructure error", error=exc.message, path=request.url.path)
        sentry_sdk.capture_exception(exc)
        return error_response(exc.status_code, GENERIC_ERROR_MESSAGE)

    logger.warning(
        "Request rejected",
        error_type=type(exc).__name__,
        error=exc.message,
        status_code=exc.status_code,
    )
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    errors = exc.errors()
    if not errors:
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid input")

    first = errors[0]
    # Drop the "body"/"path"/"query" prefix from the location
    location = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = first.get("msg", "Invalid input")
    if location:
        message = f"{location}: {message}"
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error", error=str(exc), exc_info=exc)
    sentry_sdk.capture_exception(exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception", error=str(exc), exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error handlers to the application."""
    app.add_exception_handler(WorkmateError, workmate_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
