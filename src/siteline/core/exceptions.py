"""Domain error taxonomy and exception handlers with request_id in responses.

Services raise ``DomainError`` subclasses; the handlers registered by
``setup_exception_handlers`` turn them into ``{"detail", "request_id"}``
JSON bodies. Anything else is logged and answered with a generic 500.
"""

from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.siteline.core.logging import get_logger

logger = get_logger(__name__)

GENERIC_ERROR_DETAIL = "Internal server error"


class DomainError(Exception):
    """Base class for errors that are part of the API contract."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = GENERIC_ERROR_DETAIL

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class InvalidAssignment(ValidationError):
    default_detail = "Assigned user is not a member of this project"


class CannotRemoveOwner(ValidationError):
    default_detail = "Cannot remove project owner"


class Unauthorized(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"


class Forbidden(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Insufficient permissions"


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class Conflict(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class AlreadyMember(Conflict):
    default_detail = "User is already a member of this project"


class EmailAlreadyExists(Conflict):
    default_detail = "User with this email already exists"


class DependencyFailure(DomainError):
    """Persistence or delivery failure. The client only ever sees the generic detail."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ProfileNotFound(DependencyFailure):
    """Every user must have a profile; a missing one is a data-integrity fault."""

    def __init__(self, user_id: Any = None):
        self.user_id = user_id
        super().__init__(f"Profile missing for user {user_id}")


def _error_response(status_code: int, detail: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "request_id": correlation_id.get()},
    )


def _format_validation_errors(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Invalid JSON body"
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = str(first.get("msg", "Invalid value")).removeprefix("Value error, ")
    return f"{location}: {message}" if location else message


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        if isinstance(exc, DependencyFailure):
            logger.error(
                "Dependency failure",
                error=exc.detail,
                error_type=type(exc).__name__,
                path=request.url.path,
            )
            return _error_response(exc.status_code, GENERIC_ERROR_DETAIL)
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, _format_validation_errors(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        response = _error_response(exc.status_code, exc.detail)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=correlation_id.get(),
            path=request.url.path,
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_DETAIL)
