from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException
import logging

logger = logging.getLogger(__name__)


class MovieAppException(Exception):
    """Base exception for the application"""
    status_code = 500
    kind = "InternalError"
    default_message = "An unexpected error occurred"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MovieAppException):
    """Bad input shape or range. Raised before any side effect."""
    status_code = 400
    kind = "ValidationError"
    default_message = "Invalid request"


class NotFound(MovieAppException):
    status_code = 404
    kind = "NotFound"
    default_message = "Not found"


class UpstreamNotFound(NotFound):
    """The movie provider answered 404 for the requested resource."""
    default_message = "Movie not found"


class UpstreamUnavailable(MovieAppException):
    """Network failure or non-404 error from the movie provider."""
    status_code = 502
    kind = "UpstreamUnavailable"
    default_message = "Movie data provider is unavailable"


class InternalError(MovieAppException):
    status_code = 500
    kind = "InternalError"
    default_message = "Internal Server Error"


class ConfigurationError(MovieAppException):
    """Raised at startup when required configuration is missing."""
    kind = "ConfigurationError"
    default_message = "Invalid configuration"


async def app_exception_handler(request: Request, exc: MovieAppException):
    """
    Map domain error kinds to HTTP responses.
    """
    request_id = getattr(request.state, "request_id", "unknown")

    if exc.status_code >= 500:
        logger.error(
            f"{exc.kind}: {exc.message}",
            extra={"request_id": request_id, "path": request.url.path},
            exc_info=exc if isinstance(exc, InternalError) else None,
        )
    else:
        logger.info(f"{exc.kind}: {exc.message}", extra={"request_id": request_id, "path": request.url.path})

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "message": exc.message, "request_id": request_id},
    )


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all exception handler.
    Returns 500 JSON response and hides internal error details.
    """
    request_id = getattr(request.state, "request_id", "unknown")

    logger.error(
        "Unhandled exception occurred",
        extra={"request_id": request_id, "path": request.url.path},
        exc_info=exc
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": InternalError.kind,
            "message": "An unexpected error occurred. Please contact support.",
            "request_id": request_id
        },
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Handle HTTPExceptions, including router-level 404/405.
    """
    request_id = getattr(request.state, "request_id", "unknown")

    # Log 5xx errors as errors, 4xx as info
    if exc.status_code >= 500:
        logger.error(f"HTTP {exc.status_code} error", extra={"request_id": request_id, "detail": exc.detail})
    else:
        logger.info(f"HTTP {exc.status_code} error", extra={"request_id": request_id, "detail": exc.detail})

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "request_id": request_id},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle Pydantic validation errors.
    """
    request_id = getattr(request.state, "request_id", "unknown")
    logger.info("Validation error", extra={"request_id": request_id, "errors": exc.errors()})

    return JSONResponse(
        status_code=422,
        content={
            "error": "Validation Error",
            "details": jsonable_encoder(exc.errors(), custom_encoder={Exception: str}),
            "request_id": request_id
        },
    )
