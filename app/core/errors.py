"""Error taxonomy shared by the workflows and the HTTP layer.

Every workflow failure is raised as an ``AppError`` subclass carrying the
HTTP status and a short, user-facing message.  ``register_exception_handlers``
renders them as ``{"error": message}``.

Collaborator failures have their own types (``RepositoryError``,
``NotificationError``) so that workflows can decide how to re-map them.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Malformed or missing input."""
    status_code = 400


class InvalidTokenError(AppError):
    """Unknown, consumed, or expired single-use token."""
    status_code = 400


class AlreadyVerifiedError(AppError):
    """Email verification requested for a verified account."""
    status_code = 400


class AuthError(AppError):
    """Bad credentials or a missing / invalid identity assertion."""
    status_code = 401


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class InternalError(AppError):
    """Unexpected repository, provider, or network failure."""
    status_code = 500


class RepositoryError(Exception):
    """Raised by the account repository when the Supabase call fails."""


class DuplicateRecordError(RepositoryError):
    """Insert rejected by a unique constraint."""


class NotificationError(Exception):
    """Raised by the email client when delivery fails after all retries."""


# ---------------------------------------------------------------------------
# FastAPI wiring
# ---------------------------------------------------------------------------

async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            extra={"path": request.url.path, "error_message": exc.message},
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    fields = [
        ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        for err in errors
    ]
    fields = [f for f in fields if f]
    message = "Invalid request body"
    if fields:
        message = f"Invalid value for: {', '.join(fields)}"
    return JSONResponse(status_code=400, content={"error": message})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_error", extra={"path": request.url.path}, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_exception_handlers(application: FastAPI) -> None:
    """Install the ``AppError``, request-validation and catch-all handlers."""
    application.add_exception_handler(AppError, _app_error_handler)  # type: ignore[arg-type]
    application.add_exception_handler(
        RequestValidationError, _request_validation_handler  # type: ignore[arg-type]
    )
    application.add_exception_handler(Exception, _unhandled_error_handler)
