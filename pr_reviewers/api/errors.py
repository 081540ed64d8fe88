"""Error → HTTP mapping.

Every error response has the shape::

    {"error": {"code": "<CODE>", "message": "<text>"}}

Domain errors map by ``ErrorKind``.  Anything unclassified becomes a 500
``INTERNAL_ERROR`` with a fixed message; the details only reach the log.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pr_reviewers.domain.errors import ErrorKind, PRServiceError

logger = logging.getLogger(__name__)

INVALID_REQUEST_BODY = "INVALID_REQUEST_BODY"
DUPLICATE_USER_IDS = "DUPLICATE_USER_IDS"
MISSING_USER_ID = "MISSING_USER_ID"
MISSING_TEAM_NAME = "MISSING_TEAM_NAME"
NOT_FOUND = "NOT_FOUND"
INTERNAL_ERROR = "INTERNAL_ERROR"

MESSAGES: dict[str, str] = {
    INVALID_REQUEST_BODY: "invalid request body",
    DUPLICATE_USER_IDS: "team contains duplicate user_ids",
    MISSING_USER_ID: "user ID is required",
    MISSING_TEAM_NAME: "team name is required",
    NOT_FOUND: "resource not found",
    INTERNAL_ERROR: "internal server error",
}

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.POLICY_VIOLATION: status.HTTP_409_CONFLICT,
    ErrorKind.TRANSACTION_UNAVAILABLE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.UNEXPECTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class APIError(Exception):
    """A request-level failure raised by route handlers (bad input)."""

    def __init__(self, status_code: int, code: str, message: str | None = None) -> None:
        self.status_code = status_code
        self.code = code
        self.message = message or MESSAGES.get(code, code)
        super().__init__(self.message)


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


def describe_service_error(exc: PRServiceError) -> tuple[int, str, str]:
    """Return ``(status_code, code, message)`` for a domain error."""
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if exc.kind is ErrorKind.NOT_FOUND:
        return status_code, NOT_FOUND, MESSAGES[NOT_FOUND]
    if status_code >= 500:
        return status_code, INTERNAL_ERROR, MESSAGES[INTERNAL_ERROR]
    return status_code, exc.code, exc.default_message


async def api_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, APIError):
        raise TypeError(f"expected APIError, got {type(exc).__name__}")
    return error_response(exc.status_code, exc.code, exc.message)


async def service_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, PRServiceError):
        raise TypeError(f"expected PRServiceError, got {type(exc).__name__}")
    status_code, code, message = describe_service_error(exc)
    if status_code >= 500:
        logger.error("❌ %s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    else:
        logger.info("%s %s → %s (%s)", request.method, request.url.path, code, exc.message)
    return error_response(status_code, code, message)


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.info("Invalid request to %s: %s", request.url.path, exc)
    return error_response(
        status.HTTP_400_BAD_REQUEST, INVALID_REQUEST_BODY, MESSAGES[INVALID_REQUEST_BODY]
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("❌ Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR, MESSAGES[INTERNAL_ERROR]
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(PRServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
