"""
Custom exception handlers for FastAPI.

Security:
- Request IDs are logged server-side for tracing but NOT exposed to clients
- Leaderboard errors return their client-safe message, never internal details
- Generic error messages for 500 errors to prevent information disclosure
"""

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from leaderboard.exceptions import ConflictError, LeaderboardError
from leaderboard.logging import get_logger

logger = get_logger("backend.errors")

# Seconds a client should wait before resubmitting after a ConflictError
CONFLICT_RETRY_AFTER = 1


def _get_request_id() -> str:
    """
    Get the current request ID from context.

    Used for server-side logging only - NOT exposed to clients.
    """
    return structlog.contextvars.get_contextvars().get("request_id", "-")


def _response_payload(detail: str, status_code: int) -> dict:
    """
    Create error response payload.

    Security: Does NOT include request_id to prevent information disclosure.
    """
    return {
        "detail": detail,
        "status_code": status_code,
    }


def _validation_response(errors: list) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            **_response_payload("Validation error", 422),
            "errors": jsonable_encoder(errors),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(LeaderboardError)
    async def leaderboard_exception_handler(request: Request, exc: LeaderboardError):
        request_id = _get_request_id()
        log_method = logger.error if exc.status_code >= 500 and not exc.retryable else logger.warning
        log_method(
            "leaderboard_error",
            error=str(exc),
            error_type=type(exc).__name__,
            status_code=exc.status_code,
            path=request.url.path,
            request_id=request_id,
        )

        headers = None
        if isinstance(exc, ConflictError):
            headers = {"Retry-After": str(CONFLICT_RETRY_AFTER)}

        return JSONResponse(
            status_code=exc.status_code,
            content=_response_payload(exc.user_message, exc.status_code),
            headers=headers,
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        request_id = _get_request_id()
        logger.warning(
            "http_exception",
            detail=exc.detail,
            status_code=exc.status_code,
            request_id=request_id,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_response_payload(str(exc.detail), exc.status_code),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "request_validation_error",
            path=request.url.path,
            error_count=len(exc.errors()),
            request_id=_get_request_id(),
        )
        return _validation_response(exc.errors())

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request: Request, exc: ValidationError):
        logger.warning(
            "validation_error",
            path=request.url.path,
            error_count=exc.error_count(),
            request_id=_get_request_id(),
        )
        return _validation_response(exc.errors())

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        request_id = _get_request_id()
        # Full details stay server-side
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=request_id,
        )
        return JSONResponse(
            status_code=500,
            content=_response_payload("Internal server error", 500),
        )
