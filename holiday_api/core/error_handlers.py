"""Translate raised errors into the uniform ``{message, errors}`` body."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from holiday_api.core.exceptions import (
    ErrorKind,
    HolidayApiError,
    public_message_for,
    status_for,
)
from holiday_api.schemas.holiday import ErrorResponse

logger = logging.getLogger(__name__)


def error_response(kind: ErrorKind, errors: dict[str, list[str]] | None = None) -> JSONResponse:
    body = ErrorResponse(message=public_message_for(kind), errors=errors or {})
    return JSONResponse(status_code=status_for(kind), content=body.model_dump())


def field_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    """Group validation messages by parameter name (``year``, ``countryCodes``)."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        field = ".".join(loc[1:]) or ".".join(loc) or "request"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return errors


async def handle_holiday_api_error(request: Request, exc: HolidayApiError) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    return error_response(exc.kind, {"detail": [exc.message], **exc.errors})


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc.errors())
    return error_response(ErrorKind.INVALID_REQUEST, field_errors(exc))


async def handle_rate_limit_exceeded(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("%s %s rate limited: %s", request.method, request.url.path, exc.detail)
    response = error_response(ErrorKind.RATE_LIMITED, {"detail": [f"Rate limit exceeded: {exc.detail}"]})
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)


def register_error_handlers(app: FastAPI) -> None:
    """Install the error handlers and the catch-all middleware."""
    app.add_exception_handler(HolidayApiError, handle_holiday_api_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(RateLimitExceeded, handle_rate_limit_exceeded)

    @app.middleware("http")
    async def catch_unhandled_errors(request: Request, call_next):
        """Turn anything unclassified into a generic 500 without leaking details."""
        try:
            return await call_next(request)
        except Exception:
            logger.critical(
                "An unhandled exception occurred on %s %s",
                request.method,
                request.url.path,
                exc_info=True,
            )
            return error_response(ErrorKind.UNKNOWN)
