"""Error taxonomy.

Every failure the service knows how to classify is a ``HolidayApiError``
carrying an ``ErrorKind``. The HTTP status for a kind comes from
``status_for``; nothing dispatches on exception types.
"""

import enum

from fastapi import status


class ErrorKind(str, enum.Enum):
    EXTERNAL_SERVICE = "external_service"
    EXTERNAL_UNAVAILABLE = "external_unavailable"
    STORAGE = "storage"
    MALFORMED_DATA = "malformed_data"
    INVALID_STATE = "invalid_state"
    INVALID_REQUEST = "invalid_request"
    RATE_LIMITED = "rate_limited"
    UNKNOWN = "unknown"


_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.EXTERNAL_SERVICE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.EXTERNAL_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.STORAGE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.MALFORMED_DATA: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_REQUEST: 422,
    ErrorKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_MESSAGE_BY_KIND: dict[ErrorKind, str] = {
    ErrorKind.EXTERNAL_SERVICE: "An external service error has occurred while processing your request.",
    ErrorKind.EXTERNAL_UNAVAILABLE: "An external service error has occurred while processing your request.",
    ErrorKind.STORAGE: "An error occurred while performing operation with the database.",
    ErrorKind.MALFORMED_DATA: "Invalid JSON/data received from API.",
    ErrorKind.INVALID_STATE: "An error occurred while performing an invalid operation.",
    ErrorKind.INVALID_REQUEST: "The request contains invalid or missing parameters.",
    ErrorKind.RATE_LIMITED: "Too many requests. Please try again later.",
    ErrorKind.UNKNOWN: "An unexpected error occurred while processing your request.",
}


def status_for(kind: ErrorKind) -> int:
    """Return the HTTP status code reported to callers for an error kind."""
    return _STATUS_BY_KIND[kind]


def public_message_for(kind: ErrorKind) -> str:
    """Return the caller-facing summary message for an error kind."""
    return _MESSAGE_BY_KIND[kind]


class HolidayApiError(Exception):
    """Base class for classified failures."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, errors: dict[str, list[str]] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}


class ExternalServiceError(HolidayApiError):
    """The holiday API answered with a non-success status or could not be reached."""

    kind = ErrorKind.EXTERNAL_SERVICE

    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        errors: dict[str, list[str]] | None = None,
        unavailable: bool = False,
    ):
        super().__init__(message, errors)
        self.upstream_status = upstream_status
        if unavailable:
            self.kind = ErrorKind.EXTERNAL_UNAVAILABLE


class StorageError(HolidayApiError):
    kind = ErrorKind.STORAGE


class MalformedDataError(HolidayApiError):
    kind = ErrorKind.MALFORMED_DATA


class InvalidStateError(HolidayApiError):
    kind = ErrorKind.INVALID_STATE
