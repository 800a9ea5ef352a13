"""
API error taxonomy.

Every error response has the shape ``{"error": ..., "code": ErrorCode}``.
Services raise these exceptions; the handlers in
``core.middleware.error_handling`` turn them into responses.
"""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Machine readable error codes returned to clients."""

    # Accounts
    INVALID_JWT = "invalid_jwt"

    # Generic
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    BAD_REQUEST = "bad_request"
    INTERNAL_SERVER_ERROR = "internal_server_error"
    ALREADY_EXIST = "already_exist"
    NOT_FOUND = "not_found"


class APIError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, error: Any = None, code: ErrorCode | None = None):
        self.error = error if error is not None else self.default_message
        if code is not None:
            self.code = code
        super().__init__(self.error if isinstance(self.error, str) else self.default_message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error, "code": self.code.value}


class BadRequestError(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = ErrorCode.BAD_REQUEST
    default_message = "Bad request"


class ValidationFailedError(BadRequestError):
    """Payload validation failure; ``error`` maps field names to messages."""

    default_message = "Request validation failed"

    def __init__(self, field_errors: dict[str, list[str]]):
        super().__init__(field_errors)
        self.field_errors = field_errors


class UnauthorizedError(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = ErrorCode.UNAUTHORIZED
    default_message = "Unauthorized"


class ForbiddenError(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    code = ErrorCode.FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    code = ErrorCode.NOT_FOUND
    default_message = "Not found"


class ConflictError(APIError):
    status_code = status.HTTP_409_CONFLICT
    code = ErrorCode.ALREADY_EXIST
    default_message = "Resource already exists"


class InternalServerError(APIError):
    pass


def format_validation_errors(errors: list[dict[str, Any]]) -> dict[str, list[str]]:
    """
    Group pydantic error dicts by field.

    The request location prefix (``body``, ``query``, ``path``) is dropped so
    clients see the same field names they sent.

    Args:
        errors: Output of ``ValidationError.errors()``

    Returns:
        Mapping of dotted field path to its messages
    """
    grouped: dict[str, list[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        field = ".".join(loc) or "_errors"
        message = error.get("msg", "Invalid value")
        # pydantic prefixes custom ValueError messages
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        grouped.setdefault(field, []).append(message)
    return grouped
