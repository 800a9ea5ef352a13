"""
Error handling middleware with security-compliant error sanitization.
Prevents sensitive data leakage while keeping the ``{error, code}`` contract.
"""

import logging
import traceback
from typing import Any, Callable
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError, IntegrityError, OperationalError
import re

from core.errors import APIError, ErrorCode, format_validation_errors

logger = logging.getLogger(__name__)

# Patterns for sensitive data that should never be logged
SENSITIVE_PATTERNS = [
    re.compile(r'password["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'token["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'secret["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'authorization["\s:]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'hashed_password["\s:=]+[^"\s,}]+', re.IGNORECASE),
]

# HTTP status -> error code for framework raised HTTP errors (404 routes, 405...)
HTTP_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.BAD_REQUEST,
    status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHORIZED,
    status.HTTP_403_FORBIDDEN: ErrorCode.FORBIDDEN,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_409_CONFLICT: ErrorCode.ALREADY_EXIST,
}


def sanitize_error_message(message: str) -> str:
    """
    Remove sensitive information from error messages.

    Args:
        message: Original error message

    Returns:
        Sanitized error message
    """
    sanitized = message
    for pattern in SENSITIVE_PATTERNS:
        sanitized = pattern.sub('[REDACTED]', sanitized)
    return sanitized


def get_safe_error_details(exc: Exception, include_details: bool = False) -> dict[str, Any]:
    """
    Extract safe error details without exposing sensitive information.

    Args:
        exc: The exception to extract details from
        include_details: Whether to include the traceback (only in dev)

    Returns:
        Dictionary with safe error details
    """
    details = {
        "type": type(exc).__name__,
        "message": sanitize_error_message(str(exc)),
    }

    if include_details:
        details["traceback"] = traceback.format_exc()

    return details


def error_response(status_code: int, error: Any, code: ErrorCode) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "code": code.value},
    )


def build_error_response(exc: Exception, method: str, path: str, debug: bool = False) -> JSONResponse:
    """
    Translate an exception into the API error response.

    Args:
        exc: The exception to handle
        method: Request method, for logging
        path: Request path, for logging
        debug: Whether to attach safe exception details to 500 responses

    Returns:
        JSONResponse with ``{"error", "code"}`` body
    """
    if isinstance(exc, APIError):
        if exc.status_code >= 500:
            logger.error(
                f"API error: {method} {path} - {sanitize_error_message(str(exc))}",
                exc_info=exc,
            )
        else:
            logger.warning(
                f"API error: {method} {path} - Status: {exc.status_code}, Code: {exc.code.value}"
            )
        return error_response(exc.status_code, exc.error, exc.code)

    if isinstance(exc, RequestValidationError):
        details = format_validation_errors(exc.errors())
        logger.warning(f"Validation error: {method} {path} - Fields: {sorted(details)}")
        return error_response(status.HTTP_400_BAD_REQUEST, details, ErrorCode.BAD_REQUEST)

    if isinstance(exc, StarletteHTTPException):
        code = HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_SERVER_ERROR)
        message = sanitize_error_message(str(exc.detail))
        logger.warning(
            f"HTTP exception: {method} {path} - Status: {exc.status_code}, Message: {message}"
        )
        return error_response(exc.status_code, message, code)

    if isinstance(exc, IntegrityError):
        logger.error(f"Database integrity error: {method} {path}", exc_info=exc)
        return error_response(
            status.HTTP_409_CONFLICT, "Resource already exists", ErrorCode.ALREADY_EXIST
        )

    if isinstance(exc, OperationalError):
        logger.error(f"Database operational error: {method} {path}", exc_info=exc)
    elif isinstance(exc, SQLAlchemyError):
        logger.error(f"SQLAlchemy error: {method} {path}", exc_info=exc)
    else:
        logger.error(
            f"Unhandled exception: {method} {path} - "
            f"{type(exc).__name__}: {sanitize_error_message(str(exc))}",
            exc_info=exc,
        )

    error: Any = "Internal server error"
    if debug:
        error = {"message": error, "details": get_safe_error_details(exc, include_details=True)}
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, error, ErrorCode.INTERNAL_SERVER_ERROR)


class ErrorHandlingMiddleware:
    """
    Outermost error boundary.

    Catches anything that escaped the FastAPI exception handlers (errors
    raised inside other middleware) and converts it to the API error shape.
    """

    def __init__(self, app: Callable, debug: bool = False):
        """
        Initialize error handling middleware.

        Args:
            app: The ASGI application
            debug: Whether to include detailed error information
        """
        self.app = app
        self.debug = debug

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: dict) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            if response_started:
                # Too late to change the response, let the server close it
                raise
            response = build_error_response(
                exc,
                scope.get("method", "unknown"),
                scope.get("path", "unknown"),
                debug=self.debug,
            )
            await response(scope, receive, send)


def setup_error_handlers(app, debug: bool = False):
    """
    Set up exception handlers for FastAPI application.

    Args:
        app: FastAPI application instance
        debug: Whether 500 responses include safe exception details
    """

    async def handle(request: Request, exc: Exception) -> Response:
        return build_error_response(exc, request.method, request.url.path, debug=debug)

    app.add_exception_handler(APIError, handle)
    app.add_exception_handler(RequestValidationError, handle)
    app.add_exception_handler(StarletteHTTPException, handle)
    app.add_exception_handler(IntegrityError, handle)
    app.add_exception_handler(Exception, handle)
