"""
Core middleware package.

- Error handling with sensitive data sanitization
- Structured logging with PII masking
- Administrator authentication gate
"""

from core.middleware.error_handling import (
    ErrorHandlingMiddleware,
    setup_error_handlers,
    sanitize_error_message,
)

from core.middleware.logging import (
    StructuredLoggingMiddleware,
    setup_logging,
    get_logger,
)

from core.middleware.authentication import (
    AuthDecision,
    AuthResult,
    evaluate_auth,
    extract_token,
    rejection_error,
)

__all__ = [
    # Error handling
    "ErrorHandlingMiddleware",
    "setup_error_handlers",
    "sanitize_error_message",
    # Logging
    "StructuredLoggingMiddleware",
    "setup_logging",
    "get_logger",
    # Authentication
    "AuthDecision",
    "AuthResult",
    "evaluate_auth",
    "extract_token",
    "rejection_error",
]
