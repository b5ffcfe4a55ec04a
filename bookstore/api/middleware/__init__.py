"""
API middleware components.

Provides cross-cutting concerns for the API:
- Error handling
- CORS configuration
- Request/response logging
"""

from .error_handler import (
    BookstoreException,
    NotFoundError,
    DuplicateEmailError,
    InvalidCredentialsError,
    AuthenticationError,
    ProcessingError,
    setup_exception_handlers,
    create_error_response,
)

from .cors import (
    CORSConfig,
    get_cors_config,
    setup_cors,
)

from .logging import (
    LoggingConfig,
    StructuredLogFormatter,
    RequestLoggingMiddleware,
    setup_logging,
    redact_sensitive_data,
)


__all__ = [
    # Error handling
    "BookstoreException",
    "NotFoundError",
    "DuplicateEmailError",
    "InvalidCredentialsError",
    "AuthenticationError",
    "ProcessingError",
    "setup_exception_handlers",
    "create_error_response",
    # CORS
    "CORSConfig",
    "get_cors_config",
    "setup_cors",
    # Logging
    "LoggingConfig",
    "StructuredLogFormatter",
    "RequestLoggingMiddleware",
    "setup_logging",
    "redact_sensitive_data",
]
