"""
Error Handling for the Bookstore API

Centralized error handling:
- ``{"message": ...}`` bodies for every failure
- Logging of errors
- Exception translation
"""

import traceback

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from bookstore.exceptions import (
    BookstoreException,
    NotFoundError,
    DuplicateEmailError,
    InvalidCredentialsError,
    AuthenticationError,
    ProcessingError,
)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def create_error_response(message: str, status_code: int) -> JSONResponse:
    """Create the standard error response."""
    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=status_code,
        content={"message": message},
        headers=headers,
    )


def setup_exception_handlers(app):
    """Register exception handlers with FastAPI app."""

    @app.exception_handler(BookstoreException)
    async def bookstore_exception_handler(request: Request, exc: BookstoreException):
        if exc.status_code >= 500:
            logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
        else:
            logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
        return create_error_response(exc.message, exc.status_code)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: "
            f"{type(exc).__name__}: {exc}\n{traceback.format_exc()}"
        )
        return create_error_response(
            INTERNAL_ERROR_MESSAGE,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


__all__ = [
    "BookstoreException",
    "NotFoundError",
    "DuplicateEmailError",
    "InvalidCredentialsError",
    "AuthenticationError",
    "ProcessingError",
    "INTERNAL_ERROR_MESSAGE",
    "create_error_response",
    "setup_exception_handlers",
]
