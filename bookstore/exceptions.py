"""
Exception hierarchy for the Bookstore API.

Every exception carries the client-facing message and the HTTP status code
it maps to. The handlers in ``bookstore.api.middleware.error_handler``
render them as ``{"message": ...}``.
"""


class BookstoreException(Exception):
    """Base exception for Bookstore errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(BookstoreException):
    """Resource not found."""

    def __init__(self, message: str):
        super().__init__(message=message, code="NOT_FOUND", status_code=404)


class DuplicateEmailError(BookstoreException):
    """Signup with an email that is already registered."""

    def __init__(self, email: str = None):
        self.email = email
        super().__init__(
            message="User already exists",
            code="DUPLICATE_EMAIL",
            status_code=400,
        )


class InvalidCredentialsError(BookstoreException):
    """Password did not match the stored hash."""

    def __init__(self):
        super().__init__(
            message="Invalid credentials",
            code="INVALID_CREDENTIALS",
            status_code=401,
        )


class AuthenticationError(BookstoreException):
    """Missing, malformed or expired bearer token."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(
            message=message,
            code="AUTHENTICATION_FAILED",
            status_code=401,
        )


class ProcessingError(BookstoreException):
    """Unexpected failure reported with a fixed, endpoint-specific message."""

    def __init__(self, message: str):
        super().__init__(message=message, code="PROCESSING_ERROR", status_code=500)
