"""
Bookstore API - FastAPI Backend.

REST API for users (signup, login, CRUD) and books (CRUD, author lookup,
purchase).
"""

from .main import app, create_app, main
from .dependencies import (
    Settings,
    get_settings,
    get_db,
    get_user_service,
    get_book_service,
    get_current_user,
)
from .schemas import (
    UserCreate,
    UserUpdate,
    UserCreated,
    UserResponse,
    LoginRequest,
    TokenResponse,
    BookCreate,
    BookUpdate,
    BookResponse,
    PurchaseResponse,
    MessageResponse,
    HealthResponse,
)

__all__ = [
    # Application
    "app",
    "create_app",
    "main",
    # Dependencies
    "Settings",
    "get_settings",
    "get_db",
    "get_user_service",
    "get_book_service",
    "get_current_user",
    # Schemas
    "UserCreate",
    "UserUpdate",
    "UserCreated",
    "UserResponse",
    "LoginRequest",
    "TokenResponse",
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    "PurchaseResponse",
    "MessageResponse",
    "HealthResponse",
]
