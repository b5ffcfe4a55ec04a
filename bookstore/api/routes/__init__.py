"""
API Routes for the Bookstore API

Route modules:
- users: signup, login and user CRUD
- books: book CRUD, author lookup and purchase
"""

from bookstore.api.routes.users import router as users_router
from bookstore.api.routes.books import router as books_router

__all__ = [
    "users_router",
    "books_router",
]
