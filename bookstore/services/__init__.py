"""
Service layer.

Each service encapsulates the business logic for one resource and receives
its database session (and any configuration) through its constructor.
"""

from bookstore.services.user_service import UserService
from bookstore.services.book_service import BookService, PURCHASE_MESSAGE

__all__ = [
    "UserService",
    "BookService",
    "PURCHASE_MESSAGE",
]
