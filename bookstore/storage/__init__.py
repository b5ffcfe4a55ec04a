"""
Storage Module for the Bookstore API

SQLAlchemy declarative models shared by the services:
- User accounts
- Books and their (optional) buyer
"""

from bookstore.storage.models import (
    Base,
    User,
    Book,
)

__all__ = [
    "Base",
    "User",
    "Book",
]
