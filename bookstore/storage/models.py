"""
Database models for the Bookstore API.

Two tables:
- users: registered accounts (password stored as a bcrypt hash)
- books: items for sale, optionally pointing at the user who bought them
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    String,
    Boolean,
    DateTime,
    Numeric,
    ForeignKey,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in the timestamp columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    """User model for authentication and book purchases."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)  # UUID
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email}>"


class Book(Base):
    """
    Book model.

    ``is_sold`` and ``buyer_id`` move together: a book is created available
    and only the purchase flow sets both.
    """
    __tablename__ = "books"

    id = Column(String(36), primary_key=True)  # UUID
    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False, index=True)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    is_sold = Column(Boolean, default=False, nullable=False)
    buyer_id = Column(String(36), ForeignKey("users.id", ondelete="RESTRICT"), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Loaded with every book; async sessions cannot lazy-load on attribute access
    buyer = relationship(User, lazy="selectin")

    def __repr__(self) -> str:
        return f"<Book {self.id} {self.title!r} sold={self.is_sold}>"
