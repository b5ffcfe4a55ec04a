"""
Business logic for books.

``BookService`` covers CRUD over the ``books`` table, lookups by author and
sale state, and the one-way purchase transition.
"""

from typing import Any, Optional
from uuid import uuid4

from loguru import logger
from sqlalchemy import select, delete, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.storage.models import Book, User, utcnow

# Sale state (is_sold, buyer) only changes through purchase()
UPDATABLE_FIELDS = ("title", "author", "price")

PURCHASE_MESSAGE = "El libro {title} ha sido comprado por el usuario con ID {user_id}."


class BookService:
    """
    CRUD over books plus the purchase flow.

    Every query loads the ``buyer`` relationship eagerly (see ``Book.buyer``),
    so returned books can be serialised outside the session.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _all(self, *criteria) -> list[Book]:
        stmt = select(Book).where(*criteria).order_by(Book.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_books(self) -> list[Book]:
        """Return every book with its buyer resolved."""
        return await self._all()

    async def list_available_books(self) -> list[Book]:
        """Return books that have not been sold."""
        return await self._all(Book.is_sold.is_(False))

    async def list_sold_books(self) -> list[Book]:
        """Return books that have been sold."""
        return await self._all(Book.is_sold.is_(True))

    async def find_by_author(self, author: str) -> list[Book]:
        """Case-insensitive exact match on the author column."""
        return await self._all(func.lower(Book.author) == func.lower(author))

    async def get_book_by_id(self, book_id: str) -> Optional[Book]:
        """Return the book (with buyer) or None."""
        stmt = (
            select(Book)
            .where(Book.id == book_id)
            .execution_options(populate_existing=True)
        )
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def create_book(self, title: str, author: str, price: float) -> Book:
        """Persist a new, unsold book."""
        book = Book(
            id=str(uuid4()),
            title=title,
            author=author,
            price=price,
            is_sold=False,
            buyer_id=None,
        )
        self.session.add(book)
        await self.session.commit()
        logger.info(f"Created book {book.id}: {title} by {author}")
        return await self.get_book_by_id(book.id)

    async def update_book(self, book_id: str, changes: dict[str, Any]) -> Optional[Book]:
        """
        Merge title/author/price changes into an existing book.

        Returns:
            The updated book, or None if no book has that id.
        """
        book = await self.get_book_by_id(book_id)
        if book is None:
            return None

        for key, value in changes.items():
            if key in UPDATABLE_FIELDS:
                setattr(book, key, value)
        book.updated_at = utcnow()

        await self.session.commit()
        return await self.get_book_by_id(book_id)

    async def delete_book(self, book_id: str) -> bool:
        """Delete a book. Returns True if a row was removed."""
        result = await self.session.execute(delete(Book).where(Book.id == book_id))
        await self.session.commit()
        return result.rowcount > 0

    async def purchase(self, buyer_id: str, book_id: str) -> Optional[str]:
        """
        Mark a book as sold to ``buyer_id``.

        The sale is a single conditional UPDATE guarded by ``is_sold = false``,
        so two concurrent purchases of the same book cannot both succeed.

        Returns:
            Confirmation text, or None if the book does not exist, is already
            sold, or the buyer does not exist.
        """
        book = await self.get_book_by_id(book_id)
        if book is None or book.is_sold:
            logger.info(f"Purchase rejected: book {book_id} missing or sold")
            return None

        buyer = await self.session.get(User, buyer_id)
        if buyer is None:
            logger.info(f"Purchase rejected: buyer {buyer_id} not found")
            return None

        title = book.title
        stmt = (
            update(Book)
            .where(Book.id == book_id, Book.is_sold.is_(False))
            .values(is_sold=True, buyer_id=buyer.id, updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            await self.session.rollback()
            logger.warning(f"Purchase lost race: book {book_id} already sold")
            return None

        await self.session.commit()
        logger.info(f"Book {book_id} sold to user {buyer_id}")
        return PURCHASE_MESSAGE.format(title=title, user_id=buyer_id)
