"""
Book API Routes

CRUD operations for books plus author lookup, sale-state listings and the
purchase endpoint. Listing, creation, author lookup and purchase answer
persistence failures with a 500 and a fixed message.
"""

from fastapi import APIRouter, Depends, Response, status
from loguru import logger

from bookstore.api.dependencies import get_book_service
from bookstore.api.schemas import (
    BookCreate,
    BookUpdate,
    BookResponse,
    PurchaseResponse,
    MessageResponse,
)
from bookstore.exceptions import NotFoundError, ProcessingError
from bookstore.services import BookService

router = APIRouter(prefix="/books", tags=["books"])

BOOK_NOT_FOUND = "Book not found"
BOOK_UNAVAILABLE = "Book not found or already sold"


# =============================================================================
# CRUD Endpoints
# =============================================================================

@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        500: {"model": MessageResponse, "description": "Error creating book"},
    },
)
async def create_book(
    book: BookCreate,
    books: BookService = Depends(get_book_service),
):
    """Create a new book. New books always start unsold."""
    logger.info(f"Creating book: {book.title} by {book.author}")
    try:
        return await books.create_book(
            title=book.title,
            author=book.author,
            price=book.price,
        )
    except Exception as e:
        logger.error(f"Failed to create book: {e}")
        raise ProcessingError("Error creating book")


@router.get(
    "",
    response_model=list[BookResponse],
    responses={
        500: {"model": MessageResponse, "description": "Error fetching books"},
    },
)
async def list_books(books: BookService = Depends(get_book_service)):
    """List all books with their buyer."""
    try:
        return await books.list_books()
    except Exception as e:
        logger.error(f"Failed to list books: {e}")
        raise ProcessingError("Error fetching books")


@router.get(
    "/available",
    response_model=list[BookResponse],
    responses={
        500: {"model": MessageResponse, "description": "Error fetching books"},
    },
)
async def list_available_books(books: BookService = Depends(get_book_service)):
    """List books that are still for sale."""
    try:
        return await books.list_available_books()
    except Exception as e:
        logger.error(f"Failed to list available books: {e}")
        raise ProcessingError("Error fetching books")


@router.get(
    "/sold",
    response_model=list[BookResponse],
    responses={
        500: {"model": MessageResponse, "description": "Error fetching books"},
    },
)
async def list_sold_books(books: BookService = Depends(get_book_service)):
    """List books that have been bought."""
    try:
        return await books.list_sold_books()
    except Exception as e:
        logger.error(f"Failed to list sold books: {e}")
        raise ProcessingError("Error fetching books")


@router.get(
    "/author/{author}",
    response_model=list[BookResponse],
    responses={
        500: {"model": MessageResponse, "description": "Error fetching books by author"},
    },
)
async def get_books_by_author(
    author: str,
    books: BookService = Depends(get_book_service),
):
    """Find books by author name, ignoring case."""
    logger.info(f"Fetching books by author: {author}")
    try:
        return await books.find_by_author(author)
    except Exception as e:
        logger.error(f"Failed to fetch books by author {author!r}: {e}")
        raise ProcessingError("Error fetching books by author")


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    responses={
        404: {"model": MessageResponse, "description": "Book not found"},
    },
)
async def get_book(
    book_id: str,
    books: BookService = Depends(get_book_service),
):
    """Get a book by ID."""
    book = await books.get_book_by_id(book_id)
    if book is None:
        raise NotFoundError(BOOK_NOT_FOUND)
    return book


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        404: {"model": MessageResponse, "description": "Book not found"},
    },
)
async def delete_book(
    book_id: str,
    books: BookService = Depends(get_book_service),
):
    """Delete a book."""
    logger.info(f"Deleting book: {book_id}")
    if not await books.delete_book(book_id):
        raise NotFoundError(BOOK_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    responses={
        404: {"model": MessageResponse, "description": "Book not found"},
    },
)
async def update_book(
    book_id: str,
    book: BookUpdate,
    books: BookService = Depends(get_book_service),
):
    """
    Update a book's title, author or price.

    Supports partial updates. Sale state cannot be changed here.
    """
    logger.info(f"Updating book: {book_id}")
    changes = {k: v for k, v in book.model_dump(exclude_unset=True).items() if v is not None}
    updated = await books.update_book(book_id, changes)
    if updated is None:
        raise NotFoundError(BOOK_NOT_FOUND)
    return updated


# =============================================================================
# Purchase
# =============================================================================

@router.post(
    "/{book_id}/buy/{user_id}",
    response_model=PurchaseResponse,
    responses={
        404: {"model": MessageResponse, "description": "Book not found or already sold"},
        500: {"model": MessageResponse, "description": "Error buying book"},
    },
)
async def buy_book(
    book_id: str,
    user_id: str,
    books: BookService = Depends(get_book_service),
):
    """Buy a book on behalf of a user. A book can only be sold once."""
    logger.info(f"User {user_id} buying book {book_id}")
    try:
        message = await books.purchase(user_id, book_id)
    except Exception as e:
        logger.error(f"Failed to buy book {book_id} for user {user_id}: {e}")
        raise ProcessingError("Error buying book")

    if message is None:
        raise NotFoundError(BOOK_UNAVAILABLE)
    return PurchaseResponse(message=message)
