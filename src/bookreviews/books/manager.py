"""Book manager: ownership-checked book writes."""

from typing import Optional

from loguru import logger

from ..auth.guard import require_owner
from ..db.models import Book, is_valid_id
from ..db.schemas import BookCreate, BookUpdate
from ..db.sqlite import Database, get_db
from ..errors import NotFoundError, StoreFailure
from ..reviews.manager import ReviewManager


class BookManager:
    """Manages book creation, edits and deletion."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize book manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def get_book(self, book_id: str) -> Book:
        """Get a book by ID.

        Raises:
            NotFoundError: id malformed or unknown
        """
        book = self.db.get_book(book_id) if is_valid_id(book_id) else None
        if not book:
            raise NotFoundError("Book not found")
        return book

    def create_book(self, actor_id: str, data: BookCreate) -> Book:
        """Add a book owned by the acting user."""
        book = self.db.create_book(data, owner_id=actor_id)
        logger.info("Book {} '{}' created by {}", book.id, book.title, actor_id)
        return book

    def update_book(self, actor_id: str, book_id: str, data: BookUpdate) -> Book:
        """Apply a partial update to a book owned by the acting user.

        Raises:
            NotFoundError: book missing
            UnauthorizedError: actor is not the owner
        """
        if not is_valid_id(book_id):
            raise NotFoundError("Book not found")

        with self.db.get_session() as session:
            book = self.db.get_book(book_id, session=session)
            if not book:
                raise NotFoundError("Book not found")

            require_owner(actor_id, book, "update this book")

            updated = self.db.update_book(book_id, data, session=session)
            session.commit()
            session.refresh(updated)
            session.expunge(updated)

        logger.info("Book {} updated by {}", book_id, actor_id)
        return updated

    def delete_book(self, actor_id: str, book_id: str) -> int:
        """Delete a book owned by the acting user, then its reviews.

        The reviews are removed in a second step once the book is gone. If
        that step fails the book stays deleted and StoreFailure is raised.

        Returns:
            Number of reviews removed along with the book

        Raises:
            NotFoundError: book missing
            UnauthorizedError: actor is not the owner
        """
        if not is_valid_id(book_id):
            raise NotFoundError("Book not found")

        with self.db.get_session() as session:
            book = self.db.get_book(book_id, session=session)
            if not book:
                raise NotFoundError("Book not found")

            require_owner(actor_id, book, "delete this book")

            self.db.delete_book(book_id, session=session)
            session.commit()

        try:
            removed = ReviewManager(self.db).delete_reviews_for_book(book_id)
        except StoreFailure:
            logger.error("Book {} deleted but its reviews could not be removed", book_id)
            raise

        logger.info("Book {} deleted by {} with {} review(s)", book_id, actor_id, removed)
        return removed
