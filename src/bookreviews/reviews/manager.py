"""Review manager for book review operations."""

from typing import Optional

from loguru import logger
from sqlalchemy import delete, select

from ..auth.guard import require_owner
from ..db.models import Book, is_valid_id, utcnow_iso
from ..db.sqlite import Database, get_db
from ..errors import DuplicateError, NotFoundError
from .models import Review
from .schemas import ReviewCreate, ReviewUpdate


class ReviewManager:
    """Manages book review operations."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize review manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    # -------------------------------------------------------------------------
    # Review CRUD
    # -------------------------------------------------------------------------

    def add_review(self, actor_id: str, data: ReviewCreate) -> Review:
        """Create a review of a book by the acting user.

        Args:
            actor_id: Acting (authenticated) user
            data: Review creation data

        Returns:
            Created review

        Raises:
            NotFoundError: book id malformed or unknown
            DuplicateError: the user already reviewed this book
        """
        if not is_valid_id(data.book_id):
            raise NotFoundError("Book not found")

        with self.db.get_session() as session:
            book = session.get(Book, data.book_id)
            if not book:
                raise NotFoundError("Book not found")

            existing = session.execute(
                select(Review.id).where(
                    Review.book_id == data.book_id,
                    Review.author_id == actor_id,
                )
            ).first()
            if existing:
                raise DuplicateError(
                    "You have already reviewed this book. Please edit your existing review."
                )

            review = Review(
                book_id=data.book_id,
                author_id=actor_id,
                rating=data.rating,
                review_text=data.review_text,
            )
            session.add(review)
            session.commit()
            session.refresh(review)
            session.expunge(review)

        logger.info("Review {} added to book {} by {}", review.id, review.book_id, actor_id)
        return review

    def get_review(self, review_id: str) -> Optional[Review]:
        """Get a review by ID.

        Args:
            review_id: Review ID

        Returns:
            Review or None (also for malformed IDs)
        """
        if not is_valid_id(review_id):
            return None
        with self.db.get_session() as session:
            review = session.get(Review, review_id)
            if review:
                session.expunge(review)
            return review

    def update_review(self, actor_id: str, review_id: str, data: ReviewUpdate) -> Review:
        """Update a review's rating and/or text.

        Only the fields provided on ``data`` are changed.

        Raises:
            NotFoundError: review missing
            UnauthorizedError: actor is not the review's author
        """
        if not is_valid_id(review_id):
            raise NotFoundError("Review not found")

        with self.db.get_session() as session:
            review = session.get(Review, review_id)
            if not review:
                raise NotFoundError("Review not found")

            require_owner(actor_id, review, "update this review")

            update_data = data.model_dump(exclude_unset=True, exclude_none=True)
            for field, value in update_data.items():
                setattr(review, field, value)

            review.updated_at = utcnow_iso()
            session.commit()
            session.refresh(review)
            session.expunge(review)

        logger.info("Review {} updated ({})", review_id, ", ".join(update_data) or "no changes")
        return review

    def delete_review(self, actor_id: str, review_id: str) -> None:
        """Delete a review authored by the acting user.

        Raises:
            NotFoundError: review missing
            UnauthorizedError: actor is not the review's author
        """
        if not is_valid_id(review_id):
            raise NotFoundError("Review not found")

        with self.db.get_session() as session:
            review = session.get(Review, review_id)
            if not review:
                raise NotFoundError("Review not found")

            require_owner(actor_id, review, "delete this review")

            session.delete(review)
            session.commit()

        logger.info("Review {} deleted by {}", review_id, actor_id)

    def delete_reviews_for_book(self, book_id: str) -> int:
        """Remove every review of a book.

        Args:
            book_id: Book ID

        Returns:
            Number of reviews removed
        """
        with self.db.get_session() as session:
            result = session.execute(delete(Review).where(Review.book_id == book_id))
            session.commit()
            return result.rowcount or 0

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_for_book(self, book_id: str) -> list[Review]:
        """All reviews of a book, most recently created first."""
        with self.db.get_session() as session:
            stmt = (
                select(Review)
                .where(Review.book_id == book_id)
                .order_by(Review.created_at.desc(), Review.id.desc())
            )
            reviews = list(session.execute(stmt).scalars().all())
            for review in reviews:
                session.expunge(review)
            return reviews

    def list_by_author(self, author_id: str) -> list[Review]:
        """All reviews written by a user, most recently created first."""
        with self.db.get_session() as session:
            stmt = (
                select(Review)
                .where(Review.author_id == author_id)
                .order_by(Review.created_at.desc(), Review.id.desc())
            )
            reviews = list(session.execute(stmt).scalars().all())
            for review in reviews:
                session.expunge(review)
            return reviews

    def get_ratings(self, book_id: Optional[str] = None) -> list[tuple[str, int]]:
        """(book_id, rating) pairs, for one book or for all books."""
        with self.db.get_session() as session:
            stmt = select(Review.book_id, Review.rating)
            if book_id is not None:
                stmt = stmt.where(Review.book_id == book_id)
            return [(row.book_id, row.rating) for row in session.execute(stmt)]
