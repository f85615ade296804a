"""Catalog manager: listing and detail pages backed by the database."""

from typing import Optional

from ..db.models import is_valid_id
from ..db.sqlite import Database, get_db
from ..errors import NotFoundError
from ..reviews.manager import ReviewManager
from .aggregation import build_detail, build_listing
from .schemas import BookDetail, ListingPage, ListingQuery


class CatalogManager:
    """Read side of the catalog."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize catalog manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()
        self.reviews = ReviewManager(self.db)

    def list_books(self, query: Optional[ListingQuery] = None) -> ListingPage:
        """One page of books with average rating and review count.

        Genres are computed from the whole catalog on every call.

        Args:
            query: Page, search, genre and sort options (defaults to page 1)

        Returns:
            ListingPage
        """
        query = query or ListingQuery()
        books = self.db.get_all_books()
        ratings = self.reviews.get_ratings()
        user_names = self.db.get_user_names(book.owner_id for book in books)
        return build_listing(books, ratings, user_names, query)

    def get_book_detail(self, book_id: str) -> BookDetail:
        """A book with its reviews, average rating and rating histogram.

        Raises:
            NotFoundError: id malformed or unknown
        """
        if not is_valid_id(book_id):
            raise NotFoundError("Book not found")

        book = self.db.get_book(book_id)
        if not book:
            raise NotFoundError("Book not found")

        reviews = self.reviews.list_for_book(book_id)
        user_names = self.db.get_user_names(
            [book.owner_id, *(review.author_id for review in reviews)]
        )
        return build_detail(book, reviews, user_names)
