"""Join-and-aggregate logic for the catalog.

Everything here is a pure function over plain collections: books (any
object with ``id, title, author, description, genre, year, owner_id``),
``(book_id, rating)`` pairs and a ``user_id -> name`` mapping. The catalog
manager feeds these from the database; any other store can do the same.
"""

import math
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Protocol, Sequence

from ..db.schemas import BookWithOwner, UserPublic
from ..reviews.schemas import RatingBucket, ReviewWithAuthor
from .schemas import (
    PAGE_SIZE,
    BookDetail,
    BookSummary,
    ListingPage,
    ListingQuery,
    SortKey,
)

STAR_VALUES = (5, 4, 3, 2, 1)


class BookLike(Protocol):
    id: str
    title: str
    author: str
    description: str
    genre: Optional[str]
    year: Optional[int]
    owner_id: str


@dataclass(frozen=True)
class RatingStats:
    """Derived rating statistics for one book."""

    average: float = 0.0
    count: int = 0


# =============================================================================
# Rating statistics
# =============================================================================


def average_rating(ratings: Iterable[int], places: Optional[int] = None) -> float:
    """Mean of ``ratings``; 0.0 when there are none."""
    values = list(ratings)
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    return round(mean, places) if places is not None else mean


def rating_stats_by_book(ratings: Iterable[tuple[str, int]]) -> dict[str, RatingStats]:
    """Group ``(book_id, rating)`` pairs into per-book statistics."""
    totals: dict[str, int] = defaultdict(int)
    counts: dict[str, int] = defaultdict(int)
    for book_id, rating in ratings:
        totals[book_id] += rating
        counts[book_id] += 1
    return {
        book_id: RatingStats(average=totals[book_id] / counts[book_id], count=counts[book_id])
        for book_id in counts
    }


def rating_distribution(ratings: Iterable[int]) -> list[RatingBucket]:
    """Histogram of star values that occur, highest rating first.

    Star values nobody used are omitted; see ``fill_distribution``.
    """
    counter = Counter(ratings)
    return [
        RatingBucket(rating=rating, count=count)
        for rating, count in sorted(counter.items(), reverse=True)
    ]


def fill_distribution(buckets: Iterable[RatingBucket]) -> list[RatingBucket]:
    """All five star values, 5 down to 1, with zero counts backfilled."""
    counts = {bucket.rating: bucket.count for bucket in buckets}
    return [RatingBucket(rating=star, count=counts.get(star, 0)) for star in STAR_VALUES]


# =============================================================================
# Filtering, sorting, paging
# =============================================================================


def matches(book: BookLike, search: Optional[str] = None, genre: Optional[str] = None) -> bool:
    """Case-insensitive title/author substring match plus exact genre match."""
    if search:
        needle = search.casefold()
        if needle not in book.title.casefold() and needle not in book.author.casefold():
            return False
    if genre is not None and book.genre != genre:
        return False
    return True


def _title_key(summary: BookSummary) -> tuple[str, str]:
    return (summary.title.casefold(), summary.title)


def sort_summaries(summaries: Iterable[BookSummary], sort: SortKey) -> list[BookSummary]:
    """Order listing rows. Every key except title breaks ties by title."""
    if sort == SortKey.YEAR_DESC:
        key = lambda s: (s.year is None, -(s.year or 0), _title_key(s))  # noqa: E731
    elif sort == SortKey.YEAR_ASC:
        key = lambda s: (s.year is not None, s.year or 0, _title_key(s))  # noqa: E731
    elif sort == SortKey.RATING_DESC:
        key = lambda s: (-s.average_rating, _title_key(s))  # noqa: E731
    elif sort == SortKey.RATING_ASC:
        key = lambda s: (s.average_rating, _title_key(s))  # noqa: E731
    else:
        key = _title_key
    return sorted(summaries, key=key)


def total_pages(total: int, page_size: int = PAGE_SIZE) -> int:
    """Number of pages needed for ``total`` items (0 for no items)."""
    return math.ceil(total / page_size)


def paginate(items: Sequence[Any], page: int, page_size: int = PAGE_SIZE) -> list[Any]:
    """Slice out one page; pages past the end are empty."""
    start = (max(page, 1) - 1) * page_size
    return list(items[start : start + page_size])


def distinct_genres(books: Iterable[BookLike]) -> list[str]:
    """Sorted distinct genre labels, ignoring books without one."""
    return sorted({book.genre for book in books if book.genre})


def _owner(owner_id: str, user_names: Mapping[str, str]) -> Optional[UserPublic]:
    name = user_names.get(owner_id)
    if name is None:
        return None
    return UserPublic(id=owner_id, name=name)


# =============================================================================
# Pages
# =============================================================================


def build_listing(
    books: Iterable[BookLike],
    ratings: Iterable[tuple[str, int]],
    user_names: Mapping[str, str],
    query: Optional[ListingQuery] = None,
) -> ListingPage:
    """Compute one page of the catalog listing.

    Args:
        books: Every book in the catalog
        ratings: ``(book_id, rating)`` for every review
        user_names: Names of (at least) the book owners
        query: Page, search, genre and sort options

    Returns:
        ListingPage with the page rows, page counts and all genres
    """
    query = query or ListingQuery()
    books = list(books)
    stats = rating_stats_by_book(ratings)

    summaries = []
    for book in books:
        if not matches(book, query.search, query.genre):
            continue
        book_stats = stats.get(book.id, RatingStats())
        summaries.append(
            BookSummary(
                id=book.id,
                title=book.title,
                author=book.author,
                description=book.description,
                genre=book.genre,
                year=book.year,
                owner=None,
                average_rating=book_stats.average,
                review_count=book_stats.count,
            )
        )

    ordered = sort_summaries(summaries, query.sort)
    total_books = len(ordered)

    # Owners are attached to the visible page only
    owner_ids = {book.id: book.owner_id for book in books}
    page_rows = [
        row.model_copy(update={"owner": _owner(owner_ids[row.id], user_names)})
        for row in paginate(ordered, query.page)
    ]

    return ListingPage(
        books=page_rows,
        current_page=query.page,
        total_pages=total_pages(total_books),
        total_books=total_books,
        genres=distinct_genres(books),
    )


def build_detail(
    book: Any,
    reviews: Iterable[Any],
    user_names: Mapping[str, str],
) -> BookDetail:
    """Assemble the detail page of one book.

    Args:
        book: The book (ORM row or equivalent, with timestamps)
        reviews: Its reviews, already ordered newest first
        user_names: Names of the owner and the review authors

    Returns:
        BookDetail with a 2-decimal average and the rating histogram
    """
    reviews = list(reviews)
    ratings = [review.rating for review in reviews]

    return BookDetail(
        book=BookWithOwner(
            id=book.id,
            title=book.title,
            author=book.author,
            description=book.description,
            genre=book.genre,
            year=book.year,
            owner=_owner(book.owner_id, user_names),
            created_at=book.created_at,
            updated_at=book.updated_at,
        ),
        average_rating=average_rating(ratings, places=2),
        review_count=len(ratings),
        reviews=[
            ReviewWithAuthor.model_validate(review).model_copy(
                update={"author": _owner(review.author_id, user_names)}
            )
            for review in reviews
        ],
        rating_distribution=rating_distribution(ratings),
    )
