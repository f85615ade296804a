"""Schemas for the catalog listing and book detail pages."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from ..db.schemas import BookWithOwner, UserPublic
from ..reviews.schemas import RatingBucket, ReviewWithAuthor

PAGE_SIZE = 5
ALL_GENRES = "All"


class SortKey(str, Enum):
    """Sort options for the listing."""

    TITLE_ASC = "title_asc"
    YEAR_DESC = "year_desc"
    YEAR_ASC = "year_asc"
    RATING_DESC = "rating_desc"
    RATING_ASC = "rating_asc"


class ListingQuery(BaseModel):
    """Listing request. Lenient: bad values fall back to defaults."""

    page: int = Field(default=1, ge=1)
    search: Optional[str] = None
    genre: Optional[str] = None
    sort: SortKey = SortKey.TITLE_ASC

    @field_validator("page", mode="before")
    @classmethod
    def default_page(cls, v: Any) -> int:
        """Missing, unparsable or non-positive pages mean page 1."""
        try:
            page = int(str(v).strip())
        except (TypeError, ValueError):
            return 1
        return page if page >= 1 else 1

    @field_validator("search", mode="before")
    @classmethod
    def blank_search_is_none(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("genre", mode="before")
    @classmethod
    def all_genres_is_none(cls, v: Any) -> Optional[str]:
        """The "All" sentinel and blank mean no genre restriction."""
        if v is None:
            return None
        v = str(v).strip()
        if not v or v == ALL_GENRES:
            return None
        return v

    @field_validator("sort", mode="before")
    @classmethod
    def default_sort(cls, v: Any) -> SortKey:
        """Unknown sort keys fall back to title order."""
        if isinstance(v, SortKey):
            return v
        try:
            return SortKey(str(v).strip().lower())
        except ValueError:
            return SortKey.TITLE_ASC


class BookSummary(BaseModel):
    """One row of the listing, with derived rating statistics."""

    id: str
    title: str
    author: str
    description: str
    genre: Optional[str]
    year: Optional[int]
    owner: Optional[UserPublic]
    average_rating: float = Field(..., ge=0, le=5)
    review_count: int = Field(..., ge=0)


class ListingPage(BaseModel):
    """A page of the listing plus facet metadata."""

    books: list[BookSummary]
    current_page: int
    total_pages: int
    total_books: int
    genres: list[str]


class BookDetail(BaseModel):
    """A book with its reviews and rating summary."""

    book: BookWithOwner
    average_rating: float
    review_count: int
    reviews: list[ReviewWithAuthor]
    rating_distribution: list[RatingBucket]
