"""Pydantic schemas for book reviews."""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from ..db.schemas import UserPublic


def coerce_rating(v: Any) -> Any:
    """Coerce a submitted rating to a whole number of stars.

    Strings and floats are truncated toward zero ("4", 4.7 and "4.7" all
    become 4). Range checking is left to the field constraints.
    """
    if v is None or isinstance(v, int) and not isinstance(v, bool):
        return v
    if isinstance(v, bool):
        raise ValueError("rating must be a number")
    try:
        return int(float(str(v).strip()))
    except (ValueError, OverflowError):
        raise ValueError("rating must be a number") from None


class ReviewCreate(BaseModel):
    """Schema for creating a review."""

    book_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    review_text: str = Field(..., min_length=1)

    @field_validator("rating", mode="before")
    @classmethod
    def validate_rating(cls, v):
        """Coerce rating to an integer."""
        return coerce_rating(v)

    @field_validator("review_text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Reject whitespace-only review text."""
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class ReviewUpdate(BaseModel):
    """Schema for updating a review. Each field is independently optional."""

    rating: Optional[int] = Field(None, ge=1, le=5)
    review_text: Optional[str] = Field(None, min_length=1)

    @field_validator("rating", mode="before")
    @classmethod
    def validate_rating(cls, v):
        """Coerce rating to an integer."""
        return coerce_rating(v)

    @field_validator("review_text")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        """Reject whitespace-only review text."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class ReviewResponse(BaseModel):
    """Schema for review responses."""

    id: str
    book_id: str
    author_id: str
    rating: int
    review_text: str
    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


class ReviewWithAuthor(ReviewResponse):
    """Review with the author's public fields, as shown on a book page."""

    author: Optional[UserPublic] = None


class ReviewWithBook(ReviewResponse):
    """Review with the reviewed book's title, as shown on a profile."""

    book_title: Optional[str] = None


class RatingBucket(BaseModel):
    """Number of reviews with a given star rating."""

    rating: int = Field(..., ge=1, le=5)
    count: int = Field(..., ge=0)
