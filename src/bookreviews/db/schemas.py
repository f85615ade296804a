"""Pydantic schemas for book and user data validation."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


# ============================================================================
# Shared Schemas
# ============================================================================


class UserPublic(BaseModel):
    """Public fields of a user, attached to books and reviews."""

    id: str
    name: str

    model_config = {"from_attributes": True}


# ============================================================================
# Book Schemas
# ============================================================================


class BookBase(BaseModel):
    """Base book fields common to create/update operations."""

    title: str = Field(..., min_length=1, description="Book title")
    author: str = Field(..., min_length=1, description="Author name")
    description: str = Field(..., min_length=1, description="Short description")
    genre: Optional[str] = Field(None, max_length=100, description="Genre label")
    year: Optional[int] = Field(None, description="Publication year")

    @field_validator("title", "author", "description")
    @classmethod
    def strip_required(cls, v: str) -> str:
        """Reject whitespace-only values for required text."""
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("genre")
    @classmethod
    def blank_genre_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank genre as no genre."""
        if v is not None:
            v = v.strip()
        return v or None


class BookCreate(BookBase):
    """Schema for creating a new book."""

    pass


class BookUpdate(BaseModel):
    """Schema for updating a book. Only fields that are set are applied."""

    title: Optional[str] = Field(None, min_length=1)
    author: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    genre: Optional[str] = Field(None, max_length=100)
    year: Optional[int] = None

    @field_validator("title", "author", "description")
    @classmethod
    def required_not_cleared(cls, v: Optional[str]) -> str:
        """Required fields may be changed but not cleared."""
        if v is None or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("genre")
    @classmethod
    def blank_genre_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank genre as no genre."""
        if v is not None:
            v = v.strip()
        return v or None


class BookResponse(BaseModel):
    """Schema for book responses."""

    id: str
    title: str
    author: str
    description: str
    genre: Optional[str]
    year: Optional[int]
    owner_id: str
    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


class BookWithOwner(BaseModel):
    """Book with the owner's public fields attached."""

    id: str
    title: str
    author: str
    description: str
    genre: Optional[str]
    year: Optional[int]
    owner: Optional[UserPublic]
    created_at: str
    updated_at: str
