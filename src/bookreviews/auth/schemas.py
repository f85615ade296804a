"""Pydantic schemas for signup, login and the current-user profile."""

from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator

from ..db.schemas import BookResponse
from ..reviews.schemas import ReviewWithBook


class SignupRequest(BaseModel):
    """Schema for registering a new user."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=6)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Reject whitespace-only names."""
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        """Emails are matched case-insensitively."""
        return v.lower()


class LoginRequest(BaseModel):
    """Schema for logging in."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Opaque bearer credential."""

    token: str


class UserResponse(BaseModel):
    """User record without the password hash."""

    id: str
    name: str
    email: str
    created_at: str

    model_config = {"from_attributes": True}


class UserProfile(BaseModel):
    """Current user with the books they added and the reviews they wrote."""

    user: UserResponse
    books: list[BookResponse]
    reviews: list[ReviewWithBook]
