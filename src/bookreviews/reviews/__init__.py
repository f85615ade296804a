"""Book reviews and ratings module."""

from .manager import ReviewManager
from .models import Review
from .schemas import (
    ReviewCreate,
    ReviewUpdate,
    ReviewResponse,
    ReviewWithAuthor,
    ReviewWithBook,
    RatingBucket,
)

__all__ = [
    "ReviewManager",
    "Review",
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "ReviewWithAuthor",
    "ReviewWithBook",
    "RatingBucket",
]
