"""Database module for local SQLite storage."""

from .models import Book, User
from .schemas import BookCreate, BookUpdate, BookResponse, BookWithOwner, UserPublic
from .sqlite import Database, get_db

__all__ = [
    "Book",
    "User",
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    "BookWithOwner",
    "UserPublic",
    "Database",
    "get_db",
]
