"""Pytest configuration and shared fixtures.

This module provides fixtures for testing the bookreviews application,
including an in-memory database, sample users and a book factory.
"""

from pathlib import Path
from typing import Callable, Generator, Optional

import pytest
from sqlalchemy import delete

from bookreviews.auth.passwords import hash_password
from bookreviews.config import reset_config
from bookreviews.db.models import Book, User
from bookreviews.db.schemas import BookCreate
from bookreviews.db.sqlite import Database, reset_db
from bookreviews.reviews.models import Review

TEST_SECRET = "test-secret-for-signing-tokens-0123456789"
TEST_PASSWORD = "secret123"


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Point config at a temporary database and a known signing secret."""
    db_path = tmp_path / "bookreviews.db"
    monkeypatch.setenv("BOOKREVIEWS_DB_PATH", str(db_path))
    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    monkeypatch.delenv("BOOKREVIEWS_TOKEN_TTL", raising=False)
    reset_db()
    reset_config()

    yield db_path

    reset_db()
    reset_config()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def db() -> Database:
    """Create an in-memory database for testing."""
    database = Database(":memory:")
    database.create_tables()
    return database


@pytest.fixture
def file_db(tmp_path: Path) -> Database:
    """File-backed database, for tests that need a second connection."""
    database = Database(str(tmp_path / "shared.db"))
    database.create_tables()
    return database


@pytest.fixture
def delete_after_ownership_check(file_db: Database, monkeypatch: pytest.MonkeyPatch):
    """Make a manager's ownership check remove the row from another connection.

    Simulates a concurrent delete landing between the check and the write.
    """

    def _install(module, model, row_id: str) -> None:
        other = Database(str(file_db.db_path))
        original = module.require_owner

        def require_owner_then_delete(actor_id, resource, action):
            original(actor_id, resource, action)
            with other.get_session() as session:
                session.execute(delete(model).where(model.id == row_id))

        monkeypatch.setattr(module, "require_owner", require_owner_then_delete)

    return _install


@pytest.fixture
def user_password() -> str:
    """Password shared by every user the fixtures create."""
    return TEST_PASSWORD


@pytest.fixture
def make_user(db: Database) -> Callable[..., User]:
    """Factory creating users with the shared test password."""

    def _make(name: str, email: Optional[str] = None) -> User:
        email = email or f"{name.lower().replace(' ', '.')}@example.com"
        password_hash = hash_password(TEST_PASSWORD, method="pbkdf2:sha256:1000")
        return db.create_user(name, email, password_hash)

    return _make


@pytest.fixture
def alice(make_user) -> User:
    return make_user("Alice")


@pytest.fixture
def bob(make_user) -> User:
    return make_user("Bob")


@pytest.fixture
def make_book(db: Database, alice: User) -> Callable[..., Book]:
    """Factory creating books, owned by Alice unless told otherwise."""

    def _make(
        title: str = "Dune",
        author: str = "Frank Herbert",
        genre: Optional[str] = "Science Fiction",
        year: Optional[int] = 1965,
        owner: Optional[User] = None,
        description: str = "A desert planet and its spice.",
    ) -> Book:
        data = BookCreate(
            title=title, author=author, description=description, genre=genre, year=year
        )
        return db.create_book(data, owner_id=(owner or alice).id)

    return _make


@pytest.fixture
def add_review(db: Database) -> Callable[..., Review]:
    """Insert a review row directly, bypassing the manager's checks."""

    def _add(book: Book, author: User, rating: int, text: str = "Good read") -> Review:
        with db.get_session() as session:
            review = Review(
                book_id=book.id, author_id=author.id, rating=rating, review_text=text
            )
            session.add(review)
            session.commit()
            session.refresh(review)
            session.expunge(review)
        return review

    return _add
