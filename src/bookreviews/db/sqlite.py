"""SQLite database operations.

Handles database connection, session management, and the user and book
CRUD operations the managers build on.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Iterable, Optional

from loguru import logger
from sqlalchemy import create_engine, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.pool import StaticPool

from ..errors import NotFoundError, StoreFailure
from .models import Base, Book, User, utcnow_iso
from .schemas import BookCreate, BookUpdate


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses the
                     configured BOOKREVIEWS_DB_PATH. ":memory:" keeps
                     everything in a single shared in-memory connection.
        """
        if db_path is None:
            from ..config import get_config

            db_path = get_config().db_path

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def create_tables(self) -> None:
        """Create all database tables."""
        # Import review model to register it with Base
        from ..reviews.models import Review  # noqa: F401

        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop all database tables. Use with caution!"""
        from ..reviews.models import Review  # noqa: F401

        Base.metadata.drop_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager.

        A row that vanished between read and write (concurrent delete)
        surfaces as NotFoundError; any other SQLAlchemy error is wrapped in
        StoreFailure.
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except StaleDataError as exc:
            session.rollback()
            logger.warning("Write found no row to act on: {}", exc)
            raise NotFoundError("Resource no longer exists") from exc
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Database error")
            raise StoreFailure() from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ========================================================================
    # User Operations
    # ========================================================================

    def create_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        session: Optional[Session] = None,
    ) -> User:
        """Create a new user record. Emails are stored lower-cased."""

        def _create(s: Session) -> User:
            user = User(name=name, email=email.strip().lower(), password_hash=password_hash)
            s.add(user)
            s.flush()
            return user

        if session:
            return _create(session)
        else:
            with self.get_session() as s:
                user = _create(s)
                s.expunge(user)
                return user

    def get_user(self, user_id: str, session: Optional[Session] = None) -> Optional[User]:
        """Get a user by ID."""

        def _get(s: Session) -> Optional[User]:
            return s.get(User, user_id)

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                user = _get(s)
                if user:
                    s.expunge(user)
                return user

    def get_user_by_email(
        self, email: str, session: Optional[Session] = None
    ) -> Optional[User]:
        """Get a user by email (case-insensitive)."""

        def _get(s: Session) -> Optional[User]:
            stmt = select(User).where(User.email == email.strip().lower())
            return s.execute(stmt).scalar_one_or_none()

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                user = _get(s)
                if user:
                    s.expunge(user)
                return user

    def get_user_names(
        self, user_ids: Iterable[str], session: Optional[Session] = None
    ) -> dict[str, str]:
        """Map user IDs to display names. Unknown IDs are omitted."""
        ids = set(user_ids)

        def _get(s: Session) -> dict[str, str]:
            if not ids:
                return {}
            stmt = select(User.id, User.name).where(User.id.in_(ids))
            return {row.id: row.name for row in s.execute(stmt)}

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                return _get(s)

    # ========================================================================
    # Book Operations
    # ========================================================================

    def create_book(
        self, book: BookCreate, owner_id: str, session: Optional[Session] = None
    ) -> Book:
        """Create a new book record owned by ``owner_id``."""

        def _create(s: Session) -> Book:
            db_book = Book(
                title=book.title,
                author=book.author,
                description=book.description,
                genre=book.genre,
                year=book.year,
                owner_id=owner_id,
            )
            s.add(db_book)
            s.flush()
            return db_book

        if session:
            return _create(session)
        else:
            with self.get_session() as s:
                db_book = _create(s)
                s.expunge(db_book)
                return db_book

    def get_book(self, book_id: str, session: Optional[Session] = None) -> Optional[Book]:
        """Get a book by ID."""

        def _get(s: Session) -> Optional[Book]:
            return s.get(Book, book_id)

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                book = _get(s)
                if book:
                    s.expunge(book)
                return book

    def get_all_books(self, session: Optional[Session] = None) -> list[Book]:
        """Get all books."""

        def _get(s: Session) -> list[Book]:
            stmt = select(Book).order_by(Book.title)
            return list(s.execute(stmt).scalars().all())

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                books = _get(s)
                for book in books:
                    s.expunge(book)
                return books

    def get_books_by_owner(
        self, owner_id: str, session: Optional[Session] = None
    ) -> list[Book]:
        """Get all books added by a user, sorted by title."""

        def _get(s: Session) -> list[Book]:
            stmt = select(Book).where(Book.owner_id == owner_id).order_by(Book.title)
            return list(s.execute(stmt).scalars().all())

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                books = _get(s)
                for book in books:
                    s.expunge(book)
                return books

    def update_book(
        self, book_id: str, update: BookUpdate, session: Optional[Session] = None
    ) -> Optional[Book]:
        """Apply the fields set on ``update`` to a book."""

        def _update(s: Session) -> Optional[Book]:
            book = s.get(Book, book_id)
            if not book:
                return None

            update_data = update.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                setattr(book, field, value)

            book.updated_at = utcnow_iso()
            s.flush()
            return book

        if session:
            return _update(session)
        else:
            with self.get_session() as s:
                book = _update(s)
                if book:
                    s.expunge(book)
                return book

    def delete_book(self, book_id: str, session: Optional[Session] = None) -> bool:
        """Delete a book record. Reviews are not touched."""

        def _delete(s: Session) -> bool:
            book = s.get(Book, book_id)
            if not book:
                return False
            s.delete(book)
            s.flush()
            return True

        if session:
            return _delete(session)
        else:
            with self.get_session() as s:
                return _delete(s)

    # ========================================================================
    # Maintenance
    # ========================================================================

    def clear_all(self) -> None:
        """Delete every review, book and user."""
        from ..reviews.models import Review

        with self.get_session() as s:
            s.execute(delete(Review))
            s.execute(delete(Book))
            s.execute(delete(User))


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(db_path)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
