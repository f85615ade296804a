"""Account manager: signup, login, token authentication and profiles."""

from typing import Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..db.models import Book, is_valid_id
from ..db.schemas import BookResponse
from ..db.sqlite import Database, get_db
from ..errors import DuplicateError, NotFoundError, StoreFailure, UnauthenticatedError
from ..reviews.manager import ReviewManager
from ..reviews.schemas import ReviewWithBook
from .passwords import hash_password, verify_password
from .schemas import LoginRequest, SignupRequest, TokenResponse, UserProfile, UserResponse
from .tokens import issue_token, verify_token


class AuthManager:
    """Manages user accounts and credentials."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize auth manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def signup(self, data: SignupRequest) -> TokenResponse:
        """Register a user and return a token for them.

        Raises:
            DuplicateError: email already registered
        """
        if self.db.get_user_by_email(data.email):
            raise DuplicateError("User already exists")

        try:
            user = self.db.create_user(
                name=data.name,
                email=data.email,
                password_hash=hash_password(data.password),
            )
        except StoreFailure as exc:
            # A concurrent signup took the email after the lookup above
            if isinstance(exc.__cause__, IntegrityError):
                raise DuplicateError("User already exists") from exc
            raise
        logger.info("User {} signed up", user.id)
        return TokenResponse(token=issue_token(user.id))

    def login(self, data: LoginRequest) -> TokenResponse:
        """Check credentials and return a fresh token.

        Raises:
            UnauthenticatedError: unknown email or wrong password
        """
        user = self.db.get_user_by_email(data.email)
        if not user or not verify_password(data.password, user.password_hash):
            logger.info("Failed login for {}", data.email)
            raise UnauthenticatedError("Invalid credentials")

        return TokenResponse(token=issue_token(user.id))

    def authenticate(self, token: Optional[str]) -> str:
        """Resolve a bearer token to the id of an existing user.

        Raises:
            UnauthenticatedError: token invalid/expired or user gone
        """
        user_id = verify_token(token)
        if not is_valid_id(user_id) or not self.db.get_user(user_id):
            raise UnauthenticatedError("Token is not valid")
        return user_id

    def get_profile(self, actor_id: str) -> UserProfile:
        """The acting user's record, books and reviews.

        Raises:
            NotFoundError: user does not exist
        """
        user = self.db.get_user(actor_id) if is_valid_id(actor_id) else None
        if not user:
            raise NotFoundError("User not found")

        books = self.db.get_books_by_owner(actor_id)
        reviews = ReviewManager(self.db).list_by_author(actor_id)

        titles: dict[str, str] = {}
        book_ids = {review.book_id for review in reviews}
        if book_ids:
            with self.db.get_session() as session:
                stmt = select(Book.id, Book.title).where(Book.id.in_(book_ids))
                titles = {row.id: row.title for row in session.execute(stmt)}

        return UserProfile(
            user=UserResponse.model_validate(user),
            books=[BookResponse.model_validate(book) for book in books],
            reviews=[
                ReviewWithBook.model_validate(review).model_copy(
                    update={"book_title": titles.get(review.book_id)}
                )
                for review in reviews
            ],
        )
