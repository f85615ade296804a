"""Tests for AuthManager."""

import pytest
from pydantic import ValidationError

from bookreviews.auth.manager import AuthManager
from bookreviews.auth.schemas import LoginRequest, SignupRequest
from bookreviews.auth.tokens import issue_token, verify_token
from bookreviews.db.sqlite import Database
from bookreviews.errors import DuplicateError, NotFoundError, UnauthenticatedError
from bookreviews.reviews.manager import ReviewManager
from bookreviews.reviews.schemas import ReviewCreate


@pytest.fixture
def manager(db: Database) -> AuthManager:
    """Create an AuthManager with test database."""
    return AuthManager(db)


class TestSignupAndLogin:
    """Tests for account creation and credential checks."""

    def test_signup_returns_token_for_new_user(self, manager: AuthManager, db: Database):
        result = manager.signup(
            SignupRequest(name="Dana", email="Dana@Example.com", password="pass1234")
        )
        user_id = verify_token(result.token)

        user = db.get_user(user_id)
        assert user.name == "Dana"
        assert user.email == "dana@example.com"
        assert user.password_hash != "pass1234"

    def test_duplicate_email(self, manager: AuthManager, alice):
        with pytest.raises(DuplicateError, match="User already exists"):
            manager.signup(
                SignupRequest(name="Other", email="ALICE@example.com", password="pass1234")
            )

    def test_email_taken_after_lookup(self, manager: AuthManager, db: Database, alice, monkeypatch):
        monkeypatch.setattr(db, "get_user_by_email", lambda email, session=None: None)

        with pytest.raises(DuplicateError, match="User already exists"):
            manager.signup(
                SignupRequest(name="Other", email="alice@example.com", password="pass1234")
            )

    def test_login(self, manager: AuthManager, alice, user_password):
        result = manager.login(LoginRequest(email="alice@example.com", password=user_password))
        assert verify_token(result.token) == alice.id

    def test_login_wrong_password(self, manager: AuthManager, alice):
        with pytest.raises(UnauthenticatedError, match="Invalid credentials"):
            manager.login(LoginRequest(email="alice@example.com", password="wrong-pass"))

    def test_login_unknown_email(self, manager: AuthManager):
        with pytest.raises(UnauthenticatedError, match="Invalid credentials"):
            manager.login(LoginRequest(email="nobody@example.com", password="whatever"))

    def test_signup_validation(self):
        with pytest.raises(ValidationError):
            SignupRequest(name="Dana", email="not-an-email", password="pass1234")
        with pytest.raises(ValidationError):
            SignupRequest(name="Dana", email="dana@example.com", password="123")
        with pytest.raises(ValidationError):
            SignupRequest(name="   ", email="dana@example.com", password="pass1234")

    @pytest.mark.parametrize("email", ["dana@", "@example.com", "da na@example.com", "dana"])
    def test_signup_rejects_malformed_email(self, email):
        with pytest.raises(ValidationError):
            SignupRequest(name="Dana", email=email, password="pass1234")

    def test_signup_email_normalized(self):
        request = SignupRequest(name="Dana", email="  Dana@Example.COM ", password="pass1234")
        assert request.email == "dana@example.com"


class TestAuthenticate:
    def test_valid_token(self, manager: AuthManager, alice):
        assert manager.authenticate(issue_token(alice.id)) == alice.id

    def test_token_for_unknown_user(self, manager: AuthManager):
        token = issue_token("3fa85f64-5717-4562-b3fc-2c963f66afa6")
        with pytest.raises(UnauthenticatedError, match="Token is not valid"):
            manager.authenticate(token)

    def test_missing_token(self, manager: AuthManager):
        with pytest.raises(UnauthenticatedError, match="No token"):
            manager.authenticate(None)


class TestProfile:
    """Tests for the current-user profile."""

    def test_profile_lists_own_books_and_reviews(
        self, manager: AuthManager, db: Database, make_book, alice, bob
    ):
        make_book(title="Walden")
        make_book(title="Beloved")
        theirs = make_book(title="Middlemarch", owner=bob)
        other = make_book(title="Ulysses", owner=bob)

        reviews = ReviewManager(db)
        reviews.add_review(alice.id, ReviewCreate(book_id=theirs.id, rating=4, review_text="Long"))
        reviews.add_review(alice.id, ReviewCreate(book_id=other.id, rating=2, review_text="Hard"))

        profile = manager.get_profile(alice.id)

        assert profile.user.email == "alice@example.com"
        assert not hasattr(profile.user, "password_hash")
        assert [b.title for b in profile.books] == ["Beloved", "Walden"]
        assert [r.book_title for r in profile.reviews] == ["Ulysses", "Middlemarch"]

    def test_profile_review_of_deleted_book(
        self, manager: AuthManager, db: Database, make_book, add_review, alice, bob
    ):
        book = make_book(owner=bob)
        add_review(book, alice, 3)
        db.delete_book(book.id)

        profile = manager.get_profile(alice.id)
        assert profile.reviews[0].book_title is None

    def test_profile_unknown_user(self, manager: AuthManager):
        with pytest.raises(NotFoundError):
            manager.get_profile("3fa85f64-5717-4562-b3fc-2c963f66afa6")
