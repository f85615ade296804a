"""Error taxonomy shared by the managers, the API and the CLI.

Every error carries a short, human-readable message that is safe to show
to a client. ``StoreFailure`` wraps persistence errors and always presents
a generic message; the underlying exception is kept as ``__cause__``.
"""


class BookReviewError(Exception):
    """Base exception for bookreviews errors."""

    status_code = 500

    def __init__(self, message: str = "Server error"):
        super().__init__(message)
        self.message = message


class NotFoundError(BookReviewError):
    """Referenced entity is absent or its id is malformed."""

    status_code = 404


class UnauthorizedError(BookReviewError):
    """Authenticated actor is not the owner/author of the resource."""

    status_code = 403


class UnauthenticatedError(BookReviewError):
    """Credential is missing, invalid or expired."""

    status_code = 401


class DuplicateError(BookReviewError):
    """Entity already exists (second review, registered email)."""

    status_code = 409


class ValidationFailure(BookReviewError):
    """Required field missing or invalid."""

    status_code = 400


class StoreFailure(BookReviewError):
    """Underlying persistence error."""

    status_code = 500

    def __init__(self, message: str = "Server error"):
        super().__init__(message)
