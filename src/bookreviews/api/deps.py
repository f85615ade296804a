"""FastAPI dependency implementations."""

from typing import Optional

from fastapi import Depends, Header, Request

from ..auth.manager import AuthManager
from ..books.manager import BookManager
from ..catalog.manager import CatalogManager
from ..db.sqlite import Database
from ..reviews.manager import ReviewManager


def get_database(request: Request) -> Database:
    """Get the database instance the app was created with."""
    return request.app.state.db


def get_auth_manager(db: Database = Depends(get_database)) -> AuthManager:
    return AuthManager(db)


def get_book_manager(db: Database = Depends(get_database)) -> BookManager:
    return BookManager(db)


def get_review_manager(db: Database = Depends(get_database)) -> ReviewManager:
    return ReviewManager(db)


def get_catalog_manager(db: Database = Depends(get_database)) -> CatalogManager:
    return CatalogManager(db)


def bearer_token(
    x_auth_token: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None),
) -> Optional[str]:
    """Read the credential from ``x-auth-token`` or ``Authorization: Bearer``."""
    if x_auth_token:
        return x_auth_token.strip()
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
    return None


def get_actor_id(
    token: Optional[str] = Depends(bearer_token),
    auth: AuthManager = Depends(get_auth_manager),
) -> str:
    """Id of the authenticated user; raises UnauthenticatedError otherwise."""
    return auth.authenticate(token)
