"""Ownership guard for book and review mutations.

Callers check that the resource exists before asking the guard, so a
denial always implies the resource exists.
"""

from enum import Enum
from typing import Protocol

from ..errors import UnauthorizedError


class Decision(str, Enum):
    """Outcome of an ownership check."""

    ALLOWED = "allowed"
    DENIED = "denied"


class Owned(Protocol):
    """Anything with a single owning user id (Book, Review)."""

    @property
    def owner_id(self) -> str: ...


def authorize(actor_id: str, owner_id: str) -> Decision:
    """Compare the acting user with the resource's owner/author."""
    if actor_id and owner_id and str(actor_id) == str(owner_id):
        return Decision.ALLOWED
    return Decision.DENIED


def check(actor_id: str, resource: Owned) -> Decision:
    """Ownership decision for a resource."""
    return authorize(actor_id, resource.owner_id)


def require_owner(actor_id: str, resource: Owned, action: str) -> None:
    """Raise UnauthorizedError unless ``actor_id`` owns ``resource``.

    Args:
        actor_id: Acting user
        resource: Book or Review
        action: Phrase for the error message, e.g. "update this book"
    """
    if check(actor_id, resource) is Decision.DENIED:
        raise UnauthorizedError(f"User not authorized to {action}")
