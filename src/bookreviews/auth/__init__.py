"""Credentials and ownership checks.

``AuthManager`` lives in ``bookreviews.auth.manager``; it is not re-exported
here because the review manager depends on the guard below.
"""

from .guard import Decision, authorize, check, require_owner
from .passwords import hash_password, verify_password
from .tokens import issue_token, verify_token

__all__ = [
    "Decision",
    "authorize",
    "check",
    "require_owner",
    "hash_password",
    "verify_password",
    "issue_token",
    "verify_token",
]
