"""Salted password hashing.

Hashes are werkzeug's self-describing ``method$salt$hash`` strings, so the
method or work factor can change later without invalidating old hashes.
"""

from werkzeug.security import check_password_hash, generate_password_hash

DEFAULT_METHOD = "pbkdf2:sha256:260000"


def hash_password(password: str, method: str = DEFAULT_METHOD) -> str:
    """Return an encoded salted hash for ``password``."""
    return generate_password_hash(password, method=method, salt_length=16)


def verify_password(password: str, encoded: str) -> bool:
    """Check ``password`` against an encoded hash. Malformed hashes never match."""
    if not encoded:
        return False
    try:
        return check_password_hash(encoded, password)
    except ValueError:
        return False
