"""Bearer token issuance and verification.

Tokens are HS256 JWTs signed with the configured secret. The subject claim
carries the user id; ``exp`` bounds validity to the configured TTL.
"""

import time
from typing import Any, Optional

from authlib.jose import JoseError, jwt
from loguru import logger

from ..config import get_config
from ..errors import UnauthenticatedError

ALGORITHM = "HS256"


def issue_token(
    user_id: str,
    secret: Optional[str] = None,
    expires_in_seconds: Optional[int] = None,
) -> str:
    """Generate a signed token identifying ``user_id``.

    Args:
        user_id: Subject (sub) claim
        secret: Signing secret (defaults to config)
        expires_in_seconds: Token lifetime (defaults to config TTL)

    Returns:
        Encoded JWT string
    """
    config = get_config()
    secret = secret or config.jwt_secret
    ttl = expires_in_seconds if expires_in_seconds is not None else config.token_ttl

    now = int(time.time())
    payload: dict[str, Any] = {"sub": user_id, "iat": now, "exp": now + ttl}
    token = jwt.encode({"alg": ALGORITHM}, payload, secret)
    return token.decode("utf-8") if isinstance(token, bytes) else token


def verify_token(token: Optional[str], secret: Optional[str] = None) -> str:
    """Validate a token and return the user id it carries.

    Raises:
        UnauthenticatedError: token missing, malformed, tampered or expired
    """
    if not token:
        raise UnauthenticatedError("No token, authorization denied")

    secret = secret or get_config().jwt_secret
    claims_options = {"sub": {"essential": True}, "exp": {"essential": True}}
    try:
        claims = jwt.decode(token, secret, claims_options=claims_options)
        claims.validate(leeway=0)
    except (JoseError, ValueError) as exc:
        logger.debug("Rejected token: {}", exc)
        raise UnauthenticatedError("Token is not valid") from exc

    return str(claims["sub"])
