"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. The access
token carries the user id in `sub` and expires 60 minutes after issuance.
There is no refresh token and no revocation list: a token is good until
it expires.
"""

import enum
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from fitgoals.config import settings

TOKEN_TYPE = "access"


class TokenErrorKind(enum.Enum):
    EXPIRED = "expired"
    INVALID = "invalid"


class TokenError(Exception):
    """Raised when token verification fails.

    `kind` tells expired tokens apart from every other failure (bad
    signature, malformed, missing claims).
    """

    def __init__(self, kind: TokenErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


def create_access_token(
    user_id: str,
    expires_minutes: Optional[int] = None,
    now: Optional[datetime] = None,
) -> str:
    """Create a JWT access token for `user_id`."""
    issued_at = now or datetime.now(timezone.utc)
    expires = issued_at + timedelta(
        minutes=(
            expires_minutes
            if expires_minutes is not None
            else settings.access_token_expire_minutes
        )
    )
    payload = {
        "sub": str(user_id),
        "type": TOKEN_TYPE,
        "iat": issued_at,
        "exp": expires,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> str:
    """Verify a JWT access token and return the user id it was issued for.

    Raises TokenError(EXPIRED) for an expired token and TokenError(INVALID)
    for anything else that fails.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError(TokenErrorKind.EXPIRED, "Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenError(TokenErrorKind.INVALID, f"Invalid token: {e}")

    if payload.get("type") != TOKEN_TYPE:
        raise TokenError(TokenErrorKind.INVALID, "Not an access token")
    return payload["sub"]
