"""FastAPI auth dependencies.

Learn: get_current_user is used as Depends() on protected routers. It
parses the Authorization header, verifies the bearer token and hands the
identity to the route handler. It holds no state between requests; the
only shared thing it reads is the signing secret.

Every failure is a 401 with a specific message, except an unexpected
exception inside verification, which is an infrastructure fault (500).
"""

import uuid
from typing import Optional

import structlog
from fastapi import Header

from fitgoals.auth.jwt import TokenError, TokenErrorKind, verify_token
from fitgoals.errors import AuthError, InternalError

logger = structlog.get_logger()

NO_TOKEN = "No token provided"
BAD_FORMAT = "Invalid token format"
TOKEN_EXPIRED = "Token expired"
TOKEN_INVALID = "Invalid token"


class CurrentIdentity:
    """The authenticated user making the request."""

    def __init__(self, user_id: uuid.UUID):
        self.user_id = user_id

    def __repr__(self) -> str:
        return f"CurrentIdentity(user_id={self.user_id!r})"


def parse_bearer(authorization: Optional[str]) -> str:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    if not authorization:
        raise AuthError(NO_TOKEN)
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise AuthError(BAD_FORMAT)
    return parts[1]


async def get_current_user(
    authorization: Optional[str] = Header(None),
) -> CurrentIdentity:
    """Resolve the bearer token to an identity (required — 401 if absent)."""
    token = parse_bearer(authorization)
    try:
        user_id = verify_token(token)
    except TokenError as e:
        logger.info("auth.token_rejected", reason=e.kind.value)
        if e.kind is TokenErrorKind.EXPIRED:
            raise AuthError(TOKEN_EXPIRED)
        raise AuthError(TOKEN_INVALID)
    except Exception:
        logger.exception("auth.token_verification_failed")
        raise InternalError()

    try:
        return CurrentIdentity(user_id=uuid.UUID(user_id))
    except ValueError:
        logger.info("auth.token_rejected", reason="subject")
        raise AuthError(TOKEN_INVALID)
