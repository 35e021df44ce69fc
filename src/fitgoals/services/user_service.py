"""User service — the credential store behind signup and login.

Learn: Service layer separates business logic from HTTP routing. Routes
validate input with pydantic, then call the service; the service owns the
database session it was given and never sees an HTTP request.
"""

import uuid
from functools import lru_cache
from typing import Optional

import structlog
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fitgoals.auth.jwt import create_access_token
from fitgoals.auth.password import (
    PasswordHashError,
    hash_password,
    verify_password,
)
from fitgoals.db.models import User
from fitgoals.errors import AuthError, ConflictError, InternalError

logger = structlog.get_logger()

USER_EXISTS = "User already exists"
INVALID_CREDENTIALS = "Invalid credentials"


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    """A hash to check against when the username is unknown, so both paths pay for bcrypt."""
    return hash_password("fitgoals-unknown-user")


class UserService:
    """Signup, login and user lookups."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_username_or_email(
        self, username: str, email: str
    ) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(or_(User.username == username, User.email == email))
        )
        return result.scalars().first()

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalars().first()

    async def get(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def signup(self, username: str, email: str, password: str) -> User:
        """Create a user. Raises ConflictError if username or email is taken."""
        if await self.find_by_username_or_email(username, email):
            raise ConflictError(USER_EXISTS)

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same name/email.
            await self.db.rollback()
            raise ConflictError(USER_EXISTS)

        logger.info("auth.signup", user_id=str(user.id), username=username)
        return user

    async def login(self, username: str, password: str) -> tuple[str, User]:
        """Check credentials and issue an access token.

        Unknown username and wrong password raise the same AuthError so a
        caller cannot tell which usernames exist.
        """
        user = await self.get_by_username(username)
        try:
            if user is None:
                verify_password(password, _dummy_hash())
                valid = False
            else:
                valid = verify_password(password, user.password_hash)
        except PasswordHashError:
            logger.error("auth.bad_password_hash", user_id=str(user.id))
            raise InternalError()
        if not valid:
            logger.info("auth.login_failed", username=username)
            raise AuthError(INVALID_CREDENTIALS)

        token = create_access_token(str(user.id))
        logger.info("auth.login", user_id=str(user.id))
        return token, user
