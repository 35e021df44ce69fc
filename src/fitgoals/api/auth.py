"""Auth API — signup, login, current user.

Learn: Routes for the account lifecycle:
- POST /auth/signup → create a user (201, never returns the hash)
- POST /auth/login → username/password → one-hour JWT
- GET /auth/me → the user behind a bearer token
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fitgoals.auth.dependencies import CurrentIdentity, get_current_user
from fitgoals.db.engine import get_db
from fitgoals.errors import NotFoundError, store_faults
from fitgoals.schemas.auth import (
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
    UserRead,
    UserSummary,
)
from fitgoals.services.user_service import UserService

router = APIRouter(prefix="/auth")


@router.post("/signup", response_model=SignupResponse, status_code=201)
async def signup(body: SignupRequest, db: AsyncSession = Depends(get_db)):
    """Create a new user account."""
    with store_faults("auth.signup"):
        user = await UserService(db).signup(body.username, body.email, body.password)
    return SignupResponse(
        message="User created successfully",
        user=UserRead.model_validate(user),
    )


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login with username and password → JWT access token."""
    with store_faults("auth.login"):
        token, user = await UserService(db).login(body.username, body.password)
    return LoginResponse(token=token, user=UserSummary.model_validate(user))


@router.get("/me", response_model=UserRead)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the current authenticated user's info."""
    with store_faults("auth.me"):
        user = await UserService(db).get(identity.user_id)
    if not user:
        raise NotFoundError("User not found")
    return user
