"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter, so every /goals route is behind the bearer-token
gate without relying on each handler to remember it. Health and auth
routers are open (no auth required); /auth/me asks for the identity itself.
"""

from fastapi import APIRouter, Depends

from fitgoals.api.auth import router as auth_router
from fitgoals.api.goals import router as goals_router
from fitgoals.api.health import router as health_router
from fitgoals.auth.dependencies import get_current_user
from fitgoals.config import settings

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix=settings.api_prefix)

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — require a valid bearer token
api_router.include_router(goals_router, tags=["goals"], dependencies=_auth)
