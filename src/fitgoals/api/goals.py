"""Goals API — CRUD on the caller's own goals.

Learn: the router is mounted with get_current_user as a router-level
dependency, and each handler also takes the identity so it can scope
queries. A goal id that belongs to someone else gets the same 404 as one
that never existed.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from fitgoals.auth.dependencies import CurrentIdentity, get_current_user
from fitgoals.db.engine import get_db
from fitgoals.errors import NotFoundError, store_faults
from fitgoals.schemas.goal import GoalCreate, GoalRead, GoalUpdate
from fitgoals.services.goal_service import GoalService, parse_goal_id

router = APIRouter(prefix="/goals")

NO_GOALS = "No goals found"
GOAL_NOT_FOUND = "Goal not found"


@router.get("", response_model=list[GoalRead])
async def list_goals(
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's goals, oldest first. 404 when there are none."""
    with store_faults("goals.list"):
        goals = await GoalService(db).list_goals(identity.user_id)
    if not goals:
        raise NotFoundError(NO_GOALS)
    return goals


@router.post("", response_model=GoalRead, status_code=201)
async def create_goal(
    body: GoalCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    with store_faults("goals.create"):
        return await GoalService(db).create_goal(identity.user_id, body)


@router.put("/{goal_id}", response_model=GoalRead)
async def update_goal(
    goal_id: str,
    body: GoalUpdate,
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    gid = parse_goal_id(goal_id)
    if gid is None:
        raise NotFoundError(GOAL_NOT_FOUND)
    with store_faults("goals.update"):
        goal = await GoalService(db).update_goal(identity.user_id, gid, body)
    if goal is None:
        raise NotFoundError(GOAL_NOT_FOUND)
    return goal


@router.delete("/{goal_id}", status_code=204)
async def delete_goal(
    goal_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    gid = parse_goal_id(goal_id)
    if gid is None:
        raise NotFoundError(GOAL_NOT_FOUND)
    with store_faults("goals.delete"):
        deleted = await GoalService(db).delete_goal(identity.user_id, gid)
    if not deleted:
        raise NotFoundError(GOAL_NOT_FOUND)
    return Response(status_code=204)
