"""Goal service — owner-scoped CRUD for goals.

Learn: every query filters on (id, user_id) together. A goal owned by
someone else is indistinguishable from one that does not exist: both
come back as None, and the route turns that into a 404.

Update and delete are single UPDATE/DELETE ... RETURNING statements,
never a read followed by a write, so two concurrent deletes cannot both
succeed and an update cannot bring back a goal deleted in between.
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fitgoals.db.models import Goal, utcnow
from fitgoals.schemas.goal import GoalCreate, GoalUpdate, ProgressEntry

logger = structlog.get_logger()


def _progress_json(entries: list[ProgressEntry]) -> list[dict]:
    return [entry.model_dump(mode="json") for entry in entries]


def _goal_values(body: GoalCreate | GoalUpdate) -> dict:
    values = body.model_dump(exclude={"progress"})
    if body.progress is not None:
        values["progress"] = _progress_json(body.progress)
    return values


def parse_goal_id(goal_id: str) -> Optional[uuid.UUID]:
    """Path ids that are not UUIDs cannot match any goal."""
    try:
        return uuid.UUID(goal_id)
    except ValueError:
        return None


class GoalService:
    """Goal persistence, always scoped to one owner."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_goals(self, user_id: uuid.UUID) -> list[Goal]:
        result = await self.db.execute(
            select(Goal)
            .where(Goal.user_id == user_id)
            .order_by(Goal.created_at, Goal.id)
        )
        return list(result.scalars().all())

    async def get_goal(self, user_id: uuid.UUID, goal_id: uuid.UUID) -> Optional[Goal]:
        result = await self.db.execute(
            select(Goal).where(Goal.id == goal_id, Goal.user_id == user_id)
        )
        return result.scalars().first()

    async def create_goal(self, user_id: uuid.UUID, body: GoalCreate) -> Goal:
        goal = Goal(user_id=user_id, **_goal_values(body))
        self.db.add(goal)
        await self.db.commit()
        logger.info("goals.created", goal_id=str(goal.id), user_id=str(user_id))
        return goal

    async def update_goal(
        self, user_id: uuid.UUID, goal_id: uuid.UUID, body: GoalUpdate
    ) -> Optional[Goal]:
        """Replace a goal's fields. Returns None if the owner has no such goal."""
        values = _goal_values(body)
        values["updated_at"] = utcnow()
        result = await self.db.execute(
            update(Goal)
            .where(Goal.id == goal_id, Goal.user_id == user_id)
            .values(**values)
            .returning(Goal)
            .execution_options(populate_existing=True)
        )
        goal = result.scalars().first()
        await self.db.commit()
        if goal is not None:
            logger.info("goals.updated", goal_id=str(goal_id), user_id=str(user_id))
        return goal

    async def delete_goal(self, user_id: uuid.UUID, goal_id: uuid.UUID) -> bool:
        """Delete a goal. Returns False if the owner has no such goal."""
        result = await self.db.execute(
            delete(Goal)
            .where(Goal.id == goal_id, Goal.user_id == user_id)
            .returning(Goal.id)
        )
        deleted = result.scalar_one_or_none()
        await self.db.commit()
        if deleted is None:
            return False
        logger.info("goals.deleted", goal_id=str(goal_id), user_id=str(user_id))
        return True
