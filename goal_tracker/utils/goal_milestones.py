# goal_tracker/utils/goal_milestones.py
import math
import logging
import uuid
from datetime import date, datetime
from typing import Any, List, Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy.ext.asyncio import AsyncSession

from goal_tracker.core.config import settings
from goal_tracker.crud import goal as crud_goal
from goal_tracker.models.goal import GoalMilestone
from goal_tracker.utils.goal_rules import milestone_reward
from goal_tracker.utils.notifications import notify_goal_event

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def plan_milestones(goal: Any, start: Optional[date] = None, max_count: Optional[int] = None) -> List[GoalMilestone]:
    """
    Quarterly schedule from `start` to the goal's target date.

    One milestone per started quarter (capped at `max_count`), amounts evenly
    divided, dates three months apart. Returns an empty list for past or
    same-day targets.
    """
    start = start or date.today()
    max_count = max_count or settings.MILESTONE_MAX_COUNT
    days_to_target = (goal.target_date - start).days
    count = min(math.ceil(days_to_target / 90), max_count)
    if count <= 0:
        return []

    target_amount = float(goal.target_amount)
    milestones = []
    for i in range(1, count + 1):
        milestones.append(GoalMilestone(
            goal_id=goal.id,
            name=f"Milestone {i}: {_round_half_up(i / count * 100)}%",
            target_amount=round(target_amount * i / count, 2),
            target_date=start + relativedelta(months=3 * i),
            order=i,
            is_completed=False,
            reward=milestone_reward(i, goal.type),
        ))
    return milestones


class MilestoneTracker:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def generate_milestones(self, goal: Any, start: Optional[date] = None) -> List[GoalMilestone]:
        milestones = plan_milestones(goal, start)
        if not milestones:
            logger.info(f"No milestones planned for goal {goal.id}: target date {goal.target_date} is too close")
            return []
        return await crud_goal.create_milestones(milestones, self.db)

    async def update_progress(self, goal_id: uuid.UUID, current_amount: float) -> List[GoalMilestone]:
        """Complete every pending milestone whose target the current amount has reached."""
        milestones = await crud_goal.get_milestones_for_goal(goal_id, self.db)
        reached = [
            m for m in milestones
            if not m.is_completed and current_amount >= float(m.target_amount)
        ]
        if not reached:
            return []

        now = datetime.utcnow()
        for milestone in reached:
            milestone.is_completed = True
            milestone.completed_at = now
        await self.db.commit()

        goal = await crud_goal.get_goal(goal_id, self.db)
        if goal is None:
            return reached

        for milestone in reached:
            await notify_goal_event(
                self.db,
                goal.workspace_id,
                "achievement",
                "Milestone Achieved!",
                f"You've reached milestone: {milestone.name}. Reward: {milestone.reward}",
                {"milestone_id": str(milestone.id), "reward": milestone.reward},
            )
            logger.info(f"🏁 Milestone reached for goal {goal.name}: {milestone.name}")
        return reached
