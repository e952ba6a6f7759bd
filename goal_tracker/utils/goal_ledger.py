# goal_tracker/utils/goal_ledger.py
import logging
from datetime import datetime
from typing import Any, Optional
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from goal_tracker.crud import goal as crud_goal
from goal_tracker.crud.debt import get_debt_by_id
from goal_tracker.models.goal import (
    Goal,
    GoalContribution,
    GoalInsight,
    GoalStatus,
    GoalType,
    ContributionType,
    InsightSeverity,
    InsightType,
)
from goal_tracker.utils.goal_milestones import MilestoneTracker
from goal_tracker.utils.goal_rules import EXPENSE_EXCLUDED_GOAL_TYPES, type_key
from goal_tracker.utils.notifications import notify_goal_event

logger = logging.getLogger(__name__)


class ContributionLedger:
    """
    Records goal contributions and recomputes goals from them.

    The ledger is the source of truth for `Goal.current_amount`, except for
    debt-payment goals linked to a debt, whose progress mirrors the debt's
    paid amount.
    """

    def __init__(self, db: AsyncSession, milestones: Optional[MilestoneTracker] = None):
        self.db = db
        self.milestones = milestones or MilestoneTracker(db)

    async def record(
        self,
        goal: Any,
        transaction: Any,
        contribution_type: ContributionType,
        reason: str,
    ) -> bool:
        """
        Stage a contribution unless (goal, transaction) is already recorded.

        Nothing is committed here: the following `recompute` commits the
        contribution together with the goal amount.
        """
        label = f"{goal.name} <- {transaction.description}"
        if await crud_goal.contribution_exists(goal.id, transaction.id, self.db):
            logger.info(f"⚠️  Duplicate avoided: {label}")
            return False

        contribution = GoalContribution(
            goal_id=goal.id,
            transaction_id=transaction.id,
            amount=float(transaction.amount),
            contribution_type=contribution_type,
            source=f"Auto-tracked from {transaction.description} ({reason})",
            date=transaction.date,
            workspace_id=goal.workspace_id,
        )
        try:
            await crud_goal.add_contribution(contribution, self.db)
        except IntegrityError:
            # Lost a race with a concurrent insert for the same pair
            await self.db.rollback()
            logger.info(f"⚠️  Duplicate avoided (concurrent insert): {label}")
            return False
        return True

    async def record_manual(self, goal: Any, amount: float, note: Optional[str] = None) -> GoalContribution:
        """Stage a manual contribution; committed by the next `recompute`."""
        contribution = GoalContribution(
            goal_id=goal.id,
            transaction_id=None,
            amount=float(amount),
            contribution_type=ContributionType.manual,
            source=note or "Manual progress update",
            date=datetime.utcnow(),
            workspace_id=goal.workspace_id,
        )
        return await crud_goal.add_contribution(contribution, self.db)

    async def _ledger_total(self, goal: Goal) -> float:
        entries = await crud_goal.get_ledger_entries(goal.id, goal.workspace_id, self.db)
        skip_expenses = type_key(goal.type) in EXPENSE_EXCLUDED_GOAL_TYPES
        return sum(
            amount for amount, tx_type in entries
            if not (skip_expenses and tx_type == "expense")
        )

    async def recompute(self, goal_id: uuid.UUID, workspace_id: uuid.UUID) -> Optional[float]:
        """
        Recompute and persist a goal's current amount.

        Returns the new amount, or None when the goal does not exist. Completes
        the goal when progress reaches 100% and advances its milestones.
        """
        goal = await crud_goal.get_goal_for_update(goal_id, workspace_id, self.db)
        if goal is None:
            return None

        new_amount = None
        if type_key(goal.type) == GoalType.debt_payment.value and goal.linked_debt_id:
            debt = await get_debt_by_id(goal.linked_debt_id, self.db, workspace_id=goal.workspace_id)
            if debt is not None:
                new_amount = debt.paid_amount
            else:
                logger.warning(f"Linked debt {goal.linked_debt_id} of goal {goal.name} not found, using ledger")
        if new_amount is None:
            new_amount = await self._ledger_total(goal)

        new_amount = max(0.0, round(new_amount, 2))
        now = datetime.utcnow()
        goal.current_amount = new_amount
        goal.last_progress_update = now
        goal.updated_at = now
        await self.db.commit()

        target = float(goal.target_amount or 0)
        if target > 0 and new_amount / target * 100 >= 100 and goal.status != GoalStatus.completed:
            await self.complete(goal)

        await self.milestones.update_progress(goal.id, new_amount)
        return new_amount

    async def complete(self, goal: Goal) -> Goal:
        """
        Mark a goal completed once and store an achievement insight for it.

        Later calls leave the goal untouched.
        """
        if goal.status == GoalStatus.completed:
            return goal

        now = datetime.utcnow()
        goal.status = GoalStatus.completed
        goal.completed_at = now
        goal.updated_at = now
        self.db.add(GoalInsight(
            goal_id=goal.id,
            workspace_id=goal.workspace_id,
            type=InsightType.achievement,
            title="Goal Achieved! 🎉",
            message=(
                f"Congratulations! You've successfully achieved your goal: {goal.name}. "
                "Time to celebrate and set new aspirations!"
            ),
            severity=InsightSeverity.info,
            action_required=False,
            data={"completion_date": now.isoformat()},
        ))
        await self.db.commit()

        await notify_goal_event(
            self.db,
            goal.workspace_id,
            "achievement",
            "Goal Completed! 🎉",
            f'Congratulations! You\'ve successfully completed "{goal.name}"',
            {"goal_id": str(goal.id), "completion_date": now.isoformat()},
        )
        logger.info(f"🎉 Goal completed: {goal.name}")
        return goal
