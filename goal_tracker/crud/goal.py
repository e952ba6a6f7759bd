# goal_tracker/crud/goal.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import asc, desc, and_
from goal_tracker.models.goal import (
    Goal,
    GoalContribution,
    GoalMilestone,
    GoalInsight,
    GoalStatus,
)
from goal_tracker.models.transaction import Transaction
from goal_tracker.schemas.goal import GoalCreate, GoalUpdate
from typing import Iterable, List, Optional, Tuple
from datetime import datetime
import uuid

# Goals

async def get_goals_for_workspace(
    workspace_id: uuid.UUID,
    db: AsyncSession,
    status: Optional[GoalStatus] = None,
) -> List[Goal]:
    query = select(Goal).where(Goal.workspace_id == workspace_id)
    if status is not None:
        query = query.where(Goal.status == status)
    result = await db.execute(query.order_by(Goal.created_at))
    return result.scalars().all()

async def get_auto_tracking_goals(workspace_id: uuid.UUID, db: AsyncSession) -> List[Goal]:
    """Active goals of a workspace with auto-tracking enabled."""
    result = await db.execute(
        select(Goal)
        .where(
            Goal.workspace_id == workspace_id,
            Goal.is_auto_tracking == True,
            Goal.status == GoalStatus.active,
        )
        .order_by(Goal.created_at)
    )
    return result.scalars().all()

async def get_goal_by_id(goal_id: uuid.UUID, workspace_id: uuid.UUID, db: AsyncSession) -> Optional[Goal]:
    result = await db.execute(
        select(Goal).where(Goal.id == goal_id, Goal.workspace_id == workspace_id)
    )
    return result.scalar_one_or_none()

async def get_goal(goal_id: uuid.UUID, db: AsyncSession) -> Optional[Goal]:
    result = await db.execute(select(Goal).where(Goal.id == goal_id))
    return result.scalar_one_or_none()

async def get_goal_for_update(goal_id: uuid.UUID, workspace_id: uuid.UUID, db: AsyncSession) -> Optional[Goal]:
    """Load a goal with a row lock (ignored by backends without FOR UPDATE)."""
    result = await db.execute(
        select(Goal)
        .where(Goal.id == goal_id, Goal.workspace_id == workspace_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()

async def create_goal_for_workspace(workspace_id: uuid.UUID, goal_in: GoalCreate, db: AsyncSession) -> Goal:
    data = goal_in.dict(exclude={"current_amount", "create_milestones"})
    new_goal = Goal(**data, workspace_id=workspace_id, current_amount=0.0)
    db.add(new_goal)
    await db.commit()
    await db.refresh(new_goal)
    return new_goal

async def update_goal(goal: Goal, goal_in: GoalUpdate, db: AsyncSession) -> Goal:
    for field, value in goal_in.dict(exclude_unset=True).items():
        setattr(goal, field, value)
    goal.updated_at = datetime.utcnow()
    db.add(goal)
    await db.commit()
    await db.refresh(goal)
    return goal

async def delete_goal(goal: Goal, db: AsyncSession) -> None:
    await db.delete(goal)
    await db.commit()

# Contributions

async def contribution_exists(goal_id: uuid.UUID, transaction_id: uuid.UUID, db: AsyncSession) -> bool:
    result = await db.execute(
        select(GoalContribution.id)
        .where(and_(
            GoalContribution.goal_id == goal_id,
            GoalContribution.transaction_id == transaction_id,
        ))
        .limit(1)
    )
    return result.scalar_one_or_none() is not None

async def add_contribution(contribution: GoalContribution, db: AsyncSession) -> GoalContribution:
    """Stage a contribution in the current transaction; the caller commits."""
    db.add(contribution)
    await db.flush()
    return contribution

async def get_contributions_for_goal(
    goal_id: uuid.UUID,
    db: AsyncSession,
    since: Optional[datetime] = None,
) -> List[GoalContribution]:
    query = select(GoalContribution).where(GoalContribution.goal_id == goal_id)
    if since is not None:
        query = query.where(GoalContribution.date >= since)
    result = await db.execute(query.order_by(desc(GoalContribution.date)))
    return result.scalars().all()

async def get_ledger_entries(
    goal_id: uuid.UUID,
    workspace_id: uuid.UUID,
    db: AsyncSession,
) -> List[Tuple[float, Optional[str]]]:
    """(amount, originating transaction type) for every contribution of a goal."""
    result = await db.execute(
        select(GoalContribution.amount, Transaction.type)
        .outerjoin(Transaction, GoalContribution.transaction_id == Transaction.id)
        .where(
            GoalContribution.goal_id == goal_id,
            GoalContribution.workspace_id == workspace_id,
        )
    )
    return [(float(amount), tx_type) for amount, tx_type in result.all()]

async def get_workspace_contributions_since(
    workspace_id: uuid.UUID,
    since: datetime,
    db: AsyncSession,
) -> List[GoalContribution]:
    result = await db.execute(
        select(GoalContribution).where(
            GoalContribution.workspace_id == workspace_id,
            GoalContribution.date >= since,
        )
    )
    return result.scalars().all()

# Milestones

async def get_milestones_for_goal(goal_id: uuid.UUID, db: AsyncSession) -> List[GoalMilestone]:
    result = await db.execute(
        select(GoalMilestone)
        .where(GoalMilestone.goal_id == goal_id)
        .order_by(asc(GoalMilestone.order))
    )
    return result.scalars().all()

async def create_milestones(milestones: List[GoalMilestone], db: AsyncSession) -> List[GoalMilestone]:
    if not milestones:
        return []
    db.add_all(milestones)
    await db.commit()
    for milestone in milestones:
        await db.refresh(milestone)
    return milestones

# Insights

async def create_insights(insights: Iterable[GoalInsight], db: AsyncSession) -> List[GoalInsight]:
    """Insert a batch of insights in one commit."""
    insights = list(insights)
    if not insights:
        return []
    db.add_all(insights)
    await db.commit()
    for insight in insights:
        await db.refresh(insight)
    return insights

async def get_insights_for_goal(goal_id: uuid.UUID, workspace_id: uuid.UUID, db: AsyncSession) -> List[GoalInsight]:
    result = await db.execute(
        select(GoalInsight)
        .where(GoalInsight.goal_id == goal_id, GoalInsight.workspace_id == workspace_id)
        .order_by(desc(GoalInsight.created_at))
    )
    return result.scalars().all()
