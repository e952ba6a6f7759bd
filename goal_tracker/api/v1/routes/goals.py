# goal_tracker/api/v1/routes/goals.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from goal_tracker.schemas.goal import (
    GoalCreate,
    GoalUpdate,
    GoalRead,
    GoalProgressCreate,
    GoalContributionRead,
    GoalMilestoneRead,
    GoalInsightRead,
    GoalSuggestion,
    FinancialHealthImpact,
    GoalAnalytics,
)
from goal_tracker.models.goal import GoalStatus
from goal_tracker.models.workspace import Workspace
from goal_tracker.crud import goal as crud_goal
from goal_tracker.crud.account import get_account_by_id
from goal_tracker.crud.debt import get_debt_by_id
from goal_tracker.core.database import get_async_session
from goal_tracker.api.deps import get_workspace, get_goals_engine
from goal_tracker.utils.goal_engine import GoalsEngine

router = APIRouter(prefix="/workspaces/{workspace_id}/goals", tags=["goals"])

async def _get_goal_or_404(goal_id: uuid.UUID, workspace: Workspace, db: AsyncSession):
    goal = await crud_goal.get_goal_by_id(goal_id, workspace.id, db)
    if not goal:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return goal

async def _validate_links(
    workspace: Workspace,
    db: AsyncSession,
    linked_account_id: Optional[uuid.UUID] = None,
    linked_debt_id: Optional[uuid.UUID] = None,
):
    """Linked accounts and debts must belong to the goal's workspace."""
    if linked_account_id and not await get_account_by_id(linked_account_id, workspace.id, db):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Linked account not found")
    if linked_debt_id and not await get_debt_by_id(linked_debt_id, db, workspace_id=workspace.id):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Linked debt not found")

# Workspace-level

@router.get("/suggestions", response_model=List[GoalSuggestion])
async def read_goal_suggestions(
    workspace: Workspace = Depends(get_workspace),
    engine: GoalsEngine = Depends(get_goals_engine),
):
    """Candidate goals derived from the last months of spending and income (never stored)."""
    return await engine.generate_goal_suggestions(workspace.id)

@router.get("/financial-health", response_model=FinancialHealthImpact)
async def read_financial_health(
    workspace: Workspace = Depends(get_workspace),
    engine: GoalsEngine = Depends(get_goals_engine),
):
    """
    Weighted 0-100 score from active goal progress:
    emergency fund 30%, debt payment 25%, savings-style goals 25%, investment/retirement 20%.
    """
    return await engine.calculate_goal_impact_on_financial_health(workspace.id)

@router.get("/analytics", response_model=GoalAnalytics)
async def read_goal_analytics(
    workspace: Workspace = Depends(get_workspace),
    engine: GoalsEngine = Depends(get_goals_engine),
):
    return await engine.get_goal_analytics(workspace.id)

# Goal CRUD

@router.get("", response_model=List[GoalRead])
async def read_goals(
    status_filter: Optional[GoalStatus] = None,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
):
    return await crud_goal.get_goals_for_workspace(workspace.id, db, status=status_filter)

@router.post("", response_model=GoalRead, status_code=status.HTTP_201_CREATED)
async def create_goal(
    goal_in: GoalCreate,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
    engine: GoalsEngine = Depends(get_goals_engine),
):
    """
    Create a goal. A non-zero `current_amount` is recorded as a manual
    contribution; `create_milestones` sets up the quarterly milestone schedule.
    """
    await _validate_links(workspace, db, goal_in.linked_account_id, goal_in.linked_debt_id)
    return await engine.create_goal(workspace.id, goal_in)

@router.get("/{goal_id}", response_model=GoalRead)
async def read_goal(
    goal_id: uuid.UUID,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
):
    return await _get_goal_or_404(goal_id, workspace, db)

@router.patch("/{goal_id}", response_model=GoalRead)
async def update_goal_endpoint(
    goal_id: uuid.UUID,
    goal_in: GoalUpdate,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
    engine: GoalsEngine = Depends(get_goals_engine),
):
    goal = await _get_goal_or_404(goal_id, workspace, db)
    await _validate_links(workspace, db, goal_in.linked_account_id, goal_in.linked_debt_id)
    if goal.status == GoalStatus.completed and goal_in.status is not None and goal_in.status != GoalStatus.completed:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Completed goals cannot be reopened")
    # Completion always goes through the engine so it is stamped and announced once
    complete = goal_in.status == GoalStatus.completed
    if complete:
        goal_in = GoalUpdate(**goal_in.dict(exclude_unset=True, exclude={"status"}))
    goal = await crud_goal.update_goal(goal, goal_in, db)
    if complete:
        await engine.complete_goal(goal.id, workspace.id)
    await engine.update_goal_progress(goal.id, workspace.id)
    return goal

@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal_endpoint(
    goal_id: uuid.UUID,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
):
    goal = await _get_goal_or_404(goal_id, workspace, db)
    await crud_goal.delete_goal(goal, db)
    return None

# Progress

@router.post("/{goal_id}/progress", response_model=GoalRead)
async def add_goal_progress(
    goal_id: uuid.UUID,
    progress_in: GoalProgressCreate,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
    engine: GoalsEngine = Depends(get_goals_engine),
):
    """Record a manual contribution and recompute the goal."""
    goal = await _get_goal_or_404(goal_id, workspace, db)
    await engine.add_goal_progress(goal.id, workspace.id, progress_in.amount, progress_in.note)
    return goal

@router.post("/{goal_id}/recompute", response_model=GoalRead)
async def recompute_goal(
    goal_id: uuid.UUID,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
    engine: GoalsEngine = Depends(get_goals_engine),
):
    goal = await _get_goal_or_404(goal_id, workspace, db)
    await engine.update_goal_progress(goal.id, workspace.id)
    return goal

@router.post("/{goal_id}/complete", response_model=GoalRead)
async def complete_goal(
    goal_id: uuid.UUID,
    workspace: Workspace = Depends(get_workspace),
    engine: GoalsEngine = Depends(get_goals_engine),
):
    goal = await engine.complete_goal(goal_id, workspace.id)
    if not goal:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return goal

@router.get("/{goal_id}/contributions", response_model=List[GoalContributionRead])
async def read_goal_contributions(
    goal_id: uuid.UUID,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
):
    goal = await _get_goal_or_404(goal_id, workspace, db)
    return await crud_goal.get_contributions_for_goal(goal.id, db)

# Milestones & insights

@router.post("/{goal_id}/milestones", response_model=List[GoalMilestoneRead], status_code=status.HTTP_201_CREATED)
async def create_goal_milestones(
    goal_id: uuid.UUID,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
    engine: GoalsEngine = Depends(get_goals_engine),
):
    goal = await _get_goal_or_404(goal_id, workspace, db)
    await engine.create_smart_milestones(goal.id)
    # Milestones already within reach complete right away
    await engine.update_goal_progress(goal.id, workspace.id)
    return await crud_goal.get_milestones_for_goal(goal.id, db)

@router.get("/{goal_id}/milestones", response_model=List[GoalMilestoneRead])
async def read_goal_milestones(
    goal_id: uuid.UUID,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
):
    goal = await _get_goal_or_404(goal_id, workspace, db)
    return await crud_goal.get_milestones_for_goal(goal.id, db)

@router.post("/{goal_id}/insights", response_model=List[GoalInsightRead], status_code=status.HTTP_201_CREATED)
async def generate_goal_insights(
    goal_id: uuid.UUID,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
    engine: GoalsEngine = Depends(get_goals_engine),
):
    goal = await _get_goal_or_404(goal_id, workspace, db)
    return await engine.generate_goal_insights(goal.id, workspace.id)

@router.get("/{goal_id}/insights", response_model=List[GoalInsightRead])
async def read_goal_insights(
    goal_id: uuid.UUID,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
):
    goal = await _get_goal_or_404(goal_id, workspace, db)
    return await crud_goal.get_insights_for_goal(goal.id, workspace.id, db)
