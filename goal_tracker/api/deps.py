# goal_tracker/api/deps.py
from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from goal_tracker.core.database import get_async_session
from goal_tracker.crud.workspace import get_workspace_by_id
from goal_tracker.models.workspace import Workspace
from goal_tracker.utils.goal_engine import GoalsEngine

async def get_workspace(
    workspace_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
) -> Workspace:
    """Resolve the workspace from the path, 404 when it does not exist."""
    workspace = await get_workspace_by_id(workspace_id, db)
    if not workspace:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Workspace not found",
        )
    return workspace

async def get_goals_engine(db: AsyncSession = Depends(get_async_session)) -> GoalsEngine:
    return GoalsEngine(db)
