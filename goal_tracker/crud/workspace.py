# goal_tracker/crud/workspace.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from goal_tracker.models.workspace import Workspace
from typing import Optional
import uuid

async def get_workspace_by_id(workspace_id: uuid.UUID, db: AsyncSession) -> Optional[Workspace]:
    result = await db.execute(select(Workspace).where(Workspace.id == workspace_id))
    return result.scalar_one_or_none()
