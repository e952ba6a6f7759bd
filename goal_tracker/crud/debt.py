# goal_tracker/crud/debt.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from goal_tracker.core.db_utils import with_db_retry
from goal_tracker.models.debt import Debt
from typing import List, Optional
import uuid

@with_db_retry()
async def get_debt_by_id(
    debt_id: uuid.UUID,
    db: AsyncSession,
    workspace_id: Optional[uuid.UUID] = None,
) -> Optional[Debt]:
    query = select(Debt).where(Debt.id == debt_id)
    if workspace_id is not None:
        query = query.where(Debt.workspace_id == workspace_id)
    result = await db.execute(query)
    return result.scalar_one_or_none()

@with_db_retry()
async def get_active_debts_for_workspace(workspace_id: uuid.UUID, db: AsyncSession) -> List[Debt]:
    result = await db.execute(
        select(Debt)
        .where(Debt.workspace_id == workspace_id, Debt.status == "active")
        .order_by(Debt.created_at)
    )
    return result.scalars().all()
