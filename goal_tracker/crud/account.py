# goal_tracker/crud/account.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from goal_tracker.core.db_utils import with_db_retry
from goal_tracker.models.account import Account
from typing import Optional
import uuid

@with_db_retry()
async def get_account_by_id(account_id: uuid.UUID, workspace_id: uuid.UUID, db: AsyncSession) -> Optional[Account]:
    result = await db.execute(
        select(Account).where(Account.id == account_id, Account.workspace_id == workspace_id)
    )
    return result.scalar_one_or_none()
