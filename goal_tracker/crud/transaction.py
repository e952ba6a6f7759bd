# goal_tracker/crud/transaction.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import desc, func
from goal_tracker.core.db_utils import with_db_retry
from goal_tracker.models.category import Category
from goal_tracker.models.transaction import Transaction
from goal_tracker.schemas.transaction import TransactionCreate
from typing import Dict, List, Optional, Tuple
from datetime import datetime
import uuid

async def get_transactions_for_workspace(workspace_id: uuid.UUID, db: AsyncSession, limit: int = 100) -> List[Transaction]:
    result = await db.execute(
        select(Transaction)
        .where(Transaction.workspace_id == workspace_id)
        .order_by(desc(Transaction.date))
        .limit(limit)
    )
    return result.scalars().all()

@with_db_retry()
async def get_transaction_by_id(
    transaction_id: uuid.UUID,
    db: AsyncSession,
    workspace_id: Optional[uuid.UUID] = None,
) -> Optional[Transaction]:
    query = select(Transaction).where(Transaction.id == transaction_id)
    if workspace_id is not None:
        query = query.where(Transaction.workspace_id == workspace_id)
    result = await db.execute(query)
    return result.scalar_one_or_none()

async def create_transaction_for_workspace(workspace_id: uuid.UUID, tx_in: TransactionCreate, db: AsyncSession) -> Transaction:
    new_tx = Transaction(**tx_in.dict(), workspace_id=workspace_id)
    db.add(new_tx)
    await db.commit()
    await db.refresh(new_tx)
    return new_tx

@with_db_retry()
async def get_expenses_by_category_since(
    workspace_id: uuid.UUID,
    since: datetime,
    db: AsyncSession,
) -> List[Tuple[float, Optional[str]]]:
    """(amount, category name) for every expense since the given date."""
    result = await db.execute(
        select(Transaction.amount, Category.name)
        .outerjoin(Category, Transaction.category_id == Category.id)
        .where(
            Transaction.workspace_id == workspace_id,
            Transaction.type == "expense",
            Transaction.date >= since,
        )
    )
    return [(float(amount), name) for amount, name in result.all()]

@with_db_retry()
async def get_totals_by_type_since(
    workspace_id: uuid.UUID,
    since: datetime,
    db: AsyncSession,
) -> Dict[str, float]:
    result = await db.execute(
        select(Transaction.type, func.sum(Transaction.amount))
        .where(
            Transaction.workspace_id == workspace_id,
            Transaction.date >= since,
        )
        .group_by(Transaction.type)
    )
    return {tx_type: float(total or 0) for tx_type, total in result.all()}
