# goal_tracker/api/v1/routes/transactions.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging
import uuid

from goal_tracker.schemas.transaction import TransactionCreate, TransactionRead, TransactionCreateResult
from goal_tracker.schemas.goal import TransactionTrackingResult
from goal_tracker.crud.transaction import (
    create_transaction_for_workspace,
    get_transactions_for_workspace,
    get_transaction_by_id,
)
from goal_tracker.models.workspace import Workspace
from goal_tracker.core.database import get_async_session
from goal_tracker.api.deps import get_workspace, get_goals_engine
from goal_tracker.utils.goal_engine import GoalsEngine

router = APIRouter(prefix="/workspaces/{workspace_id}/transactions", tags=["transactions"])
logger = logging.getLogger(__name__)

@router.get("", response_model=List[TransactionRead])
async def read_transactions(
    limit: int = Query(100, ge=1, le=500),
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
):
    return await get_transactions_for_workspace(workspace.id, db, limit=limit)

@router.post("", response_model=TransactionCreateResult, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    tx_in: TransactionCreate,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
    engine: GoalsEngine = Depends(get_goals_engine),
):
    """Store a transaction and run goal auto-tracking for it."""
    workspace_id = workspace.id
    tx = await create_transaction_for_workspace(workspace_id, tx_in, db)
    # Snapshot first: a failed goal rolls the shared session back and expires `tx`
    transaction = TransactionRead.model_validate(tx)
    tracking = await engine.process_transaction_for_goals(transaction.id, workspace_id)
    if tracking.tracked:
        logger.info(f"Transaction {transaction.id} tracked for {tracking.tracked} goal(s)")
    return TransactionCreateResult(
        transaction=transaction,
        tracked=tracking.tracked,
        goals=tracking.goals,
    )

@router.get("/{transaction_id}", response_model=TransactionRead)
async def read_transaction(
    transaction_id: uuid.UUID,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
):
    tx = await get_transaction_by_id(transaction_id, db, workspace_id=workspace.id)
    if not tx:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return tx

@router.post("/{transaction_id}/track", response_model=TransactionTrackingResult)
async def track_transaction(
    transaction_id: uuid.UUID,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
    engine: GoalsEngine = Depends(get_goals_engine),
):
    """Re-run auto-tracking for an existing transaction; already linked goals are skipped."""
    tx = await get_transaction_by_id(transaction_id, db, workspace_id=workspace.id)
    if not tx:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return await engine.process_transaction_for_goals(tx.id, workspace.id)
