# goal_tracker/schemas/transaction.py
from typing import List, Literal, Optional
from pydantic import BaseModel, Field
from datetime import datetime
import uuid

TransactionKind = Literal["income", "expense", "transfer", "saving", "debt", "repayment"]

class TransactionBase(BaseModel):
    type: TransactionKind
    amount: float
    description: str = Field(..., description="E.g. Monthly vacation saving")
    date: datetime = Field(..., description="ISO 8601 date/time of transaction")
    account_id: uuid.UUID
    category_id: Optional[uuid.UUID] = None
    to_account_id: Optional[uuid.UUID] = None
    debt_id: Optional[uuid.UUID] = None

class TransactionCreate(TransactionBase):
    pass

class TransactionRead(TransactionBase):
    id: uuid.UUID
    workspace_id: uuid.UUID

    class Config:
        from_attributes = True

class TransactionCreateResult(BaseModel):
    transaction: TransactionRead
    tracked: int = 0
    goals: List[str] = []
