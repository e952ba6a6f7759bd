# goal_tracker/models/debt.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Numeric, DateTime
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from goal_tracker.core.database import Base

class Debt(Base):
    __tablename__ = "debts"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    workspace_id = Column(PG_UUID(as_uuid=True), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=150), nullable=False)
    type = Column(String(length=20), nullable=False, default="debt")  # 'debt' | 'credit'
    total_amount = Column(Numeric(15, 2, asdecimal=False), nullable=False)
    remaining_amount = Column(Numeric(15, 2, asdecimal=False), nullable=False)
    interest_rate = Column(Numeric(5, 2, asdecimal=False), nullable=True)
    due_date = Column(DateTime, nullable=True)
    status = Column(String(length=20), nullable=False, default="active")  # 'active' | 'paid' | 'overdue'

    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def paid_amount(self) -> float:
        return float(self.total_amount or 0) - float(self.remaining_amount or 0)

    def __repr__(self):
        return f"<Debt name={self.name} remaining={self.remaining_amount} workspace_id={self.workspace_id}>"
