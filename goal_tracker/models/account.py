# goal_tracker/models/account.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Numeric, DateTime, Text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from goal_tracker.core.database import Base

class Account(Base):
    __tablename__ = "accounts"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    workspace_id = Column(PG_UUID(as_uuid=True), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=150), nullable=False)
    type = Column(String(length=20), nullable=False, default="transaction")  # 'transaction' | 'asset'
    currency = Column(String(length=3), nullable=False, default="USD")
    balance = Column(Numeric(15, 2, asdecimal=False), nullable=False, default=0.0)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Account name={self.name} workspace_id={self.workspace_id}>"
