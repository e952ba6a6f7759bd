# goal_tracker/models/transaction.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Numeric, DateTime
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from goal_tracker.core.database import Base

# Transaction types as stored by the host application
TRANSACTION_TYPES = ("income", "expense", "transfer", "saving", "debt", "repayment")

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    workspace_id = Column(PG_UUID(as_uuid=True), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(length=20), nullable=False)
    amount = Column(Numeric(15, 2, asdecimal=False), nullable=False)
    description = Column(String(length=255), nullable=False)
    date = Column(DateTime, nullable=False)
    account_id = Column(PG_UUID(as_uuid=True), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(PG_UUID(as_uuid=True), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    to_account_id = Column(PG_UUID(as_uuid=True), ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)  # For transfers
    debt_id = Column(PG_UUID(as_uuid=True), ForeignKey("debts.id", ondelete="SET NULL"), nullable=True)  # For repayments

    created_at = Column(DateTime, default=datetime.utcnow)

    category = relationship("Category", lazy="joined")

    def __repr__(self):
        return f"<Transaction type={self.type} amount={self.amount} date={self.date} workspace_id={self.workspace_id}>"
