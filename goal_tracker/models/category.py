# goal_tracker/models/category.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, DateTime
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from goal_tracker.core.database import Base

class Category(Base):
    __tablename__ = "categories"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    workspace_id = Column(PG_UUID(as_uuid=True), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=100), nullable=False)
    type = Column(String(length=20), nullable=False, default="wants")  # 'income' | 'needs' | 'wants'

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Category name={self.name} workspace_id={self.workspace_id}>"
