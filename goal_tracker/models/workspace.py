# goal_tracker/models/workspace.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from goal_tracker.core.database import Base

class Workspace(Base):
    __tablename__ = "workspaces"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(length=150), nullable=False)
    type = Column(String(length=20), nullable=False, default="personal")  # 'personal' | 'family' | 'business'

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Workspace name={self.name} type={self.type}>"
