from pydantic import BaseModel
from typing import Optional, Dict, Any
from datetime import datetime
import uuid

class NotificationBase(BaseModel):
    title: str
    message: str
    type: str
    category: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

class NotificationCreate(NotificationBase):
    workspace_id: uuid.UUID
    user_id: Optional[uuid.UUID] = None

class NotificationRead(NotificationBase):
    id: uuid.UUID
    workspace_id: uuid.UUID
    user_id: Optional[uuid.UUID] = None
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True
