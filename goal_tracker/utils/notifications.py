# goal_tracker/utils/notifications.py
from typing import Any, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from goal_tracker.schemas.notification import NotificationCreate
from goal_tracker.crud.notification import create_notification
from goal_tracker.models.notification import Notification
import uuid
import logging

logger = logging.getLogger(__name__)

# Goal events: type is 'goal_progress' for auto-tracking, 'success' for achievements, 'info' otherwise.
async def notify_transaction_tracked(
    db: AsyncSession,
    workspace_id: uuid.UUID,
    description: str,
    amount: float,
    goal_name: str,
) -> Notification:
    notification = NotificationCreate(
        workspace_id=workspace_id,
        user_id=None,  # Workspace-level notification
        title="Goal Auto-Tracked",
        message=f'Transaction "{description}" ({amount:,.2f}) was automatically linked to goal "{goal_name}"',
        type="goal_progress",
    )
    return await create_notification(db, notification)

async def notify_goal_event(
    db: AsyncSession,
    workspace_id: uuid.UUID,
    kind: str,
    title: str,
    message: str,
    data: Optional[Dict[str, Any]] = None,
) -> Notification:
    notification = NotificationCreate(
        workspace_id=workspace_id,
        user_id=None,
        title=title,
        message=message,
        type="success" if kind == "achievement" else "info",
        category="goal",
        data=data,
    )
    notification_obj = await create_notification(db, notification)
    logger.debug(f"Goal notification created: {title}")
    return notification_obj
