# goal_tracker/crud/notification.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, desc, func
from goal_tracker.models.notification import Notification
from goal_tracker.schemas.notification import NotificationCreate
from typing import List, Optional
import uuid
from datetime import datetime

async def create_notification(db: AsyncSession, notification: NotificationCreate) -> Notification:
    """Create a new notification"""
    db_notification = Notification(**notification.dict(), is_read=False, created_at=datetime.utcnow())
    db.add(db_notification)
    await db.commit()
    await db.refresh(db_notification)
    return db_notification

async def get_notifications_for_workspace(
    db: AsyncSession,
    workspace_id: uuid.UUID,
    unread_only: bool = False,
    limit: int = 50
) -> List[Notification]:
    """Get notifications for a workspace with filtering options"""
    query = (
        select(Notification)
        .filter(Notification.workspace_id == workspace_id)
    )

    if unread_only:
        query = query.filter(Notification.is_read == False)

    query = query.order_by(desc(Notification.created_at)).limit(limit)

    result = await db.execute(query)
    return result.scalars().all()

async def get_unread_count(db: AsyncSession, workspace_id: uuid.UUID) -> int:
    """Get count of unread notifications for a workspace"""
    result = await db.execute(
        select(func.count())
        .select_from(Notification)
        .filter(Notification.workspace_id == workspace_id, Notification.is_read == False)
    )
    return result.scalar_one() or 0

async def mark_notification_as_read(db: AsyncSession, notification_id: uuid.UUID, workspace_id: uuid.UUID) -> Optional[Notification]:
    """Mark a notification as read, ensuring it belongs to the workspace"""
    result = await db.execute(
        select(Notification)
        .filter(Notification.id == notification_id, Notification.workspace_id == workspace_id)
    )
    notification = result.scalars().first()

    if notification:
        notification.is_read = True
        await db.commit()
        await db.refresh(notification)
    return notification

async def mark_all_notifications_as_read(db: AsyncSession, workspace_id: uuid.UUID) -> int:
    """Mark all notifications as read for a workspace"""
    result = await db.execute(
        update(Notification)
        .filter(Notification.workspace_id == workspace_id, Notification.is_read == False)
        .values(is_read=True)
    )
    await db.commit()
    return result.rowcount
