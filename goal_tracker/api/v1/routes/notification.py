# goal_tracker/api/v1/routes/notification.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from goal_tracker.schemas.notification import NotificationRead
from goal_tracker.crud import notification as crud_notification
from goal_tracker.models.workspace import Workspace
from goal_tracker.core.database import get_async_session
from goal_tracker.api.deps import get_workspace

router = APIRouter(prefix="/workspaces/{workspace_id}/notifications", tags=["notifications"])

@router.get("", response_model=List[NotificationRead])
async def get_notifications(
    unread_only: bool = Query(False, description="Filter to only unread notifications"),
    limit: int = Query(50, description="Maximum number of notifications to return"),
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
):
    """Get notifications for the workspace with optional filtering"""
    return await crud_notification.get_notifications_for_workspace(
        db,
        workspace_id=workspace.id,
        unread_only=unread_only,
        limit=limit
    )

@router.get("/unread-count", response_model=int)
async def get_unread_count(
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
):
    return await crud_notification.get_unread_count(db, workspace.id)

@router.post("/read_all", response_model=int)
async def mark_all_notifications_as_read(
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
):
    """Mark all notifications of the workspace as read"""
    return await crud_notification.mark_all_notifications_as_read(db, workspace.id)

@router.post("/{notification_id}/read", response_model=NotificationRead)
async def mark_notification_as_read(
    notification_id: UUID,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_async_session),
):
    notification = await crud_notification.mark_notification_as_read(db, notification_id, workspace.id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification
