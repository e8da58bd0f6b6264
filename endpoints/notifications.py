from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from database import get_db
from security import get_current_user
from models.user import User as UserModel
from realtime.hub import RealtimeHub, get_hub
from schemas.notification import NotificationCreate, NotificationOut, UnreadCount
from services import notifications as notification_service
from services.errors import DomainError
from endpoints.logs import log_error

router = APIRouter()


@router.get("", response_model=List[NotificationOut])
async def get_notifications(current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    """Notifications for the current user, pending friend requests included"""
    return notification_service.list_notifications(db, current_user.id)


@router.get("/unread-count", response_model=UnreadCount)
async def get_unread_count(current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return UnreadCount(unread=notification_service.unread_count(db, current_user.id))


@router.post("", response_model=NotificationOut, status_code=201)
async def create_notification(
    body: NotificationCreate,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    hub: RealtimeHub = Depends(get_hub),
):
    """Create a notification for the current user (testing/demo)"""
    try:
        records = notification_service.notify(db, hub.fanout, [current_user.id], body.type, body.title, body.message)
    except Exception as e:
        log_error("create_notification_failed", e, current_user)
        raise HTTPException(status_code=500, detail="Failed to create notification")
    return records[0]


@router.put("/read-all")
async def mark_all_as_read(current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    updated = notification_service.mark_all_read(db, current_user.id)
    return {"message": "All notifications marked as read", "updated": updated}


@router.put("/{notification_id}/read", response_model=NotificationOut)
async def mark_as_read(
    notification_id: str,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return notification_service.mark_read(db, notification_id, current_user.id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
