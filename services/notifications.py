"""Notification materialization.

Records are committed first; only then are they pushed to recipients who
are online. A failed write raises before anything is dispatched, and a
missed push leaves the committed record readable via the list endpoint.
"""
from __future__ import annotations
import logging
from datetime import datetime
from typing import Iterable, List
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from database import commit_or_rollback
from models.friend_request import FriendRequest
from models.notification import Notification
from realtime.events import EventName, Scope
from realtime.fanout import FanoutEngine
from schemas.notification import NotificationOut, NotificationType
from schemas.user import UserSummary
from services.errors import NotFoundError

logger = logging.getLogger(__name__)


def create_notifications(
    db: Session,
    recipients: Iterable[str],
    notification_type: NotificationType,
    title: str,
    message: str,
) -> List[Notification]:
    """Write one record per distinct recipient in a single commit."""
    records = [
        Notification(user_id=user_id, type=NotificationType(notification_type).value, title=title, message=message, read=False)
        for user_id in dict.fromkeys(recipients)
        if user_id
    ]
    if not records:
        return []
    db.add_all(records)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    for record in records:
        db.refresh(record)
    return records


def push_notifications(fanout: FanoutEngine, records: Iterable[Notification]) -> int:
    delivered = 0
    for record in records:
        delivered += fanout.dispatch(
            EventName.NOTIFICATION,
            NotificationOut.model_validate(record),
            Scope.user(record.user_id),
        )
    return delivered


def notify(
    db: Session,
    fanout: FanoutEngine,
    recipients: Iterable[str],
    notification_type: NotificationType,
    title: str,
    message: str,
) -> List[Notification]:
    records = create_notifications(db, recipients, notification_type, title, message)
    delivered = push_notifications(fanout, records)
    logger.debug("Created %d %s notifications, %d pushed live", len(records), notification_type, delivered)
    return records


def list_notifications(db: Session, user_id: str) -> List[NotificationOut]:
    """Persisted notifications merged with pending incoming friend requests, newest first."""
    pending = (
        db.query(FriendRequest)
        .filter(FriendRequest.to_user_id == user_id, FriendRequest.status == "pending")
        .all()
    )
    items = [
        NotificationOut(
            id=req.id,
            user_id=user_id,
            type=NotificationType.FRIEND_REQUEST.value,
            title="Friend Request",
            message=f"{req.from_user.full_name} sent you a friend request.",
            read=False,
            created_at=req.created_at,
            sender=UserSummary.model_validate(req.from_user),
        )
        for req in pending
    ]
    stored = db.query(Notification).filter(Notification.user_id == user_id).all()
    items.extend(NotificationOut.model_validate(n) for n in stored)
    items.sort(key=lambda n: n.created_at or datetime.min, reverse=True)
    return items


def unread_count(db: Session, user_id: str) -> int:
    return db.query(Notification).filter(Notification.user_id == user_id, Notification.read == False).count()  # noqa: E712


def mark_read(db: Session, notification_id: str, user_id: str) -> Notification:
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id,
    ).first()
    if not notification:
        raise NotFoundError("Notification not found")
    notification.read = True
    commit_or_rollback(db)
    db.refresh(notification)
    return notification


def mark_all_read(db: Session, user_id: str) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.read == False)  # noqa: E712
        .update({Notification.read: True}, synchronize_session=False)
    )
    commit_or_rollback(db)
    return updated
