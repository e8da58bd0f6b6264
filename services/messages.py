from __future__ import annotations
import math
from datetime import datetime
from typing import List, Optional
from sqlalchemy import and_, or_
from database import commit_or_rollback
from sqlalchemy.orm import Session, joinedload
from models.group import Group
from models.message import Message
from models.user import User
from realtime.events import EventName, Scope
from realtime.fanout import FanoutEngine
from schemas.message import GroupMessageCreate, GroupMessagesPage, MessageCreate, MessageOut
from schemas.notification import NotificationType
from services.errors import NotFoundError
from services.notifications import notify


def _load(db: Session, message_id: str) -> Message:
    return db.query(Message).options(joinedload(Message.sender)).filter(Message.id == message_id).one()


def get_member_group(db: Session, group_id: str, user_id: str) -> Group:
    group = db.get(Group, group_id)
    if not group or not group.has_member(user_id):
        raise NotFoundError("Group not found or you're not a member")
    return group


def list_sidebar_users(db: Session, user_id: str) -> List[User]:
    return db.query(User).filter(User.id != user_id).order_by(User.full_name).all()


def get_conversation(db: Session, user_id: str, other_id: str) -> List[Message]:
    return (
        db.query(Message)
        .options(joinedload(Message.sender))
        .filter(
            or_(
                and_(Message.sender_id == user_id, Message.receiver_id == other_id),
                and_(Message.sender_id == other_id, Message.receiver_id == user_id),
            )
        )
        .order_by(Message.created_at.asc())
        .all()
    )


def send_direct_message(db: Session, fanout: FanoutEngine, sender_id: str, receiver_id: str, data: MessageCreate) -> Message:
    if not db.get(User, receiver_id):
        raise NotFoundError("Receiver not found")
    message = Message(
        sender_id=sender_id,
        receiver_id=receiver_id,
        text=data.text,
        image=data.image,
        type="image" if data.image and not data.text else "text",
        reactions=[],
    )
    db.add(message)
    commit_or_rollback(db)
    message = _load(db, message.id)
    fanout.dispatch(EventName.NEW_MESSAGE, MessageOut.model_validate(message), Scope.user(receiver_id))
    return message


def _persist_group_message(
    db: Session,
    group: Group,
    sender_id: str,
    text: Optional[str],
    image: Optional[str],
    message_type: str,
    meta: Optional[dict],
) -> Message:
    message = Message(
        sender_id=sender_id,
        group_id=group.id,
        text=text,
        image=image,
        type=message_type,
        meta=meta or {},
        reactions=[],
    )
    db.add(message)
    group.last_activity = datetime.utcnow()
    commit_or_rollback(db)
    return _load(db, message.id)


def _push_group_message(fanout: FanoutEngine, message: Message) -> int:
    return fanout.dispatch(EventName.NEW_GROUP_MESSAGE, MessageOut.model_validate(message), Scope.room(message.group_id))


def post_group_message(
    db: Session,
    fanout: FanoutEngine,
    group: Group,
    sender_id: str,
    text: Optional[str],
    image: Optional[str] = None,
    message_type: str = "text",
    meta: Optional[dict] = None,
) -> Message:
    """Persist a group chat message and push it to the group's room.

    Used for the system messages that expense and trip creation post into
    the group chat; these do not create notifications of their own.
    """
    message = _persist_group_message(db, group, sender_id, text, image, message_type, meta)
    _push_group_message(fanout, message)
    return message


def send_group_message(db: Session, fanout: FanoutEngine, group_id: str, sender_id: str, data: GroupMessageCreate) -> Message:
    group = get_member_group(db, group_id, sender_id)
    message = _persist_group_message(db, group, sender_id, data.text, data.image, data.type, data.metadata)
    notify(
        db,
        fanout,
        [m for m in group.member_ids if m != sender_id],
        NotificationType.MESSAGE,
        "New Group Message",
        f'New message in group "{group.name}".',
    )
    _push_group_message(fanout, message)
    return message


def get_group_messages(db: Session, group_id: str, user_id: str, page: int = 1, limit: int = 50) -> GroupMessagesPage:
    get_member_group(db, group_id, user_id)
    page = max(page, 1)
    limit = max(limit, 1)
    query = db.query(Message).filter(Message.group_id == group_id)
    total = query.count()
    newest_first = (
        query.options(joinedload(Message.sender))
        .order_by(Message.created_at.desc(), Message.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return GroupMessagesPage(
        messages=[MessageOut.model_validate(m) for m in reversed(newest_first)],
        total_messages=total,
        current_page=page,
        total_pages=math.ceil(total / limit) if total else 0,
    )
