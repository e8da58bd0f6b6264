"""Message reactions.

``toggle_reaction`` is the single mutation path: adding an emoji the user
already reacted with removes it, and an emoji left with no users is
pruned. Group message reactions are re-broadcast to the group's room;
direct message reactions are only persisted.
"""
from __future__ import annotations
from typing import List
from database import commit_or_rollback
from sqlalchemy.orm import Session
from models.group import Group
from models.message import Message
from realtime.events import EventName, Scope
from realtime.fanout import FanoutEngine
from schemas.message import ReactionUpdate
from services.errors import NotFoundError, PermissionDeniedError


def toggle_reaction_entries(reactions: List[dict], emoji: str, user_id: str) -> List[dict]:
    """Return a new reaction list with ``user_id`` toggled under ``emoji``."""
    result: List[dict] = []
    found = False
    for entry in reactions or []:
        user_ids = list(entry.get("userIds", []))
        if entry.get("emoji") == emoji:
            found = True
            if user_id in user_ids:
                user_ids = [u for u in user_ids if u != user_id]
            else:
                user_ids.append(user_id)
            if not user_ids:
                continue
        result.append({"emoji": entry.get("emoji"), "userIds": user_ids, "count": len(user_ids)})
    if not found:
        result.append({"emoji": emoji, "userIds": [user_id], "count": 1})
    return result


def can_react(db: Session, message: Message, user_id: str) -> bool:
    if message.group_id:
        group = db.get(Group, message.group_id)
        return group is not None and group.has_member(user_id)
    return user_id in (message.sender_id, message.receiver_id)


def toggle_reaction(db: Session, fanout: FanoutEngine, message_id: str, emoji: str, user_id: str) -> Message:
    message = db.get(Message, message_id)
    if not message:
        raise NotFoundError("Message not found")
    if not can_react(db, message, user_id):
        raise PermissionDeniedError("You are not part of this conversation")
    # Reassign so the JSON column is flagged dirty
    message.reactions = toggle_reaction_entries(message.reactions, emoji, user_id)
    commit_or_rollback(db)
    db.refresh(message)
    if message.group_id:
        fanout.dispatch(
            EventName.MESSAGE_REACTION,
            ReactionUpdate(message_id=message.id, reactions=message.reactions),
            Scope.room(message.group_id),
        )
    return message
