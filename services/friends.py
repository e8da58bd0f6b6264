"""Friend requests.

Neither sending nor accepting a request creates a notification record or a
live event; the recipient sees pending requests when listing notifications
and the requester sees the new friend when listing friends.
"""
from __future__ import annotations
from typing import List
from database import commit_or_rollback
from sqlalchemy.orm import Session
from models.friend_request import FriendRequest
from models.user import User
from services.errors import DomainError, NotFoundError


def search_users(db: Session, user_id: str, name: str) -> List[User]:
    me = db.get(User, user_id)
    excluded = {user_id, *(f.id for f in me.friends)} if me else {user_id}
    pattern = f"%{name.strip()}%"
    return (
        db.query(User)
        .filter(User.id.notin_(excluded), User.full_name.ilike(pattern))
        .order_by(User.full_name)
        .all()
    )


def send_request(db: Session, from_id: str, to_id: str) -> FriendRequest:
    if from_id == to_id:
        raise DomainError("Cannot send a friend request to yourself")
    if not db.get(User, to_id):
        raise NotFoundError("User not found")
    existing = db.query(FriendRequest).filter(
        FriendRequest.from_user_id == from_id,
        FriendRequest.to_user_id == to_id,
        FriendRequest.status == "pending",
    ).first()
    if existing:
        raise DomainError("Request already sent")
    request = FriendRequest(from_user_id=from_id, to_user_id=to_id, status="pending")
    db.add(request)
    commit_or_rollback(db)
    db.refresh(request)
    return request


def pending_requests(db: Session, user_id: str) -> List[FriendRequest]:
    return (
        db.query(FriendRequest)
        .filter(FriendRequest.to_user_id == user_id, FriendRequest.status == "pending")
        .order_by(FriendRequest.created_at.desc())
        .all()
    )


def accept_request(db: Session, user_id: str, from_id: str) -> FriendRequest:
    request = db.query(FriendRequest).filter(
        FriendRequest.from_user_id == from_id,
        FriendRequest.to_user_id == user_id,
        FriendRequest.status == "pending",
    ).first()
    if not request:
        raise NotFoundError("Request not found")
    request.status = "accepted"
    me = db.get(User, user_id)
    other = db.get(User, from_id)
    if other not in me.friends:
        me.friends.append(other)
    if me not in other.friends:
        other.friends.append(me)
    commit_or_rollback(db)
    db.refresh(request)
    return request


def list_friends(db: Session, user_id: str) -> List[User]:
    me = db.get(User, user_id)
    return list(me.friends) if me else []
