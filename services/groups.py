from __future__ import annotations
import logging
from typing import List, Optional
from database import commit_or_rollback
from sqlalchemy.orm import Session
from models.group import Group
from models.user import User
from realtime.fanout import FanoutEngine
from schemas.group import GroupCreate
from schemas.notification import NotificationType
from services.errors import DomainError, NotFoundError, PermissionDeniedError
from services.messages import get_member_group
from services.notifications import notify

logger = logging.getLogger(__name__)


def create_group(db: Session, fanout: FanoutEngine, creator_id: str, data: GroupCreate) -> Group:
    member_ids = list(dict.fromkeys([*data.member_ids, creator_id]))
    members = db.query(User).filter(User.id.in_(member_ids)).all()
    missing = set(member_ids) - {u.id for u in members}
    if missing:
        raise NotFoundError(f"Unknown member ids: {', '.join(sorted(missing))}")
    group = Group(name=data.name.strip(), created_by=creator_id, members=members)
    db.add(group)
    commit_or_rollback(db)
    db.refresh(group)
    notify(
        db,
        fanout,
        group.member_ids,
        NotificationType.TRIP,
        "Group Created",
        f'You have been added to the group "{group.name}".',
    )
    return group


def list_groups(db: Session, user_id: str) -> List[Group]:
    return (
        db.query(Group)
        .filter(Group.members.any(User.id == user_id))
        .order_by(Group.last_activity.desc())
        .all()
    )


def add_member(db: Session, fanout: FanoutEngine, group_id: str, actor_id: str, email: str) -> Group:
    group = get_member_group(db, group_id, actor_id)
    new_member = db.query(User).filter(User.email == email).first()
    if not new_member:
        raise NotFoundError("User not found")
    if group.has_member(new_member.id):
        raise DomainError("User is already a member of this group")
    group.members.append(new_member)
    commit_or_rollback(db)
    db.refresh(group)
    notify(
        db,
        fanout,
        [new_member.id],
        NotificationType.TRIP,
        "Added to Group",
        f'You have been added to the group "{group.name}".',
    )
    return group


def remove_member(db: Session, group_id: str, actor_id: str, member_id: str) -> Optional[Group]:
    """Remove ``member_id``; returns None when the group was deleted."""
    group = get_member_group(db, group_id, actor_id)
    member = next((m for m in group.members if m.id == member_id), None)
    if member is None:
        raise NotFoundError("Member not found in group")
    if actor_id != member_id and actor_id != group.created_by:
        raise PermissionDeniedError("Only the group admin can remove other members")
    if len(group.members) <= 1:
        db.delete(group)
        commit_or_rollback(db)
        logger.info("Group %s deleted as last member left", group_id)
        return None
    group.members.remove(member)
    commit_or_rollback(db)
    db.refresh(group)
    return group


def rename_group(db: Session, group_id: str, actor_id: str, new_name: str) -> Group:
    group = get_member_group(db, group_id, actor_id)
    group.name = new_name
    commit_or_rollback(db)
    db.refresh(group)
    return group


def delete_group(db: Session, group_id: str, actor_id: str) -> None:
    group = get_member_group(db, group_id, actor_id)
    if group.created_by and actor_id != group.created_by:
        raise PermissionDeniedError("Only the group admin can delete the group")
    db.delete(group)
    commit_or_rollback(db)
    logger.info("Group %s deleted by %s", group_id, actor_id)
