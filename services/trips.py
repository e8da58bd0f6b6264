"""Trips belong to a group; every group member joins the trip on creation.

The creator and trip admins manage a trip (edit, share, members). Viewing
is open to the creator, trip members, members of the owning group or of
a group the trip is shared with, users it is shared with, and everyone
once the trip is public.
"""
from __future__ import annotations
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import or_, select
from database import commit_or_rollback
from sqlalchemy.orm import Session
from models.expense import Expense
from models.group import Group, group_members
from models.trip import Trip, TripMember
from models.user import User
from realtime.fanout import FanoutEngine
from schemas.notification import NotificationType
from schemas.trip import TripCreate, TripFromChat, TripShare, TripUpdate
from services.errors import DomainError, NotFoundError, PermissionDeniedError
from services.messages import post_group_message
from services.notifications import notify


def _member_group(db: Session, group_id: str, user_id: str, action: str) -> Group:
    group = db.get(Group, group_id)
    if not group:
        raise NotFoundError("Group not found")
    if not group.has_member(user_id):
        raise PermissionDeniedError(f"You must be a member of the group to {action}")
    return group


def _open_trip(
    db: Session,
    fanout: FanoutEngine,
    group: Group,
    user_id: str,
    **fields,
) -> Trip:
    trip = Trip(group_id=group.id, created_by=user_id, **fields)
    trip.members = [
        TripMember(user_id=member_id, role="admin" if member_id == user_id else "member")
        for member_id in group.member_ids
    ]
    trip.shared_groups = [group]
    db.add(trip)
    commit_or_rollback(db)
    db.refresh(trip)

    notify(
        db,
        fanout,
        [m for m in group.member_ids if m != user_id],
        NotificationType.TRIP,
        "New Trip Created",
        f'A new trip "{trip.title}" was created in group "{group.name}".',
    )
    post_group_message(
        db,
        fanout,
        group,
        user_id,
        f'Trip "{trip.title}" has been created',
        message_type="trip_update",
        meta={
            "tripId": trip.id,
            "action": "created",
            "tripDetails": {
                "title": trip.title,
                "location": trip.location,
                "startDate": trip.start_date.isoformat(),
                "endDate": trip.end_date.isoformat(),
                "budget": float(trip.budget),
                "description": trip.description or "",
            },
        },
    )
    return trip


def create_trip(db: Session, fanout: FanoutEngine, user_id: str, data: TripCreate) -> Trip:
    group = _member_group(db, data.group_id, user_id, "create a trip")
    return _open_trip(
        db,
        fanout,
        group,
        user_id,
        title=data.title,
        description=data.description,
        location=data.location,
        destination=data.destination or data.location,
        coordinates=list(data.coordinates),
        start_date=data.start_date,
        end_date=data.end_date,
        budget=Decimal(str(data.budget)),
        status=data.status,
    )


def create_trip_from_chat(db: Session, fanout: FanoutEngine, user_id: str, data: TripFromChat) -> Trip:
    group = _member_group(db, data.chat_group_id, user_id, "create a trip")
    return _open_trip(
        db,
        fanout,
        group,
        user_id,
        title=data.title,
        description=data.description,
        location=data.location or data.destination,
        destination=data.destination,
        coordinates=list(data.coordinates) if data.coordinates else None,
        start_date=data.start_date,
        end_date=data.end_date,
        budget=Decimal(str(data.budget)),
        status="planning",
    )


def _my_group_ids(user_id: str):
    return select(group_members.c.group_id).where(group_members.c.user_id == user_id)


def list_trips(db: Session, user_id: str, group_id: Optional[str] = None) -> List[Trip]:
    my_groups = _my_group_ids(user_id)
    query = db.query(Trip).filter(
        or_(
            Trip.group_id.in_(my_groups),
            Trip.members.any(TripMember.user_id == user_id),
            Trip.shared_with.any(User.id == user_id),
            Trip.shared_groups.any(Group.id.in_(my_groups)),
            Trip.is_public == True,  # noqa: E712
        )
    )
    if group_id:
        query = query.filter(Trip.group_id == group_id)
    return query.order_by(Trip.start_date.asc()).all()


def list_group_trips(db: Session, group_id: str, user_id: str) -> List[Trip]:
    _member_group(db, group_id, user_id, "view its trips")
    return (
        db.query(Trip)
        .filter(or_(Trip.group_id == group_id, Trip.shared_groups.any(Group.id == group_id)))
        .order_by(Trip.start_date.asc())
        .all()
    )


def _get_trip(db: Session, trip_id: str) -> Trip:
    trip = db.get(Trip, trip_id)
    if not trip:
        raise NotFoundError("Trip not found")
    return trip


def is_participant(db: Session, trip: Trip, user_id: str) -> bool:
    if trip.created_by == user_id or trip.role_of(user_id):
        return True
    group = db.get(Group, trip.group_id)
    return group is not None and group.has_member(user_id)


def can_view_trip(db: Session, trip: Trip, user_id: str) -> bool:
    if trip.is_public or is_participant(db, trip, user_id):
        return True
    if any(u.id == user_id for u in trip.shared_with):
        return True
    return any(g.has_member(user_id) for g in trip.shared_groups)


def can_manage_trip(trip: Trip, user_id: str) -> bool:
    return trip.created_by == user_id or trip.role_of(user_id) == "admin"


def get_trip(db: Session, trip_id: str, user_id: str) -> Trip:
    trip = db.get(Trip, trip_id)
    if not trip or not can_view_trip(db, trip, user_id):
        raise NotFoundError("Trip not found or you don't have access to it")
    return trip


def _managed_trip(db: Session, trip_id: str, user_id: str, action: str) -> Trip:
    trip = _get_trip(db, trip_id)
    if not can_manage_trip(trip, user_id):
        raise PermissionDeniedError(f"Only the trip creator or an admin can {action} this trip")
    return trip


def update_trip(db: Session, trip_id: str, user_id: str, data: TripUpdate) -> Trip:
    trip = _managed_trip(db, trip_id, user_id, "update")
    changes = data.model_dump(exclude_unset=True)
    start = changes.get("start_date") or trip.start_date
    end = changes.get("end_date") or trip.end_date
    if start > end:
        raise DomainError("End date must be after start date")
    for field, value in changes.items():
        if value is None and field != "description":
            continue
        if field == "budget":
            value = Decimal(str(value))
        setattr(trip, field, value)
    commit_or_rollback(db)
    db.refresh(trip)
    return trip


def delete_trip(db: Session, trip_id: str, user_id: str) -> None:
    trip = _get_trip(db, trip_id)
    if trip.created_by != user_id:
        raise PermissionDeniedError("Only the trip creator can delete this trip")
    db.delete(trip)
    commit_or_rollback(db)


def complete_trip(db: Session, trip_id: str, user_id: str) -> Trip:
    trip = _get_trip(db, trip_id)
    if not is_participant(db, trip, user_id):
        raise PermissionDeniedError("You must be part of this trip to complete it")
    trip.status = "completed"
    commit_or_rollback(db)
    db.refresh(trip)
    return trip


def share_trip(db: Session, trip_id: str, user_id: str, data: TripShare) -> Trip:
    trip = _managed_trip(db, trip_id, user_id, "share")
    user_ids = set(data.shared_with)
    users = db.query(User).filter(User.id.in_(user_ids)).all() if user_ids else []
    if len(users) != len(user_ids):
        raise NotFoundError("User not found")
    group_ids = set(data.shared_groups)
    groups = db.query(Group).filter(Group.id.in_(group_ids)).all() if group_ids else []
    if len(groups) != len(group_ids):
        raise NotFoundError("Group not found")

    trip.shared_with = trip.shared_with + [u for u in users if u not in trip.shared_with]
    trip.shared_groups = trip.shared_groups + [g for g in groups if g not in trip.shared_groups]
    if data.is_public is not None:
        trip.is_public = data.is_public
    commit_or_rollback(db)
    db.refresh(trip)
    return trip


def update_trip_members(db: Session, fanout: FanoutEngine, trip_id: str, user_id: str, member_ids: List[str]) -> Trip:
    trip = _get_trip(db, trip_id)
    if trip.role_of(user_id) != "admin":
        raise PermissionDeniedError("Only trip admins can update members")
    group = db.get(Group, trip.group_id)
    member_ids = list(dict.fromkeys(member_ids))
    if group is None or set(member_ids) - set(group.member_ids):
        raise DomainError("All members must be part of the group")

    # Existing rows keep their role
    current = {m.user_id: m for m in trip.members}
    trip.members = [current.get(m) or TripMember(user_id=m, role="member") for m in member_ids]
    commit_or_rollback(db)
    db.refresh(trip)

    post_group_message(
        db,
        fanout,
        group,
        user_id,
        "Trip members have been updated",
        message_type="trip_update",
        meta={"tripId": trip.id, "action": "members_updated"},
    )
    return trip


def get_trip_expenses(db: Session, trip_id: str, user_id: str) -> dict:
    """Group expenses of the trip, plus the caller's own personal ones."""
    trip = _get_trip(db, trip_id)
    if not is_participant(db, trip, user_id):
        raise PermissionDeniedError("You must be a trip member to view expenses")
    expenses = db.query(Expense).filter(Expense.trip_id == trip.id).order_by(Expense.date.desc()).all()
    return {
        "group": [e for e in expenses if e.is_group_expense],
        "personal": [e for e in expenses if not e.is_group_expense and e.created_by == user_id],
    }
