from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from typing import List, Optional
from database import get_db
from security import get_current_user
from models.user import User as UserModel
from realtime.hub import RealtimeHub, get_hub
from schemas.expense import TripExpenses
from schemas.trip import TripCreate, TripFromChat, TripMembersUpdate, TripOut, TripShare, TripUpdate
from services import trips as trip_service
from services.errors import DomainError
from endpoints.logs import log_action, log_error, log_request

router = APIRouter()


@router.post("", response_model=TripOut, status_code=201)
async def add_trip(
    request: Request,
    body: TripCreate,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    hub: RealtimeHub = Depends(get_hub),
):
    correlation_id = await log_request(request, "create_trip", current_user, {"group_id": body.group_id, "title": body.title})
    try:
        trip = trip_service.create_trip(db, hub.fanout, current_user.id, body)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        log_error("create_trip_failed", e, current_user, correlation_id, {"group_id": body.group_id})
        raise HTTPException(status_code=500, detail="Failed to create trip")
    log_action("trip_created", current_user, correlation_id, {"trip_id": trip.id, "group_id": trip.group_id})
    return trip


@router.post("/from-chat", response_model=TripOut, status_code=201)
async def add_trip_from_chat(
    request: Request,
    body: TripFromChat,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    hub: RealtimeHub = Depends(get_hub),
):
    correlation_id = await log_request(request, "create_trip_from_chat", current_user, {"group_id": body.chat_group_id})
    try:
        trip = trip_service.create_trip_from_chat(db, hub.fanout, current_user.id, body)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        log_error("create_trip_from_chat_failed", e, current_user, correlation_id, {"group_id": body.chat_group_id})
        raise HTTPException(status_code=500, detail="Failed to create trip")
    log_action("trip_created", current_user, correlation_id, {"trip_id": trip.id, "group_id": trip.group_id, "from_chat": True})
    return trip


@router.get("", response_model=List[TripOut])
async def get_trips(
    groupId: Optional[str] = None,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return trip_service.list_trips(db, current_user.id, groupId)


@router.get("/group/{group_id}", response_model=List[TripOut])
async def get_group_trips(group_id: str, current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return trip_service.list_group_trips(db, group_id, current_user.id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.get("/{trip_id}", response_model=TripOut)
async def get_trip(trip_id: str, current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return trip_service.get_trip(db, trip_id, current_user.id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.put("/{trip_id}", response_model=TripOut)
async def update_trip(
    trip_id: str,
    body: TripUpdate,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        trip = trip_service.update_trip(db, trip_id, current_user.id, body)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    log_action("trip_updated", current_user, context={"trip_id": trip_id, "fields": sorted(body.model_fields_set)})
    return trip


@router.delete("/{trip_id}")
async def delete_trip(trip_id: str, current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        trip_service.delete_trip(db, trip_id, current_user.id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    log_action("trip_deleted", current_user, context={"trip_id": trip_id})
    return {"message": "Trip deleted successfully"}


@router.put("/{trip_id}/complete", response_model=TripOut)
async def complete_trip(trip_id: str, current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return trip_service.complete_trip(db, trip_id, current_user.id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.post("/{trip_id}/share", response_model=TripOut)
async def share_trip(
    trip_id: str,
    body: TripShare,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return trip_service.share_trip(db, trip_id, current_user.id, body)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.put("/{trip_id}/members", response_model=TripOut)
async def update_trip_members(
    trip_id: str,
    body: TripMembersUpdate,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    hub: RealtimeHub = Depends(get_hub),
):
    try:
        return trip_service.update_trip_members(db, hub.fanout, trip_id, current_user.id, body.members)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.get("/{trip_id}/expenses", response_model=TripExpenses)
async def get_trip_expenses(trip_id: str, current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return trip_service.get_trip_expenses(db, trip_id, current_user.id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
