from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from typing import List
from config import settings
from database import get_db
from security import get_current_user
from models.user import User as UserModel
from realtime.hub import RealtimeHub, get_hub
from schemas.group import AddMember, GroupCreate, GroupOut, RenameGroup
from schemas.message import GroupMessageCreate, GroupMessagesPage, MessageOut
from services import groups as group_service
from services import messages as message_service
from services.errors import DomainError
from endpoints.logs import log_action, log_error, log_request

router = APIRouter()


@router.post("", response_model=GroupOut, status_code=201)
async def create_group(
    body: GroupCreate,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    hub: RealtimeHub = Depends(get_hub),
):
    try:
        group = group_service.create_group(db, hub.fanout, current_user.id, body)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        log_error("create_group_failed", e, current_user)
        raise HTTPException(status_code=500, detail="Internal server error")
    log_action("group_created", current_user, context={"group_id": group.id, "members": len(group.members)})
    return group


@router.get("", response_model=List[GroupOut])
async def get_groups(current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return group_service.list_groups(db, current_user.id)


@router.post("/{group_id}/messages", response_model=MessageOut, status_code=201)
async def send_group_message(
    request: Request,
    group_id: str,
    body: GroupMessageCreate,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    hub: RealtimeHub = Depends(get_hub),
):
    correlation_id = await log_request(request, "send_group_message", current_user, {"group_id": group_id, "type": body.type})
    try:
        return message_service.send_group_message(db, hub.fanout, group_id, current_user.id, body)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        log_error("send_group_message_failed", e, current_user, correlation_id, {"group_id": group_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{group_id}/messages", response_model=GroupMessagesPage)
async def get_group_messages(
    group_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.GROUP_MESSAGES_PAGE_SIZE, ge=1, le=200),
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return message_service.get_group_messages(db, group_id, current_user.id, page, limit)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.post("/{group_id}/members", response_model=GroupOut)
async def add_group_member(
    group_id: str,
    body: AddMember,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    hub: RealtimeHub = Depends(get_hub),
):
    try:
        return group_service.add_member(db, hub.fanout, group_id, current_user.id, body.email)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        log_error("add_group_member_failed", e, current_user, context={"group_id": group_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{group_id}/members/{member_id}")
async def remove_group_member(
    group_id: str,
    member_id: str,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        group = group_service.remove_member(db, group_id, current_user.id, member_id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    if group is None:
        return {"message": "Group deleted as last member left"}
    return GroupOut.model_validate(group)


@router.put("/{group_id}/name", response_model=GroupOut)
async def update_group_name(
    group_id: str,
    body: RenameGroup,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        group = group_service.rename_group(db, group_id, current_user.id, body.new_name)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    log_action("group_renamed", current_user, context={"group_id": group_id, "name": group.name})
    return group


@router.delete("/{group_id}")
async def delete_group(group_id: str, current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        group_service.delete_group(db, group_id, current_user.id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    log_action("group_deleted", current_user, context={"group_id": group_id})
    return {"message": "Group deleted successfully"}
