from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from typing import List
from database import get_db
from security import get_current_user
from models.user import User as UserModel
from realtime.hub import RealtimeHub, get_hub
from schemas.message import MessageCreate, MessageOut, ReactionCreate
from schemas.user import UserSummary
from services import messages as message_service
from services.errors import DomainError
from services.reactions import toggle_reaction
from endpoints.logs import log_error, log_request

router = APIRouter()


@router.get("/users", response_model=List[UserSummary])
async def get_users_for_sidebar(current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return message_service.list_sidebar_users(db, current_user.id)


@router.get("/{user_id}", response_model=List[MessageOut])
async def get_messages(user_id: str, current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return message_service.get_conversation(db, current_user.id, user_id)


@router.post("/send/{user_id}", response_model=MessageOut, status_code=201)
async def send_message(
    request: Request,
    user_id: str,
    body: MessageCreate,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    hub: RealtimeHub = Depends(get_hub),
):
    correlation_id = await log_request(request, "send_message", current_user, {"receiver_id": user_id})
    try:
        return message_service.send_direct_message(db, hub.fanout, current_user.id, user_id, body)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        log_error("send_message_failed", e, current_user, correlation_id, {"receiver_id": user_id})
        raise HTTPException(status_code=500, detail="Internal server error")


def _toggle(message_id: str, emoji: str, current_user: UserModel, db: Session, hub: RealtimeHub):
    try:
        return toggle_reaction(db, hub.fanout, message_id, emoji, current_user.id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        log_error("toggle_reaction_failed", e, current_user, context={"message_id": message_id, "emoji": emoji})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/{message_id}/reactions", response_model=MessageOut)
async def add_reaction(
    message_id: str,
    body: ReactionCreate,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    hub: RealtimeHub = Depends(get_hub),
):
    return _toggle(message_id, body.emoji, current_user, db, hub)


@router.delete("/{message_id}/reactions/{emoji}", response_model=MessageOut)
async def remove_reaction(
    message_id: str,
    emoji: str,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    hub: RealtimeHub = Depends(get_hub),
):
    # Same toggle as add: removing an emoji the user never added adds it
    return _toggle(message_id, emoji, current_user, db, hub)
