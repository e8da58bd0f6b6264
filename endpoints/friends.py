from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List
from database import get_db
from security import get_current_user
from models.user import User as UserModel
from schemas.friend import FriendRequestAccept, FriendRequestCreate, FriendRequestOut
from schemas.user import UserSummary
from services import friends as friend_service
from services.errors import DomainError

router = APIRouter()


@router.get("/users/search", response_model=List[UserSummary])
async def search_users(
    name: str = Query("", max_length=100),
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return friend_service.search_users(db, current_user.id, name)


@router.post("/friends/requests")
async def send_friend_request(
    body: FriendRequestCreate,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        friend_service.send_request(db, current_user.id, body.to)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return {"message": "Friend request sent"}


@router.get("/friends/requests", response_model=List[FriendRequestOut])
async def get_friend_requests(current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return friend_service.pending_requests(db, current_user.id)


@router.post("/friends/requests/accept")
async def accept_friend_request(
    body: FriendRequestAccept,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        friend_service.accept_request(db, current_user.id, body.from_user_id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return {"message": "Friend request accepted"}


@router.get("/friends", response_model=List[UserSummary])
async def get_friends(current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return friend_service.list_friends(db, current_user.id)
