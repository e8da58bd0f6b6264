from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from database import get_db
from security import get_current_user
from models.user import User as UserModel
from schemas.note import NoteCreate, NoteOut, NoteUpdate
from services import notes as note_service
from services.errors import DomainError

router = APIRouter()


@router.post("", response_model=NoteOut, status_code=201)
async def create_note(body: NoteCreate, current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return note_service.create_note(db, current_user.id, body)


@router.get("", response_model=List[NoteOut])
async def get_notes(current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    """Notes of the current user, newest first"""
    return note_service.list_notes(db, current_user.id)


@router.put("/{note_id}", response_model=NoteOut)
async def update_note(
    note_id: str,
    body: NoteUpdate,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return note_service.update_note(db, note_id, current_user.id, body.content)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.delete("/{note_id}")
async def delete_note(note_id: str, current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        note_service.delete_note(db, note_id, current_user.id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return {"message": "Note deleted successfully"}
