from __future__ import annotations
from typing import List
from database import commit_or_rollback
from sqlalchemy.orm import Session
from models.note import Note
from schemas.note import NoteCreate
from services.errors import NotFoundError


def create_note(db: Session, user_id: str, data: NoteCreate) -> Note:
    note = Note(user_id=user_id, content=data.content, coordinates=list(data.coordinates))
    db.add(note)
    commit_or_rollback(db)
    db.refresh(note)
    return note


def list_notes(db: Session, user_id: str) -> List[Note]:
    return db.query(Note).filter(Note.user_id == user_id).order_by(Note.created_at.desc()).all()


def _own_note(db: Session, note_id: str, user_id: str) -> Note:
    # Someone else's note is reported exactly like a missing one
    note = db.query(Note).filter(Note.id == note_id, Note.user_id == user_id).first()
    if not note:
        raise NotFoundError("Note not found or unauthorized")
    return note


def update_note(db: Session, note_id: str, user_id: str, content: str) -> Note:
    note = _own_note(db, note_id, user_id)
    note.content = content
    commit_or_rollback(db)
    db.refresh(note)
    return note


def delete_note(db: Session, note_id: str, user_id: str) -> None:
    note = _own_note(db, note_id, user_id)
    db.delete(note)
    commit_or_rollback(db)
