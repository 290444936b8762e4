from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from database import get_session
from middleware.auth import Identity, verify_jwt_middleware
from schemas import NoteCreate, NoteResponse
import store

router = APIRouter()


@router.post(
    "/notes",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED
)
def create_note(
    note_data: NoteCreate,
    identity: Identity = Depends(verify_jwt_middleware),
    session: Session = Depends(get_session),
):
    """Add a note to one of the caller's tasks"""
    note = store.create_note(session, identity.user_id, note_data)
    if note is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found or not permitted"
        )
    return note


@router.get("/notes/{task_id}", response_model=List[NoteResponse])
def list_task_notes(
    task_id: int,
    identity: Identity = Depends(verify_jwt_middleware),
    session: Session = Depends(get_session),
):
    """Notes of a task, newest first"""
    notes = store.list_task_notes(session, task_id, identity.user_id)
    if notes is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found or not permitted"
        )
    return notes
