from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from database import get_session
from middleware.auth import Identity, verify_jwt_middleware
from schemas import ActivityCreate, ActivityResponse
import store

router = APIRouter()


@router.get("/activities", response_model=List[ActivityResponse])
def list_activities(
    start: Optional[date] = None,
    end: Optional[date] = None,
    identity: Identity = Depends(verify_jwt_middleware),
    session: Session = Depends(get_session),
):
    """
    Get activities across all of the caller's tasks

    Args:
        start: Earliest activity date to include
        end: Latest activity date to include
    """
    return store.list_activities(session, identity.user_id, start=start, end=end)


@router.get("/activities/{task_id}", response_model=List[ActivityResponse])
def list_task_activities(
    task_id: int,
    identity: Identity = Depends(verify_jwt_middleware),
    session: Session = Depends(get_session),
):
    activities = store.list_task_activities(session, task_id, identity.user_id)
    if activities is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found or not permitted"
        )
    return activities


@router.post(
    "/activities",
    response_model=ActivityResponse,
    status_code=status.HTTP_201_CREATED
)
def create_activity(
    activity_data: ActivityCreate,
    identity: Identity = Depends(verify_jwt_middleware),
    session: Session = Depends(get_session),
):
    """Log an activity against one of the caller's tasks"""
    activity = store.create_activity(session, identity.user_id, activity_data)
    if activity is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found or not permitted"
        )
    return activity
