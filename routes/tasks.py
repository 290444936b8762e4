from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from typing import List
from database import get_session
from schemas import TaskCreate, TaskUpdate, TaskResponse, SuccessResponse
from middleware.auth import Identity, verify_jwt_middleware
import store

router = APIRouter()

TASK_NOT_FOUND = "Task not found or not permitted"


@router.get("/tasks", response_model=List[TaskResponse])
def list_tasks(
    identity: Identity = Depends(verify_jwt_middleware),
    session: Session = Depends(get_session),
):
    """
    Get all tasks for authenticated user, newest first

    Args:
        identity: Authenticated caller
        session: Database session

    Returns:
        List of tasks
    """
    return store.list_tasks(session, identity.user_id)


@router.post(
    "/tasks",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED
)
def create_task(
    task_data: TaskCreate,
    identity: Identity = Depends(verify_jwt_middleware),
    session: Session = Depends(get_session),
):
    """
    Create a new task owned by the caller

    Args:
        task_data: Task creation data
        identity: Authenticated caller
        session: Database session

    Returns:
        The created task
    """
    return store.create_task(session, identity.user_id, task_data)


@router.put("/tasks/{task_id}", response_model=SuccessResponse)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    identity: Identity = Depends(verify_jwt_middleware),
    session: Session = Depends(get_session),
):
    """
    Update name, priority and deadline of a task

    Args:
        task_id: Task ID
        task_data: Task update data
        identity: Authenticated caller
        session: Database session
    """
    if not store.update_task(session, task_id, identity.user_id, task_data):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=TASK_NOT_FOUND
        )
    return SuccessResponse()


@router.patch("/tasks/{task_id}/complete", response_model=SuccessResponse)
def complete_task(
    task_id: int,
    identity: Identity = Depends(verify_jwt_middleware),
    session: Session = Depends(get_session),
):
    """Mark a task as completed"""
    if not store.complete_task(session, task_id, identity.user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=TASK_NOT_FOUND
        )
    return SuccessResponse()


@router.delete("/tasks/{task_id}", response_model=SuccessResponse)
def delete_task(
    task_id: int,
    identity: Identity = Depends(verify_jwt_middleware),
    session: Session = Depends(get_session),
):
    """Delete a task together with its activities and notes"""
    if not store.delete_task(session, task_id, identity.user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=TASK_NOT_FOUND
        )
    return SuccessResponse()
