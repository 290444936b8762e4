"""
Ownership-scoped queries over users, tasks, activities and notes.

Every function takes the caller's Session. Lookups that match no row owned by
the caller return None/False, so callers cannot tell "missing" from "not yours".
"""

from datetime import date
from typing import List, Optional

from sqlmodel import Session, select

from models import Activity, Note, Task, User
from schemas import ActivityCreate, NoteCreate, TaskCreate, TaskUpdate


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == email)).first()


def get_owned_task(session: Session, task_id: int, owner_id: int) -> Optional[Task]:
    """Return the task only if it belongs to owner_id."""
    task = session.get(Task, task_id)
    if not task or task.user_id != owner_id:
        return None
    return task


# Tasks


def list_tasks(session: Session, owner_id: int) -> List[Task]:
    query = select(Task).where(Task.user_id == owner_id).order_by(Task.id.desc())
    return list(session.exec(query).all())


def list_open_tasks(session: Session) -> List[Task]:
    """All incomplete tasks, most urgent first, then earliest deadline."""
    query = (
        select(Task)
        .where(Task.completed == False)  # noqa: E712
        .order_by(Task.priority.desc(), Task.deadline.asc())
    )
    return list(session.exec(query).all())


def create_task(session: Session, owner_id: int, data: TaskCreate) -> Task:
    task = Task(
        user_id=owner_id,
        name=data.name.strip(),
        priority=data.priority,
        deadline=data.deadline,
        elapsed_time=data.elapsed_time,
        notes=data.notes,
        completed=False,
    )
    session.add(task)
    session.commit()
    session.refresh(task)
    return task


def update_task(session: Session, task_id: int, owner_id: int, data: TaskUpdate) -> bool:
    task = get_owned_task(session, task_id, owner_id)
    if task is None:
        return False

    task.name = data.name.strip()
    task.priority = data.priority
    task.deadline = data.deadline

    session.add(task)
    session.commit()
    return True


def complete_task(session: Session, task_id: int, owner_id: int) -> bool:
    """Mark a task done. Completing an already completed task still succeeds."""
    task = get_owned_task(session, task_id, owner_id)
    if task is None:
        return False

    task.completed = True
    session.add(task)
    session.commit()
    return True


def delete_task(session: Session, task_id: int, owner_id: int) -> bool:
    task = get_owned_task(session, task_id, owner_id)
    if task is None:
        return False

    session.delete(task)
    session.commit()
    return True


# Activities


def list_activities(
    session: Session,
    owner_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[Activity]:
    """Activities across all of the owner's tasks, bounds inclusive."""
    query = select(Activity).join(Task, Activity.task_id == Task.id).where(Task.user_id == owner_id)

    if start is not None:
        query = query.where(Activity.date >= start)
    if end is not None:
        query = query.where(Activity.date <= end)

    query = query.order_by(Activity.date, Activity.start_time)
    return list(session.exec(query).all())


def list_task_activities(session: Session, task_id: int, owner_id: int) -> Optional[List[Activity]]:
    if get_owned_task(session, task_id, owner_id) is None:
        return None
    query = (
        select(Activity)
        .where(Activity.task_id == task_id)
        .order_by(Activity.date, Activity.start_time)
    )
    return list(session.exec(query).all())


def create_activity(session: Session, owner_id: int, data: ActivityCreate) -> Optional[Activity]:
    if get_owned_task(session, data.task_id, owner_id) is None:
        return None

    activity = Activity(
        task_id=data.task_id,
        date=data.date,
        start_time=data.start_time,
        end_time=data.end_time,
        observations=data.observations,
    )
    session.add(activity)
    session.commit()
    session.refresh(activity)
    return activity


# Notes


def list_task_notes(session: Session, task_id: int, owner_id: int) -> Optional[List[Note]]:
    """Newest first: date descending, then time descending."""
    if get_owned_task(session, task_id, owner_id) is None:
        return None
    query = (
        select(Note)
        .where(Note.task_id == task_id)
        .order_by(Note.date.desc(), Note.time.desc())
    )
    return list(session.exec(query).all())


def create_note(session: Session, owner_id: int, data: NoteCreate) -> Optional[Note]:
    if get_owned_task(session, data.task_id, owner_id) is None:
        return None

    note = Note(task_id=data.task_id, text=data.text, date=data.date, time=data.time)
    session.add(note)
    session.commit()
    session.refresh(note)
    return note
