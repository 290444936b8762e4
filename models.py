from sqlmodel import SQLModel, Field
from datetime import date as date_type, time as time_type
from typing import Optional


class User(SQLModel, table=True):
    """Account provisioned out-of-band; the API only reads it."""
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=120)
    email: str = Field(max_length=255, unique=True, index=True)
    # bcrypt hash, never the plaintext
    password: str = Field(max_length=255)


class Task(SQLModel, table=True):
    """Task owned by a single user"""
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    name: str = Field(max_length=200)
    priority: int = Field(default=0, index=True)
    deadline: Optional[date_type] = None
    elapsed_time: str = Field(default="0m", max_length=50)
    notes: str = Field(default="")
    completed: bool = Field(default=False, index=True)


class Activity(SQLModel, table=True):
    """Time interval logged against a task"""
    __tablename__ = "activities"

    id: Optional[int] = Field(default=None, primary_key=True)
    task_id: int = Field(foreign_key="tasks.id", ondelete="CASCADE", index=True)
    date: date_type
    start_time: time_type
    end_time: time_type
    observations: str = Field(default="")


class Note(SQLModel, table=True):
    """Free-text note attached to a task"""
    __tablename__ = "notes"

    id: Optional[int] = Field(default=None, primary_key=True)
    task_id: int = Field(foreign_key="tasks.id", ondelete="CASCADE", index=True)
    text: str
    date: date_type
    time: time_type
