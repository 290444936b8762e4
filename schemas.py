from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import date as date_type, time as time_type


class ApiModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class LoginRequest(ApiModel):
    """Schema for the login form"""
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class UserPublic(ApiModel):
    """User fields safe to return to the client"""
    id: int
    name: str
    email: str


class LoginResponse(ApiModel):
    """Schema for a successful login"""
    token: str
    user: UserPublic


class TaskCreate(ApiModel):
    """Schema for creating a new task"""
    name: str = Field(..., min_length=1, max_length=200)
    priority: int
    deadline: date_type
    elapsed_time: str = Field("0m", max_length=50)
    notes: str = ""


class TaskUpdate(ApiModel):
    """Schema for updating a task; only these three fields are editable"""
    name: str = Field(..., min_length=1, max_length=200)
    priority: int
    deadline: date_type


class TaskResponse(ApiModel):
    """Schema for task response"""
    id: int
    user_id: int
    name: str
    priority: int
    deadline: Optional[date_type]
    elapsed_time: str
    notes: str
    completed: bool


class ActivityCreate(ApiModel):
    """Schema for logging an activity on a task"""
    task_id: int
    date: date_type
    start_time: time_type
    end_time: time_type
    observations: str = ""


class ActivityResponse(ApiModel):
    id: int
    task_id: int
    date: date_type
    start_time: time_type
    end_time: time_type
    observations: str


class NoteCreate(ApiModel):
    """Schema for adding a note to a task"""
    task_id: int
    text: str = Field(..., min_length=1)
    date: date_type
    time: time_type


class NoteResponse(ApiModel):
    id: int
    task_id: int
    text: str
    date: date_type
    time: time_type


class SuccessResponse(BaseModel):
    """Acknowledgement for mutations that return no entity"""
    success: bool = True
