# taskberry/schemas/task.py
from pydantic import BaseModel, computed_field, field_validator
from datetime import datetime, timezone
from typing import Optional, List

from taskberry.models.task import TaskStatus, TaskPriority, is_overdue


def _clean_title(v):
    if v is None:
        return v
    if not v.strip():
        raise ValueError('Title cannot be empty')
    return v.strip()


def _naive_utc(v):
    # DateTime columns are naive UTC
    if v is not None and v.tzinfo is not None:
        return v.astimezone(timezone.utc).replace(tzinfo=None)
    return v


class TaskCreate(BaseModel):
    title: str
    description: str = ""
    assignee_id: str
    target_date: datetime
    status: TaskStatus = TaskStatus.not_started
    priority: Optional[TaskPriority] = None
    tags: List[str] = []
    remarks: Optional[str] = None

    @field_validator('title')
    @classmethod
    def title_must_not_be_blank(cls, v):
        return _clean_title(v)

    @field_validator('target_date')
    @classmethod
    def target_date_to_utc(cls, v):
        return _naive_utc(v)


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    assignee_id: Optional[str] = None
    target_date: Optional[datetime] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    tags: Optional[List[str]] = None
    remarks: Optional[str] = None

    @field_validator('title')
    @classmethod
    def title_must_not_be_blank(cls, v):
        return _clean_title(v)

    @field_validator('target_date')
    @classmethod
    def target_date_to_utc(cls, v):
        return _naive_utc(v)


class TaskStatusUpdate(BaseModel):
    status: TaskStatus
    remarks: Optional[str] = None


class TaskReassign(BaseModel):
    assignee_id: str


class TaskOut(BaseModel):
    id: str
    title: str
    description: str
    assignee_id: str
    created_by: str
    status: TaskStatus
    priority: Optional[TaskPriority] = None
    tags: List[str] = []
    remarks: Optional[str] = None
    assigned_date: datetime
    target_date: datetime
    completed_date: Optional[datetime] = None
    last_updated: datetime

    model_config = {
        "from_attributes": True
    }

    @field_validator('tags', mode='before')
    @classmethod
    def tags_default(cls, v):
        return v or []

    @computed_field
    @property
    def is_overdue(self) -> bool:
        return is_overdue(self.status, self.target_date)


class TaskStats(BaseModel):
    total: int
    completed: int
    in_progress: int
    not_started: int
    overdue: int


class TaskPermissions(BaseModel):
    can_view: bool = False
    can_edit: bool = False
    can_reassign: bool = False
    can_update_status: bool = False
    can_delete: bool = False

    model_config = {
        "frozen": True
    }


class TaskFieldPermissions(BaseModel):
    can_edit_title: bool = False
    can_edit_description: bool = False
    can_edit_assignee: bool = False
    can_edit_target_date: bool = False
    can_edit_status: bool = False
    can_edit_remarks: bool = False
    can_edit_priority: bool = False
    can_edit_tags: bool = False


class TaskAccessOut(BaseModel):
    task_id: str
    permissions: TaskPermissions
    fields: TaskFieldPermissions
