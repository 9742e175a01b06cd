# taskberry/models/task.py
import enum
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, String, Text, DateTime, Enum, JSON, func

from taskberry.database import Base
from taskberry.models.user import new_id


class TaskStatus(str, enum.Enum):
    not_started = "not_started"
    in_progress = "in_progress"
    completed = "completed"


class TaskPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the naive DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def is_overdue(status, target_date: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """Overdue only affects rendering; it never changes the stored status"""
    if target_date is None or status == TaskStatus.completed:
        return False
    if now is None:
        now = datetime.now(timezone.utc) if target_date.tzinfo else utcnow()
    return target_date < now


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(64), primary_key=True, index=True, default=new_id)
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")

    # Weak references to users.id
    assignee_id = Column(String(64), nullable=False, index=True)
    created_by = Column(String(64), nullable=False, index=True)

    status = Column(Enum(TaskStatus), default=TaskStatus.not_started, nullable=False)
    priority = Column(Enum(TaskPriority), nullable=True)
    tags = Column(JSON, default=list)
    remarks = Column(Text, nullable=True)

    assigned_date = Column(DateTime, default=utcnow, nullable=False)
    target_date = Column(DateTime, nullable=False)
    completed_date = Column(DateTime, nullable=True)
    last_updated = Column(DateTime, default=utcnow, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
