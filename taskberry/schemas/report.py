# taskberry/schemas/report.py
from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import List

from taskberry.models.report import ReportType
from taskberry.schemas.task import TaskOut, TaskStats


class ReportCreate(BaseModel):
    title: str
    type: ReportType

    @field_validator('title')
    @classmethod
    def title_must_not_be_blank(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()


class ReportOut(BaseModel):
    id: str
    title: str
    type: ReportType
    created_by: str
    generated_at: datetime
    period_start: datetime
    task_ids: List[str] = []
    summary: TaskStats

    model_config = {
        "from_attributes": True
    }

    @field_validator('task_ids', mode='before')
    @classmethod
    def task_ids_default(cls, v):
        return v or []


class ReportDetail(ReportOut):
    # Tasks of the report that still exist and are visible to the reader
    tasks: List[TaskOut] = []
