# taskberry/utils/reports.py
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from taskberry.models.report import ReportType
from taskberry.models.task import Task, TaskStatus, is_overdue, utcnow
from taskberry.schemas.task import TaskStats
from taskberry.schemas.user import UserSnapshot
from taskberry.utils.directory import Directory
from taskberry.utils.permissions import permissions_for


def report_period_start(report_type: ReportType, now: datetime) -> datetime:
    """Start of the day, week (from Sunday) or month that contains ``now``"""
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if report_type == ReportType.daily:
        return midnight
    if report_type == ReportType.weekly:
        # weekday() is 0 on Monday
        return midnight - timedelta(days=(now.weekday() + 1) % 7)
    if report_type == ReportType.monthly:
        return midnight.replace(day=1)
    raise ValueError(f"Unknown report type: {report_type}")


def visible_tasks(
    db: Session, actor: UserSnapshot, directory: Directory, since: Optional[datetime] = None
) -> List[Task]:
    """Tasks ``actor`` may view, most recently updated first"""
    query = db.query(Task)
    if since is not None:
        query = query.filter(Task.last_updated >= since)
    tasks = query.order_by(Task.last_updated.desc()).all()
    return [task for task in tasks if permissions_for(actor, task, directory).can_view]


def summarize_tasks(tasks: Iterable[Task], now: Optional[datetime] = None) -> TaskStats:
    tasks = list(tasks)
    now = now or utcnow()
    return TaskStats(
        total=len(tasks),
        completed=sum(task.status == TaskStatus.completed for task in tasks),
        in_progress=sum(task.status == TaskStatus.in_progress for task in tasks),
        not_started=sum(task.status == TaskStatus.not_started for task in tasks),
        overdue=sum(is_overdue(task.status, task.target_date, now) for task in tasks),
    )
