# taskberry/routers/report.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from taskberry.database import get_db
from taskberry.models.report import Report
from taskberry.models.task import Task, utcnow
from taskberry.models.user import Role
from taskberry.schemas.report import ReportCreate, ReportDetail, ReportOut
from taskberry.schemas.task import TaskOut
from taskberry.schemas.user import UserSnapshot
from taskberry.utils.auth import get_actor, get_directory
from taskberry.utils.directory import Directory
from taskberry.utils.permissions import permissions_for, user_permissions_for
from taskberry.utils.reports import report_period_start, summarize_tasks, visible_tasks

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


def get_report_viewer(actor: UserSnapshot = Depends(get_actor)) -> UserSnapshot:
    if not user_permissions_for(actor).can_view_reports:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only managers and super admins can use reports"
        )
    return actor


def _can_read(actor: UserSnapshot, report: Report) -> bool:
    return actor.role == Role.super_admin or report.created_by == actor.id


@router.get("/", response_model=List[ReportOut])
def get_reports(
    db: Session = Depends(get_db),
    actor: UserSnapshot = Depends(get_report_viewer)
):
    """Reports the current user generated (every report for super admins), newest first"""
    query = db.query(Report)
    if actor.role != Role.super_admin:
        query = query.filter(Report.created_by == actor.id)
    return query.order_by(Report.generated_at.desc()).all()


@router.post("/", response_model=ReportOut, status_code=status.HTTP_201_CREATED)
def generate_report(
    request: ReportCreate,
    db: Session = Depends(get_db),
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_report_viewer)
):
    """Snapshot the tasks updated since the start of the day, week or month"""
    now = utcnow()
    period_start = report_period_start(request.type, now)
    tasks = visible_tasks(db, actor, directory, since=period_start)

    report = Report(
        title=request.title,
        type=request.type,
        created_by=actor.id,
        generated_at=now,
        period_start=period_start,
        task_ids=[task.id for task in tasks],
        summary=summarize_tasks(tasks, now).model_dump(),
    )
    db.add(report)
    db.commit()
    db.refresh(report)

    logger.info(f"Report {report.id} ({report.type.value}) generated by {actor.id} with {len(tasks)} tasks")
    return report


@router.get("/{report_id}", response_model=ReportDetail)
def get_report(
    report_id: str,
    db: Session = Depends(get_db),
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_report_viewer)
):
    report = db.query(Report).filter(Report.id == report_id).first()
    if not report:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
    if not _can_read(actor, report):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to view this report"
        )

    tasks = []
    if report.task_ids:
        tasks = db.query(Task).filter(Task.id.in_(report.task_ids)).order_by(Task.last_updated.desc()).all()

    readable = [TaskOut.model_validate(task) for task in tasks if permissions_for(actor, task, directory).can_view]
    return ReportDetail(**ReportOut.model_validate(report).model_dump(), tasks=readable)
