# taskberry/routers/task.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from taskberry.database import get_db
from taskberry.models.task import Task, TaskStatus, utcnow
from taskberry.schemas.task import (
    TaskAccessOut, TaskCreate, TaskOut, TaskReassign, TaskStats, TaskStatusUpdate, TaskUpdate,
)
from taskberry.schemas.user import UserBasic, UserSnapshot
from taskberry.utils.assignment import assignable_users, can_assign
from taskberry.utils.auth import get_actor, get_directory
from taskberry.utils.directory import Directory
from taskberry.utils.permissions import can_transition, field_permissions_for, permissions_for
from taskberry.utils.reports import summarize_tasks, visible_tasks

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])

# TaskUpdate field -> flag on TaskFieldPermissions
FIELD_FLAGS = {
    "title": "can_edit_title",
    "description": "can_edit_description",
    "assignee_id": "can_edit_assignee",
    "target_date": "can_edit_target_date",
    "status": "can_edit_status",
    "priority": "can_edit_priority",
    "tags": "can_edit_tags",
    "remarks": "can_edit_remarks",
}


def _get_task_or_404(db: Session, task_id: str) -> Task:
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return task


def _require(allowed: bool, detail: str) -> None:
    if not allowed:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def _set_status(task: Task, new_status: TaskStatus) -> None:
    # completed_date follows the status in both directions
    if new_status == TaskStatus.completed and task.status != TaskStatus.completed:
        task.completed_date = utcnow()
    elif new_status != TaskStatus.completed:
        task.completed_date = None
    task.status = new_status


def _reassign(task: Task, assignee_id: str) -> None:
    # assigned_date keeps the original assignment time
    task.assignee_id = assignee_id


@router.get("/", response_model=List[TaskOut])
def get_tasks(
    status: Optional[TaskStatus] = None,
    assignee_id: Optional[str] = None,
    db: Session = Depends(get_db),
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_actor)
):
    """Get the tasks the current user is allowed to view, most recently updated first"""
    tasks = visible_tasks(db, actor, directory)
    if status:
        tasks = [task for task in tasks if task.status == status]
    if assignee_id:
        tasks = [task for task in tasks if task.assignee_id == assignee_id]
    return tasks


@router.get("/stats", response_model=TaskStats)
def get_task_stats(
    db: Session = Depends(get_db),
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_actor)
):
    return summarize_tasks(visible_tasks(db, actor, directory))


@router.get("/assignable-users", response_model=List[UserBasic])
def get_assignable_users(
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_actor)
):
    """Users the current user may assign a new task to"""
    return assignable_users(actor, directory)


@router.post("/", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    db: Session = Depends(get_db),
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_actor)
):
    if not can_assign(actor, task.assignee_id, directory):
        logger.info(f"User {actor.id} may not assign tasks to {task.assignee_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You cannot assign tasks to this user"
        )

    now = utcnow()
    db_task = Task(
        title=task.title,
        description=task.description,
        assignee_id=task.assignee_id,
        created_by=actor.id,
        target_date=task.target_date,
        priority=task.priority,
        tags=task.tags,
        remarks=task.remarks,
        assigned_date=now,
        last_updated=now,
    )
    _set_status(db_task, task.status)

    db.add(db_task)
    db.commit()
    db.refresh(db_task)

    logger.info(f"Task {db_task.id} created by {actor.id} for {db_task.assignee_id}")
    return db_task


@router.get("/{task_id}", response_model=TaskOut)
def get_task(
    task_id: str,
    db: Session = Depends(get_db),
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_actor)
):
    task = _get_task_or_404(db, task_id)
    _require(permissions_for(actor, task, directory).can_view, "You don't have permission to view this task")
    return task


@router.get("/{task_id}/permissions", response_model=TaskAccessOut)
def get_task_permissions(
    task_id: str,
    db: Session = Depends(get_db),
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_actor)
):
    """What the current user may do with a task, overall and per form field"""
    task = _get_task_or_404(db, task_id)
    return TaskAccessOut(
        task_id=task.id,
        permissions=permissions_for(actor, task, directory),
        fields=field_permissions_for(actor, task, directory),
    )


@router.get("/{task_id}/assignable-users", response_model=List[UserBasic])
def get_reassignable_users(
    task_id: str,
    db: Session = Depends(get_db),
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_actor)
):
    """Users the task may be reassigned to; always includes the current assignee"""
    task = _get_task_or_404(db, task_id)
    _require(permissions_for(actor, task, directory).can_view, "You don't have permission to view this task")
    return assignable_users(actor, directory, task)


@router.put("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: str,
    task_update: TaskUpdate,
    db: Session = Depends(get_db),
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_actor)
):
    """Partial update; every supplied field must be editable by the current user"""
    db_task = _get_task_or_404(db, task_id)
    perms = permissions_for(actor, db_task, directory)
    _require(perms.can_view, "You don't have permission to view this task")

    update_data = task_update.model_dump(exclude_unset=True)
    fields = field_permissions_for(actor, db_task, directory)
    denied = sorted(name for name in update_data if not getattr(fields, FIELD_FLAGS[name]))
    if denied:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You don't have permission to change: {', '.join(denied)}"
        )

    new_assignee = update_data.pop("assignee_id", None)
    if new_assignee is not None:
        _require(can_assign(actor, new_assignee, directory, db_task), "You cannot assign tasks to this user")
        _reassign(db_task, new_assignee)

    new_status = update_data.pop("status", None)
    if new_status is not None and new_status != db_task.status:
        _set_status(db_task, new_status)

    for field, value in update_data.items():
        if field in ("title", "description", "target_date") and value is None:
            continue
        setattr(db_task, field, value)

    db_task.last_updated = utcnow()
    db.commit()
    db.refresh(db_task)

    logger.info(f"Task {db_task.id} updated by {actor.id}")
    return db_task


@router.patch("/{task_id}/status", response_model=TaskOut)
def update_task_status(
    task_id: str,
    status_update: TaskStatusUpdate,
    db: Session = Depends(get_db),
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_actor)
):
    db_task = _get_task_or_404(db, task_id)
    perms = permissions_for(actor, db_task, directory)
    _require(perms.can_update_status, "You don't have permission to update this task's status")

    if status_update.status != db_task.status:
        if not can_transition(perms, db_task.status, status_update.status):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid status transition")
        old_status = db_task.status
        _set_status(db_task, status_update.status)
        logger.info(f"Task {db_task.id} status {old_status.value} -> {db_task.status.value} by {actor.id}")

    if status_update.remarks is not None:
        db_task.remarks = status_update.remarks

    db_task.last_updated = utcnow()
    db.commit()
    db.refresh(db_task)
    return db_task


@router.patch("/{task_id}/assignee", response_model=TaskOut)
def reassign_task(
    task_id: str,
    reassign: TaskReassign,
    db: Session = Depends(get_db),
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_actor)
):
    db_task = _get_task_or_404(db, task_id)
    _require(permissions_for(actor, db_task, directory).can_reassign, "You don't have permission to reassign this task")
    _require(can_assign(actor, reassign.assignee_id, directory, db_task), "You cannot assign tasks to this user")

    previous = db_task.assignee_id
    _reassign(db_task, reassign.assignee_id)
    db_task.last_updated = utcnow()
    db.commit()
    db.refresh(db_task)

    logger.info(f"Task {db_task.id} reassigned {previous} -> {db_task.assignee_id} by {actor.id}")
    return db_task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    db: Session = Depends(get_db),
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_actor)
):
    db_task = _get_task_or_404(db, task_id)
    _require(permissions_for(actor, db_task, directory).can_delete, "Only super admins can delete tasks")

    db.delete(db_task)
    db.commit()
    logger.info(f"Task {task_id} deleted by {actor.id}")
    return None
