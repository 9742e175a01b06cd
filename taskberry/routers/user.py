# taskberry/routers/user.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from taskberry.database import get_db
from taskberry.models.task import utcnow
from taskberry.models.user import Role, User, UserStatus
from taskberry.schemas.user import ApprovalRequest, HierarchyUpdate, UserBasic, UserOut, UserPermissions, UserSnapshot
from taskberry.utils.auth import get_actor, get_current_user, get_directory, get_super_admin
from taskberry.utils.directory import Directory
from taskberry.utils.hierarchy import HierarchyManager, check_assignment
from taskberry.utils.permissions import user_permissions_for

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_user_or_404(db: Session, user_id: str) -> User:
    db_user = db.query(User).filter(User.id == user_id).first()
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")
    return db_user


def _apply_hierarchy(db_user: User, request: ApprovalRequest, directory: Directory) -> None:
    """Validate the requested role + links and set them together"""
    error = check_assignment(
        request.role, request.supervisor_id, request.manager_id, directory, target_user_id=db_user.id
    )
    if error is not None:
        logger.info(f"Rejected hierarchy for user {db_user.id}: {error.code}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.to_dict())

    db_user.role = Role(request.role).value
    db_user.supervisor_id = request.supervisor_id or None
    db_user.manager_id = request.manager_id or None


@router.get("/", response_model=List[UserBasic])
def get_active_users(
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_actor)
):
    """Get active users"""
    return directory.list_active()


@router.get("/all", response_model=List[UserBasic])
def get_all_users(
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_super_admin)
):
    """Get every user regardless of status - super admin only"""
    return directory.list_all()


@router.get("/pending", response_model=List[UserOut])
def get_pending_users(
    db: Session = Depends(get_db),
    actor: UserSnapshot = Depends(get_super_admin)
):
    """Get users waiting for approval, oldest first"""
    return db.query(User).filter(
        User.status == UserStatus.pending_approval.value
    ).order_by(User.created_at).all()


@router.get("/me", response_model=UserOut)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information"""
    return current_user


@router.get("/me/permissions", response_model=UserPermissions)
def get_current_user_permissions(actor: UserSnapshot = Depends(get_actor)):
    return user_permissions_for(actor)


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    actor: UserSnapshot = Depends(get_actor)
):
    """Get a specific user by ID"""
    return _get_user_or_404(db, user_id)


@router.get("/{user_id}/team", response_model=List[UserBasic])
def get_team(
    user_id: str,
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_actor)
):
    """Get the team members reporting to a supervisor or manager"""
    user = directory.get_user_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return HierarchyManager(directory).get_team(user)


@router.post("/{user_id}/approve", response_model=UserOut)
def approve_user(
    user_id: str,
    approval: ApprovalRequest,
    db: Session = Depends(get_db),
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_super_admin)
):
    """Approve a pending user into a role, with the supervisor/manager that role requires"""
    db_user = _get_user_or_404(db, user_id)
    if db_user.status != UserStatus.pending_approval.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User is not pending approval"
        )

    _apply_hierarchy(db_user, approval, directory)
    db_user.status = UserStatus.active.value
    db_user.approved_at = utcnow()
    db_user.approved_by = actor.id

    db.commit()
    db.refresh(db_user)
    logger.info(f"User {db_user.id} approved as {db_user.role} by {actor.id}")
    return db_user


@router.post("/{user_id}/reject", status_code=status.HTTP_204_NO_CONTENT)
def reject_user(
    user_id: str,
    db: Session = Depends(get_db),
    actor: UserSnapshot = Depends(get_super_admin)
):
    """Reject a pending registration; the record is removed"""
    db_user = _get_user_or_404(db, user_id)
    if db_user.status != UserStatus.pending_approval.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Only pending users can be rejected"
        )

    db.delete(db_user)
    db.commit()
    logger.info(f"Registration {user_id} rejected by {actor.id}")
    return None


@router.put("/{user_id}/hierarchy", response_model=UserOut)
def update_hierarchy(
    user_id: str,
    update: HierarchyUpdate,
    db: Session = Depends(get_db),
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_super_admin)
):
    """Change an approved user's role and reporting lines.

    Reports of the edited user keep their own links, so the new chain applies to them immediately.
    """
    db_user = _get_user_or_404(db, user_id)
    if db_user.status == UserStatus.pending_approval.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Pending users must be approved first"
        )
    if db_user.id == actor.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot change your own role"
        )

    _apply_hierarchy(db_user, update, directory)
    db.commit()
    db.refresh(db_user)
    logger.info(f"User {db_user.id} hierarchy set to {db_user.role} by {actor.id}")
    return db_user


@router.post("/{user_id}/suspend", response_model=UserOut)
def suspend_user(
    user_id: str,
    db: Session = Depends(get_db),
    actor: UserSnapshot = Depends(get_super_admin)
):
    db_user = _get_user_or_404(db, user_id)
    if db_user.id == actor.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot suspend your own account"
        )
    if db_user.status != UserStatus.active.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Only active users can be suspended"
        )

    db_user.status = UserStatus.suspended.value
    db.commit()
    db.refresh(db_user)
    logger.info(f"User {db_user.id} suspended by {actor.id}")
    return db_user


@router.post("/{user_id}/activate", response_model=UserOut)
def activate_user(
    user_id: str,
    db: Session = Depends(get_db),
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_super_admin)
):
    """Reactivate a suspended user; their stored hierarchy must still be valid"""
    db_user = _get_user_or_404(db, user_id)
    if db_user.status != UserStatus.suspended.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Only suspended users can be reactivated"
        )

    user = directory.get_user_by_id(db_user.id)
    error = check_assignment(
        user.role or user.role_label, user.supervisor_id, user.manager_id, directory, target_user_id=user.id
    )
    if error is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.to_dict())

    db_user.status = UserStatus.active.value
    db.commit()
    db.refresh(db_user)
    logger.info(f"User {db_user.id} reactivated by {actor.id}")
    return db_user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    actor: UserSnapshot = Depends(get_super_admin)
):
    """Delete a user. Users that reported to them keep a dangling link."""
    db_user = _get_user_or_404(db, user_id)

    # Prevent users from deleting themselves
    if db_user.id == actor.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account"
        )

    db.delete(db_user)
    db.commit()
    logger.info(f"User {user_id} deleted by {actor.id}")
    return None
