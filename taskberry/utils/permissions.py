# taskberry/utils/permissions.py
from typing import Optional

from taskberry.models.task import TaskStatus
from taskberry.models.user import Role
from taskberry.schemas.task import TaskFieldPermissions, TaskPermissions
from taskberry.schemas.user import UserPermissions, UserSnapshot
from taskberry.utils.directory import Directory
from taskberry.utils.hierarchy import HierarchyManager

NO_ACCESS = TaskPermissions()

FULL_ACCESS = TaskPermissions(
    can_view=True, can_edit=True, can_reassign=True, can_update_status=True, can_delete=True
)

# Creator and hierarchy rows share the same flags
MANAGING_ACCESS = TaskPermissions(
    can_view=True, can_edit=True, can_reassign=True, can_update_status=True, can_delete=False
)

ASSIGNEE_ACCESS = TaskPermissions(
    can_view=True, can_edit=False, can_reassign=False, can_update_status=True, can_delete=False
)


def permissions_for(actor: UserSnapshot, task, directory: Directory) -> TaskPermissions:
    """Capabilities of ``actor`` on ``task``. Never raises; anything unexpected yields no access."""
    current = directory.resolve_actor(actor)
    if current is None or task is None:
        return NO_ACCESS

    created_by = getattr(task, "created_by", None)
    assignee_id = getattr(task, "assignee_id", None)
    if created_by in (None, "") or assignee_id in (None, ""):
        return NO_ACCESS

    if current.role == Role.super_admin:
        return FULL_ACCESS
    if current.role is None:
        return NO_ACCESS
    if str(created_by) == current.id:
        return MANAGING_ACCESS
    if str(assignee_id) == current.id:
        return ASSIGNEE_ACCESS

    assignee = directory.get_user_by_id(assignee_id)
    if assignee is not None and HierarchyManager(directory).is_hierarchy_related(current, assignee):
        return MANAGING_ACCESS

    return NO_ACCESS


def can_transition(permissions: TaskPermissions, current, target) -> bool:
    """Any move between two different states is allowed with can_update_status; completed can be reopened"""
    if not permissions.can_update_status:
        return False
    try:
        return TaskStatus(current) != TaskStatus(target)
    except ValueError:
        return False


def field_permissions_for(actor: UserSnapshot, task, directory: Directory) -> TaskFieldPermissions:
    """Per-field edit flags for the task form. With no task (creation) every field is open."""
    if task is None:
        if directory.resolve_actor(actor) is None:
            return TaskFieldPermissions()
        return TaskFieldPermissions(**{name: True for name in TaskFieldPermissions.model_fields})

    perms = permissions_for(actor, task, directory)
    return TaskFieldPermissions(
        can_edit_title=perms.can_edit,
        can_edit_description=perms.can_edit,
        can_edit_target_date=perms.can_edit,
        can_edit_priority=perms.can_edit,
        can_edit_tags=perms.can_edit,
        can_edit_assignee=perms.can_reassign,
        can_edit_status=perms.can_update_status,
        can_edit_remarks=perms.can_update_status,
    )


def user_permissions_for(actor: Optional[UserSnapshot]) -> UserPermissions:
    if actor is None or not actor.is_active or actor.role is None:
        return UserPermissions()

    role = actor.role
    return UserPermissions(
        can_create_tasks=True,
        can_manage_team=role >= Role.supervisor,
        can_approve_users=role == Role.super_admin,
        can_view_reports=role >= Role.manager,
        can_delete_tasks=role == Role.super_admin,
        can_manage_settings=role == Role.super_admin,
    )
