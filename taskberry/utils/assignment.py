# taskberry/utils/assignment.py
from typing import List

from taskberry.models.user import Role
from taskberry.schemas.user import UserSnapshot
from taskberry.utils.directory import Directory


def _role_based_assignees(actor: UserSnapshot, directory: Directory) -> List[UserSnapshot]:
    active = directory.list_active()

    if actor.role == Role.super_admin:
        return [u for u in active if u.id != actor.id]

    if actor.role == Role.manager:
        # Direct reports only; members under the manager's supervisors are not reachable
        return [
            u for u in active
            if u.id != actor.id
            and u.role in (Role.supervisor, Role.member)
            and u.manager_id == actor.id
        ]

    if actor.role == Role.supervisor:
        return [actor] + [
            u for u in active
            if u.role == Role.member and u.supervisor_id == actor.id
        ]

    if actor.role == Role.member:
        return [actor]

    return []


def assignable_users(actor: UserSnapshot, directory: Directory, task=None) -> List[UserSnapshot]:
    """Users the actor may set as assignee, ordered by name.

    Pass ``task`` when reassigning: its current assignee is always part of the
    result so the existing selection stays valid.
    """
    current = directory.resolve_actor(actor)
    if current is None:
        return []

    users = {u.id: u for u in _role_based_assignees(current, directory)}
    if task is not None:
        assignee = directory.get_user_by_id(getattr(task, "assignee_id", None))
        if assignee is not None:
            users.setdefault(assignee.id, assignee)
    return directory.sort_by_name(users.values())


def can_assign(actor: UserSnapshot, assignee_id: str, directory: Directory, task=None) -> bool:
    return any(u.id == assignee_id for u in assignable_users(actor, directory, task))
