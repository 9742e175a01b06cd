# taskberry/utils/hierarchy.py
from typing import Dict, List, Optional

from taskberry.models.user import Role
from taskberry.schemas.hierarchy import HierarchyIssue, RoleInfo, SupervisorTeam, TeamHierarchy
from taskberry.schemas.user import UserBasic, UserSnapshot
from taskberry.utils.directory import Directory


class HierarchyValidationError(Exception):
    """Base class for rejected role / reporting-line assignments.

    Every subclass is recoverable: the caller re-prompts for corrected input.
    """
    code = "HierarchyValidationError"
    default_message = "Invalid hierarchy assignment"

    def __init__(self, message: Optional[str] = None, **context):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "message": self.message}

    def __eq__(self, other):
        return type(self) is type(other) and self.message == other.message

    def __hash__(self):
        return hash((type(self), self.message))


class InvalidRole(HierarchyValidationError):
    code = "InvalidRole"
    default_message = "Role must be one of member, supervisor, manager, super_admin"


class MissingSupervisor(HierarchyValidationError):
    code = "MissingSupervisor"
    default_message = "Members must have a supervisor assigned"


class MissingManager(HierarchyValidationError):
    code = "MissingManager"
    default_message = "Members and supervisors must have a manager assigned"


class UnexpectedSupervisor(HierarchyValidationError):
    code = "UnexpectedSupervisor"
    default_message = "Supervisors do not report to a supervisor"


class UnexpectedHierarchyLink(HierarchyValidationError):
    code = "UnexpectedHierarchyLink"
    default_message = "Managers and super admins cannot have a supervisor or manager"


class SupervisorNotFound(HierarchyValidationError):
    code = "SupervisorNotFound"
    default_message = "Supervisor not found"


class SupervisorWrongRole(HierarchyValidationError):
    code = "SupervisorWrongRole"
    default_message = "Assigned supervisor does not have the supervisor role"


class ManagerNotFound(HierarchyValidationError):
    code = "ManagerNotFound"
    default_message = "Manager not found"


class ManagerWrongRole(HierarchyValidationError):
    code = "ManagerWrongRole"
    default_message = "Assigned manager does not have the manager role"


class SelfReference(HierarchyValidationError):
    code = "SelfReference"
    default_message = "A user cannot be their own supervisor or manager"


def _present(value) -> Optional[str]:
    return str(value) if value not in (None, "") else None


def _parse_role(target_role) -> Optional[Role]:
    # Strict: legacy labels are normalised by the Directory, not here
    if isinstance(target_role, Role):
        return target_role
    if not isinstance(target_role, str):
        return None
    try:
        return Role(target_role)
    except ValueError:
        return None


def check_assignment(
    target_role,
    supervisor_id: Optional[str],
    manager_id: Optional[str],
    directory: Directory,
    target_user_id: Optional[str] = None,
) -> Optional[HierarchyValidationError]:
    """Return the first rule the proposed role + links break, or None if they are valid"""
    role = _parse_role(target_role)
    if role is None:
        return InvalidRole(f"Unknown role '{target_role}'", role=target_role)

    supervisor_id = _present(supervisor_id)
    manager_id = _present(manager_id)

    if role == Role.member:
        if supervisor_id is None:
            return MissingSupervisor()
        if manager_id is None:
            return MissingManager("Members must have a manager assigned")
    elif role == Role.supervisor:
        if manager_id is None:
            return MissingManager("Supervisors must have a manager assigned")
        if supervisor_id is not None:
            return UnexpectedSupervisor(supervisor_id=supervisor_id)
    elif supervisor_id is not None or manager_id is not None:
        return UnexpectedHierarchyLink(
            f"{role.value} users cannot have a supervisor or manager",
            supervisor_id=supervisor_id,
            manager_id=manager_id,
        )

    if supervisor_id is not None:
        supervisor = directory.get_user_by_id(supervisor_id)
        if supervisor is None:
            return SupervisorNotFound(f"Supervisor '{supervisor_id}' not found", supervisor_id=supervisor_id)
        if supervisor.role != Role.supervisor:
            return SupervisorWrongRole(
                f"User '{supervisor_id}' is not a supervisor", supervisor_id=supervisor_id
            )

    if manager_id is not None:
        manager = directory.get_user_by_id(manager_id)
        if manager is None:
            return ManagerNotFound(f"Manager '{manager_id}' not found", manager_id=manager_id)
        if manager.role != Role.manager:
            return ManagerWrongRole(f"User '{manager_id}' is not a manager", manager_id=manager_id)

    target_user_id = _present(target_user_id)
    if target_user_id is not None and target_user_id in (supervisor_id, manager_id):
        return SelfReference(user_id=target_user_id)

    return None


def validate_assignment(
    target_role,
    supervisor_id: Optional[str],
    manager_id: Optional[str],
    directory: Directory,
    target_user_id: Optional[str] = None,
) -> None:
    """Raise the first HierarchyValidationError for the proposed assignment"""
    error = check_assignment(target_role, supervisor_id, manager_id, directory, target_user_id)
    if error is not None:
        raise error


def role_catalogue() -> List[RoleInfo]:
    return [
        RoleInfo(
            role=role.value,
            seniority=role.seniority,
            requires_supervisor=role == Role.member,
            requires_manager=role in (Role.member, Role.supervisor),
        )
        for role in sorted(Role)
    ]


class HierarchyManager:
    """Reporting-line queries over a directory snapshot"""

    def __init__(self, directory: Directory):
        self.directory = directory

    def get_supervisory_chain(self, user: UserSnapshot) -> List[UserSnapshot]:
        """The user's supervisor, the user's manager and the supervisor's manager (those that resolve)"""
        chain: List[UserSnapshot] = []

        def add(user_id):
            found = self.directory.get_user_by_id(user_id)
            if found is not None and all(link.id != found.id for link in chain):
                chain.append(found)

        add(user.supervisor_id)
        add(user.manager_id)
        supervisor = self.directory.get_user_by_id(user.supervisor_id)
        if supervisor is not None:
            add(supervisor.manager_id)
        return chain

    def is_hierarchy_related(self, actor: UserSnapshot, user: UserSnapshot) -> bool:
        """True if actor sits above user on the supervisor/manager chain"""
        if actor.id == user.id:
            return False
        return any(link.id == actor.id for link in self.get_supervisory_chain(user))

    def get_direct_reports(self, user: UserSnapshot) -> List[UserSnapshot]:
        if user.role == Role.manager:
            reports = [
                u for u in self.directory
                if u.manager_id == user.id and u.role in (Role.supervisor, Role.member)
            ]
        elif user.role == Role.supervisor:
            reports = [u for u in self.directory if u.supervisor_id == user.id and u.role == Role.member]
        else:
            reports = []
        return self.directory.sort_by_name(reports)

    def get_team(self, user: UserSnapshot) -> List[UserSnapshot]:
        """A manager's supervisors and members (including members of those supervisors); a supervisor's members"""
        if user.role != Role.manager:
            return self.get_direct_reports(user)

        team = {u.id: u for u in self.get_direct_reports(user)}
        supervisor_ids = {u.id for u in team.values() if u.role == Role.supervisor}
        for u in self.directory:
            if u.role == Role.member and u.supervisor_id in supervisor_ids:
                team.setdefault(u.id, u)
        return self.directory.sort_by_name(team.values())

    def get_team_hierarchy(self, manager: UserSnapshot) -> TeamHierarchy:
        supervisors = [u for u in self.get_direct_reports(manager) if u.role == Role.supervisor]
        supervisor_ids = {s.id for s in supervisors}
        direct_members = [
            u for u in self.get_direct_reports(manager)
            if u.role == Role.member and u.supervisor_id not in supervisor_ids
        ]
        return TeamHierarchy(
            manager=UserBasic.model_validate(manager),
            supervisors=[
                SupervisorTeam(
                    supervisor=UserBasic.model_validate(supervisor),
                    members=[UserBasic.model_validate(m) for m in self.get_direct_reports(supervisor)],
                )
                for supervisor in supervisors
            ],
            direct_members=[UserBasic.model_validate(m) for m in direct_members],
        )

    def diagnose(self) -> List[HierarchyIssue]:
        """Active users whose stored role and links no longer pass validation"""
        issues = []
        for user in self.directory.list_active():
            if user.role is None:
                error = InvalidRole(f"Unknown role '{user.role_label}'")
            else:
                error = check_assignment(
                    user.role, user.supervisor_id, user.manager_id, self.directory, user.id
                )
            if error is not None:
                issues.append(
                    HierarchyIssue(
                        user_id=user.id,
                        name=user.name,
                        role=user.role_label,
                        code=error.code,
                        message=error.message,
                    )
                )
        return issues
