# taskberry/utils/directory.py
import logging
from typing import Dict, Iterable, Iterator, List, Optional

from sqlalchemy.orm import Session

from taskberry.models.user import Role, User, UserStatus
from taskberry.schemas.user import UserSnapshot

logger = logging.getLogger(__name__)

# Labels that older clients and records still carry
LEGACY_ROLE_ALIASES = {
    "team_member": Role.member,
    "teammember": Role.member,
    "superadmin": Role.super_admin,
}


def normalize_role(label) -> Optional[Role]:
    """Map a stored role label onto Role, or None when it is not recognised.

    Unknown labels are never replaced by a default role.
    """
    if label is None:
        return None
    if isinstance(label, Role):
        return label
    key = str(label).strip().lower().replace("-", "_").replace(" ", "_")
    if not key:
        return None
    try:
        return Role(key)
    except ValueError:
        return LEGACY_ROLE_ALIASES.get(key)


def normalize_status(label) -> UserStatus:
    if isinstance(label, UserStatus):
        return label
    key = str(label or "").strip().lower().replace("-", "_")
    try:
        return UserStatus(key)
    except ValueError:
        # Records without a recognisable status grant nothing
        return UserStatus.pending_approval


def _field(record, *names):
    for name in names:
        if isinstance(record, dict):
            if record.get(name) not in (None, ""):
                return record[name]
        else:
            value = getattr(record, name, None)
            if value not in (None, ""):
                return value
    return None


def _optional_id(value) -> Optional[str]:
    return str(value) if value not in (None, "") else None


def to_snapshot(record) -> UserSnapshot:
    """Convert an ORM row or a JSON-like dict (``id``/``_id``, snake or camel case) to a UserSnapshot"""
    if isinstance(record, UserSnapshot):
        return record

    user_id = _field(record, "id", "_id")
    if user_id is None:
        raise ValueError("User record has no id")

    raw_role = _field(record, "role")
    return UserSnapshot(
        id=str(user_id),
        name=str(_field(record, "name") or ""),
        email=str(_field(record, "email") or ""),
        role=normalize_role(raw_role),
        role_label=str(raw_role) if raw_role is not None else None,
        status=normalize_status(_field(record, "status")),
        supervisor_id=_optional_id(_field(record, "supervisor_id", "supervisorId")),
        manager_id=_optional_id(_field(record, "manager_id", "managerId")),
    )


def _by_name(user: UserSnapshot):
    return (user.name.casefold(), user.id)


class Directory:
    """Read-only, point-in-time view over every known user, keyed by id"""

    def __init__(self, users: Iterable[UserSnapshot] = ()):
        self._by_id: Dict[str, UserSnapshot] = {}
        self._by_email: Dict[str, UserSnapshot] = {}
        for user in users:
            if user.id in self._by_id:
                raise ValueError(f"Duplicate user id in directory: {user.id}")
            self._by_id[user.id] = user
            if user.email:
                self._by_email[user.email.casefold()] = user

    @classmethod
    def from_records(cls, records: Iterable) -> "Directory":
        return cls(to_snapshot(record) for record in records)

    @classmethod
    def from_session(cls, db: Session) -> "Directory":
        """Take a snapshot of the users table"""
        directory = cls.from_records(db.query(User).all())
        logger.debug(f"Loaded directory snapshot with {len(directory)} users")
        return directory

    def get_user_by_id(self, user_id) -> Optional[UserSnapshot]:
        if user_id is None:
            return None
        return self._by_id.get(str(user_id))

    def get_user_by_email(self, email: str) -> Optional[UserSnapshot]:
        if not email:
            return None
        return self._by_email.get(email.casefold())

    def resolve_actor(self, actor) -> Optional[UserSnapshot]:
        """The snapshot's copy of ``actor`` if it is known and active"""
        if actor is None:
            return None
        current = self.get_user_by_id(getattr(actor, "id", None))
        if current is None or not current.is_active:
            return None
        return current

    def list_by_role(self, role: Role) -> List[UserSnapshot]:
        return sorted((u for u in self._by_id.values() if u.role == role), key=_by_name)

    def list_active(self) -> List[UserSnapshot]:
        return sorted((u for u in self._by_id.values() if u.is_active), key=_by_name)

    def list_all(self) -> List[UserSnapshot]:
        return sorted(self._by_id.values(), key=_by_name)

    def sort_by_name(self, users: Iterable[UserSnapshot]) -> List[UserSnapshot]:
        return sorted(users, key=_by_name)

    def __contains__(self, user_id) -> bool:
        return user_id is not None and str(user_id) in self._by_id

    def __iter__(self) -> Iterator[UserSnapshot]:
        return iter(self.list_all())

    def __len__(self) -> int:
        return len(self._by_id)
