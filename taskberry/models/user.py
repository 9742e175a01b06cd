# taskberry/models/user.py
import enum
import uuid

from sqlalchemy import Column, String, DateTime, func

from taskberry.database import Base

class Role(str, enum.Enum):
    """Organisation roles, ordered by seniority"""
    member = "member"
    supervisor = "supervisor"
    manager = "manager"
    super_admin = "super_admin"

    @property
    def seniority(self) -> int:
        return _SENIORITY[self]

    def __lt__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.seniority < other.seniority

    def __le__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.seniority <= other.seniority

    def __gt__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.seniority > other.seniority

    def __ge__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.seniority >= other.seniority


_SENIORITY = {
    Role.member: 1,
    Role.supervisor: 2,
    Role.manager: 3,
    Role.super_admin: 4,
}

class UserStatus(str, enum.Enum):
    pending_approval = "pending_approval"
    active = "active"
    suspended = "suspended"

def new_id() -> str:
    return uuid.uuid4().hex

class User(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True, index=True, default=new_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    avatar_url = Column(String, nullable=True)

    # Role stays empty until a super admin approves the account
    role = Column(String, nullable=True)
    status = Column(String, nullable=False, default=UserStatus.pending_approval.value)

    # Weak back-references by id; no FK so deleting a supervisor or manager
    # leaves the link dangling instead of cascading
    supervisor_id = Column(String(64), nullable=True, index=True)
    manager_id = Column(String(64), nullable=True, index=True)

    approved_at = Column(DateTime(timezone=True), nullable=True)
    approved_by = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
