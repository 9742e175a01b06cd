from pydantic import BaseModel
from typing import List, Optional

from taskberry.schemas.user import UserBasic


class SupervisorTeam(BaseModel):
    supervisor: UserBasic
    members: List[UserBasic]


class TeamHierarchy(BaseModel):
    manager: UserBasic
    supervisors: List[SupervisorTeam]
    direct_members: List[UserBasic]  # members whose supervisor is outside this manager's team


class RoleInfo(BaseModel):
    role: str
    seniority: int
    requires_supervisor: bool
    requires_manager: bool


class HierarchyIssue(BaseModel):
    user_id: str
    name: str
    role: Optional[str] = None
    code: str
    message: str
