from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime

from taskberry.models.user import Role, UserStatus


class UserRegister(BaseModel):
    name: str
    email: EmailStr
    avatar_url: Optional[str] = None


class ApprovalRequest(BaseModel):
    # Kept as a plain string so unknown roles surface as InvalidRole
    role: str
    supervisor_id: Optional[str] = None
    manager_id: Optional[str] = None


class HierarchyUpdate(ApprovalRequest):
    pass


class UserSnapshot(BaseModel):
    """A user as seen by the authorization engine"""
    id: str
    name: str
    email: str
    role: Optional[Role] = None
    role_label: Optional[str] = None  # raw stored label, kept for diagnostics
    status: UserStatus
    supervisor_id: Optional[str] = None
    manager_id: Optional[str] = None

    model_config = {
        "frozen": True
    }

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.active


class UserBasic(BaseModel):
    id: str
    name: str
    email: str
    role: Optional[Role] = None
    status: UserStatus
    supervisor_id: Optional[str] = None
    manager_id: Optional[str] = None

    model_config = {
        "from_attributes": True
    }


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    avatar_url: Optional[str] = None
    role: Optional[str] = None
    status: str
    supervisor_id: Optional[str] = None
    manager_id: Optional[str] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class UserPermissions(BaseModel):
    can_create_tasks: bool = False
    can_manage_team: bool = False
    can_approve_users: bool = False
    can_view_reports: bool = False
    can_delete_tasks: bool = False
    can_manage_settings: bool = False
