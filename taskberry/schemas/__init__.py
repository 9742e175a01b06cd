from .user import UserRegister, ApprovalRequest, HierarchyUpdate, UserSnapshot, UserBasic, UserOut, UserPermissions
from .task import TaskCreate, TaskUpdate, TaskStatusUpdate, TaskReassign, TaskOut, TaskStats, TaskPermissions, TaskFieldPermissions, TaskAccessOut
from .hierarchy import SupervisorTeam, TeamHierarchy, RoleInfo, HierarchyIssue
from .report import ReportCreate, ReportOut, ReportDetail
