from .user import User, Role, UserStatus
from .task import Task, TaskStatus, TaskPriority
from .report import Report, ReportType
