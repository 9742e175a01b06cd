# taskberry/models/report.py
import enum

from sqlalchemy import Column, String, DateTime, Enum, JSON, func

from taskberry.database import Base
from taskberry.models.task import utcnow
from taskberry.models.user import new_id


class ReportType(str, enum.Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


class Report(Base):
    __tablename__ = "reports"

    id = Column(String(64), primary_key=True, index=True, default=new_id)
    title = Column(String, nullable=False)
    type = Column(Enum(ReportType), nullable=False)
    created_by = Column(String(64), nullable=False, index=True)

    generated_at = Column(DateTime, default=utcnow, nullable=False)
    period_start = Column(DateTime, nullable=False)

    # Ids of the tasks updated in the period, as seen by the creator at generation time
    task_ids = Column(JSON, default=list)
    summary = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
