from datetime import datetime

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Index
from content_agent.db.base import Base, generate_uuid


class UsageLog(Base):
    """
    Append-only record of metered resource consumption.

    Rows are never updated; totals are always recomputed with SUM().
    month_key is the UTC calendar month of created_at, for fast monthly aggregation.
    """
    __tablename__ = "usage_logs"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    resource_type = Column(String, nullable=False, index=True)  # words | images | video_minutes
    amount = Column(Integer, nullable=False)
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)
    month_key = Column(String(7), nullable=False, index=True)  # "YYYY-MM"
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    __table_args__ = (
        Index('idx_user_resource_month', 'user_id', 'resource_type', 'month_key'),
    )

    @staticmethod
    def get_month_key(date: datetime = None) -> str:
        """Generate month_key string in YYYY-MM format."""
        if date is None:
            date = datetime.utcnow()
        return date.strftime("%Y-%m")
