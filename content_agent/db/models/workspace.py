from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from content_agent.db.base import Base, generate_uuid


class Workspace(Base):
    """Ownership boundary grouping projects under one user."""
    __tablename__ = "workspaces"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    plan_type = Column(String, nullable=False, default="personal")  # personal | team | enterprise

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    owner = relationship("User", backref="workspaces")

    def __repr__(self):
        return f"<Workspace(id={self.id}, name='{self.name}', owner_id={self.owner_id})>"
