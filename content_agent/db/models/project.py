"""
Project model - a single piece of content inside a workspace.
"""
from datetime import datetime

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
from content_agent.db.base import Base, generate_uuid


class Project(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    workspace_id = Column(String(36), ForeignKey("workspaces.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    content_type = Column(String, nullable=False, index=True)  # article | social_post | video_script | email | seo_content
    content = Column(Text, nullable=False, default="")
    word_count = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default="draft")  # draft | in_progress | completed

    # "metadata" is reserved on declarative classes
    project_metadata = Column("metadata", JSON, nullable=False, default=dict)

    created_by = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False, index=True)

    workspace = relationship("Workspace", backref="projects")

    __table_args__ = (
        Index('idx_workspace_updated', 'workspace_id', 'updated_at'),
    )

    def __repr__(self):
        return f"<Project(id={self.id}, title='{self.title}', content_type='{self.content_type}')>"
