"""
GeneratedContent model - history of text and image generations.
"""
from datetime import datetime

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, Index
from content_agent.db.base import Base, generate_uuid


class GeneratedContent(Base):
    __tablename__ = "generated_content"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)

    kind = Column(String, nullable=False)  # text | image
    content_type = Column(String, nullable=True)
    prompt = Column(Text, nullable=False)
    content = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    style = Column(String, nullable=True)

    word_count = Column(Integer, nullable=False, default=0)
    tokens_used = Column(Integer, nullable=False, default=0)
    model = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    __table_args__ = (
        Index('idx_generated_user_created', 'user_id', 'created_at'),
    )

    def __repr__(self):
        return f"<GeneratedContent(id={self.id}, kind='{self.kind}', user_id={self.user_id})>"
