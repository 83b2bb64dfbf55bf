from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from content_agent.db.base import Base, generate_uuid


class UserSession(Base):
    """
    Server-side session row, one per issued token.

    Only the sha256 digest of the token is stored.
    """
    __tablename__ = "user_sessions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    token_hash = Column(String(64), nullable=False, unique=True)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_session_user_expires', 'user_id', 'expires_at'),
    )
