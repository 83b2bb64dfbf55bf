from datetime import datetime

from sqlalchemy import Column, String, DateTime
from content_agent.db.base import Base, generate_uuid


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    avatar_url = Column(String, nullable=True)

    # Subscription
    subscription_plan = Column(String, nullable=False, default="free")  # free | pro | enterprise
    subscription_status = Column(String, nullable=False, default="active")
    subscription_expires_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def effective_plan(self, now: datetime = None) -> str:
        """Plan used for quota decisions; lapsed or inactive subscriptions fall back to free."""
        now = now or datetime.utcnow()
        if self.subscription_status != "active":
            return "free"
        if self.subscription_expires_at is not None and self.subscription_expires_at <= now:
            return "free"
        return self.subscription_plan or "free"

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', plan='{self.subscription_plan}')>"
