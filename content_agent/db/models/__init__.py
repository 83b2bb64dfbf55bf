"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.

All models must be imported here to be included in database migrations and table creation.
"""
from content_agent.db.models.user import User
from content_agent.db.models.user_session import UserSession
from content_agent.db.models.workspace import Workspace
from content_agent.db.models.project import Project
from content_agent.db.models.usage import UsageLog
from content_agent.db.models.generated_content import GeneratedContent

__all__ = [
    "User",
    "UserSession",
    "Workspace",
    "Project",
    "UsageLog",
    "GeneratedContent",
]
