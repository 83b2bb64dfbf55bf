import logging

from sqlalchemy.engine import Engine

from content_agent.db.base import Base

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    # Register every model on Base.metadata
    import content_agent.db.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready")
