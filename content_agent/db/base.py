import uuid

from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Note: Models are imported in init_db() to avoid circular imports
# All models must import Base from this module


def generate_uuid() -> str:
    return str(uuid.uuid4())
