from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from content_agent.core.config import API_PREFIX
from content_agent.core.exceptions import Unauthorized
from content_agent.db.models.user import User
from content_agent.llm.provider import LLMProvider
from content_agent.services import auth_service

# auto_error=False so a missing header goes through our own 401 body
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{API_PREFIX}/auth/login", auto_error=False)


def get_db(request: Request):
    """Database session dependency bound to this app's session factory."""
    db = request.app.state.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_llm_provider(request: Request) -> LLMProvider:
    return request.app.state.llm_provider


def get_current_token(token: Optional[str] = Depends(oauth2_scheme)) -> str:
    """Bearer token from the Authorization header."""
    if not token:
        raise Unauthorized("Not authenticated")
    return token


def get_current_user(
    token: str = Depends(get_current_token),
    db: Session = Depends(get_db)
) -> User:
    """Get current User object from the bearer token and its session row."""
    return auth_service.authenticate(db, token)
