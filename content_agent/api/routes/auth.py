"""
Authentication endpoints.

Register and login are rate limited per client IP.
"""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from content_agent.core.auth_dependency import get_db, get_current_user, get_current_token
from content_agent.core.exceptions import AppError, InternalError
from content_agent.core.rate_limit import limit_auth_requests
from content_agent.db.models.user import User
from content_agent.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    ProfileUpdate,
    UserResponse,
    AuthResponse,
    TokenResponse,
    MessageResponse,
)
from content_agent.services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
    dependencies=[Depends(limit_auth_requests)],
)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """
    Create an account on the free plan with a default workspace.

    Returns a bearer token valid for 7 days.
    """
    try:
        token, user = auth_service.register(
            db,
            email=payload.email,
            password=payload.password,
            first_name=payload.first_name,
            last_name=payload.last_name,
        )
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Registration failed: {type(e).__name__}: {e}", exc_info=True)
        raise InternalError("Registration failed. Please try again.")

    return {"token": token, "user": user}


@router.post("/login", response_model=AuthResponse, dependencies=[Depends(limit_auth_requests)])
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    token, user = auth_service.login(db, payload.email, payload.password)
    return {"token": token, "user": user}


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/me", response_model=UserResponse)
def update_me(
    payload: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update first_name, last_name or avatar_url. Omitted fields are unchanged."""
    return auth_service.update_profile(
        db,
        current_user,
        first_name=payload.first_name,
        last_name=payload.last_name,
        avatar_url=payload.avatar_url,
    )


@router.post("/logout", response_model=MessageResponse)
def logout(
    current_user: User = Depends(get_current_user),
    token: str = Depends(get_current_token),
    db: Session = Depends(get_db)
):
    auth_service.logout(db, token)
    return {"message": "Logged out successfully"}


@router.post("/refresh", response_model=TokenResponse)
def refresh(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Revoke every session of the caller and issue a fresh token."""
    return {"token": auth_service.refresh(db, current_user)}
