"""
Authentication service: registration, login, server-side sessions.

A token is valid only while its signature and expiry check out AND a
matching, unexpired row exists in user_sessions.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from content_agent.core.config import SESSION_TTL_DAYS
from content_agent.core.exceptions import Conflict, NotFound, Unauthorized, ValidationError
from content_agent.core.plan_limits import SUPPORTED_PLANS
from content_agent.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_access_token,
    hash_token,
)
from content_agent.db.models.user import User
from content_agent.db.models.user_session import UserSession
from content_agent.db.models.workspace import Workspace

logger = logging.getLogger(__name__)

DEFAULT_WORKSPACE_NAME = "Personal Workspace"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _issue_session(db: Session, user: User) -> str:
    """Create a token plus its session row; caller commits."""
    token = create_access_token(user.id, timedelta(days=SESSION_TTL_DAYS))
    db.add(UserSession(
        user_id=user.id,
        token_hash=hash_token(token),
        expires_at=datetime.utcnow() + timedelta(days=SESSION_TTL_DAYS),
    ))
    return token


def register(db: Session, email: str, password: str, first_name: str, last_name: str) -> Tuple[str, User]:
    """
    Create a user on the free plan with a default workspace and a session.

    Raises:
        Conflict: Email already registered
        ValidationError: Password could not be hashed
    """
    email = normalize_email(email)
    if db.query(User).filter(User.email == email).first():
        logger.info(f"Registration rejected, email exists: email={email}")
        raise Conflict("User with this email already exists")

    try:
        password_hash = hash_password(password)
    except ValueError as e:
        raise ValidationError(str(e))

    user = User(
        email=email,
        password_hash=password_hash,
        first_name=first_name,
        last_name=last_name,
        subscription_plan="free",
        subscription_status="active",
    )
    try:
        db.add(user)
        db.flush()

        db.add(Workspace(name=DEFAULT_WORKSPACE_NAME, owner_id=user.id, plan_type="personal"))
        token = _issue_session(db, user)

        db.commit()
    except IntegrityError:
        # Lost a race with another registration for the same email
        db.rollback()
        logger.info(f"Registration rejected on insert, email exists: email={email}")
        raise Conflict("User with this email already exists")

    db.refresh(user)
    logger.info(f"User registered: user_id={user.id}")
    return token, user


def login(db: Session, email: str, password: str) -> Tuple[str, User]:
    """
    Verify credentials and open a new session.

    Raises:
        Unauthorized: Unknown email or wrong password (indistinguishable)
    """
    email = normalize_email(email)
    user = db.query(User).filter(User.email == email).first()

    if not user or not verify_password(password, user.password_hash):
        logger.info(f"Login failed: email={email}")
        raise Unauthorized("Invalid credentials")

    token = _issue_session(db, user)
    db.commit()
    logger.info(f"User logged in: user_id={user.id}")
    return token, user


def authenticate(db: Session, token: str) -> User:
    """
    Resolve a bearer token to its user.

    Raises:
        Unauthorized: Bad signature, expired token, no live session or no user
    """
    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        raise Unauthorized("Invalid or expired token")

    session = db.query(UserSession).filter(
        UserSession.token_hash == hash_token(token),
        UserSession.expires_at > datetime.utcnow()
    ).first()
    if not session:
        raise Unauthorized("Session expired or revoked")

    user = db.query(User).filter(User.id == payload["sub"]).first()
    if not user or user.id != session.user_id:
        raise Unauthorized("Invalid or expired token")
    return user


def logout(db: Session, token: str) -> None:
    """Delete the session row of the presented token."""
    deleted = db.query(UserSession).filter(UserSession.token_hash == hash_token(token)).delete()
    db.commit()
    logger.info(f"Logout: sessions_deleted={deleted}")


def refresh(db: Session, user: User) -> str:
    """Drop every session of the user and issue exactly one new one."""
    db.query(UserSession).filter(UserSession.user_id == user.id).delete()
    token = _issue_session(db, user)
    db.commit()
    logger.info(f"Session refreshed: user_id={user.id}")
    return token


def update_profile(
    db: Session,
    user: User,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    avatar_url: Optional[str] = None,
) -> User:
    """Patch the mutable profile fields; None leaves a field unchanged."""
    if first_name is not None:
        user.first_name = first_name
    if last_name is not None:
        user.last_name = last_name
    if avatar_url is not None:
        user.avatar_url = avatar_url or None
    db.commit()
    db.refresh(user)
    logger.info(f"Profile updated: user_id={user.id}")
    return user


def set_user_plan(db: Session, email: str, plan: str, expires_at: Optional[datetime] = None) -> User:
    """
    Operator action: move a user to another plan.

    Raises:
        ValidationError: Unknown plan
        NotFound: No user with that email
    """
    if plan not in SUPPORTED_PLANS:
        raise ValidationError(f"Unknown plan: {plan}. Use one of {', '.join(SUPPORTED_PLANS)}")

    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if not user:
        raise NotFound(f"User not found: {email}")

    old_plan = user.subscription_plan
    user.subscription_plan = plan
    user.subscription_status = "active"
    user.subscription_expires_at = expires_at
    db.commit()
    db.refresh(user)
    logger.info(f"Plan changed: user_id={user.id}, {old_plan} -> {plan}")
    return user
