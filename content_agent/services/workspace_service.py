"""
Workspace service: ownership-scoped CRUD plus aggregate stats.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from content_agent.core.exceptions import Conflict, InvalidState
from content_agent.core.plan_limits import get_workspace_limit
from content_agent.db.models.project import Project
from content_agent.db.models.user import User
from content_agent.db.models.workspace import Workspace
from content_agent.services.project_service import get_owned_workspace, summarize_projects

logger = logging.getLogger(__name__)

RECENT_PROJECTS_LIMIT = 10
RECENT_ACTIVITY_DAYS = 7


def _workspace_fields(workspace: Workspace) -> Dict[str, Any]:
    return {
        "id": workspace.id,
        "name": workspace.name,
        "owner_id": workspace.owner_id,
        "plan_type": workspace.plan_type,
        "created_at": workspace.created_at,
        "updated_at": workspace.updated_at,
    }


def _ensure_unique_name(db: Session, user: User, name: str, exclude_id: Optional[str] = None) -> None:
    query = db.query(Workspace).filter(
        Workspace.owner_id == user.id,
        func.lower(Workspace.name) == name.lower()
    )
    if exclude_id:
        query = query.filter(Workspace.id != exclude_id)
    if query.first():
        raise Conflict("Workspace with this name already exists")


def list_workspaces(db: Session, user: User) -> List[Dict[str, Any]]:
    """Caller's workspaces with project count and latest activity, most recent first."""
    workspaces = db.query(Workspace).filter(Workspace.owner_id == user.id).all()

    counts = dict(
        db.query(Project.workspace_id, func.count(Project.id))
        .join(Workspace, Project.workspace_id == Workspace.id)
        .filter(Workspace.owner_id == user.id)
        .group_by(Project.workspace_id)
        .all()
    )
    latest = dict(
        db.query(Project.workspace_id, func.max(Project.updated_at))
        .join(Workspace, Project.workspace_id == Workspace.id)
        .filter(Workspace.owner_id == user.id)
        .group_by(Project.workspace_id)
        .all()
    )

    result = []
    for workspace in workspaces:
        last_project_update = latest.get(workspace.id)
        recent = workspace.updated_at
        if last_project_update and last_project_update > recent:
            recent = last_project_update
        result.append({
            **_workspace_fields(workspace),
            "project_count": counts.get(workspace.id, 0),
            "recent_activity": recent,
        })

    result.sort(key=lambda w: w["recent_activity"], reverse=True)
    return result


def get_workspace_detail(db: Session, user: User, workspace_id: str) -> Dict[str, Any]:
    workspace = get_owned_workspace(db, user, workspace_id)
    projects = db.query(Project).filter(
        Project.workspace_id == workspace.id
    ).order_by(Project.updated_at.desc()).all()

    project_count, total_words = summarize_projects(projects)
    return {
        **_workspace_fields(workspace),
        "project_count": project_count,
        "projects": projects[:RECENT_PROJECTS_LIMIT],
        "total_words": total_words,
        "content_types": sorted({p.content_type for p in projects}),
    }


def create_workspace(db: Session, user: User, name: str, plan_type: str = "personal") -> Workspace:
    """
    Raises:
        Conflict: The caller already has a workspace with this name (case-insensitive)
        InvalidState: The caller's plan allows no more workspaces
    """
    _ensure_unique_name(db, user, name)

    plan = user.effective_plan()
    limit = get_workspace_limit(plan)
    if limit is not None:
        owned = db.query(func.count(Workspace.id)).filter(Workspace.owner_id == user.id).scalar()
        if owned >= limit:
            logger.info(f"Workspace limit reached: user_id={user.id}, plan={plan}, limit={limit}")
            raise InvalidState(
                f"Your {plan} plan allows up to {limit} workspaces",
                details={"plan": plan, "limit": limit},
            )

    workspace = Workspace(name=name, owner_id=user.id, plan_type=plan_type)
    db.add(workspace)
    db.commit()
    db.refresh(workspace)
    logger.info(f"Workspace created: workspace_id={workspace.id}, user_id={user.id}")
    return workspace


def update_workspace(db: Session, user: User, workspace_id: str, patch: Dict[str, Any]) -> Workspace:
    workspace = get_owned_workspace(db, user, workspace_id)

    if patch.get("name") is not None and patch["name"] != workspace.name:
        _ensure_unique_name(db, user, patch["name"], exclude_id=workspace.id)
        workspace.name = patch["name"]
    if patch.get("plan_type") is not None:
        workspace.plan_type = patch["plan_type"]

    db.commit()
    db.refresh(workspace)
    logger.info(f"Workspace updated: workspace_id={workspace.id}, fields={sorted(patch.keys())}")
    return workspace


def delete_workspace(db: Session, user: User, workspace_id: str) -> None:
    """
    Raises:
        InvalidState: It is the caller's only workspace, or it still holds projects
    """
    workspace = get_owned_workspace(db, user, workspace_id)

    owned = db.query(func.count(Workspace.id)).filter(Workspace.owner_id == user.id).scalar()
    if owned <= 1:
        raise InvalidState("Cannot delete your only workspace")

    project_count = db.query(func.count(Project.id)).filter(Project.workspace_id == workspace.id).scalar()
    if project_count:
        raise InvalidState(
            "Cannot delete workspace with existing projects. Move or delete projects first.",
            details={"project_count": project_count},
        )

    db.delete(workspace)
    db.commit()
    logger.info(f"Workspace deleted: workspace_id={workspace_id}, user_id={user.id}")


def workspace_stats(db: Session, user: User, workspace_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    workspace = get_owned_workspace(db, user, workspace_id)
    projects = db.query(Project).filter(Project.workspace_id == workspace.id).all()

    now = now or datetime.utcnow()
    recent_cutoff = now - timedelta(days=RECENT_ACTIVITY_DAYS)

    by_status = {"draft": 0, "in_progress": 0, "completed": 0}
    content_types: Dict[str, int] = {}
    for project in projects:
        by_status[project.status] = by_status.get(project.status, 0) + 1
        content_types[project.content_type] = content_types.get(project.content_type, 0) + 1

    total_projects, total_words = summarize_projects(projects)
    return {
        "total_projects": total_projects,
        "total_words": total_words,
        "completed_projects": by_status["completed"],
        "in_progress_projects": by_status["in_progress"],
        "draft_projects": by_status["draft"],
        "content_types": content_types,
        "recent_activity": sum(1 for p in projects if p.updated_at and p.updated_at >= recent_cutoff),
    }
