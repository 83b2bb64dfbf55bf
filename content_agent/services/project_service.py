"""
Project service.

Every read or write resolves the project's workspace and checks that the
caller owns it. word_count is always derived from content here.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from content_agent.core.exceptions import Forbidden, NotFound, InvalidState
from content_agent.db.models.project import Project
from content_agent.db.models.user import User
from content_agent.db.models.workspace import Workspace

logger = logging.getLogger(__name__)


def count_words(content: Optional[str]) -> int:
    """Whitespace tokenization; empty or blank content counts 0."""
    return len(content.split()) if content else 0


def get_owned_workspace(db: Session, user: User, workspace_id: str) -> Workspace:
    """
    Raises:
        NotFound: No such workspace
        Forbidden: Workspace belongs to another user
    """
    workspace = db.query(Workspace).filter(Workspace.id == workspace_id).first()
    if not workspace:
        raise NotFound("Workspace not found")
    if workspace.owner_id != user.id:
        logger.warning(f"Workspace access denied: workspace_id={workspace_id}, user_id={user.id}")
        raise Forbidden("Access denied to this workspace")
    return workspace


def get_owned_project(db: Session, user: User, project_id: str) -> Project:
    """
    Raises:
        NotFound: No such project
        Forbidden: Project's workspace belongs to another user
    """
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFound("Project not found")
    if project.workspace is None or project.workspace.owner_id != user.id:
        logger.warning(f"Project access denied: project_id={project_id}, user_id={user.id}")
        raise Forbidden("Access denied to this project")
    return project


def default_workspace(db: Session, user: User) -> Workspace:
    """The user's oldest workspace."""
    workspace = db.query(Workspace).filter(
        Workspace.owner_id == user.id
    ).order_by(Workspace.created_at.asc()).first()
    if not workspace:
        raise InvalidState("No workspace available. Create a workspace first.")
    return workspace


def list_projects(
    db: Session,
    user: User,
    workspace_id: Optional[str] = None,
    content_type: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Project]:
    """Projects in the caller's workspaces, most recently updated first."""
    query = db.query(Project).join(Workspace, Project.workspace_id == Workspace.id).filter(
        Workspace.owner_id == user.id
    )
    if workspace_id:
        get_owned_workspace(db, user, workspace_id)
        query = query.filter(Project.workspace_id == workspace_id)
    if content_type:
        query = query.filter(Project.content_type == content_type)
    if status:
        query = query.filter(Project.status == status)

    return query.order_by(Project.updated_at.desc()).all()


def create_project(
    db: Session,
    user: User,
    title: str,
    content_type: str,
    content: str = "",
    status: str = "draft",
    workspace_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Project:
    if workspace_id:
        workspace = get_owned_workspace(db, user, workspace_id)
    else:
        workspace = default_workspace(db, user)

    project = Project(
        workspace_id=workspace.id,
        title=title,
        content_type=content_type,
        content=content or "",
        word_count=count_words(content),
        status=status,
        project_metadata=dict(metadata or {}),
        created_by=user.id,
    )
    db.add(project)
    db.commit()
    db.refresh(project)

    logger.info(
        f"Project created: project_id={project.id}, workspace_id={workspace.id}, "
        f"user_id={user.id}, content_type={content_type}"
    )
    return project


def update_project(db: Session, user: User, project_id: str, patch: Dict[str, Any]) -> Project:
    """
    Apply an explicit patch (keys from ProjectUpdate that were actually sent).

    word_count is recomputed whenever content is present in the patch.
    """
    project = get_owned_project(db, user, project_id)

    if patch.get("workspace_id") and patch["workspace_id"] != project.workspace_id:
        target = get_owned_workspace(db, user, patch["workspace_id"])
        project.workspace_id = target.id

    for field in ("title", "content_type", "status"):
        if patch.get(field) is not None:
            setattr(project, field, patch[field])

    if "content" in patch and patch["content"] is not None:
        project.content = patch["content"]
        project.word_count = count_words(patch["content"])

    if patch.get("metadata") is not None:
        project.project_metadata = dict(patch["metadata"])

    db.commit()
    db.refresh(project)
    logger.info(f"Project updated: project_id={project.id}, fields={sorted(patch.keys())}")
    return project


def delete_project(db: Session, user: User, project_id: str) -> None:
    project = get_owned_project(db, user, project_id)
    db.delete(project)
    db.commit()
    logger.info(f"Project deleted: project_id={project_id}, user_id={user.id}")


def duplicate_project(db: Session, user: User, project_id: str) -> Project:
    """Copy into the same workspace as a fresh draft titled "<title> (Copy)"."""
    original = get_owned_project(db, user, project_id)

    copy = Project(
        workspace_id=original.workspace_id,
        title=f"{original.title} (Copy)",
        content_type=original.content_type,
        content=original.content,
        word_count=count_words(original.content),
        status="draft",
        project_metadata=dict(original.project_metadata or {}),
        created_by=user.id,
    )
    db.add(copy)
    db.commit()
    db.refresh(copy)
    logger.info(f"Project duplicated: source_id={project_id}, project_id={copy.id}")
    return copy


def apply_generated_text(project: Project, content: str) -> None:
    """Overwrite a project's content with generated text; caller commits."""
    project.content = content
    project.word_count = count_words(content)
    project.status = "completed"


def append_generated_image(project: Project, image_url: str) -> None:
    """Record an image URL under metadata.generated_images; caller commits."""
    metadata = dict(project.project_metadata or {})
    images = list(metadata.get("generated_images", []))
    images.append(image_url)
    metadata["generated_images"] = images
    # Reassign so the JSON column is marked dirty
    project.project_metadata = metadata


def summarize_projects(projects: List[Project]) -> Tuple[int, int]:
    """(count, total words) for a list of projects."""
    return len(projects), sum(p.word_count or 0 for p in projects)
