"""
Project endpoints.

CRUD plus duplicate, scoped to workspaces the caller owns.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from content_agent.core.auth_dependency import get_db, get_current_user
from content_agent.core.exceptions import AppError, InternalError
from content_agent.db.models.user import User
from content_agent.schemas.project import (
    CONTENT_TYPE_PATTERN,
    STATUS_PATTERN,
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectListResponse,
)
from content_agent.services import project_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("", response_model=ProjectListResponse)
def list_projects(
    workspace_id: Optional[str] = Query(None),
    content_type: Optional[str] = Query(None, pattern=CONTENT_TYPE_PATTERN),
    status_filter: Optional[str] = Query(None, alias="status", pattern=STATUS_PATTERN),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List projects in the caller's workspaces, most recently updated first."""
    projects = project_service.list_projects(
        db, current_user, workspace_id=workspace_id, content_type=content_type, status=status_filter
    )
    return {"projects": projects, "total": len(projects)}


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return project_service.get_owned_project(db, current_user, project_id)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ProjectResponse)
def create_project(
    project_data: ProjectCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Create a new project.

    Lands in workspace_id when given, otherwise in the caller's first workspace.
    word_count is computed from content.
    """
    try:
        return project_service.create_project(
            db,
            current_user,
            title=project_data.title,
            content_type=project_data.content_type,
            content=project_data.content,
            status=project_data.status,
            workspace_id=project_data.workspace_id,
            metadata=project_data.metadata,
        )
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating project: user_id={current_user.id}: {e}", exc_info=True)
        raise InternalError("Failed to create project")


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: str,
    project_data: ProjectUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Partial update. Only fields present in the request body are applied."""
    patch = project_data.model_dump(exclude_unset=True)
    try:
        return project_service.update_project(db, current_user, project_id, patch)
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating project: project_id={project_id}: {e}", exc_info=True)
        raise InternalError("Failed to update project")


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        project_service.delete_project(db, current_user, project_id)
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting project: project_id={project_id}: {e}", exc_info=True)
        raise InternalError("Failed to delete project")
    return None


@router.post("/{project_id}/duplicate", status_code=status.HTTP_201_CREATED, response_model=ProjectResponse)
def duplicate_project(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return project_service.duplicate_project(db, current_user, project_id)
