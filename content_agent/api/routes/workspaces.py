"""
Workspace endpoints.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from content_agent.core.auth_dependency import get_db, get_current_user
from content_agent.core.exceptions import AppError, InternalError
from content_agent.db.models.user import User
from content_agent.schemas.workspace import (
    WorkspaceCreate,
    WorkspaceUpdate,
    WorkspaceResponse,
    WorkspaceSummary,
    WorkspaceDetail,
    WorkspaceStats,
)
from content_agent.services import workspace_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workspaces", tags=["Workspaces"])


@router.get("", response_model=List[WorkspaceSummary])
def list_workspaces(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Caller's workspaces with project counts, most recently active first."""
    return workspace_service.list_workspaces(db, current_user)


@router.get("/{workspace_id}", response_model=WorkspaceDetail)
def get_workspace(
    workspace_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return workspace_service.get_workspace_detail(db, current_user, workspace_id)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=WorkspaceResponse)
def create_workspace(
    payload: WorkspaceCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Create a workspace.

    Names are unique per owner (case-insensitive); the number of workspaces
    is capped by the caller's plan.
    """
    try:
        return workspace_service.create_workspace(db, current_user, payload.name, payload.plan_type)
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating workspace: user_id={current_user.id}: {e}", exc_info=True)
        raise InternalError("Failed to create workspace")


@router.put("/{workspace_id}", response_model=WorkspaceResponse)
def update_workspace(
    workspace_id: str,
    payload: WorkspaceUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        return workspace_service.update_workspace(
            db, current_user, workspace_id, payload.model_dump(exclude_unset=True)
        )
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating workspace: workspace_id={workspace_id}: {e}", exc_info=True)
        raise InternalError("Failed to update workspace")


@router.delete("/{workspace_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workspace(
    workspace_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Fails with 400 for the caller's only workspace or a workspace that still has projects."""
    workspace_service.delete_workspace(db, current_user, workspace_id)
    return None


@router.get("/{workspace_id}/stats", response_model=WorkspaceStats)
def get_workspace_stats(
    workspace_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return workspace_service.workspace_stats(db, current_user, workspace_id)
