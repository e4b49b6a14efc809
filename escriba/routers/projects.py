"""
Project management endpoints.

A project is one academic article owned by the authenticated user.

Route summary
-------------
POST   /api/projects                         — create project (configuration step)
GET    /api/projects                         — dashboard: user's projects + progress
GET    /api/projects/{project_id}            — project detail with every section
PATCH  /api/projects/{project_id}            — update title / premise / area
DELETE /api/projects/{project_id}            — delete project (tips, stored document)
GET    /api/projects/{project_id}/progress   — step gating state
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from escriba.database import get_db
from escriba.dependencies.auth import (
    get_authorized_project,
    get_current_user_id,
    get_or_create_user,
)
from escriba.models.database_models import Project, User, utcnow
from escriba.models.schemas import (
    ProgressResponse,
    ProjectCreate,
    ProjectResponse,
    ProjectSummary,
    ProjectUpdate,
    StepStatusResponse,
)
from escriba.services.progress import evaluate_progress
from escriba.services.storage import safe_remove

logger = logging.getLogger(__name__)

router = APIRouter()


# ─── Response builders ────────────────────────────────────────────────────────

def progress_response(project: Project) -> ProgressResponse:
    progress = evaluate_progress(project)
    return ProgressResponse(
        project_id=project.id,
        percent=progress.percent,
        current_step=progress.current_step.value if progress.current_step else None,
        can_generate_abstract=progress.can_generate_abstract,
        steps=[
            StepStatusResponse(
                step=s.step.value,
                label=s.label,
                complete=s.complete,
                unlocked=s.unlocked,
                min_words=s.min_words,
                word_counts=s.word_counts,
            )
            for s in progress.steps
        ],
    )


def project_summary(project: Project) -> ProjectSummary:
    return ProjectSummary(
        id=project.id,
        title=project.title,
        premise=project.premise,
        area=project.area,
        progress=evaluate_progress(project).percent,
        has_document=bool(project.document_path),
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


def project_response(project: Project) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        title=project.title,
        premise=project.premise,
        area=project.area,
        objectives=project.objectives or "",
        literature=project.literature or "",
        introduction=project.introduction or "",
        methodology=project.methodology or "",
        results=project.results or "",
        abstract_pt=project.abstract_pt or "",
        abstract_en=project.abstract_en or "",
        document_filename=project.document_filename,
        created_at=project.created_at,
        updated_at=project.updated_at,
        progress=progress_response(project),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# PROJECT CRUD
# ═══════════════════════════════════════════════════════════════════════════════

@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreate,
    user: User = Depends(get_or_create_user),
    db: AsyncSession = Depends(get_db),
) -> ProjectResponse:
    """Create a new project for the authenticated user; all sections start empty."""
    project = Project(
        user_id=user.id,
        title=body.title,
        premise=body.premise,
        area=body.area.value,
        objectives="",
        literature="",
        introduction="",
        methodology="",
        results="",
        abstract_pt="",
        abstract_en="",
    )
    db.add(project)
    await db.flush()

    logger.info("Created project id=%d title=%r for user=%s", project.id, project.title, user.id)
    return project_response(project)


@router.get("", response_model=List[ProjectSummary])
async def list_projects(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> List[ProjectSummary]:
    """List all projects belonging to the authenticated user, most recently edited first."""
    result = await db.execute(
        select(Project)
        .where(Project.user_id == user_id)
        .order_by(Project.updated_at.desc(), Project.id.desc())
    )
    return [project_summary(p) for p in result.scalars().all()]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project: Project = Depends(get_authorized_project),
) -> ProjectResponse:
    """Get a project with every section and its progress."""
    return project_response(project)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    body: ProjectUpdate,
    project: Project = Depends(get_authorized_project),
    db: AsyncSession = Depends(get_db),
) -> ProjectResponse:
    """Update the configuration fields (title, premise, area)."""
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "area" in changes:
        changes["area"] = changes["area"].value

    changed = False
    for name, value in changes.items():
        if getattr(project, name) != value:
            setattr(project, name, value)
            changed = True

    if changed:
        project.updated_at = utcnow()
        await db.flush()
        logger.info("Updated project id=%d fields=%s", project.id, sorted(changes))

    return project_response(project)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_model=None,
)
async def delete_project(
    project: Project = Depends(get_authorized_project),
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a project, its tips, and any stored source document."""
    document_path = project.document_path
    await db.delete(project)
    await db.flush()

    if document_path:
        safe_remove(document_path)
    logger.info("Deleted project id=%d title=%r", project.id, project.title)


@router.get("/{project_id}/progress", response_model=ProgressResponse)
async def get_progress(
    project: Project = Depends(get_authorized_project),
) -> ProgressResponse:
    """Per-step completion and unlock state."""
    return progress_response(project)
