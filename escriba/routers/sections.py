"""
Section editing endpoints.

The editor auto-saves each section after the user pauses typing; the
server side of that is an idempotent PUT that only writes when the content
actually changed, and refuses sections the step gating still keeps locked.

Route summary
-------------
GET  /api/projects/{project_id}/sections/{section}              — content + stats
PUT  /api/projects/{project_id}/sections/{section}              — auto-save
GET  /api/projects/{project_id}/sections/{section}/hints        — built-in hints
POST /api/projects/{project_id}/sections/{section}/suggestions  — AI suggestions
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from escriba.database import get_db
from escriba.dependencies.ai import ai_http_error, get_writing_assistant
from escriba.dependencies.auth import get_authorized_project
from escriba.models.database_models import Project, Section, utcnow
from escriba.models.schemas import (
    AISuggestion,
    AnalyzeTextResponse,
    HintResponse,
    SectionHintsResponse,
    SectionResponse,
    SectionSaveResponse,
    SectionUpdate,
)
from escriba.services.ai_gateway import AIServiceError
from escriba.services.progress import is_section_unlocked, min_words_for_section
from escriba.services.suggestions import hints_for
from escriba.services.writing_assistant import WritingAssistant
from escriba.utils.helpers import html_to_text, html_word_count

logger = logging.getLogger(__name__)

router = APIRouter()


def _section_response(project: Project, section: Section) -> SectionResponse:
    content = getattr(project, section.value) or ""
    return SectionResponse(
        project_id=project.id,
        section=section,
        content=content,
        word_count=html_word_count(content),
        char_count=len(html_to_text(content)),
        min_words=min_words_for_section(section),
        locked=not is_section_unlocked(project, section),
    )


@router.get("/{project_id}/sections/{section}", response_model=SectionResponse)
async def get_section(
    section: Section,
    project: Project = Depends(get_authorized_project),
) -> SectionResponse:
    """Section HTML with word/character counts and lock state."""
    return _section_response(project, section)


@router.put("/{project_id}/sections/{section}", response_model=SectionSaveResponse)
async def save_section(
    section: Section,
    body: SectionUpdate,
    project: Project = Depends(get_authorized_project),
    db: AsyncSession = Depends(get_db),
) -> SectionSaveResponse:
    """
    Save a section's content.

    Returns 409 while the section is locked.  Unchanged content is not
    written and reports ``saved=false``.
    """
    if not is_section_unlocked(project, section):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A seção '{section.value}' está bloqueada até que as etapas anteriores estejam completas.",
        )

    saved = False
    saved_at = None
    if body.content != (getattr(project, section.value) or ""):
        setattr(project, section.value, body.content)
        project.updated_at = utcnow()
        await db.flush()
        saved = True
        saved_at = project.updated_at
        logger.info(
            "Project %d: saved %s (%d words)",
            project.id,
            section.value,
            html_word_count(body.content),
        )

    base = _section_response(project, section)
    return SectionSaveResponse(**base.model_dump(), saved=saved, saved_at=saved_at)


@router.get("/{project_id}/sections/{section}/hints", response_model=SectionHintsResponse)
async def get_section_hints(
    section: Section,
    project: Project = Depends(get_authorized_project),
) -> SectionHintsResponse:
    """Built-in writing hints for the section's current content."""
    content = getattr(project, section.value) or ""
    return SectionHintsResponse(
        section=section,
        word_count=html_word_count(content),
        hints=[
            HintResponse(type=h.type, title=h.title, content=h.content, icon=h.icon)
            for h in hints_for(section, content)
        ],
    )


@router.post("/{project_id}/sections/{section}/suggestions", response_model=AnalyzeTextResponse)
async def suggest_for_section(
    section: Section,
    project: Project = Depends(get_authorized_project),
    assistant: WritingAssistant = Depends(get_writing_assistant),
) -> AnalyzeTextResponse:
    """AI suggestions for the stored section text."""
    text = html_to_text(getattr(project, section.value) or "")
    try:
        suggestions = await assistant.analyze_section(section.value, text)
    except AIServiceError as exc:
        logger.error("Project %d: suggestions for %s failed: %s", project.id, section.value, exc)
        raise ai_http_error(exc)

    return AnalyzeTextResponse(suggestions=[AISuggestion(**s) for s in suggestions])
