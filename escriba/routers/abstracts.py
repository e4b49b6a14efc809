"""
Abstract workflow for a project.

Route summary
-------------
GET  /api/projects/{project_id}/abstract/requirements  — what is still missing
POST /api/projects/{project_id}/abstract/generate      — draft abstract(s), not saved
PUT  /api/projects/{project_id}/abstract               — approve (persist) abstract(s)
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from escriba.config import settings
from escriba.database import get_db
from escriba.dependencies.ai import ai_http_error, get_writing_assistant
from escriba.dependencies.auth import get_authorized_project
from escriba.models.database_models import Project, utcnow
from escriba.models.schemas import (
    AbstractApproveRequest,
    AbstractRequirement,
    AbstractRequirementsResponse,
    AbstractResponse,
    ProjectAbstractRequest,
    ProjectResponse,
)
from escriba.routers.projects import project_response
from escriba.services.ai_gateway import AIServiceError
from escriba.services.progress import evaluate_progress
from escriba.services.writing_assistant import AbstractInput, AbstractResult, WritingAssistant
from escriba.utils.helpers import count_words, html_word_count

logger = logging.getLogger(__name__)

router = APIRouter()


def _requirements(project: Project) -> List[AbstractRequirement]:
    intro = html_word_count(project.introduction or "")
    method = html_word_count(project.methodology or "")
    results = html_word_count(project.results or "")
    return [
        AbstractRequirement(
            label="Objetivos e revisão de literatura preenchidos",
            met=html_word_count(project.objectives or "") > 0
            and html_word_count(project.literature or "") > 0,
        ),
        AbstractRequirement(
            label=f"Introdução (mín. {settings.INTRODUCTION_MIN_WORDS} palavras)",
            met=intro >= settings.INTRODUCTION_MIN_WORDS,
            current=intro,
            required=settings.INTRODUCTION_MIN_WORDS,
        ),
        AbstractRequirement(
            label=f"Metodologia (mín. {settings.METHODOLOGY_MIN_WORDS} palavras)",
            met=method >= settings.METHODOLOGY_MIN_WORDS,
            current=method,
            required=settings.METHODOLOGY_MIN_WORDS,
        ),
        AbstractRequirement(
            label=f"Resultados (mín. {settings.RESULTS_MIN_WORDS} palavras)",
            met=results >= settings.RESULTS_MIN_WORDS,
            current=results,
            required=settings.RESULTS_MIN_WORDS,
        ),
    ]


def abstract_response(result: AbstractResult) -> AbstractResponse:
    """Attach word counts and a warning for each abstract over the recommended maximum."""
    response = AbstractResponse(abstract_pt=result.abstract_pt, abstract_en=result.abstract_en)
    for lang, text in (("pt", result.abstract_pt), ("en", result.abstract_en)):
        if text is None:
            continue
        words = count_words(text)
        setattr(response, f"word_count_{lang}", words)
        if words > settings.ABSTRACT_MAX_WORDS:
            response.warnings.append(
                f"O resumo em {lang.upper()} tem {words} palavras; "
                f"o recomendado é no máximo {settings.ABSTRACT_MAX_WORDS}."
            )
    return response


async def run_abstract_generation(
    assistant: WritingAssistant,
    abstract_input: AbstractInput,
    language,
    project_id: Optional[int] = None,
) -> AbstractResponse:
    try:
        result = await assistant.generate_abstract(abstract_input, language)
    except AIServiceError as exc:
        logger.error("Abstract generation failed (project=%s): %s", project_id, exc)
        raise ai_http_error(exc)
    return abstract_response(result)


@router.get("/{project_id}/abstract/requirements", response_model=AbstractRequirementsResponse)
async def get_abstract_requirements(
    project: Project = Depends(get_authorized_project),
) -> AbstractRequirementsResponse:
    """Requirements for generating an abstract, with current word counts."""
    return AbstractRequirementsResponse(
        can_generate=evaluate_progress(project).can_generate_abstract,
        requirements=_requirements(project),
    )


@router.post("/{project_id}/abstract/generate", response_model=AbstractResponse)
async def generate_project_abstract(
    body: ProjectAbstractRequest,
    project: Project = Depends(get_authorized_project),
    assistant: WritingAssistant = Depends(get_writing_assistant),
) -> AbstractResponse:
    """
    Draft the abstract from the project's sections.  Nothing is stored:
    the client reviews/edits the text and approves it with PUT.
    """
    if not evaluate_progress(project).can_generate_abstract:
        missing = [r.label for r in _requirements(project) if not r.met]
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Requisitos do resumo não atendidos: " + ", ".join(missing or ["etapas anteriores incompletas"]),
        )

    return await run_abstract_generation(
        assistant,
        AbstractInput.from_project(project),
        body.language,
        project_id=project.id,
    )


@router.put("/{project_id}/abstract", response_model=ProjectResponse)
async def approve_abstract(
    body: AbstractApproveRequest,
    project: Project = Depends(get_authorized_project),
    db: AsyncSession = Depends(get_db),
) -> ProjectResponse:
    """
    Persist the reviewed abstract(s).  Like any other step the abstract is
    locked until the sections before it are complete; projects with an
    uploaded source document are exempt.
    """
    if not project.document_text and not evaluate_progress(project).can_generate_abstract:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="O resumo fica bloqueado até que as etapas anteriores estejam completas.",
        )

    project.abstract_pt = body.abstract_pt.strip()
    project.abstract_en = body.abstract_en.strip()
    project.updated_at = utcnow()
    await db.flush()
    logger.info(
        "Project %d: abstract approved (pt=%d words, en=%d words)",
        project.id,
        count_words(project.abstract_pt),
        count_words(project.abstract_en),
    )
    return project_response(project)
