"""
Smart article flow: start a project from an existing draft.

The user uploads a PDF/DOCX/TXT draft together with the configuration
fields; the text is extracted and validated, the project is created with
the document attached, and the model is then asked for improvement tips
the user can tick off one by one.

Route summary
-------------
POST  /api/smart-articles                              — upload draft, create project
POST  /api/smart-articles/{project_id}/tips            — (re)generate tips from the draft
GET   /api/smart-articles/{project_id}/tips            — list tips + completion count
PATCH /api/smart-articles/{project_id}/tips/{tip_id}   — mark / toggle a tip
POST  /api/smart-articles/{project_id}/abstract        — abstract drafted from the document
"""
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from escriba.config import settings
from escriba.database import get_db
from escriba.dependencies.ai import ai_http_error, get_writing_assistant
from escriba.dependencies.auth import get_authorized_project, get_or_create_user
from escriba.models.database_models import KnowledgeArea, Project, Tip, User
from escriba.models.schemas import (
    AbstractResponse,
    DocumentValidationResponse,
    ProjectAbstractRequest,
    SmartArticleResponse,
    TipListResponse,
    TipResponse,
    TipUpdate,
)
from escriba.routers.abstracts import run_abstract_generation
from escriba.routers.projects import project_summary
from escriba.services.ai_gateway import AIServiceError
from escriba.services.document_parser import DocumentParser, validate_document
from escriba.services.storage import FileTooLargeError, safe_remove, save_upload
from escriba.services.writing_assistant import AbstractInput, WritingAssistant

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_document(project: Project) -> str:
    if not project.document_text:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="O projeto não possui documento de origem.",
        )
    return project.document_text


async def _tip_list(project_id: int, db: AsyncSession) -> TipListResponse:
    result = await db.execute(
        select(Tip).where(Tip.project_id == project_id).order_by(Tip.number)
    )
    tips = result.scalars().all()
    return TipListResponse(
        project_id=project_id,
        completed=sum(1 for t in tips if t.completed),
        total=len(tips),
        tips=[TipResponse.model_validate(t) for t in tips],
    )


# ═══════════════════════════════════════════════════════════════════════════════
# UPLOAD
# ═══════════════════════════════════════════════════════════════════════════════

@router.post("", response_model=SmartArticleResponse, status_code=status.HTTP_201_CREATED)
async def create_smart_article(
    title: str = Form(..., min_length=1, max_length=500),
    premise: str = Form(..., min_length=1),
    area: KnowledgeArea = Form(...),
    file: UploadFile = File(...),
    user: User = Depends(get_or_create_user),
    db: AsyncSession = Depends(get_db),
) -> SmartArticleResponse:
    """Create a project from an uploaded draft."""
    if not title.strip() or not premise.strip():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Título e premissa não podem ficar em branco.",
        )
    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="O envio deve incluir o nome do arquivo.",
        )

    file_ext = Path(file.filename).suffix.lower()
    if file_ext not in settings.SUPPORTED_FILE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Tipo de arquivo '{file_ext}' não suportado. Aceitos: {', '.join(settings.SUPPORTED_FILE_TYPES)}",
        )

    try:
        file_path, _size = await save_upload(user.id, file)
    except FileTooLargeError as exc:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(exc))

    try:
        parsed = await DocumentParser().parse_document(file_path, file_ext)
    except (ValueError, RuntimeError) as exc:
        safe_remove(file_path)
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))

    validation = validate_document(parsed.full_text)
    if not validation.is_valid:
        safe_remove(file_path)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=". ".join(validation.errors),
        )

    project = Project(
        user_id=user.id,
        title=title.strip(),
        premise=premise.strip(),
        area=area.value,
        objectives="",
        literature="",
        introduction="",
        methodology="",
        results="",
        abstract_pt="",
        abstract_en="",
        document_filename=file.filename,
        document_path=file_path,
        document_text=parsed.full_text,
    )
    db.add(project)
    try:
        await db.flush()
    except Exception:
        safe_remove(file_path)
        raise

    logger.info(
        "Smart article: project id=%d from %r (%d words, %d warnings)",
        project.id,
        file.filename,
        parsed.metadata["word_count"],
        len(validation.warnings),
    )

    return SmartArticleResponse(
        project=project_summary(project),
        document_filename=file.filename,
        word_count=parsed.metadata["word_count"],
        char_count=parsed.metadata["char_count"],
        validation=DocumentValidationResponse(
            is_valid=validation.is_valid,
            errors=validation.errors,
            warnings=validation.warnings,
        ),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# TIPS
# ═══════════════════════════════════════════════════════════════════════════════

@router.post("/{project_id}/tips", response_model=TipListResponse)
async def generate_tips(
    project: Project = Depends(get_authorized_project),
    assistant: WritingAssistant = Depends(get_writing_assistant),
    db: AsyncSession = Depends(get_db),
) -> TipListResponse:
    """Ask the model for tips on the source document; replaces existing tips."""
    document_text = _require_document(project)

    try:
        tips = await assistant.analyze_document(document_text, project.area, project.premise)
    except AIServiceError as exc:
        logger.error("Project %d: tip generation failed: %s", project.id, exc)
        raise ai_http_error(exc)

    await db.execute(delete(Tip).where(Tip.project_id == project.id))
    for tip in tips:
        db.add(Tip(
            project_id=project.id,
            tip_key=tip["id"],
            number=tip["number"],
            category=tip["category"],
            title=tip["title"],
            description=tip["description"],
            icon=tip["icon"],
            completed=False,
        ))
    await db.flush()
    logger.info("Project %d: stored %d tips", project.id, len(tips))

    return await _tip_list(project.id, db)


@router.get("/{project_id}/tips", response_model=TipListResponse)
async def list_tips(
    project: Project = Depends(get_authorized_project),
    db: AsyncSession = Depends(get_db),
) -> TipListResponse:
    """Tips for the project, in order, with how many are done."""
    return await _tip_list(project.id, db)


@router.patch("/{project_id}/tips/{tip_id}", response_model=TipListResponse)
async def update_tip(
    tip_id: int,
    body: TipUpdate,
    project: Project = Depends(get_authorized_project),
    db: AsyncSession = Depends(get_db),
) -> TipListResponse:
    """Set a tip's completed flag, or toggle it when no value is given."""
    result = await db.execute(
        select(Tip).where(Tip.id == tip_id, Tip.project_id == project.id)
    )
    tip = result.scalar_one_or_none()
    if tip is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Dica não encontrada.")

    tip.completed = (not tip.completed) if body.completed is None else body.completed
    await db.flush()

    return await _tip_list(project.id, db)


# ═══════════════════════════════════════════════════════════════════════════════
# ABSTRACT FROM DOCUMENT
# ═══════════════════════════════════════════════════════════════════════════════

@router.post("/{project_id}/abstract", response_model=AbstractResponse)
async def generate_document_abstract(
    body: ProjectAbstractRequest,
    project: Project = Depends(get_authorized_project),
    assistant: WritingAssistant = Depends(get_writing_assistant),
) -> AbstractResponse:
    """
    Draft an abstract straight from the uploaded document.  Not gated by
    the section word counts: the document stands in for every section.
    """
    document_text = _require_document(project)
    return await run_abstract_generation(
        assistant,
        AbstractInput.from_document(project, document_text),
        body.language,
        project_id=project.id,
    )
