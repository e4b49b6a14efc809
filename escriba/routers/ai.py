"""
Stateless AI endpoints.

These forward caller-supplied text to the model gateway without touching
any project; the project-scoped routes build on the same assistant.

Routes
------
POST /api/ai/analyze-text      — 3–5 suggestions for one section's text
POST /api/ai/analyze-document  — 10 improvement tips for a whole document
POST /api/ai/generate-abstract — abstract in Português, Inglês or Ambos
"""
import logging

from fastapi import APIRouter, Depends

from escriba.dependencies.ai import ai_http_error, get_writing_assistant
from escriba.dependencies.auth import get_current_user_id
from escriba.models.schemas import (
    AISuggestion,
    AITip,
    AbstractResponse,
    AnalyzeDocumentRequest,
    AnalyzeDocumentResponse,
    AnalyzeTextRequest,
    AnalyzeTextResponse,
    GenerateAbstractRequest,
)
from escriba.routers.abstracts import run_abstract_generation
from escriba.services.ai_gateway import AIServiceError
from escriba.services.writing_assistant import AbstractInput, WritingAssistant
from escriba.utils.helpers import html_to_text

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user_id)])


@router.post("/analyze-text", response_model=AnalyzeTextResponse)
async def analyze_text(
    body: AnalyzeTextRequest,
    assistant: WritingAssistant = Depends(get_writing_assistant),
) -> AnalyzeTextResponse:
    """Suggestions for a section's plain text; short text yields an empty list."""
    try:
        suggestions = await assistant.analyze_section(body.section, body.content)
    except AIServiceError as exc:
        logger.error("analyze-text failed: %s", exc)
        raise ai_http_error(exc)
    return AnalyzeTextResponse(suggestions=[AISuggestion(**s) for s in suggestions])


@router.post("/analyze-document", response_model=AnalyzeDocumentResponse)
async def analyze_document(
    body: AnalyzeDocumentRequest,
    assistant: WritingAssistant = Depends(get_writing_assistant),
) -> AnalyzeDocumentResponse:
    """Ten numbered improvement tips for a document."""
    try:
        tips = await assistant.analyze_document(body.document_text, body.area, body.premise)
    except AIServiceError as exc:
        logger.error("analyze-document failed: %s", exc)
        raise ai_http_error(exc)
    return AnalyzeDocumentResponse(tips=[AITip(**t) for t in tips])


@router.post("/generate-abstract", response_model=AbstractResponse)
async def generate_abstract(
    body: GenerateAbstractRequest,
    assistant: WritingAssistant = Depends(get_writing_assistant),
) -> AbstractResponse:
    """Abstract from caller-supplied sections (editor HTML or plain text)."""
    fields = body.input.model_dump()
    for name in ("objectives", "introduction", "methodology", "results"):
        fields[name] = html_to_text(fields[name])
    return await run_abstract_generation(
        assistant,
        AbstractInput(**fields),
        body.language,
    )
