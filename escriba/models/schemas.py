"""
Pydantic schemas for request/response validation.
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List, Dict
from datetime import datetime

from escriba.models.database_models import AbstractLanguage, KnowledgeArea, Section


# Project Schemas
class ProjectCreate(BaseModel):
    """Schema for creating a new project."""

    title: str = Field(..., min_length=1, max_length=500)
    premise: str = Field(..., min_length=1)
    area: KnowledgeArea

    @field_validator("title", "premise")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class ProjectUpdate(BaseModel):
    """Partial update of a project's configuration step."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    premise: Optional[str] = Field(None, min_length=1)
    area: Optional[KnowledgeArea] = None

    @field_validator("title", "premise")
    @classmethod
    def _not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("must not be blank")
        return value.strip() if value is not None else None


class StepStatusResponse(BaseModel):
    step: str
    label: str
    complete: bool
    unlocked: bool
    min_words: int
    word_counts: Dict[str, int] = {}


class ProgressResponse(BaseModel):
    """Step-by-step completion state of a project."""

    project_id: int
    percent: int
    current_step: Optional[str] = None
    can_generate_abstract: bool
    steps: List[StepStatusResponse]


class ProjectSummary(BaseModel):
    """Dashboard card."""

    id: int
    title: str
    premise: str
    area: str
    progress: int
    has_document: bool = False
    created_at: datetime
    updated_at: datetime


class ProjectResponse(BaseModel):
    """Full project with every section."""

    id: int
    title: str
    premise: str
    area: str
    objectives: str = ""
    literature: str = ""
    introduction: str = ""
    methodology: str = ""
    results: str = ""
    abstract_pt: str = ""
    abstract_en: str = ""
    document_filename: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    progress: ProgressResponse

    model_config = ConfigDict(from_attributes=True)


# Section Schemas
class SectionUpdate(BaseModel):
    """Auto-save payload: the section's full HTML."""

    content: str = ""


class SectionResponse(BaseModel):
    project_id: int
    section: Section
    content: str
    word_count: int
    char_count: int
    min_words: int
    locked: bool


class SectionSaveResponse(SectionResponse):
    saved: bool
    saved_at: Optional[datetime] = None


class HintResponse(BaseModel):
    type: str
    title: str
    content: str
    icon: str


class SectionHintsResponse(BaseModel):
    section: Section
    word_count: int
    hints: List[HintResponse]


# AI Schemas
class AISuggestion(BaseModel):
    type: str
    title: str
    content: str
    icon: str


class AnalyzeTextRequest(BaseModel):
    section: str = Field(..., min_length=1)
    content: str = ""


class AnalyzeTextResponse(BaseModel):
    suggestions: List[AISuggestion]


class AITip(BaseModel):
    id: str
    number: int
    category: str
    title: str
    description: str
    icon: str


class AnalyzeDocumentRequest(BaseModel):
    document_text: str = Field(..., min_length=1)
    area: str = ""
    premise: str = ""


class AnalyzeDocumentResponse(BaseModel):
    tips: List[AITip]


class AbstractInputSchema(BaseModel):
    title: str
    premise: str = ""
    area: str = ""
    objectives: str = ""
    introduction: str = ""
    methodology: str = ""
    results: str = ""


class GenerateAbstractRequest(BaseModel):
    input: AbstractInputSchema
    language: AbstractLanguage = AbstractLanguage.BOTH


class ProjectAbstractRequest(BaseModel):
    language: AbstractLanguage = AbstractLanguage.BOTH


class AbstractResponse(BaseModel):
    abstract_pt: Optional[str] = None
    abstract_en: Optional[str] = None
    word_count_pt: Optional[int] = None
    word_count_en: Optional[int] = None
    warnings: List[str] = []


class AbstractRequirement(BaseModel):
    label: str
    met: bool
    current: Optional[int] = None
    required: Optional[int] = None


class AbstractRequirementsResponse(BaseModel):
    can_generate: bool
    requirements: List[AbstractRequirement]


class AbstractApproveRequest(BaseModel):
    abstract_pt: str = ""
    abstract_en: str = ""


# Smart article Schemas
class DocumentValidationResponse(BaseModel):
    is_valid: bool
    errors: List[str] = []
    warnings: List[str] = []


class SmartArticleResponse(BaseModel):
    project: ProjectSummary
    document_filename: str
    word_count: int
    char_count: int
    validation: DocumentValidationResponse


class TipResponse(BaseModel):
    id: int
    tip_key: str
    number: int
    category: str
    title: str
    description: str
    icon: str
    completed: bool

    model_config = ConfigDict(from_attributes=True)


class TipListResponse(BaseModel):
    project_id: int
    completed: int
    total: int
    tips: List[TipResponse]


class TipUpdate(BaseModel):
    completed: Optional[bool] = None  # None → toggle


# Health
class HealthCheckResponse(BaseModel):
    """Schema for health check response."""

    status: str
    database: str
    ai_gateway: str
    abstract_model: str
    timestamp: datetime
