"""Database and schema models for Escriba."""
from escriba.models.database_models import (
    User,
    Project,
    Tip,
    KnowledgeArea,
    Section,
    AbstractLanguage,
)
from escriba.models.schemas import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectSummary,
    ProgressResponse,
    SectionResponse,
    AbstractResponse,
    TipResponse,
    HealthCheckResponse,
)

__all__ = [
    # Database models
    "User",
    "Project",
    "Tip",
    "KnowledgeArea",
    "Section",
    "AbstractLanguage",
    # Pydantic schemas
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectResponse",
    "ProjectSummary",
    "ProgressResponse",
    "SectionResponse",
    "AbstractResponse",
    "TipResponse",
    "HealthCheckResponse",
]
