"""
SQLAlchemy ORM models for the Escriba database.
"""
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    Boolean,
)
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum

from escriba.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Enums
class KnowledgeArea(str, enum.Enum):
    """Top-level knowledge areas a project can belong to."""

    EXACT_EARTH = "Ciências Exatas e da Terra"
    BIOLOGICAL = "Ciências Biológicas"
    ENGINEERING = "Engenharias"
    HEALTH = "Ciências da Saúde"
    AGRARIAN = "Ciências Agrárias"
    APPLIED_SOCIAL = "Ciências Sociais Aplicadas"
    HUMANITIES = "Ciências Humanas"
    LINGUISTICS_ARTS = "Linguística, Letras e Artes"
    MULTIDISCIPLINARY = "Multidisciplinar"


class Section(str, enum.Enum):
    """Editable manuscript sections of a project."""

    OBJECTIVES = "objectives"
    LITERATURE = "literature"
    INTRODUCTION = "introduction"
    METHODOLOGY = "methodology"
    RESULTS = "results"


class AbstractLanguage(str, enum.Enum):
    """Languages an abstract can be generated in."""

    PORTUGUESE = "Português"
    ENGLISH = "Inglês"
    BOTH = "Ambos"


# Models
class User(Base):
    """User account (identity asserted by the fronting auth provider)."""

    __tablename__ = "users"

    id = Column(String(255), primary_key=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    projects = relationship("Project", back_populates="user", cascade="all, delete-orphan")


class Project(Base):
    """An in-progress academic article, one column per manuscript section."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Configuration
    title = Column(String(500), nullable=False)
    premise = Column(Text, nullable=False)
    area = Column(String(100), nullable=False)

    # Sections (rich-text HTML)
    objectives = Column(Text, nullable=False, default="")
    literature = Column(Text, nullable=False, default="")
    introduction = Column(Text, nullable=False, default="")
    methodology = Column(Text, nullable=False, default="")
    results = Column(Text, nullable=False, default="")

    # Approved abstracts (plain text)
    abstract_pt = Column(Text, nullable=False, default="")
    abstract_en = Column(Text, nullable=False, default="")

    # Source document (smart article flow)
    document_filename = Column(String(255), nullable=True)
    document_path = Column(String(1024), nullable=True)
    document_text = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="projects")
    tips = relationship(
        "Tip",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Tip.number",
    )


class Tip(Base):
    """AI improvement tip generated from a project's source document."""

    __tablename__ = "tips"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    tip_key = Column(String(50), nullable=False)  # "tip-1" … "tip-10"
    number = Column(Integer, nullable=False)
    category = Column(String(50), nullable=False)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    icon = Column(String(50), nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    project = relationship("Project", back_populates="tips")
