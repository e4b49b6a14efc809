"""add source document columns and tips

Revision ID: 002
Revises: 001
Create Date: 2026-10-12 14:10:00

Projects can now start from an uploaded draft (smart article).  The
extracted text is kept on the project and the AI tips generated from it
get their own table.
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "002"
down_revision = "001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column("projects", sa.Column("document_filename", sa.String(length=255), nullable=True))
    op.add_column("projects", sa.Column("document_path", sa.String(length=1024), nullable=True))
    op.add_column("projects", sa.Column("document_text", sa.Text, nullable=True))

    op.create_table(
        "tips",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("tip_key", sa.String(50), nullable=False),
        sa.Column("number", sa.Integer, nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("icon", sa.String(50), nullable=False),
        sa.Column("completed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("tips")
    op.drop_column("projects", "document_text")
    op.drop_column("projects", "document_path")
    op.drop_column("projects", "document_filename")
