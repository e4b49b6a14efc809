"""initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-05

users and projects as defined in escriba/models/database_models.py.
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── users ─────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # ── projects ──────────────────────────────────────────────────────────
    op.create_table(
        "projects",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("premise", sa.Text, nullable=False),
        sa.Column("area", sa.String(100), nullable=False),
        sa.Column("objectives", sa.Text, nullable=False, server_default=""),
        sa.Column("literature", sa.Text, nullable=False, server_default=""),
        sa.Column("introduction", sa.Text, nullable=False, server_default=""),
        sa.Column("methodology", sa.Text, nullable=False, server_default=""),
        sa.Column("results", sa.Text, nullable=False, server_default=""),
        sa.Column("abstract_pt", sa.Text, nullable=False, server_default=""),
        sa.Column("abstract_en", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("projects")
    op.drop_table("users")
