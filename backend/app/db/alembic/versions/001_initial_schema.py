"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates:
- document
- chat_session, chat_message
- user_profile
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all tables."""
    # document table
    op.create_table(
        "document",
        sa.Column("document_id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False),
        sa.Column("file_ref", sa.Text(), nullable=False),
        sa.Column("original_text", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("key_points", sa.JSON(), nullable=True),
        sa.Column("risk_level", sa.Text(), nullable=True),
        sa.Column("glossary_terms", sa.JSON(), nullable=True),
        sa.Column("status", sa.Text(), nullable=False, server_default="uploaded"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "status IN ('uploaded', 'processing', 'completed')", name="ck_document_status"
        ),
        sa.CheckConstraint(
            "category IN ('business', 'citizen', 'student')", name="ck_document_category"
        ),
    )
    op.create_index("idx_document_user_created", "document", ["user_id", "created_at"])

    # chat_session table
    op.create_table(
        "chat_session",
        sa.Column("session_id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("document_id", sa.Uuid(), nullable=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["document_id"], ["document.document_id"]),
    )
    op.create_index("idx_chat_session_user_created", "chat_session", ["user_id", "created_at"])

    # chat_message table
    op.create_table(
        "chat_message",
        sa.Column("message_id", sa.Uuid(), primary_key=True),
        sa.Column("session_id", sa.Uuid(), nullable=False),
        sa.Column("role", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["session_id"], ["chat_session.session_id"]),
        sa.CheckConstraint("role IN ('user', 'assistant')", name="ck_chat_message_role"),
    )
    op.create_index("idx_chat_message_session_ts", "chat_message", ["session_id", "timestamp"])

    # user_profile table
    op.create_table(
        "user_profile",
        sa.Column("user_id", sa.Uuid(), primary_key=True),
        sa.Column("category", sa.Text(), nullable=False),
        sa.Column("theme", sa.Text(), nullable=False, server_default="light"),
        sa.Column("notifications", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("user_profile")
    op.drop_index("idx_chat_message_session_ts", table_name="chat_message")
    op.drop_table("chat_message")
    op.drop_index("idx_chat_session_user_created", table_name="chat_session")
    op.drop_table("chat_session")
    op.drop_index("idx_document_user_created", table_name="document")
    op.drop_table("document")
