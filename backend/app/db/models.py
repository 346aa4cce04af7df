"""SQLAlchemy ORM models for documents, chat and profiles."""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from backend.app.models.common import utcnow


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class Document(Base):
    """Document table - uploaded file metadata, extracted text and analysis."""

    __tablename__ = "document"
    __table_args__ = (
        Index("idx_document_user_created", "user_id", "created_at"),
        CheckConstraint(
            "status IN ('uploaded', 'processing', 'completed')", name="ck_document_status"
        ),
        CheckConstraint(
            "category IN ('business', 'citizen', 'student')", name="ck_document_category"
        ),
    )

    document_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    file_ref: Mapped[str] = mapped_column(Text, nullable=False)
    original_text: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Analysis fields, written together with status=completed
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    key_points: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    risk_level: Mapped[str | None] = mapped_column(Text, nullable=True)
    glossary_terms: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)

    status: Mapped[str] = mapped_column(Text, nullable=False, default="uploaded")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    # Relationships
    chat_sessions: Mapped[list["ChatSession"]] = relationship(
        "ChatSession", back_populates="document"
    )


class ChatSession(Base):
    """Chat session table - optionally linked to a document."""

    __tablename__ = "chat_session"
    __table_args__ = (Index("idx_chat_session_user_created", "user_id", "created_at"),)

    session_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    document_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("document.document_id"), nullable=True
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    # Relationships
    document: Mapped["Document | None"] = relationship("Document", back_populates="chat_sessions")
    messages: Mapped[list["ChatMessage"]] = relationship("ChatMessage", back_populates="session")


class ChatMessage(Base):
    """Chat message table - append-only."""

    __tablename__ = "chat_message"
    __table_args__ = (
        Index("idx_chat_message_session_ts", "session_id", "timestamp"),
        CheckConstraint("role IN ('user', 'assistant')", name="ck_chat_message_role"),
    )

    message_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("chat_session.session_id"), nullable=False
    )
    role: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    # Relationships
    session: Mapped["ChatSession"] = relationship("ChatSession", back_populates="messages")


class UserProfile(Base):
    """User profile table - one row per user."""

    __tablename__ = "user_profile"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    theme: Mapped[str] = mapped_column(Text, nullable=False, default="light")
    notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
