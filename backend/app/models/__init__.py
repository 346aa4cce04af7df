"""Models package - re-exports for convenience."""

from backend.app.models.chat import ChatMessage, ChatSession
from backend.app.models.common import (
    Category,
    DocumentStatus,
    MessageRole,
    RiskLevel,
    Theme,
    next_timestamp,
    utcnow,
)
from backend.app.models.documents import (
    FALLBACK_ANALYSIS,
    AnalysisResultV1,
    Document,
    GlossaryTerm,
)
from backend.app.models.profile import Preferences, UserProfile

__all__ = [
    "FALLBACK_ANALYSIS",
    "AnalysisResultV1",
    "Category",
    "ChatMessage",
    "ChatSession",
    "Document",
    "DocumentStatus",
    "GlossaryTerm",
    "MessageRole",
    "Preferences",
    "RiskLevel",
    "Theme",
    "UserProfile",
    "next_timestamp",
    "utcnow",
]
