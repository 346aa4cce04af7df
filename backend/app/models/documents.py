"""Document domain models and the versioned analysis contract."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.common import Category, DocumentStatus, RiskLevel


class GlossaryTerm(BaseModel):
    """Legal term with a plain-language definition."""

    term: str
    definition: str


class AnalysisResultV1(BaseModel):
    """Structured output expected from the completion service.

    The wire shape uses camelCase keys (keyPoints, riskLevel, glossaryTerms);
    both the alias and the field name are accepted on input.
    """

    model_config = ConfigDict(populate_by_name=True)

    summary: str
    key_points: list[str] = Field(..., alias="keyPoints")
    risk_level: RiskLevel = Field(..., alias="riskLevel")
    glossary_terms: list[GlossaryTerm] = Field(default_factory=list, alias="glossaryTerms")


FALLBACK_ANALYSIS = AnalysisResultV1(
    summary="Document analysis completed. Please review the original document for details.",
    key_points=["Document uploaded successfully", "AI analysis in progress"],
    risk_level=RiskLevel.medium,
    glossary_terms=[],
)


class Document(BaseModel):
    """Uploaded legal document plus its AI-derived analysis.

    summary, key_points, risk_level and glossary_terms stay None until
    status is completed, then are all set together.
    """

    model_config = ConfigDict(frozen=True)

    document_id: UUID
    user_id: UUID
    title: str
    category: Category
    file_ref: str
    original_text: str
    notes: str | None = None
    summary: str | None = None
    key_points: list[str] | None = None
    risk_level: RiskLevel | None = None
    glossary_terms: list[GlossaryTerm] | None = None
    status: DocumentStatus
    created_at: datetime
