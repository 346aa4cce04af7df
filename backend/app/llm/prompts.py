"""Prompt templates for document analysis and chat."""

from backend.app.models.common import Category

CATEGORY_CONTEXT: dict[Category, str] = {
    Category.business: "business contracts, agreements, and legal documents",
    Category.citizen: "consumer rights, legal notices, and civic documents",
    Category.student: "academic policies, housing agreements, and educational contracts",
}

NO_SUMMARY_PLACEHOLDER = "No summary available"


def build_analysis_prompt(text: str, category: Category) -> str:
    """Build the single-turn analysis prompt for a document."""
    return f"""Analyze this {CATEGORY_CONTEXT[category]} document and provide:

1. A comprehensive summary (2-3 paragraphs)
2. 5-7 key points or clauses
3. Risk assessment (low/medium/high)
4. Important legal terms with definitions

Document text:
{text}

Respond in JSON format:
{{
  "summary": "...",
  "keyPoints": ["...", "..."],
  "riskLevel": "low|medium|high",
  "glossaryTerms": [{{"term": "...", "definition": "..."}}, ...]
}}"""


def build_chat_system_prompt(context: str | None, category: Category | None) -> str:
    """Build the system prompt for the legal assistant."""
    specialty = category.value if category is not None else "general"
    lines = [
        f"You are Legal Uplifter AI, a helpful legal assistant specializing in {specialty} "
        "legal matters.",
        "Provide clear, accurate legal information while always reminding users that this is "
        "not legal advice and they should consult with a qualified attorney for specific legal "
        "matters.",
    ]
    if context:
        lines.append("")
        lines.append(f"Context from document: {context}")
    return "\n".join(lines)


def build_document_context(title: str, summary: str | None) -> str:
    """Context block for chat sessions linked to a document."""
    return f"Document: {title}\nSummary: {summary or NO_SUMMARY_PLACEHOLDER}"
