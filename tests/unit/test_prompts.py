"""Unit tests for prompt builders."""

import pytest

from backend.app.llm.prompts import (
    build_analysis_prompt,
    build_chat_system_prompt,
    build_document_context,
)
from backend.app.models.common import Category


@pytest.mark.parametrize(
    ("category", "framing"),
    [
        (Category.business, "business contracts, agreements, and legal documents"),
        (Category.citizen, "consumer rights, legal notices, and civic documents"),
        (Category.student, "academic policies, housing agreements, and educational contracts"),
    ],
)
def test_analysis_prompt_uses_category_framing(category: Category, framing: str) -> None:
    prompt = build_analysis_prompt("Some text", category)

    assert prompt.startswith(f"Analyze this {framing} document")


def test_analysis_prompt_requests_json_contract() -> None:
    prompt = build_analysis_prompt("The lessee shall...", Category.citizen)

    assert "The lessee shall..." in prompt
    assert '"keyPoints"' in prompt
    assert '"riskLevel": "low|medium|high"' in prompt
    assert '"glossaryTerms"' in prompt


def test_chat_system_prompt_mentions_disclaimer() -> None:
    prompt = build_chat_system_prompt(None, Category.student)

    assert prompt.startswith("You are Legal Uplifter AI")
    assert "specializing in student legal matters" in prompt
    assert "not legal advice" in prompt
    assert "Context from document" not in prompt


def test_chat_system_prompt_empty_context_is_omitted() -> None:
    assert "Context from document" not in build_chat_system_prompt("", None)


def test_document_context_with_and_without_summary() -> None:
    assert build_document_context("Lease", "Twelve months.") == (
        "Document: Lease\nSummary: Twelve months."
    )
    assert build_document_context("Lease", None) == "Document: Lease\nSummary: No summary available"
