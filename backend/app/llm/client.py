"""LLM client for document analysis and legal chat with OpenAI integration.

Security: Reads API key from environment only, never hardcoded.
Provides deterministic stub when no key present for testing.
"""

import json
import logging
import re
import time
from typing import Protocol

from openai import AsyncOpenAI
from pydantic import ValidationError

from backend.app.config import Settings, get_settings
from backend.app.llm.prompts import build_analysis_prompt, build_chat_system_prompt
from backend.app.models.common import Category, RiskLevel
from backend.app.models.documents import FALLBACK_ANALYSIS, AnalysisResultV1
from backend.app.utils.metrics import PrometheusLLMMetrics

logger = logging.getLogger(__name__)

CHAT_APOLOGY = "I apologize, but I couldn't generate a response. Please try again."

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)

_metrics = PrometheusLLMMetrics()


class LLMInvocationError(Exception):
    """Completion service failed or returned no content."""


def parse_analysis(content: str) -> AnalysisResultV1:
    """Parse model output into AnalysisResultV1.

    Output that is not JSON, or JSON of the wrong shape, yields a copy of
    FALLBACK_ANALYSIS instead of an error.
    """
    text = content.strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        return AnalysisResultV1.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Analysis output did not match AnalysisResultV1, using fallback: {e}")
        _metrics.inc_analysis_fallback()
        return FALLBACK_ANALYSIS.model_copy(deep=True)


class LLMClient(Protocol):
    """Protocol for LLM client implementations."""

    async def analyze(self, text: str, category: Category) -> AnalysisResultV1:
        """Summarize and risk-score a document.

        Args:
            text: Extracted document text
            category: Document category, selects prompt framing

        Returns:
            Parsed analysis, or the fallback payload for malformed output

        Raises:
            LLMInvocationError: If the service fails or returns empty content
        """
        ...

    async def chat(
        self, message: str, context: str | None = None, category: Category | None = None
    ) -> str:
        """Answer a chat message, optionally grounded in document context.

        Returns:
            Reply text, or CHAT_APOLOGY when the service returns empty content
        """
        ...


class DeterministicStubClient:
    """Deterministic stub client for testing (no API key required)."""

    async def analyze(self, text: str, category: Category) -> AnalysisResultV1:
        """Generate deterministic stub analysis."""
        lines = [line.strip() for line in text.splitlines() if line.strip()]

        summary = (
            f"Stub analysis of a {category.value} document ({len(text)} characters). "
            "This is a placeholder summary generated without LLM analysis."
        )
        key_points = [line[:120] for line in lines[:5]] or ["Document is empty"]

        return AnalysisResultV1(
            summary=summary,
            key_points=key_points,
            risk_level=RiskLevel.medium,
            glossary_terms=[],
        )

    async def chat(
        self, message: str, context: str | None = None, category: Category | None = None
    ) -> str:
        """Generate deterministic stub reply."""
        specialty = category.value if category is not None else "general"
        reply = f"[stub:{specialty}] You asked: {message}"
        if context:
            reply += f"\n\n{context}"
        return reply


class OpenAIClient:
    """OpenAI-backed LLM client."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4.1-nano",
        *,
        base_url: str | None = None,
        timeout: float = 60.0,
        analysis_temperature: float = 0.3,
        chat_temperature: float = 0.7,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Model name to use for both analysis and chat
            base_url: Optional OpenAI-compatible endpoint
            timeout: Per-request timeout in seconds
            analysis_temperature: Sampling temperature for analysis (low, deterministic)
            chat_temperature: Sampling temperature for chat (higher, varied phrasing)
        """
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        self.model = model
        self.analysis_temperature = analysis_temperature
        self.chat_temperature = chat_temperature

    async def _complete(
        self, operation: str, messages: list[dict[str, str]], temperature: float
    ) -> str:
        """Run one non-streaming completion and return its (possibly empty) content."""
        started = time.perf_counter()
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,  # type: ignore[arg-type]
                temperature=temperature,
            )
        except Exception as e:
            _metrics.record_latency(operation, "error", (time.perf_counter() - started) * 1000)
            logger.error(f"OpenAI {operation} call failed: {e}")
            raise LLMInvocationError(f"{operation} call failed: {e}") from e

        content = response.choices[0].message.content or ""
        outcome = "ok" if content else "empty"
        _metrics.record_latency(operation, outcome, (time.perf_counter() - started) * 1000)
        return content

    async def analyze(self, text: str, category: Category) -> AnalysisResultV1:
        """Analyze a document using OpenAI API."""
        prompt = build_analysis_prompt(text, category)

        content = await self._complete(
            "analyze",
            [{"role": "user", "content": prompt}],
            self.analysis_temperature,
        )

        if not content:
            raise LLMInvocationError("No AI response")

        return parse_analysis(content)

    async def chat(
        self, message: str, context: str | None = None, category: Category | None = None
    ) -> str:
        """Answer a chat message using OpenAI API."""
        content = await self._complete(
            "chat",
            [
                {"role": "system", "content": build_chat_system_prompt(context, category)},
                {"role": "user", "content": message},
            ],
            self.chat_temperature,
        )

        if not content:
            logger.warning("OpenAI returned empty chat response, using apology")
            return CHAT_APOLOGY

        return content


async def get_llm_client(settings: Settings | None = None) -> LLMClient:
    """Factory function to get appropriate LLM client based on config.

    Returns:
        OpenAIClient if API key is configured, DeterministicStubClient otherwise
    """
    if settings is None:
        settings = get_settings()

    api_key = settings.openai_api_key

    if api_key and api_key.get_secret_value():
        logger.info("Using OpenAI client for analysis and chat")
        return OpenAIClient(
            api_key=api_key.get_secret_value(),
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout=settings.llm_timeout_seconds,
            analysis_temperature=settings.analysis_temperature,
            chat_temperature=settings.chat_temperature,
        )
    else:
        logger.warning("No OpenAI API key configured, using deterministic stub client")
        return DeterministicStubClient()
