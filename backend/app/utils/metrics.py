"""Prometheus metrics for analysis, chat and background jobs."""

from prometheus_client import Counter, Histogram

llm_call_latency_ms = Histogram(
    "llm_call_latency_ms",
    "Completion service call latency in milliseconds",
    ["operation", "outcome"],
    buckets=[100, 250, 500, 1000, 2000, 4000, 8000, 16000, 32000, 64000],
)

analysis_fallbacks_total = Counter(
    "analysis_fallbacks_total",
    "Analysis responses that failed validation and were replaced by the fallback payload",
)

document_analysis_total = Counter(
    "document_analysis_total",
    "Document lifecycle outcomes",
    ["outcome"],
)

chat_replies_total = Counter(
    "chat_replies_total",
    "Assistant replies appended to chat sessions",
    ["outcome"],
)

background_jobs_total = Counter(
    "background_jobs_total",
    "Background jobs executed by the work queue",
    ["kind", "outcome"],
)


class PrometheusLLMMetrics:
    """Prometheus-based completion service metrics."""

    def record_latency(self, operation: str, outcome: str, latency_ms: float) -> None:
        """Record completion call latency."""
        llm_call_latency_ms.labels(operation=operation, outcome=outcome).observe(latency_ms)

    def inc_analysis_fallback(self) -> None:
        """Increment fallback counter."""
        analysis_fallbacks_total.inc()


class PrometheusLifecycleMetrics:
    """Prometheus-based lifecycle metrics."""

    def inc_document_outcome(self, outcome: str) -> None:
        """Count a document lifecycle outcome (completed, reverted, skipped)."""
        document_analysis_total.labels(outcome=outcome).inc()

    def inc_chat_reply(self, outcome: str) -> None:
        """Count an assistant reply (ok, apology)."""
        chat_replies_total.labels(outcome=outcome).inc()

    def inc_job(self, kind: str, outcome: str) -> None:
        """Count a finished background job."""
        background_jobs_total.labels(kind=kind, outcome=outcome).inc()
