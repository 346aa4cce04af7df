"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint.

    Exposes all registered Prometheus metrics including:
    - document_analysis_total{outcome}
    - analysis_fallbacks_total
    - llm_call_latency_ms{operation, outcome}
    - chat_replies_total{outcome}
    - background_jobs_total{kind, outcome}
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
