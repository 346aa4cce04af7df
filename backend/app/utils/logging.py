"""Structured logging for the document lifecycle and chat replies."""

import logging
from typing import Any
from uuid import UUID

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Install a basic root handler at the configured level."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class StructuredLifecycleLogger:
    """Structured logger for document status transitions and chat replies."""

    def log_transition(
        self,
        document_id: UUID,
        from_status: str | None,
        to_status: str,
        outcome: str,
        latency_ms: float | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log a document status transition with structured data."""
        log_data: dict[str, Any] = {
            "document_id": str(document_id),
            "from": from_status,
            "to": to_status,
            "outcome": outcome,
        }

        if latency_ms is not None:
            log_data["latency_ms"] = round(latency_ms, 2)
        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Document {document_id}: {from_status} -> {to_status} ({outcome})"

        if error_reason:
            logger.warning(log_msg, extra={"structured": log_data})
        else:
            logger.info(log_msg, extra={"structured": log_data})

    def log_reply(
        self,
        session_id: UUID,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        """Log an assistant reply with structured data."""
        log_data: dict[str, Any] = {
            "session_id": str(session_id),
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Chat reply for session {session_id} - {outcome}"

        if outcome == "ok":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
