"""Document lifecycle: uploaded -> processing -> completed.

Analysis failures revert the document to uploaded. Malformed model output is
already replaced by the fallback payload inside the LLM client, so it still
completes the document.
"""

import asyncio
import logging
import time
from uuid import UUID

from backend.app.db.context import RequestContext
from backend.app.db.repositories import DocumentRepository
from backend.app.errors import NotFoundError
from backend.app.llm.client import LLMClient
from backend.app.models.common import Category, DocumentStatus
from backend.app.models.documents import Document
from backend.app.tasks.queue import Job, JobQueue
from backend.app.utils.logging import StructuredLifecycleLogger
from backend.app.utils.metrics import PrometheusLifecycleMetrics

logger = logging.getLogger(__name__)


class DocumentLifecycle:
    """Orchestrates document submission and background analysis."""

    def __init__(
        self,
        documents: DocumentRepository,
        llm: LLMClient,
        queue: JobQueue,
        *,
        llm_timeout_seconds: float = 60.0,
    ) -> None:
        self._documents = documents
        self._llm = llm
        self._queue = queue
        self._llm_timeout_seconds = llm_timeout_seconds
        self._log = StructuredLifecycleLogger()
        self._metrics = PrometheusLifecycleMetrics()

    async def submit(
        self,
        ctx: RequestContext,
        *,
        title: str,
        category: Category,
        file_ref: str,
        original_text: str,
    ) -> Document:
        """Create the document and schedule exactly one analysis job.

        Returns as soon as the document is stored; analysis runs later.
        """
        document = await self._documents.create_document(
            ctx,
            title=title,
            category=category,
            file_ref=file_ref,
            original_text=original_text,
        )
        self._log.log_transition(document.document_id, None, DocumentStatus.uploaded.value, "created")

        document_id = document.document_id
        self._queue.enqueue(
            Job(kind="advance", key=f"document:{document_id}", run=lambda: self.advance(document_id))
        )
        return document

    async def advance(self, document_id: UUID) -> None:
        """Run analysis for one document and write the outcome back."""
        document = await self._documents.get_document_internal(document_id)
        if document is None:
            logger.info(f"Document {document_id} no longer exists, skipping analysis")
            return

        claimed = await self._documents.claim_for_processing(document_id)
        if claimed is None:
            # Only uploaded documents can be claimed; completed ones stay completed
            logger.warning(
                f"Document {document_id} is {document.status.value}, not uploaded; skipping"
            )
            self._metrics.inc_document_outcome("skipped")
            return

        self._log.log_transition(
            document_id, DocumentStatus.uploaded.value, DocumentStatus.processing.value, "claimed"
        )

        started = time.perf_counter()
        try:
            analysis = await asyncio.wait_for(
                self._llm.analyze(claimed.original_text, claimed.category),
                timeout=self._llm_timeout_seconds,
            )
        except Exception as e:
            await self._revert(document_id, started, e)
            return

        try:
            await self._documents.complete_analysis(document_id, analysis)
        except Exception as e:
            # Write failures revert like analysis failures
            await self._revert(document_id, started, e)
            raise
        self._log.log_transition(
            document_id,
            DocumentStatus.processing.value,
            DocumentStatus.completed.value,
            "completed",
            latency_ms=(time.perf_counter() - started) * 1000,
        )
        self._metrics.inc_document_outcome("completed")

    async def _revert(self, document_id: UUID, started: float, error: Exception) -> None:
        reason = f"{type(error).__name__}: {error}" if str(error) else type(error).__name__
        await self._documents.revert_to_uploaded(document_id)
        self._log.log_transition(
            document_id,
            DocumentStatus.processing.value,
            DocumentStatus.uploaded.value,
            "reverted",
            latency_ms=(time.perf_counter() - started) * 1000,
            error_reason=reason,
        )
        self._metrics.inc_document_outcome("reverted")

    async def get_document(self, document_id: UUID, ctx: RequestContext) -> Document:
        """Get an owned document.

        Raises:
            NotFoundError: If absent or owned by someone else
        """
        document = await self._documents.get_document(document_id, ctx)
        if document is None:
            raise NotFoundError("Document")
        return document

    async def list_documents(self, ctx: RequestContext) -> list[Document]:
        """List the caller's documents, newest first."""
        return await self._documents.list_documents(ctx)

    async def update_notes(self, document_id: UUID, ctx: RequestContext, notes: str) -> Document:
        """Replace the notes on an owned document; status is untouched.

        Raises:
            NotFoundError: If absent or owned by someone else
        """
        if not await self._documents.update_notes(document_id, ctx, notes):
            raise NotFoundError("Document")
        return await self.get_document(document_id, ctx)
