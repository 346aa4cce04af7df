"""Document endpoints - submit, list, get, and notes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from backend.app.api.auth import get_current_context
from backend.app.api.deps import AppServices, enforce_rate_limit, get_services
from backend.app.db.context import RequestContext
from backend.app.models.common import Category
from backend.app.models.documents import Document

router = APIRouter(prefix="/documents", tags=["documents"])


class SubmitDocumentRequest(BaseModel):
    """Request body for POST /documents."""

    title: str = Field(..., min_length=1, max_length=200, description="Document title")
    category: Category = Field(..., description="business, citizen or student")
    file_ref: str = Field(..., min_length=1, description="Opaque handle to the stored file")
    original_text: str = Field("", description="Extracted (or placeholder) document text")


class UpdateNotesRequest(BaseModel):
    """Request body for PATCH /documents/{document_id}/notes."""

    notes: str = Field(..., description="Replacement notes text")


class DocumentListResponse(BaseModel):
    """Response for GET /documents."""

    documents: list[Document]


@router.post(
    "",
    response_model=Document,
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[Depends(enforce_rate_limit)],
)
async def submit_document(
    request: SubmitDocumentRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    services: Annotated[AppServices, Depends(get_services)],
) -> Document:
    """Store a document and schedule its analysis.

    Responds before analysis runs; the returned document has status uploaded.
    Poll GET /documents/{document_id} for the outcome.
    """
    return await services.lifecycle.submit(
        ctx,
        title=request.title,
        category=request.category,
        file_ref=request.file_ref,
        original_text=request.original_text,
    )


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    services: Annotated[AppServices, Depends(get_services)],
) -> DocumentListResponse:
    """List the caller's documents, newest first."""
    documents = await services.lifecycle.list_documents(ctx)
    return DocumentListResponse(documents=documents)


@router.get("/{document_id}", response_model=Document)
async def get_document(
    document_id: UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    services: Annotated[AppServices, Depends(get_services)],
) -> Document:
    """Get one of the caller's documents.

    Raises:
        NotFoundError: 404 if absent or owned by someone else
    """
    return await services.lifecycle.get_document(document_id, ctx)


@router.patch("/{document_id}/notes", response_model=Document)
async def update_notes(
    document_id: UUID,
    request: UpdateNotesRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    services: Annotated[AppServices, Depends(get_services)],
) -> Document:
    return await services.lifecycle.update_notes(document_id, ctx, request.notes)
