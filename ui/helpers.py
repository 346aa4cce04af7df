"""Helper functions for the UI - API client calls, upload validation, view state."""

import hashlib
from dataclasses import dataclass, replace
from typing import Any

import httpx

TABS = ("overview", "documents", "upload", "chat")
THEMES = ("light", "dark")
CATEGORIES = ("business", "citizen", "student")

PLACEHOLDER_TEMPLATE = (
    "[PDF Content] Document: {title}\n"
    "Category: {category}\n"
    "File: {file_name}\n"
    "Size: {size} bytes\n\n"
    "This is a placeholder for extracted PDF text. In a production app, you would use "
    "PDF.js or similar library to extract actual text content from the PDF file."
)


class UploadValidationError(ValueError):
    """Upload rejected before any API call."""


@dataclass(frozen=True)
class UIConfig:
    """View state; user actions return a new config instead of mutating."""

    theme: str = "light"
    active_tab: str = "overview"

    def with_theme(self, theme: str) -> "UIConfig":
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme}")
        return replace(self, theme=theme)

    def with_tab(self, tab: str) -> "UIConfig":
        if tab not in TABS:
            raise ValueError(f"Unknown tab: {tab}")
        return replace(self, active_tab=tab)


def get_auth_header(user_id: str) -> dict[str, str]:
    """Bearer header carrying the signed-in user's id."""
    return {"Authorization": f"Bearer {user_id}"}


def validate_upload(file_name: str, content_type: str | None, title: str) -> None:
    """Check an upload the way the API expects it.

    Raises:
        UploadValidationError: If the file is not a PDF or the title is blank
    """
    is_pdf = (content_type is not None and "pdf" in content_type.lower()) or (
        file_name.lower().endswith(".pdf")
    )
    if not is_pdf:
        raise UploadValidationError("Please upload a PDF file")
    if not title.strip():
        raise UploadValidationError("Please enter a document title")


def build_placeholder_text(title: str, category: str, file_name: str, size: int) -> str:
    """Stand-in extracted text until real PDF extraction exists."""
    return PLACEHOLDER_TEMPLATE.format(
        title=title, category=category, file_name=file_name, size=size
    )


def file_ref_for(data: bytes) -> str:
    """Content-addressed file reference."""
    return f"sha256:{hashlib.sha256(data).hexdigest()}"


def submit_document(
    backend_url: str,
    user_id: str,
    *,
    title: str,
    category: str,
    file_name: str,
    data: bytes,
) -> dict[str, Any]:
    """POST /documents with a placeholder text body.

    Raises:
        httpx.HTTPStatusError: If request fails
    """
    payload = {
        "title": title.strip(),
        "category": category,
        "file_ref": file_ref_for(data),
        "original_text": build_placeholder_text(title.strip(), category, file_name, len(data)),
    }
    response = httpx.post(
        f"{backend_url}/documents",
        json=payload,
        headers=get_auth_header(user_id),
        timeout=30.0,
    )
    response.raise_for_status()
    result: dict[str, Any] = response.json()
    return result


def list_documents(backend_url: str, user_id: str) -> list[dict[str, Any]]:
    """GET /documents, newest first."""
    response = httpx.get(
        f"{backend_url}/documents", headers=get_auth_header(user_id), timeout=30.0
    )
    response.raise_for_status()
    documents: list[dict[str, Any]] = response.json()["documents"]
    return documents


def save_notes(backend_url: str, user_id: str, document_id: str, notes: str) -> dict[str, Any]:
    """PATCH /documents/{document_id}/notes."""
    response = httpx.patch(
        f"{backend_url}/documents/{document_id}/notes",
        json={"notes": notes},
        headers=get_auth_header(user_id),
        timeout=30.0,
    )
    response.raise_for_status()
    result: dict[str, Any] = response.json()
    return result


def create_chat_session(
    backend_url: str, user_id: str, title: str, document_id: str | None = None
) -> dict[str, Any]:
    """POST /chat/sessions."""
    response = httpx.post(
        f"{backend_url}/chat/sessions",
        json={"title": title, "document_id": document_id},
        headers=get_auth_header(user_id),
        timeout=30.0,
    )
    response.raise_for_status()
    result: dict[str, Any] = response.json()
    return result


def list_messages(backend_url: str, user_id: str, session_id: str) -> list[dict[str, Any]]:
    """GET /chat/sessions/{session_id}/messages, oldest first."""
    response = httpx.get(
        f"{backend_url}/chat/sessions/{session_id}/messages",
        headers=get_auth_header(user_id),
        timeout=30.0,
    )
    response.raise_for_status()
    messages: list[dict[str, Any]] = response.json()["messages"]
    return messages


def send_message(backend_url: str, user_id: str, session_id: str, content: str) -> dict[str, Any]:
    """POST /chat/sessions/{session_id}/messages; the reply arrives asynchronously."""
    response = httpx.post(
        f"{backend_url}/chat/sessions/{session_id}/messages",
        json={"content": content},
        headers=get_auth_header(user_id),
        timeout=30.0,
    )
    response.raise_for_status()
    result: dict[str, Any] = response.json()
    return result


def summarize_documents(documents: list[dict[str, Any]]) -> dict[str, int]:
    """Dashboard counters: total, analyzed, high risk."""
    return {
        "total": len(documents),
        "analyzed": sum(1 for d in documents if d.get("status") == "completed"),
        "high_risk": sum(1 for d in documents if d.get("risk_level") == "high"),
    }


def status_badge(status: str) -> str:
    """Short label for a document status."""
    return {
        "uploaded": "⏳ Queued",
        "processing": "🔄 Analyzing",
        "completed": "✅ Analyzed",
    }.get(status, status)
