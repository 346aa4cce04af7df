"""Unit tests for UI helper functions."""

import pytest

from ui.helpers import (
    UIConfig,
    UploadValidationError,
    build_placeholder_text,
    file_ref_for,
    status_badge,
    summarize_documents,
    validate_upload,
)


def test_validate_upload_accepts_pdf() -> None:
    validate_upload("lease.pdf", "application/pdf", "My lease")


def test_validate_upload_accepts_pdf_extension_without_content_type() -> None:
    validate_upload("LEASE.PDF", None, "My lease")


def test_validate_upload_rejects_non_pdf() -> None:
    with pytest.raises(UploadValidationError, match="Please upload a PDF file"):
        validate_upload("lease.docx", "application/msword", "My lease")


def test_validate_upload_rejects_blank_title() -> None:
    with pytest.raises(UploadValidationError, match="Please enter a document title"):
        validate_upload("lease.pdf", "application/pdf", "   ")


def test_build_placeholder_text() -> None:
    text = build_placeholder_text("Lease", "citizen", "lease.pdf", 2048)

    assert text.startswith(
        "[PDF Content] Document: Lease\nCategory: citizen\nFile: lease.pdf\nSize: 2048 bytes\n\n"
    )
    assert "This is a placeholder for extracted PDF text." in text


def test_file_ref_is_content_addressed() -> None:
    assert file_ref_for(b"abc") == file_ref_for(b"abc")
    assert file_ref_for(b"abc") != file_ref_for(b"abd")
    assert file_ref_for(b"abc").startswith("sha256:")


def test_ui_config_updates_return_new_instances() -> None:
    config = UIConfig()

    dark = config.with_theme("dark")
    on_upload = dark.with_tab("upload")

    assert config == UIConfig(theme="light", active_tab="overview")
    assert dark.theme == "dark"
    assert on_upload == UIConfig(theme="dark", active_tab="upload")


def test_ui_config_is_frozen() -> None:
    config = UIConfig()

    with pytest.raises(AttributeError):
        config.theme = "dark"  # type: ignore[misc]


def test_ui_config_rejects_unknown_values() -> None:
    with pytest.raises(ValueError):
        UIConfig().with_theme("sepia")
    with pytest.raises(ValueError):
        UIConfig().with_tab("settings")


def test_summarize_documents() -> None:
    documents = [
        {"status": "completed", "risk_level": "high"},
        {"status": "completed", "risk_level": "low"},
        {"status": "processing", "risk_level": None},
    ]

    assert summarize_documents(documents) == {"total": 3, "analyzed": 2, "high_risk": 1}


def test_status_badge() -> None:
    assert "Analyzed" in status_badge("completed")
    assert status_badge("unknown") == "unknown"
