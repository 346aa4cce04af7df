"""Streamlit UI for Legal Uplifter.

Run with: streamlit run ui/app.py
"""

# Add project root to sys.path for imports to work when run via streamlit
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import os  # noqa: E402

import httpx  # noqa: E402
import streamlit as st  # noqa: E402

from ui.helpers import (  # noqa: E402
    CATEGORIES,
    TABS,
    UIConfig,
    UploadValidationError,
    create_chat_session,
    list_documents,
    list_messages,
    save_notes,
    send_message,
    status_badge,
    submit_document,
    summarize_documents,
    validate_upload,
)

# Configuration
BACKEND_URL = os.environ.get("BACKEND_URL", "http://localhost:8000")
USER_ID = os.environ.get("UI_USER_ID", "00000000-0000-0000-0000-000000000002")

st.set_page_config(page_title="Legal Uplifter", page_icon="⚖️", layout="wide")

if "ui_config" not in st.session_state:
    st.session_state.ui_config = UIConfig()
if "chat_session_id" not in st.session_state:
    st.session_state.chat_session_id = None

config: UIConfig = st.session_state.ui_config

# =============================================================================
# SIDEBAR - NAVIGATION & THEME
# =============================================================================
with st.sidebar:
    st.title("⚖️ Legal Uplifter")
    tab = st.radio("Section", TABS, index=TABS.index(config.active_tab))
    dark = st.toggle("Dark mode", value=config.theme == "dark")

    new_config = config.with_tab(tab).with_theme("dark" if dark else "light")
    if new_config != config:
        st.session_state.ui_config = new_config
        st.rerun()

try:
    documents = list_documents(BACKEND_URL, USER_ID)
except httpx.HTTPError as e:
    st.error(f"❌ Could not reach the API: {e}")
    documents = []

# =============================================================================
# OVERVIEW
# =============================================================================
if config.active_tab == "overview":
    counts = summarize_documents(documents)
    col1, col2, col3 = st.columns(3)
    col1.metric("Documents", counts["total"])
    col2.metric("Analyzed", counts["analyzed"])
    col3.metric("High risk", counts["high_risk"])

    st.subheader("Recent documents")
    for doc in documents[:5]:
        st.markdown(f"- **{doc['title']}** ({doc['category']}) {status_badge(doc['status'])}")
    if not documents:
        st.info("No documents yet. Upload one from the **upload** section.")

# =============================================================================
# DOCUMENTS
# =============================================================================
elif config.active_tab == "documents":
    st.subheader("📄 Your documents")

    for doc in documents:
        with st.expander(f"{doc['title']} - {status_badge(doc['status'])}"):
            if doc["status"] == "completed":
                st.markdown(f"**Risk:** {doc['risk_level']}")
                st.markdown(doc["summary"])
                st.markdown("**Key points**")
                for point in doc["key_points"]:
                    st.markdown(f"- {point}")
                if doc["glossary_terms"]:
                    st.markdown("**Glossary**")
                    for term in doc["glossary_terms"]:
                        st.markdown(f"- _{term['term']}_: {term['definition']}")
            else:
                st.caption("Analysis pending. Refresh to check again.")

            notes = st.text_area("Notes", value=doc.get("notes") or "", key=f"notes-{doc['document_id']}")
            if st.button("Save notes", key=f"save-{doc['document_id']}"):
                save_notes(BACKEND_URL, USER_ID, doc["document_id"], notes)
                st.success("Notes saved")

# =============================================================================
# UPLOAD
# =============================================================================
elif config.active_tab == "upload":
    st.subheader("⬆️ Upload a document")

    with st.form("upload_form"):
        title = st.text_input("Document title *")
        category = st.selectbox("Category", CATEGORIES)
        uploaded = st.file_uploader("PDF file", type=["pdf"])
        submitted = st.form_submit_button("Upload")

    if submitted and uploaded is not None:
        try:
            validate_upload(uploaded.name, uploaded.type, title)
            submit_document(
                BACKEND_URL,
                USER_ID,
                title=title,
                category=category,
                file_name=uploaded.name,
                data=uploaded.getvalue(),
            )
        except UploadValidationError as e:
            st.error(f"❌ {e}")
        except httpx.HTTPError as e:
            st.error(f"❌ Upload failed. Please try again. ({e})")
        else:
            st.success("Document uploaded successfully! AI analysis starting...")
            st.session_state.ui_config = config.with_tab("documents")
            st.rerun()

# =============================================================================
# CHAT
# =============================================================================
elif config.active_tab == "chat":
    st.subheader("💬 Legal assistant")

    if st.session_state.chat_session_id is None:
        linked = st.selectbox(
            "Ground answers in a document (optional)",
            [None] + documents,
            format_func=lambda d: "No document" if d is None else d["title"],
        )
        if st.button("Start conversation"):
            session = create_chat_session(
                BACKEND_URL,
                USER_ID,
                title=linked["title"] if linked else "General questions",
                document_id=linked["document_id"] if linked else None,
            )
            st.session_state.chat_session_id = session["session_id"]
            st.rerun()
    else:
        session_id = st.session_state.chat_session_id
        for message in list_messages(BACKEND_URL, USER_ID, session_id):
            with st.chat_message(message["role"]):
                st.markdown(message["content"])

        prompt = st.chat_input("Ask about your document")
        if prompt:
            send_message(BACKEND_URL, USER_ID, session_id, prompt)
            st.rerun()
