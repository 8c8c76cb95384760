"""
Streamlit app: Literotica → EPUB

Purpose
- Turn a Literotica story, or a whole series, into a single EPUB for offline reading.

High-level flow
1) Validate the URL (must be a literotica.com page)
2) Fetch the page through a rotating set of CORS relays and decide: series index or single story
3) Fetch each chapter in order, isolate the story text and strip scripts/styles/frames
4) Build the EPUB in memory (mimetype, container, chapters, content.opf, toc.ncx)
5) Offer the file for download

Tips
- Turn DEBUG = True to mirror each step into the UI while processing
- Set LOGLEVEL=DEBUG in the environment to see every fetch attempt in the console
"""

import logging
import os

import streamlit as st

from story_epub import ConversionError, StoryConverter

DEBUG = False

APP_TITLE = "Literotica → EPUB"

_LOGLEVEL = os.getenv("LOGLEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _LOGLEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
log = logging.getLogger("story_epub.app")

st.set_page_config(page_title=APP_TITLE, page_icon="📚", layout="centered")
st.title("📚 Literotica → EPUB")
st.caption("Paste a story or series URL and download it as one EPUB file.")

if "running" not in st.session_state:
    st.session_state.running = False
if "status" not in st.session_state:
    st.session_state.status = None
if "result" not in st.session_state:
    st.session_state.result = None


def _start():
    # Runs before the rerun, so the button below renders disabled for the whole conversion.
    st.session_state.running = True
    st.session_state.pending_url = st.session_state.get("url", "")
    st.session_state.result = None


def show_status(slot, message: str, severity: str = "info"):
    """Render ``message`` into ``slot`` using the matching Streamlit box."""
    st.session_state.status = (message, severity)
    if severity == "success":
        slot.success(message)
    elif severity == "error":
        slot.error(message)
    else:
        slot.info(message)
    if DEBUG:
        st.info(f"Debug: {message}")


st.text_input(
    "Story or series URL",
    key="url",
    placeholder="https://www.literotica.com/s/...",
)
st.button(
    "Convert to EPUB",
    type="primary",
    disabled=st.session_state.running,
    on_click=_start,
)
status = st.empty()

if st.session_state.running:
    url = st.session_state.get("pending_url", "")
    try:
        with StoryConverter() as converter:
            result = converter.convert(url, progress=lambda msg, sev: show_status(status, msg, sev))
        st.session_state.result = result
        show_status(status, "✅ EPUB ready!", "success")
    except ConversionError as e:
        log.warning("Conversion failed: %s", e)
        show_status(status, f"❌ Error: {e}", "error")
    except Exception as e:
        log.exception("Unexpected error while converting %s", url)
        show_status(status, f"❌ Error: {e}", "error")
    finally:
        st.session_state.running = False
    st.rerun()
else:
    if st.session_state.status:
        message, severity = st.session_state.status
        show_status(status, message, severity)

    result = st.session_state.result
    if result is not None:
        st.write(
            f"**{result.project.title}** · {len(result.project.chapters)} chapter(s) · {len(result.data) // 1024} KB"
        )
        st.download_button(
            label="Download EPUB",
            data=result.data,
            file_name=result.filename,
            mime="application/epub+zip",
        )
