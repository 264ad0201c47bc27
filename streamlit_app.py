"""Streamlit Web UI for resume-customizer.

Three pages:
  Customize: job description (pasted or fetched) → customized resume → preview / PDF / archive
  Archive  : saved variants, mark current, delete
  Settings : target page count and recent run statistics
"""

from __future__ import annotations

import asyncio
import logging
import os

import nest_asyncio
import streamlit as st
import streamlit.components.v1 as components
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()
nest_asyncio.apply()

# Streamlit Cloud: sync st.secrets → os.environ so provider clients can read them
for key in (
    "AI_PROVIDER",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GOOGLE_AI_API_KEY",
    "OLLAMA_BASE_URL",
):
    if key not in os.environ:
        try:
            os.environ[key] = st.secrets[key]
        except (KeyError, FileNotFoundError):
            pass

from resume_customizer.config import PROVIDERS, load_config
from resume_customizer.errors import (
    ConfigurationError,
    ExtractionError,
    PDFGenerationError,
    ResumeCustomizerError,
    SSRFError,
)
from resume_customizer.export import AVAILABLE_THEMES, render_html_preview, render_pdf
from resume_customizer.logging import RunStore
from resume_customizer.models.customization import CustomizationRequest
from resume_customizer.models.resume import load_mother_resume
from resume_customizer.parsers.jd_parser import parse_jd, safe_filename
from resume_customizer.parsers.url_extractor import fetch_job_description
from resume_customizer.pipeline.customizer import create_customizer
from resume_customizer.pipeline.prompt_builder import PROMPT_STYLES
from resume_customizer.storage.archive_store import ArchiveStore

config = load_config()
archive = ArchiveStore(config.storage.resolved_db_path)
run_store = RunStore(config.storage.resolved_db_path)

st.set_page_config(
    page_title="Resume Customizer",
    page_icon=":page_facing_up:",
    layout="wide",
)

with st.sidebar:
    st.title("Resume Customizer")
    st.caption("Tailor your resume to a job description")
    page = st.radio("Page", ["Customize", "Archive", "Settings"], index=0)
    st.divider()
    default_provider = os.environ.get("AI_PROVIDER") or config.llm.provider
    provider = st.selectbox(
        "AI provider",
        PROVIDERS,
        index=PROVIDERS.index(default_provider) if default_provider in PROVIDERS else 0,
    )
    theme = st.selectbox(
        "Theme", AVAILABLE_THEMES, index=AVAILABLE_THEMES.index(config.export.theme)
    )


def _pdf_bytes(result) -> bytes | None:
    try:
        return asyncio.run(
            render_pdf(result.resume, result.config, theme=theme, strategy=config.export.strategy)
        )
    except PDFGenerationError:
        logger.exception("PDF generation failed")
        return None


def _customize_page() -> None:
    st.header("Customize")

    with st.expander("Fetch job description from URL"):
        url = st.text_input("Job posting URL")
        if st.button("Fetch", disabled=not url):
            try:
                with st.spinner("Fetching..."):
                    posting = asyncio.run(fetch_job_description(url))
                st.session_state["jd_text"] = posting.content
            except SSRFError:
                st.error("Access to this address is not allowed")
            except (ValueError, ExtractionError) as e:
                st.error(str(e))

    jd_text = st.text_area("Job description", key="jd_text", height=260)

    col_style, col_prompt = st.columns([1, 2])
    with col_style:
        style = st.selectbox(
            "Style",
            list(PROMPT_STYLES),
            index=list(PROMPT_STYLES).index(config.pipeline.default_style),
            format_func=lambda s: PROMPT_STYLES[s].name,
        )
        st.caption(PROMPT_STYLES[style].description)
    with col_prompt:
        custom_prompt = st.text_area("Custom instructions (optional, overrides style)", height=100)

    if st.button("Customize resume", type="primary", disabled=not jd_text.strip()):
        request = CustomizationRequest(
            job_description=parse_jd(jd_text),
            base=load_mother_resume(),
            instructions=custom_prompt.strip() or None,
            style=style,
        )
        try:
            customizer = create_customizer(config, provider=provider, run_store=run_store)
        except ConfigurationError as e:
            st.error(str(e))
            return
        with st.spinner(f"Customizing with {customizer.provider.name}..."):
            try:
                result = asyncio.run(customizer.customize(request))
            except ResumeCustomizerError as e:
                st.error(str(e))
                return
        st.session_state["result"] = result

    if "result" not in st.session_state:
        return

    result = st.session_state["result"]
    if result.fallback_used:
        st.warning(f"AI unavailable ({result.error_kind}); showing keyword-based fallback.")
    else:
        st.success(result.reasoning)

    file_name = safe_filename(result.company_or_role)
    cols = st.columns(3)
    with cols[0]:
        st.download_button(
            "Download JSON",
            data=result.resume.to_json().encode("utf-8"),
            file_name=file_name.replace(".pdf", ".json"),
            mime="application/json",
        )
    with cols[1]:
        pdf = _pdf_bytes(result)
        if pdf is not None:
            st.download_button("Download PDF", data=pdf, file_name=file_name, mime="application/pdf")
        else:
            st.warning("PDF generation failed")
    with cols[2]:
        label = st.text_input("Archive label", value=result.company_or_role or "")
        if st.button("Save to archive", disabled=not label.strip()):
            item = archive.save(label, result.resume, result.config)
            st.toast(f"Archived as #{item.id}")

    components.html(render_html_preview(result.resume, result.config, theme), height=900, scrolling=True)


def _archive_page() -> None:
    st.header("Archive")
    items = archive.list()
    if not items:
        st.info("No archived resumes yet.")
        return

    for item in items:
        marker = " (current)" if item.is_current else ""
        with st.expander(f"#{item.id} {item.label}{marker} - {item.date:%Y-%m-%d %H:%M}"):
            cols = st.columns(3)
            if cols[0].button("Set as current", key=f"current-{item.id}", disabled=item.is_current):
                archive.set_current(item.id)
                st.rerun()
            if cols[1].button("Delete", key=f"delete-{item.id}"):
                archive.delete(item.id)
                st.rerun()
            cols[2].download_button(
                "JSON",
                data=item.data.to_json().encode("utf-8"),
                file_name=safe_filename(item.label).replace(".pdf", ".json"),
                mime="application/json",
                key=f"json-{item.id}",
            )
            components.html(
                render_html_preview(item.data, item.config, theme), height=600, scrolling=True
            )


def _settings_page() -> None:
    st.header("Settings")
    pages = st.number_input(
        "Target resume length (pages)", min_value=1, value=archive.get_target_pages(), step=1
    )
    if st.button("Save settings"):
        archive.set_target_pages(int(pages))
        st.toast("Settings saved")

    st.subheader("Recent runs")
    stats = run_store.get_stats()
    cols = st.columns(3)
    cols[0].metric("Runs", stats["total_runs"])
    cols[1].metric("Fallback rate", f"{stats['fallback_rate']:.0f}%")
    cols[2].metric("Output tokens", stats["total_output_tokens"])
    st.dataframe(
        [
            {
                "time": log.timestamp.strftime("%Y-%m-%d %H:%M"),
                "provider": log.provider,
                "style": log.style,
                "fallback": log.fallback_used,
                "error": log.error_kind or "",
                "company/role": log.company_or_role or "",
            }
            for log in run_store.get_logs(limit=20)
        ],
        use_container_width=True,
    )


if page == "Customize":
    _customize_page()
elif page == "Archive":
    _archive_page()
else:
    _settings_page()
