"""
Website Audit Tool - Streamlit Application
Form and tabbed report on top of the audit pipeline.
"""

import asyncio
import os

import streamlit as st

from audit import run_audit_pipeline
from orchestrator.context_store import AuditRequest, normalize_url
from utils.config import AuditConfig, load_env_file
from utils.errors import ConfigError, InputError, PersistenceError
from utils.llm_client import API_KEY_NAMES
from utils.scoring import ScoreBand

load_env_file()

# Also load Streamlit Cloud secrets into os.environ so the entire app can use them
try:
    for key in ("MISTRAL_API_KEY", "ANTHROPIC_API_KEY", "GEMINI_API_KEY", "LLM_PROVIDER", "DATABASE_URL"):
        if key not in os.environ:
            val = st.secrets.get(key)
            if val:
                os.environ[key] = val
except Exception:
    pass  # st.secrets unavailable (local dev without secrets.toml)

BAND_ICONS = {
    ScoreBand.EXCELLENT: "✅",
    ScoreBand.GOOD: "\U0001f4c8",
    ScoreBand.WARNING: "⚠️",
    ScoreBand.CRITICAL: "❌",
}

AGENT_TITLES = {
    "business": "Business Analysis",
    "style": "Brand Style",
    "hero": "Hero Section",
    "problem": "Problem Articulation",
    "seo": "SEO & Copy",
    "conversion": "Conversion Barriers",
}

st.set_page_config(page_title="Website Audit", page_icon="\U0001f50d", layout="wide")

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------

try:
    config = AuditConfig.from_env()
except ConfigError as e:
    st.error(f"Configuration error: {e}")
    st.stop()

with st.sidebar:
    st.caption("Six-agent website audit")
    key_name = API_KEY_NAMES.get(config.llm_provider, "MISTRAL_API_KEY")
    if os.environ.get(key_name):
        st.success(f"LLM: {config.llm_provider} connected", icon="✅")
    else:
        st.warning(f"LLM: {key_name} missing, agents will use fallback results", icon="⚠️")
    persist = st.checkbox("Save audit to database", value=True)

# ---------------------------------------------------------------------------
# Form
# ---------------------------------------------------------------------------

st.title("Get Your Website Audit")
st.markdown(
    "Enter your website URL and optionally your social profile to get insights "
    "from six specialist agents."
)

with st.form("audit_form"):
    website_url = st.text_input("Website URL *", placeholder="https://yourwebsite.com")
    social_url = st.text_input("Social Profile (Optional)", placeholder="https://linkedin.com/company/...")
    email = st.text_input("Email (Optional)", placeholder="you@company.com")
    submitted = st.form_submit_button("Start Audit", type="primary")

if submitted:
    try:
        normalize_url(website_url)
    except InputError as e:
        st.error(str(e))
        st.stop()

    request = AuditRequest(website_url=website_url, social_url=social_url or None, email=email or None)
    with st.spinner("Analyzing your website..."):
        try:
            result = asyncio.run(run_audit_pipeline(request, config, persist=persist))
        except (InputError, PersistenceError) as e:
            st.error(str(e))
            st.stop()
    st.session_state["audit_result"] = result

# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

result = st.session_state.get("audit_result")
if result is not None:
    report = result.report
    st.divider()

    col1, col2 = st.columns([1, 3])
    col1.metric("Overall Score", f"{report.overall_score}/100")
    col2.progress(report.overall_score / 100)
    col2.caption(f"{report.website_url} • audit {result.id}")
    if report.extracted_page is not None and report.extracted_page.degraded:
        st.warning("The website could not be loaded. Results below are generic.")

    names = list(report.agents.keys())
    tabs = st.tabs(["All"] + [AGENT_TITLES.get(n, n.title()) for n in names])

    def render_agent(name):
        agent_result = report.agents[name]
        icon = BAND_ICONS[agent_result.band]
        st.subheader(f"{icon} {AGENT_TITLES.get(name, name.title())} - {agent_result.score}/100")
        st.progress(agent_result.score / 100)
        st.markdown("**Key Insights**")
        for insight in agent_result.insights:
            st.markdown(f"- {insight}")
        st.markdown("**Recommendations**")
        for rec in agent_result.recommendations:
            st.markdown(f"- {rec}")

    with tabs[0]:
        cols = st.columns(2)
        for i, name in enumerate(names):
            with cols[i % 2]:
                render_agent(name)

    for tab, name in zip(tabs[1:], names):
        with tab:
            render_agent(name)

    st.divider()
    st.subheader("Top Recommendations")
    for i, rec in enumerate(report.top_recommendations, 1):
        st.markdown(f"**{i}.** {rec}")
