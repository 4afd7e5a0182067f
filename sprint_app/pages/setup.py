"""Connection setup page: collect Jira credentials and initialize SprintReportService."""

from __future__ import annotations

import logging

import streamlit as st

from sprint_app.app import register_page
from sprint_app.core.config import DEFAULT_CACHE_TTL_SECONDS, JiraConnectionSettings
from sprint_app.core.jira_client import JiraAPI
from sprint_app.core.service import SprintReportService

logger = logging.getLogger(__name__)


def connect(settings: JiraConnectionSettings, cache_ttl: float = DEFAULT_CACHE_TTL_SECONDS) -> SprintReportService:
    api = JiraAPI(settings.server, settings.email, settings.token)
    api._cache_ttl = float(cache_ttl)
    service = SprintReportService(api)
    st.session_state["jira_server"] = settings.server
    st.session_state["jira_email"] = settings.email
    st.session_state["project_key"] = settings.project_key
    st.session_state["report_service"] = service
    return service


@register_page("Setup / Connection")
def setup_page():
    st.title("Jira Connection Setup")
    st.caption("Enter credentials (use secrets manager in production).")

    # Pre-fill from secrets if available (user can override)
    defaults = JiraConnectionSettings.from_secrets(st.secrets)

    server = st.text_input("Jira Server URL", value=st.session_state.get("jira_server") or defaults.server)
    email = st.text_input("Email / Username", value=st.session_state.get("jira_email") or defaults.email)
    token = st.text_input("API Token", type="password", value=defaults.token)
    project_key = st.text_input("Project key", value=st.session_state.get("project_key") or defaults.project_key)
    ttl = st.number_input(
        "Client cache TTL (seconds)",
        min_value=60,
        max_value=3600,
        value=int(DEFAULT_CACHE_TTL_SECONDS),
    )
    init_btn = st.button("Initialize Connection", type="primary")

    if init_btn:
        settings = JiraConnectionSettings(server=server, email=email, token=token, project_key=project_key)
        if not settings.complete:
            st.error("Server, email and token are required.")
            return
        try:
            connect(settings, ttl)
            st.success("Connection initialized.")
        except Exception as e:  # pragma: no cover
            logger.error("Failed to initialize Jira client: %s", e)
            st.error(f"Failed to initialize Jira client: {e}")

    if "report_service" in st.session_state:
        st.info("SprintReportService ready.")
