"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``sprint_app/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st

from sprint_app.app import main
from sprint_app.core.config import JiraConnectionSettings

st.set_page_config(layout="wide")
logger = logging.getLogger(__name__)


def _auto_init_report_service():
    """Initialize the report service from Streamlit secrets if available."""
    if "report_service" in st.session_state:
        return

    settings = JiraConnectionSettings.from_secrets(st.secrets)
    if settings.complete:
        st.sidebar.info("Secrets found, attempting to connect to Jira...")
        try:
            from sprint_app.pages.setup import connect

            connect(settings)
            st.sidebar.success("Jira connection successful!")
        except Exception as e:
            logger.error("Jira connection failed: %s", e)
            st.sidebar.error(f"Jira connection failed: {e}")
            # Clear any partial state to ensure user is directed to setup
            st.session_state.pop("report_service", None)
    else:
        st.sidebar.warning("Jira secrets not found. Please use the Setup page.")


_auto_init_report_service()

PAGES_DIR = Path(__file__).parent / "sprint_app" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"sprint_app.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception as e:  # pragma: no cover - defensive
        logger.error("Failed importing page %s: %s", mod_name, e)

if __name__ == "__main__":
    main()
