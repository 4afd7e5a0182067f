"""Sprint summary page.

Fetches every dated sprint of the project board (optionally filtered by sprint
number), then shows logged hours, completion, attribution, spillover, and
leaderboards per sprint and across all sprints.
"""

from __future__ import annotations

import logging

import streamlit as st

from sprint_app.app import register_page
from sprint_app.core.config import LEADERBOARD_METRICS, METRIC_LABELS, SETTINGS
from sprint_app.core.errors import SprintAnalysisError
from sprint_app.core.models import LeaderboardEntry, SprintMetrics, SprintReport
from sprint_app.core.service import SprintReportService
from sprint_app.visual.charts import hours_by_person_chart, spillover_tier_chart
from sprint_app.visual.progress import ProgressReporter
from sprint_app.visual.tables import (
    activity_frame,
    add_ticket_link,
    build_summary_frame,
    completion_frame,
    leaderboard_frame,
    missing_estimates_frame,
    spillover_frame,
    spillover_items_frame,
    style_summary_frame,
)

logger = logging.getLogger(__name__)


def render_leaderboards(boards: dict[str, list[LeaderboardEntry]]) -> None:
    columns = st.columns(len(LEADERBOARD_METRICS))
    for col, metric in zip(columns, LEADERBOARD_METRICS, strict=False):
        with col:
            st.markdown(f"**{METRIC_LABELS[metric]}**")
            frame = leaderboard_frame(boards.get(metric, []), metric)
            if frame.empty:
                st.caption("No data.")
            else:
                st.dataframe(frame, hide_index=True)


def render_metric_details(metrics: SprintMetrics, server: str, *, key_prefix: str) -> None:
    st.caption("Keys marked * were attributed through a fallback transition or to Unknown.")
    tabs = st.tabs(["Completed", "Reviewed", "Shipped", "Spillover", "Missing estimates"])
    with tabs[0]:
        st.dataframe(completion_frame(metrics), hide_index=True)
    with tabs[1]:
        st.dataframe(activity_frame(metrics.reviewed_by, "Reviewed"), hide_index=True)
    with tabs[2]:
        st.dataframe(activity_frame(metrics.shipped_by, "Shipped"), hide_index=True)
    with tabs[3]:
        st.dataframe(spillover_frame(metrics), hide_index=True)
        chart = spillover_tier_chart(metrics)
        if chart is not None:
            st.altair_chart(chart, use_container_width=True)
        items, cfg = add_ticket_link(spillover_items_frame(metrics), server)
        if not items.empty:
            st.dataframe(items, hide_index=True, column_config=cfg)
    with tabs[4]:
        missing, cfg = add_ticket_link(missing_estimates_frame(metrics), server)
        if missing.empty:
            st.caption("Every item has an original estimate.")
        else:
            st.dataframe(missing.head(SETTINGS.max_table_rows), hide_index=True, column_config=cfg)
            csv = missing.to_csv(index=False).encode(SETTINGS.download_encoding)
            st.download_button(
                "Download missing estimates CSV",
                data=csv,
                file_name=f"missing_estimates_{key_prefix}.csv",
                mime="text/csv",
                key=f"missing_csv_{key_prefix}",
            )


def render_report(report: SprintReport, server: str) -> None:
    st.subheader(f"Board: {report.board.name}")
    summary_df = build_summary_frame(report.summaries, report.totals)
    if summary_df.empty:
        st.info("No dated sprints found on this board.")
        return
    st.dataframe(style_summary_frame(summary_df), hide_index=True)
    csv = summary_df.to_csv(index=False).encode(SETTINGS.download_encoding)
    st.download_button("Download Summary CSV", data=csv, file_name="sprint_summary.csv", mime="text/csv")

    chart = hours_by_person_chart(report.summaries)
    if chart is not None:
        st.altair_chart(chart, use_container_width=True)

    st.markdown("---")
    st.markdown("### All sprints")
    render_leaderboards(report.leaderboards.overall)
    render_metric_details(report.totals, server, key_prefix="all")

    for summary in report.summaries:
        sprint = summary.sprint
        with st.expander(f"{sprint.name}: {summary.completed_issues}/{summary.total_issues} done"):
            render_leaderboards(report.leaderboards.per_sprint.get(sprint.id, {}))
            render_metric_details(summary, server, key_prefix=str(sprint.id))


@register_page("Sprint Summary")
def sprint_summary_page():
    st.title("Sprint Summary")
    st.caption("Who started, reviewed, and shipped each sprint's work, and where time was logged.")
    service: SprintReportService | None = st.session_state.get("report_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    project = st.text_input("Project key", value=st.session_state.get("project_key", ""))
    sprint_filter = st.text_input("Sprint number (optional)", value="")
    run = st.button("Analyze Sprints", type="primary")

    if run:
        if not project:
            st.error("Project key is required.")
            return
        st.session_state["project_key"] = project
        label = f" for sprint {sprint_filter}" if sprint_filter else ""
        reporter = ProgressReporter(f"Fetching sprint data{label}...")
        try:
            report = service.build_report(project, sprint_filter or None, progress=reporter.callback)
        except SprintAnalysisError as exc:
            logger.error("Sprint lookup failed: %s", exc)
            reporter.error(str(exc))
            return
        except Exception as exc:  # pragma: no cover
            logger.error("Error fetching sprints: %s", exc)
            reporter.error(f"Error fetching sprints: {exc}")
            raise
        st.session_state["sprint_report"] = report
        reporter.complete(f"Summarized {len(report.summaries)} sprint(s).")

    report: SprintReport | None = st.session_state.get("sprint_report")
    if report is None:
        st.info("No sprint report computed yet.")
        return
    render_report(report, st.session_state.get("jira_server", ""))
