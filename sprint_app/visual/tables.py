"""Table builders for sprint summaries, attribution buckets, and leaderboards."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

import pandas as pd
import pytz
import streamlit as st

from sprint_app.analytics.aggregations.totals import all_people
from sprint_app.analytics.metrics.attribution import marked_key
from sprint_app.analytics.metrics.time_units import completion_tier, format_hours, hours_tier, round_half_up
from sprint_app.core.config import (
    AGE_TIERS,
    METRIC_HOURS,
    METRIC_LABELS,
    SETTINGS,
    SUMMARY_TABLE_COLUMNS,
    TIER_COLORS,
    TIMEZONE,
    TOTAL_ROW_LABEL,
    UNCERTAIN_MARKER,
)
from sprint_app.core.models import (
    ActivityBucket,
    LeaderboardEntry,
    PersonLedger,
    SprintMetrics,
    SprintSummary,
    SprintTotals,
)


def format_date(value: datetime | None, tz_name: str = TIMEZONE) -> str:
    if value is None:
        return ""
    tz = pytz.timezone(tz_name)
    return value.astimezone(tz).strftime(SETTINGS.date_format)


def _summary_row(label: str, metrics: SprintMetrics, people: Sequence[str], start: str, end: str) -> dict:
    row: dict[str, object] = {
        "Sprint": label,
        "Start": start,
        "End": end,
        "Total": metrics.total_issues,
        "UAT": metrics.uat_ready_issues,
        "Done": metrics.completed_issues,
        "%": round_half_up(metrics.completion_rate),
    }
    hours = metrics.hours_logged()
    for person in people:
        row[person] = round(hours.get(person, 0.0), 1)
    return row


def build_summary_frame(
    summaries: Sequence[SprintSummary],
    totals: SprintTotals | None = None,
    *,
    people: Sequence[str] | None = None,
) -> pd.DataFrame:
    """One row per sprint plus a TOTAL row, with an hours column per person.

    Parameters
    ----------
    summaries : sequence of SprintSummary
        Rows in the order given.
    totals : SprintTotals, optional
        When provided a TOTAL row is appended.
    people : sequence of str, optional
        Hours columns; defaults to everyone who logged time, sorted by name.

    Returns
    -------
    pd.DataFrame
        Empty DataFrame when there are no summaries.
    """
    if not summaries:
        return pd.DataFrame()
    people = list(people) if people is not None else all_people(summaries)
    rows = [
        _summary_row(
            s.sprint.name if s.sprint else "",
            s,
            people,
            format_date(s.sprint.start if s.sprint else None),
            format_date(s.sprint.end if s.sprint else None),
        )
        for s in summaries
    ]
    if totals is not None:
        rows.append(_summary_row(TOTAL_ROW_LABEL, totals, people, "", ""))
    return pd.DataFrame(rows, columns=[*SUMMARY_TABLE_COLUMNS, *people])


def style_summary_frame(df: pd.DataFrame):
    """Colour completion and hours cells by tier."""
    if df.empty:
        return df
    people = [c for c in df.columns if c not in SUMMARY_TABLE_COLUMNS]

    def completion_css(row):
        color = TIER_COLORS[completion_tier(float(row["%"]))]
        return [f"color: {color}"] * len(row)

    def hours_css(value):
        return f"color: {TIER_COLORS[hours_tier(float(value))]}"

    styler = df.style.apply(completion_css, axis=1, subset=["Done", "%"]).format(precision=1)
    if people:
        styler = styler.map(hours_css, subset=people).format(format_hours, subset=people)
    return styler


def completion_frame(metrics: SprintMetrics) -> pd.DataFrame:
    rows = [
        {
            "Person": person,
            "Started": metrics.completed_by[person].started,
            "Completed": metrics.completed_by[person].completed,
            "Issues": ", ".join(metrics.completed_by[person].issues),
        }
        for person in metrics.completed_by.sorted_people()
    ]
    return pd.DataFrame(rows, columns=["Person", "Started", "Completed", "Issues"])


def activity_frame(ledger: PersonLedger[ActivityBucket], count_label: str) -> pd.DataFrame:
    rows = [
        {"Person": person, count_label: ledger[person].count, "Issues": ", ".join(ledger[person].issues)}
        for person in ledger.sorted_people()
    ]
    return pd.DataFrame(rows, columns=["Person", count_label, "Issues"])


def spillover_frame(metrics: SprintMetrics) -> pd.DataFrame:
    columns = ["Person", "Spillover", "Age (weeks)", *AGE_TIERS]
    rows = []
    for person in metrics.spillover_by.sorted_people():
        bucket = metrics.spillover_by[person]
        row: dict[str, object] = {
            "Person": person,
            "Spillover": bucket.count,
            "Age (weeks)": bucket.age_weeks,
        }
        row.update(bucket.tier_counts())
        rows.append(row)
    return pd.DataFrame(rows, columns=columns)


def spillover_items_frame(metrics: SprintMetrics) -> pd.DataFrame:
    columns = ["key", "person", "status", "started", "age_sprints", "tier"]
    rows = [
        {
            "key": marked_key(item.key, item),
            "person": item.person,
            "status": item.status,
            "started": format_date(item.started),
            "age_sprints": item.age_sprints,
            "tier": item.tier,
        }
        for person in metrics.spillover_by.sorted_people()
        for item in metrics.spillover_by[person].items
    ]
    out = pd.DataFrame(rows, columns=columns)
    return out.sort_values("age_sprints", ascending=False, kind="stable").reset_index(drop=True)


def missing_estimates_frame(metrics: SprintMetrics) -> pd.DataFrame:
    rows = [{"key": m.key, "assignee": m.assignee or "Unassigned"} for m in metrics.missing_estimates]
    return pd.DataFrame(rows, columns=["key", "assignee"])


def leaderboard_frame(entries: Sequence[LeaderboardEntry], metric: str) -> pd.DataFrame:
    label = METRIC_LABELS.get(metric, metric)
    rows = []
    for rank, entry in enumerate(entries, start=1):
        value = format_hours(entry.value) if metric == METRIC_HOURS else int(entry.value)
        rows.append({"Rank": rank, "Person": entry.person, label: value})
    return pd.DataFrame(rows, columns=["Rank", "Person", label])


def add_ticket_link(df: pd.DataFrame, server: str, key_col: str = "key", label: str = "Ticket"):
    """Add a browse URL column; a trailing uncertainty marker is not part of the key."""
    if df.empty or key_col not in df.columns:
        return df, {}
    out = df.copy()
    base = server.rstrip("/")
    keys = out[key_col].astype(str).str.rstrip(UNCERTAIN_MARKER)
    out[label] = keys.apply(lambda k: f"{base}/browse/{k}" if k and k != "nan" else "")
    cfg = {
        label: st.column_config.LinkColumn(
            label,
            display_text=r"browse/(.*)$",
            help="Open in Jira",
            width="medium",
        )
    }
    return out, cfg
