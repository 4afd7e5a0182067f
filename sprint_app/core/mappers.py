"""Mapping raw Jira JSON into board, sprint, and work item models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import pandas as pd

from .models import Board, ChangeEvent, FieldChange, MissingEstimate, Sprint, WorkItem, WorklogEntry


def parse_dt(val: Any) -> datetime | None:
    """Parse a Jira timestamp into an aware UTC datetime (None when unparseable)."""
    if not val:
        return None
    ts = pd.to_datetime(val, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _display_name(person: Any) -> str | None:
    if isinstance(person, dict):
        return person.get("displayName") or person.get("name")
    return None


def _to_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def map_board(raw: dict[str, Any]) -> Board:
    location = raw.get("location") or {}
    return Board(id=int(raw["id"]), name=raw.get("name") or "", project_key=location.get("projectKey"))


def map_sprint(raw: dict[str, Any]) -> Sprint | None:
    """Map a sprint; future sprints without dates yield None."""
    start = parse_dt(raw.get("startDate"))
    end = parse_dt(raw.get("endDate"))
    if start is None or end is None:
        return None
    return Sprint(id=int(raw["id"]), name=raw.get("name") or "", start=start, end=end, state=raw.get("state"))


def map_worklog(raw: dict[str, Any]) -> WorklogEntry | None:
    started = parse_dt(raw.get("started"))
    if started is None:
        return None
    return WorklogEntry(
        author=_display_name(raw.get("author")),
        started=started,
        seconds=_to_int(raw.get("timeSpentSeconds")) or 0,
    )


def map_history(raw: dict[str, Any]) -> ChangeEvent | None:
    created = parse_dt(raw.get("created"))
    if created is None:
        return None
    changes = tuple(
        FieldChange(
            field=item.get("field"),
            from_value=item.get("fromString"),
            to_value=item.get("toString"),
        )
        for item in raw.get("items") or []
    )
    return ChangeEvent(created=created, author=_display_name(raw.get("author")), changes=changes)


def original_estimate(fields: dict[str, Any]) -> int | None:
    estimate = _to_int(fields.get("timeoriginalestimate"))
    if estimate is not None:
        return estimate
    tracking = fields.get("timetracking") or {}
    return _to_int(tracking.get("originalEstimateSeconds"))


def map_issue(raw: dict[str, Any]) -> WorkItem:
    fields = raw.get("fields", {}) or {}
    worklog_block = fields.get("worklog") or {}
    worklogs = [map_worklog(w) for w in worklog_block.get("worklogs") or []]
    histories_raw = (raw.get("changelog") or {}).get("histories", []) or []
    history = [map_history(h) for h in histories_raw]
    return WorkItem(
        key=str(raw.get("key") or ""),
        status=(fields.get("status") or {}).get("name"),
        assignee=_display_name(fields.get("assignee")),
        original_estimate=original_estimate(fields),
        summary=fields.get("summary"),
        worklogs=tuple(w for w in worklogs if w is not None),
        history=tuple(h for h in history if h is not None),
    )


def map_missing_estimate(raw: dict[str, Any]) -> MissingEstimate:
    fields = raw.get("fields", {}) or {}
    return MissingEstimate(key=str(raw.get("key") or ""), assignee=_display_name(fields.get("assignee")))
