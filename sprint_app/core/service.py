"""SprintReportService: resolves the board, fetches sprints, and runs the analytics."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any

from sprint_app.analytics.aggregations.sprint import summarize_sprint
from sprint_app.analytics.aggregations.totals import build_leaderboards, merge_summaries

from .config import (
    JIRA_SPRINT_ISSUE_EXPAND,
    JIRA_SPRINT_ISSUE_FIELDS,
    STATUS_UAT_READY,
    HYDRATION_MAX_WORKERS,
    HYDRATION_MIN_PARALLEL,
)
from .errors import BoardNotFoundError, SprintNotFoundError
from .jira_client import JiraAPI
from .mappers import map_board, map_issue, map_missing_estimate, map_sprint
from .models import Board, Sprint, SprintIssues, SprintReport, SprintSummary

ProgressCallback = Callable[[str, int | None, int | None], None]

logger = logging.getLogger(__name__)


class SprintReportService:
    def __init__(self, api: JiraAPI):
        self.api = api

    # ------------------ Lookup ------------------
    def find_board(self, project_key: str) -> Board:
        """First board whose location belongs to ``project_key``."""
        boards = [map_board(raw) for raw in self.api.fetch_boards(project_key)]
        matching = [board for board in boards if board.project_key == project_key]
        if not matching:
            raise BoardNotFoundError(project_key)
        board = matching[0]
        logger.info("Found board %s with ID %s", board.name, board.id)
        return board

    def list_sprints(self, board: Board, sprint_filter: str | None = None) -> list[Sprint]:
        """Dated sprints of ``board``, optionally those whose name contains ``sprint_filter``."""
        sprints: list[Sprint] = []
        for raw in self.api.fetch_sprints(board.id):
            sprint = map_sprint(raw)
            if sprint is None:
                logger.debug("Skipping undated sprint %s", raw.get("name"))
                continue
            sprints.append(sprint)
        if sprint_filter:
            sprints = [sprint for sprint in sprints if sprint_filter in sprint.name]
            if not sprints:
                raise SprintNotFoundError(sprint_filter, board.name)
        return sprints

    # ------------------ Fetch ------------------
    def fetch_sprint_items(self, sprint: Sprint) -> SprintIssues:
        jql = f"sprint = {sprint.id}"
        raw = self.api.search_enhanced(
            jql,
            fields=list(JIRA_SPRINT_ISSUE_FIELDS),
            expand=list(JIRA_SPRINT_ISSUE_EXPAND),
        )
        self._inflate_truncated_worklogs(raw)
        self._inflate_truncated_changelogs(raw)
        qualifying = self.api.count_issues(f'{jql} AND status was "{STATUS_UAT_READY}"')
        missing_raw = self.api.search_enhanced(
            f"{jql} AND originalEstimate is EMPTY",
            fields=["key", "assignee"],
        )
        items = [map_issue(issue) for issue in raw]
        return SprintIssues(
            items=items,
            total_count=len(items),
            qualifying_count=qualifying,
            missing_estimates=[map_missing_estimate(issue) for issue in missing_raw],
        )

    # ------------------ Report ------------------
    def build_report(
        self,
        project_key: str,
        sprint_filter: str | None = None,
        *,
        progress: ProgressCallback | None = None,
    ) -> SprintReport:
        """Fetch and summarize every selected sprint, then reduce the totals.

        A failed fetch for any sprint propagates and aborts the whole report.
        """
        if hasattr(self.api, "clear_cache"):
            self.api.clear_cache()
        if progress:
            progress(f"Looking up board for {project_key}", None, None)
        board = self.find_board(project_key)
        sprints = self.list_sprints(board, sprint_filter)

        summaries: list[SprintSummary] = []
        for idx, sprint in enumerate(sprints, start=1):
            logger.info("Fetching data for sprint: %s", sprint.name)
            if progress:
                progress(f"Fetching data for sprint: {sprint.name}", idx - 1, len(sprints))
            issues = self.fetch_sprint_items(sprint)
            summaries.append(summarize_sprint(sprint, issues))
        if progress:
            progress("Computing totals", len(sprints), len(sprints))

        totals = merge_summaries(summaries)
        return SprintReport(
            board=board,
            summaries=summaries,
            totals=totals,
            leaderboards=build_leaderboards(summaries, totals),
        )

    # ------------------ Hydration ------------------
    def _inflate_truncated_worklogs(self, raw_issues: list[dict[str, Any]]) -> None:
        """Replace embedded worklog pages with the full list where Jira truncated them.

        Search results embed only the first page of worklogs but report the
        real ``total``. Raw issues are mutated in place.
        """
        work = [issue for issue in raw_issues if _is_truncated((issue.get("fields") or {}).get("worklog"), "worklogs")]
        self._run_hydration(work, self._hydrate_single_issue)

    def _inflate_truncated_changelogs(self, raw_issues: list[dict[str, Any]]) -> None:
        """Same as worklogs, for the expanded changelog of long-lived issues."""
        work = [issue for issue in raw_issues if _is_truncated(issue.get("changelog"), "histories")]
        self._run_hydration(work, self._hydrate_single_changelog)

    def _run_hydration(self, work: list[dict[str, Any]], hydrate: Callable[[dict[str, Any]], None]) -> None:
        if not work:
            return

        if len(work) < HYDRATION_MIN_PARALLEL:
            for issue in work:
                hydrate(issue)
            return

        with ThreadPoolExecutor(max_workers=HYDRATION_MAX_WORKERS) as pool:
            futures = [pool.submit(hydrate, issue) for issue in work]
            for fut in as_completed(futures):
                try:
                    fut.result()
                except Exception as exc:  # pragma: no cover
                    logger.warning("Hydration task failed: %s", exc)

    def _hydrate_single_issue(self, issue: dict[str, Any]) -> None:
        key = issue.get("key")
        if not key:
            return
        fields = issue.setdefault("fields", {})
        block = fields.get("worklog") or {}
        embedded = block.get("worklogs") or []
        try:
            full = self.api.fetch_worklogs_raw(key)
        except Exception as exc:  # pragma: no cover
            logger.warning("Failed to hydrate worklogs for %s: %s", key, exc)
            return
        if len(full) >= len(embedded):
            block["worklogs"] = full
            block["total"] = len(full)
            fields["worklog"] = block
            logger.debug("Hydrated %s worklogs: %s -> %s", key, len(embedded), len(full))

    def _hydrate_single_changelog(self, issue: dict[str, Any]) -> None:
        key = issue.get("key")
        if not key:
            return
        block = issue.get("changelog") or {}
        embedded = block.get("histories") or []
        try:
            full = self.api.fetch_changelog_raw(key)
        except Exception as exc:
            logger.warning("Failed to hydrate changelog for %s: %s", key, exc)
            return
        if len(full) >= len(embedded):
            block["histories"] = full
            block["total"] = len(full)
            issue["changelog"] = block
            logger.debug("Hydrated %s changelog: %s -> %s", key, len(embedded), len(full))


def _is_truncated(block: dict[str, Any] | None, list_key: str) -> bool:
    if not block:
        return False
    total = block.get("total")
    return isinstance(total, int) and total > len(block.get(list_key) or [])
