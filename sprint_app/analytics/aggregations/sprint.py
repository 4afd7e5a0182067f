"""Per-sprint aggregation of attribution, spillover, and logged time."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sprint_app.analytics.metrics.attribution import REVIEWER, SHIPPER, STARTER, marked_key
from sprint_app.analytics.metrics.spillover import age_in_weeks, detect_spillover
from sprint_app.core.config import UNKNOWN_PERSON
from sprint_app.core.models import (
    MissingEstimate,
    PersonLedger,
    Sprint,
    SprintIssues,
    SprintSummary,
    TimeBucket,
    WorkItem,
    WorklogEntry,
)
from sprint_app.core.status import is_completed, reached_uat_ready

logger = logging.getLogger(__name__)


def worklogs_in_sprint(worklogs: Iterable[WorklogEntry], sprint: Sprint) -> list[WorklogEntry]:
    """Worklogs started inside the sprint window, both ends inclusive."""
    return [w for w in worklogs if sprint.start <= w.started <= sprint.end]


def add_logged_time(ledger: PersonLedger[TimeBucket], item: WorkItem, sprint: Sprint) -> None:
    for worklog in worklogs_in_sprint(item.worklogs, sprint):
        ledger.bucket(worklog.author or UNKNOWN_PERSON).seconds += int(worklog.seconds or 0)


def derive_missing_estimates(items: Iterable[WorkItem]) -> list[MissingEstimate]:
    return [
        MissingEstimate(key=item.key, assignee=item.assignee)
        for item in items
        if item.original_estimate is None
    ]


def summarize_sprint(sprint: Sprint, issues: SprintIssues) -> SprintSummary:
    """Build the :class:`SprintSummary` for one sprint.

    Parameters
    ----------
    sprint : Sprint
        The sprint window used for worklog filtering and spillover age.
    issues : SprintIssues
        Items plus upstream counts. Upstream values win over derived ones;
        missing values are derived from the items.

    Returns
    -------
    SprintSummary
        Every completed item lands in exactly one ``completed_by`` bucket, so
        the per-person ``started`` and ``completed`` counts sum to
        ``completed_issues``.
    """
    items = list(issues.items)
    summary = SprintSummary(sprint=sprint)

    for item in items:
        completed = is_completed(item)
        if completed:
            summary.completed_issues += 1

            started = STARTER.classify(item)
            bucket = summary.completed_by.bucket(started.person)
            bucket.started += 1
            bucket.completed += 1
            bucket.issues.append(marked_key(item.key, started))

            reviewed = REVIEWER.classify(item)
            review_bucket = summary.reviewed_by.bucket(reviewed.person)
            review_bucket.count += 1
            review_bucket.issues.append(marked_key(item.key, reviewed))
        else:
            spill = detect_spillover(item, sprint)
            if spill is not None:
                spill_bucket = summary.spillover_by.bucket(spill.person)
                spill_bucket.count += 1
                spill_bucket.age_weeks += age_in_weeks(spill.age_sprints)
                spill_bucket.items.append(spill)
                spill_bucket.tiers[spill.tier].append(spill.key)

        shipped = SHIPPER.classify(item)
        if shipped is not None:
            ship_bucket = summary.shipped_by.bucket(shipped.person)
            ship_bucket.count += 1
            ship_bucket.issues.append(marked_key(item.key, shipped))

        add_logged_time(summary.time_logged, item, sprint)

    summary.total_issues = issues.total_count if issues.total_count is not None else len(items)
    if issues.qualifying_count is not None:
        summary.uat_ready_issues = issues.qualifying_count
    else:
        summary.uat_ready_issues = sum(1 for item in items if reached_uat_ready(item))
    if issues.missing_estimates is not None:
        summary.missing_estimates = list(issues.missing_estimates)
    else:
        summary.missing_estimates = derive_missing_estimates(items)

    logger.debug(
        "Sprint %s: %s items, %s completed, %s spillover, %s people logged time",
        sprint.name,
        summary.total_issues,
        summary.completed_issues,
        summary.spillover_count(),
        len(summary.time_logged),
    )
    return summary
