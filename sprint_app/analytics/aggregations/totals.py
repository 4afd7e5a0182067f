"""Cross-sprint totals and leaderboards."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sprint_app.core.config import (
    LEADERBOARD_METRICS,
    LEADERBOARD_SIZE,
    METRIC_COMPLETED,
    METRIC_HOURS,
    METRIC_REVIEWED,
    METRIC_SHIPPED,
)
from sprint_app.core.models import (
    LeaderboardEntry,
    Leaderboards,
    SprintMetrics,
    SprintSummary,
    SprintTotals,
)


def merge_summaries(summaries: Iterable[SprintSummary]) -> SprintTotals:
    """Fold sprint summaries into one totals record.

    Counts and seconds are summed, issue lists concatenated in sprint order,
    and age-tier lists unioned. Inputs are left untouched.
    """
    totals = SprintTotals()
    for summary in summaries:
        totals.sprint_count += 1
        totals.total_issues += summary.total_issues
        totals.completed_issues += summary.completed_issues
        totals.uat_ready_issues += summary.uat_ready_issues

        for person, bucket in summary.time_logged.items():
            totals.time_logged.bucket(person).seconds += bucket.seconds

        for person, bucket in summary.completed_by.items():
            target = totals.completed_by.bucket(person)
            target.started += bucket.started
            target.completed += bucket.completed
            target.issues.extend(bucket.issues)

        for source, dest in (
            (summary.reviewed_by, totals.reviewed_by),
            (summary.shipped_by, totals.shipped_by),
        ):
            for person, bucket in source.items():
                target = dest.bucket(person)
                target.count += bucket.count
                target.issues.extend(bucket.issues)

        for person, bucket in summary.spillover_by.items():
            target = totals.spillover_by.bucket(person)
            target.count += bucket.count
            target.age_weeks += bucket.age_weeks
            target.items.extend(bucket.items)
            for tier, keys in bucket.tiers.items():
                target.tiers.setdefault(tier, []).extend(keys)

        totals.missing_estimates.extend(summary.missing_estimates)
    return totals


def metric_values(metrics: SprintMetrics, metric: str) -> dict[str, float]:
    """Per-person values of a leaderboard metric, in ledger insertion order."""
    if metric == METRIC_HOURS:
        return metrics.hours_logged()
    if metric == METRIC_COMPLETED:
        return {person: bucket.completed for person, bucket in metrics.completed_by.items()}
    if metric == METRIC_REVIEWED:
        return {person: bucket.count for person, bucket in metrics.reviewed_by.items()}
    if metric == METRIC_SHIPPED:
        return {person: bucket.count for person, bucket in metrics.shipped_by.items()}
    raise ValueError(f"Unknown leaderboard metric: {metric}")


def top_people(
    metrics: SprintMetrics,
    metric: str,
    limit: int = LEADERBOARD_SIZE,
) -> list[LeaderboardEntry]:
    """Top ``limit`` people by ``metric``; ties keep first-occurrence order."""
    values = metric_values(metrics, metric)
    ranked = sorted(values.items(), key=lambda pair: pair[1], reverse=True)
    return [LeaderboardEntry(person=person, value=value) for person, value in ranked[:limit]]


def build_leaderboards(
    summaries: Sequence[SprintSummary],
    totals: SprintTotals,
    *,
    metrics: Sequence[str] = LEADERBOARD_METRICS,
    limit: int = LEADERBOARD_SIZE,
) -> Leaderboards:
    boards = Leaderboards()
    for summary in summaries:
        sprint_id = summary.sprint.id if summary.sprint is not None else len(boards.per_sprint)
        boards.per_sprint[sprint_id] = {metric: top_people(summary, metric, limit) for metric in metrics}
    boards.overall = {metric: top_people(totals, metric, limit) for metric in metrics}
    return boards


def all_people(summaries: Iterable[SprintSummary]) -> list[str]:
    """Everyone who logged time in any sprint, sorted for stable column order."""
    people: set[str] = set()
    for summary in summaries:
        people.update(summary.time_logged.keys())
    return sorted(people)
