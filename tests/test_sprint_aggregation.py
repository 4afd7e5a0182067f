from datetime import UTC, datetime, timedelta

from sprint_app.analytics.aggregations.sprint import summarize_sprint, worklogs_in_sprint
from sprint_app.core.models import (
    ChangeEvent,
    FieldChange,
    MissingEstimate,
    Sprint,
    SprintIssues,
    WorkItem,
    WorklogEntry,
)

START = datetime(2024, 9, 2, 9, 0, tzinfo=UTC)
END = START + timedelta(days=14)
SPRINT = Sprint(id=1, name="Sprint 1", start=START, end=END)


def _status(author, when, from_status, to_status):
    return ChangeEvent(
        created=when,
        author=author,
        changes=(FieldChange(field="status", from_value=from_status, to_value=to_status),),
    )


def _worklog(author, when, hours):
    return WorklogEntry(author=author, started=when, seconds=int(hours * 3600))


def _sample_items():
    day = timedelta(days=1)
    return [
        WorkItem(
            key="ABC-1",
            status="Done",
            assignee="Alice",
            original_estimate=3600,
            history=(
                _status("Alice", START + day, "To Do", "In Progress"),
                _status("Bob", START + 2 * day, "PR Ready", "Testing"),
                _status("Carol", START + 3 * day, "Testing", "UAT Ready"),
                _status("Carol", START + 4 * day, "UAT Ready", "Done"),
            ),
            worklogs=(_worklog("Alice", START + day, 5), _worklog("Bob", START + 2 * day, 1)),
        ),
        WorkItem(key="ABC-2", status="Done", assignee="Bob"),
        WorkItem(
            key="ABC-3",
            status="Done",
            assignee="Bob",
            original_estimate=7200,
            history=(_status("Bob", START + day, "To Do", "Blocked"),),
            worklogs=(_worklog("Bob", START - day, 8),),
        ),
        WorkItem(
            key="ABC-4",
            status="UAT Ready",
            assignee="Carol",
            original_estimate=3600,
            history=(
                _status("Carol", START - 20 * day, "To Do", "In Progress"),
                _status("Dan", START + day, "Testing", "UAT Ready"),
            ),
        ),
        WorkItem(
            key="ABC-5",
            status="In Progress",
            assignee="Dan",
            original_estimate=3600,
            history=(_status("Dan", START - 90 * day, "To Do", "In Progress"),),
            worklogs=(_worklog("Dan", END, 2),),
        ),
        WorkItem(key="ABC-6", status="To Do", original_estimate=3600),
    ]


def test_counts_and_attribution_buckets():
    summary = summarize_sprint(SPRINT, SprintIssues(items=_sample_items()))
    assert summary.sprint is SPRINT
    assert summary.total_issues == 6
    assert summary.completed_issues == 3

    assert list(summary.completed_by) == ["Alice", "Unknown", "Bob"]
    assert summary.completed_by["Alice"].issues == ["ABC-1"]
    assert summary.completed_by["Unknown"].issues == ["ABC-2*"]
    assert summary.completed_by["Bob"].issues == ["ABC-3*"]

    assert summary.reviewed_by["Bob"].issues == ["ABC-1"]
    assert summary.reviewed_by["Unknown"].count == 2

    assert summary.shipped_by["Carol"].issues == ["ABC-1"]
    assert summary.shipped_by["Dan"].issues == ["ABC-4"]
    assert summary.shipped_by["Unknown"].issues == ["ABC-2*", "ABC-3*"]


def test_started_and_completed_sum_to_completed_issues():
    summary = summarize_sprint(SPRINT, SprintIssues(items=_sample_items()))
    started = sum(b.started for b in summary.completed_by.values())
    completed = sum(b.completed for b in summary.completed_by.values())
    reviewed = sum(b.count for b in summary.reviewed_by.values())
    assert started == completed == reviewed == summary.completed_issues


def test_spillover_buckets_and_tiers():
    summary = summarize_sprint(SPRINT, SprintIssues(items=_sample_items()))
    assert set(summary.spillover_by) == {"Carol", "Dan"}
    carol = summary.spillover_by["Carol"]
    assert carol.count == 1
    assert carol.age_weeks == 4
    assert carol.tiers["recent"] == ["ABC-4"]
    dan = summary.spillover_by["Dan"]
    assert dan.items[0].age_sprints == 7
    assert dan.age_weeks == 14
    assert dan.tier_counts() == {"recent": 0, "moderate": 0, "old": 0, "critical": 1}

    tiered = [key for bucket in summary.spillover_by.values() for keys in bucket.tiers.values() for key in keys]
    assert sorted(tiered) == ["ABC-4", "ABC-5"]
    assert summary.spillover_count() == 2


def test_time_logged_filters_by_sprint_window():
    summary = summarize_sprint(SPRINT, SprintIssues(items=_sample_items()))
    hours = summary.hours_logged()
    assert hours == {"Alice": 5.0, "Bob": 1.0, "Dan": 2.0}


def test_worklog_boundaries_are_inclusive():
    entries = [
        _worklog("A", START, 1),
        _worklog("B", END, 1),
        _worklog("C", END + timedelta(seconds=1), 1),
        _worklog("D", START - timedelta(seconds=1), 1),
    ]
    kept = [w.author for w in worklogs_in_sprint(entries, SPRINT)]
    assert kept == ["A", "B"]


def test_derived_counts_when_upstream_silent():
    summary = summarize_sprint(SPRINT, SprintIssues(items=_sample_items()))
    assert summary.uat_ready_issues == 2
    assert summary.missing_estimates == [MissingEstimate("ABC-2", "Bob")]


def test_upstream_counts_are_authoritative():
    upstream = [MissingEstimate("ABC-99", None)]
    issues = SprintIssues(
        items=_sample_items(),
        total_count=10,
        qualifying_count=4,
        missing_estimates=upstream,
    )
    summary = summarize_sprint(SPRINT, issues)
    assert summary.total_issues == 10
    assert summary.uat_ready_issues == 4
    assert summary.missing_estimates == upstream
    assert summary.missing_estimates is not upstream


def test_empty_sprint_has_zero_completion_rate():
    summary = summarize_sprint(SPRINT, SprintIssues())
    assert summary.total_issues == 0
    assert summary.completion_rate == 0.0
    assert summary.completed_by == {}


def test_completion_rate():
    summary = summarize_sprint(SPRINT, SprintIssues(items=_sample_items()))
    assert summary.completion_rate == 50.0
