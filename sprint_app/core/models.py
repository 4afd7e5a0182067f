"""Domain data models for boards, sprints, work items, and sprint summaries."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, TypeVar

from sprint_app.analytics.metrics import time_units

from .config import AGE_TIERS

# ----------------------------------------------------------------------------
# Input records (never mutated once mapped)
# ----------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class Board:
    id: int
    name: str
    project_key: str | None = None


@dataclass(slots=True, frozen=True)
class Sprint:
    id: int
    name: str
    start: datetime
    end: datetime
    state: str | None = None


@dataclass(slots=True, frozen=True)
class FieldChange:
    field: str | None
    from_value: str | None
    to_value: str | None


@dataclass(slots=True, frozen=True)
class ChangeEvent:
    created: datetime
    author: str | None
    changes: tuple[FieldChange, ...] = ()


@dataclass(slots=True, frozen=True)
class WorklogEntry:
    author: str | None
    started: datetime
    seconds: int


@dataclass(slots=True, frozen=True)
class WorkItem:
    key: str
    status: str | None
    assignee: str | None = None
    original_estimate: int | None = None
    summary: str | None = None
    worklogs: tuple[WorklogEntry, ...] = ()
    history: tuple[ChangeEvent, ...] = ()


@dataclass(slots=True, frozen=True)
class MissingEstimate:
    key: str
    assignee: str | None


@dataclass(slots=True)
class SprintIssues:
    """Items of one sprint plus the upstream counts that accompany them.

    ``None`` for a count or list means the collaborator did not provide it and
    the aggregator derives it from ``items``.
    """

    items: list[WorkItem] = field(default_factory=list)
    total_count: int | None = None
    qualifying_count: int | None = None
    missing_estimates: list[MissingEstimate] | None = None


# ----------------------------------------------------------------------------
# Attribution results
# ----------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class AttributionResult:
    person: str
    certain: bool


@dataclass(slots=True, frozen=True)
class SpilloverItem:
    key: str
    status: str | None
    person: str
    started: datetime
    age_sprints: int
    tier: str
    certain: bool


# ----------------------------------------------------------------------------
# Per-person buckets
# ----------------------------------------------------------------------------


@dataclass(slots=True)
class TimeBucket:
    seconds: int = 0

    @property
    def hours(self) -> float:
        return time_units.seconds_to_hours(self.seconds)


@dataclass(slots=True)
class CompletionBucket:
    started: int = 0
    completed: int = 0
    issues: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ActivityBucket:
    count: int = 0
    issues: list[str] = field(default_factory=list)


def _empty_tiers() -> dict[str, list[str]]:
    return {tier: [] for tier in AGE_TIERS}


@dataclass(slots=True)
class SpilloverBucket:
    count: int = 0
    age_weeks: int = 0
    items: list[SpilloverItem] = field(default_factory=list)
    tiers: dict[str, list[str]] = field(default_factory=_empty_tiers)

    def tier_counts(self) -> dict[str, int]:
        return {tier: len(keys) for tier, keys in self.tiers.items()}


B = TypeVar("B")


class PersonLedger(dict, Generic[B]):
    """Mapping of person to metric bucket with an explicit get-or-insert.

    Keys keep first-insertion order, which is the tie-break order for leaderboards.
    Plain lookups never create entries; only :meth:`bucket` does.
    """

    __slots__ = ("_factory",)

    def __init__(self, factory: Callable[[], B]):
        super().__init__()
        self._factory = factory

    def bucket(self, person: str) -> B:
        if person not in self:
            self[person] = self._factory()
        return self[person]

    def sorted_people(self) -> list[str]:
        return sorted(self.keys(), key=str.lower)


def time_ledger() -> PersonLedger[TimeBucket]:
    return PersonLedger(TimeBucket)


def completion_ledger() -> PersonLedger[CompletionBucket]:
    return PersonLedger(CompletionBucket)


def activity_ledger() -> PersonLedger[ActivityBucket]:
    return PersonLedger(ActivityBucket)


def spillover_ledger() -> PersonLedger[SpilloverBucket]:
    return PersonLedger(SpilloverBucket)


# ----------------------------------------------------------------------------
# Summaries
# ----------------------------------------------------------------------------


@dataclass(slots=True)
class SprintMetrics:
    total_issues: int = 0
    completed_issues: int = 0
    uat_ready_issues: int = 0
    time_logged: PersonLedger[TimeBucket] = field(default_factory=time_ledger)
    completed_by: PersonLedger[CompletionBucket] = field(default_factory=completion_ledger)
    reviewed_by: PersonLedger[ActivityBucket] = field(default_factory=activity_ledger)
    shipped_by: PersonLedger[ActivityBucket] = field(default_factory=activity_ledger)
    spillover_by: PersonLedger[SpilloverBucket] = field(default_factory=spillover_ledger)
    missing_estimates: list[MissingEstimate] = field(default_factory=list)

    @property
    def completion_rate(self) -> float:
        return time_units.completion_rate(self.completed_issues, self.total_issues)

    def hours_logged(self) -> dict[str, float]:
        return {person: bucket.hours for person, bucket in self.time_logged.items()}

    def spillover_count(self) -> int:
        return sum(bucket.count for bucket in self.spillover_by.values())


@dataclass(slots=True)
class SprintSummary(SprintMetrics):
    """Metrics for a single sprint; built once by the aggregator."""

    sprint: Sprint | None = None


@dataclass(slots=True)
class SprintTotals(SprintMetrics):
    """Grand totals across every summarized sprint."""

    sprint_count: int = 0


@dataclass(slots=True, frozen=True)
class LeaderboardEntry:
    person: str
    value: float


@dataclass(slots=True)
class Leaderboards:
    per_sprint: dict[int, dict[str, list[LeaderboardEntry]]] = field(default_factory=dict)
    overall: dict[str, list[LeaderboardEntry]] = field(default_factory=dict)


@dataclass(slots=True)
class SprintReport:
    board: Board
    summaries: list[SprintSummary]
    totals: SprintTotals
    leaderboards: Leaderboards
