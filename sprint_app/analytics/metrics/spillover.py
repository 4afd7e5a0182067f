"""Spillover detection for unfinished items.

An unfinished item spills over when its work started before the sprint did.
The start moment comes from the Starter transitions; without one, the oldest
history event stands in as a creation proxy and the item goes to Unknown.
"""

from __future__ import annotations

import math
from datetime import datetime

from sprint_app.core.config import (
    AGE_TIER_CRITICAL,
    AGE_TIER_LIMITS,
    SPRINT_LENGTH_DAYS,
    UNKNOWN_PERSON,
    WEEKS_PER_SPRINT,
)
from sprint_app.core.models import Sprint, SpilloverItem, WorkItem
from sprint_app.core.status import is_completed

from .attribution import STARTER
from .history import earliest_event

SECONDS_PER_DAY = 86400.0


def age_in_sprints(sprint_start: datetime, started: datetime) -> int:
    """Whole sprint units (rounded up) between ``started`` and ``sprint_start``."""
    days = (sprint_start - started).total_seconds() / SECONDS_PER_DAY
    return math.ceil(days / SPRINT_LENGTH_DAYS)


def age_tier(age: int) -> str:
    for limit, tier in AGE_TIER_LIMITS:
        if age <= limit:
            return tier
    return AGE_TIER_CRITICAL


def age_in_weeks(age: int) -> int:
    return age * WEEKS_PER_SPRINT


def detect_spillover(item: WorkItem, sprint: Sprint) -> SpilloverItem | None:
    """Return the spillover record for ``item`` in ``sprint``, or None.

    Completed items never spill over.
    """
    if is_completed(item):
        return None

    match = STARTER.match(item)
    if match is not None:
        person = match.actor or UNKNOWN_PERSON
        started = match.created
        certain = match.matched_primary
    else:
        first = earliest_event(item.history)
        if first is None:
            return None
        person = UNKNOWN_PERSON
        started = first.created
        certain = False

    if started >= sprint.start:
        return None

    age = age_in_sprints(sprint.start, started)
    return SpilloverItem(
        key=item.key,
        status=item.status,
        person=person,
        started=started,
        age_sprints=age,
        tier=age_tier(age),
        certain=certain,
    )
