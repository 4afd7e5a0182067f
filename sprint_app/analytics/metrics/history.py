"""Change-history walking utilities.

This module finds the first field change in an item's history that satisfies a
transition predicate. Matching is two-phase: a full scan for the primary
predicate, then, only if nothing matched, a full scan for the fallback.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from sprint_app.core.models import ChangeEvent
from sprint_app.core.status import is_status, is_status_field

Predicate = Callable[[str | None, str | None, str | None], bool]


@dataclass(slots=True, frozen=True)
class HistoryMatch:
    actor: str | None
    created: datetime
    matched_primary: bool


def sort_events(events: Iterable[ChangeEvent]) -> list[ChangeEvent]:
    """Return a new list ordered by timestamp; ties keep their original order."""
    return sorted(events, key=lambda event: event.created)


def _scan(events: Sequence[ChangeEvent], predicate: Predicate) -> ChangeEvent | None:
    for event in events:
        for change in event.changes:
            if predicate(change.field, change.from_value, change.to_value):
                return event
    return None


def find_first_match(
    events: Iterable[ChangeEvent],
    primary: Predicate,
    fallback: Predicate | None = None,
) -> HistoryMatch | None:
    """Find the earliest change satisfying ``primary``, else ``fallback``.

    Parameters
    ----------
    events : iterable of ChangeEvent
        Item history in any order. The input is not modified.
    primary : Predicate
        Called with ``(field, from_value, to_value)`` for each field change.
    fallback : Predicate, optional
        Used for a second full scan when ``primary`` matched nothing.

    Returns
    -------
    HistoryMatch or None
        Actor and timestamp of the matching event, with ``matched_primary``
        telling which predicate hit. None when neither predicate matched.
    """
    ordered = sort_events(events)
    event = _scan(ordered, primary)
    if event is not None:
        return HistoryMatch(actor=event.author, created=event.created, matched_primary=True)
    if fallback is None:
        return None
    event = _scan(ordered, fallback)
    if event is not None:
        return HistoryMatch(actor=event.author, created=event.created, matched_primary=False)
    return None


def earliest_event(events: Iterable[ChangeEvent]) -> ChangeEvent | None:
    ordered = sort_events(events)
    return ordered[0] if ordered else None


def status_transition(from_status: str | None = None, to_status: str | None = None) -> Predicate:
    """Build a predicate for a status change.

    ``None`` for either side means any value is accepted on that side.
    """

    def predicate(field_name: str | None, from_value: str | None, to_value: str | None) -> bool:
        if not is_status_field(field_name):
            return False
        if from_status is not None and not is_status(from_value, from_status):
            return False
        if to_status is not None and not is_status(to_value, to_status):
            return False
        return True

    return predicate
