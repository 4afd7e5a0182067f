"""Starter / Reviewer / Shipper attribution.

Each classifier pairs a primary transition with a looser fallback and an
applicability check. The walker picks the responsible person; an item with no
matching change is attributed to the Unknown sentinel and flagged uncertain.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from sprint_app.core.config import (
    STATUS_IN_PROGRESS,
    STATUS_PR_READY,
    STATUS_TESTING,
    STATUS_TODO,
    STATUS_UAT_READY,
    UNCERTAIN_MARKER,
    UNKNOWN_PERSON,
)
from sprint_app.core.models import AttributionResult, SpilloverItem, WorkItem
from sprint_app.core.status import is_completed, reached_uat_ready

from .history import HistoryMatch, Predicate, find_first_match, status_transition


@dataclass(slots=True, frozen=True)
class Classifier:
    name: str
    primary: Predicate
    fallback: Predicate
    applies_to: Callable[[WorkItem], bool]

    def match(self, item: WorkItem) -> HistoryMatch | None:
        """Run the walker regardless of applicability."""
        return find_first_match(item.history, self.primary, self.fallback)

    def classify(self, item: WorkItem) -> AttributionResult | None:
        """Attribute ``item``; None when the item does not qualify for this classifier."""
        if not self.applies_to(item):
            return None
        return to_attribution(self.match(item))


def to_attribution(match: HistoryMatch | None) -> AttributionResult:
    if match is None:
        return AttributionResult(person=UNKNOWN_PERSON, certain=False)
    return AttributionResult(person=match.actor or UNKNOWN_PERSON, certain=match.matched_primary)


def marked_key(key: str, result: AttributionResult | SpilloverItem) -> str:
    """Issue key as displayed: inferred attributions get a trailing marker."""
    return key if result.certain else f"{key}{UNCERTAIN_MARKER}"


def _completed_or_uat_ready(item: WorkItem) -> bool:
    return is_completed(item) or reached_uat_ready(item)


STARTER = Classifier(
    name="starter",
    primary=status_transition(STATUS_TODO, STATUS_IN_PROGRESS),
    fallback=status_transition(from_status=STATUS_TODO),
    applies_to=is_completed,
)

REVIEWER = Classifier(
    name="reviewer",
    primary=status_transition(STATUS_PR_READY, STATUS_TESTING),
    fallback=status_transition(from_status=STATUS_PR_READY),
    applies_to=is_completed,
)

SHIPPER = Classifier(
    name="shipper",
    primary=status_transition(STATUS_TESTING, STATUS_UAT_READY),
    fallback=status_transition(from_status=STATUS_TESTING),
    applies_to=_completed_or_uat_ready,
)

CLASSIFIERS: tuple[Classifier, ...] = (STARTER, REVIEWER, SHIPPER)
