"""Time unit conversion and display tiers (pure functions)."""

from __future__ import annotations

import math

from sprint_app.core.config import (
    COMPLETION_HIGH_THRESHOLD,
    COMPLETION_MEDIUM_THRESHOLD,
    HOURS_HIGH_THRESHOLD,
    HOURS_MEDIUM_THRESHOLD,
    TIER_HIGH,
    TIER_LOW,
    TIER_MEDIUM,
)

SECONDS_PER_HOUR = 3600.0


def seconds_to_hours(seconds: float | None) -> float:
    if not seconds:
        return 0.0
    return float(seconds) / SECONDS_PER_HOUR


def hours_tier(hours: float) -> str:
    """Classify logged hours: above 60 is high, above 40 medium, otherwise low."""
    if hours > HOURS_HIGH_THRESHOLD:
        return TIER_HIGH
    if hours > HOURS_MEDIUM_THRESHOLD:
        return TIER_MEDIUM
    return TIER_LOW


def completion_rate(completed: int, total: int) -> float:
    """Percentage of completed items, 0.0 when there are no items at all."""
    if total <= 0:
        return 0.0
    return completed / total * 100.0


def completion_tier(rate: float) -> str:
    if rate >= COMPLETION_HIGH_THRESHOLD:
        return TIER_HIGH
    if rate >= COMPLETION_MEDIUM_THRESHOLD:
        return TIER_MEDIUM
    return TIER_LOW


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (62.5 -> 63)."""
    return math.floor(value + 0.5)


def format_hours(hours: float) -> str:
    return f"{round_half_up(hours)}h"
