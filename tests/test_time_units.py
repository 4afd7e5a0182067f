from sprint_app.analytics.metrics.time_units import (
    completion_rate,
    completion_tier,
    format_hours,
    hours_tier,
    round_half_up,
    seconds_to_hours,
)


def test_seconds_to_hours():
    assert seconds_to_hours(7200) == 2.0
    assert seconds_to_hours(1800) == 0.5
    assert seconds_to_hours(None) == 0.0


def test_hours_tier_thresholds_are_strict():
    assert hours_tier(61) == "high"
    assert hours_tier(60) == "medium"
    assert hours_tier(40.5) == "medium"
    assert hours_tier(40) == "low"
    assert hours_tier(0) == "low"


def test_completion_rate_guards_zero_total():
    assert completion_rate(0, 0) == 0.0
    assert completion_rate(3, 0) == 0.0
    assert completion_rate(4, 5) == 80.0


def test_completion_tier_thresholds_are_inclusive():
    assert completion_tier(80) == "high"
    assert completion_tier(79.9) == "medium"
    assert completion_tier(50) == "medium"
    assert completion_tier(49.9) == "low"


def test_format_hours():
    assert format_hours(12.4) == "12h"
    assert format_hours(0) == "0h"
    assert format_hours(2.5) == "3h"


def test_round_half_up():
    assert round_half_up(62.5) == 63
    assert round_half_up(2.5) == 3
    assert round_half_up(62.4) == 62
    assert round_half_up(0) == 0
