"""Chart builders (Altair) for logged hours and spillover age."""

from __future__ import annotations

from collections.abc import Sequence

import altair as alt
import pandas as pd

from sprint_app.core.config import AGE_TIER_COLORS, AGE_TIERS
from sprint_app.core.models import SprintMetrics, SprintSummary


def hours_frame(summaries: Sequence[SprintSummary]) -> pd.DataFrame:
    """Long-form frame: one row per (sprint, person) with logged hours."""
    rows = []
    for order, summary in enumerate(summaries):
        name = summary.sprint.name if summary.sprint else str(order)
        for person, hours in summary.hours_logged().items():
            rows.append({"sprint": name, "sprint_order": order, "person": person, "hours": round(hours, 2)})
    return pd.DataFrame(rows, columns=["sprint", "sprint_order", "person", "hours"])


def hours_by_person_chart(summaries: Sequence[SprintSummary]):
    data = hours_frame(summaries)
    if data.empty:
        return None
    sprint_order = data.drop_duplicates("sprint").sort_values("sprint_order")["sprint"].tolist()
    return (
        alt.Chart(data)
        .mark_bar()
        .encode(
            x=alt.X("person:N", title="Person", sort="-y"),
            y=alt.Y("sum(hours):Q", title="Hours logged"),
            color=alt.Color("sprint:N", title="Sprint", sort=sprint_order),
            tooltip=[
                alt.Tooltip("person:N", title="Person"),
                alt.Tooltip("sprint:N", title="Sprint"),
                alt.Tooltip("hours:Q", title="Hours", format=".1f"),
            ],
        )
        .properties(height=300)
    )


def spillover_tier_chart(metrics: SprintMetrics):
    rows = []
    for person, bucket in metrics.spillover_by.items():
        for tier, count in bucket.tier_counts().items():
            if count:
                rows.append({"person": person, "tier": tier, "count": count})
    if not rows:
        return None
    data = pd.DataFrame(rows)
    return (
        alt.Chart(data)
        .mark_bar()
        .encode(
            x=alt.X("person:N", title="Person"),
            y=alt.Y("count:Q", title="Spillover items"),
            color=alt.Color(
                "tier:N",
                title="Age tier",
                sort=list(AGE_TIERS),
                scale=alt.Scale(domain=list(AGE_TIERS), range=[AGE_TIER_COLORS[t] for t in AGE_TIERS]),
            ),
            tooltip=["person:N", "tier:N", "count:Q"],
        )
        .properties(height=240)
    )
