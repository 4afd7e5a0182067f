"""Central configuration, workflow constants, thresholds, and Jira field lists."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

# =============================================================================
# Jira Connection Settings
# =============================================================================
TIMEZONE = "UTC"
DEFAULT_PROJECT_KEY = ""
DEFAULT_CACHE_TTL_SECONDS = 300.0
SEARCH_PAGE_SIZE = 1000
AGILE_PAGE_SIZE = 50

# =============================================================================
# Workflow Status Configuration
# =============================================================================
STATUS_FIELD = "status"
STATUS_TODO = "To Do"
STATUS_IN_PROGRESS = "In Progress"
STATUS_PR_READY = "PR Ready"
STATUS_TESTING = "Testing"
STATUS_UAT_READY = "UAT Ready"
STATUS_DONE = "Done"

# =============================================================================
# Attribution
# =============================================================================
UNKNOWN_PERSON = "Unknown"
UNCERTAIN_MARKER = "*"

# =============================================================================
# Spillover
# =============================================================================
# Age is measured in fixed-length sprint units regardless of the real sprint length.
SPRINT_LENGTH_DAYS = 14
WEEKS_PER_SPRINT = 2

AGE_TIER_RECENT = "recent"
AGE_TIER_MODERATE = "moderate"
AGE_TIER_OLD = "old"
AGE_TIER_CRITICAL = "critical"

# (upper bound in sprints, tier) checked in order; anything above the last bound is critical
AGE_TIER_LIMITS: Sequence[tuple[int, str]] = (
    (2, AGE_TIER_RECENT),
    (4, AGE_TIER_MODERATE),
    (6, AGE_TIER_OLD),
)
AGE_TIERS: Sequence[str] = (AGE_TIER_RECENT, AGE_TIER_MODERATE, AGE_TIER_OLD, AGE_TIER_CRITICAL)

# =============================================================================
# Display tiers
# =============================================================================
TIER_HIGH = "high"
TIER_MEDIUM = "medium"
TIER_LOW = "low"

HOURS_HIGH_THRESHOLD = 60.0  # strictly greater than
HOURS_MEDIUM_THRESHOLD = 40.0  # strictly greater than
COMPLETION_HIGH_THRESHOLD = 80.0  # greater or equal
COMPLETION_MEDIUM_THRESHOLD = 50.0  # greater or equal

TIER_COLORS: dict[str, str] = {
    TIER_HIGH: "#2ca02c",
    TIER_MEDIUM: "#ff7f0e",
    TIER_LOW: "#d62728",
}

AGE_TIER_COLORS: dict[str, str] = {
    AGE_TIER_RECENT: "#2ca02c",
    AGE_TIER_MODERATE: "#ffbf00",
    AGE_TIER_OLD: "#ff7f0e",
    AGE_TIER_CRITICAL: "#d62728",
}

# =============================================================================
# Leaderboards
# =============================================================================
LEADERBOARD_SIZE = 3
METRIC_HOURS = "hours_logged"
METRIC_COMPLETED = "completed"
METRIC_REVIEWED = "reviewed"
METRIC_SHIPPED = "shipped"
LEADERBOARD_METRICS: Sequence[str] = (METRIC_HOURS, METRIC_COMPLETED, METRIC_REVIEWED, METRIC_SHIPPED)

METRIC_LABELS: dict[str, str] = {
    METRIC_HOURS: "Hours logged",
    METRIC_COMPLETED: "Items completed",
    METRIC_REVIEWED: "Items reviewed",
    METRIC_SHIPPED: "Items shipped",
}

# =============================================================================
# Jira Fetch Fields
# =============================================================================
JIRA_SPRINT_ISSUE_FIELDS = [
    "summary",
    "status",
    "assignee",
    "timetracking",
    "timeoriginalestimate",
    "worklog",
]
JIRA_SPRINT_ISSUE_EXPAND = ["changelog"]

# Embedded worklog and changelog lists in search results are capped; longer lists are hydrated per issue.
HYDRATION_MAX_WORKERS = 8
HYDRATION_MIN_PARALLEL = 4  # below this, stay sequential to reduce overhead

SUMMARY_TABLE_COLUMNS: Sequence[str] = (
    "Sprint",
    "Start",
    "End",
    "Total",
    "UAT",
    "Done",
    "%",
)
TOTAL_ROW_LABEL = "TOTAL"


@dataclass(slots=True)
class AppSettings:
    max_table_rows: int = 1000
    download_encoding: str = "utf-8"
    date_format: str = "%d %b %Y"


SETTINGS = AppSettings()


@dataclass(slots=True)
class JiraConnectionSettings:
    server: str = ""
    email: str = ""
    token: str = ""
    project_key: str = DEFAULT_PROJECT_KEY

    @property
    def complete(self) -> bool:
        return bool(self.server and self.email and self.token)

    @classmethod
    def from_secrets(cls, secrets: Mapping[str, Any]) -> JiraConnectionSettings:
        """Read a ``[jira]`` table, falling back to top-level keys."""
        section = secrets.get("jira", {}) or {}

        def pick(*names: str) -> str:
            for name in names:
                value = section.get(name) or secrets.get(name)
                if value:
                    return str(value)
            return ""

        server = pick("JIRA_SERVER", "JIRA_HOST")
        if server and "://" not in server:
            server = f"https://{server}"
        return cls(
            server=server,
            email=pick("JIRA_EMAIL"),
            token=pick("JIRA_API_TOKEN", "JIRA_TOKEN"),
            project_key=pick("JIRA_PROJECT_KEY") or DEFAULT_PROJECT_KEY,
        )
