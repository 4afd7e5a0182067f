"""Status normalization and lifecycle checks.

Jira status names are free text, so every comparison in the attribution and
spillover code goes through :func:`status_key` (strip + casefold). The canonical
names live in ``config.py``.
"""

from __future__ import annotations

from .config import STATUS_DONE, STATUS_FIELD, STATUS_UAT_READY
from .models import WorkItem


def status_key(value: str | None) -> str:
    """Return a comparison key for a status or field name.

    Examples
    --------
    >>> status_key("  In Progress ")
    'in progress'
    >>> status_key(None)
    ''
    """
    if not value:
        return ""
    return str(value).strip().casefold()


def is_status(value: str | None, expected: str) -> bool:
    return status_key(value) == status_key(expected)


def is_status_field(field_name: str | None) -> bool:
    return status_key(field_name) == STATUS_FIELD


def is_completed(item: WorkItem) -> bool:
    """An item is completed when its current status is Done."""
    return is_status(item.status, STATUS_DONE)


def reached_uat_ready(item: WorkItem) -> bool:
    """True when the item is in UAT Ready now or moved into it at any point."""
    if is_status(item.status, STATUS_UAT_READY):
        return True
    for event in item.history:
        for change in event.changes:
            if is_status_field(change.field) and is_status(change.to_value, STATUS_UAT_READY):
                return True
    return False
