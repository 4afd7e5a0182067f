"""Exception types raised before sprint aggregation begins."""

from __future__ import annotations

from typing import Any


class SprintAnalysisError(Exception):
    """Base exception for sprint analysis failures.

    Attributes:
        message: Human-readable error message
        details: Additional context for logs and the UI
    """

    def __init__(self, message: str = "Sprint analysis failed", details: Any | None = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": str(self.details) if self.details else None,
        }


class BoardNotFoundError(SprintAnalysisError):
    """Raised when no agile board belongs to the requested project."""

    def __init__(self, project_key: str):
        super().__init__(
            message=f"No board found for project {project_key}",
            details={"project_key": project_key},
        )
        self.project_key = project_key


class SprintNotFoundError(SprintAnalysisError):
    """Raised when a sprint filter matches none of the board's sprints."""

    def __init__(self, sprint_filter: str, board_name: str | None = None):
        message = f"No sprints found matching number {sprint_filter}"
        if board_name:
            message = f"{message} on board {board_name}"
        super().__init__(
            message=message,
            details={"sprint_filter": sprint_filter, "board": board_name},
        )
        self.sprint_filter = sprint_filter
