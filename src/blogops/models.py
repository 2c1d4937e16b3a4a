"""Result types shared by the runner and the workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


@dataclass
class CommandResult:
    """Outcome of one external command."""

    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class WorkflowStatus(Enum):
    """Terminal status of a workflow run."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class WorkflowResult:
    """Result of an update or deploy run."""

    workflow: str
    status: WorkflowStatus = WorkflowStatus.FAILED
    steps_completed: list[str] = field(default_factory=list)
    was_running: bool | None = None
    previous_sha: str | None = None
    new_sha: str | None = None
    commit_message: str | None = None
    error: str | None = None
    exit_code: int = 0
    started_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    completed_at: str | None = None
    duration_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.status is WorkflowStatus.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        return {
            "workflow": self.workflow,
            "status": self.status.value,
            "steps_completed": list(self.steps_completed),
            "was_running": self.was_running,
            "previous_sha": self.previous_sha,
            "new_sha": self.new_sha,
            "commit_message": self.commit_message,
            "error": self.error,
            "exit_code": self.exit_code,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "duration_seconds": self.duration_seconds,
        }
