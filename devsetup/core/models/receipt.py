"""
Task receipts — the per-task outcome of an orchestration run.

A receipt records the terminal state a task reached, every state it
passed through, and, for failures, the mitigation text the user sees
plus the raw diagnostics behind it.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class TaskState(str, Enum):
    """Per-task, per-run lifecycle state."""

    NOT_STARTED = "not_started"
    SKIPPED = "skipped"
    ALREADY_SATISFIED = "already_satisfied"
    AWAITING_CONSENT = "awaiting_consent"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL = frozenset({
    TaskState.SKIPPED,
    TaskState.ALREADY_SATISFIED,
    TaskState.SUCCEEDED,
    TaskState.FAILED,
})


class TaskReceipt(BaseModel):
    """Outcome of one installer task within a run."""

    name: str
    description: str
    state: TaskState = TaskState.NOT_STARTED
    transitions: list[TaskState] = Field(default_factory=lambda: [TaskState.NOT_STARTED])

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    mitigation: str | None = None
    error: str | None = None
    error_type: str | None = None
    exit_code: int | None = None
    output: str = ""

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the task ended in a non-failure terminal state."""
        return self.state in (
            TaskState.SUCCEEDED,
            TaskState.ALREADY_SATISFIED,
            TaskState.SKIPPED,
        )

    @property
    def failed(self) -> bool:
        return self.state == TaskState.FAILED

    def advance(self, state: TaskState) -> None:
        """Move to ``state``, keeping the transition history."""
        if self.state.terminal:
            raise ValueError(f"{self.name} already reached terminal state {self.state.value}")
        self.state = state
        if not self.transitions or self.transitions[-1] != state:
            self.transitions.append(state)
