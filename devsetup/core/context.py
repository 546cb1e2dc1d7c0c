"""
Task context — the per-run carrier of options and progress reporting.

One TaskContext is created per orchestration run and handed, by
reference, to every installer task the run invokes.  Nothing here is
module-level state: two runs in the same process never share a context.

    context = TaskContext(options=RunOptions(auto_approve=True))
    report = run_installers(tasks, context)

Design notes:
    - The progress sink is write-only from the task's point of view.
      ``update()`` carries human-readable status lines, ``output()``
      carries raw lines relayed from external commands.
    - ``prompt`` is the interactive consent surface.  None means no
      human is available; consent then only resolves via auto-approve.
    - Tasks execute sequentially, so the sink is never written by two
      tasks at once and needs no locking.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Protocol

from pydantic import BaseModel

from devsetup.core.models.receipt import TaskReceipt, TaskState

if TYPE_CHECKING:
    from devsetup.core.installers.consent import ConsentRequest

logger = logging.getLogger(__name__)


class RunOptions(BaseModel):
    """Run-wide options, usually threaded in from the CLI."""

    auto_approve: bool = False
    stop_on_first_failure: bool = True
    dry_run: bool = False


class ProgressSink(Protocol):
    """Write-only channel for progress reporting."""

    def update(self, message: str) -> None:
        ...

    def output(self, line: str) -> None:
        ...


ConsentPrompt = Callable[["ConsentRequest"], bool]


class LoggingSink:
    """Default sink: status lines at INFO, command output at DEBUG."""

    def __init__(self, name: str = "devsetup.progress"):
        self._logger = logging.getLogger(name)

    def update(self, message: str) -> None:
        self._logger.info("%s", message)

    def output(self, line: str) -> None:
        self._logger.debug("│ %s", line)


class TaskContext:
    """Everything a task may touch for the duration of one run."""

    def __init__(
        self,
        options: RunOptions | None = None,
        sink: ProgressSink | None = None,
        prompt: ConsentPrompt | None = None,
    ):
        self.options = options or RunOptions()
        self.sink: ProgressSink = sink or LoggingSink()
        self.prompt = prompt
        self._receipt: TaskReceipt | None = None
        self._consents: dict[int, ConsentRequest] = {}

    @property
    def auto_approve(self) -> bool:
        return self.options.auto_approve

    # ── Progress ────────────────────────────────────────────────

    def update(self, message: str) -> None:
        """Report a human-readable status line for the current task."""
        self.sink.update(message)

    def output(self, line: str) -> None:
        """Relay one line of external command output."""
        self.sink.output(line)

    # ── Task lifecycle ──────────────────────────────────────────

    @property
    def current(self) -> TaskReceipt | None:
        """Receipt of the task currently being driven, if any."""
        return self._receipt

    def begin(self, receipt: TaskReceipt) -> None:
        self._receipt = receipt

    def mark(self, state: TaskState) -> None:
        """Advance the current task's state (no-op outside a task)."""
        if self._receipt is not None and not self._receipt.state.terminal:
            self._receipt.advance(state)

    def end(self) -> None:
        self._receipt = None

    # ── Consent log ─────────────────────────────────────────────

    def consent_for(self, task: object) -> ConsentRequest | None:
        """The resolved consent for ``task`` in this run, if any."""
        return self._consents.get(id(task))

    def record_consent(self, task: object, request: ConsentRequest) -> None:
        self._consents[id(task)] = request

    @property
    def consents(self) -> list[ConsentRequest]:
        return list(self._consents.values())
