"""
Orchestrator — the central installer loop.

Takes an ordered list of installer tasks and a task context, and drives
each task through its lifecycle strictly in order:

    not applicable  → skipped            (is_installed/run never called)
    installed       → already_satisfied  (run never called)
    otherwise       → run → succeeded | failed

Failures never leak between tasks: each is caught at the task boundary,
paired with that task's mitigation message, and recorded on the report.
With ``stop_on_first_failure`` (the default) no further task is issued
after a failure.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Sequence

from devsetup.core.context import TaskContext
from devsetup.core.errors import CommandError, InstallError
from devsetup.core.installers.base import InstallerTask
from devsetup.core.models.receipt import TaskReceipt, TaskState
from devsetup.core.persistence.audit import AuditEntry, AuditWriter, TaskOutcome

logger = logging.getLogger(__name__)


@dataclass
class SetupReport:
    """Aggregate result of one orchestration run."""

    operation_id: str = ""
    receipts: list[TaskReceipt] = field(default_factory=list)
    not_run: list[str] = field(default_factory=list)
    aborted: bool = False
    dry_run: bool = False

    @property
    def total(self) -> int:
        return len(self.receipts)

    def _count(self, *states: TaskState) -> int:
        return sum(1 for r in self.receipts if r.state in states)

    @property
    def succeeded(self) -> int:
        return self._count(TaskState.SUCCEEDED)

    @property
    def already_satisfied(self) -> int:
        return self._count(TaskState.ALREADY_SATISFIED)

    @property
    def skipped(self) -> int:
        return self._count(TaskState.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(TaskState.FAILED)

    @property
    def failures(self) -> list[TaskReceipt]:
        return [r for r in self.receipts if r.failed]

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0 or self.already_satisfied > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "status": self.status,
            "dry_run": self.dry_run,
            "aborted": self.aborted,
            "total": self.total,
            "succeeded": self.succeeded,
            "already_satisfied": self.already_satisfied,
            "skipped": self.skipped,
            "failed": self.failed,
            "not_run": self.not_run,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


def _fail(task: InstallerTask, receipt: TaskReceipt, error: BaseException) -> None:
    """Record ``error`` on ``receipt`` with the task's own mitigation."""
    try:
        mitigation = task.mitigation_message()
    except Exception:
        logger.exception("mitigation_message() raised for %s", receipt.description)
        mitigation = ""

    receipt.mitigation = mitigation or (
        f"{receipt.description} could not be set up automatically. "
        "Install it manually and run setup again."
    )
    receipt.error = str(error) or error.__class__.__name__
    receipt.error_type = error.__class__.__name__
    if isinstance(error, CommandError):
        receipt.exit_code = error.exit_code
        receipt.output = error.output
    receipt.advance(TaskState.FAILED)


def _identify(task: InstallerTask) -> tuple[str, str]:
    """(name, description) for ``task``, falling back to its class name."""
    fallback = task.__class__.__name__
    try:
        name = task.name
    except Exception:
        logger.exception("%s.name raised", fallback)
        name = fallback
    try:
        description = task.describe()
    except Exception:
        logger.exception("%s.describe() raised", fallback)
        description = name
    return name, description


def run_task(task: InstallerTask, context: TaskContext) -> TaskReceipt:
    """Drive a single task through its lifecycle and return its receipt.

    Never raises: whatever the task throws ends up on the receipt.
    """
    name, description = _identify(task)
    receipt = TaskReceipt(name=name, description=description)
    start = time.monotonic()
    context.begin(receipt)

    try:
        try:
            applicable = task.is_applicable()
        except Exception as e:
            logger.exception("✗ %s: applicability check raised", receipt.description)
            _fail(task, receipt, e)
            return receipt

        if not applicable:
            logger.info("⊘ %s: not applicable to this host", receipt.description)
            receipt.advance(TaskState.SKIPPED)
            return receipt

        try:
            installed = task.is_installed()
        except InstallError as e:
            logger.error("✗ %s: cannot determine install state: %s", receipt.description, e)
            _fail(task, receipt, e)
            return receipt
        except Exception as e:
            logger.exception("✗ %s: install probe raised unexpectedly", receipt.description)
            _fail(task, receipt, e)
            return receipt

        if installed:
            logger.info("✓ %s: already satisfied", receipt.description)
            receipt.advance(TaskState.ALREADY_SATISFIED)
            return receipt

        if context.options.dry_run:
            logger.info("⊘ %s: would install (dry-run)", receipt.description)
            receipt.metadata["dry_run"] = True
            receipt.advance(TaskState.SKIPPED)
            return receipt

        # Tasks behind the consent gate start running once it resolves
        if not task.requires_consent:
            receipt.advance(TaskState.RUNNING)
        context.update(f"Installing {receipt.description}")

        try:
            task.run(context)
        except InstallError as e:
            logger.error("✗ %s: %s", receipt.description, e)
            _fail(task, receipt, e)
            return receipt
        except Exception as e:
            # Anything else is a task bug; still recorded as a failure
            logger.exception("✗ %s raised unexpectedly", receipt.description)
            _fail(task, receipt, e)
            return receipt

        if receipt.state == TaskState.NOT_STARTED:
            receipt.advance(TaskState.RUNNING)
        receipt.advance(TaskState.SUCCEEDED)
        logger.info("✓ %s: installed", receipt.description)
        return receipt

    finally:
        receipt.duration_ms = int((time.monotonic() - start) * 1000)
        context.end()


def run_installers(
    tasks: Sequence[InstallerTask],
    context: TaskContext,
    operation_id: str | None = None,
) -> SetupReport:
    """Run installer tasks sequentially under the context's policy.

    Args:
        tasks: Installers, in the order they must run.
        context: Per-run context (options, progress sink, consent surface).
        operation_id: Optional id for the run (generated when omitted).

    Returns:
        SetupReport with one receipt per task that was reached.
    """
    report = SetupReport(
        operation_id=operation_id or generate_operation_id(),
        dry_run=context.options.dry_run,
    )

    for index, task in enumerate(tasks):
        receipt = run_task(task, context)
        report.receipts.append(receipt)

        if receipt.failed and context.options.stop_on_first_failure:
            report.aborted = True
            report.not_run = [t.name for t in tasks[index + 1:]]
            if report.not_run:
                logger.warning(
                    "Stopping after %s failed; not run: %s",
                    receipt.description,
                    ", ".join(report.not_run),
                )
            break

    return report


def write_audit_entry(report: SetupReport, audit_writer: AuditWriter) -> None:
    """Write one summary entry for ``report`` to the audit ledger."""
    entry = AuditEntry(
        operation_id=report.operation_id,
        status=report.status,
        dry_run=report.dry_run,
        aborted=report.aborted,
        tasks=[
            TaskOutcome(
                name=r.name,
                state=r.state.value,
                duration_ms=r.duration_ms,
                error_type=r.error_type,
                error=r.error,
                mitigation=r.mitigation,
            )
            for r in report.receipts
        ],
        not_run=report.not_run,
    )
    audit_writer.write(entry)


def generate_operation_id() -> str:
    """Generate a unique operation ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"op-{now}-{short}"
