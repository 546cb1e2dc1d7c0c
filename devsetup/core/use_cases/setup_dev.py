"""
Setup use case — bring the developer environment up to date.

The full vertical slice from user intent to audited execution:
load config, pick installers, build the run context, orchestrate,
record history.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from devsetup.adapters.android import SdkProbe
from devsetup.adapters.base import CommandRunner
from devsetup.adapters.host import HostProbe
from devsetup.core.config.loader import ConfigError, load_config
from devsetup.core.context import ConsentPrompt, ProgressSink, RunOptions, TaskContext
from devsetup.core.engine.orchestrator import SetupReport, run_installers, write_audit_entry
from devsetup.core.installers import UnknownInstallerError, build_installers
from devsetup.core.models.config import SetupConfig
from devsetup.core.persistence.audit import AuditWriter

logger = logging.getLogger(__name__)


@dataclass
class SetupResult:
    """Result of a setup run."""

    report: SetupReport | None = None
    config: SetupConfig | None = None
    audit_path: Path | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        result: dict = {"audit_path": str(self.audit_path) if self.audit_path else None}
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def resolve_runner(mock_mode: bool = False) -> CommandRunner:
    """The command runner for a run: real processes, or the mock."""
    if mock_mode:
        from devsetup.adapters.mock import MockCommandRunner

        return MockCommandRunner()

    from devsetup.adapters.shell.process import ProcessRunner

    return ProcessRunner()


def audit_writer_for(config: SetupConfig) -> AuditWriter | None:
    """The ledger writer ``config`` asks for, or None when disabled."""
    if not config.audit.enabled:
        return None
    if config.audit.path:
        return AuditWriter(Path(config.audit.path).expanduser())
    return AuditWriter()


def run_setup(
    config_path: Path | None = None,
    names: list[str] | None = None,
    auto_approve: bool | None = None,
    keep_going: bool | None = None,
    dry_run: bool = False,
    mock_mode: bool = False,
    sink: ProgressSink | None = None,
    prompt: ConsentPrompt | None = None,
    runner: CommandRunner | None = None,
    sdk: SdkProbe | None = None,
    host: HostProbe | None = None,
) -> SetupResult:
    """Run the selected installers.

    Args:
        config_path: Optional explicit path to devsetup.yml.
        names: Installer names to run (None = config, then all).
        auto_approve: Override ``auto_approve`` from config.
        keep_going: Override ``stop_on_first_failure`` (True = continue).
        dry_run: Probe only; report what would be installed.
        mock_mode: Issue commands to the mock runner instead of processes.
        sink: Progress sink (default: logging).
        prompt: Interactive consent surface (default: none).
        runner: Optional pre-configured command runner.
        sdk: Optional SDK probe override.
        host: Optional host probe override.

    Returns:
        SetupResult with the orchestration report.
    """
    result = SetupResult()

    # ── Load config ──────────────────────────────────────────────
    try:
        config = load_config(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result
    result.config = config

    options = RunOptions(
        auto_approve=config.auto_approve if auto_approve is None else auto_approve,
        stop_on_first_failure=(
            config.stop_on_first_failure if keep_going is None else not keep_going
        ),
        dry_run=dry_run,
    )

    # ── Build installers ─────────────────────────────────────────
    if runner is None:
        runner = resolve_runner(mock_mode)

    try:
        tasks = build_installers(config, runner, names=names, sdk=sdk, host=host)
    except UnknownInstallerError as e:
        result.error = str(e)
        return result

    # ── Orchestrate ──────────────────────────────────────────────
    context = TaskContext(options=options, sink=sink, prompt=prompt)
    report = run_installers(tasks, context)
    result.report = report

    logger.info(
        "Setup %s: %d succeeded, %d already satisfied, %d skipped, %d failed",
        report.status,
        report.succeeded,
        report.already_satisfied,
        report.skipped,
        report.failed,
    )

    # ── Record history ───────────────────────────────────────────
    writer = audit_writer_for(config)
    if writer is not None:
        write_audit_entry(report, writer)
        result.audit_path = writer.path

    return result
