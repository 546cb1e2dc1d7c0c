"""
devsetup — CLI entrypoint.

Usage:
    python -m devsetup.main --help
    devsetup setup-dev --yes
    devsetup doctor
    devsetup config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from devsetup import __version__
from devsetup.core.observability.logging_config import resolve_level, setup_logging_from_env


@click.group()
@click.version_option(version=__version__, prog_name="devsetup")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to devsetup.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """devsetup — bootstrap the Android SDK for local development."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging_from_env(resolve_level(debug=debug, verbose=verbose, quiet=quiet))


_STATE_STYLE = {
    "succeeded": ("✓", "green"),
    "already_satisfied": ("✓", "green"),
    "skipped": ("⊘", "yellow"),
    "failed": ("✗", "red"),
}


@cli.command("setup-dev")
@click.argument("names", nargs=-1)
@click.option("--yes", "-y", "auto_approve", is_flag=True,
              help="Accept all third-party terms without asking.")
@click.option("--keep-going", is_flag=True,
              help="Continue with later installers after a failure.")
@click.option("--dry-run", is_flag=True, help="Report what would be installed.")
@click.option("--mock", is_flag=True, help="Use mock runner (no real execution).")
@click.option("--json-output", "--json", "as_json", is_flag=True,
              help="Output as JSON. Never prompts; terms are accepted only with --yes.")
@click.pass_context
def setup_dev(
    ctx: click.Context,
    names: tuple[str, ...],
    auto_approve: bool,
    keep_going: bool,
    dry_run: bool,
    mock: bool,
    as_json: bool,
) -> None:
    """Install and validate development dependencies.

    Examples:

        devsetup setup-dev

        devsetup setup-dev --yes android-sdk

        devsetup setup-dev --dry-run
    """
    from devsetup.core.use_cases.setup_dev import run_setup
    from devsetup.ui.console import ClickSink, confirm_consent

    quiet = ctx.obj.get("quiet", False)

    if not (as_json or quiet):
        mode_label = "[dry-run] " if dry_run else "[mock] " if mock else ""
        click.secho(f"\n⚡ {mode_label}Setting up development environment", fg="cyan", bold=True)

    result = run_setup(
        config_path=ctx.obj.get("config_path"),
        names=list(names) if names else None,
        auto_approve=True if auto_approve else None,
        keep_going=True if keep_going else None,
        dry_run=dry_run,
        mock_mode=mock,
        sink=None if (as_json or quiet) else ClickSink(show_output=ctx.obj.get("verbose", False)),
        prompt=None if as_json else confirm_consent,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error or (result.report and result.report.failed > 0):
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    report = result.report
    if report is None:
        click.secho("❌ Setup produced no report", fg="red")
        sys.exit(1)

    click.echo()
    for receipt in report.receipts:
        icon, color = _STATE_STYLE.get(receipt.state.value, ("•", "white"))
        label = receipt.state.value.replace("_", " ")
        if receipt.metadata.get("dry_run"):
            label = "would install"
        click.secho(f"   {icon} {receipt.description} ", fg=color, nl=False)
        click.echo(f"({label})")
        if receipt.failed:
            click.echo(f"     {receipt.error}")
            click.secho(f"     💡 {receipt.mitigation}", fg="yellow")

    for name in report.not_run:
        click.secho(f"   ⊘ {name} ", fg="white", nl=False)
        click.echo("(not run)")

    click.echo()
    status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(report.status, "white")
    click.secho(
        f"   Result: {report.status} — {report.succeeded} installed, "
        f"{report.already_satisfied} already satisfied, {report.failed} failed",
        fg=status_color,
        bold=True,
    )
    click.echo()

    if report.failed > 0:
        sys.exit(1)


@cli.command()
@click.argument("names", nargs=-1)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def doctor(ctx: click.Context, names: tuple[str, ...], as_json: bool) -> None:
    """Check installer state without changing anything."""
    from devsetup.core.use_cases.doctor import run_doctor

    result = run_doctor(
        config_path=ctx.obj.get("config_path"),
        names=list(names) if names else None,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    click.secho("\n🩺 Development environment", fg="cyan", bold=True)
    for status in result.installers:
        if not status.applicable:
            click.secho(f"   ⊘ {status.description} ", fg="yellow", nl=False)
            click.echo("(not applicable)")
        elif status.error:
            click.secho(f"   ✗ {status.description} ", fg="red", nl=False)
            click.echo(f"({status.error})")
        elif status.installed:
            click.secho(f"   ✓ {status.description}", fg="green")
        else:
            click.secho(f"   ✗ {status.description} ", fg="red", nl=False)
            click.echo("(missing)")
            if ctx.obj.get("verbose") and status.mitigation:
                click.echo(f"     💡 {status.mitigation}")

    click.echo()
    if not result.healthy:
        click.secho("   Run 'devsetup setup-dev' to install what is missing.", fg="yellow")
        click.echo()


@cli.command("list")
@click.pass_context
def list_installers(ctx: click.Context) -> None:
    """List available installers in run order."""
    from devsetup.core.config.loader import ConfigError, load_config
    from devsetup.core.installers import build_installers
    from devsetup.core.use_cases.setup_dev import resolve_runner

    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    config = config.model_copy(update={"installers": None})
    for task in build_installers(config, resolve_runner(mock_mode=True)):
        click.echo(f"{task.name:<20} {task.describe()}")


@cli.command()
@click.option("--limit", "-n", default=10, type=int, help="Number of runs to show.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def history(ctx: click.Context, limit: int, as_json: bool) -> None:
    """Show recent setup runs."""
    from devsetup.core.config.loader import ConfigError, load_config
    from devsetup.core.use_cases.setup_dev import audit_writer_for

    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    writer = audit_writer_for(config)
    entries = writer.read_recent(limit) if writer else []

    if as_json:
        click.echo(json.dumps([e.model_dump(mode="json") for e in entries], indent=2))
        return

    if writer is None:
        click.secho("Run history is disabled (audit.enabled: false).", fg="yellow")
        return

    if not entries:
        click.echo("No setup runs recorded yet.")
        return

    for entry in reversed(entries):
        status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(entry.status, "white")
        click.echo(f"{entry.timestamp}  {entry.operation_id}  ", nl=False)
        click.secho(entry.status + (" (dry-run)" if entry.dry_run else ""), fg=status_color)
        click.echo("     " + ", ".join(f"{t.name}: {t.state}" for t in entry.tasks))
        for err in entry.errors:
            click.echo(f"     │ {err}")


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate devsetup.yml configuration."""
    from devsetup.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   File: {result.config_path}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


if __name__ == "__main__":
    cli()
