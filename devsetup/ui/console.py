"""
Console surfaces — progress and consent for an interactive terminal.
"""

from __future__ import annotations

import click

from devsetup.core.installers.consent import ConsentRequest


class ClickSink:
    """Progress sink that writes to the terminal.

    Status lines are always shown; raw command output only with
    ``show_output`` (``--verbose``).
    """

    def __init__(self, show_output: bool = False):
        self._show_output = show_output

    def update(self, message: str) -> None:
        click.secho(f"   → {message}", fg="cyan")

    def output(self, line: str) -> None:
        if self._show_output:
            click.echo(f"     │ {line}")


def confirm_consent(request: ConsentRequest) -> bool:
    """Ask the user to accept the terms behind ``request``."""
    click.echo()
    click.secho(f"   📜 {request.description} requires accepting third-party terms:", bold=True)
    click.echo(f"      {request.terms_url}")
    return click.confirm("   Do you accept these terms?", default=False)
