"""
Installer error taxonomy.

Every failure an installer task can produce is an ``InstallError``.
The orchestrator catches these at the task boundary and turns them
into a failed receipt paired with the task's mitigation message.

A task that is not applicable to the host is NOT an error — it is
a normal skip and never raises.
"""

from __future__ import annotations

from typing import Sequence


class InstallError(Exception):
    """Base class for everything an installer task may raise."""


class ProbeError(InstallError):
    """The installed-check could not determine state at all.

    Distinct from "not installed": the task fails fast instead of
    attempting an install on top of unknown state.
    """


class Declined(InstallError):
    """The user rejected the consent prompt for a task."""

    def __init__(self, description: str, terms_url: str = ""):
        self.description = description
        self.terms_url = terms_url
        super().__init__(f"Consent declined for {description}")


class CommandError(InstallError):
    """An external command exited non-zero (or could not start)."""

    def __init__(self, argv: Sequence[str], exit_code: int, output: str = ""):
        self.argv = list(argv)
        self.exit_code = exit_code
        self.output = output
        super().__init__(f"Command failed (exit {exit_code}): {' '.join(self.argv)}")
