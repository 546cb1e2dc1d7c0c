"""
Installer task base — the contract every installer implements.

The orchestrator only talks to installers through this interface,
never through concrete types.  A task:

    1. says whether it applies to this host      (is_applicable)
    2. probes whether its end state already holds (is_installed)
    3. establishes that end state                (run)
    4. explains how to fix things by hand        (mitigation_message)

To create a new installer:
    1. Subclass InstallerTask
    2. Implement name, describe, is_applicable, is_installed,
       mitigation_message, run
    3. Register it in ``devsetup.core.installers.build_installers``
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from devsetup.core.context import TaskContext


class InstallerTask(ABC):
    """Abstract base class for all installer tasks."""

    #: True when ``run`` passes through the consent gate; the task is
    #: then marked running only once consent resolves.
    requires_consent: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used on the command line (e.g. 'android-sdk')."""

    @abstractmethod
    def describe(self) -> str:
        """Human-readable label for logs and consent prompts."""

    @abstractmethod
    def is_applicable(self) -> bool:
        """Whether this task is relevant to the current host.

        Must be cheap and side-effect free.
        """

    @abstractmethod
    def is_installed(self) -> bool:
        """Whether the desired end state already holds.

        A pure read: callable any number of times, never mutates.
        Returns True only when every precondition ``run`` would
        establish already holds.

        Raises:
            ProbeError: State cannot be determined at all.
        """

    @abstractmethod
    def mitigation_message(self) -> str:
        """Actionable guidance shown when ``run`` fails."""

    @abstractmethod
    def run(self, context: TaskContext) -> None:
        """Perform the installation.

        Only called when applicable and not installed; the orchestrator
        enforces that, not the task.

        Raises:
            InstallError: Any failure (Declined, CommandError, ...).
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


def installer_mitigation_message(task: InstallerTask, url: str) -> str:
    """Standard mitigation wording pointing at ``url``."""
    return (
        f"{task.describe()} could not be set up automatically. "
        f"Install it manually by following {url} and run setup again."
    )
