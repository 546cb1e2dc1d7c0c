"""
Runner base — the contract between installer tasks and external tools.

Installer tasks never call ``subprocess`` directly.  They describe what
to run as a CommandSpec and hand it to a CommandRunner, which executes
it and either returns a CommandResult or raises CommandError.

To create a new runner:
    1. Subclass CommandRunner
    2. Implement name, is_available, execute
    3. Pass it to the installers that should use it
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from devsetup.core.context import TaskContext
from devsetup.core.models.command import CommandResult, CommandSpec


class CommandRunner(ABC):
    """Abstract base class for all command runners."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'process', 'mock')."""

    @abstractmethod
    def is_available(self, executable: str) -> bool:
        """Check whether ``executable`` can be launched.

        Should be fast and never raise.
        """

    @abstractmethod
    def execute(self, spec: CommandSpec, context: TaskContext) -> CommandResult:
        """Execute ``spec`` to completion.

        Raises:
            CommandError: The command exited non-zero or could not start.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
