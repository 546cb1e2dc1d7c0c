"""
Mock runner and recording sink — test doubles for the task layer.

Used in ``--mock`` mode to exercise installers without launching any
external tool, and by the test suite to observe what tasks issue.
"""

from __future__ import annotations

from devsetup.adapters.base import CommandRunner
from devsetup.core.context import TaskContext
from devsetup.core.errors import CommandError
from devsetup.core.models.command import CommandResult, CommandSpec


class MockCommandRunner(CommandRunner):
    """Universal mock runner.

    By default every command succeeds. Individual commands can be made
    to fail by matching any argv element (e.g. ``"--licenses"``).
    """

    def __init__(
        self,
        runner_name: str = "mock",
        available: bool = True,
        default_output: str = "[mock] executed",
    ):
        self._name = runner_name
        self._available = available
        self._default_output = default_output
        self._failures: dict[str, tuple[int, str]] = {}
        self._call_log: list[CommandSpec] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[CommandSpec]:
        """All specs this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def is_available(self, executable: str) -> bool:
        return self._available

    def set_failure(self, match: str, exit_code: int = 1, output: str = "Mock failure") -> None:
        """Make every command whose argv contains ``match`` fail."""
        self._failures[match] = (exit_code, output)

    def execute(self, spec: CommandSpec, context: TaskContext) -> CommandResult:
        self._call_log.append(spec)

        for match, (exit_code, output) in self._failures.items():
            if match in spec.argv:
                raise CommandError(spec.argv, exit_code, output)

        context.output(self._default_output)
        return CommandResult(argv=spec.argv, output=self._default_output)

    def reset(self) -> None:
        """Clear call log and configured failures."""
        self._call_log.clear()
        self._failures.clear()


class RecordingSink:
    """Progress sink that keeps everything it is given."""

    def __init__(self) -> None:
        self.updates: list[str] = []
        self.lines: list[str] = []

    def update(self, message: str) -> None:
        self.updates.append(message)

    def output(self, line: str) -> None:
        self.lines.append(line)
