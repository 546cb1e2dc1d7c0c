"""
CommandSpec and CommandResult models — the process runner contract.

Installers describe external invocations as CommandSpecs; the process
runner consumes each spec once and returns a CommandResult, or raises
CommandError on a non-zero exit.
"""

from __future__ import annotations

import shlex
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ExecutionMode(str, Enum):
    """How the process runner executes a command."""

    BLOCKING = "blocking"    # run to completion, capture output
    STREAMED = "streamed"    # relay output lines while it runs


class CommandSpec(BaseModel):
    """An external command invocation.

    ``auto_answer`` pre-supplies confirmatory input: the line is written
    to the command's stdin ``answer_repeat`` times, which replaces shell
    constructs like ``yes | sdkmanager --licenses``.
    """

    model_config = ConfigDict(frozen=True)

    executable: str
    args: tuple[str, ...] = ()
    mode: ExecutionMode = ExecutionMode.BLOCKING
    auto_answer: str | None = None
    answer_repeat: int = Field(default=64, ge=1)

    @property
    def argv(self) -> list[str]:
        return [self.executable, *self.args]

    @property
    def stdin_text(self) -> str | None:
        """Input fed to the process, or None to inherit nothing."""
        if self.auto_answer is None:
            return None
        return f"{self.auto_answer}\n" * self.answer_repeat

    def display(self) -> str:
        """Shell-quoted rendering for logs."""
        text = shlex.join(self.argv)
        if self.auto_answer is not None:
            text = f"(auto-answer {self.auto_answer!r}) {text}"
        return text

    @classmethod
    def blocking(cls, executable: str, *args: str, auto_answer: str | None = None) -> CommandSpec:
        return cls(executable=executable, args=args, auto_answer=auto_answer)

    @classmethod
    def streamed(cls, executable: str, *args: str, auto_answer: str | None = None) -> CommandSpec:
        return cls(
            executable=executable,
            args=args,
            mode=ExecutionMode.STREAMED,
            auto_answer=auto_answer,
        )


class CommandResult(BaseModel):
    """Outcome of a command that exited zero."""

    argv: list[str]
    exit_code: int = 0
    output: str = ""
    duration_ms: int = 0
