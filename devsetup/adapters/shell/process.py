"""
Process runner — the SINGLE PLACE where installer commands are executed.

Two modes, selected by ``CommandSpec.mode``:

    - BLOCKING: ``subprocess.run`` to completion, output captured.
    - STREAMED: ``subprocess.Popen``, each output line relayed to the
      task context as it arrives, then waited on.

Both modes inherit the working directory and environment of the host
process and never go through a shell.  Output is decoded as UTF-8 with
undecodable bytes replaced.  Confirmatory input (``auto_answer``) is
written to stdin explicitly.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from collections import deque
from pathlib import Path

from devsetup.adapters.base import CommandRunner
from devsetup.core.context import TaskContext
from devsetup.core.errors import CommandError
from devsetup.core.models.command import CommandResult, CommandSpec, ExecutionMode

logger = logging.getLogger(__name__)

# Captured output kept on results and errors (tail)
_OUTPUT_LIMIT = 4000

# Streamed lines held for the error tail
_TAIL_LINES = 200

# Conventional "command not found" exit status
_EXIT_NOT_FOUND = 127


def _tail(text: str) -> str:
    return text[-_OUTPUT_LIMIT:] if text else ""


class ProcessRunner(CommandRunner):
    """Execute CommandSpecs as real child processes."""

    @property
    def name(self) -> str:
        return "process"

    def is_available(self, executable: str) -> bool:
        if os.sep in executable:
            path = Path(executable)
            return path.is_file() and os.access(path, os.X_OK)
        return shutil.which(executable) is not None

    def execute(self, spec: CommandSpec, context: TaskContext) -> CommandResult:
        logger.debug("Executing [%s]: %s", spec.mode.value, spec.display())
        start = time.monotonic()

        try:
            if spec.mode == ExecutionMode.STREAMED:
                exit_code, output = self._run_streamed(spec, context)
            else:
                exit_code, output = self._run_blocking(spec)
        except FileNotFoundError as e:
            raise CommandError(spec.argv, _EXIT_NOT_FOUND, str(e)) from e
        except PermissionError as e:
            raise CommandError(spec.argv, 126, str(e)) from e

        elapsed_ms = int((time.monotonic() - start) * 1000)

        if exit_code != 0:
            logger.debug("Command exited %d after %dms: %s", exit_code, elapsed_ms, spec.display())
            raise CommandError(spec.argv, exit_code, _tail(output))

        return CommandResult(
            argv=spec.argv,
            exit_code=exit_code,
            output=_tail(output),
            duration_ms=elapsed_ms,
        )

    def _run_blocking(self, spec: CommandSpec) -> tuple[int, str]:
        result = subprocess.run(
            spec.argv,
            input=spec.stdin_text,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            stdin=None if spec.stdin_text is not None else subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
        return result.returncode, result.stdout or ""

    def _run_streamed(self, spec: CommandSpec, context: TaskContext) -> tuple[int, str]:
        stdin_text = spec.stdin_text
        lines: deque[str] = deque(maxlen=_TAIL_LINES)

        with subprocess.Popen(
            spec.argv,
            stdin=subprocess.PIPE if stdin_text is not None else subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
        ) as proc:
            if stdin_text is not None and proc.stdin is not None:
                try:
                    proc.stdin.write(stdin_text)
                    proc.stdin.close()
                except BrokenPipeError:
                    # The command stopped reading; it has what it needs.
                    pass

            assert proc.stdout is not None
            for raw in proc.stdout:
                line = raw.rstrip("\n")
                lines.append(line)
                context.output(line)

            exit_code = proc.wait()

        return exit_code, "\n".join(lines)
