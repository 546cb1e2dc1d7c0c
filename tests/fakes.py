"""
Test doubles for probes and installer tasks.
"""

from __future__ import annotations

from pathlib import Path

from devsetup.core.context import TaskContext
from devsetup.core.errors import CommandError
from devsetup.core.installers.base import InstallerTask, installer_mitigation_message


class FakeSdk:
    """SdkProbe double with a fixed root, package set and ABI."""

    def __init__(self, sdk_path: Path | None, installed=(), abi: str = "x86_64"):
        self.sdk_path = sdk_path
        self.installed = set(installed)
        self.abi = abi
        self.package_queries: list[str] = []

    def get_sdk_path(self) -> Path | None:
        return self.sdk_path

    def is_package_installed(self, package_id: str) -> bool:
        self.package_queries.append(package_id)
        return package_id in self.installed

    def emulator_abi(self) -> str:
        return self.abi


class SpyTask(InstallerTask):
    """InstallerTask double that records every call made on it."""

    def __init__(
        self,
        name: str,
        applicable: bool = True,
        installed: bool = False,
        error: Exception | None = None,
        probe_error: Exception | None = None,
        applicable_error: Exception | None = None,
        mitigation: str | None = None,
    ):
        self._name = name
        self._applicable = applicable
        self._installed = installed
        self._error = error
        self._probe_error = probe_error
        self._applicable_error = applicable_error
        self._mitigation = mitigation
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    def describe(self) -> str:
        return f"Spy {self._name}"

    def is_applicable(self) -> bool:
        self.calls.append("is_applicable")
        if self._applicable_error is not None:
            raise self._applicable_error
        return self._applicable

    def is_installed(self) -> bool:
        self.calls.append("is_installed")
        if self._probe_error is not None:
            raise self._probe_error
        return self._installed

    def mitigation_message(self) -> str:
        if self._mitigation is not None:
            return self._mitigation
        return installer_mitigation_message(self, f"https://example.com/{self._name}")

    def run(self, context: TaskContext) -> None:
        self.calls.append("run")
        context.update(f"running {self._name}")
        if self._error is not None:
            raise self._error

    @property
    def ran(self) -> bool:
        return "run" in self.calls


def command_failure(*argv: str, exit_code: int = 1) -> CommandError:
    return CommandError(list(argv) or ["tool"], exit_code, "boom")
