"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from devsetup.adapters.host import HostProbe
from devsetup.adapters.mock import MockCommandRunner, RecordingSink
from devsetup.core.context import RunOptions, TaskContext


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Point HOME and every Android env var away from the real machine."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in ("ANDROID_SDK_ROOT", "ANDROID_HOME", "ANDROID_USER_HOME", "DEVSETUP_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return home


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def runner() -> MockCommandRunner:
    return MockCommandRunner()


@pytest.fixture
def make_context(sink: RecordingSink):
    """Build a TaskContext writing to the shared recording sink."""

    def _make(prompt=None, **options) -> TaskContext:
        return TaskContext(options=RunOptions(**options), sink=sink, prompt=prompt)

    return _make


@pytest.fixture
def macos() -> HostProbe:
    return HostProbe(system="Darwin")


@pytest.fixture
def linux() -> HostProbe:
    return HostProbe(system="Linux")
