"""
Shared base for installers that drive an Android command-line tool.
"""

from __future__ import annotations

import os
from pathlib import Path

from devsetup.adapters.android import AndroidSdk, SdkProbe
from devsetup.adapters.base import CommandRunner
from devsetup.adapters.host import HostProbe
from devsetup.core.installers.base import InstallerTask, installer_mitigation_message
from devsetup.core.models.config import AndroidSettings

ANDROID_STUDIO_URL = "https://developer.android.com/studio"


class AndroidCommandLineTools(InstallerTask):
    """Installer backed by a binary under ``<sdk>/tools/bin``.

    Collaborators are injected so tests can replace every probe and the
    runner; defaults read the real host.
    """

    def __init__(
        self,
        tool: str,
        runner: CommandRunner,
        settings: AndroidSettings | None = None,
        sdk: SdkProbe | None = None,
        host: HostProbe | None = None,
    ):
        self._tool = tool
        self._runner = runner
        self._settings = settings or AndroidSettings()
        self._sdk = sdk or AndroidSdk(sdk_root=self._settings.sdk_root)
        self._host = host or HostProbe()

    @property
    def settings(self) -> AndroidSettings:
        return self._settings

    def is_applicable(self) -> bool:
        return any(self._host.is_host_os(kind) for kind in self._settings.host_platforms)

    def mitigation_message(self) -> str:
        return installer_mitigation_message(self, ANDROID_STUDIO_URL)

    def command_line_tool_path(self) -> Path | None:
        sdk = self._sdk.get_sdk_path()
        if sdk is None:
            return None
        return sdk / "tools" / "bin" / self._tool

    def android_user_dir(self) -> Path:
        """Per-user Android state directory (AVDs, repositories.cfg)."""
        if self._settings.user_home:
            return Path(self._settings.user_home).expanduser()
        env = os.environ.get("ANDROID_USER_HOME")
        if env:
            return Path(env).expanduser()
        return Path.home() / ".android"
