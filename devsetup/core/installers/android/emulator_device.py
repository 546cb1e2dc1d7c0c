"""
Android emulator device installer — creates the AVD the toolchain boots.

Depends on the SDK Manager installer having laid down avdmanager and
the system image; the orchestrator's ordering guarantees that.
"""

from __future__ import annotations

import logging

from devsetup.adapters.android import SdkProbe
from devsetup.adapters.base import CommandRunner
from devsetup.adapters.host import HostProbe
from devsetup.core.context import TaskContext
from devsetup.core.errors import InstallError
from devsetup.core.installers.android.command_line_tools import AndroidCommandLineTools
from devsetup.core.models.command import CommandSpec
from devsetup.core.models.config import AndroidSettings

logger = logging.getLogger(__name__)


class AndroidEmulatorDeviceInstaller(AndroidCommandLineTools):
    """Creates a named Android Virtual Device."""

    def __init__(
        self,
        runner: CommandRunner,
        settings: AndroidSettings | None = None,
        sdk: SdkProbe | None = None,
        host: HostProbe | None = None,
    ):
        super().__init__("avdmanager", runner, settings=settings, sdk=sdk, host=host)

    @property
    def name(self) -> str:
        return "android-emulator"

    def describe(self) -> str:
        return f"Android Emulator device ({self.settings.avd_name})"

    def is_installed(self) -> bool:
        avd_dir = self.android_user_dir() / "avd"
        avd_name = self.settings.avd_name
        try:
            return (avd_dir / f"{avd_name}.ini").is_file() and (avd_dir / f"{avd_name}.avd").is_dir()
        except OSError as e:
            logger.debug("Cannot inspect %s, treating as not installed: %s", avd_dir, e)
            return False

    def run(self, context: TaskContext) -> None:
        tool = self.command_line_tool_path()
        if tool is None:
            raise InstallError("Android SDK location could not be determined")

        system_image = self.settings.system_image_package(self._sdk.emulator_abi())

        context.update(f"Creating emulator device {self.settings.avd_name}")
        # avdmanager asks whether to create a custom hardware profile
        self._runner.execute(
            CommandSpec.blocking(
                str(tool),
                "create", "avd",
                "--name", self.settings.avd_name,
                "--package", system_image,
                "--force",
                auto_answer="no",
            ),
            context,
        )
