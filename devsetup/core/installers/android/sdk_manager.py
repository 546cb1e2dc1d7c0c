"""
Android SDK Manager installer — SDK packages the emulator toolchain needs.

Run sequence (fixed):
    1. write <android user dir>/repositories.cfg
    2. consent to the Android SDK terms (once)
    3. accept all licenses          sdkmanager --licenses
    4. platform-tools + emulator    sdkmanager --sdk_root=<sdk> platform-tools emulator
    5. platform                     sdkmanager --sdk_root=<sdk> platforms;android-<api>
    6. system image                 sdkmanager --sdk_root=<sdk> system-images;android-<api>;<tag>;<abi>
"""

from __future__ import annotations

import logging

from devsetup.adapters.android import SdkProbe
from devsetup.adapters.base import CommandRunner
from devsetup.adapters.host import HostProbe
from devsetup.core.context import TaskContext
from devsetup.core.errors import InstallError
from devsetup.core.installers.android.command_line_tools import AndroidCommandLineTools
from devsetup.core.installers.consent import request_consent
from devsetup.core.models.command import CommandSpec
from devsetup.core.models.config import AndroidSettings

logger = logging.getLogger(__name__)

ANDROID_TERMS_URL = "https://developer.android.com/studio/terms"

REPOSITORIES_CFG_HEADER = "### User Sources for Android SDK Manager"

# Directories sdkmanager lays down under the SDK root
_REQUIRED_DIRS = ("tools", "platform-tools", "emulator")


class AndroidSDKManagerInstaller(AndroidCommandLineTools):
    """Installs platform-tools, the emulator, a platform and its system image."""

    requires_consent = True

    def __init__(
        self,
        runner: CommandRunner,
        settings: AndroidSettings | None = None,
        sdk: SdkProbe | None = None,
        host: HostProbe | None = None,
    ):
        super().__init__("sdkmanager", runner, settings=settings, sdk=sdk, host=host)

    @property
    def name(self) -> str:
        return "android-sdk"

    def describe(self) -> str:
        return "Android SDK Manager"

    def required_packages(self) -> list[str]:
        return [
            "emulator",
            "platform-tools",
            self.settings.platform_package,
            self.settings.system_image_package(self._sdk.emulator_abi()),
        ]

    def is_installed(self) -> bool:
        sdk = self._sdk.get_sdk_path()
        if sdk is None:
            return False

        packages = self.required_packages()  # ProbeError propagates

        try:
            if not all((sdk / d).exists() for d in _REQUIRED_DIRS):
                return False
            return all(self._sdk.is_package_installed(p) for p in packages)
        except OSError as e:
            logger.debug("Probe error under %s, treating as not installed: %s", sdk, e)
            return False

    def run(self, context: TaskContext) -> None:
        sdk = self._sdk.get_sdk_path()
        tool = self.command_line_tool_path()
        if sdk is None or tool is None:
            raise InstallError("Android SDK location could not be determined")

        system_image = self.settings.system_image_package(self._sdk.emulator_abi())
        sdk_root = f"--sdk_root={sdk}"
        sdkmanager = str(tool)

        user_dir = self.android_user_dir()
        context.update(f"Setting up {user_dir / 'repositories.cfg'}")
        try:
            user_dir.mkdir(parents=True, exist_ok=True)
            (user_dir / "repositories.cfg").write_text(REPOSITORIES_CFG_HEADER, encoding="utf-8")
        except OSError as e:
            raise InstallError(f"Cannot write {user_dir / 'repositories.cfg'}: {e}") from e

        request_consent(self, context, ANDROID_TERMS_URL)

        context.update("Accepting Android SDK licenses")
        self._runner.execute(
            CommandSpec.blocking(sdkmanager, "--licenses", auto_answer="y"),
            context,
        )

        context.update("Installing platform-tools and emulator")
        self._runner.execute(
            CommandSpec.streamed(sdkmanager, sdk_root, "platform-tools", "emulator"),
            context,
        )

        context.update(f"Installing {self.settings.platform_package}")
        self._runner.execute(
            CommandSpec.streamed(sdkmanager, sdk_root, self.settings.platform_package),
            context,
        )

        context.update(f"Installing {system_image}")
        self._runner.execute(
            CommandSpec.streamed(sdkmanager, sdk_root, system_image),
            context,
        )
