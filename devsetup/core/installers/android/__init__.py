"""Android SDK installers."""

from devsetup.core.installers.android.command_line_tools import AndroidCommandLineTools
from devsetup.core.installers.android.emulator_device import AndroidEmulatorDeviceInstaller
from devsetup.core.installers.android.sdk_manager import AndroidSDKManagerInstaller

__all__ = [
    "AndroidCommandLineTools",
    "AndroidEmulatorDeviceInstaller",
    "AndroidSDKManagerInstaller",
]
