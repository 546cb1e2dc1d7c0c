"""
Installer registry — the ordered set of installers devsetup knows.

Order matters: later installers rely on filesystem state earlier ones
establish (the emulator device needs the SDK packages).
"""

from __future__ import annotations

from devsetup.adapters.android import SdkProbe
from devsetup.adapters.base import CommandRunner
from devsetup.adapters.host import HostProbe
from devsetup.core.installers.android import (
    AndroidEmulatorDeviceInstaller,
    AndroidSDKManagerInstaller,
)
from devsetup.core.installers.base import InstallerTask, installer_mitigation_message
from devsetup.core.models.config import SetupConfig

INSTALLER_ORDER = ("android-sdk", "android-emulator")


class UnknownInstallerError(ValueError):
    """Raised when a requested installer name is not registered."""


def build_installers(
    config: SetupConfig,
    runner: CommandRunner,
    names: list[str] | None = None,
    sdk: SdkProbe | None = None,
    host: HostProbe | None = None,
) -> list[InstallerTask]:
    """Instantiate installers in registry order.

    Args:
        config: Loaded setup configuration.
        runner: Command runner every installer issues commands through.
        names: Restrict to these installer names (None = config, then all).
        sdk: Optional SDK probe override.
        host: Optional host probe override.

    Raises:
        UnknownInstallerError: A requested name is not registered.
    """
    available: dict[str, InstallerTask] = {
        "android-sdk": AndroidSDKManagerInstaller(runner, config.android, sdk=sdk, host=host),
        "android-emulator": AndroidEmulatorDeviceInstaller(runner, config.android, sdk=sdk, host=host),
    }

    wanted = names or config.installers
    if not wanted:
        return [available[n] for n in INSTALLER_ORDER]

    unknown = [n for n in wanted if n not in available]
    if unknown:
        raise UnknownInstallerError(
            f"Unknown installer(s): {', '.join(unknown)}. "
            f"Available: {', '.join(INSTALLER_ORDER)}"
        )

    # Registry order wins over request order
    return [available[n] for n in INSTALLER_ORDER if n in wanted]


__all__ = [
    "INSTALLER_ORDER",
    "InstallerTask",
    "UnknownInstallerError",
    "build_installers",
    "installer_mitigation_message",
]
