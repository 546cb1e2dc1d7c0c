"""
Android SDK discovery — read-only probes over an SDK installation.

Resolution order for the SDK root:
    explicit ``sdk_root``  >  ANDROID_SDK_ROOT  >  ANDROID_HOME  >  platform default

A package id such as ``platforms;android-29`` maps to the directory
``<sdk>/platforms/android-29``; the package counts as installed when
that directory holds the ``package.xml`` sdkmanager writes.
"""

from __future__ import annotations

import logging
import os
import platform
from pathlib import Path
from typing import Protocol

from devsetup.adapters.host import HostOS, HostProbe
from devsetup.core.errors import ProbeError

logger = logging.getLogger(__name__)

_SDK_ENV_VARS = ("ANDROID_SDK_ROOT", "ANDROID_HOME")

_ABI_BY_MACHINE = {
    "arm64": "arm64-v8a",
    "aarch64": "arm64-v8a",
    "x86_64": "x86_64",
    "amd64": "x86_64",
}


class SdkProbe(Protocol):
    """What installers need to know about the SDK."""

    def get_sdk_path(self) -> Path | None:
        ...

    def is_package_installed(self, package_id: str) -> bool:
        ...

    def emulator_abi(self) -> str:
        ...


class AndroidSdk:
    """Default SdkProbe backed by the local filesystem."""

    def __init__(
        self,
        sdk_root: str | Path | None = None,
        host: HostProbe | None = None,
        machine: str | None = None,
    ):
        self._sdk_root = Path(sdk_root).expanduser() if sdk_root else None
        self._host = host or HostProbe()
        self._machine = machine

    def get_sdk_path(self) -> Path | None:
        if self._sdk_root is not None:
            return self._sdk_root

        for var in _SDK_ENV_VARS:
            value = os.environ.get(var)
            if value:
                return Path(value).expanduser()

        try:
            home = Path.home()
        except RuntimeError:
            logger.debug("No home directory; cannot derive a default SDK path")
            return None

        if self._host.is_host_os(HostOS.MACOS):
            return home / "Library" / "Android" / "sdk"
        if self._host.is_host_os(HostOS.WINDOWS):
            return home / "AppData" / "Local" / "Android" / "Sdk"
        return home / "Android" / "Sdk"

    def package_path(self, package_id: str) -> Path | None:
        sdk = self.get_sdk_path()
        if sdk is None:
            return None
        return sdk.joinpath(*package_id.split(";"))

    def is_package_installed(self, package_id: str) -> bool:
        path = self.package_path(package_id)
        if path is None:
            return False
        return (path / "package.xml").is_file()

    def emulator_abi(self) -> str:
        """System image ABI matching the host CPU.

        Raises:
            ProbeError: The host architecture has no emulator image.
        """
        machine = (self._machine or platform.machine()).lower()
        abi = _ABI_BY_MACHINE.get(machine)
        if abi is None:
            raise ProbeError(f"No Android emulator system image for host architecture '{machine}'")
        return abi
