"""
Host probe — read-only platform detection for installer applicability.
"""

from __future__ import annotations

import platform
from enum import Enum


class HostOS(str, Enum):
    MACOS = "macos"
    LINUX = "linux"
    WINDOWS = "windows"
    OTHER = "other"


_SYSTEM_MAP = {
    "Darwin": HostOS.MACOS,
    "Linux": HostOS.LINUX,
    "Windows": HostOS.WINDOWS,
}


class HostProbe:
    """Answers "which OS family is this host?"

    ``system`` overrides ``platform.system()``, mainly for tests.
    """

    def __init__(self, system: str | None = None):
        self._system = system

    def current(self) -> HostOS:
        return _SYSTEM_MAP.get(self._system or platform.system(), HostOS.OTHER)

    def is_host_os(self, kind: HostOS) -> bool:
        return self.current() == kind
