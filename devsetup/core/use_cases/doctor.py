"""
Doctor use case — report installer state without changing anything.

Only the read-only half of the installer contract is used here:
``is_applicable`` and ``is_installed``.  ``run`` is never called.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from devsetup.adapters.android import SdkProbe
from devsetup.adapters.host import HostProbe
from devsetup.core.config.loader import ConfigError, load_config
from devsetup.core.errors import InstallError
from devsetup.core.installers import UnknownInstallerError, build_installers
from devsetup.core.installers.base import InstallerTask
from devsetup.core.use_cases.setup_dev import resolve_runner

logger = logging.getLogger(__name__)


@dataclass
class InstallerStatus:
    name: str
    description: str
    applicable: bool
    installed: bool | None = None   # None = not probed or probe failed
    error: str | None = None
    mitigation: str | None = None

    @property
    def needs_install(self) -> bool:
        return self.applicable and self.installed is False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "applicable": self.applicable,
            "installed": self.installed,
            "needs_install": self.needs_install,
            "error": self.error,
            "mitigation": self.mitigation,
        }


@dataclass
class DoctorResult:
    installers: list[InstallerStatus] = field(default_factory=list)
    error: str | None = None

    @property
    def healthy(self) -> bool:
        return self.error is None and all(
            s.installed or not s.applicable for s in self.installers
        )

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "healthy": self.healthy,
            "installers": [s.to_dict() for s in self.installers],
        }


def run_doctor(
    config_path: Path | None = None,
    names: list[str] | None = None,
    sdk: SdkProbe | None = None,
    host: HostProbe | None = None,
) -> DoctorResult:
    """Probe every selected installer."""
    result = DoctorResult()

    try:
        config = load_config(config_path)
        tasks = build_installers(config, resolve_runner(mock_mode=True), names=names, sdk=sdk, host=host)
    except (ConfigError, UnknownInstallerError) as e:
        result.error = str(e)
        return result

    for task in tasks:
        result.installers.append(_status_for(task))

    return result


def _status_for(task: InstallerTask) -> InstallerStatus:
    """Read-only status for one task; errors end up on the status."""
    name, description = task.name, task.__class__.__name__
    try:
        description = task.describe()
        status = InstallerStatus(name=name, description=description, applicable=task.is_applicable())
    except Exception as e:
        logger.warning("%s: applicability check raised: %s", description, e)
        status = InstallerStatus(name=name, description=description, applicable=True, error=str(e))

    if not status.applicable:
        return status

    if status.error is None:
        try:
            status.installed = task.is_installed()
        except InstallError as e:
            status.error = str(e)
        except Exception as e:
            logger.warning("%s: install check raised: %s", description, e)
            status.error = str(e)

    if not status.installed:
        try:
            status.mitigation = task.mitigation_message()
        except Exception:
            logger.exception("mitigation_message() raised for %s", description)
    return status
