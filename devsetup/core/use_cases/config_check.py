"""
Config check use case — validate devsetup.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from devsetup.core.config.loader import ConfigError, find_config_file, load_config
from devsetup.core.installers import INSTALLER_ORDER
from devsetup.core.models.config import SetupConfig


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: SetupConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "installers": (self.config.installers if self.config else None),
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate configuration and report issues.

    Args:
        config_path: Optional explicit path to devsetup.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        result.errors.append("No devsetup.yml found.")
        return result
    result.config_path = config_path

    try:
        config = load_config(config_path)
        result.config = config
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    # Semantic checks
    if config.installers is not None:
        unknown = [n for n in config.installers if n not in INSTALLER_ORDER]
        if unknown:
            result.errors.append(f"Unknown installers: {', '.join(unknown)}")

        dupes = {n for n in config.installers if config.installers.count(n) > 1}
        if dupes:
            result.warnings.append(f"Installers listed more than once: {', '.join(sorted(dupes))}")

        if not config.installers:
            result.warnings.append("Installer list is empty; every installer will run.")

    if config.auto_approve:
        result.warnings.append(
            "auto_approve is on: third-party license terms will be accepted without asking."
        )

    if not config.android.host_platforms:
        result.warnings.append("android.host_platforms is empty; Android installers never apply.")

    result.valid = len(result.errors) == 0
    return result
