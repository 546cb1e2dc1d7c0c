"""
Setup configuration model — loaded from devsetup.yml.

Every key is optional; an absent file means all defaults.  CLI flags
override values loaded here.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from devsetup.adapters.host import HostOS


class AuditSettings(BaseModel):
    """Where (and whether) run history is recorded."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    path: str | None = None   # default: ~/.devsetup/audit.ndjson


class AndroidSettings(BaseModel):
    """Knobs for the Android installers."""

    model_config = ConfigDict(extra="forbid")

    sdk_root: str | None = None
    user_home: str | None = None        # default: $ANDROID_USER_HOME or ~/.android
    api_level: int = Field(default=29, ge=1)
    image_tag: str = "google_apis"
    avd_name: str = "pytorch_live"
    host_platforms: list[HostOS] = Field(default_factory=lambda: [HostOS.MACOS])

    @property
    def platform_package(self) -> str:
        return f"platforms;android-{self.api_level}"

    def system_image_package(self, abi: str) -> str:
        return f"system-images;android-{self.api_level};{self.image_tag};{abi}"


class SetupConfig(BaseModel):
    """Root configuration for a devsetup run."""

    model_config = ConfigDict(extra="forbid")

    version: int = 1

    auto_approve: bool = False
    stop_on_first_failure: bool = True
    installers: list[str] | None = None   # None = every registered installer

    audit: AuditSettings = Field(default_factory=AuditSettings)
    android: AndroidSettings = Field(default_factory=AndroidSettings)
