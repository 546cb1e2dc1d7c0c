"""
Tests for configuration — loading devsetup.yml and semantic checks.
"""

import textwrap
from pathlib import Path

import pytest

from devsetup.adapters.host import HostOS
from devsetup.core.config.loader import ConfigError, find_config_file, load_config
from devsetup.core.models.config import AndroidSettings, SetupConfig
from devsetup.core.use_cases.config_check import check_config


def _write(path: Path, content: str) -> Path:
    path.write_text(textwrap.dedent(content))
    return path


class TestDefaults:
    def test_setup_defaults(self):
        config = SetupConfig()
        assert config.auto_approve is False
        assert config.stop_on_first_failure is True
        assert config.installers is None
        assert config.audit.enabled is True

    def test_android_defaults(self):
        android = AndroidSettings()
        assert android.api_level == 29
        assert android.host_platforms == [HostOS.MACOS]
        assert android.platform_package == "platforms;android-29"
        assert android.system_image_package("x86_64") == "system-images;android-29;google_apis;x86_64"


class TestFindConfig:
    def test_finds_in_parent(self, tmp_path: Path):
        _write(tmp_path / "devsetup.yml", "auto_approve: true\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == (tmp_path / "devsetup.yml").resolve()

    def test_finds_in_start_dir(self, tmp_path: Path):
        _write(tmp_path / "devsetup.yml", "")
        assert find_config_file(tmp_path) == (tmp_path / "devsetup.yml").resolve()


class TestLoadConfig:
    def test_no_file_gives_defaults(self, tmp_path: Path):
        assert load_config(search=False) == SetupConfig()

    def test_full_file(self, tmp_path: Path):
        path = _write(tmp_path / "devsetup.yml", """\
            auto_approve: true
            stop_on_first_failure: false
            installers: [android-sdk]
            audit:
              enabled: false
            android:
              sdk_root: ~/sdk
              api_level: 33
              host_platforms: [macos, linux]
        """)
        config = load_config(path)
        assert config.auto_approve is True
        assert config.stop_on_first_failure is False
        assert config.installers == ["android-sdk"]
        assert config.audit.enabled is False
        assert config.android.api_level == 33
        assert config.android.host_platforms == [HostOS.MACOS, HostOS.LINUX]

    def test_empty_file(self, tmp_path: Path):
        path = _write(tmp_path / "devsetup.yml", "")
        assert load_config(path) == SetupConfig()

    def test_missing_explicit_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = _write(tmp_path / "devsetup.yml", "auto_approve: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = _write(tmp_path / "devsetup.yml", "- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_unknown_key_rejected(self, tmp_path: Path):
        path = _write(tmp_path / "devsetup.yml", "auto_aprove: true\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(path)

    def test_bad_platform_rejected(self, tmp_path: Path):
        path = _write(tmp_path / "devsetup.yml", "android:\n  host_platforms: [beos]\n")
        with pytest.raises(ConfigError, match="android.host_platforms.0"):
            load_config(path)


class TestConfigCheck:
    def test_valid(self, tmp_path: Path):
        path = _write(tmp_path / "devsetup.yml", "installers: [android-sdk]\n")
        result = check_config(path)
        assert result.valid
        assert result.errors == []

    def test_missing(self, tmp_path: Path):
        result = check_config(tmp_path / "missing.yml")
        assert not result.valid

    def test_unknown_installer_is_error(self, tmp_path: Path):
        path = _write(tmp_path / "devsetup.yml", "installers: [android-sdk, xcode]\n")
        result = check_config(path)
        assert not result.valid
        assert "xcode" in result.errors[0]

    def test_auto_approve_warns(self, tmp_path: Path):
        path = _write(tmp_path / "devsetup.yml", "auto_approve: true\n")
        result = check_config(path)
        assert result.valid
        assert any("auto_approve" in w for w in result.warnings)

    def test_to_dict(self, tmp_path: Path):
        path = _write(tmp_path / "devsetup.yml", "installers: [android-sdk]\n")
        d = check_config(path).to_dict()
        assert d["valid"] is True
        assert d["installers"] == ["android-sdk"]
