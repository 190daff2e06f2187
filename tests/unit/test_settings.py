"""
Test settings loading
"""
from pathlib import Path

import pytest
from pydantic import ValidationError

from wgnet.config.settings import (
    DEFAULT_CONFIG_PATH, DEFAULT_WIREGUARD_DIR, RunOptions, WgnetSettings
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for variable in ("CONFIG_PATH", "WIREGUARD_DIR", "LOG_FILE", "DRY_RUN", "VERBOSE", "SUBNET_PREFIX"):
        monkeypatch.delenv(f"WGNET_{variable}", raising=False)


class TestWgnetSettings:

    def test_defaults(self):
        settings = WgnetSettings()

        assert settings.config_path == DEFAULT_CONFIG_PATH
        assert settings.wireguard_dir == DEFAULT_WIREGUARD_DIR
        assert settings.dry_run is False
        assert settings.subnet_prefix == 24
        assert settings.iptables_cmd == "iptables"
        assert settings.wg_quick_cmd == "wg-quick"

    def test_environment_overrides(self, monkeypatch, temp_dir):
        monkeypatch.setenv("WGNET_CONFIG_PATH", str(temp_dir))
        monkeypatch.setenv("WGNET_DRY_RUN", "1")
        monkeypatch.setenv("WGNET_SUBNET_PREFIX", "16")

        settings = WgnetSettings()

        assert settings.config_path == temp_dir
        assert settings.dry_run is True
        assert settings.subnet_prefix == 16

    def test_relative_paths_are_resolved(self):
        settings = WgnetSettings(config_path=Path("configs"))

        assert settings.config_path.is_absolute()

    def test_invalid_subnet_prefix(self):
        with pytest.raises(ValidationError):
            WgnetSettings(subnet_prefix=33)

    def test_run_options(self):
        settings = WgnetSettings(dry_run=True, verbose=True)

        assert settings.run_options() == RunOptions(dry_run=True, verbose=True)
