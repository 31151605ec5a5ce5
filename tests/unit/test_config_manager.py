"""Tests for ConfigManager."""

from __future__ import annotations

from pathlib import Path

import pytest

from wp_manager.client.errors import ConfigurationError
from wp_manager.config.constants import ENV_CONFIG_FILE, ENV_LOG_LEVEL, ENV_SITES_FILE, SITES_FILE
from wp_manager.config.manager import ConfigManager


@pytest.fixture
def manager(tmp_path: Path) -> ConfigManager:
    return ConfigManager(config_path=tmp_path / "conf" / "config.toml")


class TestConfigManager:
    def test_defaults_without_file(self, manager):
        settings = manager.settings
        assert settings.default_format == "table"
        assert settings.refresh_concurrency == 1
        assert settings.auto_sync is True

    def test_path_from_env(self, tmp_path):
        assert ConfigManager().config_path == tmp_path / "config.toml"

    def test_set_value_coerces_and_persists(self, manager):
        manager.set_value("refresh_concurrency", "4")
        manager.set_value("auto_sync", "false")
        reloaded = ConfigManager(config_path=manager.config_path)
        assert reloaded.settings.refresh_concurrency == 4
        assert reloaded.settings.auto_sync is False

    def test_only_changed_values_written(self, manager):
        manager.set_value("timeout", "12.5")
        text = manager.config_path.read_text()
        assert "timeout = 12.5" in text
        assert "default_format" not in text

    def test_unknown_key(self, manager):
        with pytest.raises(ConfigurationError, match="Unknown setting"):
            manager.set_value("colour", "red")

    def test_invalid_value(self, manager):
        with pytest.raises(ConfigurationError, match="timeout"):
            manager.set_value("timeout", "0")
        with pytest.raises(ConfigurationError):
            manager.set_value("default_format", "xml")

    def test_unset(self, manager):
        manager.set_value("default_format", "json")
        settings = manager.unset("default_format")
        assert settings.default_format == "table"

    def test_corrupt_file(self, manager):
        manager.config_path.parent.mkdir(parents=True)
        manager.config_path.write_text("timeout = [")
        with pytest.raises(ConfigurationError, match="Invalid config file"):
            manager.settings

    def test_unknown_key_in_file(self, manager):
        manager.config_path.parent.mkdir(parents=True)
        manager.config_path.write_text('colour = "red"\n')
        with pytest.raises(ConfigurationError, match="Invalid settings"):
            manager.settings

    def test_sites_path_precedence(self, manager, tmp_path, monkeypatch):
        assert manager.resolve_sites_path() == tmp_path / "sites.toml"
        monkeypatch.delenv(ENV_SITES_FILE)
        assert manager.resolve_sites_path() == SITES_FILE
        manager.set_value("sites_file", str(tmp_path / "other.toml"))
        assert manager.resolve_sites_path() == tmp_path / "other.toml"

    def test_log_level_precedence(self, manager, monkeypatch):
        assert manager.resolve_log_level() == "WARNING"
        manager.set_value("log_level", "info")
        assert manager.resolve_log_level() == "INFO"
        monkeypatch.setenv(ENV_LOG_LEVEL, "error")
        assert manager.resolve_log_level() == "ERROR"
        assert manager.resolve_log_level(verbose=True) == "DEBUG"

    def test_explicit_path_beats_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv(ENV_CONFIG_FILE, str(tmp_path / "env.toml"))
        explicit = tmp_path / "explicit.toml"
        assert ConfigManager(config_path=explicit).config_path == explicit
