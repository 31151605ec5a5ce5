"""Configuration manager — read/write TOML settings, resolve paths."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import pydantic
import tomli_w

from wp_manager.client.errors import ConfigurationError
from wp_manager.config.constants import (
    CONFIG_FILE,
    ENV_CONFIG_FILE,
    ENV_LOG_LEVEL,
    ENV_SITES_FILE,
    SITES_FILE,
)
from wp_manager.config.models import Settings

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib


class ConfigManager:
    """Manages settings on disk and resolves where sites are stored."""

    def __init__(self, config_path: Path | None = None) -> None:
        env_path = os.environ.get(ENV_CONFIG_FILE)
        self.config_path = config_path or (Path(env_path) if env_path else CONFIG_FILE)
        self._settings: Settings | None = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = self._load()
        return self._settings

    def _load(self) -> Settings:
        if not self.config_path.exists():
            return Settings()
        try:
            data = tomllib.loads(self.config_path.read_bytes().decode())
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Invalid config file {self.config_path}: {exc}") from exc
        try:
            return Settings(**data)
        except pydantic.ValidationError as exc:
            raise ConfigurationError(f"Invalid settings in {self.config_path}: {exc}") from exc

    def save(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        # Secure directory permissions (owner-only)
        os.chmod(self.config_path.parent, 0o700)
        # Only non-default values are written to keep the file small
        data: dict[str, Any] = self.settings.model_dump(exclude_defaults=True, exclude_none=True)
        temp = self.config_path.with_suffix(".tmp")
        fd = os.open(str(temp), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            os.write(fd, tomli_w.dumps(data).encode())
        finally:
            os.close(fd)
        temp.replace(self.config_path)

    def set_value(self, key: str, value: Any) -> Settings:
        """Validate and store one setting, returning the new settings."""
        if key not in Settings.model_fields:
            raise ConfigurationError(
                f"Unknown setting '{key}'. Known settings: {', '.join(Settings.model_fields)}"
            )
        try:
            updated = Settings.model_validate({**self.settings.model_dump(), key: value})
        except pydantic.ValidationError as exc:
            errors = "; ".join(e["msg"] for e in exc.errors())
            raise ConfigurationError(f"Invalid value for '{key}': {errors}") from exc
        self._settings = updated
        self.save()
        return updated

    def unset(self, key: str) -> Settings:
        """Restore one setting to its default."""
        if key not in Settings.model_fields:
            raise ConfigurationError(f"Unknown setting '{key}'")
        data = self.settings.model_dump()
        data.pop(key)
        self._settings = Settings.model_validate(data)
        self.save()
        return self._settings

    def resolve_sites_path(self) -> Path:
        """Resolve the sites store path.

        Precedence: env var > settings > default data dir.
        """
        env_path = os.environ.get(ENV_SITES_FILE)
        if env_path:
            return Path(env_path)
        if self.settings.sites_file:
            return Path(self.settings.sites_file).expanduser()
        return SITES_FILE

    def resolve_log_level(self, verbose: bool = False) -> str:
        if verbose:
            return "DEBUG"
        env_level = os.environ.get(ENV_LOG_LEVEL)
        if env_level:
            return env_level.upper()
        return self.settings.log_level
