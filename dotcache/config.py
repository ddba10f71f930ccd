"""Configuration loading for dotcache."""

import os
from pathlib import Path
from typing import Any

import msgspec
import yaml

from dotcache.exceptions import ConfigurationError

BACKEND_NAMES = ("filesystem", "sqlite", "userdata", "memory", "null")
DEFAULT_BACKENDS = ("filesystem", "sqlite", "userdata")


def default_data_dir() -> Path:
    """Default storage location under XDG data home."""
    xdg_data_home = Path(
        os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
    )
    return xdg_data_home / "dotcache"


class StorageSettings(msgspec.Struct, frozen=True, kw_only=True):
    """Where and how cache documents are persisted."""

    data_dir: str = ""
    domain: str = "localhost"
    backends: list[str] = msgspec.field(
        default_factory=lambda: list(DEFAULT_BACKENDS)
    )

    def __post_init__(self):
        unknown = [name for name in self.backends if name not in BACKEND_NAMES]
        if unknown:
            raise ValueError(f"Unknown backends: {', '.join(unknown)}")
        if not self.domain:
            raise ValueError("domain must not be empty")

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser() if self.data_dir else default_data_dir()


class Config:
    """Configuration file handling."""

    @staticmethod
    def from_file(path: Path) -> dict[str, Any]:
        """Load configuration from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Error reading config file: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        return data

    @staticmethod
    def get_config_paths() -> list[Path]:
        """Get the default configuration file paths to check."""
        paths = []

        xdg_config_home = Path(
            os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        )
        paths.append(xdg_config_home / "dotcache" / "config.yaml")

        # Project config
        paths.append(Path(".dotcache.yaml"))
        paths.append(Path("dotcache.yaml"))

        return paths

    @staticmethod
    def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
        """Merge multiple configuration dictionaries."""
        result: dict[str, Any] = {}
        for config in configs:
            result = _deep_merge(result, config)
        return result


def load_config(extra: dict[str, Any] | None = None) -> dict[str, Any]:
    """Load configuration from files, then environment, then ``extra``."""
    config: dict[str, Any] = {}

    # Last path wins for conflicting keys
    for path in Config.get_config_paths():
        if path.exists():
            config = Config.merge_configs(config, Config.from_file(path))

    env_overrides: dict[str, Any] = {}
    if data_dir := os.environ.get("DOTCACHE_DATA_DIR"):
        env_overrides["data_dir"] = data_dir
    if domain := os.environ.get("DOTCACHE_DOMAIN"):
        env_overrides["domain"] = domain
    if backends := os.environ.get("DOTCACHE_BACKENDS"):
        env_overrides["backends"] = [
            name.strip() for name in backends.split(",") if name.strip()
        ]

    return Config.merge_configs(config, env_overrides, extra or {})


def load_settings(extra: dict[str, Any] | None = None) -> StorageSettings:
    """Load and validate storage settings."""
    config = load_config(extra)
    fields = {k: v for k, v in config.items() if k in StorageSettings.__struct_fields__}
    try:
        return msgspec.convert(fields, StorageSettings)
    except (msgspec.ValidationError, ValueError) as e:
        raise ConfigurationError(f"Invalid storage configuration: {e}") from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
