"""Configuration management module.

Loads component store settings from the ``[componentstore]`` table of a TOML
file. Every setting has a default, so a missing file is not an error.

Lookup order for the config file:
1. Explicit path argument
2. COMPONENTSTORE_CONFIG environment variable
3. ./componentstore.toml
"""

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import tomli

from componentstore.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "COMPONENTSTORE_CONFIG"
CONFIG_TABLE = "componentstore"


@dataclass
class StoreConfig:
    """Component store configuration data."""

    components_dir: str = "components"
    template_patterns: list[str] = field(default_factory=lambda: ["template.*"])
    hook_module: str = "server.py"
    max_reference_depth: int = 10
    max_concurrent_fetches: int = 10

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StoreConfig":
        """Create from dictionary, falling back to defaults for absent keys.

        Raises:
            ConfigError: If unknown keys are present or values are invalid
        """
        known = {f for f in cls.__dataclass_fields__}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        defaults = cls()
        config = cls(
            components_dir=data.get("components_dir", defaults.components_dir),
            template_patterns=list(data.get("template_patterns", defaults.template_patterns)),
            hook_module=data.get("hook_module", defaults.hook_module),
            max_reference_depth=data.get("max_reference_depth", defaults.max_reference_depth),
            max_concurrent_fetches=data.get(
                "max_concurrent_fetches", defaults.max_concurrent_fetches
            ),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Validate config values.

        Raises:
            ConfigError: If validation fails
        """
        if not isinstance(self.max_reference_depth, int) or self.max_reference_depth < 1:
            raise ConfigError(
                f"max_reference_depth must be a positive integer, got {self.max_reference_depth!r}"
            )

        if not isinstance(self.max_concurrent_fetches, int) or self.max_concurrent_fetches < 1:
            raise ConfigError(
                "max_concurrent_fetches must be a positive integer, "
                f"got {self.max_concurrent_fetches!r}"
            )

        if not self.template_patterns:
            raise ConfigError("template_patterns cannot be empty")

        if not all(isinstance(p, str) and p.strip() for p in self.template_patterns):
            raise ConfigError("template_patterns must be non-empty strings")

        if not self.hook_module or "/" in self.hook_module or "\\" in self.hook_module:
            raise ConfigError(f"Invalid hook_module: {self.hook_module!r}")


class ConfigManager:
    """Locate and load component store configuration."""

    DEFAULT_CONFIG_FILE = Path("componentstore.toml")

    @classmethod
    def get_config_path(cls, custom_path: str | Path | None = None) -> Path:
        """Get configuration file path.

        Args:
            custom_path: Optional explicit path

        Returns:
            Path to the configuration file (may not exist)
        """
        if custom_path:
            return Path(custom_path).expanduser()

        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path).expanduser()

        return cls.DEFAULT_CONFIG_FILE

    @classmethod
    def load_config(cls, custom_path: str | Path | None = None) -> StoreConfig:
        """Load configuration from file.

        Args:
            custom_path: Optional explicit path to a TOML file

        Returns:
            StoreConfig (defaults when the file does not exist)

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        config_path = cls.get_config_path(custom_path)

        if not config_path.exists():
            logger.debug(f"No config file at {config_path}, using defaults")
            return StoreConfig()

        try:
            with open(config_path, "rb") as f:
                data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigError(f"Failed to parse config file {config_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read config file {config_path}: {e}") from e

        table = data.get(CONFIG_TABLE, {})
        if not isinstance(table, dict):
            raise ConfigError(f"[{CONFIG_TABLE}] in {config_path} must be a table")

        logger.debug(f"Loaded config from {config_path}")
        return StoreConfig.from_dict(table)


__all__ = ["CONFIG_ENV_VAR", "ConfigManager", "StoreConfig"]
