"""Configuration management for privfile."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from privfile.exceptions import (
    ConfigParseError,
    ConfigValidationError,
)


def get_default_config_dir() -> Path:
    """Get the default configuration directory."""
    return Path.home() / ".config" / "privfile"


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return get_default_config_dir() / "config.toml"


def get_default_credentials_path() -> Path:
    """Get the default credential cache path."""
    return get_default_config_dir() / "credentials.json"


DEFAULT_CONFIG_TEXT = """\
# privfile configuration

[paths]
# Private credential cache, created owner-only on first use
credentials_file = "~/.config/privfile/credentials.json"

[display]
colored_output = true

[security]
# Print a warning when a file could not be restricted to its owner
warn_on_degraded = true
"""


@dataclass
class Config:
    """Application configuration.

    Attributes:
        credentials_file: Path to the private credential cache.
        colored_output: Whether to use colored terminal output.
        warn_on_degraded: Whether the CLI prints a warning for files that
            could not be restricted to their owner.
        config_path: Path where config was loaded from (None if defaults).
    """

    credentials_file: Path = field(default_factory=get_default_credentials_path)
    colored_output: bool = True
    warn_on_degraded: bool = True
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.
        """
        warnings: list[str] = []

        self.credentials_file = self.credentials_file.expanduser()

        if self.credentials_file.exists() and not self.credentials_file.is_file():
            warnings.append(f"Credentials path is not a regular file: {self.credentials_file}")

        return warnings


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        # Defaults; config_path stays None to mark that no file was read.
        config = Config()
        return config, warnings + config.validate()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    return config, warnings + config.validate()


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [paths] section
    paths = data.get("paths", {})
    if "credentials_file" in paths:
        value = paths["credentials_file"]
        if not isinstance(value, str):
            raise ConfigValidationError("paths.credentials_file", value, "must be a string path")
        config.credentials_file = Path(value)

    # Parse [display] section
    display = data.get("display", {})
    if "colored_output" in display:
        value = display["colored_output"]
        if not isinstance(value, bool):
            raise ConfigValidationError("display.colored_output", value, "must be a boolean")
        config.colored_output = value

    # Parse [security] section
    security = data.get("security", {})
    if "warn_on_degraded" in security:
        value = security["warn_on_degraded"]
        if not isinstance(value, bool):
            raise ConfigValidationError("security.warn_on_degraded", value, "must be a boolean")
        config.warn_on_degraded = value

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to a private file.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.
    """
    from privfile.utils.fileops import secure_atomic_write

    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()

    data: dict[str, Any] = {
        "paths": {
            "credentials_file": str(config.credentials_file),
        },
        "display": {
            "colored_output": config.colored_output,
        },
    }

    if not config.warn_on_degraded:
        data["security"] = {"warn_on_degraded": False}

    secure_atomic_write(config_path, tomli_w.dumps(data))
