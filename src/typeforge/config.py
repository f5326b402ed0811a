"""Factory configuration.

Settings can be given in code, or loaded from a ``typeforge.toml`` file or
the ``[tool.typeforge]`` table of ``pyproject.toml``.

Usage:
    from typeforge.config import find_config_file, load_config

    config_path = find_config_file(Path.cwd())
    config = load_config(config_path) if config_path else FactoryConfig()
    factory = TypeFactory.from_config(config)

Example typeforge.toml:
    namespace = "app.generated"
    use_guid = false

    [logging]
    level = "DEBUG"
    format = "json"
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from typeforge.errors import ConfigError
from typeforge.logging import LogFormat, configure_logging

DEFAULT_NAMESPACE = "typeforge.generated"

# Config file names to search for (in order of preference)
CONFIG_FILE_NAMES = ["typeforge.toml", "pyproject.toml"]

_LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass
class FactoryConfig:
    """Settings of a TypeFactory."""

    namespace: str = DEFAULT_NAMESPACE
    use_guid: bool = True
    log_level: int = logging.WARNING
    log_format: LogFormat = LogFormat.TEXT

    def apply_logging(self) -> None:
        """Configure the typeforge loggers from these settings."""
        configure_logging(self.log_level, self.log_format)


def find_config_file(
    start_dir: Path,
    config_names: list[str] | None = None,
) -> Path | None:
    """Find a config file by searching up the directory hierarchy.

    Args:
        start_dir: Directory to start searching from
        config_names: Config file names to search for (default: CONFIG_FILE_NAMES)

    Returns:
        Path to the config file, or None if not found
    """
    config_names = config_names or CONFIG_FILE_NAMES
    current = start_dir.resolve()

    while True:
        for name in config_names:
            config_path = current / name
            if config_path.exists():
                # A pyproject.toml only counts with a [tool.typeforge] table
                if name == "pyproject.toml":
                    if _has_typeforge_section(config_path):
                        return config_path
                else:
                    return config_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _has_typeforge_section(pyproject_path: Path) -> bool:
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return False
    return "typeforge" in data.get("tool", {})


def load_config(path: Path) -> FactoryConfig:
    """Load a FactoryConfig from a TOML file.

    Supports typeforge.toml (full file) and pyproject.toml (under
    [tool.typeforge]).

    Raises:
        ConfigError: If the file is missing, malformed or holds invalid values
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}", file=str(path))

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}", file=str(path)) from e

    if path.name == "pyproject.toml":
        if "typeforge" not in data.get("tool", {}):
            raise ConfigError(f"No [tool.typeforge] section in {path}", file=str(path))
        data = data["tool"]["typeforge"]

    return _build_config_from_dict(data, str(path))


def _build_config_from_dict(data: dict[str, Any], source: str | None = None) -> FactoryConfig:
    """Build a FactoryConfig from a dictionary of settings."""
    config = FactoryConfig()

    if "namespace" in data:
        namespace = data["namespace"]
        if not isinstance(namespace, str) or not namespace:
            raise ConfigError("namespace must be a non-empty string", file=source)
        config.namespace = namespace

    if "use_guid" in data:
        if not isinstance(data["use_guid"], bool):
            raise ConfigError("use_guid must be a boolean", file=source)
        config.use_guid = data["use_guid"]

    if "logging" in data:
        log = data["logging"]
        if not isinstance(log, dict):
            raise ConfigError("logging must be a table", file=source)
        if "level" in log:
            level = str(log["level"]).upper()
            if level not in _LOG_LEVELS:
                raise ConfigError(
                    f"Unknown log level: {log['level']}", file=source, context={"level": level}
                )
            config.log_level = _LOG_LEVELS[level]
        if "format" in log:
            try:
                config.log_format = LogFormat(log["format"])
            except ValueError as e:
                raise ConfigError(
                    f"Unknown log format: {log['format']}", file=source
                ) from e

    return config


__all__ = [
    "CONFIG_FILE_NAMES",
    "DEFAULT_NAMESPACE",
    "FactoryConfig",
    "find_config_file",
    "load_config",
]
