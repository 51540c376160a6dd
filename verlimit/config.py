"""Configuration file loader for verlimit.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``verlimit.toml``: settings under ``[verlimit]`` table
- ``pyproject.toml``: settings under ``[tool.verlimit]`` table

Discovery order:

1. Explicit path from ``--config`` or ``VERLIMIT_CONFIG``
2. ``verlimit.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.verlimit]`` section

Configuration precedence: defaults < config file < CLI args.

Example (``verlimit.toml``)::

    [verlimit]
    include_dev_dependencies = false
    include_lockfile = true
    create_backup = true
"""

from __future__ import annotations


import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field

from verlimit.exceptions import ConfigError
from verlimit.utils.logger import get_logger
from verlimit.constants import (
    DEFAULT_CREATE_BACKUP,
    DEFAULT_INCLUDE_DEV_DEPENDENCIES,
    DEFAULT_INCLUDE_LOCKFILE,
)

logger = get_logger("config")

#: Name of the dedicated configuration file.
CONFIG_FILENAME = "verlimit.toml"

#: Boolean options accepted in the configuration section.
_BOOLEAN_OPTIONS = (
    "include_dev_dependencies",
    "include_lockfile",
    "create_backup",
)


@dataclass
class VerlimitConfig:
    """Parsed and validated verlimit configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        include_dev_dependencies: Consider ``devDependencies`` when
            collecting constraints.
        include_lockfile: Scan ``package-lock.json`` when present.
        create_backup: Back up ``package.json`` before ``verlimit update``
            rewrites it.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    include_dev_dependencies: bool = DEFAULT_INCLUDE_DEV_DEPENDENCIES
    include_lockfile: bool = DEFAULT_INCLUDE_LOCKFILE
    create_backup: bool = DEFAULT_CREATE_BACKUP

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration options (without metadata) for debug logging."""
        return {name: getattr(self, name) for name in _BOOLEAN_OPTIONS}


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    verlimit_toml = cwd / CONFIG_FILENAME
    if verlimit_toml.is_file():
        logger.debug("Found %s: %s", CONFIG_FILENAME, verlimit_toml)
        return verlimit_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_verlimit_section(pyproject_toml):
        logger.debug("Found [tool.verlimit] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_verlimit_section(path: Path) -> bool:
    """Check if pyproject.toml contains a [tool.verlimit] section.

    Parse errors count as "no section" so that an unrelated broken
    pyproject.toml does not stop the tool.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    tool = raw.get("tool", {})
    return isinstance(tool, dict) and "verlimit" in tool


def load_config(config_path: Optional[Path] = None) -> VerlimitConfig:
    """Load and validate verlimit configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`VerlimitConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return VerlimitConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("verlimit", {})
    else:
        section = raw.get("verlimit", {})

    if not section:
        logger.debug("Config file found but no verlimit section, using defaults")
        return VerlimitConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> VerlimitConfig:
    """Parse and validate a ``[verlimit]`` or ``[tool.verlimit]`` table.

    Raises:
        ConfigError: Unknown keys or non-boolean values.
    """
    if not isinstance(section, dict):
        raise ConfigError(
            "verlimit configuration must be a table",
            config_path=config_path,
        )

    unknown = set(section.keys()) - set(_BOOLEAN_OPTIONS)
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    config = VerlimitConfig()

    for option in _BOOLEAN_OPTIONS:
        if option not in section:
            continue
        val = section[option]
        if not isinstance(val, bool):
            raise ConfigError(
                f"{option} must be a boolean, got {type(val).__name__}",
                config_path=config_path,
                option=option,
            )
        setattr(config, option, val)

    return config
