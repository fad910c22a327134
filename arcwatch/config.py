"""Configuration file loader for arcwatch.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``arcwatch.toml``: settings under ``[arcwatch]`` table
- ``pyproject.toml``: settings under ``[tool.arcwatch]`` table

Discovery order:

1. Explicit path from ``--config`` or ``ARCWATCH_CONFIG``
2. ``arcwatch.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.arcwatch]`` section

Configuration precedence: defaults < config file < environment < CLI args.

Example (``arcwatch.toml``)::

    [arcwatch]
    include_indirect = true
    cache_ttl = 1800
    max_workers = 16
    request_delay = 0.25
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field

from arcwatch.exceptions import ConfigError
from arcwatch.utils.logger import get_logger
from arcwatch.constants import (
    DEFAULT_API_URL,
    DEFAULT_CACHE_CLEANUP_INTERVAL,
    DEFAULT_CACHE_TTL,
    DEFAULT_INCLUDE_INDIRECT,
    DEFAULT_MAX_WORKERS,
    DEFAULT_REQUEST_DELAY,
)

logger = get_logger("config")

CONFIG_FILENAME = "arcwatch.toml"
SECTION_NAME = "arcwatch"


@dataclass
class ArcwatchConfig:
    """Parsed and validated arcwatch configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        include_indirect: Report repositories referenced only by
            ``// indirect`` requirements.
        cache_ttl: Seconds a repository status stays cached.
        cache_cleanup_interval: Seconds between sweeps of expired entries.
        max_workers: Lookup thread pool size, ``None`` for the host default.
        api_url: GitHub REST API root.
        request_delay: Minimum seconds between API requests, 0 for none.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    include_indirect: bool = DEFAULT_INCLUDE_INDIRECT
    cache_ttl: int = DEFAULT_CACHE_TTL
    cache_cleanup_interval: int = DEFAULT_CACHE_CLEANUP_INTERVAL
    max_workers: Optional[int] = DEFAULT_MAX_WORKERS
    api_url: str = DEFAULT_API_URL
    request_delay: float = DEFAULT_REQUEST_DELAY

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging."""
        return {
            "include_indirect": self.include_indirect,
            "cache_ttl": self.cache_ttl,
            "cache_cleanup_interval": self.cache_cleanup_interval,
            "max_workers": self.max_workers,
            "api_url": self.api_url,
            "request_delay": self.request_delay,
        }


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

    arcwatch_toml = cwd / CONFIG_FILENAME
    if arcwatch_toml.is_file():
        logger.debug("Found %s: %s", CONFIG_FILENAME, arcwatch_toml)
        return arcwatch_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_section(pyproject_toml):
        logger.debug("Found [tool.arcwatch] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Return True if *path* has a ``[tool.arcwatch]`` table.

    Unreadable or invalid files count as having no section.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    tool = raw.get("tool", {})
    return isinstance(tool, dict) and SECTION_NAME in tool


def load_config(config_path: Optional[Path] = None) -> ArcwatchConfig:
    """Load and validate arcwatch configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`ArcwatchConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return ArcwatchConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get(SECTION_NAME, {})
    else:
        section = raw.get(SECTION_NAME, {})

    if not section:
        logger.debug("Config file found but no arcwatch section, using defaults")
        return ArcwatchConfig(source_path=resolved)

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


def _require_positive_int(value: Any, option: str, config_path: str) -> int:
    # bool is a subclass of int; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(
            f"{option} must be an integer, got {type(value).__name__}",
            config_path=config_path,
            option=option,
        )
    if value <= 0:
        raise ConfigError(
            f"{option} must be positive, got {value}",
            config_path=config_path,
            option=option,
        )
    return value


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> ArcwatchConfig:
    """Validate an ``[arcwatch]`` / ``[tool.arcwatch]`` table.

    Raises:
        ConfigError: Unknown keys or values of the wrong type or range.
    """
    config = ArcwatchConfig()

    known = set(config.to_log_dict())
    unknown = set(section) - known
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    if "include_indirect" in section:
        val = section["include_indirect"]
        if not isinstance(val, bool):
            raise ConfigError(
                f"include_indirect must be a boolean, got {type(val).__name__}",
                config_path=config_path,
                option="include_indirect",
            )
        config.include_indirect = val

    for option in ("cache_ttl", "cache_cleanup_interval", "max_workers"):
        if option in section:
            setattr(
                config,
                option,
                _require_positive_int(section[option], option, config_path),
            )

    if "api_url" in section:
        val = section["api_url"]
        if not isinstance(val, str) or not val.strip():
            raise ConfigError(
                "api_url must be a non-empty string",
                config_path=config_path,
                option="api_url",
            )
        config.api_url = val.strip()

    if "request_delay" in section:
        val = section["request_delay"]
        if isinstance(val, bool) or not isinstance(val, (int, float)):
            raise ConfigError(
                f"request_delay must be a number, got {type(val).__name__}",
                config_path=config_path,
                option="request_delay",
            )
        if val < 0:
            raise ConfigError(
                f"request_delay must not be negative, got {val}",
                config_path=config_path,
                option="request_delay",
            )
        config.request_delay = float(val)

    return config
