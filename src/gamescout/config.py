"""YAML configuration for discovery runs.

The configuration file is optional. Its location is, in order: the
``--config`` option, the ``GAMESCOUT_CONFIG`` environment variable, and
otherwise built-in defaults. Example::

    sources:
      steam: true
      programs: false      # generic uninstall-registry fallback
    workers: 4
    timeout: 120           # seconds; the catalog is partial on expiry
    limits:
      max_executables: 5000
      min_main_executable_mb: 50
      max_usage_files: 50
      max_usage_file_bytes: 1048576
      max_save_files: 10
      max_usage_entries: 20000
    units:
      seconds_above: 3600
      minutes_above: 60
    extra_steam_libraries:
      - D:/SteamLibrary

Unknown keys and values of the wrong type raise ``ConfigError``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from gamescout.discovery.environment import HostEnvironment
from gamescout.discovery.executables import ExecutableSelector
from gamescout.discovery.models import Source
from gamescout.exceptions import ConfigError
from gamescout.sources.base import ScanContext
from gamescout.usage.heuristics import UnitThresholds
from gamescout.usage.text_scan import ScanLimits

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "GAMESCOUT_CONFIG"

_BYTES_PER_MB = 1024 * 1024
_TOP_LEVEL_KEYS = {"sources", "workers", "timeout", "limits", "units", "extra_steam_libraries"}


@dataclass(frozen=True)
class Limits:
    """Bounds on per-install work.

    Attributes:
        max_executables: Executables enumerated per install directory.
        min_main_executable_mb: Size above which the largest executable
            is taken as the main one.
        max_usage_files: Launcher config files scanned for usage text.
        max_usage_file_bytes: Larger files are skipped by the text scan.
        max_save_files: Save and log files scanned per install.
        max_usage_entries: Directory entries a usage text scan visits
            before giving up on a tree.
    """

    max_executables: int = 5000
    min_main_executable_mb: int = 50
    max_usage_files: int = 50
    max_usage_file_bytes: int = 1024 * 1024
    max_save_files: int = 10
    max_usage_entries: int = 20000


@dataclass(frozen=True)
class GameScoutConfig:
    """Validated configuration.

    Attributes:
        sources: Per-source-key enable switches. Keys left out fall back
            to each adapter's default.
        workers: Thread pool size for adapter fan-out.
        timeout: Wall-clock limit for discovery in seconds, or ``None``.
        limits: Per-install work bounds.
        units: Thresholds for guessing the unit of playtime values.
        extra_steam_libraries: Additional Steam library folders.
        path: File the configuration was read from, if any.
    """

    sources: dict[str, bool] = field(default_factory=dict)
    workers: int = 4
    timeout: float | None = None
    limits: Limits = field(default_factory=Limits)
    units: UnitThresholds = field(default_factory=UnitThresholds)
    extra_steam_libraries: tuple[Path, ...] = ()
    path: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path | None = None) -> GameScoutConfig:
        """Validate a parsed YAML mapping.

        Raises:
            ConfigError: On unknown keys or values of the wrong type.
        """
        unknown = set(data) - _TOP_LEVEL_KEYS
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        timeout = data.get("timeout")
        if timeout is not None:
            timeout = _number(timeout, "timeout")
            if timeout <= 0:
                raise ConfigError("'timeout' must be positive")

        workers = _integer(data.get("workers", 4), "workers")
        if workers < 1:
            raise ConfigError("'workers' must be at least 1")

        libraries = data.get("extra_steam_libraries") or []
        if not isinstance(libraries, list) or not all(isinstance(p, str) for p in libraries):
            raise ConfigError("'extra_steam_libraries' must be a list of paths")

        return cls(
            sources=_parse_sources(data.get("sources")),
            workers=workers,
            timeout=timeout,
            limits=_parse_limits(data.get("limits")),
            units=_parse_units(data.get("units")),
            extra_steam_libraries=tuple(Path(p) for p in libraries),
            path=path,
        )

    def scan_context(self, env: HostEnvironment | None = None) -> ScanContext:
        """Build the ``ScanContext`` template for discovery runs."""
        return ScanContext(
            env=env or HostEnvironment.detect(),
            selector=ExecutableSelector(
                min_main_bytes=self.limits.min_main_executable_mb * _BYTES_PER_MB,
                max_files=self.limits.max_executables,
            ),
            thresholds=self.units,
            scan_limits=ScanLimits(
                max_config_files=self.limits.max_usage_files,
                max_save_files=self.limits.max_save_files,
                max_file_bytes=self.limits.max_usage_file_bytes,
                max_entries=self.limits.max_usage_entries,
            ),
            extra_steam_libraries=list(self.extra_steam_libraries),
        )


def _integer(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{name}' must be an integer, got {value!r}")
    return value


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{name}' must be a number, got {value!r}")
    return float(value)


def _section(value: Any, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be a mapping")
    return value


def _parse_sources(value: Any) -> dict[str, bool]:
    sources: dict[str, bool] = {}
    for key, enabled in _section(value, "sources").items():
        try:
            source = Source.from_key(str(key))
        except KeyError:
            raise ConfigError(f"Unknown source: {key}") from None
        if not isinstance(enabled, bool):
            raise ConfigError(f"'sources.{key}' must be true or false")
        sources[source.key] = enabled
    return sources


def _parse_limits(value: Any) -> Limits:
    section = _section(value, "limits")
    defaults = Limits()
    known = set(defaults.__dataclass_fields__)
    unknown = set(section) - known
    if unknown:
        raise ConfigError(f"Unknown limits: {', '.join(sorted(unknown))}")
    values = {}
    for name in known:
        number = _integer(section.get(name, getattr(defaults, name)), f"limits.{name}")
        if number < 0:
            raise ConfigError(f"'limits.{name}' must not be negative")
        values[name] = number
    return Limits(**values)


def _parse_units(value: Any) -> UnitThresholds:
    section = _section(value, "units")
    unknown = set(section) - {"seconds_above", "minutes_above"}
    if unknown:
        raise ConfigError(f"Unknown units: {', '.join(sorted(unknown))}")
    defaults = UnitThresholds()
    seconds = _number(section.get("seconds_above", defaults.seconds_above), "units.seconds_above")
    minutes = _number(section.get("minutes_above", defaults.minutes_above), "units.minutes_above")
    if minutes > seconds:
        raise ConfigError("'units.minutes_above' must not exceed 'units.seconds_above'")
    return UnitThresholds(seconds_above=seconds, minutes_above=minutes)


def resolve_config_path(path: Path | str | None = None) -> Path | None:
    """Return the explicit path, else ``$GAMESCOUT_CONFIG``, else ``None``."""
    if path is not None:
        return Path(path)
    env_value = os.environ.get(CONFIG_ENV_VAR)
    return Path(env_value) if env_value else None


def load_config(path: Path | str | None = None) -> GameScoutConfig:
    """Load and validate the configuration.

    Args:
        path: Explicit configuration file. When ``None`` the
            ``GAMESCOUT_CONFIG`` environment variable is consulted.

    Returns:
        The validated configuration, or defaults when no file is set.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or
            fails validation.
    """
    config_path = resolve_config_path(path)
    if config_path is None:
        return GameScoutConfig()

    try:
        raw = config_path.read_text(encoding="utf-8")
        data = yaml.safe_load(raw)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot load config {config_path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must contain a mapping")

    logger.debug("Loaded configuration from %s", config_path)
    return GameScoutConfig.from_dict(data, path=config_path)
