"""Outward operations: discover, get info, launch.

``GameDiscoveryService`` is the boundary between the discovery core and
any transport (the CLI, a tool server, a script). Its three dict-returning
operations never raise: every failure is reported as ``{"error": ...}``.
The raising variants ``find_games()`` and ``launch()`` are used by
callers that map errors to exit codes themselves.

Output Shapes:
    ``discover_games()``::

        {"total_games": 2,
         "games_by_source": {"Steam": 1, "GOG": 1},
         "games": [{"name": ..., "source": ..., "install_path": ...,
                    "executable": ..., "install_date": "2024-01-31",
                    "size_mb": 1024, "last_active": "2024-03-01",
                    "usage_hours": 12.5}, ...]}

    ``get_game_info(name)``: a list of the same game objects with
    ``YYYY-MM-DD HH:MM:SS`` date-times.

    ``launch_game(name)``::

        {"success": true, "message": "Launched 'X' from Steam",
         "executable": "C:\\\\Games\\\\X\\\\x.exe"}
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from gamescout.config import GameScoutConfig
from gamescout.discovery.aggregator import Aggregator
from gamescout.discovery.environment import HostEnvironment
from gamescout.discovery.models import Catalog, InstallRecord
from gamescout.exceptions import GameScoutError, NoMatchError
from gamescout.sources.registry import build_adapters

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _format_time(value: datetime | None, fmt: str) -> str | None:
    return value.strftime(fmt) if value is not None else None


def record_to_dict(record: InstallRecord, date_format: str = DATE_FORMAT) -> dict[str, Any]:
    """Serialize one record to its JSON-ready form."""
    hours = record.usage_hours
    return {
        "name": record.name,
        "source": record.source.value,
        "install_path": str(record.install_path),
        "executable": str(record.executable) if record.executable is not None else None,
        "install_date": _format_time(record.install_date, date_format),
        "size_mb": record.size_mb,
        "last_active": _format_time(record.last_active, date_format),
        "usage_hours": round(hours, 2) if hours is not None else None,
    }


def catalog_to_dict(catalog: Catalog) -> dict[str, Any]:
    """Serialize a catalog to the ``discover_games`` shape."""
    result: dict[str, Any] = {
        "total_games": len(catalog),
        "games_by_source": dict(catalog.counts_by_source),
        "games": [record_to_dict(record) for record in catalog],
    }
    if catalog.cancelled:
        result["partial"] = True
    return result


class GameDiscoveryService:
    """Discover, look up and launch installed games.

    Usage::

        service = GameDiscoveryService.from_config(load_config())
        print(service.discover_games()["total_games"])
        service.launch_game("Hades")

    Attributes:
        aggregator: The discovery engine. Every call runs a fresh scan.
        timeout: Wall-clock limit passed to each discovery, or ``None``.
    """

    def __init__(self, aggregator: Aggregator, timeout: float | None = None) -> None:
        self.aggregator = aggregator
        self.timeout = timeout

    @classmethod
    def from_config(
        cls, config: GameScoutConfig | None = None, env: HostEnvironment | None = None,
    ) -> GameDiscoveryService:
        """Build a service wired with the configured adapters."""
        config = config or GameScoutConfig()
        aggregator = Aggregator(
            build_adapters(config.sources),
            context=config.scan_context(env),
            workers=config.workers,
        )
        return cls(aggregator, timeout=config.timeout)

    def catalog(self) -> Catalog:
        return self.aggregator.discover(timeout=self.timeout)

    def find_games(self, name: str) -> list[InstallRecord]:
        """Return records whose name contains ``name``, case-insensitively.

        Raises:
            NoMatchError: If nothing matches.
        """
        matches = self.aggregator.find(name, timeout=self.timeout)
        if not matches:
            raise NoMatchError(f"No games found matching '{name}'")
        return matches

    def launch(self, name: str) -> InstallRecord:
        """Launch the record whose name equals ``name`` case-insensitively.

        Returns:
            The launched record.

        Raises:
            NoMatchError: If no record has that name.
            LaunchError: If the record cannot be launched.
        """
        wanted = name.casefold()
        record = next((r for r in self.catalog() if r.name.casefold() == wanted), None)
        if record is None:
            raise NoMatchError(f"Game '{name}' not found")
        self.aggregator.launch(record)
        return record

    def discover_games(self) -> dict[str, Any]:
        """Full inventory as a JSON-ready dict. Never raises."""
        try:
            return catalog_to_dict(self.catalog())
        except Exception as exc:
            logger.warning("Discovery failed", exc_info=True)
            return {"error": f"Failed to discover games: {exc}"}

    def get_game_info(self, name: str) -> list[dict[str, Any]] | dict[str, Any]:
        """Details of every game whose name contains ``name``. Never raises."""
        try:
            matches = self.find_games(name)
        except NoMatchError as exc:
            return {"error": str(exc)}
        except Exception as exc:
            logger.warning("Game lookup failed", exc_info=True)
            return {"error": f"Failed to get game info: {exc}"}
        return [record_to_dict(record, DATETIME_FORMAT) for record in matches]

    def launch_game(self, name: str) -> dict[str, Any]:
        """Launch a game by exact (case-insensitive) name. Never raises."""
        try:
            record = self.launch(name)
        except GameScoutError as exc:
            return {"error": str(exc)}
        except Exception as exc:
            logger.warning("Launch failed", exc_info=True)
            return {"error": f"Failed to launch game: {exc}"}
        return {
            "success": True,
            "message": f"Launched '{record.name}' from {record.source.value}",
            "executable": str(record.executable),
        }
