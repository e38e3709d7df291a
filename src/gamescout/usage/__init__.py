"""Best-effort usage statistics for discovered installs.

Each extractor mines one vendor's data (Steam's VDF config store, file
times, loosely formatted text files) and returns a ``UsageStats``. None
of them ever raise.

Public API::

    from gamescout.usage import SteamUsage

    stats = SteamUsage(steam_root).extract(candidate)
    print(stats.hours, stats.last_active)
"""

from __future__ import annotations

from gamescout.usage.base import ChainedUsage, UsageExtractor
from gamescout.usage.heuristics import (
    DEFAULT_THRESHOLDS,
    UnitThresholds,
    normalize_hours,
    parse_activity_date,
)
from gamescout.usage.proxy import FileTimeProxy
from gamescout.usage.steam import SteamUsage
from gamescout.usage.text_scan import ScanLimits, TextHeuristicUsage

__all__ = [
    "ChainedUsage",
    "DEFAULT_THRESHOLDS",
    "FileTimeProxy",
    "ScanLimits",
    "SteamUsage",
    "TextHeuristicUsage",
    "UnitThresholds",
    "UsageExtractor",
    "normalize_hours",
    "parse_activity_date",
]
