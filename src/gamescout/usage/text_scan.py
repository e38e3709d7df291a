"""Usage mining from loosely structured text files.

Ubisoft Connect keeps no documented play history. Its launcher data
directory and the games' own save and log files do, however, often carry
``playtime``-like counters and ``last_played``-like dates. This extractor
greps them out with two regular expressions and runs the raw values
through the unit and date heuristics.

Results are estimates: the unit of a time-played number is guessed from
its magnitude, and the first matching file wins.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import re
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterator

from gamescout.discovery.models import EMPTY_USAGE, RawCandidate, UsageStats
from gamescout.usage.base import UsageExtractor
from gamescout.usage.heuristics import (
    DEFAULT_THRESHOLDS,
    UnitThresholds,
    normalize_hours,
    parse_activity_date,
)

logger = logging.getLogger(__name__)

PLAYTIME_PATTERN = re.compile(
    r"(?i)(?:playtime|time_played|total_time|hours_played)[\s\"':=]*(\d+\.?\d*)"
)
DATE_PATTERN = re.compile(
    r"(?i)(?:last_played|lastplayed|date)[\s\"':=]*[\"']?(\d{4}-\d{2}-\d{2}|\d{10,13})[\"']?"
)

CONFIG_PATTERNS: tuple[str, ...] = ("*.json", "*.cfg", "*.ini")
SAVE_PATTERNS: tuple[str, ...] = ("*.sav", "*.save", "*.log", "*.txt")


@dataclass(frozen=True)
class ScanLimits:
    """Bounds on how much text the extractor reads per candidate.

    Attributes:
        max_config_files: Config files examined in the launcher data dir.
        max_save_files: Save/log files examined in the install dir.
        max_file_bytes: Files larger than this are skipped unread.
        max_entries: Directory entries visited per tree walk before the
            walk gives up.
    """

    max_config_files: int = 50
    max_save_files: int = 10
    max_file_bytes: int = 1024 * 1024
    max_entries: int = 20000


def scan_text(text: str, thresholds: UnitThresholds = DEFAULT_THRESHOLDS) -> UsageStats:
    """Extract the first playtime and date found in ``text``."""
    hours: float | None = None
    last_active: datetime | None = None

    match = PLAYTIME_PATTERN.search(text)
    if match:
        try:
            hours = normalize_hours(float(match.group(1)), thresholds)
        except ValueError:
            hours = None

    match = DATE_PATTERN.search(text)
    if match:
        last_active = parse_activity_date(match.group(1))

    return UsageStats(hours=hours, last_active=last_active)


class TextHeuristicUsage(UsageExtractor):
    """Grep playtime and last-played values out of config and save files.

    Attributes:
        data_dirs: Launcher data directories searched for config files
            mentioning the title. The first one that exists is used.
        thresholds: Unit thresholds for ``normalize_hours``.
        limits: Per-candidate read and walk bounds.
        cancel: Optional run-wide event; a set event stops tree walks.
    """

    def __init__(
        self,
        data_dirs: list[Path],
        thresholds: UnitThresholds = DEFAULT_THRESHOLDS,
        limits: ScanLimits | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        self.data_dirs = data_dirs
        self.thresholds = thresholds
        self.limits = limits or ScanLimits()
        self.cancel = cancel

    def _extract(self, candidate: RawCandidate) -> UsageStats:
        hours: float | None = None
        last_active: datetime | None = None

        for text in self._texts(candidate):
            stats = scan_text(text, self.thresholds)
            if hours is None:
                hours = stats.hours
            if last_active is None:
                last_active = stats.last_active
            if hours is not None and last_active is not None:
                break

        if hours is None and last_active is None:
            return EMPTY_USAGE
        return UsageStats(hours=hours, last_active=last_active)

    def _texts(self, candidate: RawCandidate) -> Iterator[str]:
        """Yield file contents worth scanning, config files first."""
        title = candidate.name.lower()
        data_dir = self._data_dir()
        if data_dir is not None:
            for path in self._bounded(data_dir, CONFIG_PATTERNS, self.limits.max_config_files):
                text = self._read(path)
                if text is not None and title in text.lower():
                    yield text

        for path in self._bounded(candidate.install_path, SAVE_PATTERNS, self.limits.max_save_files):
            text = self._read(path)
            if text is not None:
                yield text

    def _data_dir(self) -> Path | None:
        for directory in self.data_dirs:
            if directory.is_dir():
                return directory
        return None

    def _bounded(self, root: Path, patterns: tuple[str, ...], limit: int) -> list[Path]:
        """Collect up to ``limit`` files under ``root`` matching ``patterns``.

        One lazy walk serves every pattern. Directories and files are
        visited in name order, and the walk stops at ``limit`` matches,
        after ``max_entries`` entries, or when the run is cancelled.
        """
        found: list[Path] = []
        if limit <= 0 or not root.is_dir():
            return found
        visited = 0
        for current, dirs, files in os.walk(root):
            if self.cancel is not None and self.cancel.is_set():
                break
            dirs.sort()
            visited += len(dirs) + len(files)
            for name in sorted(files):
                lowered = name.lower()
                if any(fnmatch.fnmatchcase(lowered, pattern) for pattern in patterns):
                    found.append(Path(current) / name)
                    if len(found) >= limit:
                        return found
            if visited >= self.limits.max_entries:
                logger.debug("Stopped walking %s after %d entries", root, visited)
                break
        return found

    def _read(self, path: Path) -> str | None:
        try:
            if path.stat().st_size > self.limits.max_file_bytes:
                return None
            return path.read_text(encoding="utf-8", errors="ignore")
        except OSError:
            logger.debug("Cannot read %s", path, exc_info=True)
            return None
