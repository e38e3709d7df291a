"""File-time proxy for sources without a usage store.

Epic and GOG keep no readable play history, so the main executable's
modification or access time stands in for "last active". A file time
within a day of the install directory's creation is most likely the
install itself, so it is ignored. Hours of use stay unknown.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from itertools import islice
from pathlib import Path

from gamescout.discovery.executables import is_excluded_executable
from gamescout.discovery.filesystem import creation_time
from gamescout.discovery.models import EMPTY_USAGE, RawCandidate, UsageStats
from gamescout.usage.base import UsageExtractor

INSTALL_GRACE = timedelta(days=1)
MAX_EXECUTABLES_CHECKED = 200


def _first_plain_executable(install_path: Path, limit: int = MAX_EXECUTABLES_CHECKED) -> Path | None:
    """First ``.exe`` below ``install_path`` that is not an uninstaller."""
    if not install_path.is_dir():
        return None
    for exe in islice(install_path.rglob("*.exe"), limit):
        if not is_excluded_executable(exe) and "setup" not in exe.name.lower():
            return exe
    return None


class FileTimeProxy(UsageExtractor):
    """Derive ``last_active`` from an executable's file times.

    Attributes:
        use_access_time: Read ``st_atime`` instead of ``st_mtime``.
    """

    def __init__(self, use_access_time: bool = False) -> None:
        self.use_access_time = use_access_time

    def _extract(self, candidate: RawCandidate) -> UsageStats:
        exe = candidate.executable
        if exe is None or not exe.is_file():
            exe = _first_plain_executable(candidate.install_path)
        if exe is None:
            return EMPTY_USAGE

        installed = creation_time(candidate.install_path)
        if installed is None:
            return EMPTY_USAGE

        stat = exe.stat()
        stamp = stat.st_atime if self.use_access_time else stat.st_mtime
        touched = datetime.fromtimestamp(stamp)
        if touched > installed + INSTALL_GRACE:
            return UsageStats(last_active=touched)
        return EMPTY_USAGE
