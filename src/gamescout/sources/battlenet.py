"""Battle.net adapter.

Blizzard titles register their install folder under a per-title key.
The keys outlive uninstalls of the launcher, so titles are only reported
when a Battle.net installation is present.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from gamescout.discovery.filesystem import is_dir
from gamescout.discovery.models import RawCandidate, Source
from gamescout.sources.base import ScanContext, SourceAdapter

logger = logging.getLogger(__name__)

BLIZZARD_ROOT = r"HKLM\SOFTWARE\WOW6432Node\Blizzard Entertainment"

BLIZZARD_TITLES: tuple[str, ...] = (
    "World of Warcraft",
    "Overwatch",
    "Diablo IV",
    "Diablo III",
    "Diablo II Resurrected",
    "StarCraft II",
    "Hearthstone",
    "Call of Duty",
)


class BattleNetAdapter(SourceAdapter):
    """Blizzard titles registered next to a Battle.net installation."""

    source = Source.BATTLENET

    def launcher_dir(self, context: ScanContext) -> Path | None:
        env = context.env
        registered = env.registry.read_value(f"{BLIZZARD_ROOT}\\Battle.net", "InstallPath")
        if registered and is_dir(Path(registered)):
            return Path(registered)
        for path in reversed(env.under_program_dirs("Battle.net")):
            if is_dir(path):
                return path
        return None

    def candidates(self, context: ScanContext) -> Iterator[RawCandidate]:
        if self.launcher_dir(context) is None:
            logger.debug("Battle.net not installed")
            return
        registry = context.env.registry
        for title in BLIZZARD_TITLES:
            location = registry.read_value(f"{BLIZZARD_ROOT}\\{title}", "InstallPath")
            if not location:
                continue
            install_path = Path(location.strip().rstrip("\\/"))
            if not is_dir(install_path):
                continue
            yield RawCandidate(
                name=install_path.name or title,
                install_path=install_path,
                source=self.source,
            )
