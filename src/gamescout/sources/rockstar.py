"""Rockstar Games Launcher adapter.

Rockstar installs every title as a sibling folder under one root, next
to the launcher itself and its social club components.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from gamescout.discovery.filesystem import existing_directories, list_subdirectories
from gamescout.discovery.models import RawCandidate, Source
from gamescout.sources.base import ScanContext, SourceAdapter

logger = logging.getLogger(__name__)

ROCKSTAR_KEYS: tuple[str, ...] = (
    r"HKLM\SOFTWARE\WOW6432Node\Rockstar Games\Launcher",
    r"HKLM\SOFTWARE\Rockstar Games\Launcher",
)


class RockstarAdapter(SourceAdapter):
    """Game folders under the Rockstar Games root(s)."""

    source = Source.ROCKSTAR

    def roots(self, context: ScanContext) -> list[Path]:
        env = context.env
        paths: list[Path] = []
        registered = env.registry.first_value(ROCKSTAR_KEYS, "InstallFolder")
        if registered:
            paths.append(Path(registered))
        paths.extend(env.under_program_dirs("Rockstar Games"))
        paths.extend(env.under_drives("Games", "Rockstar Games"))
        return existing_directories(paths)

    def candidates(self, context: ScanContext) -> Iterator[RawCandidate]:
        roots = self.roots(context)
        if not roots:
            logger.debug("Rockstar Games root not found")
        for root in roots:
            for game_dir in list_subdirectories(root):
                if self.classifier.is_non_game_directory(game_dir.name):
                    continue
                yield RawCandidate(
                    name=game_dir.name,
                    install_path=game_dir,
                    source=self.source,
                )
