"""EA app / Origin adapter.

EA titles install under a handful of conventional roots that differ by
launcher generation (``Origin Games``, ``EA Games``, ``Electronic
Arts``). Titles installed elsewhere are found through Uninstall entries
published by Electronic Arts.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from gamescout.discovery.filesystem import existing_directories, is_dir, list_subdirectories
from gamescout.discovery.models import RawCandidate, Source
from gamescout.discovery.registry import iter_uninstall_entries
from gamescout.sources.base import ScanContext, SourceAdapter

logger = logging.getLogger(__name__)

EA_ROOT_NAMES: tuple[str, ...] = ("Electronic Arts", "Origin Games", "EA Games")


class EAAdapter(SourceAdapter):
    """Game folders under EA roots, plus EA-published Uninstall entries."""

    source = Source.EA

    def roots(self, context: ScanContext) -> list[Path]:
        paths: list[Path] = []
        for root_name in EA_ROOT_NAMES:
            paths.extend(context.env.under_program_dirs(root_name))
        return existing_directories(paths)

    def dedup_key(self, candidate: RawCandidate) -> str | None:
        return candidate.name.lower()

    def candidates(self, context: ScanContext) -> Iterator[RawCandidate]:
        for root in self.roots(context):
            for game_dir in list_subdirectories(root):
                if self.classifier.is_non_game_directory(game_dir.name):
                    continue
                yield RawCandidate(
                    name=game_dir.name, install_path=game_dir, source=self.source,
                )

        for entry in iter_uninstall_entries(context.env.registry):
            if "electronic arts" not in entry.publisher.lower():
                continue
            if self.classifier.is_non_game_directory(entry.display_name):
                continue
            if not entry.install_location or not is_dir(Path(entry.install_location)):
                continue
            yield RawCandidate(
                name=entry.display_name,
                install_path=Path(entry.install_location),
                source=self.source,
            )
