"""Ubisoft Connect adapter.

Games live under the launcher's ``games`` folder unless the user picked
another library, in which case only the Uninstall entry (published by
Ubisoft) knows where they are. Registry entries are read first so that
their display names win over bare folder names.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from gamescout.discovery.filesystem import existing_directories, is_dir, list_subdirectories
from gamescout.discovery.models import RawCandidate, Source
from gamescout.discovery.registry import iter_uninstall_entries
from gamescout.sources.base import ScanContext, SourceAdapter
from gamescout.usage.base import ChainedUsage, UsageExtractor
from gamescout.usage.proxy import FileTimeProxy
from gamescout.usage.text_scan import TextHeuristicUsage

logger = logging.getLogger(__name__)

UBISOFT_KEYS: tuple[str, ...] = (
    r"HKLM\SOFTWARE\WOW6432Node\Ubisoft\Launcher",
    r"HKLM\SOFTWARE\Ubisoft\Launcher",
)

LAUNCHER_DIR = ("Ubisoft", "Ubisoft Game Launcher")


class UbisoftAdapter(SourceAdapter):
    """Ubisoft Connect installs from the registry and the games folder."""

    source = Source.UBISOFT

    def games_dirs(self, context: ScanContext) -> list[Path]:
        env = context.env
        paths: list[Path] = []
        registered = env.registry.first_value(UBISOFT_KEYS, "InstallDir")
        if registered:
            paths.append(Path(registered) / "games")
        paths.extend(
            root.joinpath(*LAUNCHER_DIR, "games")
            for root in reversed(env.program_dirs())
        )
        return existing_directories(paths)

    def data_dirs(self, context: ScanContext) -> list[Path]:
        """Launcher data folders mined by the text usage heuristic."""
        local = context.env.local_app_data
        if local is None:
            return []
        return [local / "Ubisoft Game Launcher", local / "Ubisoft"]

    def usage_extractor(self, context: ScanContext) -> UsageExtractor | None:
        return ChainedUsage(
            TextHeuristicUsage(
                self.data_dirs(context), context.thresholds, context.scan_limits,
                cancel=context.cancel,
            ),
            FileTimeProxy(use_access_time=True),
        )

    def dedup_key(self, candidate: RawCandidate) -> str | None:
        return candidate.name.lower()

    def candidates(self, context: ScanContext) -> Iterator[RawCandidate]:
        for entry in iter_uninstall_entries(context.env.registry):
            if "ubisoft" not in entry.publisher.lower():
                continue
            if not entry.install_location or not is_dir(Path(entry.install_location)):
                continue
            yield RawCandidate(
                name=entry.display_name,
                install_path=Path(entry.install_location),
                source=self.source,
            )

        for games_dir in self.games_dirs(context):
            for game_dir in list_subdirectories(games_dir):
                name = game_dir.name
                if self.classifier.is_non_game_directory(name):
                    continue
                yield RawCandidate(name=name, install_path=game_dir, source=self.source)
