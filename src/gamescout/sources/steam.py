"""Steam adapter.

Steam lists its library folders in ``steamapps/libraryfolders.vdf`` and
keeps one ``appmanifest_<appid>.acf`` per installed app next to the
``common`` directory that holds the game files. Both are Valve KeyValues
text files, parsed with the ``vdf`` library.

Two ``libraryfolders.vdf`` layouts exist in the wild::

    "libraryfolders" { "0" { "path" "C:\\\\Steam" ... } }   # current
    "LibraryFolders" { "1" "D:\\\\SteamLibrary" }           # legacy
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from gamescout.discovery.filesystem import (
    existing_directories,
    is_dir,
    list_subdirectories,
)
from gamescout.discovery.models import RawCandidate, Source
from gamescout.sources.base import ScanContext, SourceAdapter
from gamescout.usage.base import UsageExtractor
from gamescout.usage.steam import SteamUsage, get_ci, load_vdf

logger = logging.getLogger(__name__)

STEAM_REGISTRY_KEYS: tuple[tuple[str, str], ...] = (
    (r"HKLM\SOFTWARE\WOW6432Node\Valve\Steam", "InstallPath"),
    (r"HKLM\SOFTWARE\Valve\Steam", "InstallPath"),
    (r"HKCU\Software\Valve\Steam", "SteamPath"),
)

_MANIFEST_ID = re.compile(r"^appmanifest_(\d+)\.acf$", re.IGNORECASE)


@dataclass(frozen=True)
class AppManifest:
    """The fields of an ``appmanifest_*.acf`` the adapter needs."""

    app_id: str
    name: str
    install_dir: str


def read_manifests(steamapps: Path) -> list[AppManifest]:
    """Parse every app manifest in a library's ``steamapps`` folder."""
    manifests: list[AppManifest] = []
    try:
        files = sorted(steamapps.glob("appmanifest_*.acf"))
    except OSError:
        return manifests
    for path in files:
        match = _MANIFEST_ID.match(path.name)
        if match is None:
            continue
        data = load_vdf(path)
        if not data:
            continue
        state = get_ci(data, "AppState")
        if not isinstance(state, Mapping):
            continue
        manifests.append(AppManifest(
            app_id=str(get_ci(state, "appid") or match.group(1)),
            name=str(get_ci(state, "name") or "").strip(),
            install_dir=str(get_ci(state, "installdir") or "").strip(),
        ))
    return manifests


def library_paths(steam_root: Path) -> list[Path]:
    """Return library roots listed in ``libraryfolders.vdf``."""
    data = load_vdf(steam_root / "steamapps" / "libraryfolders.vdf")
    if not data:
        return []
    folders = get_ci(data, "libraryfolders")
    if not isinstance(folders, Mapping):
        return []
    paths: list[Path] = []
    for key, value in folders.items():
        if isinstance(value, Mapping):
            raw = get_ci(value, "path")
        elif key.isdigit():
            raw = value
        else:
            continue
        if raw:
            paths.append(Path(str(raw)))
    return paths


class SteamAdapter(SourceAdapter):
    """Games under every Steam library's ``steamapps/common`` folder."""

    source = Source.STEAM

    def steam_root(self, context: ScanContext) -> Path | None:
        """Locate the Steam client: registry first, then usual folders."""
        registry = context.env.registry
        for key_path, value_name in STEAM_REGISTRY_KEYS:
            value = registry.read_value(key_path, value_name)
            if value and is_dir(Path(value)):
                return Path(value)
        home = context.env.home
        fallbacks = context.env.under_program_dirs("Steam")[::-1] + [
            home / ".steam" / "steam",
            home / ".local" / "share" / "Steam",
        ]
        for path in fallbacks:
            if is_dir(path / "steamapps"):
                return path
        return None

    def libraries(self, steam_root: Path, context: ScanContext) -> list[Path]:
        """Return the ``steamapps`` folder of every known library."""
        roots = [steam_root, *library_paths(steam_root)]
        for extra in context.extra_steam_libraries:
            roots.append(extra.parent if extra.name.lower() == "steamapps" else extra)
        return existing_directories([root / "steamapps" for root in roots])

    def usage_extractor(self, context: ScanContext) -> UsageExtractor | None:
        root = self.steam_root(context)
        return SteamUsage(root) if root is not None else None

    def admit(self, candidate: RawCandidate) -> bool:
        if self.classifier.is_launcher_or_utility(candidate.install_path.name):
            return False
        return super().admit(candidate)

    def candidates(self, context: ScanContext) -> Iterator[RawCandidate]:
        root = self.steam_root(context)
        if root is None:
            logger.debug("Steam not found")
            return
        for steamapps in self.libraries(root, context):
            yield from self._library_candidates(steamapps)

    def _library_candidates(self, steamapps: Path) -> Iterator[RawCandidate]:
        by_dir: dict[str, AppManifest] = {}
        by_name: dict[str, AppManifest] = {}
        for manifest in read_manifests(steamapps):
            if manifest.install_dir:
                by_dir.setdefault(manifest.install_dir.lower(), manifest)
            if manifest.name:
                by_name.setdefault(manifest.name.lower(), manifest)

        for game_dir in list_subdirectories(steamapps / "common"):
            key = game_dir.name.lower()
            manifest = by_dir.get(key) or by_name.get(key)
            yield RawCandidate(
                name=manifest.name if manifest and manifest.name else game_dir.name,
                install_path=game_dir,
                source=self.source,
                app_id=manifest.app_id if manifest else None,
                require_executable=True,
            )
