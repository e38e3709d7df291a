"""Xbox app / Microsoft Store adapter.

Store games are the hardest to see from outside: the package folder is
ACL-protected and most registrations carry no usable install location.
Three methods are tried in order and their results merged. A name is
taken by the first candidate that becomes a record:

    1. Registry: Appx and Uninstall entries published by Microsoft or
       Xbox (or whose key starts with ``Microsoft.``) that the strict
       classifier accepts.
    2. ``<ProgramFiles>\\WindowsApps\\*\\AppxManifest.xml`` display names.
    3. The user-selectable roots ``ModifiableWindowsApps`` and
       ``<drive>\\XboxGames``.

Methods 2 and 3 see every framework package and DLC folder too, so their
candidates must have an executable and more than 50 MB on disk.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

from gamescout.discovery.filesystem import is_dir, list_subdirectories
from gamescout.discovery.models import RawCandidate, Source
from gamescout.discovery.registry import UNINSTALL_KEYS, iter_uninstall_entries
from gamescout.sources.base import ScanContext, SourceAdapter

logger = logging.getLogger(__name__)

APPX_KEYS: tuple[str, ...] = (
    r"HKLM\SOFTWARE\Microsoft\Windows\CurrentVersion\Appx\AppxAllUserStore\Applications",
    r"HKLM\SOFTWARE\Classes\Local Settings\Software\Microsoft\Windows\CurrentVersion\AppxAppType",
) + UNINSTALL_KEYS

MIN_PACKAGE_BYTES = 50 * 1024 * 1024

_DISPLAY_NAME_ATTR = re.compile(r'DisplayName="([^"]+)"')
_DISPLAY_NAME_ELEM = re.compile(r"<DisplayName>([^<]+)</DisplayName>")


def manifest_display_name(manifest: Path) -> str | None:
    """Read the package display name from an ``AppxManifest.xml``.

    Resource references (``ms-resource:...``) are not resolvable without
    the package's resource index and are treated as missing.
    """
    try:
        content = manifest.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return None
    for pattern in (_DISPLAY_NAME_ATTR, _DISPLAY_NAME_ELEM):
        match = pattern.search(content)
        if match:
            name = match.group(1).strip()
            if name and not name.lower().startswith("ms-resource:"):
                return name
    return None


class XboxAdapter(SourceAdapter):
    """Microsoft Store and Xbox app installs."""

    source = Source.XBOX
    default_accept = False

    def dedup_key(self, candidate: RawCandidate) -> str | None:
        return candidate.name.lower()

    def candidates(self, context: ScanContext) -> Iterator[RawCandidate]:
        yield from self._registry_candidates(context)
        yield from self._windows_apps_candidates(context)
        yield from self._alternative_root_candidates(context)

    def _registry_candidates(self, context: ScanContext) -> Iterator[RawCandidate]:
        for entry in iter_uninstall_entries(context.env.registry, APPX_KEYS):
            publisher = entry.publisher.lower()
            if not publisher:
                continue
            if not (
                "microsoft" in publisher
                or "xbox" in publisher
                or entry.key_name.startswith("Microsoft.")
            ):
                continue
            if not self.classifier.accept(entry.display_name):
                continue
            if not entry.install_location or not is_dir(Path(entry.install_location)):
                continue
            yield RawCandidate(
                name=entry.display_name,
                install_path=Path(entry.install_location),
                source=self.source,
            )

    def _windows_apps_candidates(self, context: ScanContext) -> Iterator[RawCandidate]:
        program_files = context.env.program_files
        if program_files is None:
            return
        for package_dir in list_subdirectories(program_files / "WindowsApps"):
            if "Microsoft." in package_dir.name and not self.classifier.accept(package_dir.name):
                continue
            name = manifest_display_name(package_dir / "AppxManifest.xml")
            if name is None:
                continue
            if not self.classifier.is_game(name):
                continue
            yield RawCandidate(
                name=name,
                install_path=package_dir,
                source=self.source,
                require_executable=True,
                min_size_bytes=MIN_PACKAGE_BYTES,
            )

    def _alternative_root_candidates(self, context: ScanContext) -> Iterator[RawCandidate]:
        roots = context.env.under_program_dirs("ModifiableWindowsApps")
        roots.extend(context.env.under_drives("XboxGames"))
        for root in roots:
            for game_dir in list_subdirectories(root):
                name = game_dir.name
                if self.classifier.is_non_game_directory(name):
                    continue
                if self.classifier.is_auxiliary_content(name):
                    continue
                yield RawCandidate(
                    name=name,
                    install_path=game_dir,
                    source=self.source,
                    require_executable=True,
                    min_size_bytes=MIN_PACKAGE_BYTES,
                )
