"""Epic Games Launcher adapter.

The launcher writes one JSON manifest per install to
``%ProgramData%\\Epic\\EpicGamesLauncher\\Data\\Manifests\\*.item``.
Add-ons and DLC get their own manifests pointing into the parent game's
folder, so auxiliary content is filtered out by name.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator

from gamescout.discovery.filesystem import is_dir
from gamescout.discovery.models import RawCandidate, Source
from gamescout.sources.base import ScanContext, SourceAdapter
from gamescout.usage.base import UsageExtractor
from gamescout.usage.proxy import FileTimeProxy

logger = logging.getLogger(__name__)

MANIFEST_DIR = ("Epic", "EpicGamesLauncher", "Data", "Manifests")


class EpicAdapter(SourceAdapter):
    """Installs listed in Epic's ``*.item`` manifests."""

    source = Source.EPIC

    def manifest_dir(self, context: ScanContext) -> Path | None:
        program_data = context.env.program_data
        if program_data is None:
            return None
        path = program_data.joinpath(*MANIFEST_DIR)
        return path if is_dir(path) else None

    def usage_extractor(self, context: ScanContext) -> UsageExtractor | None:
        return FileTimeProxy(use_access_time=False)

    def candidates(self, context: ScanContext) -> Iterator[RawCandidate]:
        directory = self.manifest_dir(context)
        if directory is None:
            logger.debug("Epic manifests not found")
            return
        for manifest in sorted(directory.glob("*.item")):
            candidate = self._read_manifest(manifest)
            if candidate is not None:
                yield candidate

    def _read_manifest(self, manifest: Path) -> RawCandidate | None:
        try:
            data = json.loads(manifest.read_text(encoding="utf-8", errors="ignore"))
        except (OSError, ValueError):
            logger.warning("Unreadable Epic manifest: %s", manifest, exc_info=True)
            return None
        if not isinstance(data, dict):
            return None

        name = str(data.get("DisplayName") or "").strip()
        location = str(data.get("InstallLocation") or "").strip()
        if not name or not location:
            return None
        install_path = Path(location)
        if not is_dir(install_path):
            return None
        if self.classifier.is_auxiliary_content(name):
            logger.debug("Skipping Epic add-on %s", name)
            return None

        launch = str(data.get("LaunchExecutable") or "").strip()
        return RawCandidate(
            name=name,
            install_path=install_path,
            source=self.source,
            executable=install_path / launch if launch else None,
            app_id=str(data.get("AppName") or "") or None,
        )
