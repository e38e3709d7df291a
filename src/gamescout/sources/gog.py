"""GOG Galaxy adapter.

GOG writes one registry key per installed game under ``GOG.com\\Games``
holding ``gameName``, ``path`` and ``exe``. Offline installers used
without Galaxy may leave no key, so the conventional install folders are
also searched; each game folder there carries a ``goggame-<id>.info``
JSON file naming the title.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator

from gamescout.discovery.filesystem import is_dir, list_subdirectories
from gamescout.discovery.models import RawCandidate, Source
from gamescout.sources.base import ScanContext, SourceAdapter
from gamescout.usage.base import UsageExtractor
from gamescout.usage.proxy import FileTimeProxy

logger = logging.getLogger(__name__)

GOG_GAME_KEYS: tuple[str, ...] = (
    r"HKLM\SOFTWARE\WOW6432Node\GOG.com\Games",
    r"HKLM\SOFTWARE\GOG.com\Games",
)


def read_info_title(game_dir: Path) -> str | None:
    """Return the ``name`` from the folder's ``goggame-*.info``, if any."""
    try:
        infos = sorted(game_dir.glob("goggame-*.info"))
    except OSError:
        return None
    for info in infos:
        try:
            data = json.loads(info.read_text(encoding="utf-8", errors="ignore"))
        except (OSError, ValueError):
            logger.debug("Unreadable GOG info file: %s", info, exc_info=True)
            continue
        if isinstance(data, dict) and data.get("name"):
            return str(data["name"]).strip()
    return None


class GogAdapter(SourceAdapter):
    """Games registered by GOG Galaxy, plus plain GOG install folders."""

    source = Source.GOG

    def usage_extractor(self, context: ScanContext) -> UsageExtractor | None:
        return FileTimeProxy(use_access_time=True)

    def candidates(self, context: ScanContext) -> Iterator[RawCandidate]:
        yield from self._registry_candidates(context)
        yield from self._directory_candidates(context)

    def _registry_candidates(self, context: ScanContext) -> Iterator[RawCandidate]:
        registry = context.env.registry
        for games_key in GOG_GAME_KEYS:
            subkeys = registry.subkeys(games_key)
            if not subkeys:
                continue
            for sub_name in subkeys:
                full = f"{games_key}\\{sub_name}"
                name = (registry.read_value(full, "gameName") or "").strip()
                path = (registry.read_value(full, "path") or "").strip()
                if not name or not path or not is_dir(Path(path)):
                    continue
                exe = (registry.read_value(full, "exe") or "").strip()
                install_path = Path(path)
                yield RawCandidate(
                    name=name,
                    install_path=install_path,
                    source=self.source,
                    executable=install_path / exe if exe else None,
                    app_id=sub_name,
                )
            # The 32-bit view mirrors the native one; read only the first.
            return

    def _directory_candidates(self, context: ScanContext) -> Iterator[RawCandidate]:
        env = context.env
        roots = []
        if env.program_files_x86 is not None:
            roots.append(env.program_files_x86 / "GOG Galaxy" / "Games")
        if env.program_files is not None:
            roots.append(env.program_files / "GOG Galaxy" / "Games")
        roots.extend(env.under_drives("GOG Games"))

        for root in roots:
            for game_dir in list_subdirectories(root):
                if self.classifier.is_non_game_directory(game_dir.name):
                    continue
                yield RawCandidate(
                    name=read_info_title(game_dir) or game_dir.name,
                    install_path=game_dir,
                    source=self.source,
                )
