"""Generic installed-programs fallback.

Every Uninstall entry with an existing install location is a candidate.
Most of them are not games, so the classifier runs with
``default_accept=False``: an entry needs a game keyword or a known game
publisher to be reported. Disabled by default in configuration.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from gamescout.discovery.filesystem import is_dir
from gamescout.discovery.models import RawCandidate, Source
from gamescout.discovery.registry import iter_uninstall_entries
from gamescout.sources.base import ScanContext, SourceAdapter

logger = logging.getLogger(__name__)


class InstalledProgramsAdapter(SourceAdapter):
    """Uninstall-registry entries that look like games."""

    source = Source.INSTALLED_PROGRAMS
    default_accept = False

    def candidates(self, context: ScanContext) -> Iterator[RawCandidate]:
        for entry in iter_uninstall_entries(context.env.registry):
            if not self.classifier.is_game(entry.display_name, entry.publisher or None):
                continue
            if not entry.install_location or not is_dir(Path(entry.install_location)):
                continue
            yield RawCandidate(
                name=entry.display_name,
                install_path=Path(entry.install_location),
                source=self.source,
            )
